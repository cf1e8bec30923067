"""
Scripted Agent Implementation.

Replays a fixed queue of decisions, then falls back to a default policy.
Used to drive rounds deterministically from tests or recorded input.
"""

from collections import deque
from typing import Dict, Iterable, List, Any, Optional

from holdem.agents.base import BaseAgent


class ScriptedAgent(BaseAgent):
    """
    An agent that plays queued actions in order.

    Once the queue is empty it plays ``fallback``:
    - "check_call": check if possible, otherwise call
    - "check_fold": check if possible, otherwise fold
    - "all_in": move all-in whenever allowed, otherwise call
    """

    FALLBACKS = ("check_call", "check_fold", "all_in")

    def __init__(
        self,
        actions: Optional[Iterable[Dict[str, Any]]] = None,
        fallback: str = "check_call",
        name: Optional[str] = None,
    ):
        super().__init__(name)
        if fallback not in self.FALLBACKS:
            raise ValueError(f"Unknown fallback {fallback!r}, expected one of {self.FALLBACKS}")
        self.actions = deque(actions or [])
        self.fallback = fallback
        self.rejections: List[str] = []
        self.results: List[Any] = []

    def queue(self, action: str, amount: int = 0) -> "ScriptedAgent":
        self.actions.append({"action": action, "amount": amount})
        return self

    def act(
        self,
        game_state: Dict[str, Any],
        legal_actions: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        if self.actions:
            return dict(self.actions.popleft())
        return self._fallback_action(legal_actions)

    def _fallback_action(self, legal_actions: List[Dict[str, Any]]) -> Dict[str, Any]:
        types = {a["type"] for a in legal_actions}

        if self.fallback == "all_in" and "ALL_IN" in types:
            return {"action": "ALL_IN"}
        if "CHECK" in types:
            return {"action": "CHECK"}
        if self.fallback == "check_fold":
            return {"action": "FOLD"}
        if "CALL" in types:
            return {"action": "CALL"}
        return {"action": "FOLD"}

    def on_invalid_action(self, message: str) -> None:
        self.rejections.append(message)

    def on_round_end(self, result: Any) -> None:
        self.results.append(result)
