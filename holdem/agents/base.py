"""
Base Agent Interface for the hold'em engine.

An agent is the decision collaborator the table calls out to whenever a
seated player has to act. The call is synchronous: the round waits for
``act`` to return before it advances. A terminal prompt, a remote client or
a scripted test driver can all sit behind this interface.

Usage:
    class MyAgent(BaseAgent):
        def act(self, game_state, legal_actions):
            return {"action": "CALL", "amount": 0}
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional


class BaseAgent(ABC):
    """
    Abstract base class for decision providers.

    Attributes:
        name: Human-readable name used in logs
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.__class__.__name__

    def observe(self, game_state: Dict[str, Any]) -> None:
        """
        Observe the current round state before acting.

        Args:
            game_state: Dictionary containing:
                - public_info: Public round information
                - private_info: Private information for this seat
                    - hand: Hole cards
                    - available_moves: List of legal action types
                    - chips_to_call: Amount needed to call
        """
        pass

    @abstractmethod
    def act(
        self,
        game_state: Dict[str, Any],
        legal_actions: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Choose an action given the current round state.

        Args:
            game_state: Current round state dictionary
            legal_actions: List of legal action dicts, each containing:
                - type: Action type (FOLD, CHECK, CALL, BET, RAISE, ALL_IN)
                - amount: Required amount (for CALL and ALL_IN)
                - min/max: Valid total range (for BET/RAISE)

        Returns:
            Action dictionary with:
                - action: Action type string
                - amount: Total amount for BET/RAISE (optional, default 0)

        Example:
            return {"action": "RAISE", "amount": 100}
        """

    def on_invalid_action(self, message: str) -> None:
        """Called when the previous decision was rejected; ``act`` is asked again."""
        pass

    def on_round_end(self, result: Any) -> None:
        """
        Called when a round ends.

        Args:
            result: The ``RoundResult`` of the finished round
        """
        pass

    def decide(self, game_state: Dict[str, Any], legal_actions: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Convenience method that combines observe and act."""
        self.observe(game_state)
        return self.act(game_state, legal_actions)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"
