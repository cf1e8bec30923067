"""
Texas Hold'em table and tournament controller.

A ``Table`` seats players (with their agents), plays single rounds on
request and runs a full tournament: rounds repeat with the dealer button
moving clockwise, and players are removed once they run out of chips, until
one player holds every chip.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
import logging
import random

from pydantic import ValidationError

from holdem.agents.base import BaseAgent
from holdem.core.errors import (
    InvalidInputError, RuleViolation, UnsupportedBettingStructureError,
)
from holdem.core.game import ActionResult, Round, RoundResult
from holdem.core.player import Player
from holdem.core.rules import ActionType
from holdem.core.schemas import ActionRequest, TableConfig


logger = logging.getLogger(__name__)


@dataclass
class TournamentResult:
    """Outcome of ``Table.play_tournament``."""
    success: bool
    message: str
    winner: Optional[Player] = None
    rounds_played: int = 0
    eliminated: List[str] = field(default_factory=list)
    error: Optional[RuleViolation] = None


class Table:
    """
    A no-limit Texas Hold'em table.

    Usage:
        table = Table(min_buy_in=100, max_players=6, small_blind=1, big_blind=3)
        table.add_player(Player("Alice", 200), agent=alice_agent)
        table.add_player(Player("Bob", 200), agent=bob_agent)
        result = table.play_tournament()
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        rng: Optional[random.Random] = None,
        **kwargs,
    ):
        """
        Initialize a table.

        Args:
            config: Table configuration; built from ``kwargs`` when omitted
                (min_buy_in, max_players, small_blind, big_blind, limit)
            rng: Randomness source shared by every round's deck

        Raises:
            pydantic.ValidationError: If the configuration is invalid
            UnsupportedBettingStructureError: If fixed-limit is requested
        """
        if config is None:
            config = TableConfig(**kwargs)
        elif kwargs:
            raise InvalidInputError("Pass either a TableConfig or keyword settings, not both")
        if config.limit:
            raise UnsupportedBettingStructureError("Fixed-limit betting is not implemented")

        self.config = config
        self.players: List[Player] = []
        self.agents: Dict[str, BaseAgent] = {}
        self.dealer_seat_index = 0
        self.rounds_played = 0
        self.current_round: Optional[Round] = None
        self._rng = rng if rng is not None else random.Random()

    @property
    def num_players(self) -> int:
        return len(self.players)

    def new_player(self, name: str, chips: int = 0) -> Player:
        """Create a player (not yet seated)."""
        return Player(name=name, chips=chips)

    def get_player(self, name: str) -> Optional[Player]:
        for player in self.players:
            if player.name == name:
                return player
        return None

    def add_player(self, player: Player, agent: Optional[BaseAgent] = None) -> ActionResult:
        """
        Seat a player at the table.

        Returns:
            ActionResult; on failure the seat list is unchanged
        """
        if len(self.players) >= self.config.max_players:
            return ActionResult(
                False,
                f"Unable to join the table. It is already at max capacity ({self.config.max_players}).",
                error=RuleViolation.TABLE_FULL,
            )

        if player.chips < self.config.min_buy_in:
            missing = self.config.min_buy_in - player.chips
            logger.info(f"{player.name} cannot buy in with {player.chips} chips")
            return ActionResult(
                False,
                f"{player.name} does not have enough chips to play at this table. "
                f"Current: {player.chips}, required: {self.config.min_buy_in}, "
                f"additional needed: {missing}.",
                error=RuleViolation.INSUFFICIENT_FUNDS,
            )

        if self.get_player(player.name) is not None:
            return ActionResult(
                False,
                f"A player named {player.name} is already seated",
                error=RuleViolation.DUPLICATE_PLAYER,
            )

        self.players.append(player)
        if agent is not None:
            self.agents[player.name] = agent
        logger.info(f"{player.name} bought in with {player.chips} chips")
        return ActionResult(True, f"{player.name} joined the table")

    def set_agent(self, name: str, agent: BaseAgent) -> None:
        if self.get_player(name) is None:
            raise InvalidInputError(f"No player named {name} at the table")
        self.agents[name] = agent

    def remove_player(self, name: str) -> Optional[Player]:
        """Remove a player from the table, returning it, or None if not seated."""
        player = self.get_player(name)
        if player is None:
            logger.warning(f"Unable to remove {name}, not seated at the table")
            return None

        seat = self.players.index(player)
        self.players.pop(seat)
        self.agents.pop(name, None)
        if self.players and seat < self.dealer_seat_index:
            self.dealer_seat_index -= 1
        if self.players:
            self.dealer_seat_index %= len(self.players)
        else:
            self.dealer_seat_index = 0
        return player

    def remove_losers(self) -> List[str]:
        """Remove every player without chips; returns their names."""
        losers = [p.name for p in self.players if p.chips == 0]
        for name in losers:
            self.remove_player(name)
            logger.info(f"{name} is out of chips and was removed from the game")
        return losers

    def get_leaderboard(self) -> List[Player]:
        """Seated players from the highest to lowest chip count."""
        return sorted(self.players, key=lambda p: p.chips, reverse=True)

    def _log_leaderboard(self) -> None:
        for player in self.get_leaderboard():
            logger.info(f"{player.name}: {player.chips} chip{'' if player.chips == 1 else 's'}")

    def play_round(self, dealer_seat_index: int) -> RoundResult:
        """
        Play one complete round with the button on ``dealer_seat_index``.

        Every decision is requested synchronously from the acting player's
        agent. Players left without chips are removed once the round is over.

        Raises:
            InvalidInputError: If the dealer seat is out of range or a seated
                player has no agent
        """
        if len(self.players) < 2:
            return RoundResult(False, "At least 2 players are needed to play a round",
                               error=RuleViolation.NOT_ENOUGH_PLAYERS)
        if not 0 <= dealer_seat_index < len(self.players):
            raise InvalidInputError(
                f"Dealer seat {dealer_seat_index} out of range for {len(self.players)} players"
            )
        missing = [p.name for p in self.players if p.name not in self.agents]
        if missing:
            raise InvalidInputError(f"No agent registered for: {', '.join(missing)}")

        self.dealer_seat_index = dealer_seat_index
        rnd = Round(
            self.players,
            dealer_seat_index,
            self.config.small_blind,
            self.config.big_blind,
            rng=self._rng,
            limit=self.config.limit,
        )
        self.current_round = rnd
        rnd.start()

        while rnd.is_running():
            seat = rnd.current_player_index
            self._play_turn(rnd, seat)

        result = rnd.result()
        for agent in self.agents.values():
            agent.on_round_end(result)

        self.rounds_played += 1
        self.current_round = None
        result.eliminated = self.remove_losers()
        return result

    def _play_turn(self, rnd: Round, seat: int) -> ActionResult:
        """Ask the seat's agent for a decision, retrying rejected ones, then fold."""
        player = self.players[seat]
        agent = self.agents[player.name]

        for _ in range(self.config.max_invalid_actions):
            request, message = self._request_decision(rnd, seat, agent)
            if request is not None:
                result = rnd.take_action(request.action, request.amount or 0, seat=seat)
                if result.success:
                    return result
                message = result.message

            logger.warning(f"Rejected decision from {player.name}: {message}")
            agent.on_invalid_action(message)

        logger.warning(
            f"{player.name} made {self.config.max_invalid_actions} invalid decisions, folding"
        )
        return rnd.take_action(ActionType.FOLD, seat=seat)

    def _request_decision(
        self, rnd: Round, seat: int, agent: BaseAgent
    ) -> Tuple[Optional[ActionRequest], str]:
        """
        Ask ``agent`` for one decision.

        Returns:
            (request, "") for a well-formed decision, otherwise (None, reason).
            An agent that raises counts as a malformed decision.
        """
        state = rnd.get_state(for_seat=seat)
        try:
            decision = agent.decide(state, rnd.get_legal_actions())
        except Exception as e:
            logger.warning(f"Agent {agent.name} raised while deciding: {e!r}")
            return None, f"Agent error: {e!r}"

        try:
            return ActionRequest.model_validate(decision), ""
        except ValidationError as e:
            return None, f"Malformed decision {decision!r}: {e.errors()[0]['msg']}"

    def _next_dealer(self, seating: List[Player], dealer_seat_index: int) -> int:
        """Seat of the first surviving player clockwise of the previous dealer."""
        for i in range(1, len(seating) + 1):
            candidate = seating[(dealer_seat_index + i) % len(seating)]
            for seat, player in enumerate(self.players):
                if player is candidate:
                    return seat
        return 0

    def play_tournament(self, max_rounds: Optional[int] = None) -> TournamentResult:
        """
        Play rounds until exactly one player holds chips.

        Args:
            max_rounds: Stop unfinished after this many rounds (no limit when None)

        Returns:
            TournamentResult naming the winner on success
        """
        if len(self.players) < 2:
            return TournamentResult(False, "At least 2 players are needed for a tournament",
                                    error=RuleViolation.NOT_ENOUGH_PLAYERS)

        rounds = 0
        eliminated: List[str] = []
        self.dealer_seat_index %= len(self.players)

        while len(self.players) > 1:
            if max_rounds is not None and rounds >= max_rounds:
                logger.info(f"Tournament stopped after {rounds} rounds")
                return TournamentResult(
                    False,
                    f"Tournament unfinished after {rounds} rounds",
                    rounds_played=rounds,
                    eliminated=eliminated,
                )

            self._log_leaderboard()
            seating = list(self.players)
            dealer = self.dealer_seat_index
            result = self.play_round(dealer)
            rounds += 1
            eliminated.extend(result.eliminated)

            if self.players:
                self.dealer_seat_index = self._next_dealer(seating, dealer)

        winner = self.players[0]
        logger.info(f"One player remaining. {winner.name} wins with {winner.chips} chips")
        return TournamentResult(
            True,
            f"{winner.name} wins the tournament",
            winner=winner,
            rounds_played=rounds,
            eliminated=eliminated,
        )

    def __repr__(self) -> str:
        return (
            f"Table({len(self.players)}/{self.config.max_players} players, "
            f"blinds {self.config.small_blind}/{self.config.big_blind})"
        )
