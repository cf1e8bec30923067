"""
Player class for Texas Hold'em.

A player owns a chip ledger that persists across rounds, plus per-round
state:
- Hole cards (a ``Hand``)
- Current bet on this street and total committed this round
- Player state (active, folded, all-in, out)

Chips only move through the betting helpers here and the payouts made by
the round state machine.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Optional
from dataclasses import dataclass, field
from uuid import uuid4

from holdem.core.card import Card
from holdem.core.errors import InvalidInputError
from holdem.core.hand import Hand
from holdem.core.rules import PlayerState


@dataclass
class Player:
    """
    A player at a Texas Hold'em table.

    Attributes:
        name: Display name, unique per table
        chips: Current chip count (never negative)
        player_id: Generated unique identifier
        hand: The player's hole cards for the current round
        current_bet: Amount bet on the current street
        total_bet: Total amount committed this round (for side pots)
        state: Current player state
    """
    name: str
    chips: int = 0
    player_id: str = field(default_factory=lambda: uuid4().hex)
    hand: Hand = field(default_factory=Hand)
    current_bet: int = 0
    total_bet: int = 0
    state: PlayerState = PlayerState.ACTIVE

    # Track if player has acted on the current street
    has_acted: bool = False
    last_action: Optional[str] = None

    def __post_init__(self) -> None:
        if self.chips < 0:
            raise InvalidInputError(f"Chip count cannot be negative: {self.chips}")

    @classmethod
    def with_chips(cls, name: str, chips: int) -> Player:
        return cls(name=name, chips=chips)

    def add_chips(self, amount: int) -> None:
        if amount < 0:
            raise InvalidInputError(f"Cannot add a negative amount of chips: {amount}")
        self.chips += amount

    def remove_chips(self, amount: int) -> None:
        if amount < 0:
            raise InvalidInputError(f"Cannot remove a negative amount of chips: {amount}")
        if amount > self.chips:
            raise InvalidInputError(
                f"{self.name} has {self.chips} chips, cannot remove {amount}"
            )
        self.chips -= amount

    def reset_for_new_round(self) -> None:
        """Reset player state for a new round."""
        self.hand = Hand()
        self.current_bet = 0
        self.total_bet = 0
        self.has_acted = False
        self.last_action = None
        self.state = PlayerState.ACTIVE if self.chips > 0 else PlayerState.OUT

    def reset_for_new_street(self) -> None:
        """Reset player state for a new betting street (flop, turn, river)."""
        self.current_bet = 0
        # All-in players don't act
        self.has_acted = self.state == PlayerState.ALL_IN

    def deal_cards(self, cards: Iterable[Card]) -> None:
        """Deal hole cards to the player."""
        self.hand.extend(cards)

    def bet(self, amount: int) -> int:
        """
        Move chips from the stack onto the current bet.

        Args:
            amount: Amount to bet

        Returns:
            Actual amount bet (less than requested if all-in)
        """
        if amount <= 0:
            return 0

        actual_amount = min(amount, self.chips)

        self.chips -= actual_amount
        self.current_bet += actual_amount
        self.total_bet += actual_amount

        if self.chips == 0:
            self.state = PlayerState.ALL_IN

        return actual_amount

    def fold(self) -> None:
        self.state = PlayerState.FOLDED
        self.has_acted = True
        self.last_action = "FOLD"

    def check(self) -> None:
        self.has_acted = True
        self.last_action = "CHECK"

    def call(self, amount_to_call: int) -> int:
        """
        Call the current bet.

        Returns:
            Actual amount called (may be all-in for less)
        """
        actual = self.bet(amount_to_call)
        self.has_acted = True
        self.last_action = f"CALL {actual}"
        return actual

    def raise_to(self, total_amount: int) -> int:
        """
        Raise to a total amount for this street.

        Returns:
            Actual amount added to the pot
        """
        actual = self.bet(total_amount - self.current_bet)
        self.has_acted = True

        if self.state == PlayerState.ALL_IN:
            self.last_action = f"ALL-IN {self.current_bet}"
        else:
            self.last_action = f"RAISE {self.current_bet}"

        return actual

    def go_all_in(self) -> int:
        """
        Go all-in.

        Returns:
            Amount added to the pot
        """
        remaining = self.chips
        self.bet(remaining)
        self.has_acted = True
        self.last_action = f"ALL-IN {self.current_bet}"
        return remaining

    @property
    def is_active(self) -> bool:
        """Check if player can still act."""
        return self.state == PlayerState.ACTIVE

    @property
    def is_in_hand(self) -> bool:
        """Check if player is still in the hand (not folded, not out)."""
        return self.state in (PlayerState.ACTIVE, PlayerState.ALL_IN)

    @property
    def can_act(self) -> bool:
        return self.state == PlayerState.ACTIVE and self.chips > 0

    def to_dict(self, hide_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary.

        Args:
            hide_cards: If True, don't include hole cards
        """
        result = {
            "id": self.player_id,
            "name": self.name,
            "chips": self.chips,
            "bet": self.current_bet,
            "total_bet": self.total_bet,
            "state": self.state.name,
            "last_action": self.last_action,
        }

        if not hide_cards and len(self.hand):
            result["cards"] = [card.face_up_copy().to_dict() for card in self.hand]

        return result

    def __repr__(self) -> str:
        return (
            f"Player({self.name}, chips={self.chips}, "
            f"bet={self.current_bet}, state={self.state.name})"
        )

    def __str__(self) -> str:
        cards_str = self.hand.to_string() if len(self.hand) else "??"
        return f"{self.name} [{cards_str}] {self.chips} chips"
