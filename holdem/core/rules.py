"""
Texas Hold'em Rules and Constants.

Seat positions follow WSOP Tournament Rules:

1. Heads-up (2 players): Dealer posts small blind, non-dealer posts big blind.
   Preflop: Dealer acts first. Postflop: Non-dealer acts first.

2. Minimum raise: The minimum raise amount must be at least equal to the
   previous raise amount (not just the big blind).

3. All-in less than minimum raise: If a player goes all-in for less than
   a full raise, action is not reopened for players who already acted.

4. Odd chips: When a pot is split, an indivisible remainder goes one chip
   at a time to the tied winners, starting with the first winner clockwise
   from the dealer button.
"""

from enum import Enum, auto
from typing import List, Tuple

from holdem.core.errors import InvalidInputError


class RoundState(Enum):
    """States of a single round (one hand) of Texas Hold'em."""
    INITIALIZED = auto()
    BLINDS_POSTED = auto()
    HOLE_CARDS_DEALT = auto()
    PREFLOP_BETTING = auto()
    FLOP = auto()
    FLOP_BETTING = auto()
    TURN = auto()
    TURN_BETTING = auto()
    RIVER = auto()
    RIVER_BETTING = auto()
    SHOWDOWN = auto()
    POT_DISTRIBUTED = auto()


BETTING_STATES = (
    RoundState.PREFLOP_BETTING,
    RoundState.FLOP_BETTING,
    RoundState.TURN_BETTING,
    RoundState.RIVER_BETTING,
)

# Dealing state entered after each betting street, and the betting state it leads to
NEXT_STREET = {
    RoundState.PREFLOP_BETTING: (RoundState.FLOP, RoundState.FLOP_BETTING),
    RoundState.FLOP_BETTING: (RoundState.TURN, RoundState.TURN_BETTING),
    RoundState.TURN_BETTING: (RoundState.RIVER, RoundState.RIVER_BETTING),
}


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


class PlayerState(Enum):
    """Player states during a round."""
    ACTIVE = auto()       # Still in the hand, can act
    FOLDED = auto()       # Has folded
    ALL_IN = auto()       # All-in, no more actions
    OUT = auto()          # No chips, not dealt in


# Default table settings
DEFAULT_SMALL_BLIND = 1
DEFAULT_BIG_BLIND = 3
DEFAULT_MIN_BUY_IN = 100
DEFAULT_MAX_PLAYERS = 10
DEFAULT_MAX_INVALID_ACTIONS = 3
MIN_PLAYERS = 2
MAX_PLAYERS = 10

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1

STREET_CARDS = {
    RoundState.FLOP: FLOP_CARDS,
    RoundState.TURN: TURN_CARDS,
    RoundState.RIVER: RIVER_CARDS,
}


def next_seat(seat: int, num_seats: int) -> int:
    """The seat immediately clockwise of ``seat``."""
    return (seat + 1) % num_seats


def get_blind_positions(num_players: int, dealer_position: int) -> Tuple[int, int]:
    """
    Calculate small blind and big blind positions.

    WSOP Rule: In heads-up play, the dealer posts the small blind.

    Args:
        num_players: Number of seated players
        dealer_position: Seat of the dealer (0-indexed)

    Returns:
        Tuple of (small_blind_position, big_blind_position)
    """
    if num_players < MIN_PLAYERS:
        raise InvalidInputError("Need at least 2 players")

    if num_players == 2:
        sb_pos = dealer_position
        bb_pos = next_seat(dealer_position, num_players)
    else:
        sb_pos = next_seat(dealer_position, num_players)
        bb_pos = next_seat(sb_pos, num_players)

    return sb_pos, bb_pos


def get_first_to_act_preflop(num_players: int, dealer_position: int) -> int:
    """
    Get the seat of the first player to act preflop.

    WSOP Rule:
    - Heads-up: Dealer (small blind) acts first preflop
    - Otherwise: UTG (left of big blind) acts first
    """
    if num_players == 2:
        return dealer_position
    _, bb_pos = get_blind_positions(num_players, dealer_position)
    return next_seat(bb_pos, num_players)


def get_first_to_act_postflop(num_players: int, dealer_position: int) -> int:
    """
    Get the seat of the first player to act postflop.

    WSOP Rule: First player left of the dealer acts first.
    In heads-up, this is the non-dealer (big blind).
    """
    return next_seat(dealer_position, num_players)


def seats_clockwise_from_dealer(num_players: int, dealer_position: int) -> List[int]:
    """All seats in clockwise order, starting left of the dealer and ending on the dealer."""
    return [(dealer_position + 1 + i) % num_players for i in range(num_players)]


def calculate_min_raise(
    current_bet: int,
    last_raise_amount: int,
    big_blind: int
) -> int:
    """
    Calculate the minimum total a raise must reach.

    WSOP Rule: The minimum raise must be at least equal to the previous
    raise amount. If no raise has occurred, the minimum raise is the big blind.

    Args:
        current_bet: Current highest bet in the round
        last_raise_amount: The size of the last raise (the increase, not total)
        big_blind: Big blind amount

    Returns:
        Minimum total bet amount (including call + raise)
    """
    return current_bet + max(last_raise_amount, big_blind)


def is_action_reopened(
    raise_total: int,
    current_bet: int,
    last_raise_amount: int,
    big_blind: int
) -> bool:
    """
    Check if a bet or raise reopens the action.

    WSOP Rule: An all-in bet/raise that is less than a full raise does NOT
    reopen the betting for players who have already acted.
    """
    return raise_total >= calculate_min_raise(current_bet, last_raise_amount, big_blind)


def split_pot(amount: int, winners_in_seat_order: List[int]) -> dict:
    """
    Split ``amount`` among winners.

    ``winners_in_seat_order`` must already be ordered clockwise from the
    dealer; the remainder chips go one each to the earliest winners.

    Returns:
        Mapping of winner seat to chips won
    """
    if not winners_in_seat_order:
        return {}
    share, remainder = divmod(amount, len(winners_in_seat_order))
    return {
        seat: share + (1 if i < remainder else 0)
        for i, seat in enumerate(winners_in_seat_order)
    }
