"""
Error taxonomy for the hold'em engine.

Two kinds of failure exist:

- Invalid input (bad card strings, evaluator given fewer than 5 cards, a deck
  insertion index out of range) is raised as an exception.
- Game-rule violations (joining without enough chips, acting out of turn,
  an illegal bet) are returned to the caller as a failed ``ActionResult``
  carrying a ``RuleViolation`` code, so the caller can retry or branch.
"""

from enum import Enum


class PokerError(Exception):
    """Base class for all engine exceptions."""


class InvalidInputError(PokerError, ValueError):
    """Raised when a caller passes malformed input."""


class DeckExhaustedError(PokerError, RuntimeError):
    """Raised when dealing from a deck that does not hold enough cards."""


class UnsupportedBettingStructureError(PokerError, NotImplementedError):
    """Raised when fixed-limit betting is requested."""


class RuleViolation(Enum):
    """Recoverable game-rule failures reported on results."""
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    TABLE_FULL = "TABLE_FULL"
    DUPLICATE_PLAYER = "DUPLICATE_PLAYER"
    OUT_OF_TURN = "OUT_OF_TURN"
    INVALID_ACTION = "INVALID_ACTION"
    NO_ROUND_IN_PROGRESS = "NO_ROUND_IN_PROGRESS"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
