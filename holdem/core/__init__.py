"""
holdem core - Pure Python Texas Hold'em Game Logic

This package contains all game logic; it performs no terminal or network I/O.
"""

from holdem.core.card import Card, Deck, Rank, Suit
from holdem.core.errors import (
    PokerError, InvalidInputError, DeckExhaustedError,
    UnsupportedBettingStructureError, RuleViolation,
)
from holdem.core.hand import Hand, HandCategory, HandRank, rank_hand, get_high_card_value
from holdem.core.player import Player
from holdem.core.rules import RoundState, ActionType, PlayerState
from holdem.core.game import Round, ActionResult, RoundResult, Winner, Pot
from holdem.core.schemas import TableConfig, ActionRequest
from holdem.core.table import Table, TournamentResult

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "PokerError",
    "InvalidInputError",
    "DeckExhaustedError",
    "UnsupportedBettingStructureError",
    "RuleViolation",
    "Hand",
    "HandCategory",
    "HandRank",
    "rank_hand",
    "get_high_card_value",
    "Player",
    "PlayerState",
    "RoundState",
    "ActionType",
    "Round",
    "ActionResult",
    "RoundResult",
    "Winner",
    "Pot",
    "TableConfig",
    "ActionRequest",
    "Table",
    "TournamentResult",
]
