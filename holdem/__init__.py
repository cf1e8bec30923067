"""
holdem - Texas Hold'em Poker Engine

A pure Python engine for Texas Hold'em with:
- Card, Deck and Hand primitives with injectable randomness
- A 5-to-7 card hand evaluator with total ordering of hand ranks
- A round state machine and tournament controller driven by agents

Usage:
    from holdem import Card, Deck, Player, Table, rank_hand
    from holdem.agents import BaseAgent, ScriptedAgent
"""

__version__ = "0.1.0"

from holdem.core.card import Card, Deck, Rank, Suit
from holdem.core.hand import Hand, HandCategory, HandRank, rank_hand, get_high_card_value
from holdem.core.player import Player
from holdem.core.game import Round
from holdem.core.table import Table
from holdem.core.schemas import TableConfig

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Hand",
    "HandCategory",
    "HandRank",
    "rank_hand",
    "get_high_card_value",
    "Player",
    "Round",
    "Table",
    "TableConfig",
    "__version__",
]
