"""
Card and Deck classes for Texas Hold'em.

Cards are immutable (rank, suit) values with a face up/down flag used only
for display. The deck is an ordered list whose top is index 0; its
randomness comes from an injected ``random.Random`` so that shuffles can be
reproduced in tests.
"""

from __future__ import annotations
import random
from typing import Iterable, List, Optional
from enum import IntEnum

from holdem.core.errors import DeckExhaustedError, InvalidInputError


class Suit(IntEnum):
    """Card suits, lowest to highest (bridge order)."""
    CLUBS = 0     # ♣
    DIAMONDS = 1  # ♦
    HEARTS = 2    # ♥
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks from 2 (lowest) to Ace (highest)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.CLUBS: "c",
    Suit.DIAMONDS: "d",
    Suit.HEARTS: "h",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

RANK_NAMES = {
    Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
    Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
    Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
    Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
    Rank.ACE: "Ace",
}

FACE_DOWN_STR = "??"

# Reverse mappings
CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}

DECK_SIZE = 52


class Card:
    """
    A playing card represented as (rank, suit).

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("A♠"),
      Card.from_string("10h")
    - Integer (0-51): Card.from_int(51) = Ace of Spades

    Equality, hashing and ordering use rank then suit. The ``face_up`` flag
    only changes how the card prints.
    """

    __slots__ = ("rank", "suit", "face_up")

    def __init__(self, rank: Rank, suit: Suit, face_up: bool = True):
        object.__setattr__(self, "rank", Rank(rank))
        object.__setattr__(self, "suit", Suit(suit))
        object.__setattr__(self, "face_up", bool(face_up))

    def __setattr__(self, name, value):
        raise AttributeError(f"Card is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"Card is immutable, cannot delete {name!r}")

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "2c" (rank + suit char)
        - "A♠", "K♥", "T♦", "2♣" (rank + suit symbol)
        - "10h" (two-character ten)
        """
        s = s.strip()
        if len(s) < 2:
            raise InvalidInputError(f"Invalid card string: {s!r}")

        if s[:2] == "10":
            rank_part, suit_part = "T", s[2:]
        else:
            rank_part, suit_part = s[0].upper(), s[1:]

        if rank_part not in CHAR_TO_RANK:
            raise InvalidInputError(f"Invalid rank: {rank_part!r}")
        rank = CHAR_TO_RANK[rank_part]

        # Try suit char first, then symbol
        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise InvalidInputError(f"Invalid suit: {suit_part!r}")

        return cls(rank, suit)

    @classmethod
    def from_int(cls, card_int: int) -> Card:
        """Create a card from integer (0-51)."""
        if not 0 <= card_int < DECK_SIZE:
            raise InvalidInputError(f"Card int must be 0-51, got {card_int}")
        rank = Rank(card_int // 4 + int(Rank.TWO))
        suit = Suit(card_int % 4)
        return cls(rank, suit)

    def to_int(self) -> int:
        """Return the integer representation (0-51)."""
        return (int(self.rank) - int(Rank.TWO)) * 4 + int(self.suit)

    def face_down(self) -> Card:
        """Return a face-down copy of this card."""
        return Card(self.rank, self.suit, face_up=False)

    def face_up_copy(self) -> Card:
        """Return a face-up copy of this card."""
        return Card(self.rank, self.suit, face_up=True)

    def _key(self):
        return (self.rank, self.suit)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Card):
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return self.to_int()

    def __lt__(self, other: Card) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: Card) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: Card) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: Card) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self._key() >= other._key()

    def __repr__(self) -> str:
        return f"Card({RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]})"

    def __str__(self) -> str:
        if not self.face_up:
            return FACE_DOWN_STR
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', 'Kh'."""
        return f"{RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]}"

    @property
    def color(self) -> str:
        """Return 'red' for hearts/diamonds, 'black' for clubs/spades."""
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def to_dict(self) -> dict:
        """Convert to dictionary, hiding rank and suit when face down."""
        if not self.face_up:
            return {"face_up": False, "text": FACE_DOWN_STR}
        return {
            "rank": RANK_CHARS[self.rank],
            "suit": SUIT_SYMBOLS[self.suit],
            "text": str(self),
            "color": self.color,
            "face_up": True,
        }


class Deck:
    """
    A standard 52-card deck. The top of the deck is index 0.

    Usage:
        deck = Deck(rng=random.Random(7))
        hole_cards = deck.deal(2)
        deck.burn()
        flop = deck.deal(3)
    """

    def __init__(self, shuffle: bool = True, rng: Optional[random.Random] = None):
        """Initialize a new deck, optionally shuffled with ``rng``."""
        self._rng = rng if rng is not None else random.Random()
        self.reset()
        if shuffle:
            self.shuffle()

    def reset(self) -> None:
        """Reset the deck to a full 52 cards in order."""
        self._cards: List[Card] = [
            Card(rank, suit)
            for suit in Suit
            for rank in Rank
        ]
        self._dealt: List[Card] = []
        self._burned: List[Card] = []

    def shuffle(self) -> None:
        """Shuffle the remaining cards in the deck."""
        self._rng.shuffle(self._cards)

    def deal(self, n: int = 1) -> List[Card]:
        """
        Deal n cards from the top of the deck.

        Raises:
            DeckExhaustedError: If not enough cards remain.
        """
        if n < 0:
            raise InvalidInputError(f"Cannot deal a negative number of cards: {n}")
        if n > len(self._cards):
            raise DeckExhaustedError(
                f"Cannot deal {n} cards, only {len(self._cards)} remain"
            )

        dealt = self._cards[:n]
        self._cards = self._cards[n:]
        self._dealt.extend(dealt)
        return dealt

    def deal_one(self) -> Card:
        """Deal a single card."""
        return self.deal(1)[0]

    def burn(self) -> Card:
        """Burn (discard) the top card."""
        card = self.deal_one()
        self._burned.append(card)
        return card

    def insert_at(self, index: int, card: Card) -> None:
        """
        Insert a card at ``index`` (0 is the top, ``len`` the bottom).

        Raises:
            InvalidInputError: If the index is outside ``[0, len]`` or the
                card is already in the deck.
        """
        if not 0 <= index <= len(self._cards):
            raise InvalidInputError(
                f"Insert index {index} out of range [0, {len(self._cards)}]"
            )
        if card in self._cards:
            raise InvalidInputError(f"{card!r} is already in the deck")

        self._cards.insert(index, card.face_up_copy())
        if card in self._dealt:
            self._dealt.remove(card)
        if card in self._burned:
            self._burned.remove(card)

    def insert_at_top(self, card: Card) -> None:
        self.insert_at(0, card)

    def insert_at_bottom(self, card: Card) -> None:
        self.insert_at(len(self._cards), card)

    def insert_at_middle(self, card: Card) -> None:
        self.insert_at(len(self._cards) // 2, card)

    def contains(self, card: Card) -> bool:
        return card in self._cards

    def remove(self, card: Card) -> None:
        """Remove a specific card. Normally deal() is used instead."""
        if card not in self._cards:
            raise InvalidInputError(f"{card!r} is not in the deck")
        self._cards.remove(card)

    @property
    def cards(self) -> List[Card]:
        """Remaining cards, top first."""
        return self._cards.copy()

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    @property
    def dealt_cards(self) -> List[Card]:
        """List of cards that have been dealt (burns included)."""
        return self._dealt.copy()

    @property
    def burned_cards(self) -> List[Card]:
        return self._burned.copy()

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self):
        return iter(self._cards.copy())

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse multiple cards from a string.

    Accepts formats:
    - "As Kh Td" (space-separated)
    - "AsKhTd" (no separator, 2 chars each)
    - "A♠ K♥ T♦" (with symbols)

    Returns:
        List of Card objects
    """
    cards_str = cards_str.strip()

    # Try space-separated first
    if " " in cards_str:
        return [Card.from_string(s) for s in cards_str.split()]

    # Try 2-char chunks
    result = []
    i = 0
    while i < len(cards_str):
        if i + 1 < len(cards_str) and (
            cards_str[i + 1] in SYMBOL_TO_SUIT
            or cards_str[i + 1].lower() in CHAR_TO_SUIT
        ):
            result.append(Card.from_string(cards_str[i:i + 2]))
            i += 2
        else:
            raise InvalidInputError(f"Cannot parse card at position {i}: {cards_str[i:]}")

    return result


def cards_to_str(cards: Iterable[Card]) -> str:
    """Space-separated display string for a sequence of cards."""
    return " ".join(str(c) for c in cards)
