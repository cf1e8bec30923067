"""
Hands and hand evaluation for Texas Hold'em.

``Hand`` is the plain card container used for hole cards and the board.

``rank_hand`` evaluates 5 or more cards and returns the best 5-card
``HandRank``. A ``HandRank`` is a tagged value: the category plus the five
cards that justify it, ordered from most to least significant. Two ranks
compare by category first, then by the card ranks element-wise, so the
ordering is total and suits never break a tie.

Hand Rankings (best to worst):
9. Straight Flush: 5 consecutive cards of same suit (A-K-Q-J-T is the royal)
8. Four of a Kind: 4 cards of same rank
7. Full House: 3 of a kind + pair
6. Flush: 5 cards of same suit
5. Straight: 5 consecutive cards
4. Three of a Kind: 3 cards of same rank
3. Two Pair: 2 different pairs
2. Pair: 2 cards of same rank
1. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel). The wheel carries its
cards as 5-4-3-2-A so the Five leads the comparison.
"""

from __future__ import annotations
from typing import Iterable, Iterator, List, Optional, Tuple
from itertools import combinations
from enum import IntEnum
from collections import Counter
from functools import total_ordering

from holdem.core.card import Card, Rank, RANK_NAMES, cards_to_str
from holdem.core.errors import InvalidInputError


HAND_SIZE = 5


class Hand:
    """
    An ordered collection of cards, either a player's hole cards or the
    community board.
    """

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self._cards: List[Card] = list(cards) if cards is not None else []

    def push(self, card: Card) -> None:
        """Append a card to the back of the hand."""
        self._cards.append(card)

    def extend(self, cards: Iterable[Card]) -> None:
        self._cards.extend(cards)

    def pop(self) -> Optional[Card]:
        """Remove and return the card at the back, or None when empty."""
        if not self._cards:
            return None
        return self._cards.pop()

    def clear(self) -> None:
        self._cards = []

    @property
    def cards(self) -> List[Card]:
        return self._cards.copy()

    def to_string(self) -> str:
        return cards_to_str(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards.copy())

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def __getitem__(self, index):
        return self._cards[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Hand):
            return self._cards == other._cards
        return NotImplemented

    def __repr__(self) -> str:
        return f"Hand({' '.join(c.short_str for c in self._cards)})"

    def __str__(self) -> str:
        return self.to_string()


class HandCategory(IntEnum):
    """Hand categories from worst (lowest value) to best (highest value)."""
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9


HAND_CATEGORY_NAMES = {
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FLUSH: "Flush",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.PAIR: "Pair",
    HandCategory.HIGH_CARD: "High Card",
}


@total_ordering
class HandRank:
    """
    The evaluated value of a 5-card hand.

    Attributes:
        category: Which of the nine poker categories applies
        cards: The five justifying cards, most significant first
            (e.g. Two Pair: higher pair, lower pair, kicker)
    """

    __slots__ = ("category", "cards")

    def __init__(self, category: HandCategory, cards: Iterable[Card]):
        object.__setattr__(self, "category", HandCategory(category))
        object.__setattr__(self, "cards", tuple(cards))

    def __setattr__(self, name, value):
        raise AttributeError(f"HandRank is immutable, cannot set {name!r}")

    @property
    def key(self) -> Tuple[int, ...]:
        """Comparison key: category, then ranks in significance order."""
        return (int(self.category),) + tuple(int(c.rank) for c in self.cards)

    @property
    def name(self) -> str:
        return HAND_CATEGORY_NAMES[self.category]

    @property
    def ranks(self) -> List[Rank]:
        return [c.rank for c in self.cards]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HandRank):
            return self.key == other.key
        return NotImplemented

    def __lt__(self, other: HandRank) -> bool:
        if not isinstance(other, HandRank):
            return NotImplemented
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def describe(self) -> str:
        """Human-readable description, e.g. 'Full House, Kings full of Aces'."""
        ranks = self.ranks
        lead = _rank_name(ranks[0])
        if self.category == HandCategory.STRAIGHT_FLUSH:
            if ranks[0] == Rank.ACE:
                return "Straight Flush, Ace high (Royal Flush)"
            return f"Straight Flush, {lead} high"
        if self.category == HandCategory.FOUR_OF_A_KIND:
            return f"Four of a Kind, {_rank_plural(ranks[0])}"
        if self.category == HandCategory.FULL_HOUSE:
            return f"Full House, {_rank_plural(ranks[0])} full of {_rank_plural(ranks[3])}"
        if self.category == HandCategory.FLUSH:
            return f"Flush, {lead} high"
        if self.category == HandCategory.STRAIGHT:
            if ranks[0] == Rank.FIVE:
                return "Straight, Five high (Wheel)"
            return f"Straight, {lead} high"
        if self.category == HandCategory.THREE_OF_A_KIND:
            return f"Three of a Kind, {_rank_plural(ranks[0])}"
        if self.category == HandCategory.TWO_PAIR:
            return f"Two Pair, {_rank_plural(ranks[0])} and {_rank_plural(ranks[2])}"
        if self.category == HandCategory.PAIR:
            return f"Pair of {_rank_plural(ranks[0])}"
        return f"High Card, {lead}"

    def to_dict(self) -> dict:
        return {
            "category": self.category.name,
            "name": self.name,
            "description": self.describe(),
            "cards": [str(c) for c in self.cards],
        }

    def __repr__(self) -> str:
        return f"HandRank({self.category.name}, {' '.join(c.short_str for c in self.cards)})"

    def __str__(self) -> str:
        return self.describe()


def rank_hand(cards: Iterable[Card]) -> HandRank:
    """
    Evaluate a poker hand of 5 or more cards.

    Args:
        cards: Cards to evaluate (typically 2 hole cards + up to 5 board cards)

    Returns:
        The best HandRank obtainable from any 5-card subset

    Raises:
        InvalidInputError: If fewer than 5 cards or duplicate cards are given
    """
    cards = list(cards)
    if len(cards) < HAND_SIZE:
        raise InvalidInputError(f"Need at least {HAND_SIZE} cards, got {len(cards)}")
    if len(set(cards)) != len(cards):
        raise InvalidInputError(f"Duplicate cards in hand: {cards_to_str(cards)}")

    # Canonical order makes the chosen cards independent of input order
    cards.sort(reverse=True)

    if len(cards) == HAND_SIZE:
        return _evaluate_5_cards(cards)

    return max(_evaluate_5_cards(list(combo)) for combo in combinations(cards, HAND_SIZE))


def get_high_card_value(cards: Iterable[Card]) -> Card:
    """
    Return the highest card by rank, then suit.

    Raises:
        InvalidInputError: If no cards are given
    """
    cards = list(cards)
    if not cards:
        raise InvalidInputError("Cannot take the high card of an empty set")
    return max(cards)


def _evaluate_5_cards(cards: List[Card]) -> HandRank:
    """Evaluate exactly 5 cards, given sorted by rank then suit, descending."""
    ranks = [c.rank for c in cards]

    is_flush = len({c.suit for c in cards}) == 1
    straight_high = _straight_high(ranks)
    rank_counts = Counter(ranks)
    counts = sorted(rank_counts.values(), reverse=True)

    if straight_high is not None:
        ordered = _order_straight(cards, straight_high)
        if is_flush:
            return HandRank(HandCategory.STRAIGHT_FLUSH, ordered)

    if counts == [4, 1]:
        return HandRank(HandCategory.FOUR_OF_A_KIND, _sort_by_count(cards, rank_counts))

    if counts == [3, 2]:
        return HandRank(HandCategory.FULL_HOUSE, _sort_by_count(cards, rank_counts))

    if is_flush:
        return HandRank(HandCategory.FLUSH, cards)

    if straight_high is not None:
        return HandRank(HandCategory.STRAIGHT, ordered)

    if counts == [3, 1, 1]:
        return HandRank(HandCategory.THREE_OF_A_KIND, _sort_by_count(cards, rank_counts))

    if counts == [2, 2, 1]:
        return HandRank(HandCategory.TWO_PAIR, _sort_by_count(cards, rank_counts))

    if counts == [2, 1, 1, 1]:
        return HandRank(HandCategory.PAIR, _sort_by_count(cards, rank_counts))

    return HandRank(HandCategory.HIGH_CARD, cards)


def _straight_high(ranks: List[Rank]) -> Optional[Rank]:
    """Return the top rank of a straight, or None. The wheel is Five-high."""
    unique_ranks = sorted(set(ranks), reverse=True)
    if len(unique_ranks) != HAND_SIZE:
        return None

    if unique_ranks[0] - unique_ranks[4] == 4:
        return unique_ranks[0]

    if unique_ranks == [Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO]:
        return Rank.FIVE

    return None


def _order_straight(cards: List[Card], straight_high: Rank) -> List[Card]:
    """Order straight cards top-down, moving the Ace last in a wheel."""
    if straight_high == Rank.FIVE:
        return [c for c in cards if c.rank != Rank.ACE] + [c for c in cards if c.rank == Rank.ACE]
    return list(cards)


def _sort_by_count(cards: List[Card], rank_counts: Counter) -> List[Card]:
    """Sort cards by count (descending), then by rank and suit (descending)."""
    return sorted(cards, key=lambda c: (rank_counts[c.rank], c.rank, c.suit), reverse=True)


def compare_hands(cards1: Iterable[Card], cards2: Iterable[Card]) -> int:
    """
    Compare two hands.

    Returns:
        1 if cards1 wins, -1 if cards2 wins, 0 if tie
    """
    rank1 = rank_hand(cards1)
    rank2 = rank_hand(cards2)

    if rank1 > rank2:
        return 1
    if rank1 < rank2:
        return -1
    return 0


def get_hand_description(cards: Iterable[Card]) -> str:
    """Get a human-readable description of the best hand in ``cards``."""
    cards = list(cards)
    if len(cards) < HAND_SIZE:
        return "Incomplete hand"
    return rank_hand(cards).describe()


def _rank_name(rank: Rank) -> str:
    return RANK_NAMES[rank]


def _rank_plural(rank: Rank) -> str:
    if rank == Rank.SIX:
        return "Sixes"
    return f"{RANK_NAMES[rank]}s"
