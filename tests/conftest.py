"""
Pytest configuration and shared fixtures for holdem tests.
"""

import random
from typing import Dict, List, Optional, Sequence

import pytest
from holdem.core.card import Card, Deck, Rank, Suit, parse_cards
from holdem.core.game import Round
from holdem.core.hand import Hand
from holdem.core.player import Player


def stacked_deck(top_cards: Sequence[Card]) -> Deck:
    """An unshuffled deck with ``top_cards`` on top, in order."""
    deck = Deck(shuffle=False)
    for card in reversed(list(top_cards)):
        deck.remove(card)
        deck.insert_at_top(card)
    return deck


def make_players(count: int, chips: int = 100) -> List[Player]:
    return [Player(f"P{i}", chips) for i in range(count)]


def rig_round(
    rnd: Round,
    hands: Dict[int, str],
    board: str,
    burns: str = "3c 5c 6c",
) -> None:
    """
    Replace hole cards and the remaining deck of a started round so the
    board comes out as ``board`` (flop, turn, river).
    """
    for seat, cards in hands.items():
        rnd.players[seat].hand = Hand(parse_cards(cards))
    b = parse_cards(board)
    burn = parse_cards(burns)
    rnd.deck = stacked_deck([burn[0]] + b[:3] + [burn[1], b[3], burn[2], b[4]])


def check_down(rnd: Round) -> None:
    """Check when possible, otherwise call, until the round ends."""
    while rnd.is_running():
        types = {a["type"] for a in rnd.get_legal_actions()}
        rnd.take_action("CHECK" if "CHECK" in types else "CALL")


def total_chips(players: Sequence[Player], rnd: Optional[Round] = None) -> int:
    chips = sum(p.chips for p in players)
    if rnd is not None:
        chips += rnd.pot_total
    return chips


@pytest.fixture
def rng():
    """A seeded randomness source."""
    return random.Random(1234)


@pytest.fixture
def deck(rng):
    """Create a fresh shuffled deck."""
    return Deck(shuffle=True, rng=rng)


@pytest.fixture
def unshuffled_deck():
    """Create a fresh unshuffled deck."""
    return Deck(shuffle=False)


@pytest.fixture
def sample_player():
    """Create a sample player with 1000 chips."""
    return Player(name="test_player", chips=1000)


@pytest.fixture
def heads_up_round(rng):
    """A started 2-player round, dealer on seat 0, blinds 1/3."""
    rnd = Round(make_players(2), dealer_seat_index=0, small_blind=1, big_blind=3, rng=rng)
    rnd.start()
    return rnd


@pytest.fixture
def three_player_round(rng):
    """A started 3-player round, dealer on seat 0, blinds 1/3."""
    rnd = Round(make_players(3), dealer_seat_index=0, small_blind=1, big_blind=3, rng=rng)
    rnd.start()
    return rnd


@pytest.fixture
def sample_hand():
    """Create a sample 5-card hand (pair of aces)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.KING, Suit.DIAMONDS),
        Card(Rank.QUEEN, Suit.CLUBS),
        Card(Rank.JACK, Suit.SPADES),
    ]


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]
