"""
Tests for the Hand container and hand evaluation.
"""

import itertools
import random

import pytest
from holdem.core.card import Card, Deck, Rank, Suit, parse_cards
from holdem.core.errors import InvalidInputError
from holdem.core.hand import (
    Hand, HandCategory, HandRank, rank_hand, get_high_card_value,
    compare_hands, get_hand_description,
)


class TestHandContainer:
    """Tests for the Hand card container."""

    def test_empty_hand(self):
        hand = Hand()
        assert len(hand) == 0
        assert hand.pop() is None

    def test_push_and_pop(self):
        hand = Hand()
        ace, king = parse_cards("As Kh")
        hand.push(ace)
        hand.push(king)
        assert hand.cards == [ace, king]
        assert hand.pop() == king
        assert len(hand) == 1

    def test_from_cards(self):
        cards = parse_cards("As Kh Qd")
        hand = Hand(cards)
        assert list(hand) == cards
        assert cards[1] in hand
        assert hand[0] == cards[0]

    def test_cards_is_a_copy(self):
        hand = Hand(parse_cards("As Kh"))
        hand.cards.append(Card(Rank.TWO, Suit.CLUBS))
        assert len(hand) == 2

    def test_to_string_hides_face_down(self):
        ace, king = parse_cards("As Kh")
        hand = Hand([ace, king.face_down()])
        assert hand.to_string() == "A♠ ??"


class TestHandCategories:
    """Each category is recognised with its justifying cards."""

    def test_royal_flush(self, royal_flush):
        result = rank_hand(royal_flush)
        assert result.category == HandCategory.STRAIGHT_FLUSH
        assert result.ranks[0] == Rank.ACE
        assert "Royal" in result.describe()

    def test_straight_flush(self):
        result = rank_hand(parse_cards("9h 8h 7h 6h 5h"))
        assert result.category == HandCategory.STRAIGHT_FLUSH
        assert result.ranks == [Rank.NINE, Rank.EIGHT, Rank.SEVEN, Rank.SIX, Rank.FIVE]

    def test_four_of_a_kind(self):
        result = rank_hand(parse_cards("9h 9d 9s 9c Kh"))
        assert result.category == HandCategory.FOUR_OF_A_KIND
        assert result.ranks == [Rank.NINE] * 4 + [Rank.KING]

    def test_full_house(self):
        result = rank_hand(parse_cards("3h 3d 3s Kc Kh"))
        assert result.category == HandCategory.FULL_HOUSE
        assert result.ranks == [Rank.THREE] * 3 + [Rank.KING] * 2

    def test_flush(self):
        result = rank_hand(parse_cards("Ah 9h 7h 4h 2h"))
        assert result.category == HandCategory.FLUSH
        assert result.ranks[0] == Rank.ACE

    def test_straight(self):
        result = rank_hand(parse_cards("Ts 9h 8d 7c 6s"))
        assert result.category == HandCategory.STRAIGHT
        assert result.ranks[0] == Rank.TEN

    def test_wheel_straight(self, wheel_straight):
        result = rank_hand(wheel_straight)
        assert result.category == HandCategory.STRAIGHT
        assert result.ranks == [Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO, Rank.ACE]
        assert "Wheel" in result.describe()

    def test_no_wraparound_straight(self):
        result = rank_hand(parse_cards("Qs Kh Ad 2c 3s"))
        assert result.category == HandCategory.HIGH_CARD

    def test_three_of_a_kind(self):
        result = rank_hand(parse_cards("7h 7d 7s Ac 2h"))
        assert result.category == HandCategory.THREE_OF_A_KIND
        assert result.ranks == [Rank.SEVEN] * 3 + [Rank.ACE, Rank.TWO]

    def test_two_pair(self):
        result = rank_hand(parse_cards("5h 5d Js Jc 9h"))
        assert result.category == HandCategory.TWO_PAIR
        assert result.ranks == [Rank.JACK, Rank.JACK, Rank.FIVE, Rank.FIVE, Rank.NINE]

    def test_pair(self, sample_hand):
        result = rank_hand(sample_hand)
        assert result.category == HandCategory.PAIR
        assert result.ranks == [Rank.ACE, Rank.ACE, Rank.KING, Rank.QUEEN, Rank.JACK]

    def test_high_card(self):
        result = rank_hand(parse_cards("Ah Jd 8s 5c 3h"))
        assert result.category == HandCategory.HIGH_CARD
        assert result.ranks == [Rank.ACE, Rank.JACK, Rank.EIGHT, Rank.FIVE, Rank.THREE]


class TestBestFiveOfSeven:
    """Best 5-card selection from 6 or 7 cards."""

    def test_wheel_straight_flush_scenario(self):
        """A♦ 2♦ 3♦ 4♦ 5♦ 7♦ 8♦ is a Five-high straight flush, not an Eight-high flush."""
        cards = parse_cards("Ad 2d 3d 4d 5d 7d 8d")
        result = rank_hand(cards)

        assert result.category == HandCategory.STRAIGHT_FLUSH
        assert result.cards[0] == Card(Rank.FIVE, Suit.DIAMONDS)
        assert result.cards[-1] == Card(Rank.ACE, Suit.DIAMONDS)
        assert get_high_card_value(cards) == Card(Rank.ACE, Suit.DIAMONDS)

    def test_full_house_kings_over_aces(self):
        """A♠ A♥ K♠ K♥ K♦ 2♣ 3♣ is kings full of aces."""
        result = rank_hand(parse_cards("As Ah Ks Kh Kd 2c 3c"))

        assert result.category == HandCategory.FULL_HOUSE
        assert result.ranks == [Rank.KING] * 3 + [Rank.ACE] * 2
        assert result.describe() == "Full House, Kings full of Aces"

    def test_two_trips_make_full_house(self):
        result = rank_hand(parse_cards("9s 9h 9d 4s 4h 4d Ac"))
        assert result.category == HandCategory.FULL_HOUSE
        assert result.ranks == [Rank.NINE] * 3 + [Rank.FOUR] * 2

    def test_three_pairs_pick_best_two_and_kicker(self):
        result = rank_hand(parse_cards("Qs Qh 8d 8s 3h 3d 7c"))
        assert result.category == HandCategory.TWO_PAIR
        assert result.ranks == [Rank.QUEEN, Rank.QUEEN, Rank.EIGHT, Rank.EIGHT, Rank.SEVEN]

    def test_flush_uses_five_highest_of_suit(self):
        result = rank_hand(parse_cards("Ah Kh 9h 6h 3h 2h Qs"))
        assert result.category == HandCategory.FLUSH
        assert result.ranks == [Rank.ACE, Rank.KING, Rank.NINE, Rank.SIX, Rank.THREE]

    def test_highest_straight_chosen(self):
        result = rank_hand(parse_cards("4s 5h 6d 7c 8s 9h 2c"))
        assert result.category == HandCategory.STRAIGHT
        assert result.ranks[0] == Rank.NINE

    def test_highest_straight_flush_across_suits(self):
        """With several qualifying suits, the highest straight flush wins."""
        cards = parse_cards("5h 6h 7h 8h 9h 6s 7s 8s 9s Ts")
        result = rank_hand(cards)
        assert result.category == HandCategory.STRAIGHT_FLUSH
        assert result.cards[0] == Card(Rank.TEN, Suit.SPADES)

    def test_quads_use_best_kicker(self):
        result = rank_hand(parse_cards("7s 7h 7d 7c 2h Kd 9s"))
        assert result.category == HandCategory.FOUR_OF_A_KIND
        assert result.ranks[-1] == Rank.KING


class TestInvalidInput:

    def test_fewer_than_five_cards(self):
        with pytest.raises(InvalidInputError):
            rank_hand(parse_cards("As Ks Qs Js"))

    def test_duplicate_cards(self):
        with pytest.raises(InvalidInputError):
            rank_hand(parse_cards("As As Ks Qs Js"))

    def test_high_card_of_nothing(self):
        with pytest.raises(InvalidInputError):
            get_high_card_value([])

    def test_invalid_input_is_a_value_error(self):
        with pytest.raises(ValueError):
            rank_hand([])


class TestComparison:
    """Ordering of HandRank values."""

    def test_category_beats_kickers(self):
        pair = rank_hand(parse_cards("2h 2d 3s 4c 6h"))
        high = rank_hand(parse_cards("Ah Kd Qs Jc 9h"))
        assert pair > high

    def test_two_pair_tiebreak_order(self):
        """Higher pair, then lower pair, then kicker."""
        kings_up = rank_hand(parse_cards("Kh Kd 2s 2c 3h"))
        queens_up = rank_hand(parse_cards("Qh Qd Js Jc Ah"))
        kings_threes = rank_hand(parse_cards("Ks Kc 3s 3c 2h"))
        kings_up_ace = rank_hand(parse_cards("Ks Kc 2h 2d Ah"))

        assert kings_up > queens_up
        assert kings_threes > kings_up
        assert kings_up_ace > kings_up

    def test_suits_do_not_break_ties(self):
        spades = rank_hand(parse_cards("As Ks Qs Js 9s"))
        hearts = rank_hand(parse_cards("Ah Kh Qh Jh 9h"))
        assert spades == hearts
        assert compare_hands(parse_cards("As Ks Qs Js 9s"), parse_cards("Ah Kh Qh Jh 9h")) == 0

    def test_wheel_is_lowest_straight(self, wheel_straight):
        six_high = rank_hand(parse_cards("2s 3h 4d 5c 6s"))
        assert rank_hand(wheel_straight) < six_high

    def test_flush_beats_straight(self):
        flush = rank_hand(parse_cards("2h 5h 7h 9h Jh"))
        straight = rank_hand(parse_cards("Ts Jh Qd Kc As"))
        assert compare_hands(parse_cards("2h 5h 7h 9h Jh"), parse_cards("Ts Jh Qd Kc As")) == 1
        assert flush > straight

    def test_full_ranking_order(self):
        hands = [
            "Ah Jd 8s 5c 3h",
            "2h 2d 3s 4c 6h",
            "5h 5d Js Jc 9h",
            "7h 7d 7s Ac 2h",
            "Ts 9h 8d 7c 6s",
            "Ah 9h 7h 4h 2h",
            "3h 3d 3s Kc Kh",
            "9h 9d 9s 9c Kh",
            "9h 8h 7h 6h 5h",
        ]
        ranks = [rank_hand(parse_cards(h)) for h in hands]
        assert [r.category for r in ranks] == list(HandCategory)
        assert ranks == sorted(ranks)


class TestProperties:
    """Order invariance and total ordering over sampled hands."""

    def test_rank_hand_is_order_invariant(self):
        cards = parse_cards("Ad 2d 3d 4d 5d 7d 8d")
        expected = rank_hand(cards)
        rng = random.Random(5)
        for _ in range(20):
            shuffled = cards[:]
            rng.shuffle(shuffled)
            result = rank_hand(shuffled)
            assert result == expected
            assert result.cards == expected.cards

    def test_order_invariant_on_random_sevens(self):
        rng = random.Random(11)
        for _ in range(25):
            cards = Deck(rng=rng).deal(7)
            reversed_cards = list(reversed(cards))
            assert rank_hand(cards).cards == rank_hand(reversed_cards).cards

    def test_strict_total_order(self):
        rng = random.Random(3)
        ranks = [rank_hand(Deck(rng=rng).deal(5)) for _ in range(25)]

        for a, b in itertools.product(ranks, repeat=2):
            outcomes = [a < b, a > b, a == b]
            assert outcomes.count(True) == 1

        for a, b, c in itertools.product(ranks, repeat=3):
            if a < b and b < c:
                assert a < c

    def test_repeated_evaluation_is_stable(self):
        cards = parse_cards("Qs Qh 8d 8s 3h 3d 7c")
        assert rank_hand(cards) == rank_hand(cards)


class TestHandDescription:

    def test_descriptions(self):
        assert get_hand_description(parse_cards("Kh Kd 2s 2c 3h")) == "Two Pair, Kings and Twos"
        assert get_hand_description(parse_cards("Ah Ad 2s 5c 9h")) == "Pair of Aces"
        assert get_hand_description(parse_cards("Ah")) == "Incomplete hand"

    def test_plural_rank_names(self):
        assert get_hand_description(parse_cards("6h 6d 6s 6c Kh")) == "Four of a Kind, Sixes"
        assert get_hand_description(parse_cards("6h 6d 2s 5c 9h")) == "Pair of Sixes"
        assert get_hand_description(parse_cards("6h 6d 6s 2c 2h")) == "Full House, Sixes full of Twos"
        assert get_hand_description(parse_cards("Ah Ad 6s 6c 9h")) == "Two Pair, Aces and Sixes"

    def test_to_dict(self):
        result = rank_hand(parse_cards("3h 3d 3s Kc Kh")).to_dict()
        assert result["category"] == "FULL_HOUSE"
        assert result["cards"] == ["3♠", "3♥", "3♦", "K♥", "K♣"]

    def test_hand_rank_is_hashable(self):
        a = rank_hand(parse_cards("As Ks Qs Js 9s"))
        b = rank_hand(parse_cards("Ah Kh Qh Jh 9h"))
        assert len({a, b}) == 1
        assert isinstance(a, HandRank)

    def test_hand_rank_is_immutable(self):
        result = rank_hand(parse_cards("As Ks Qs Js 9s"))
        with pytest.raises(AttributeError):
            result.category = HandCategory.PAIR
