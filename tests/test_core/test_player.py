"""
Tests for the Player chip ledger and per-round state.
"""

import pytest
from holdem.core.card import parse_cards
from holdem.core.errors import InvalidInputError
from holdem.core.player import Player
from holdem.core.rules import PlayerState


class TestChips:

    def test_new_player(self, sample_player):
        assert sample_player.chips == 1000
        assert sample_player.state == PlayerState.ACTIVE
        assert len(sample_player.hand) == 0
        assert sample_player.player_id

    def test_ids_are_unique(self):
        assert Player("A").player_id != Player("A").player_id

    def test_negative_chips_rejected(self):
        with pytest.raises(InvalidInputError):
            Player("A", -1)

    def test_add_and_remove_chips(self, sample_player):
        sample_player.add_chips(50)
        sample_player.remove_chips(25)
        assert sample_player.chips == 1025

    def test_remove_more_than_stack(self, sample_player):
        with pytest.raises(InvalidInputError):
            sample_player.remove_chips(1001)
        assert sample_player.chips == 1000

    def test_negative_amounts(self, sample_player):
        with pytest.raises(InvalidInputError):
            sample_player.add_chips(-5)
        with pytest.raises(InvalidInputError):
            sample_player.remove_chips(-5)

    def test_with_chips(self):
        player = Player.with_chips("Bob", 250)
        assert player.name == "Bob"
        assert player.chips == 250


class TestBetting:

    def test_bet_moves_chips(self, sample_player):
        assert sample_player.bet(100) == 100
        assert sample_player.chips == 900
        assert sample_player.current_bet == 100
        assert sample_player.total_bet == 100

    def test_bet_capped_at_stack(self):
        player = Player("A", 40)
        assert player.bet(100) == 40
        assert player.chips == 0
        assert player.state == PlayerState.ALL_IN

    def test_call_and_raise(self, sample_player):
        sample_player.call(10)
        assert sample_player.has_acted
        assert sample_player.last_action == "CALL 10"

        sample_player.raise_to(30)
        assert sample_player.current_bet == 30
        assert sample_player.total_bet == 30
        assert sample_player.last_action == "RAISE 30"

    def test_go_all_in(self, sample_player):
        assert sample_player.go_all_in() == 1000
        assert sample_player.state == PlayerState.ALL_IN
        assert not sample_player.can_act
        assert sample_player.is_in_hand

    def test_fold(self, sample_player):
        sample_player.fold()
        assert sample_player.state == PlayerState.FOLDED
        assert not sample_player.is_in_hand


class TestRoundState:

    def test_reset_for_new_round(self, sample_player):
        sample_player.deal_cards(parse_cards("As Kd"))
        sample_player.bet(50)
        sample_player.fold()

        sample_player.reset_for_new_round()
        assert len(sample_player.hand) == 0
        assert sample_player.current_bet == 0
        assert sample_player.total_bet == 0
        assert sample_player.state == PlayerState.ACTIVE

    def test_broke_player_is_out(self):
        player = Player("A", 0)
        player.reset_for_new_round()
        assert player.state == PlayerState.OUT
        assert not player.is_in_hand

    def test_reset_for_new_street_keeps_total(self, sample_player):
        sample_player.bet(50)
        sample_player.reset_for_new_street()
        assert sample_player.current_bet == 0
        assert sample_player.total_bet == 50
        assert not sample_player.has_acted

    def test_to_dict_hides_cards(self, sample_player):
        sample_player.deal_cards(parse_cards("As Kd"))
        assert "cards" not in sample_player.to_dict()
        shown = sample_player.to_dict(hide_cards=False)
        assert [c["text"] for c in shown["cards"]] == ["A♠", "K♦"]
