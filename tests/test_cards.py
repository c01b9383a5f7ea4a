"""Tests for blackjack_odds/engine/cards.py — encoding and string helpers."""

from __future__ import annotations

import pytest

from blackjack_odds.engine.cards import (
    CARD_VALUES,
    DECK_SIZE,
    RANK_ACE,
    card_name,
    card_rank,
    card_suit,
    card_to_str,
    card_value,
    hand_to_str,
    is_ace,
    str_to_card,
)


class TestEncoding:
    def test_rank_and_suit_round_trip_every_card(self):
        seen = {(card_rank(c), card_suit(c)) for c in range(DECK_SIZE)}
        assert len(seen) == 52

    def test_ace_of_spades(self):
        assert card_rank(51) == RANK_ACE
        assert card_suit(51) == 3

    def test_two_of_clubs(self):
        assert card_rank(0) == 0
        assert card_suit(0) == 0


class TestCardValue:
    def test_pip_cards_face_value(self):
        for rank_str, expected in [('2', 2), ('5', 5), ('9', 9), ('10', 10)]:
            assert card_value(str_to_card(rank_str + 'H')) == expected

    def test_faces_are_ten(self):
        for rank_str in ('J', 'Q', 'K'):
            assert card_value(str_to_card(rank_str + 'D')) == 10

    def test_ace_is_eleven(self):
        assert card_value(str_to_card('AC')) == 11

    def test_value_depends_only_on_rank(self):
        for rank in range(13):
            values = {card_value(rank * 4 + suit) for suit in range(4)}
            assert len(values) == 1

    def test_full_deck_value_multiset(self):
        values = [card_value(c) for c in range(DECK_SIZE)]
        assert values.count(10) == 16
        assert values.count(11) == 4
        assert sorted(set(values)) == list(CARD_VALUES)


class TestStrings:
    def test_card_to_str(self):
        assert card_to_str(0) == '2C'
        assert card_to_str(51) == 'AS'
        assert card_to_str(32) == '10C'

    def test_str_to_card_inverse(self):
        for card in range(DECK_SIZE):
            assert str_to_card(card_to_str(card)) == card

    def test_str_to_card_lowercase(self):
        assert str_to_card('as') == 51

    @pytest.mark.parametrize('bad', ['', 'Z', '1C', '11H', 'AX', '10'])
    def test_str_to_card_rejects_garbage(self, bad):
        with pytest.raises(ValueError):
            str_to_card(bad)

    def test_card_name(self):
        assert card_name(str_to_card('AS')) == 'A of Spades'
        assert card_name(str_to_card('10H')) == '10 of Hearts'
        assert card_name(str_to_card('QD')) == 'Q of Diamonds'

    def test_hand_to_str(self):
        assert hand_to_str((48, 51)) == 'AC AS'

    def test_is_ace(self):
        assert is_ace(str_to_card('AD'))
        assert not is_ace(str_to_card('KD'))
