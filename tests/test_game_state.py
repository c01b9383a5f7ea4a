"""Tests for blackjack_odds/engine/game_state.py — full hand flow on stacked shoes.

Stacked shoes fix the deal order (player, hole, player, up-card, then hits
and dealer draws), so every checkpoint and settlement is reproducible.
"""

from __future__ import annotations

import pytest

from blackjack_odds.console import ConsoleObserver
from blackjack_odds.engine.config import TableConfig
from blackjack_odds.engine.deck import build_undealt_from_hands, shuffled_shoe, stacked_shoe
from blackjack_odds.engine.game_state import (
    Checkpoint,
    HandObserver,
    PlayerAction,
    play_hand,
    scripted,
    stand_on,
)
from blackjack_odds.engine.rules import Outcome
from blackjack_odds.solvers.win_probability import estimate_win_probability
from tests.conftest import hand

HIT = PlayerAction.HIT
STAND = PlayerAction.STAND


class RecordingObserver(HandObserver):
    def __init__(self):
        self.events = []

    def checkpoint(self, checkpoint, dealer_cards):
        self.events.append(('checkpoint', checkpoint.kind, checkpoint.win_pct))

    def dealer_reveal(self, dealer_cards):
        self.events.append(('reveal', dealer_cards))

    def dealer_draw(self, dealer_cards):
        self.events.append(('draw', dealer_cards))

    def dealer_stand(self, dealer_cards):
        self.events.append(('stand', dealer_cards))


# ─── End-to-end scenario ──────────────────────────────────────────────────────


class TestScriptedHand:
    """Player 10-6 vs dealer 9 (hole) / 7 (up); hits a 4, stands; dealer draws a 5."""

    ORDER = ['10H', '9C', '6D', '7S', '4H', '5C']

    def _play(self, observer=None):
        return play_hand(stacked_shoe(self.ORDER), scripted([HIT, STAND]), observer=observer)

    def test_final_hands(self):
        result = self._play()
        assert result.player_cards == hand('10H', '6D', '4H')
        assert result.dealer_cards == hand('9C', '7S', '5C')

    def test_settlement(self):
        result = self._play()
        assert result.outcome == Outcome.LOSS
        assert result.payout == -1.0
        assert result.net == -10.0
        assert not result.dealer_busted

    def test_checkpoint_sequence(self):
        result = self._play()
        assert [cp.kind for cp in result.checkpoints] == [Checkpoint.INITIAL, Checkpoint.AFTER_HIT]
        assert [cp.dealer_upcard for cp in result.checkpoints] == list(hand('7S', '7S'))

    def test_checkpoints_use_only_visible_information(self):
        result = self._play()
        initial_undealt = build_undealt_from_hands(hand('10H', '9C', '6D', '7S'))
        after_hit_undealt = build_undealt_from_hands(hand('10H', '9C', '6D', '7S', '4H'))
        expected = (
            estimate_win_probability(hand('10H', '6D'), hand('7S'), initial_undealt),
            estimate_win_probability(hand('10H', '6D', '4H'), hand('7S'), after_hit_undealt),
        )
        assert result.win_probabilities == pytest.approx(expected)

    def test_recorded_probabilities_at_depth_one(self):
        # One up-card of 7 and at most two enumerated dealer draws:
        # 16 wins 633 of 48*47 draw pairs; after the 4, 20 wins 1903 of 47*46.
        observer_lines = []
        result = play_hand(
            stacked_shoe(self.ORDER),
            scripted([HIT, STAND]),
            TableConfig(max_depth=1),
            ConsoleObserver(observer_lines.append),
        )
        assert result.win_probabilities == pytest.approx((28.0585106, 88.0203515))
        assert result.win_probabilities[0] == pytest.approx(100 * 633 / 2256)
        assert result.win_probabilities[1] == pytest.approx(100 * 1903 / 2162)
        assert "Player's winning probability: 28.06%" in observer_lines
        assert "\nPlayer's winning probability after hit: 88.02%" in observer_lines

    def test_hitting_to_20_improves_odds(self):
        initial, after_hit = self._play().win_probabilities
        assert after_hit > initial

    def test_replay_is_identical(self):
        assert self._play().win_probabilities == self._play().win_probabilities

    def test_observer_events(self):
        observer = RecordingObserver()
        self._play(observer)
        kinds = [e[0] for e in observer.events]
        assert kinds == ['checkpoint', 'checkpoint', 'reveal', 'draw', 'stand']
        assert observer.events[3][1] == hand('9C', '7S', '5C')


class TestPlayerBust:
    def test_bust_loses_without_dealer_play(self):
        observer = RecordingObserver()
        result = play_hand(
            stacked_shoe(['10H', '9C', '6D', '7S', 'KH']), scripted([HIT]), observer=observer
        )
        assert result.outcome == Outcome.LOSS
        assert result.dealer_cards == hand('9C', '7S')
        assert result.win_probabilities[-1] == 0.0
        assert all(e[0] == 'checkpoint' for e in observer.events)


class TestNaturals:
    def test_player_blackjack(self):
        result = play_hand(stacked_shoe(['AS', '9C', 'KH', '7S']), scripted([HIT]))
        assert result.outcome == Outcome.WIN
        assert result.payout == 1.5
        assert result.net == 15.0
        assert result.player_blackjack
        assert len(result.player_cards) == 2
        assert len(result.checkpoints) == 1

    def test_dealer_blackjack(self):
        result = play_hand(stacked_shoe(['10H', 'AC', '9D', 'KD']), scripted([HIT]))
        assert result.outcome == Outcome.LOSS
        assert result.dealer_blackjack
        assert len(result.player_cards) == 2

    def test_both_blackjack_push(self):
        result = play_hand(stacked_shoe(['AS', 'AC', 'KH', 'KD']))
        assert result.outcome == Outcome.PUSH
        assert result.net == 0.0


class TestDealerPlay:
    def test_dealer_busts(self):
        result = play_hand(stacked_shoe(['10H', '10C', '8D', '6S', '9H']), scripted([STAND]))
        assert result.dealer_cards == hand('10C', '6S', '9H')
        assert result.dealer_busted
        assert result.outcome == Outcome.WIN
        assert result.net == 10.0

    def test_dealer_stands_on_soft_17(self):
        result = play_hand(stacked_shoe(['10H', 'AC', '8D', '6S']), scripted([STAND]))
        assert result.dealer_cards == hand('AC', '6S')
        assert result.outcome == Outcome.WIN

    def test_push(self):
        result = play_hand(stacked_shoe(['10H', '10C', '8D', '8S']), scripted([STAND]))
        assert result.outcome == Outcome.PUSH

    def test_bet_from_config(self):
        result = play_hand(
            stacked_shoe(['10H', '10C', '8D', '6S', '9H']),
            scripted([STAND]),
            config=TableConfig(bet=25.0),
        )
        assert result.net == 25.0

    def test_estimator_uses_table_stand_total(self):
        order = ['10H', '2C', '8D', 'KS']
        undealt = build_undealt_from_hands(hand(*order))
        player, upcard = hand('10H', '8D'), hand('KS')
        result = play_hand(
            stacked_shoe(order), scripted([STAND]), TableConfig(dealer_stand_total=18)
        )
        on_18 = estimate_win_probability(player, upcard, undealt, stand_total=18)
        on_17 = estimate_win_probability(player, upcard, undealt, stand_total=17)
        assert result.win_probabilities == pytest.approx((on_18,))
        # A dealer who hits 17 takes away every 18-over-17 win.
        assert on_18 < on_17


class TestStrategies:
    def test_stand_on_threshold(self):
        strategy = stand_on(17)
        assert strategy(hand('10H', '6D'), 0) == HIT
        assert strategy(hand('10H', '7D'), 0) == STAND

    def test_scripted_then_stands(self):
        strategy = scripted([HIT])
        assert strategy((), 0) == HIT
        assert strategy((), 0) == STAND

    def test_seeded_shoes_replay(self):
        a = play_hand(shuffled_shoe(11), stand_on(17))
        b = play_hand(shuffled_shoe(11), stand_on(17))
        assert a.player_cards == b.player_cards
        assert a.dealer_cards == b.dealer_cards
        assert a.win_probabilities == b.win_probabilities


class TestTableConfig:
    def test_defaults(self):
        config = TableConfig()
        assert config.bet == 10.0
        assert config.max_depth == 5
        assert config.dealer_stand_total == 17

    @pytest.mark.parametrize('kwargs', [{'bet': 0}, {'bet': -5.0}, {'max_depth': -1}])
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValueError):
            TableConfig(**kwargs)
