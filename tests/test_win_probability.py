"""Tests for blackjack_odds/solvers/win_probability.py — aggregation into a win percentage."""

from __future__ import annotations

import pytest

from blackjack_odds.engine.deck import build_undealt_from_hands
from blackjack_odds.solvers.dealer_outcomes import OutcomeDistribution, simulate_dealer
from blackjack_odds.solvers.win_probability import (
    OutcomeTally,
    estimate_win_probability,
    tally_outcomes,
    win_probability,
)
from tests.conftest import hand


class TestWinProbability:
    def test_reference_distribution(self):
        # Wins: dealer bust (5) + dealer 18 (3); the 20-20 push (2) counts for neither.
        assert win_probability(20, False, {18: 3, 22: 5, 20: 2}) == pytest.approx(80.0)

    def test_accepts_outcome_distribution(self):
        dist = OutcomeDistribution(weights={18: 3, 22: 5, 20: 2})
        assert win_probability(20, False, dist) == pytest.approx(80.0)

    def test_busted_player_is_zero(self):
        assert win_probability(25, True, {22: 10}) == 0.0
        assert win_probability(12, True, {26: 1, 17: 1}) == 0.0

    def test_zero_weight_distribution_is_zero(self):
        assert win_probability(20, False, {}) == 0.0
        assert win_probability(20, False, {18: 0}) == 0.0

    def test_all_dealer_busts(self):
        assert win_probability(12, False, {22: 4, 26: 6}) == pytest.approx(100.0)

    def test_low_total_only_wins_on_bust(self):
        assert win_probability(12, False, {17: 1, 18: 1, 24: 2}) == pytest.approx(50.0)

    def test_unresolved_low_dealer_total(self):
        # A capped branch can leave the dealer below 17; it still compares by total.
        assert win_probability(16, False, {15: 1, 19: 1}) == pytest.approx(50.0)

    def test_within_bounds(self):
        undealt = build_undealt_from_hands(hand('10H', '6D', '9C', '7S'))
        dist = simulate_dealer(7, undealt)
        for total in range(4, 22):
            assert 0.0 <= win_probability(total, False, dist) <= 100.0


class TestTallyOutcomes:
    def test_reference(self):
        assert tally_outcomes(20, {18: 3, 22: 5, 20: 2}) == OutcomeTally(8, 0, 2)

    def test_percentages(self):
        tally = tally_outcomes(19, {18: 1, 19: 1, 20: 2})
        assert tally.win_pct == pytest.approx(25.0)
        assert tally.push_pct == pytest.approx(25.0)
        assert tally.loss_pct == pytest.approx(50.0)

    def test_empty_percentages(self):
        tally = tally_outcomes(19, {})
        assert tally.win_pct == tally.loss_pct == tally.push_pct == 0.0


class TestEstimateWinProbability:
    def test_busted_player(self):
        undealt = build_undealt_from_hands(hand('KH', 'QD', '5C', '7S'))
        assert estimate_win_probability(hand('KH', 'QD', '5C'), hand('7S'), undealt) == 0.0

    def test_matches_manual_composition(self):
        player = hand('10H', '8D')
        upcard = hand('6S')
        undealt = build_undealt_from_hands(player, upcard, hand('9C'))
        expected = win_probability(18, False, simulate_dealer(6, undealt))
        assert estimate_win_probability(player, upcard, undealt) == pytest.approx(expected)

    def test_higher_total_never_worse(self):
        upcard = hand('9S')
        undealt = build_undealt_from_hands(hand('10H', '9D', '10C', '10D'), upcard)
        p19 = estimate_win_probability(hand('10H', '9D'), upcard, undealt)
        p20 = estimate_win_probability(hand('10C', '10D'), upcard, undealt)
        assert p20 >= p19

    def test_player_21_vs_dealer_ace_below_certain(self):
        upcard = hand('AS')
        player = hand('7C', '7D', '7H')
        undealt = build_undealt_from_hands(player, upcard)
        pct = estimate_win_probability(player, upcard, undealt)
        assert 50.0 < pct < 100.0
