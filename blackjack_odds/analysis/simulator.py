"""
Monte Carlo cross-check for the exact dealer enumeration.

Samples dealer play-outs by shuffling the undealt cards and drawing from
the top, using the same transition (``draw_total``), stand total, and
depth cap as ``solvers.dealer_outcomes``. With enough trials the sampled
win percentage must fall close to the exact figure; a gap beyond a few
standard errors points at a weighting bug in the enumeration.

Draws are vectorised: each trial is one row of a permuted value matrix and
the dealer total advances column by column for every still-drawing row.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from blackjack_odds.engine.cards import ACE_REDUCTION, ACE_VALUE, RANK_VALUES
from blackjack_odds.engine.config import DEALER_STAND_TOTAL, DEFAULT_MAX_DEPTH
from blackjack_odds.engine.deck import deal_card, remaining_cards, shuffled_shoe
from blackjack_odds.engine.hand import calculate_total
from blackjack_odds.solvers.win_probability import estimate_win_probability

# ─── Result types ─────────────────────────────────────────────────────────────


@dataclass
class SimulationResult:
    """Sampled outcome percentages for one (player total, dealer total, deck) query.

    Attributes:
        n_trials:    Number of sampled dealer play-outs.
        win_pct:     Percentage of trials the player wins.
        loss_pct:    Percentage of trials the player loses.
        push_pct:    Percentage of trials that tie.
        ci_95_low:   Lower bound of the 95% confidence interval for win_pct.
        ci_95_high:  Upper bound of the 95% confidence interval for win_pct.
        final_totals: Raw per-trial dealer totals (int64), or None unless
                      requested.
    """

    n_trials: int
    win_pct: float
    loss_pct: float
    push_pct: float
    ci_95_low: float
    ci_95_high: float
    final_totals: np.ndarray | None = None

    def __str__(self) -> str:
        return (
            f"Trials: {self.n_trials:,} | "
            f"Win: {self.win_pct:.2f}% | Loss: {self.loss_pct:.2f}% | "
            f"Push: {self.push_pct:.2f}% | "
            f"95% CI: [{self.ci_95_low:.2f}, {self.ci_95_high:.2f}]"
        )


@dataclass
class ValidationResult:
    """Exact estimate next to its Monte Carlo counterpart."""

    player_cards: tuple[int, ...]
    dealer_upcard: int
    exact_win_pct: float
    sampled: SimulationResult

    @property
    def delta(self) -> float:
        return self.sampled.win_pct - self.exact_win_pct

    @property
    def within_ci(self) -> bool:
        return self.sampled.ci_95_low <= self.exact_win_pct <= self.sampled.ci_95_high


# ─── Sampling ─────────────────────────────────────────────────────────────────


def simulate_dealer_sampled(
    player_total: int,
    dealer_total: int,
    undealt_cards: tuple[int, ...],
    n_trials: int = 20_000,
    seed: int | None = 42,
    max_depth: int = DEFAULT_MAX_DEPTH,
    stand_total: int = DEALER_STAND_TOTAL,
    return_totals: bool = False,
) -> SimulationResult:
    """Sample dealer play-outs and tally them against a fixed player total.

    Args:
        player_total:  Player's standing total (assumed <= 21).
        dealer_total:  Dealer's known total.
        undealt_cards: Cards the dealer may draw from.
        n_trials:      Number of play-outs to sample.
        seed:          Seed for ``np.random.default_rng``.
        max_depth:     Same depth cap as the exact enumeration.
        stand_total:   Dealer stands at or above this total.
        return_totals: Attach per-trial dealer totals to the result.

    Returns:
        SimulationResult with win/loss/push percentages and a 95% CI.
    """
    if n_trials <= 0:
        raise ValueError(f"n_trials must be positive, got {n_trials}")

    rng = np.random.default_rng(seed)
    values = np.array([RANK_VALUES[c // 4] for c in undealt_cards], dtype=np.int64)
    totals = np.full(n_trials, dealer_total, dtype=np.int64)

    n_draws = min(max_depth + 1, len(values))
    if n_draws > 0:
        draws = rng.permuted(np.tile(values, (n_trials, 1)), axis=1)[:, :n_draws]
        for col in range(n_draws):
            drawing = totals < stand_total
            drawn = draws[:, col]
            new_totals = totals + drawn
            new_totals = np.where(
                (new_totals > 21) & (drawn == ACE_VALUE), new_totals - ACE_REDUCTION, new_totals
            )
            totals = np.where(drawing, new_totals, totals)

    wins = int(np.count_nonzero((totals > 21) | (player_total > totals)))
    losses = int(np.count_nonzero((totals <= 21) & (player_total < totals)))
    pushes = n_trials - wins - losses

    p = wins / n_trials
    margin = 1.96 * math.sqrt(p * (1.0 - p) / n_trials) * 100.0

    return SimulationResult(
        n_trials=n_trials,
        win_pct=100.0 * p,
        loss_pct=100.0 * losses / n_trials,
        push_pct=100.0 * pushes / n_trials,
        ci_95_low=100.0 * p - margin,
        ci_95_high=100.0 * p + margin,
        final_totals=totals if return_totals else None,
    )


# ─── Validation convenience ───────────────────────────────────────────────────


def validate_hand(
    player_cards: tuple[int, ...],
    dealer_upcard: int,
    undealt_cards: tuple[int, ...],
    n_trials: int = 20_000,
    seed: int | None = 42,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ValidationResult:
    """Compare the exact estimate with a sampled one for a known position."""
    exact = estimate_win_probability(
        player_cards, (dealer_upcard,), undealt_cards, max_depth=max_depth
    )
    sampled = simulate_dealer_sampled(
        calculate_total(player_cards),
        calculate_total((dealer_upcard,)),
        undealt_cards,
        n_trials=n_trials,
        seed=seed,
        max_depth=max_depth,
    )
    return ValidationResult(player_cards, dealer_upcard, exact, sampled)


def run_validation(
    n_hands: int = 5,
    n_trials: int = 20_000,
    seed: int = 42,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[ValidationResult]:
    """Deal ``n_hands`` seeded initial positions and validate each one.

    Hands where the player already busts cannot occur on two cards, so every
    position is a standing-total query.
    """
    results = []
    for i in range(n_hands):
        shoe = shuffled_shoe(seed + i)
        p1, hole, p2, upcard = (deal_card(shoe) for _ in range(4))
        results.append(
            validate_hand(
                (p1, p2), upcard, remaining_cards(shoe),
                n_trials=n_trials, seed=seed + i, max_depth=max_depth,
            )
        )
    return results
