"""
Exact dealer outcome enumeration over the undealt cards.

Fixed dealer policy: draw below 17, stand on 17+. Given the dealer's known
total and the exact multiset of undealt cards, every draw sequence is
enumerated and weighted by how many ordered card sequences produce it.

State abstracted as a frequency table (count of undealt cards per
blackjack value, Ace = 11) so that cards of equal value share one branch.
A branch for value ``v`` carries multiplicity ``m`` (the number of undealt
cards of that value); the child distribution is scaled by ``m``.

Leaf weighting: a terminal reached after ``d`` draws is worth the number of
ordered ways to fill the remaining ``max_depth + 1 - d`` draw slots from the
cards left. All leaves then count full-length draw sequences, so

    weight(leaf) / total_weight == product of m/n along its path

and the grand total is perm(n, max_depth + 1) for n > max_depth.

Two approximations are kept on purpose:
    - A branch deeper than ``max_depth`` records its current, unresolved total.
    - Drawing an Ace that would bust converts only that Ace to 1. Earlier
      Aces already folded into ``dealer_total`` are never re-softened, so a
      soft dealer total followed by a big card can show as a bust.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from blackjack_odds.engine.cards import ACE_REDUCTION, ACE_VALUE, CARD_VALUES, RANK_VALUES
from blackjack_odds.engine.config import DEALER_STAND_TOTAL, DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

_VALUE_LOOKUP: np.ndarray = np.array(RANK_VALUES, dtype=np.int64)


# ─── OutcomeDistribution ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class OutcomeDistribution:
    """Weighted distribution over the dealer's final totals.

    Attributes:
        weights: {final_total: weight}. Totals above 21 are busts and keep
                 their magnitude. Weights are unnormalised integers; divide
                 by ``total_weight`` for probabilities.
    """

    weights: dict[int, int]

    @property
    def total_weight(self) -> int:
        return sum(self.weights.values())

    @property
    def bust_weight(self) -> int:
        return sum(w for total, w in self.weights.items() if total > 21)

    def probabilities(self) -> dict[int, float]:
        """Return {final_total: probability}; empty if the total weight is 0."""
        grand = self.total_weight
        if grand == 0:
            return {}
        return {total: w / grand for total, w in sorted(self.weights.items())}

    def bust_probability(self) -> float:
        grand = self.total_weight
        return self.bust_weight / grand if grand else 0.0


# ─── Composition helpers ──────────────────────────────────────────────────────


def value_counts(cards: Iterable[int]) -> tuple[int, ...]:
    """Group cards into a frequency table aligned with CARD_VALUES (2..10, Ace).

    Examples:
        >>> value_counts((str_to_card('KH'), str_to_card('10C'), str_to_card('AS')))
        (0, 0, 0, 0, 0, 0, 0, 0, 2, 1)
    """
    ranks = np.fromiter(cards, dtype=np.int64) // 4
    counts = np.bincount(_VALUE_LOOKUP[ranks], minlength=ACE_VALUE + 1)
    return tuple(int(c) for c in counts[CARD_VALUES[0]:])


def draw_total(dealer_total: int, value: int) -> int:
    """Dealer total after drawing one card of the given value.

    An Ace that would bust the dealer is counted as 1 instead; no other
    soft reduction is applied.

    Examples:
        >>> draw_total(16, 10)
        26
        >>> draw_total(16, 11)
        17
        >>> draw_total(5, 11)
        16
    """
    new_total = dealer_total + value
    if new_total > 21 and value == ACE_VALUE:
        new_total -= ACE_REDUCTION
    return new_total


def _completions(remaining: int, slots: int) -> int:
    """Ordered ways to fill ``slots`` draw positions from ``remaining`` cards."""
    return math.perm(remaining, max(0, min(slots, remaining)))


# ─── Dealer enumeration ───────────────────────────────────────────────────────


def _enumerate(
    dealer_total: int,
    counts: tuple[int, ...],
    depth: int,
    max_depth: int,
    stand_total: int,
    memo: dict,
) -> dict[int, int]:
    """Recursively enumerate dealer play-outs from one composition.

    Args:
        dealer_total: Dealer total before this draw.
        counts:       Undealt cards per value, aligned with CARD_VALUES.
        depth:        Draws already enumerated on this branch.
        max_depth:    Draws are enumerated while depth <= max_depth.
        stand_total:  Dealer stands at or above this total.
        memo:         Results shared within one top-level query. Callers
                      must not mutate the returned dicts.

    Returns:
        {final_total: weight} for this sub-tree.
    """
    key = (dealer_total, counts, depth)
    if key in memo:
        return memo[key]

    n = sum(counts)
    if depth > max_depth or dealer_total >= stand_total or n == 0:
        result = {dealer_total: _completions(n, max_depth + 1 - depth)}
        memo[key] = result
        return result

    acc: dict[int, int] = {}
    for i, m in enumerate(counts):
        if m == 0:
            continue
        new_total = draw_total(dealer_total, CARD_VALUES[i])
        child = counts[:i] + (m - 1,) + counts[i + 1:]
        sub = _enumerate(new_total, child, depth + 1, max_depth, stand_total, memo)
        for final, w in sub.items():
            acc[final] = acc.get(final, 0) + m * w

    memo[key] = acc
    return acc


def simulate_dealer_from_counts(
    dealer_total: int,
    counts: tuple[int, ...],
    max_depth: int = DEFAULT_MAX_DEPTH,
    stand_total: int = DEALER_STAND_TOTAL,
) -> OutcomeDistribution:
    """Enumerate dealer outcomes from a precomputed frequency table.

    The memo lives only for this call; nothing is kept between queries.

    Args:
        dealer_total: Dealer's current total as computed by the hand evaluator.
        counts:       Undealt cards per value (see ``value_counts``).
        max_depth:    Enumeration depth cap.
        stand_total:  Dealer stands at or above this total.

    Returns:
        OutcomeDistribution over final dealer totals.
    """
    if len(counts) != len(CARD_VALUES):
        raise ValueError(f"counts must have {len(CARD_VALUES)} entries, got {len(counts)}")
    memo: dict = {}
    weights = _enumerate(
        dealer_total, tuple(int(c) for c in counts), 0, max_depth, stand_total, memo
    )
    logger.debug("dealer enumeration visited %d states", len(memo))
    return OutcomeDistribution(weights=dict(sorted(weights.items())))


def simulate_dealer(
    dealer_total: int,
    undealt_cards: Iterable[int],
    max_depth: int = DEFAULT_MAX_DEPTH,
    stand_total: int = DEALER_STAND_TOTAL,
) -> OutcomeDistribution:
    """Enumerate the dealer's forced play-out against the undealt cards.

    Args:
        dealer_total:  Dealer's known total (never a raw card sum).
        undealt_cards: Every card not yet dealt, in any order.
        max_depth:     Enumeration depth cap.
        stand_total:   Dealer stands at or above this total.

    Returns:
        OutcomeDistribution; deterministic for a fixed input.

    Examples:
        >>> simulate_dealer(17, (0, 1, 2)).weights
        {17: 6}
    """
    counts = value_counts(undealt_cards)
    dist = simulate_dealer_from_counts(dealer_total, counts, max_depth, stand_total)
    logger.debug(
        "dealer enumeration: total=%d undealt=%d depth_cap=%d stand=%d -> %d buckets, weight=%d",
        dealer_total,
        sum(counts),
        max_depth,
        stand_total,
        len(dist.weights),
        dist.total_weight,
    )
    return dist
