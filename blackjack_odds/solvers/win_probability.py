"""
Win-probability aggregation from a dealer outcome distribution.

The player's total is fixed at query time (the player is assumed to stand).
Each dealer bucket is classified against it:

    dealer > 21              → win
    player > dealer          → win
    player < dealer          → loss
    player == dealer         → push (neither win nor loss)

The win percentage divides the win weight by the distribution's grand
total weight, so unnormalised enumeration weights give true probabilities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from blackjack_odds.engine.config import DEALER_STAND_TOTAL, DEFAULT_MAX_DEPTH
from blackjack_odds.engine.hand import calculate_total

from .dealer_outcomes import OutcomeDistribution, simulate_dealer


@dataclass(frozen=True)
class OutcomeTally:
    """Win / loss / push weights for one player total."""

    win_weight: int
    loss_weight: int
    push_weight: int

    @property
    def total_weight(self) -> int:
        return self.win_weight + self.loss_weight + self.push_weight

    def _pct(self, weight: int) -> float:
        grand = self.total_weight
        return 100.0 * weight / grand if grand else 0.0

    @property
    def win_pct(self) -> float:
        return self._pct(self.win_weight)

    @property
    def loss_pct(self) -> float:
        return self._pct(self.loss_weight)

    @property
    def push_pct(self) -> float:
        return self._pct(self.push_weight)


def _weights(distribution: OutcomeDistribution | Mapping[int, int]) -> Mapping[int, int]:
    if isinstance(distribution, OutcomeDistribution):
        return distribution.weights
    return distribution


def tally_outcomes(
    player_total: int,
    distribution: OutcomeDistribution | Mapping[int, int],
) -> OutcomeTally:
    """Split a dealer distribution into win / loss / push weight.

    Examples:
        >>> tally_outcomes(20, {18: 3, 22: 5, 20: 2})
        OutcomeTally(win_weight=8, loss_weight=0, push_weight=2)
    """
    win = loss = push = 0
    for dealer_final, weight in _weights(distribution).items():
        if dealer_final > 21 or player_total > dealer_final:
            win += weight
        elif player_total < dealer_final:
            loss += weight
        else:
            push += weight
    return OutcomeTally(win_weight=win, loss_weight=loss, push_weight=push)


def win_probability(
    player_total: int,
    player_busted: bool,
    distribution: OutcomeDistribution | Mapping[int, int],
) -> float:
    """Return the player's win percentage in [0, 100].

    Args:
        player_total:  Player's current best total.
        player_busted: If True the dealer outcome is irrelevant and 0 is returned.
        distribution:  Dealer outcome distribution (or a plain {total: weight}).

    Returns:
        100 * win_weight / total_weight, or 0.0 for a bust or a zero-weight
        distribution.

    Examples:
        >>> win_probability(20, False, {18: 3, 22: 5, 20: 2})
        80.0
        >>> win_probability(25, True, {18: 3})
        0.0
    """
    if player_busted:
        return 0.0
    weights = _weights(distribution)
    grand = sum(weights.values())
    if grand == 0:
        return 0.0
    return 100.0 * tally_outcomes(player_total, weights).win_weight / grand


def estimate_win_probability(
    player_cards: tuple[int, ...],
    dealer_visible_cards: tuple[int, ...],
    undealt_cards: Iterable[int],
    max_depth: int = DEFAULT_MAX_DEPTH,
    stand_total: int = DEALER_STAND_TOTAL,
) -> float:
    """Evaluate both hands, enumerate the dealer, and aggregate.

    Only the dealer's visible cards are evaluated; a hidden hole card must
    not be passed here.

    Args:
        player_cards:         Player's current hand.
        dealer_visible_cards: Dealer cards the player can see.
        undealt_cards:        Snapshot of the undealt cards.
        max_depth:            Dealer enumeration depth cap.
        stand_total:          Total the dealer stands on; must match the table.

    Returns:
        Win percentage in [0, 100].
    """
    player_total = calculate_total(player_cards)
    if player_total > 21:
        return 0.0
    dealer_total = calculate_total(dealer_visible_cards)
    distribution = simulate_dealer(
        dealer_total, undealt_cards, max_depth=max_depth, stand_total=stand_total
    )
    return win_probability(player_total, False, distribution)
