"""
Settlement and payout calculation.

Settlement priority (highest to lowest):
    1. Both blackjack        → push
    2. Player blackjack      → player wins 3:2
    3. Dealer blackjack      → player loses 1 unit
    4. Player bust (>21)     → player loses 1 unit (dealer hand irrelevant)
    5. Dealer bust (>21)     → player wins 1 unit
    6. Total comparison      → higher total wins 1:1, equal totals push

Payout convention (from player's perspective):
    +N  = player wins N units
    -N  = player loses N units
     0  = push (bet returned)
"""

from __future__ import annotations

from enum import Enum, auto

from .hand import calculate_total, is_blackjack

BLACKJACK_PAYOUT: float = 1.5


class Outcome(Enum):
    WIN = auto()
    LOSS = auto()
    PUSH = auto()


# ─── Core settlement function ─────────────────────────────────────────────────

def settle_hand(
    player_cards: tuple[int, ...],
    dealer_cards: tuple[int, ...],
) -> tuple[Outcome, float]:
    """Determine the outcome and payout for a completed hand.

    Args:
        player_cards: Player's final hand.
        dealer_cards: Dealer's final hand (after the dealer has played out,
                      or the initial two cards when the player busted or
                      either side holds a natural).

    Returns:
        (Outcome, payout) where payout is in units from the player's
        perspective.
    """
    player_bj = is_blackjack(player_cards)
    dealer_bj = is_blackjack(dealer_cards)

    # ── Naturals ──────────────────────────────────────────────────────────────
    if player_bj and dealer_bj:
        return Outcome.PUSH, 0.0
    if player_bj:
        return Outcome.WIN, BLACKJACK_PAYOUT
    if dealer_bj:
        return Outcome.LOSS, -1.0

    player_total = calculate_total(player_cards)
    if player_total > 21:
        return Outcome.LOSS, -1.0

    dealer_total = calculate_total(dealer_cards)
    if dealer_total > 21:
        return Outcome.WIN, 1.0

    return compare_totals(player_total, dealer_total)


def compare_totals(player_total: int, dealer_total: int) -> tuple[Outcome, float]:
    """Compare two non-bust totals at 1:1.

    Examples:
        >>> compare_totals(20, 18)
        (<Outcome.WIN: 1>, 1.0)
        >>> compare_totals(19, 19)
        (<Outcome.PUSH: 3>, 0.0)
    """
    if player_total > dealer_total:
        return Outcome.WIN, 1.0
    if dealer_total > player_total:
        return Outcome.LOSS, -1.0
    return Outcome.PUSH, 0.0


# ─── Convenience helpers ──────────────────────────────────────────────────────

def calculate_payout(payout_units: float, bet: float) -> float:
    """Convert a payout in units to net dollars.

    Examples:
        >>> calculate_payout(1.5, 10.0)
        15.0
        >>> calculate_payout(-1.0, 10.0)
        -10.0
    """
    return payout_units * bet


def amount_returned(payout_units: float, bet: float) -> float:
    """Dollars handed back to the player: stake plus winnings, 0 on a loss.

    Examples:
        >>> amount_returned(1.0, 10.0)
        20.0
        >>> amount_returned(1.5, 10.0)
        25.0
        >>> amount_returned(0.0, 10.0)
        10.0
    """
    if payout_units < 0:
        return 0.0
    return bet + payout_units * bet
