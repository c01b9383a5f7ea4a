"""
Hand evaluation: best total with soft-ace reduction.

Every Ace starts at 11. While the total is over 21 and an Ace is still
counted at 11, that Ace drops to 1 (subtract 10). Totals are recomputed on
every call; adding a card can turn a soft hand hard.

All functions operate on tuples of card integers.
"""

from __future__ import annotations

from .cards import ACE_REDUCTION, RANK_VALUES, is_ace


def _reduce(cards: tuple[int, ...]) -> tuple[int, int]:
    """Return (best_total, aces_still_at_11) for a hand."""
    total = 0
    soft_aces = 0
    for card in cards:
        total += RANK_VALUES[card // 4]
        if is_ace(card):
            soft_aces += 1

    while total > 21 and soft_aces > 0:
        total -= ACE_REDUCTION
        soft_aces -= 1

    return total, soft_aces


def calculate_total(cards: tuple[int, ...]) -> int:
    """Calculate the best blackjack total for a hand.

    If even the all-Aces-low assignment busts, the bust total is returned
    (> 21). An empty hand totals 0.

    Examples:
        >>> calculate_total((str_to_card('AS'), str_to_card('7H')))
        18
        >>> calculate_total((str_to_card('AC'), str_to_card('AS'), str_to_card('9D')))
        21
        >>> calculate_total((str_to_card('KH'), str_to_card('QD'), str_to_card('5C')))
        25
    """
    return _reduce(cards)[0]


def is_soft(cards: tuple[int, ...]) -> bool:
    """Return True if an Ace is still counted as 11 in a non-bust total.

    Examples:
        >>> is_soft((str_to_card('AS'), str_to_card('6H')))   # soft 17
        True
        >>> is_soft((str_to_card('AS'), str_to_card('7H'), str_to_card('8D')))  # hard 16
        False
    """
    total, soft_aces = _reduce(cards)
    return soft_aces > 0 and total <= 21


def is_blackjack(cards: tuple[int, ...]) -> bool:
    """Two cards totalling 21."""
    return len(cards) == 2 and calculate_total(cards) == 21


def is_bust(cards: tuple[int, ...]) -> bool:
    return calculate_total(cards) > 21
