"""
Shared pytest fixtures for the blackjack-odds tests.

Provides convenience wrappers around str_to_card for building known hands.
"""

from __future__ import annotations

import pytest

from blackjack_odds.engine.cards import str_to_card
from blackjack_odds.engine.deck import Shoe, create_shoe


def hand(*card_strs: str) -> tuple[int, ...]:
    """Build a hand tuple from human-readable card strings.

    Examples:
        >>> hand('AS', 'AC')
        (51, 48)
        >>> hand('7C', '7D', '7H')
        (20, 21, 22)
    """
    return tuple(str_to_card(s) for s in card_strs)


@pytest.fixture
def fresh_shoe() -> Shoe:
    """Return a full 52-card shoe in canonical order."""
    return create_shoe()


@pytest.fixture
def h():
    """Expose the hand() helper as a fixture for convenience."""
    return hand
