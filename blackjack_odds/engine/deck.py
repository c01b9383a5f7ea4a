"""
Shoe creation, shuffling, and card dealing.

A shoe is a numpy int8 array holding all 52 cards in dealing order plus a
cursor. Cards before the cursor have been dealt; cards at or after it are
still undealt. Dealing advances the cursor and never revisits a card.

Shuffling takes an explicit ``numpy.random.Generator`` so that a whole
hand can be replayed from a seed. Tests and scripted scenarios bypass
shuffling entirely with ``stacked_shoe``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .cards import DECK_SIZE, str_to_card


@dataclass
class Shoe:
    """Ordered single-deck shoe with a dealing cursor."""

    cards: np.ndarray = field(default_factory=lambda: np.arange(DECK_SIZE, dtype=np.int8))
    position: int = 0

    def __len__(self) -> int:
        return cards_remaining(self)


def create_shoe() -> Shoe:
    """Create a fresh 52-card shoe in canonical (unshuffled) order.

    Examples:
        >>> shoe = create_shoe()
        >>> cards_remaining(shoe)
        52
    """
    return Shoe()


def shuffle_shoe(shoe: Shoe, rng: np.random.Generator) -> None:
    """Shuffle all 52 cards in place and reset the cursor.

    Args:
        shoe: Shoe to shuffle — modified in place.
        rng:  Random source; pass ``np.random.default_rng(seed)`` for
              reproducible hands.
    """
    rng.shuffle(shoe.cards)
    shoe.position = 0


def shuffled_shoe(seed: int | None = None) -> Shoe:
    """Return a freshly shuffled shoe drawn from ``default_rng(seed)``."""
    shoe = create_shoe()
    shuffle_shoe(shoe, np.random.default_rng(seed))
    return shoe


def stacked_shoe(top_cards: Sequence[int | str]) -> Shoe:
    """Build a shoe whose first cards are dealt in exactly the given order.

    The remaining cards follow in canonical order. Cards may be given as
    integers or short strings ('AS', '10H').

    Raises:
        ValueError: If a card is repeated or outside 0–51.

    Examples:
        >>> shoe = stacked_shoe(['AS', 'KH'])
        >>> deal_card(shoe), deal_card(shoe)
        (51, 46)
    """
    top = [str_to_card(c) if isinstance(c, str) else int(c) for c in top_cards]
    if len(set(top)) != len(top):
        raise ValueError(f"Duplicate cards in stacked order: {top}")
    if any(not 0 <= c < DECK_SIZE for c in top):
        raise ValueError(f"Card index out of range in stacked order: {top}")

    chosen = set(top)
    rest = [c for c in range(DECK_SIZE) if c not in chosen]
    return Shoe(cards=np.array(top + rest, dtype=np.int8))


def cards_remaining(shoe: Shoe) -> int:
    """Return the number of undealt cards."""
    return len(shoe.cards) - shoe.position


def remaining_cards(shoe: Shoe) -> tuple[int, ...]:
    """Return a snapshot of every undealt card.

    The snapshot is a tuple, so later deals do not change it.

    Examples:
        >>> shoe = create_shoe()
        >>> _ = deal_card(shoe)
        >>> len(remaining_cards(shoe))
        51
    """
    return tuple(int(c) for c in shoe.cards[shoe.position:])


def deal_card(shoe: Shoe) -> int:
    """Deal the next card and advance the cursor.

    Args:
        shoe: Mutable shoe — its cursor is advanced.

    Returns:
        The integer index of the dealt card.

    Raises:
        ValueError: If the shoe is exhausted.
    """
    if shoe.position >= len(shoe.cards):
        raise ValueError("Cannot deal from an empty shoe.")
    card = int(shoe.cards[shoe.position])
    shoe.position += 1
    return card


def build_undealt_from_hands(*hands: tuple[int, ...]) -> tuple[int, ...]:
    """Return every card of a full deck that is not in any of the given hands.

    Useful for building estimator inputs where specific cards are known.

    Examples:
        >>> len(build_undealt_from_hands((51, 47), (48,)))
        49
    """
    seen = {card for hand in hands for card in hand}
    return tuple(c for c in range(DECK_SIZE) if c not in seen)
