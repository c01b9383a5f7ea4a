"""
Card constants, encoding, and human-readable I/O helpers.

Card encoding (integer 0–51):
    rank_index = card // 4  ->  0=2, 1=3, ..., 7=9, 8=10, 9=J, 10=Q, 11=K, 12=A
    suit_index = card % 4   ->  0=C, 1=D, 2=H, 3=S

Cards are plain ints so hands can be tuples and frequency tables can be
built with a single integer division. String representations are used
exclusively at I/O boundaries.
"""

from __future__ import annotations

# Blackjack value lookup: index matches rank_index.
# Ace (index 12) is 11 here; soft reduction happens in hand.py.
RANK_VALUES: list[int] = [2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 10, 10, 11]

RANK_NAMES: list[str] = ['2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A']
SUIT_NAMES: list[str] = ['C', 'D', 'H', 'S']
SUIT_LONG_NAMES: list[str] = ['Clubs', 'Diamonds', 'Hearts', 'Spades']

RANK_ACE: int = 12

ACE_VALUE: int = 11
ACE_REDUCTION: int = 10   # Ace drops from 11 to 1

DECK_SIZE: int = 52

# Distinct blackjack values in ascending order: 2..10, then Ace (11).
CARD_VALUES: tuple[int, ...] = (2, 3, 4, 5, 6, 7, 8, 9, 10, 11)


def card_rank(card: int) -> int:
    """Return the rank index (0–12) of a card.

    Examples:
        >>> card_rank(0)   # 2 of Clubs
        0
        >>> card_rank(51)  # Ace of Spades
        12
    """
    return card // 4


def card_suit(card: int) -> int:
    """Return the suit index (0–3) of a card."""
    return card % 4


def card_value(card: int) -> int:
    """Return the blackjack value of a card (Ace = 11 before soft reduction).

    Examples:
        >>> card_value(0)    # 2 of Clubs
        2
        >>> card_value(36)   # Jack of Clubs
        10
        >>> card_value(48)   # Ace of Clubs
        11
    """
    return RANK_VALUES[card // 4]


def is_ace(card: int) -> bool:
    return card // 4 == RANK_ACE


def card_to_str(card: int) -> str:
    """Convert a card integer to its short string form.

    Examples:
        >>> card_to_str(0)
        '2C'
        >>> card_to_str(51)
        'AS'
        >>> card_to_str(32)
        '10C'
    """
    return RANK_NAMES[card // 4] + SUIT_NAMES[card % 4]


def card_name(card: int) -> str:
    """Long display name used by the console.

    Examples:
        >>> card_name(51)
        'A of Spades'
        >>> card_name(34)
        '10 of Hearts'
    """
    return f"{RANK_NAMES[card // 4]} of {SUIT_LONG_NAMES[card % 4]}"


def str_to_card(s: str) -> int:
    """Parse a short card string to its integer encoding.

    The format is <rank><suit> where suit is the last character.
    Rank can be '2'-'9', '10', 'J', 'Q', 'K', or 'A'.
    Suit can be 'C', 'D', 'H', or 'S'.

    Raises:
        ValueError: If the rank or suit is not recognised.

    Examples:
        >>> str_to_card('2C')
        0
        >>> str_to_card('AS')
        51
        >>> str_to_card('10C')
        32
    """
    suit_char = s[-1:].upper()
    rank_str = s[:-1].upper()
    if rank_str not in RANK_NAMES or suit_char not in SUIT_NAMES:
        raise ValueError(f"Unrecognised card string: {s!r}")
    return RANK_NAMES.index(rank_str) * 4 + SUIT_NAMES.index(suit_char)


def hand_to_str(cards: tuple[int, ...]) -> str:
    """Convert a hand to a space-separated short string.

    Examples:
        >>> hand_to_str((48, 51))
        'AC AS'
    """
    return ' '.join(card_to_str(c) for c in cards)
