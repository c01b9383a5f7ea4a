"""Table configuration shared by the round controller, console, and analysis."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_BET: float = 10.0
"""Fixed wager per hand, in dollars."""

DEFAULT_MAX_DEPTH: int = 5
"""Depth cap for the dealer enumeration. Draws are enumerated while
depth <= max_depth, so the default allows six dealer draws beyond the
starting cards before a branch is recorded unresolved."""

DEALER_STAND_TOTAL: int = 17
"""Dealer stands on this total or higher (soft totals included)."""


@dataclass(frozen=True)
class TableConfig:
    """Per-session table settings.

    Attributes:
        bet:                Wager per hand in dollars.
        max_depth:          Dealer enumeration depth cap for win estimates.
        dealer_stand_total: Total at which the real dealer stands.
        seed:               Seed for ``numpy.random.default_rng``; None for
                            a non-deterministic session.
    """

    bet: float = DEFAULT_BET
    max_depth: int = DEFAULT_MAX_DEPTH
    dealer_stand_total: int = DEALER_STAND_TOTAL
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.bet <= 0:
            raise ValueError(f"bet must be positive, got {self.bet}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
