"""
Round controller: one complete hand of single-deck blackjack.

Hand flow:
    DEAL → INITIAL ESTIMATE → NATURALS → PLAYER_ACTION → DEALER_ACTION → SETTLEMENT

Deal order is player, dealer (hole card), player, dealer (up-card).

Win estimates are taken before the player's first decision and after
every hit. Each estimate sees only what the player sees: the dealer's
up-card total and the undealt cards. The hole card is already out of the
shoe, so it is in neither. Estimates are recorded as checkpoints on the
result and never influence play.

The dealer plays out from the real shoe: draw below the stand total, stand
at or above it (soft totals included).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from blackjack_odds.solvers.win_probability import estimate_win_probability

from .cards import hand_to_str
from .config import TableConfig
from .deck import Shoe, deal_card, remaining_cards
from .hand import calculate_total, is_blackjack, is_bust
from .rules import Outcome, calculate_payout, settle_hand

logger = logging.getLogger(__name__)


# ─── Enumerations ─────────────────────────────────────────────────────────────

class PlayerAction(Enum):
    HIT = auto()
    STAND = auto()


class Checkpoint(Enum):
    INITIAL = auto()
    AFTER_HIT = auto()


# ─── State / Result types ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProbabilityCheckpoint:
    """Win estimate taken at one decision point."""
    kind: Checkpoint
    player_cards: tuple[int, ...]
    dealer_upcard: int
    win_pct: float


@dataclass
class HandResult:
    """Result of a completed hand, from the player's perspective."""
    player_cards: tuple[int, ...]
    dealer_cards: tuple[int, ...]
    outcome: Outcome
    payout: float                # Signed units: +1.5 blackjack, +1 win, -1 loss, 0 push
    bet: float
    checkpoints: tuple[ProbabilityCheckpoint, ...]
    player_blackjack: bool
    dealer_blackjack: bool
    dealer_busted: bool

    @property
    def net(self) -> float:
        return calculate_payout(self.payout, self.bet)

    @property
    def win_probabilities(self) -> tuple[float, ...]:
        return tuple(cp.win_pct for cp in self.checkpoints)

    def __str__(self) -> str:
        net_str = f"+{self.net:.2f}" if self.net >= 0 else f"{self.net:.2f}"
        return (
            f"Player: {hand_to_str(self.player_cards)} "
            f"(total={calculate_total(self.player_cards)}) | "
            f"Dealer: {hand_to_str(self.dealer_cards)} "
            f"(total={calculate_total(self.dealer_cards)}) | "
            f"{self.outcome.name} {net_str}"
        )


# ─── Strategy and observer types ──────────────────────────────────────────────

# player_strategy(player_cards, dealer_upcard) -> PlayerAction
PlayerStrategy = Callable[[tuple[int, ...], int], PlayerAction]


class HandObserver:
    """Receives hand events as they happen. Default methods do nothing."""

    def checkpoint(self, checkpoint: ProbabilityCheckpoint, dealer_cards: tuple[int, ...]) -> None:
        pass

    def dealer_reveal(self, dealer_cards: tuple[int, ...]) -> None:
        pass

    def dealer_draw(self, dealer_cards: tuple[int, ...]) -> None:
        pass

    def dealer_stand(self, dealer_cards: tuple[int, ...]) -> None:
        pass


def stand_on(threshold: int = 17) -> PlayerStrategy:
    """Return a strategy that hits below ``threshold`` and stands otherwise."""

    def _strategy(player_cards: tuple[int, ...], dealer_upcard: int) -> PlayerAction:
        if calculate_total(player_cards) >= threshold:
            return PlayerAction.STAND
        return PlayerAction.HIT

    return _strategy


def scripted(actions: list[PlayerAction]) -> PlayerStrategy:
    """Return a strategy that replays ``actions`` in order, then stands."""
    queue = list(actions)

    def _strategy(player_cards: tuple[int, ...], dealer_upcard: int) -> PlayerAction:
        return queue.pop(0) if queue else PlayerAction.STAND

    return _strategy


# ─── Core game flow ───────────────────────────────────────────────────────────

def play_hand(
    shoe: Shoe,
    player_strategy: PlayerStrategy = stand_on(17),
    config: TableConfig = TableConfig(),
    observer: HandObserver | None = None,
) -> HandResult:
    """Play a complete hand from the shoe and return the result.

    Args:
        shoe:            Shoe to deal from; its cursor advances.
        player_strategy: Callable for player hit/stand decisions.
        config:          Bet, estimator depth cap, and dealer stand total.
        observer:        Optional event sink (console rendering, tests).

    Returns:
        HandResult including every probability checkpoint in order.
    """
    observer = observer or HandObserver()
    checkpoints: list[ProbabilityCheckpoint] = []

    # ── Deal ──────────────────────────────────────────────────────────────────
    p1 = deal_card(shoe)
    hole = deal_card(shoe)
    p2 = deal_card(shoe)
    upcard = deal_card(shoe)
    player_cards = (p1, p2)
    dealer_cards = (hole, upcard)

    def record(kind: Checkpoint) -> None:
        pct = estimate_win_probability(
            player_cards,
            (upcard,),
            remaining_cards(shoe),
            max_depth=config.max_depth,
            stand_total=config.dealer_stand_total,
        )
        cp = ProbabilityCheckpoint(kind, player_cards, upcard, pct)
        checkpoints.append(cp)
        logger.debug("checkpoint %s: player=%s win=%.2f%%",
                     kind.name, hand_to_str(player_cards), pct)
        observer.checkpoint(cp, dealer_cards)

    record(Checkpoint.INITIAL)

    # ── Naturals ──────────────────────────────────────────────────────────────
    player_bj = is_blackjack(player_cards)
    dealer_bj = is_blackjack(dealer_cards)
    if player_bj or dealer_bj:
        return _finish(player_cards, dealer_cards, config, checkpoints, False)

    # ── Player action ─────────────────────────────────────────────────────────
    while True:
        action = player_strategy(player_cards, upcard)
        if action == PlayerAction.STAND:
            break
        player_cards = player_cards + (deal_card(shoe),)
        record(Checkpoint.AFTER_HIT)
        if is_bust(player_cards):
            break

    if is_bust(player_cards):
        return _finish(player_cards, dealer_cards, config, checkpoints, False)

    # ── Dealer action ─────────────────────────────────────────────────────────
    observer.dealer_reveal(dealer_cards)
    dealer_cards = _dealer_action_phase(dealer_cards, shoe, config.dealer_stand_total, observer)

    return _finish(player_cards, dealer_cards, config, checkpoints, is_bust(dealer_cards))


def _dealer_action_phase(
    dealer_cards: tuple[int, ...],
    shoe: Shoe,
    stand_total: int,
    observer: HandObserver,
) -> tuple[int, ...]:
    """Draw for the dealer until the stand total or a bust. Returns the final hand."""
    while calculate_total(dealer_cards) < stand_total:
        dealer_cards = dealer_cards + (deal_card(shoe),)
        observer.dealer_draw(dealer_cards)
    if not is_bust(dealer_cards):
        observer.dealer_stand(dealer_cards)
    return dealer_cards


def _finish(
    player_cards: tuple[int, ...],
    dealer_cards: tuple[int, ...],
    config: TableConfig,
    checkpoints: list[ProbabilityCheckpoint],
    dealer_busted: bool,
) -> HandResult:
    outcome, payout = settle_hand(player_cards, dealer_cards)
    result = HandResult(
        player_cards=player_cards,
        dealer_cards=dealer_cards,
        outcome=outcome,
        payout=payout,
        bet=config.bet,
        checkpoints=tuple(checkpoints),
        player_blackjack=is_blackjack(player_cards),
        dealer_blackjack=is_blackjack(dealer_cards),
        dealer_busted=dealer_busted,
    )
    logger.info("hand settled: %s", result)
    return result
