"""Blackjack with live win odds — console front end.

Subcommands:
  play      — interactive hands against the dealer, with a win estimate
              before the first decision and after every hit
  table     — exact win-probability table (player total × dealer up-card)
  validate  — Monte Carlo cross-check of the exact estimator

Run:
    blackjack-odds play --seed 7
    blackjack-odds table --plot win_table.png
"""

from __future__ import annotations

import argparse
import logging
from typing import Callable, Sequence

import numpy as np

from blackjack_odds.engine.cards import card_name, card_value
from blackjack_odds.engine.config import DEFAULT_BET, DEFAULT_MAX_DEPTH, TableConfig
from blackjack_odds.engine.deck import create_shoe, shuffle_shoe
from blackjack_odds.engine.game_state import (
    Checkpoint,
    HandObserver,
    HandResult,
    PlayerAction,
    PlayerStrategy,
    ProbabilityCheckpoint,
    play_hand,
)
from blackjack_odds.engine.hand import calculate_total, is_bust, is_soft
from blackjack_odds.engine.rules import Outcome, amount_returned

logger = logging.getLogger(__name__)

Reader = Callable[[str], str]
Writer = Callable[[str], None]

_BANNER = "=" * 40


# ─── Input ────────────────────────────────────────────────────────────────────


def prompt_choice(prompt: str, valid: str, read: Reader = input, write: Writer = print) -> str:
    """Read until the first character of a response is one of ``valid``.

    Matching is case-insensitive. Anything else prints a notice and asks
    again. EOFError from ``read`` propagates to the caller.

    Returns:
        The accepted character, lower-cased.
    """
    while True:
        response = read(prompt).strip().lower()
        if response and response[0] in valid:
            return response[0]
        write("Invalid choice. Please try again.")


# ─── Rendering ────────────────────────────────────────────────────────────────


def format_hand(cards: tuple[int, ...], hide_first: bool = False) -> str:
    names = [card_name(c) for c in cards]
    if hide_first and names:
        names[0] = "[Hidden Card]"
    return ", ".join(names)


def format_table(
    player_cards: tuple[int, ...],
    dealer_cards: tuple[int, ...],
    hide_dealer: bool,
) -> str:
    if hide_dealer:
        dealer_note = f"(Showing: {card_value(dealer_cards[1])})"
    else:
        dealer_note = f"(Total: {calculate_total(dealer_cards)})"
    soft_note = " - Soft" if is_soft(player_cards) else ""
    return (
        f"\nDealer's Hand: {format_hand(dealer_cards, hide_dealer)} {dealer_note}\n"
        f"\nPlayer's Hand: {format_hand(player_cards)} "
        f"(Total: {calculate_total(player_cards)}{soft_note})"
    )


def describe_result(result: HandResult) -> list[str]:
    """Settlement lines shown after a hand."""
    bet = result.bet
    paid = amount_returned(result.payout, bet)

    if result.player_blackjack and result.dealer_blackjack:
        return ["\nBoth have Blackjack! Push!"]
    if result.player_blackjack:
        return ["\nPlayer has Blackjack! Player wins 1.5x bet!", f"Payout: ${paid:.2f}"]
    if result.dealer_blackjack:
        return ["\nDealer has Blackjack! Player loses."]
    if calculate_total(result.player_cards) > 21:
        return [f"\nPlayer busts! Player loses ${bet:.2f}"]

    lines = [
        f"\n{_BANNER}",
        "              FINAL RESULTS",
        _BANNER,
        format_table(result.player_cards, result.dealer_cards, hide_dealer=False),
        "",
    ]
    if result.dealer_busted:
        lines.append(f"Dealer busts! Player wins ${paid:.2f}")
    elif result.outcome == Outcome.WIN:
        lines.append(f"Player wins ${paid:.2f}")
    elif result.outcome == Outcome.LOSS:
        lines.append(f"Dealer wins. Player loses ${bet:.2f}")
    else:
        lines.append(f"Push! Player keeps bet of ${bet:.2f}")
    return lines


class ConsoleObserver(HandObserver):
    """Prints hand events the way the table shows them."""

    def __init__(self, write: Writer = print) -> None:
        self.write = write
        self._player_cards: tuple[int, ...] = ()

    def checkpoint(self, checkpoint: ProbabilityCheckpoint, dealer_cards: tuple[int, ...]) -> None:
        self._player_cards = checkpoint.player_cards
        self.write(format_table(checkpoint.player_cards, dealer_cards, hide_dealer=True))
        if checkpoint.kind == Checkpoint.INITIAL:
            self.write("\n--- Initial Hand Analysis ---")
            self.write(f"Player's winning probability: {checkpoint.win_pct:.2f}%")
        elif not is_bust(checkpoint.player_cards):
            self.write(f"\nPlayer's winning probability after hit: {checkpoint.win_pct:.2f}%")

    def dealer_reveal(self, dealer_cards: tuple[int, ...]) -> None:
        self.write("\n--- Dealer's Turn ---")
        self.write(format_table(self._player_cards, dealer_cards, hide_dealer=False))

    def dealer_draw(self, dealer_cards: tuple[int, ...]) -> None:
        self.write("\nDealer hits...")
        self.write(
            f"Dealer's Hand: {format_hand(dealer_cards)} (Total: {calculate_total(dealer_cards)})"
        )

    def dealer_stand(self, dealer_cards: tuple[int, ...]) -> None:
        self.write("Dealer stands.")


def console_strategy(read: Reader = input, write: Writer = print) -> PlayerStrategy:
    """Player strategy that asks at the console."""

    def _strategy(player_cards: tuple[int, ...], dealer_upcard: int) -> PlayerAction:
        write("\n--- Player's Turn ---")
        write("Options: (h)it, (s)tand")
        if prompt_choice("Choice: ", "hs", read, write) == "h":
            return PlayerAction.HIT
        write("Player stands.")
        return PlayerAction.STAND

    return _strategy


# ─── Session ──────────────────────────────────────────────────────────────────


def play_session(
    config: TableConfig = TableConfig(),
    read: Reader = input,
    write: Writer = print,
) -> list[HandResult]:
    """Play hands until the player declines another or input ends.

    One generator seeded from ``config.seed`` shuffles every hand, so a
    seeded session replays identically.
    """
    rng = np.random.default_rng(config.seed)
    observer = ConsoleObserver(write)
    strategy = console_strategy(read, write)
    results: list[HandResult] = []

    write("Welcome to Blackjack!")
    write(f"Bet amount: ${config.bet:.2f} per hand")

    try:
        while True:
            write(f"\n{_BANNER}\n        BLACKJACK GAME START\n{_BANNER}")
            shoe = create_shoe()
            shuffle_shoe(shoe, rng)
            result = play_hand(shoe, strategy, config, observer)
            results.append(result)
            for line in describe_result(result):
                write(line)

            if prompt_choice("\nPlay another hand? (y/n): ", "yn", read, write) != "y":
                break
    except EOFError:
        logger.info("input closed; ending session after %d hands", len(results))

    write("\nThanks for playing!")
    return results


# ─── CLI ──────────────────────────────────────────────────────────────────────


def _cmd_play(args: argparse.Namespace) -> int:
    config = TableConfig(bet=args.bet, max_depth=args.max_depth, seed=args.seed)
    play_session(config)
    return 0


def _cmd_table(args: argparse.Namespace) -> int:
    import matplotlib

    matplotlib.use("Agg")  # file output only; must precede the pyplot import

    from blackjack_odds.analysis.heat_maps import (
        build_win_probability_matrix,
        format_matrix,
        plot_win_probability_heatmap,
    )

    matrix = build_win_probability_matrix(max_depth=args.max_depth)
    print(format_matrix(matrix))
    if args.plot:
        plot_win_probability_heatmap(matrix, show=False, save_path=args.plot)
        print(f"\nSaved: {args.plot}")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    from blackjack_odds.analysis.simulator import run_validation

    results = run_validation(
        n_hands=args.hands, n_trials=args.trials, seed=args.seed, max_depth=args.max_depth
    )
    for res in results:
        cards = ", ".join(card_name(c) for c in res.player_cards)
        print(f"Player: {cards} vs up-card {card_name(res.dealer_upcard)}")
        print(f"  exact:   {res.exact_win_pct:.2f}%")
        print(f"  sampled: {res.sampled}")
        print(f"  delta:   {res.delta:+.2f}  ({'within' if res.within_ci else 'OUTSIDE'} 95% CI)")
    return 0 if all(r.within_ci for r in results) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blackjack-odds",
        description="Single-deck blackjack with exact win-probability estimates.",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_play = sub.add_parser("play", help="Play interactive hands")
    p_play.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    p_play.add_argument("--bet", type=float, default=DEFAULT_BET, help="Bet per hand")
    p_play.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help="Dealer enumeration depth cap")
    p_play.set_defaults(func=_cmd_play)

    p_table = sub.add_parser("table", help="Print the exact win-probability table")
    p_table.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH)
    p_table.add_argument("--plot", default=None, help="Save a heat map PNG to this path")
    p_table.set_defaults(func=_cmd_table)

    p_val = sub.add_parser("validate", help="Cross-check exact odds against Monte Carlo")
    p_val.add_argument("--hands", type=int, default=5, help="Seeded positions to check")
    p_val.add_argument("--trials", type=int, default=20_000, help="Samples per position")
    p_val.add_argument("--seed", type=int, default=42)
    p_val.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH)
    p_val.set_defaults(func=_cmd_validate)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
