"""Win-probability heat map: player standing total vs dealer up-card.

One public data-builder returns a NumPy matrix that can be used
programmatically or passed to the plot / text helpers:

    build_win_probability_matrix(max_depth)   — (10, 10) exact win percentages

    plot_win_probability_heatmap(matrix, ...) — matplotlib Figure
    format_matrix(matrix)                     — plain-text table for the console

Matrix convention:
    Shape  : (10, 10) — rows = player totals [12 … 21],
                        cols = dealer up-card [2 … 10, A]
    Values : exact win percentage in [0, 100] against a fresh deck with one
             card of the up-card's value removed. Player cards are not
             removed (a total does not name its cards).
"""

from __future__ import annotations

import matplotlib
import matplotlib.colors
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from blackjack_odds.engine.cards import CARD_VALUES, DECK_SIZE
from blackjack_odds.engine.config import DEFAULT_MAX_DEPTH
from blackjack_odds.solvers.dealer_outcomes import simulate_dealer_from_counts, value_counts
from blackjack_odds.solvers.win_probability import win_probability

# ─── Constants ────────────────────────────────────────────────────────────────

_TOTALS: list[int] = list(range(12, 22))
_UPCARDS: list[int] = list(CARD_VALUES)
_ROW_LABELS: list[str] = [str(t) for t in _TOTALS]
_COL_LABELS: list[str] = [str(v) for v in _UPCARDS[:-1]] + ["A"]


def _make_cmap() -> matplotlib.colors.Colormap:
    """RdYlGn gradient: red = 0% win, green = 100% win."""
    return matplotlib.colormaps["RdYlGn"].copy()


_CMAP: matplotlib.colors.Colormap = _make_cmap()


# ─── Data builder ─────────────────────────────────────────────────────────────


def build_win_probability_matrix(max_depth: int = DEFAULT_MAX_DEPTH) -> np.ndarray:
    """Return exact win percentages for every (player total, up-card) pair.

    One dealer enumeration is run per up-card; each row then only re-tallies
    that distribution against a different player total.

    Args:
        max_depth: Dealer enumeration depth cap.

    Returns:
        float64 matrix of shape (10, 10).
    """
    full = value_counts(range(DECK_SIZE))
    matrix = np.zeros((len(_TOTALS), len(_UPCARDS)))

    for c, upcard in enumerate(_UPCARDS):
        counts = list(full)
        counts[c] -= 1
        dist = simulate_dealer_from_counts(upcard, tuple(counts), max_depth=max_depth)
        for r, total in enumerate(_TOTALS):
            matrix[r, c] = win_probability(total, False, dist)

    return matrix


# ─── Text rendering ───────────────────────────────────────────────────────────


def format_matrix(matrix: np.ndarray) -> str:
    """Render the matrix as a fixed-width text table."""
    header = "Total " + "".join(f"{label:>7}" for label in _COL_LABELS)
    lines = [header, "-" * len(header)]
    for r, label in enumerate(_ROW_LABELS):
        cells = "".join(f"{matrix[r, c]:7.1f}" for c in range(matrix.shape[1]))
        lines.append(f"{label:>5} {cells}")
    return "\n".join(lines)


# ─── Plot ─────────────────────────────────────────────────────────────────────


def plot_win_probability_heatmap(
    matrix: np.ndarray,
    title: str = "Player win probability (%) — single deck, stand-on-17 dealer",
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot the win-probability matrix with per-cell annotations.

    Args:
        matrix:    (10, 10) array from build_win_probability_matrix().
        title:     Figure title.
        show:      If True, call plt.show() after rendering.
        save_path: If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    fig, ax = plt.subplots(figsize=(9, 7))
    im = ax.imshow(matrix, cmap=_CMAP, vmin=0.0, vmax=100.0, aspect="auto")

    ax.set_xticks(range(len(_COL_LABELS)))
    ax.set_xticklabels(_COL_LABELS, fontsize=9)
    ax.set_yticks(range(len(_ROW_LABELS)))
    ax.set_yticklabels(_ROW_LABELS, fontsize=9)
    ax.set_xlabel("Dealer up-card", fontsize=9)
    ax.set_ylabel("Player total", fontsize=9)
    ax.set_title(title, fontsize=11, fontweight="bold")

    for r in range(matrix.shape[0]):
        for c in range(matrix.shape[1]):
            val = matrix[r, c]
            text_color = "black" if 25.0 < val < 75.0 else "white"
            ax.text(c, r, f"{val:.0f}", ha="center", va="center",
                    fontsize=8, color=text_color)

    plt.colorbar(im, ax=ax, label="Win %", fraction=0.046, pad=0.04)
    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()

    return fig
