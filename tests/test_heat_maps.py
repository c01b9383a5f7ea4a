"""Tests for blackjack_odds/analysis/heat_maps.py — win-probability table and figure.

The Agg backend is activated before any pyplot import so environments
without a display server can run the suite safely.
"""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")  # must precede any pyplot import

import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np
import pytest

from blackjack_odds.analysis.heat_maps import (
    build_win_probability_matrix,
    format_matrix,
    plot_win_probability_heatmap,
)


@pytest.fixture(scope="module")
def matrix() -> np.ndarray:
    return build_win_probability_matrix()


class TestBuildWinProbabilityMatrix:
    def test_shape(self, matrix):
        assert matrix.shape == (10, 10)

    def test_bounds(self, matrix):
        assert np.all(matrix >= 0.0)
        assert np.all(matrix <= 100.0)

    def test_non_decreasing_in_player_total(self, matrix):
        assert np.all(np.diff(matrix, axis=0) >= -1e-9)

    def test_twenty_beats_twelve(self, matrix):
        assert np.all(matrix[8] > matrix[0])

    def test_dealer_six_weaker_than_ten_for_stiff_totals(self, matrix):
        # Column 4 = up-card 6, column 8 = up-card 10; row 4 = player 16.
        assert matrix[4, 4] > matrix[4, 8]


class TestFormatMatrix:
    def test_line_count(self, matrix):
        lines = format_matrix(matrix).splitlines()
        assert len(lines) == 12

    def test_header_labels(self, matrix):
        header = format_matrix(matrix).splitlines()[0]
        assert header.split()[-1] == "A"
        assert "10" in header


class TestPlot:
    def test_returns_figure(self, matrix):
        fig = plot_win_probability_heatmap(matrix, show=False)
        assert isinstance(fig, matplotlib.figure.Figure)
        plt.close(fig)

    def test_saves_file(self, matrix, tmp_path):
        path = tmp_path / "win_table.png"
        fig = plot_win_probability_heatmap(matrix, show=False, save_path=str(path))
        assert path.exists()
        plt.close(fig)
