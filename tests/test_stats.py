"""Tests for session statistics."""

import pytest

from qci_tictactoe.board import Player
from qci_tictactoe.stats import GameStats


class TestGameStats:
    """Test the immutable win/loss/draw tally."""

    def test_empty(self) -> None:
        """Test that rates are zero before any game."""
        stats = GameStats()
        assert stats.total_games == 0
        assert stats.draws == 0
        assert stats.human_win_rate == 0.0
        assert stats.qci_win_rate == 0.0
        assert stats.draw_rate == 0.0

    def test_record(self) -> None:
        """Test recording wins, losses and draws."""
        stats = GameStats()
        stats = stats.record(Player.X, human=Player.X)
        stats = stats.record(Player.O, human=Player.X)
        stats = stats.record(None, human=Player.X)
        stats = stats.record(Player.O, human=Player.X)

        assert stats.total_games == 4
        assert stats.human_wins == 1
        assert stats.qci_wins == 2
        assert stats.draws == 1
        assert stats.qci_win_rate == pytest.approx(0.5)
        assert stats.draw_rate == pytest.approx(0.25)

    def test_record_as_o(self) -> None:
        """Test that wins are attributed by the human's mark."""
        stats = GameStats().record(Player.O, human=Player.O)
        assert stats.human_wins == 1
        assert stats.qci_wins == 0

    def test_record_returns_new_value(self) -> None:
        """Test that recording does not mutate."""
        stats = GameStats()
        stats.record(Player.X, human=Player.X)
        assert stats.total_games == 0

    def test_to_dict(self) -> None:
        """Test the serialisable view."""
        data = GameStats().record(None, human=Player.X).to_dict()
        assert data["total_games"] == 1
        assert data["draws"] == 1
        assert data["draw_rate"] == 1.0
