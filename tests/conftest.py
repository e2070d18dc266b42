"""Shared pytest fixtures for QCI tests."""

from pathlib import Path

import pytest

from qci_tictactoe.board import Board, GameRules
from qci_tictactoe.mind import QuantumMind


@pytest.fixture
def rules() -> GameRules:
    """Standard 3x3 rules."""
    return GameRules()


@pytest.fixture
def no_center_rules() -> GameRules:
    """3x3 rules with the center tile disabled."""
    return GameRules(center_available=False)


@pytest.fixture
def wide_rules() -> GameRules:
    """3x4 rules, three in a row to win."""
    return GameRules(additional_column=True)


@pytest.fixture
def empty(rules: GameRules) -> Board:
    return Board.empty(rules.rows, rules.cols)


@pytest.fixture
def mind() -> QuantumMind:
    """Mind with a fixed jitter seed."""
    return QuantumMind(seed=1234)


@pytest.fixture
def full_draw_board() -> Board:
    """A full 3x3 board with no winner."""
    return Board.from_string("XOX/XOO/OXX")


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory with no global configuration.

    Returns:
        The temporary working directory
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    return tmp_path
