"""
QCI Tic-Tac-Toe

Tic-Tac-Toe against a "quantum" opponent: eight heuristic strategies each
propose a move with a complex amplitude, proposals on the same cell interfere,
and the strongest cell is played.
"""

__version__ = "0.1.0"

from qci_tictactoe.board import Board, GameRules, Player, Position, Status
from qci_tictactoe.exceptions import QCIError
from qci_tictactoe.game import GameController, GameState
from qci_tictactoe.mind import MindReading, QuantumMind, SelectionRule

__all__ = [
    "Board",
    "GameController",
    "GameRules",
    "GameState",
    "MindReading",
    "Player",
    "Position",
    "QCIError",
    "QuantumMind",
    "SelectionRule",
    "Status",
    "__version__",
]
