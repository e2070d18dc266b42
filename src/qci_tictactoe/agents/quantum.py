"""Agent adapter around :class:`QuantumMind`."""

from typing import Optional

from qci_tictactoe.board import Board, GameRules, Player, Position
from qci_tictactoe.exceptions import NoLegalMoveError
from qci_tictactoe.mind import MindReading, QuantumMind


class QuantumAgent:
    """Plays whatever cell the mind collapses onto."""

    def __init__(self, mind: Optional[QuantumMind] = None) -> None:
        self.mind = mind or QuantumMind()
        self.last_reading: Optional[MindReading] = None

    def select_move(self, board: Board, rules: GameRules, player: Player) -> Position:
        reading = self.mind.read(board, rules, player)
        self.last_reading = reading
        if reading.position is None:
            raise NoLegalMoveError("No legal moves available")
        return reading.position

    def reset(self) -> None:
        """Forget the previous reading."""
        self.last_reading = None
