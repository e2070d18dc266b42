"""Random agent that plays uniformly at random among legal moves."""

import numpy as np

from qci_tictactoe.board import Board, GameRules, Player, Position, available_moves
from qci_tictactoe.exceptions import NoLegalMoveError


class RandomAgent:
    """Agent that selects moves uniformly at random from legal cells."""

    def __init__(self, seed: int | None = None) -> None:
        """
        Initialize the random agent.

        Args:
            seed: Random seed for reproducibility (optional)
        """
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def select_move(self, board: Board, rules: GameRules, player: Player) -> Position:
        moves = available_moves(board, rules)
        if not moves:
            raise NoLegalMoveError("No legal moves available")
        return moves[int(self.rng.integers(len(moves)))]

    def reset(self) -> None:
        """Reset agent state (no-op; the generator keeps its stream)."""
        pass
