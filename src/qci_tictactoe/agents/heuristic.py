"""Heuristic agent using a fixed rule ladder."""

from typing import List

from qci_tictactoe.board import (
    Board,
    GameRules,
    Player,
    Position,
    available_moves,
    completes_line,
)
from qci_tictactoe.exceptions import NoLegalMoveError
from qci_tictactoe.strategies import corner_cells


class HeuristicAgent:
    """
    Baseline opponent with a single deterministic rule ladder.

    Priority order:
    1. Win if possible
    2. Block opponent from winning
    3. Take center if available
    4. Take corner if available
    5. Take the first remaining cell
    """

    def select_move(self, board: Board, rules: GameRules, player: Player) -> Position:
        moves = available_moves(board, rules)
        if not moves:
            raise NoLegalMoveError("No legal moves available")

        # 1. Check if we can win
        winning_move = self._find_winning_move(board, rules, player, moves)
        if winning_move is not None:
            return winning_move

        # 2. Block opponent from winning
        blocking_move = self._find_winning_move(board, rules, player.opponent, moves)
        if blocking_move is not None:
            return blocking_move

        # 3. Take center
        if rules.center in moves:
            return rules.center

        # 4. Take corners
        corners = [pos for pos in corner_cells(rules) if pos in moves]
        if corners:
            return corners[0]

        return moves[0]

    def _find_winning_move(
        self, board: Board, rules: GameRules, player: Player, moves: List[Position]
    ) -> Position | None:
        for pos in moves:
            if completes_line(board, rules, pos, player):
                return pos
        return None

    def reset(self) -> None:
        """Reset agent state (no-op for stateless agent)."""
        pass
