"""Base protocol for QCI Tic-Tac-Toe agents."""

from typing import Protocol

from qci_tictactoe.board import Board, GameRules, Player, Position


class Agent(Protocol):
    """Protocol for agents."""

    def select_move(self, board: Board, rules: GameRules, player: Player) -> Position:
        """
        Select a move for ``player``.

        Args:
            board: Current board
            rules: Active rules
            player: The mark to place

        Returns:
            A legal position

        Raises:
            NoLegalMoveError: If the board has no legal cell
        """
        ...

    def reset(self) -> None:
        """
        Reset agent state (if any) at the start of a new game.

        Optional for stateless agents.
        """
        ...
