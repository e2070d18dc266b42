"""Game state and turn controller."""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from qci_tictactoe.board import (
    Board,
    GameRules,
    Player,
    Position,
    Status,
    available_moves,
    empty_board,
    evaluate_status,
    place,
    winner as find_winner,
)
from qci_tictactoe.exceptions import IllegalMoveError
from qci_tictactoe.mind import MindReading, QuantumMind, TurnPhase, TurnTracker
from qci_tictactoe.stats import GameStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameState:
    """
    Snapshot of one game.

    States are never mutated; every accepted move produces a new one.
    """

    board: Board
    rules: GameRules
    current_player: Player = Player.X
    status: Status = Status.PLAYING
    winner: Optional[Player] = None
    move_count: int = 0

    def __post_init__(self) -> None:
        if self.board.shape != self.rules.shape:
            raise ValueError(
                f"Board shape {self.board.shape} does not match rules {self.rules.shape}"
            )

    @property
    def is_over(self) -> bool:
        return self.status is not Status.PLAYING

    def available_moves(self) -> List[Position]:
        return available_moves(self.board, self.rules)

    def with_move(self, pos: Position) -> "GameState":
        """
        Apply a move for the current player.

        Raises:
            IllegalMoveError: If the game is over or the cell cannot be played
        """
        board = place(self.board, self.rules, self.current_player, pos)
        status = evaluate_status(board, self.rules)
        return replace(
            self,
            board=board,
            status=status,
            winner=find_winner(board, self.rules) if status is Status.WON else None,
            current_player=(
                self.current_player.opponent if status is Status.PLAYING else self.current_player
            ),
            move_count=self.move_count + 1,
        )


class GameController:
    """
    Runs a human-versus-QCI game.

    The controller alternates turns, asks the :class:`QuantumMind` for the
    non-human side's move and keeps the latest state and session stats.
    """

    def __init__(
        self,
        rules: Optional[GameRules] = None,
        human: Player = Player.X,
        mind: Optional[QuantumMind] = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            rules: Rules for new games (defaults to a standard 3x3 game)
            human: The mark the human plays; X always moves first
            mind: Engine used for the QCI side
        """
        self.rules = rules or GameRules()
        self.human = human
        self.qci = human.opponent
        self.mind = mind or QuantumMind()
        self.stats = GameStats()
        self.state = self.new_game()

    def new_game(self, rules: Optional[GameRules] = None) -> GameState:
        """Start a fresh game, optionally switching to new rules."""
        if rules is not None:
            self.rules = rules
        self.state = GameState(board=empty_board(self.rules), rules=self.rules)
        logger.debug("New game: %s", self.rules)
        return self.state

    def reset(self) -> GameState:
        """Start a fresh game with the current rules."""
        return self.new_game()

    def is_human_turn(self, state: GameState) -> bool:
        return not state.is_over and state.current_player is self.human

    def player_move(self, state: GameState, pos: Position) -> GameState:
        """
        Apply the human's move.

        Returns:
            The new state, or ``state`` unchanged when it is not the human's
            turn, the game is over or the cell is illegal
        """
        if not self.is_human_turn(state):
            logger.debug("Ignoring human move at %s: not the human's turn", pos)
            return state
        try:
            new_state = state.with_move(Position(*pos))
        except IllegalMoveError as e:
            logger.debug("Rejected human move: %s", e)
            return state
        return self._commit(new_state)

    def opponent_turn(self, state: GameState) -> Tuple[GameState, Optional[MindReading]]:
        """
        Let QCI move and report how it decided.

        Returns:
            Tuple of (state, reading). The state is unchanged and the reading
            is None when it is not QCI's turn. When no legal move exists the
            reading has ``no_legal_move`` set and nothing is applied.
        """
        if state.is_over or state.current_player is not self.qci:
            logger.debug("Ignoring opponent move: not QCI's turn")
            return state, None

        tracker = TurnTracker()
        reading = self.mind.read(state.board, state.rules, self.qci, tracker)
        if reading.no_legal_move:
            logger.warning("QCI has no legal move; leaving the board unchanged")
            return state, reading

        new_state = state.with_move(reading.position)
        tracker.advance(TurnPhase.APPLIED)
        new_state = self._commit(new_state)
        tracker.advance(TurnPhase.IDLE)
        return new_state, reading

    def opponent_move(self, state: GameState) -> GameState:
        """Let QCI move. See :meth:`opponent_turn`."""
        new_state, _ = self.opponent_turn(state)
        return new_state

    def _commit(self, state: GameState) -> GameState:
        self.state = state
        if state.is_over:
            self.stats = self.stats.record(state.winner, self.human)
            logger.info(
                "Game over: %s",
                f"{state.winner.value} wins" if state.winner else "draw",
            )
        return state
