"""Board, rules and win detection for QCI Tic-Tac-Toe."""

import logging
from enum import Enum
from functools import lru_cache
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from qci_tictactoe.exceptions import IllegalMoveError

logger = logging.getLogger(__name__)

BOARD_ROWS = 3
BASE_COLS = 3

_EMPTY_CHARS = {"", " ", ".", "-", "_"}


class Player(str, Enum):
    """The two marks. X always moves first."""

    X = "X"
    O = "O"

    @property
    def code(self) -> int:
        """Cell encoding used by the board array (+1 for X, -1 for O)."""
        return 1 if self is Player.X else -1

    @property
    def opponent(self) -> "Player":
        return Player.O if self is Player.X else Player.X

    @classmethod
    def from_code(cls, code: int) -> Optional["Player"]:
        if code == 1:
            return cls.X
        if code == -1:
            return cls.O
        return None


class Status(str, Enum):
    """Terminal status of a board."""

    PLAYING = "playing"
    WON = "won"
    DRAW = "draw"


class Position(NamedTuple):
    """A (row, col) cell coordinate. Tuple ordering is row-major."""

    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


class GameRules(BaseModel):
    """Rule parameters for one game.

    ``wrap_edges`` and ``allow_move_reuse`` are reserved: they validate so that
    configuration files may carry them, but no rule in this package reads them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    win_condition: int = Field(default=3, description="Run length required to win")
    center_available: bool = Field(
        default=True, description="Whether the center tile (1, 1) can be played"
    )
    additional_column: bool = Field(
        default=False, description="Add a fourth column to the board"
    )
    wrap_edges: bool = Field(default=False, description="Reserved, no effect")
    allow_move_reuse: bool = Field(default=False, description="Reserved, no effect")

    @field_validator("win_condition")
    @classmethod
    def validate_win_condition(cls, v: int) -> int:
        """Validate win condition range."""
        if v < 2:
            raise ValueError("win_condition must be at least 2")
        if v > 4:
            raise ValueError("win_condition cannot exceed 4")
        return v

    @model_validator(mode="after")
    def validate_reachable(self) -> "GameRules":
        """A win condition longer than every line could never be met."""
        if self.win_condition > max(self.rows, self.cols):
            raise ValueError(
                f"win_condition {self.win_condition} does not fit on a "
                f"{self.rows}x{self.cols} board"
            )
        return self

    @property
    def rows(self) -> int:
        return BOARD_ROWS

    @property
    def cols(self) -> int:
        return BASE_COLS + 1 if self.additional_column else BASE_COLS

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def center(self) -> Position:
        return Position(BOARD_ROWS // 2, BASE_COLS // 2)

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.row < self.rows and 0 <= pos.col < self.cols

    def is_playable(self, pos: Position) -> bool:
        """Whether ``pos`` is on the board and not a disabled center tile."""
        if not self.in_bounds(pos):
            return False
        return self.center_available or pos != self.center

    def windows(self) -> Tuple[Tuple[Position, ...], ...]:
        """Every run of ``win_condition`` cells along a row, column or diagonal."""
        return _windows(self.rows, self.cols, self.win_condition)

    def windows_through(self, pos: Position) -> Tuple[Tuple[Position, ...], ...]:
        """The subset of :meth:`windows` that contains ``pos``."""
        return _windows_by_cell(self.rows, self.cols, self.win_condition).get(pos, ())


@lru_cache(maxsize=None)
def _windows(rows: int, cols: int, length: int) -> Tuple[Tuple[Position, ...], ...]:
    # Rows, then columns, then diagonals, then anti-diagonals
    directions = ((0, 1), (1, 0), (1, 1), (1, -1))
    found: List[Tuple[Position, ...]] = []
    for dr, dc in directions:
        for r in range(rows):
            for c in range(cols):
                end_r = r + dr * (length - 1)
                end_c = c + dc * (length - 1)
                if 0 <= end_r < rows and 0 <= end_c < cols:
                    found.append(
                        tuple(Position(r + dr * i, c + dc * i) for i in range(length))
                    )
    return tuple(found)


@lru_cache(maxsize=None)
def _windows_by_cell(
    rows: int, cols: int, length: int
) -> Dict[Position, Tuple[Tuple[Position, ...], ...]]:
    index: Dict[Position, List[Tuple[Position, ...]]] = {}
    for window in _windows(rows, cols, length):
        for pos in window:
            index.setdefault(pos, []).append(window)
    return {pos: tuple(ws) for pos, ws in index.items()}


class Board:
    """
    Immutable grid of marks.

    Cells are stored in a read-only numpy array: 0 = empty, 1 = X, -1 = O.
    Every placement returns a new board.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: npt.ArrayLike) -> None:
        """
        Build a board from a 2-D array of cell codes.

        Args:
            cells: Nested sequence or array of 0 / 1 / -1

        Raises:
            ValueError: If the array is not 2-D or holds an unknown code
        """
        array = np.array(cells, dtype=np.int8)
        if array.ndim != 2:
            raise ValueError(f"Board must be 2-D, got shape {array.shape}")
        if not np.isin(array, (-1, 0, 1)).all():
            raise ValueError("Board cells must be 0 (empty), 1 (X) or -1 (O)")
        array.flags.writeable = False
        self._cells: npt.NDArray[np.int8] = array

    @classmethod
    def empty(cls, rows: int = BOARD_ROWS, cols: int = BASE_COLS) -> "Board":
        return cls(np.zeros((rows, cols), dtype=np.int8))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> "Board":
        """
        Build a board from rows of symbols, e.g. ``[["X", "", ""], ...]``.

        Empty cells may be written as ``""``, ``" "``, ``"."``, ``"-"`` or ``"_"``.
        """
        codes = []
        for row in rows:
            line = []
            for cell in row:
                symbol = str(cell).strip().upper()
                if symbol in _EMPTY_CHARS:
                    line.append(0)
                elif symbol in (Player.X.value, Player.O.value):
                    line.append(Player(symbol).code)
                else:
                    raise ValueError(f"Unknown cell symbol: {cell!r}")
            codes.append(line)
        if len({len(line) for line in codes}) > 1:
            raise ValueError("All board rows must have the same length")
        return cls(codes)

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """Parse ``"XX./.O./..O"`` (rows separated by ``/`` or newlines)."""
        rows = [r for r in text.replace("\n", "/").split("/") if r.strip()]
        return cls.from_rows([list(r.strip()) for r in rows])

    @property
    def cells(self) -> npt.NDArray[np.int8]:
        """Read-only view of the cell codes."""
        return self._cells

    @property
    def shape(self) -> Tuple[int, int]:
        return (int(self._cells.shape[0]), int(self._cells.shape[1]))

    @property
    def rows(self) -> int:
        return self.shape[0]

    @property
    def cols(self) -> int:
        return self.shape[1]

    def __getitem__(self, pos: Tuple[int, int]) -> Optional[Player]:
        return Player.from_code(int(self._cells[pos[0], pos[1]]))

    def symbol_at(self, pos: Position) -> str:
        """The mark at ``pos`` as ``"X"``, ``"O"`` or ``""``."""
        mark = self[pos]
        return mark.value if mark is not None else ""

    def is_empty(self, pos: Position) -> bool:
        return int(self._cells[pos.row, pos.col]) == 0

    def is_blank(self) -> bool:
        """True when no mark has been placed yet."""
        return not np.any(self._cells)

    def count(self, player: Player) -> int:
        return int(np.count_nonzero(self._cells == player.code))

    def positions(self) -> Iterator[Position]:
        """All cells in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield Position(r, c)

    def with_mark(self, pos: Position, player: Player) -> "Board":
        """
        Return a copy with ``player`` at ``pos``.

        No legality checks are made; use :func:`place` for real moves.
        """
        cells = self._cells.copy()
        cells[pos.row, pos.col] = player.code
        return Board(cells)

    def rows_as_symbols(self) -> List[List[str]]:
        return [[self.symbol_at(Position(r, c)) for c in range(self.cols)] for r in range(self.rows)]

    def to_string(self) -> str:
        """Inverse of :meth:`from_string`."""
        return "/".join(
            "".join(s or "." for s in row) for row in self.rows_as_symbols()
        )

    def render(self) -> str:
        """
        Render the board as a string with row and column indices.

        Returns:
            String representation of the board
        """
        lines = ["  " + " ".join(str(c) for c in range(self.cols))]
        for r, row in enumerate(self.rows_as_symbols()):
            lines.append(f"{r} " + " ".join(s or "." for s in row))
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._cells, other._cells))

    def __hash__(self) -> int:
        return hash((self.shape, self._cells.tobytes()))

    def __repr__(self) -> str:
        return f"Board({self.to_string()!r})"


def empty_board(rules: GameRules) -> Board:
    """Return an all-empty board sized for ``rules``."""
    return Board.empty(rules.rows, rules.cols)


def is_legal_move(board: Board, rules: GameRules, pos: Position) -> bool:
    """Whether ``pos`` is on the board, not a disabled center and empty."""
    return rules.is_playable(pos) and board.is_empty(pos)


def available_moves(board: Board, rules: GameRules) -> List[Position]:
    """
    Get every empty, rule-legal cell.

    Args:
        board: Current board
        rules: Active rules

    Returns:
        Positions in row-major order. Strategies fall back to the first
        entry, so the order is part of the contract.
    """
    return [pos for pos in board.positions() if is_legal_move(board, rules, pos)]


def has_winning_line(board: Board, rules: GameRules, player: Player) -> bool:
    """Check whether ``player`` owns a full window of ``win_condition`` cells."""
    code = player.code
    cells = board.cells
    return any(
        all(cells[p.row, p.col] == code for p in window) for window in rules.windows()
    )


def completes_line(board: Board, rules: GameRules, pos: Position, player: Player) -> bool:
    """Whether placing ``player`` at ``pos`` would finish a winning window."""
    code = player.code
    cells = board.cells
    for window in rules.windows_through(pos):
        if all(p == pos or cells[p.row, p.col] == code for p in window):
            return True
    return False


def winner(board: Board, rules: GameRules) -> Optional[Player]:
    """Return the player owning a winning line, if any."""
    for player in (Player.X, Player.O):
        if has_winning_line(board, rules, player):
            return player
    return None


def evaluate_status(board: Board, rules: GameRules) -> Status:
    """
    Classify a board as won, drawn or still in play.

    A disabled center tile never counts as an open cell, so a board whose only
    empty cell is the disabled center is a draw.
    """
    if winner(board, rules) is not None:
        return Status.WON
    if not available_moves(board, rules):
        return Status.DRAW
    return Status.PLAYING


def place(board: Board, rules: GameRules, player: Player, pos: Position) -> Board:
    """
    Place a mark, enforcing every rule.

    Raises:
        IllegalMoveError: If the game is over or the cell cannot be played
    """
    pos = Position(*pos)
    if board.shape != rules.shape:
        raise IllegalMoveError(pos, f"board shape {board.shape} does not match rules")
    if not rules.in_bounds(pos):
        raise IllegalMoveError(pos, "out of range")
    if not rules.is_playable(pos):
        raise IllegalMoveError(pos, "center tile is disabled")
    if not board.is_empty(pos):
        raise IllegalMoveError(pos, f"occupied by {board.symbol_at(pos)}")
    if evaluate_status(board, rules) is not Status.PLAYING:
        raise IllegalMoveError(pos, "game is already over")
    return board.with_mark(pos, player)


def apply_move(board: Board, rules: GameRules, player: Player, pos: Position) -> Board:
    """Place a mark, returning ``board`` unchanged when the move is illegal."""
    try:
        return place(board, rules, player, pos)
    except IllegalMoveError as e:
        logger.debug("Rejected move for %s: %s", player.value, e)
        return board
