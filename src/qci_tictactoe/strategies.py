"""
The eight heuristic strategies ("basis states").

Each strategy is a pure policy: given a board, the rules and the player to
move, it returns exactly one :class:`ProposedMove`. A strategy carries a fixed
label and base phase (evenly spaced at pi/4 steps); the only randomness is a
cosmetic phase jitter drawn from an optional numpy generator, which never
changes the chosen cell or the magnitude.

Priority ladders, first satisfied rule wins (magnitude before jitter):

============  =================================================================
Center        center 1.0, corner 0.8, edge 0.6, first 0.3
Defensive     block 0.9, center 0.7, corner 0.6, first 0.3
Mirror        opening center 0.8, mirror 0.7, own line 0.6, center 0.5, first 0.3
Fork          fork 0.9, block fork 0.8, center 0.7, corner 0.6, first 0.3
Aggressive    win 1.0, block 0.9, open line 0.8, center 0.7, corner 0.6, first 0.4
Random        board-hash pick, 0.6 / 0.5 / 0.4 scaled by 0.2, clamped [0.1, 0.9]
Conservative  block 0.9, center 0.8, edge 0.7, corner 0.5, first 0.3
LongTerm      win 1.0, block 0.9, fork 0.8, block fork 0.7, center 0.6,
              corner 0.5, first 0.3
============  =================================================================
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from qci_tictactoe.amplitude import TWO_PI, Amplitude, ProposedMove
from qci_tictactoe.board import (
    Board,
    GameRules,
    Player,
    Position,
    available_moves,
    completes_line,
)

PHASE_JITTER = math.pi / 8
PLACEHOLDER_POSITION = Position(0, 0)

RANDOM_OFFSET_MAGNITUDE = 0.2
RANDOM_MAGNITUDE_BOUNDS = (0.1, 0.9)

Pick = Tuple[Position, Amplitude]


class BasisState(str, Enum):
    """Labels of the eight strategies, in base-phase order."""

    CENTER = "Center"
    DEFENSIVE = "Defensive"
    MIRROR = "Mirror"
    FORK = "Fork"
    AGGRESSIVE = "Aggressive"
    RANDOM = "Random"
    CONSERVATIVE = "Conservative"
    LONG_TERM = "LongTerm"

    @property
    def base_phase(self) -> float:
        return list(BasisState).index(self) * math.pi / 4


# ---------------------------------------------------------------------------
# Line helpers shared by every strategy
# ---------------------------------------------------------------------------


def line_threat(
    board: Board, rules: GameRules, window: Sequence[Position], player: Player
) -> Optional[Position]:
    """
    Find the completion cell of a nearly full window.

    Args:
        board: Board to inspect
        rules: Active rules (a disabled center never counts as open)
        window: Cells of one line segment of length ``win_condition``
        player: Owner of the marks to count

    Returns:
        The single empty, playable cell when the window holds exactly
        ``win_condition - 1`` of ``player``'s marks, otherwise None
    """
    code = player.code
    cells = board.cells
    mine = 0
    empty: List[Position] = []
    for pos in window:
        value = cells[pos.row, pos.col]
        if value == code:
            mine += 1
        elif value == 0:
            empty.append(pos)
    if mine == len(window) - 1 and len(empty) == 1 and rules.is_playable(empty[0]):
        return empty[0]
    return None


def threats_created(board: Board, rules: GameRules, pos: Position, player: Player) -> int:
    """Count windows through ``pos`` that become one move from winning."""
    after = board.with_mark(pos, player)
    return sum(
        1
        for window in rules.windows_through(pos)
        if line_threat(after, rules, window, player) is not None
    )


def creates_fork(board: Board, rules: GameRules, pos: Position, player: Player) -> bool:
    """A fork opens two or more winning threats with a single mark."""
    return threats_created(board, rules, pos, player) >= 2


def corner_cells(rules: GameRules) -> List[Position]:
    last_row, last_col = rules.rows - 1, rules.cols - 1
    return [
        Position(0, 0),
        Position(0, last_col),
        Position(last_row, 0),
        Position(last_row, last_col),
    ]


def edge_cells(rules: GameRules) -> List[Position]:
    """Border cells that are not corners, row-major."""
    corners = set(corner_cells(rules))
    last_row, last_col = rules.rows - 1, rules.cols - 1
    return [
        Position(r, c)
        for r in range(rules.rows)
        for c in range(rules.cols)
        if (r in (0, last_row) or c in (0, last_col)) and Position(r, c) not in corners
    ]


def board_hash(board: Board) -> int:
    """Sum of (cell index * symbol code); empty cells contribute nothing."""
    total = 0
    for pos in board.positions():
        symbol = board.symbol_at(pos)
        if symbol:
            total += (pos.row * board.cols + pos.col) * ord(symbol)
    return total


def board_phase_hash(board: Board) -> int:
    """Second board hash used for the Random strategy's phase offset."""
    total = 0
    for pos in board.positions():
        symbol = board.symbol_at(pos)
        weight = ord(symbol) + 1 if symbol else 1
        total += (pos.row * 7 + pos.col * 11) * weight
    return total


@dataclass(frozen=True)
class Situation:
    """The position a policy reasons about."""

    board: Board
    rules: GameRules
    player: Player
    moves: Tuple[Position, ...]

    @property
    def opponent(self) -> Player:
        return self.player.opponent

    @property
    def center(self) -> Position:
        return self.rules.center

    def corners(self) -> List[Position]:
        return corner_cells(self.rules)

    def edges(self) -> List[Position]:
        return edge_cells(self.rules)

    def pick(self, pos: Optional[Position], magnitude: float) -> Optional[Pick]:
        if pos is None or pos not in self.moves:
            return None
        return pos, Amplitude(magnitude)

    def pick_first(self, candidates: Iterable[Position], magnitude: float) -> Optional[Pick]:
        for pos in candidates:
            if pos in self.moves:
                return pos, Amplitude(magnitude)
        return None

    def fallback(self, magnitude: float) -> Pick:
        return self.moves[0], Amplitude(magnitude)

    def winning_move(self, player: Player) -> Optional[Position]:
        for pos in self.moves:
            if completes_line(self.board, self.rules, pos, player):
                return pos
        return None

    def blocking_move(self) -> Optional[Position]:
        """Completion cell of the first opponent threat, by line order."""
        for window in self.rules.windows():
            cell = line_threat(self.board, self.rules, window, self.opponent)
            if cell is not None:
                return cell
        return None

    def fork_move(self, player: Player) -> Optional[Position]:
        for pos in self.moves:
            if creates_fork(self.board, self.rules, pos, player):
                return pos
        return None

    def opportunity_move(self, player: Player) -> Optional[Position]:
        for pos in self.moves:
            if threats_created(self.board, self.rules, pos, player) > 0:
                return pos
        return None

    def mirror_move(self) -> Optional[Position]:
        """Reflect the first opponent mark (row-major) through the board center."""
        last_row, last_col = self.rules.rows - 1, self.rules.cols - 1
        for pos in self.board.positions():
            if self.board[pos] is self.opponent:
                mirrored = Position(last_row - pos.row, last_col - pos.col)
                if mirrored in self.moves:
                    return mirrored
        return None

    def pattern_move(self) -> Optional[Position]:
        """Complete the first of the player's own nearly full lines."""
        for window in self.rules.windows():
            cell = line_threat(self.board, self.rules, window, self.player)
            if cell is not None:
                return cell
        return None


Policy = Callable[[Situation], Pick]


def _center_first(s: Situation) -> Pick:
    return (
        s.pick(s.center, 1.0)
        or s.pick_first(s.corners(), 0.8)
        or s.pick_first(s.edges(), 0.6)
        or s.fallback(0.3)
    )


def _defensive(s: Situation) -> Pick:
    return (
        s.pick(s.blocking_move(), 0.9)
        or s.pick(s.center, 0.7)
        or s.pick_first(s.corners(), 0.6)
        or s.fallback(0.3)
    )


def _mirror(s: Situation) -> Pick:
    if s.board.is_blank():
        opening = s.pick(s.center, 0.8)
        if opening is not None:
            return opening
    return (
        s.pick(s.mirror_move(), 0.7)
        or s.pick(s.pattern_move(), 0.6)
        or s.pick(s.center, 0.5)
        or s.fallback(0.3)
    )


def _fork(s: Situation) -> Pick:
    return (
        s.pick(s.fork_move(s.player), 0.9)
        or s.pick(s.fork_move(s.opponent), 0.8)
        or s.pick(s.center, 0.7)
        or s.pick_first(s.corners(), 0.6)
        or s.fallback(0.3)
    )


def _aggressive(s: Situation) -> Pick:
    return (
        s.pick(s.winning_move(s.player), 1.0)
        or s.pick(s.winning_move(s.opponent), 0.9)
        or s.pick(s.opportunity_move(s.player), 0.8)
        or s.pick(s.center, 0.7)
        or s.pick_first(s.corners(), 0.6)
        or s.fallback(0.4)
    )


def _random(s: Situation) -> Pick:
    # Deterministic: the same board always yields the same "random" cell
    pos = s.moves[board_hash(s.board) % len(s.moves)]
    if pos == s.center:
        magnitude = 0.6
    elif pos in s.corners():
        magnitude = 0.5
    else:
        magnitude = 0.4
    offset_phase = (board_phase_hash(s.board) % 100) / 100.0 * TWO_PI
    offset = Amplitude(RANDOM_OFFSET_MAGNITUDE, offset_phase)
    return pos, (offset * Amplitude(magnitude)).clamp(*RANDOM_MAGNITUDE_BOUNDS)


def _conservative(s: Situation) -> Pick:
    return (
        s.pick(s.winning_move(s.opponent), 0.9)
        or s.pick(s.center, 0.8)
        or s.pick_first(s.edges(), 0.7)
        or s.pick_first(s.corners(), 0.5)
        or s.fallback(0.3)
    )


def _long_term(s: Situation) -> Pick:
    return (
        s.pick(s.winning_move(s.player), 1.0)
        or s.pick(s.winning_move(s.opponent), 0.9)
        or s.pick(s.fork_move(s.player), 0.8)
        or s.pick(s.fork_move(s.opponent), 0.7)
        or s.pick(s.center, 0.6)
        or s.pick_first(s.corners(), 0.5)
        or s.fallback(0.3)
    )


@dataclass(frozen=True)
class Strategy:
    """A basis state bound to its policy."""

    basis: BasisState
    policy: Policy

    @property
    def label(self) -> str:
        return self.basis.value

    @property
    def base_phase(self) -> float:
        return self.basis.base_phase

    def suggest(
        self,
        board: Board,
        rules: GameRules,
        player: Player,
        rng: Optional[np.random.Generator] = None,
    ) -> ProposedMove:
        """
        Propose one move for ``player``.

        Args:
            board: Current board
            rules: Active rules
            player: Player to move
            rng: Generator for the cosmetic phase jitter (no jitter if None)

        Returns:
            The proposal; a zero-magnitude placeholder at (0, 0) when no
            legal move exists
        """
        jitter = 0.0
        if rng is not None:
            jitter = float(rng.uniform(-PHASE_JITTER, PHASE_JITTER))

        moves = available_moves(board, rules)
        if not moves:
            return ProposedMove(
                position=PLACEHOLDER_POSITION,
                amplitude=Amplitude(0.0).rotated(self.base_phase + jitter),
                basis_state=self.label,
                player=player,
                jitter=jitter,
                placeholder=True,
            )

        position, amplitude = self.policy(Situation(board, rules, player, tuple(moves)))
        return ProposedMove(
            position=position,
            amplitude=amplitude.rotated(self.base_phase + jitter),
            basis_state=self.label,
            player=player,
            jitter=jitter,
        )


STRATEGIES: Tuple[Strategy, ...] = (
    Strategy(BasisState.CENTER, _center_first),
    Strategy(BasisState.DEFENSIVE, _defensive),
    Strategy(BasisState.MIRROR, _mirror),
    Strategy(BasisState.FORK, _fork),
    Strategy(BasisState.AGGRESSIVE, _aggressive),
    Strategy(BasisState.RANDOM, _random),
    Strategy(BasisState.CONSERVATIVE, _conservative),
    Strategy(BasisState.LONG_TERM, _long_term),
)


def strategy_by_label(label: str) -> Strategy:
    """Look up one of the eight strategies by its label."""
    for strategy in STRATEGIES:
        if strategy.label == label:
            return strategy
    raise KeyError(f"Unknown strategy: {label}")
