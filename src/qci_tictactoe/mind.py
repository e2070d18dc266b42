"""
QuantumMind: superposition, interference and collapse of strategy proposals.

For one opponent turn the mind asks every strategy for a proposal, groups the
proposals by target cell, sums each group's amplitudes as vectors and
collapses onto a single cell.

Selection rule
--------------
Each cell is scored from its proposals' *settled* amplitudes, i.e. with the
cosmetic phase jitter removed, so repeated readings of the same board always
collapse onto the same cell:

* ``SelectionRule.SUPPORT`` (default): sum of the settled magnitudes. Every
  strategy backing a cell adds its full confidence.
* ``SelectionRule.INTERFERENCE``: magnitude of the settled vector sum.
  Base phases are spread around the circle, so strategies that agree on a
  cell partly cancel and a lone confident proposal can outscore a consensus.

The highest score wins; scores within ``TIE_TOLERANCE`` are ties and go to the
cell that comes first in row-major order. The interference sums, with and
without jitter, are reported on the :class:`MindReading` under either rule.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from qci_tictactoe.amplitude import ZERO, Amplitude, ProposedMove
from qci_tictactoe.board import Board, GameRules, Player, Position, available_moves
from qci_tictactoe.exceptions import QCIError, SelectionInvariantError, TurnSequenceError
from qci_tictactoe.strategies import STRATEGIES, Strategy

logger = logging.getLogger(__name__)

TIE_TOLERANCE = 1e-9


class SelectionRule(str, Enum):
    """How a cell's proposals are scored."""

    INTERFERENCE = "interference"
    SUPPORT = "support"


class TurnPhase(str, Enum):
    """Steps of a single opponent turn."""

    IDLE = "idle"
    PROPOSALS_COLLECTED = "proposals_collected"
    AGGREGATED = "aggregated"
    MOVE_SELECTED = "move_selected"
    APPLIED = "applied"


# AGGREGATED -> IDLE ends a turn that found no legal move to select.
_TRANSITIONS: Dict[TurnPhase, Tuple[TurnPhase, ...]] = {
    TurnPhase.IDLE: (TurnPhase.PROPOSALS_COLLECTED,),
    TurnPhase.PROPOSALS_COLLECTED: (TurnPhase.AGGREGATED,),
    TurnPhase.AGGREGATED: (TurnPhase.MOVE_SELECTED, TurnPhase.IDLE),
    TurnPhase.MOVE_SELECTED: (TurnPhase.APPLIED,),
    TurnPhase.APPLIED: (TurnPhase.IDLE,),
}


class TurnTracker:
    """Enforces the step order of one opponent turn."""

    def __init__(self) -> None:
        self.phase = TurnPhase.IDLE
        self.history: List[TurnPhase] = [TurnPhase.IDLE]

    def advance(self, target: TurnPhase) -> None:
        """
        Move to ``target``.

        Raises:
            TurnSequenceError: If ``target`` does not directly follow the
                current phase
        """
        if target not in _TRANSITIONS[self.phase]:
            raise TurnSequenceError(
                f"Invalid turn transition: {self.phase.value} -> {target.value}"
            )
        self.phase = target
        self.history.append(target)


@dataclass(frozen=True)
class MindReading:
    """Everything one turn of deliberation produced."""

    player: Player
    proposals: Tuple[ProposedMove, ...]
    groups: Dict[Position, Tuple[ProposedMove, ...]]
    amplitudes: Dict[Position, Amplitude]
    settled: Dict[Position, Amplitude]
    scores: Dict[Position, float]
    position: Optional[Position]
    rule: SelectionRule = SelectionRule.SUPPORT
    fallback: bool = False
    diagnostics: Tuple[QCIError, ...] = field(default_factory=tuple)

    @property
    def no_legal_move(self) -> bool:
        return self.position is None

    def magnitudes(self) -> Dict[Position, float]:
        return {pos: amp.magnitude for pos, amp in self.amplitudes.items()}

    def phases(self) -> Dict[Position, float]:
        return {pos: amp.phase for pos, amp in self.amplitudes.items()}

    def supporters(self, pos: Position) -> List[str]:
        """Labels of the strategies that proposed ``pos``."""
        return [move.basis_state for move in self.groups.get(pos, ())]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player.value,
            "rule": self.rule.value,
            "position": None if self.position is None else [self.position.row, self.position.col],
            "fallback": self.fallback,
            "proposals": [move.to_dict() for move in self.proposals],
            "cells": [
                {
                    "position": [pos.row, pos.col],
                    "strategies": self.supporters(pos),
                    "amplitude": self.amplitudes[pos].to_dict(),
                    "settled": self.settled[pos].to_dict(),
                    "score": self.scores[pos],
                }
                for pos in sorted(self.groups)
            ],
            "diagnostics": [str(d) for d in self.diagnostics],
        }


class QuantumMind:
    """
    Arbitrates the eight strategies into one move.

    The mind holds no game state. Its only per-instance state is the numpy
    generator used for cosmetic phase jitter; seed it for reproducible
    phases.
    """

    def __init__(
        self,
        strategies: Sequence[Strategy] = STRATEGIES,
        selection_rule: SelectionRule = SelectionRule.SUPPORT,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """
        Initialize the mind.

        Args:
            strategies: Ordered strategies to consult (the eight by default)
            selection_rule: How cells are scored
            seed: Seed for the jitter generator
            rng: Explicit generator (overrides ``seed``)
        """
        if not strategies:
            raise ValueError("QuantumMind needs at least one strategy")
        self.strategies: Tuple[Strategy, ...] = tuple(strategies)
        self.selection_rule = SelectionRule(selection_rule)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def collect_proposals(
        self, board: Board, rules: GameRules, player: Player
    ) -> List[ProposedMove]:
        """Ask every strategy once, in order, about the same position."""
        return [s.suggest(board, rules, player, self.rng) for s in self.strategies]

    @staticmethod
    def group_by_position(
        proposals: Sequence[ProposedMove],
    ) -> Dict[Position, List[ProposedMove]]:
        """Group proposals by target cell, skipping placeholders."""
        groups: Dict[Position, List[ProposedMove]] = {}
        for move in proposals:
            if move.placeholder:
                continue
            groups.setdefault(move.position, []).append(move)
        return groups

    @staticmethod
    def aggregate_amplitude(proposals: Sequence[ProposedMove]) -> Amplitude:
        """Interference: the vector sum of the proposals' amplitudes."""
        total = ZERO
        for move in proposals:
            total = total + move.amplitude
        return total

    @staticmethod
    def settled_amplitude(proposals: Sequence[ProposedMove]) -> Amplitude:
        """Vector sum with the phase jitter removed."""
        total = ZERO
        for move in proposals:
            total = total + move.settled
        return total

    def score(self, proposals: Sequence[ProposedMove]) -> float:
        if self.selection_rule is SelectionRule.SUPPORT:
            return sum(move.magnitude for move in proposals)
        return self.settled_amplitude(proposals).magnitude

    def read(
        self,
        board: Board,
        rules: GameRules,
        player: Player,
        tracker: Optional[TurnTracker] = None,
    ) -> MindReading:
        """
        Deliberate over one position.

        Args:
            board: Current board
            rules: Active rules
            player: Player the mind is moving for
            tracker: Turn tracker to advance; a private one is used if None

        Returns:
            The reading. ``position`` is None when no legal move exists.
        """
        tracker = tracker or TurnTracker()

        proposals = self.collect_proposals(board, rules, player)
        tracker.advance(TurnPhase.PROPOSALS_COLLECTED)
        logger.debug(
            "Proposals for %s: %s",
            player.value,
            ", ".join(f"{m.basis_state}->{m.position}@{m.magnitude:.2f}" for m in proposals),
        )

        grouped = self.group_by_position(proposals)
        groups = {pos: tuple(group) for pos, group in grouped.items()}
        amplitudes = {pos: self.aggregate_amplitude(group) for pos, group in groups.items()}
        settled = {pos: self.settled_amplitude(group) for pos, group in groups.items()}
        scores = {pos: self.score(group) for pos, group in groups.items()}
        tracker.advance(TurnPhase.AGGREGATED)

        moves = available_moves(board, rules)
        if not moves:
            logger.info("No legal move for %s; nothing to select", player.value)
            tracker.advance(TurnPhase.IDLE)
            return MindReading(
                player=player,
                proposals=tuple(proposals),
                groups=groups,
                amplitudes=amplitudes,
                settled=settled,
                scores=scores,
                position=None,
                rule=self.selection_rule,
            )

        chosen = self._collapse(scores)
        fallback = False
        diagnostics: List[QCIError] = []
        if chosen is None or chosen not in moves:
            error = SelectionInvariantError(chosen, fallback=moves[0])
            logger.error("%s", error)
            diagnostics.append(error)
            chosen = moves[0]
            fallback = True
        tracker.advance(TurnPhase.MOVE_SELECTED)
        logger.debug("Collapsed onto %s (score %.3f)", chosen, scores.get(chosen, 0.0))

        return MindReading(
            player=player,
            proposals=tuple(proposals),
            groups=groups,
            amplitudes=amplitudes,
            settled=settled,
            scores=scores,
            position=chosen,
            rule=self.selection_rule,
            fallback=fallback,
            diagnostics=tuple(diagnostics),
        )

    def select_winning_position(
        self, board: Board, rules: GameRules, player: Player
    ) -> Optional[Position]:
        """The single cell the mind plays, or None if no legal move exists."""
        return self.read(board, rules, player).position

    @staticmethod
    def _collapse(scores: Dict[Position, float]) -> Optional[Position]:
        best: Optional[Position] = None
        best_score = 0.0
        for pos in sorted(scores):
            if best is None or scores[pos] > best_score + TIE_TOLERANCE:
                best = pos
                best_score = scores[pos]
        return best
