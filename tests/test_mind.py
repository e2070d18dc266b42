"""Tests for QuantumMind aggregation and selection."""

import json
import logging

import numpy as np
import pytest

from qci_tictactoe.amplitude import Amplitude
from qci_tictactoe.board import Board, GameRules, Player, Position, available_moves
from qci_tictactoe.exceptions import SelectionInvariantError, TurnSequenceError
from qci_tictactoe.mind import QuantumMind, SelectionRule, TurnPhase, TurnTracker
from qci_tictactoe.strategies import BasisState, Strategy, corner_cells


class TestTurnTracker:
    """Test the per-turn state machine."""

    def test_full_turn(self) -> None:
        """Test the normal sequence of phases."""
        tracker = TurnTracker()
        for phase in (
            TurnPhase.PROPOSALS_COLLECTED,
            TurnPhase.AGGREGATED,
            TurnPhase.MOVE_SELECTED,
            TurnPhase.APPLIED,
            TurnPhase.IDLE,
        ):
            tracker.advance(phase)
        assert tracker.phase is TurnPhase.IDLE
        assert len(tracker.history) == 6

    def test_skipping_a_step(self) -> None:
        """Test that a skipped step is rejected."""
        tracker = TurnTracker()
        with pytest.raises(TurnSequenceError, match="idle -> aggregated"):
            tracker.advance(TurnPhase.AGGREGATED)
        assert tracker.phase is TurnPhase.IDLE

    def test_applied_needs_selection(self) -> None:
        """Test that nothing is applied before a move is selected."""
        tracker = TurnTracker()
        tracker.advance(TurnPhase.PROPOSALS_COLLECTED)
        tracker.advance(TurnPhase.AGGREGATED)
        with pytest.raises(TurnSequenceError):
            tracker.advance(TurnPhase.APPLIED)

    def test_read_stops_at_selection(self, mind: QuantumMind, rules: GameRules) -> None:
        """Test that the mind leaves the final steps to the controller."""
        tracker = TurnTracker()
        mind.read(Board.empty(), rules, Player.X, tracker)
        assert tracker.phase is TurnPhase.MOVE_SELECTED


class TestAggregation:
    """Test proposal collection and grouping."""

    def test_eight_proposals(self, mind: QuantumMind, rules: GameRules) -> None:
        """Test that every strategy is consulted once, in order."""
        proposals = mind.collect_proposals(Board.empty(), rules, Player.X)
        assert [p.basis_state for p in proposals] == [b.value for b in BasisState]

    def test_grouping_order(self, mind: QuantumMind, rules: GameRules) -> None:
        """Test that groups follow the order of first proposal."""
        proposals = mind.collect_proposals(Board.empty(), rules, Player.X)
        groups = QuantumMind.group_by_position(proposals)
        assert list(groups) == [Position(1, 1), Position(0, 0)]
        assert len(groups[Position(1, 1)]) == 7
        assert [p.basis_state for p in groups[Position(0, 0)]] == ["Random"]

    def test_aggregate_is_vector_sum(self) -> None:
        """Test that aggregation interferes the amplitudes."""
        proposals = QuantumMind().collect_proposals(Board.empty(), GameRules(), Player.X)
        center = [p for p in proposals if p.position == Position(1, 1)]
        total = QuantumMind.aggregate_amplitude(center)
        assert total.real == pytest.approx(sum(p.amplitude.real for p in center))
        assert total.imag == pytest.approx(sum(p.amplitude.imag for p in center))
        assert total.magnitude < sum(p.magnitude for p in center)


class TestSelection:
    """Test the collapse onto a single cell."""

    def test_center_beats_corners(self, mind: QuantumMind, rules: GameRules) -> None:
        """Test that the center's settled amplitude exceeds every corner's."""
        reading = mind.read(Board.empty(), rules, Player.X)
        assert reading.position == Position(1, 1)
        center = reading.settled[Position(1, 1)].magnitude
        for corner in corner_cells(rules):
            settled = reading.settled.get(corner)
            assert center > (settled.magnitude if settled is not None else 0.0)
        assert center == pytest.approx(0.919, abs=1e-3)

    def test_blocks_open_row(self, mind: QuantumMind, rules: GameRules) -> None:
        """Test that the mind blocks an immediate threat."""
        board = Board.from_string("XX./.O./..O")
        assert mind.select_winning_position(board, rules, Player.O) == Position(0, 2)

    def test_repeatable(self, rules: GameRules) -> None:
        """Test that differently seeded minds choose the same cell."""
        board = Board.from_string("X.O/.X./...")
        first = QuantumMind(seed=1).read(board, rules, Player.O)
        second = QuantumMind(seed=2).read(board, rules, Player.O)
        assert first.position == second.position
        assert [p.magnitude for p in first.proposals] == pytest.approx(
            [p.magnitude for p in second.proposals]
        )
        for pos, score in first.scores.items():
            assert second.scores[pos] == pytest.approx(score)

    def test_repeatable_over_calls(self, mind: QuantumMind, rules: GameRules) -> None:
        """Test that one mind keeps choosing the same cell as its jitter advances."""
        board = Board.from_string("..X/.O./X.O")
        chosen = {mind.select_winning_position(board, rules, Player.X) for _ in range(20)}
        assert len(chosen) == 1

    def test_support_rule(self, rules: GameRules) -> None:
        """Test the magnitude-sum scoring rule."""
        mind = QuantumMind(selection_rule=SelectionRule.SUPPORT, seed=0)
        reading = mind.read(Board.empty(), rules, Player.X)
        assert reading.rule is SelectionRule.SUPPORT
        assert reading.position == Position(1, 1)
        assert reading.scores[Position(1, 1)] == pytest.approx(5.3)

    def test_interference_rule(self, rules: GameRules) -> None:
        """Test the vector-sum scoring rule on the opening position."""
        mind = QuantumMind(selection_rule=SelectionRule.INTERFERENCE, seed=0)
        reading = mind.read(Board.empty(), rules, Player.X)
        assert reading.position == Position(1, 1)
        assert reading.scores[Position(1, 1)] == pytest.approx(0.919, abs=1e-3)

    def test_interference_consensus_cancels(self, rules: GameRules) -> None:
        """Test that agreeing strategies can cancel under the interference rule."""
        board = Board.from_string("XX./.O./..O")
        reading = QuantumMind(selection_rule=SelectionRule.INTERFERENCE).read(
            board, rules, Player.O
        )
        assert len(reading.groups[Position(0, 2)]) == 6
        assert reading.scores[Position(0, 2)] < reading.scores[Position(2, 1)]
        assert reading.position == Position(2, 1)

    def test_tie_goes_to_row_major_first(self) -> None:
        """Test the tie break between equally scored cells."""
        scores = {Position(2, 0): 0.5, Position(0, 2): 0.5, Position(1, 1): 0.4}
        assert QuantumMind._collapse(scores) == Position(0, 2)

    def test_empty_strategy_list(self) -> None:
        """Test that a mind needs strategies."""
        with pytest.raises(ValueError):
            QuantumMind(strategies=[])

    def test_explicit_generator(self, rules: GameRules) -> None:
        """Test that an explicit generator drives the jitter."""
        a = QuantumMind(rng=np.random.default_rng(5)).read(Board.empty(), rules, Player.X)
        b = QuantumMind(rng=np.random.default_rng(5)).read(Board.empty(), rules, Player.X)
        assert [p.phase for p in a.proposals] == [p.phase for p in b.proposals]


class TestEdgeCases:
    """Test no-move and invariant-violation handling."""

    def test_no_legal_move(self, mind: QuantumMind, rules: GameRules, full_draw_board: Board) -> None:
        """Test that a full board yields no position."""
        tracker = TurnTracker()
        reading = mind.read(full_draw_board, rules, Player.X, tracker)
        assert reading.no_legal_move
        assert reading.position is None
        assert reading.groups == {}
        assert all(p.placeholder for p in reading.proposals)
        assert tracker.phase is TurnPhase.IDLE
        assert mind.select_winning_position(full_draw_board, rules, Player.X) is None

    def test_disabled_center_only(self, mind: QuantumMind, no_center_rules: GameRules) -> None:
        """Test that a disabled center is never selected."""
        board = Board.from_string("XOX/O.X/OXO")
        assert mind.read(board, no_center_rules, Player.X).no_legal_move

    def test_fallback_on_illegal_selection(
        self, rules: GameRules, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test recovery when selection lands on an occupied cell."""
        stubborn = Strategy(BasisState.CENTER, lambda s: (Position(0, 0), Amplitude(1.0)))
        mind = QuantumMind(strategies=[stubborn])
        board = Board.from_string("X../.../...")

        with caplog.at_level(logging.ERROR, logger="qci_tictactoe.mind"):
            reading = mind.read(board, rules, Player.O)

        assert reading.fallback
        assert reading.position == available_moves(board, rules)[0]
        assert len(reading.diagnostics) == 1
        assert isinstance(reading.diagnostics[0], SelectionInvariantError)
        assert "not a legal move" in caplog.text


class TestMindReading:
    """Test the reading's accessors and serialisation."""

    def test_supporters(self, mind: QuantumMind, rules: GameRules) -> None:
        """Test that supporters list the strategies behind a cell."""
        reading = mind.read(Board.empty(), rules, Player.X)
        assert reading.supporters(Position(0, 0)) == ["Random"]
        assert "Random" not in reading.supporters(Position(1, 1))
        assert reading.supporters(Position(2, 1)) == []

    def test_magnitudes_and_phases(self, mind: QuantumMind, rules: GameRules) -> None:
        """Test the per-cell views."""
        reading = mind.read(Board.empty(), rules, Player.X)
        assert set(reading.magnitudes()) == {Position(1, 1), Position(0, 0)}
        assert set(reading.phases()) == set(reading.magnitudes())

    def test_to_dict_is_json(self, mind: QuantumMind, rules: GameRules) -> None:
        """Test that the reading serialises to JSON."""
        reading = mind.read(Board.from_string("XX./.O./..O"), rules, Player.O)
        data = json.loads(json.dumps(reading.to_dict()))
        assert data["player"] == "O"
        assert data["position"] == [0, 2]
        assert data["fallback"] is False
        assert len(data["proposals"]) == 8
        assert [0, 2] in [cell["position"] for cell in data["cells"]]
