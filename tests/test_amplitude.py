"""Tests for amplitudes and proposed moves."""

import math

import pytest

from qci_tictactoe.amplitude import TWO_PI, ZERO, Amplitude, ProposedMove, normalize_phase
from qci_tictactoe.board import Player, Position


class TestNormalizePhase:
    """Test phase wrapping."""

    @pytest.mark.parametrize(
        "phase, expected",
        [
            (0.0, 0.0),
            (math.pi, math.pi),
            (TWO_PI, 0.0),
            (-math.pi / 2, 3 * math.pi / 2),
            (5 * math.pi, math.pi),
        ],
    )
    def test_wraps_into_range(self, phase: float, expected: float) -> None:
        """Test that angles land in [0, 2*pi)."""
        result = normalize_phase(phase)
        assert 0.0 <= result < TWO_PI
        assert result == pytest.approx(expected)


class TestAmplitude:
    """Test amplitude arithmetic."""

    def test_components(self) -> None:
        """Test the cartesian view of an amplitude."""
        amp = Amplitude(2.0, math.pi / 2)
        assert amp.real == pytest.approx(0.0, abs=1e-12)
        assert amp.imag == pytest.approx(2.0)

    def test_in_phase_reinforce(self) -> None:
        """Test that equal phases add their magnitudes."""
        total = Amplitude(0.5, 1.0) + Amplitude(0.5, 1.0)
        assert total.magnitude == pytest.approx(1.0)
        assert total.phase == pytest.approx(1.0)

    def test_opposite_phases_cancel(self) -> None:
        """Test destructive interference."""
        total = Amplitude(1.0, 0.0) + Amplitude(1.0, math.pi)
        assert total.magnitude == pytest.approx(0.0, abs=1e-12)

    def test_quadrature(self) -> None:
        """Test that perpendicular amplitudes add as vectors."""
        total = Amplitude(3.0, 0.0) + Amplitude(4.0, math.pi / 2)
        assert total.magnitude == pytest.approx(5.0)
        assert total.phase == pytest.approx(math.atan2(4.0, 3.0))

    def test_zero_is_identity(self) -> None:
        """Test that adding ZERO changes nothing."""
        amp = Amplitude(0.7, 1.2)
        total = ZERO + amp
        assert total.magnitude == pytest.approx(0.7)
        assert total.phase == pytest.approx(1.2)

    def test_from_components_origin(self) -> None:
        """Test that the origin has zero phase."""
        assert Amplitude.from_components(0.0, 0.0) == Amplitude(0.0, 0.0)

    def test_multiplication(self) -> None:
        """Test that products multiply magnitudes and add phases."""
        product = Amplitude(0.5, 1.0) * Amplitude(0.4, 2.0)
        assert product.magnitude == pytest.approx(0.2)
        assert product.phase == pytest.approx(3.0)

    def test_multiplication_wraps_phase(self) -> None:
        """Test that product phases are normalized."""
        product = Amplitude(1.0, 1.5 * math.pi) * Amplitude(1.0, math.pi)
        assert product.phase == pytest.approx(math.pi / 2)

    def test_clamp(self) -> None:
        """Test magnitude clamping keeps the phase."""
        assert Amplitude(0.05, 1.0).clamp(0.1, 0.9) == Amplitude(0.1, 1.0)
        assert Amplitude(1.5, 1.0).clamp(0.1, 0.9) == Amplitude(0.9, 1.0)
        assert Amplitude(0.5, 1.0).clamp(0.1, 0.9) == Amplitude(0.5, 1.0)

    def test_rotated(self) -> None:
        """Test that rotation changes only the phase."""
        amp = Amplitude(0.8, 0.5).rotated(-1.0)
        assert amp.magnitude == 0.8
        assert amp.phase == pytest.approx(TWO_PI - 0.5)

    def test_add_rejects_other_types(self) -> None:
        """Test that amplitudes only add to amplitudes."""
        with pytest.raises(TypeError):
            Amplitude(1.0) + 1.0

    def test_to_dict(self) -> None:
        """Test the serialisable view."""
        assert Amplitude(0.5, 0.25).to_dict() == {"magnitude": 0.5, "phase": 0.25}


class TestProposedMove:
    """Test proposals and their settled amplitude."""

    def test_settled_removes_jitter(self) -> None:
        """Test that settling undoes the jitter rotation."""
        jitter = 0.3
        move = ProposedMove(
            position=Position(1, 1),
            amplitude=Amplitude(0.9).rotated(math.pi / 4 + jitter),
            basis_state="Defensive",
            player=Player.O,
            jitter=jitter,
        )
        assert move.magnitude == pytest.approx(0.9)
        assert move.settled.magnitude == pytest.approx(0.9)
        assert move.settled.phase == pytest.approx(math.pi / 4)

    def test_to_dict(self) -> None:
        """Test the serialisable view of a proposal."""
        move = ProposedMove(
            position=Position(0, 2),
            amplitude=Amplitude(1.0, 0.0),
            basis_state="Center",
            player=Player.X,
        )
        data = move.to_dict()
        assert data["position"] == [0, 2]
        assert data["basis_state"] == "Center"
        assert data["player"] == "X"
        assert data["placeholder"] is False
