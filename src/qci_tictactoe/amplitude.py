"""Complex amplitudes and the proposals that carry them."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict

from qci_tictactoe.board import Player, Position

TWO_PI = 2 * math.pi


def normalize_phase(phase: float) -> float:
    """Wrap an angle into [0, 2*pi)."""
    wrapped = math.fmod(phase, TWO_PI)
    if wrapped < 0:
        wrapped += TWO_PI
    # fmod of a value just below 0 can round up to exactly 2*pi
    return 0.0 if wrapped >= TWO_PI else wrapped


@dataclass(frozen=True)
class Amplitude:
    """
    A magnitude and phase pair.

    Magnitude is a confidence weight, conventionally in [0, 1] but not
    enforced. Addition sums the amplitudes as 2-D vectors, so proposals in
    phase reinforce each other and proposals out of phase cancel.
    Multiplication multiplies magnitudes and adds phases.
    """

    magnitude: float
    phase: float = 0.0

    @classmethod
    def from_components(cls, real: float, imag: float) -> "Amplitude":
        magnitude = math.hypot(real, imag)
        phase = math.atan2(imag, real) if magnitude > 0 else 0.0
        return cls(magnitude=magnitude, phase=normalize_phase(phase))

    @property
    def real(self) -> float:
        return self.magnitude * math.cos(self.phase)

    @property
    def imag(self) -> float:
        return self.magnitude * math.sin(self.phase)

    def __add__(self, other: "Amplitude") -> "Amplitude":
        if not isinstance(other, Amplitude):
            return NotImplemented
        return Amplitude.from_components(self.real + other.real, self.imag + other.imag)

    def __mul__(self, other: "Amplitude") -> "Amplitude":
        if not isinstance(other, Amplitude):
            return NotImplemented
        return Amplitude(
            magnitude=self.magnitude * other.magnitude,
            phase=normalize_phase(self.phase + other.phase),
        )

    def clamp(self, low: float, high: float) -> "Amplitude":
        """Bound the magnitude to [low, high], keeping the phase."""
        return Amplitude(magnitude=min(max(self.magnitude, low), high), phase=self.phase)

    def rotated(self, angle: float) -> "Amplitude":
        return Amplitude(magnitude=self.magnitude, phase=normalize_phase(self.phase + angle))

    def to_dict(self) -> Dict[str, float]:
        return {"magnitude": self.magnitude, "phase": self.phase}

    def __str__(self) -> str:
        return f"{self.magnitude:.3f}∠{math.degrees(self.phase):.0f}°"


ZERO = Amplitude(magnitude=0.0, phase=0.0)


@dataclass(frozen=True)
class ProposedMove:
    """
    One strategy's candidate move.

    ``jitter`` is the cosmetic phase offset that was added to the amplitude;
    :attr:`settled` removes it again. ``placeholder`` marks the zero-magnitude
    proposal returned when no legal cell exists; it must never be played.
    """

    position: Position
    amplitude: Amplitude
    basis_state: str
    player: Player
    jitter: float = 0.0
    placeholder: bool = field(default=False)

    @property
    def magnitude(self) -> float:
        return self.amplitude.magnitude

    @property
    def phase(self) -> float:
        return self.amplitude.phase

    @property
    def settled(self) -> Amplitude:
        """The amplitude without its cosmetic phase jitter."""
        return self.amplitude.rotated(-self.jitter)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "basis_state": self.basis_state,
            "player": self.player.value,
            "position": [self.position.row, self.position.col],
            "magnitude": self.amplitude.magnitude,
            "phase": self.amplitude.phase,
            "placeholder": self.placeholder,
        }
