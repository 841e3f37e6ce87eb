"""Phase accumulator and LFO shapes."""

from __future__ import annotations

import math

from ..config import Waveform

TWO_PI = 2.0 * math.pi


class PhaseAccumulator:
    """Running angular position of an oscillator, kept in ``[0, 2π)``.

    Advancing by a per-sample increment (rather than recomputing
    ``2π·f·t`` from time zero) keeps the phase small, so long renders do not
    lose precision and frequency changes between samples stay glitch-free.
    """

    __slots__ = ("_phase",)

    def __init__(self, phase: float = 0.0):
        self._phase = 0.0
        self.advance(phase)

    @property
    def phase(self) -> float:
        return self._phase

    def advance(self, increment: float) -> float:
        """Add ``increment`` radians and wrap. Returns the new phase."""
        phase = (self._phase + increment) % TWO_PI
        # A tiny negative sum wraps to a value that rounds up to exactly 2π
        if phase >= TWO_PI:
            phase = 0.0
        self._phase = phase
        return phase


def lfo_value(waveform: Waveform, phase: float) -> float:
    """Evaluate the LFO at ``phase``.

    SINUSOIDAL gives ``sin(phase)`` in [-1, 1]. SQUARE is a one-sided gate:
    1 on the non-negative half of the cycle, 0 otherwise, so it only ever
    pushes the carrier upward.
    """
    s = math.sin(phase)
    if waveform is Waveform.SINUSOIDAL:
        return s
    return 1.0 if s >= 0.0 else 0.0
