"""RingModulator — LFO-swept carrier multiplied into an integer PCM signal."""

from __future__ import annotations

import math
import operator
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np

from ..config import ConfigError, RingModParams
from .oscillator import TWO_PI, PhaseAccumulator, lfo_value

# Excursion at amount=10 is 3x the base frequency (linear, not true octaves)
EXCURSION_SCALE = 3.0


@dataclass(frozen=True)
class RingModResult:
    """Output of one :func:`process` run."""

    samples: np.ndarray   # int64, possibly shorter than requested
    requested: int

    @property
    def truncated(self) -> bool:
        """True when the input ran out before ``requested`` samples."""
        return len(self.samples) < self.requested

    def __len__(self) -> int:
        return len(self.samples)


class RingModulator:
    """Per-run oscillator pair: an LFO sweeping a sine carrier.

    One instance owns its two phase accumulators; create a fresh one for
    every signal (or channel) you process.

    Usage::

        mod = RingModulator(44100, RingModParams())
        out = [mod.apply(s) for s in samples]
    """

    def __init__(self, sample_rate: int, params: RingModParams):
        _check_sample_rate(sample_rate)
        params.validate()
        self.sample_rate = sample_rate
        self.params = params

        self._mix = params.mix_fraction
        self._amount = params.amount_fraction
        self._lfo_increment = TWO_PI * params.rate / sample_rate
        self._lfo = PhaseAccumulator()
        self._carrier = PhaseAccumulator()
        self._frequency = params.frequency

    @property
    def lfo_phase(self) -> float:
        return self._lfo.phase

    @property
    def carrier_phase(self) -> float:
        return self._carrier.phase

    @property
    def frequency(self) -> float:
        """Instantaneous carrier frequency set by the most recent step."""
        return self._frequency

    def next_carrier(self) -> float:
        """Advance both oscillators by one sample and return the carrier value."""
        p = self.params
        lfo = lfo_value(p.lfo_waveform, self._lfo.advance(self._lfo_increment))
        excursion = lfo * p.frequency * EXCURSION_SCALE * self._amount
        self._frequency = p.frequency + excursion
        increment = TWO_PI * self._frequency / self.sample_rate
        return math.sin(self._carrier.advance(increment))

    def apply(self, sample: int) -> int:
        """Ring-modulate one sample and blend it with the dry value."""
        carrier = self.next_carrier()
        s = float(sample)
        # int() truncates toward zero
        return int(s * (1.0 - self._mix) + s * carrier * self._mix)


def process(
    sample_rate: int,
    sample_length: int,
    samples: Iterable[int],
    params: RingModParams,
) -> RingModResult:
    """Ring-modulate up to ``sample_length`` samples.

    Stops early, without padding, if ``samples`` is exhausted first; the
    returned result is then flagged ``truncated``.

    Raises:
        ConfigError: if ``sample_rate`` is not positive, ``sample_length``
            is negative, or ``params`` is out of range.
    """
    _check_sample_length(sample_length)
    mod = RingModulator(sample_rate, params)

    if isinstance(samples, np.ndarray):
        samples = samples.tolist()
    source = iter(samples)

    out: list[int] = []
    for _ in range(sample_length):
        try:
            sample = next(source)
        except StopIteration:
            break
        out.append(mod.apply(sample))

    return RingModResult(np.asarray(out, dtype=np.int64), requested=sample_length)


def iter_process(
    sample_rate: int, samples: Iterable[int], params: RingModParams
) -> Iterator[int]:
    """Lazily yield one output sample per input sample.

    Parameters are checked here, before the first sample is pulled.
    """
    mod = RingModulator(sample_rate, params)
    return (mod.apply(sample) for sample in samples)


def carrier_frequency_trace(
    sample_rate: int, sample_length: int, params: RingModParams
) -> np.ndarray:
    """Instantaneous carrier frequency (Hz) at each of ``sample_length`` steps."""
    _check_sample_length(sample_length)
    mod = RingModulator(sample_rate, params)
    trace = np.empty(sample_length, dtype=np.float64)
    for i in range(sample_length):
        mod.next_carrier()
        trace[i] = mod.frequency
    return trace


def _check_sample_rate(sample_rate: int) -> None:
    try:
        rate = operator.index(sample_rate)
    except TypeError:
        raise ConfigError(f"sample_rate must be an integer, got {sample_rate!r}") from None
    if rate <= 0:
        raise ConfigError(f"sample_rate must be positive, got {sample_rate}")


def _check_sample_length(sample_length: int) -> None:
    try:
        length = operator.index(sample_length)
    except TypeError:
        raise ConfigError(f"sample_length must be an integer, got {sample_length!r}") from None
    if length < 0:
        raise ConfigError(f"sample_length must be non-negative, got {sample_length}")
