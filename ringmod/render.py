"""Render pipeline — wires WAV decode → ring modulator → WAV encode."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import RingModParams
from .dsp.engine import RingModResult, process
from .io.wav import WavSignal, read_wav, write_signal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderReport:
    input_path: Path
    output_path: Path
    sample_rate: int
    channels: int
    requested: int
    processed: int
    written: int

    @property
    def truncated(self) -> bool:
        """True when the input ran out before ``requested`` samples."""
        return self.processed < self.requested


def render_signal(
    signal: WavSignal,
    params: RingModParams,
    sample_length: int | None = None,
) -> tuple[WavSignal, RingModResult]:
    """Ring-modulate a decoded signal in memory.

    ``sample_length`` defaults to the decoded length. A shorter input than
    requested is not an error: the output is cut short and a warning logged.
    """
    if sample_length is None:
        sample_length = signal.sample_length

    logger.info(
        "Processing %d samples (%d Hz, %d ch) with %s",
        sample_length, signal.sample_rate, signal.channels, params,
    )
    result = process(signal.sample_rate, sample_length, signal.samples, params)

    if result.truncated:
        logger.warning(
            "Failed to write all samples: input ran out after %d of %d",
            len(result), result.requested,
        )

    return signal.with_samples(result.samples), result


def render_file(
    input_path: str | Path,
    output_path: str | Path,
    params: RingModParams | None = None,
    sample_length: int | None = None,
) -> RenderReport:
    """Read ``input_path``, ring-modulate it, and write ``output_path``.

    Usage::

        report = render_file("guitar.wav", "output.wav", RingModParams(mix=50))
        if report.truncated:
            ...
    """
    params = params or RingModParams()
    input_path, output_path = Path(input_path), Path(output_path)

    signal = read_wav(input_path)
    logger.info(
        "Read %s: %d samples, %.2fs, %s",
        input_path, signal.sample_length, signal.duration, signal.dtype,
    )

    wet, result = render_signal(signal, params, sample_length)
    written = write_signal(output_path, wet)
    logger.info("Wrote %d samples to %s", written, output_path)

    return RenderReport(
        input_path=input_path,
        output_path=output_path,
        sample_rate=signal.sample_rate,
        channels=signal.channels,
        requested=result.requested,
        processed=len(result),
        written=written,
    )
