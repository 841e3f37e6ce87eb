"""WAV decoder/encoder — integer PCM in, flat interleaved int64 samples out."""

from __future__ import annotations

import struct
from dataclasses import dataclass, replace
from pathlib import Path

import numpy as np
import soundfile as sf
from scipy.io import wavfile

# 8-bit WAV is unsigned with silence at 128
UINT8_OFFSET = 128


class WavFormatError(ValueError):
    """Raised for containers the codec cannot turn into integer PCM."""


@dataclass(frozen=True)
class WavSignal:
    """Decoded PCM: interleaved samples plus the layout needed to write them back.

    ``samples`` holds every channel's samples in frame order
    (L0, R0, L1, R1, ...), already shifted to signed values for 8-bit files.
    24-bit files decode to left-justified int32 with ``bits`` set to 24.
    """

    sample_rate: int
    channels: int
    dtype: np.dtype
    samples: np.ndarray
    bits: int | None = None   # on-disk bit depth when narrower than ``dtype``

    @property
    def sample_length(self) -> int:
        """Total interleaved sample count (all channels)."""
        return len(self.samples)

    @property
    def frames(self) -> int:
        return self.sample_length // self.channels

    @property
    def duration(self) -> float:
        return self.frames / self.sample_rate

    def with_samples(self, samples: np.ndarray) -> WavSignal:
        return replace(self, samples=np.asarray(samples, dtype=np.int64))


def read_wav(path: str | Path) -> WavSignal:
    """Decode an integer-PCM WAV file.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        WavFormatError: if the file is not a readable integer-PCM WAV.
    """
    try:
        sample_rate, data = wavfile.read(path)
    except (ValueError, struct.error, EOFError) as e:
        raise WavFormatError(f"{path}: {e}") from e

    if data.dtype.kind not in "iu":
        raise WavFormatError(
            f"{path}: {data.dtype} samples are not supported; expected integer PCM"
        )

    channels = 1 if data.ndim == 1 else data.shape[1]
    samples = data.reshape(-1).astype(np.int64)
    if data.dtype == np.uint8:
        samples -= UINT8_OFFSET

    return WavSignal(
        sample_rate=int(sample_rate),
        channels=channels,
        dtype=data.dtype,
        samples=samples,
        bits=_bit_depth(path) if data.dtype == np.int32 else None,
    )


def _bit_depth(path: str | Path) -> int:
    """Tell 24-bit from 32-bit PCM; scipy decodes both to int32."""
    try:
        subtype = sf.info(str(path)).subtype
    except RuntimeError as e:
        raise WavFormatError(f"{path}: {e}") from e
    return 24 if subtype == "PCM_24" else 32


def write_wav(
    path: str | Path,
    sample_rate: int,
    samples: np.ndarray,
    channels: int = 1,
    dtype: np.dtype | type = np.int16,
    bits: int | None = None,
) -> int:
    """Encode interleaved integer samples as PCM WAV.

    A trailing partial frame is dropped and values are clipped to ``dtype``.
    ``bits=24`` with an int32 ``dtype`` writes packed 24-bit PCM from the
    upper three bytes of each sample.
    Returns the number of samples written.
    """
    dtype = np.dtype(dtype)
    if dtype.kind not in "iu":
        raise WavFormatError(f"cannot write {dtype} samples; expected an integer dtype")
    if channels < 1:
        raise WavFormatError(f"channels must be at least 1, got {channels}")
    if bits is not None and bits != dtype.itemsize * 8 and (bits, dtype) != (24, np.dtype(np.int32)):
        raise WavFormatError(f"cannot write {bits}-bit PCM from {dtype} samples")

    data = np.asarray(samples, dtype=np.int64)
    data = data[: len(data) - len(data) % channels]
    if dtype == np.uint8:
        data = data + UINT8_OFFSET

    info = np.iinfo(dtype)
    data = np.clip(data, info.min, info.max).astype(dtype)
    if channels > 1:
        data = data.reshape(-1, channels)

    if bits == 24:
        sf.write(str(path), data, sample_rate, subtype="PCM_24", format="WAV")
    else:
        wavfile.write(path, sample_rate, data)
    return data.size


def write_signal(path: str | Path, signal: WavSignal) -> int:
    """Write ``signal`` with its own sample rate, channel count and bit depth."""
    return write_wav(
        path, signal.sample_rate, signal.samples, signal.channels, signal.dtype, signal.bits
    )
