"""AudioPlayer — sounddevice OutputStream wrapper for auditioning renders."""

from __future__ import annotations

import time
from collections import deque

import numpy as np
import sounddevice as sd

from .wav import WavSignal


def to_float(signal: WavSignal) -> np.ndarray:
    """Scale integer PCM to float32 in [-1, 1], shaped (frames, channels)."""
    full_scale = float(np.iinfo(signal.dtype).max)
    if signal.dtype == np.uint8:
        full_scale = 128.0  # samples were re-centred on decode
    audio = signal.samples[: signal.frames * signal.channels] / full_scale
    return audio.reshape(-1, signal.channels).astype(np.float32)


class AudioPlayer:
    """Plays a rendered signal through a callback-driven OutputStream.

    Usage::

        player = AudioPlayer(sample_rate=44100, channels=2)
        player.start()
        player.play(signal)
        player.wait()
        player.stop()
    """

    def __init__(self, sample_rate: int = 44100, channels: int = 1, block_size: int = 2048):
        self.sample_rate = sample_rate
        self.channels = channels
        self.block_size = block_size
        self._buffer: deque[np.ndarray] = deque()
        self._stream: sd.OutputStream | None = None

    def _callback(
        self,
        outdata: np.ndarray,
        frames: int,
        time_info: object,
        status: sd.CallbackFlags,
    ) -> None:
        if self._buffer:
            block = self._buffer.popleft()
            n = min(len(block), frames)
            outdata[:n] = block[:n]
            if n < frames:
                outdata[n:] = 0.0
        else:
            outdata[:] = 0.0

    def start(self) -> None:
        """Open and start the audio stream."""
        self._stream = sd.OutputStream(
            samplerate=self.sample_rate,
            blocksize=self.block_size,
            channels=self.channels,
            dtype="float32",
            callback=self._callback,
        )
        self._stream.start()

    def play(self, signal: WavSignal) -> None:
        """Queue a whole signal for playback, one block per callback."""
        audio = to_float(signal)
        for start in range(0, len(audio), self.block_size):
            self._buffer.append(audio[start:start + self.block_size])

    def wait(self, poll: float = 0.05) -> None:
        """Block until every queued block has been handed to the device."""
        while self._buffer:
            time.sleep(poll)
        # let the last block drain out of the device buffer
        time.sleep(self.block_size / self.sample_rate)

    def stop(self) -> None:
        """Stop and close the audio stream."""
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
        self._buffer.clear()
