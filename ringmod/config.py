"""Ring modulator configuration — frozen dataclass with the stock preset as defaults."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any


class ConfigError(ValueError):
    """Raised when parameters or run settings are out of range."""


class Waveform(Enum):
    """LFO shape applied to the carrier frequency."""

    # Smoothly sweeps between 0 and 3x above ``frequency`` (and below, on the
    # negative half of the cycle)
    SINUSOIDAL = "sinusoidal"
    # Gates between the unaffected carrier and the full excursion
    SQUARE = "square"

    @classmethod
    def parse(cls, value: str | Waveform) -> Waveform:
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        aliases = {"sine": "sinusoidal", "sin": "sinusoidal", "sq": "square"}
        try:
            return cls(aliases.get(key, key))
        except ValueError:
            names = ", ".join(w.value for w in cls)
            raise ConfigError(f"unknown LFO waveform {value!r} (expected one of: {names})") from None


# Documented ranges, inclusive
AMOUNT_RANGE = (0.0, 10.0)
RATE_RANGE = (0.1, 25.0)
MIX_RANGE = (0, 100)
FREQUENCY_RANGE = (0.6, 4000.0)  # 0.6-80 Hz on the LO setting, 30 Hz-4 kHz on HI


@dataclass(frozen=True)
class RingModParams:
    # LFO
    amount: float = 6.7             # 0-10, fraction of the 3x carrier excursion
    lfo_waveform: Waveform = Waveform.SQUARE
    rate: float = 0.18              # Hz, LFO speed

    # Modulator
    mix: int = 71                   # %, dry/wet
    frequency: float = 156.0        # Hz, base carrier frequency

    def __post_init__(self) -> None:
        object.__setattr__(self, "lfo_waveform", Waveform.parse(self.lfo_waveform))
        self.validate()

    @property
    def mix_fraction(self) -> float:
        return self.mix / 100.0

    @property
    def amount_fraction(self) -> float:
        return self.amount / 10.0

    def validate(self) -> None:
        """Reject any field outside its documented range (NaN included)."""
        if isinstance(self.mix, bool) or not isinstance(self.mix, int):
            raise ConfigError(f"mix must be an integer percentage, got {self.mix!r}")
        _check_range("amount", self.amount, AMOUNT_RANGE)
        _check_range("rate", self.rate, RATE_RANGE)
        _check_range("mix", self.mix, MIX_RANGE)
        _check_range("frequency", self.frequency, FREQUENCY_RANGE)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: RingModParams | None = None) -> RingModParams:
        """Build parameters from a plain mapping, falling back to ``base`` for missing keys."""
        data = dict(data)
        if "waveform" in data:
            data["lfo_waveform"] = data.pop("waveform")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown parameter(s): {', '.join(unknown)}")

        base = base or cls()
        merged = {name: getattr(base, name) for name in known}
        merged.update(data)
        if isinstance(merged["mix"], float) and merged["mix"].is_integer():
            merged["mix"] = int(merged["mix"])
        return cls(**merged)

    @classmethod
    def from_json(cls, path: str | Path, base: RingModParams | None = None) -> RingModParams:
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"{path}: invalid JSON ({e})") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a JSON object of parameters")
        return cls.from_dict(data, base=base)


def _check_range(name: str, value: float, bounds: tuple[float, float]) -> None:
    lo, hi = bounds
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    try:
        ok = math.isfinite(value) and lo <= value <= hi
    except TypeError:
        ok = False
    if not ok:
        raise ConfigError(f"{name} must be in [{lo}, {hi}], got {value!r}")
