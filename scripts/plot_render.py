#!/usr/bin/env python3
"""Plot a ring modulator render: dry vs wet waveform and the carrier sweep.

Usage:
    python scripts/plot_render.py guitar.wav                      # stock preset
    python scripts/plot_render.py guitar.wav --waveform sine -s 8
    python scripts/plot_render.py guitar.wav --save render.png
"""

import argparse

import matplotlib.pyplot as plt
import numpy as np

from ringmod.config import RingModParams, Waveform
from ringmod.dsp.engine import carrier_frequency_trace
from ringmod.io.wav import read_wav
from ringmod.render import render_signal


def plot_render(path: str, params: RingModParams, seconds: float, save: str | None = None):
    signal = read_wav(path)
    frames = min(signal.frames, int(seconds * signal.sample_rate))
    n = frames * signal.channels

    dry = signal.with_samples(signal.samples[:n])
    wet, result = render_signal(dry, params)
    if result.truncated:
        print(f"  Input ran out after {len(result)} samples")

    # First channel only for the waveform panel
    t = np.arange(frames) / signal.sample_rate
    dry_ch = dry.samples[::signal.channels][:frames]
    wet_ch = wet.samples[::signal.channels][:frames]

    # The engine steps once per interleaved sample, so sample the trace per frame
    trace = carrier_frequency_trace(signal.sample_rate, n, params)[::signal.channels]

    fig, axes = plt.subplots(3, 1, figsize=(12, 9), sharex=True)
    fig.suptitle(
        f"{path}: mix={params.mix}% f={params.frequency:g} Hz "
        f"amount={params.amount:g} {params.lfo_waveform.value} @ {params.rate:g} Hz"
    )

    axes[0].plot(t, dry_ch, color="#999999", linewidth=0.6, label="dry")
    axes[0].plot(t, wet_ch, color="#e377c2", linewidth=0.6, alpha=0.8, label="wet")
    axes[0].set_ylabel("Sample")
    axes[0].legend(loc="upper right")

    axes[1].plot(t, trace, color="#17becf")
    axes[1].axhline(params.frequency, color="#999999", linestyle="--", linewidth=0.8)
    axes[1].set_ylabel("Carrier (Hz)")

    axes[2].plot(t, trace - params.frequency, color="#9467bd")
    axes[2].set_ylabel("Excursion (Hz)")
    axes[2].set_xlabel("Time (s)")

    for ax in axes:
        ax.grid(alpha=0.3)

    plt.tight_layout()
    if save:
        fig.savefig(save, dpi=120)
        print(f"  Saved {save}")
    else:
        plt.show()


def main():
    defaults = RingModParams()
    ap = argparse.ArgumentParser(description="Plot a ring modulator render")
    ap.add_argument("input", help="Input WAV file")
    ap.add_argument("-s", "--seconds", type=float, default=5.0,
                    help="Seconds of audio to plot (default: 5)")
    ap.add_argument("--mix", type=int, default=defaults.mix)
    ap.add_argument("--frequency", type=float, default=defaults.frequency)
    ap.add_argument("--amount", type=float, default=defaults.amount)
    ap.add_argument("--waveform", default=defaults.lfo_waveform.value,
                    choices=[w.value for w in Waveform] + ["sine", "sq"])
    ap.add_argument("--rate", type=float, default=defaults.rate)
    ap.add_argument("--save", help="Write the figure to this PNG instead of showing it")
    args = ap.parse_args()

    params = RingModParams(
        amount=args.amount,
        lfo_waveform=args.waveform,
        rate=args.rate,
        mix=args.mix,
        frequency=args.frequency,
    )
    plot_render(args.input, params, args.seconds, args.save)


if __name__ == "__main__":
    main()
