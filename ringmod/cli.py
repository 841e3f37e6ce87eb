"""Command-line front end: ring-modulate a WAV file."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import fields

from .config import ConfigError, RingModParams, Waveform
from .io.wav import WavFormatError, read_wav
from .render import render_file

PARAM_FLAGS = [f.name for f in fields(RingModParams)]


def build_parser() -> argparse.ArgumentParser:
    defaults = RingModParams()
    ap = argparse.ArgumentParser(
        prog="ringmod",
        description="Ring-modulate a PCM WAV file with an LFO-swept carrier",
    )
    ap.add_argument("input", help="Input WAV file (integer PCM)")
    ap.add_argument("-o", "--output", default="output.wav",
                    help="Output WAV file (default: output.wav)")
    ap.add_argument("-c", "--config",
                    help="JSON file of parameters; flags override its values")
    ap.add_argument("--mix", type=int,
                    help=f"Dry/wet mix 0-100 %% (default: {defaults.mix})")
    ap.add_argument("--frequency", type=float,
                    help=f"Carrier frequency 0.6-4000 Hz (default: {defaults.frequency})")
    ap.add_argument("--amount", type=float,
                    help=f"LFO depth 0-10 (default: {defaults.amount})")
    ap.add_argument("--waveform", dest="lfo_waveform",
                    choices=[w.value for w in Waveform] + ["sine", "sq"],
                    help=f"LFO shape (default: {defaults.lfo_waveform.value})")
    ap.add_argument("--rate", type=float,
                    help=f"LFO rate 0.1-25 Hz (default: {defaults.rate})")
    ap.add_argument("-n", "--length", type=int,
                    help="Samples to process (default: whole file)")
    ap.add_argument("--play", action="store_true",
                    help="Play the result after writing it")
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="Log pipeline steps")
    return ap


def resolve_params(args: argparse.Namespace) -> RingModParams:
    """Defaults, then the config file, then any flags given."""
    params = RingModParams.from_json(args.config) if args.config else RingModParams()
    overrides = {
        name: getattr(args, name)
        for name in PARAM_FLAGS
        if getattr(args, name, None) is not None
    }
    if overrides:
        params = RingModParams.from_dict(overrides, base=params)
    return params


def play(path: str) -> None:
    # Imported lazily: PortAudio is only needed when auditioning
    from .io.playback import AudioPlayer

    signal = read_wav(path)
    player = AudioPlayer(sample_rate=signal.sample_rate, channels=signal.channels)
    player.start()
    try:
        player.play(signal)
        player.wait()
    finally:
        player.stop()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        params = resolve_params(args)
        report = render_file(args.input, args.output, params, sample_length=args.length)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except (OSError, WavFormatError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if report.truncated:
        print(f"Failed to write all samples ({report.processed} of {report.requested})")
    print(f"Wrote {report.written} samples to {report.output_path}")

    if args.play:
        print("Playing... Ctrl+C to stop")
        try:
            play(args.output)
        except KeyboardInterrupt:
            print("\nStopped.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
