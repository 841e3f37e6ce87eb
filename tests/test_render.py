"""Integration tests for the render pipeline and the command line."""

import json
import logging

import numpy as np
import pytest
from scipy.io import wavfile

from ringmod.cli import build_parser, main, resolve_params
from ringmod.config import RingModParams, Waveform
from ringmod.dsp.engine import process
from ringmod.io.wav import read_wav
from ringmod.render import render_file, render_signal


@pytest.fixture
def tone_wav(tmp_path):
    """Half a second of a 220 Hz tone, mono int16."""
    sr = 8000
    t = np.arange(sr // 2) / sr
    data = (np.sin(2 * np.pi * 220 * t) * 20000).astype(np.int16)
    path = tmp_path / "tone.wav"
    wavfile.write(path, sr, data)
    return path


@pytest.fixture
def stereo_wav(tmp_path):
    rng = np.random.default_rng(3)
    data = rng.integers(-20000, 20000, size=(400, 2)).astype(np.int16)
    path = tmp_path / "stereo.wav"
    wavfile.write(path, 16000, data)
    return path


class TestRenderFile:
    def test_matches_engine(self, tone_wav, tmp_path):
        out = tmp_path / "out.wav"
        params = RingModParams(mix=80, frequency=300.0)
        report = render_file(tone_wav, out, params)

        src = read_wav(tone_wav)
        expected = process(src.sample_rate, src.sample_length, src.samples, params)
        _, data = wavfile.read(out)
        assert data.dtype == np.int16
        assert data.tolist() == expected.samples.tolist()
        assert report.written == src.sample_length
        assert not report.truncated

    def test_dry_mix_copies_input(self, tone_wav, tmp_path):
        out = tmp_path / "dry.wav"
        render_file(tone_wav, out, RingModParams(mix=0))
        _, src = wavfile.read(tone_wav)
        _, dst = wavfile.read(out)
        assert np.array_equal(src, dst)

    def test_stereo_layout_preserved(self, stereo_wav, tmp_path):
        out = tmp_path / "out.wav"
        report = render_file(stereo_wav, out)
        rate, data = wavfile.read(out)
        assert rate == 16000
        assert data.shape == (400, 2)
        assert report.channels == 2

    def test_shorter_length(self, tone_wav, tmp_path):
        out = tmp_path / "short.wav"
        report = render_file(tone_wav, out, sample_length=100)
        _, data = wavfile.read(out)
        assert len(data) == 100
        assert not report.truncated


class TestRenderSignal:
    def test_truncation_is_logged(self, tone_wav, caplog):
        sig = read_wav(tone_wav)
        with caplog.at_level(logging.WARNING, logger="ringmod.render"):
            wet, result = render_signal(sig, RingModParams(), sample_length=sig.sample_length + 50)
        assert result.truncated
        assert wet.sample_length == sig.sample_length
        assert "Failed to write all samples" in caplog.text

    def test_no_warning_when_complete(self, tone_wav, caplog):
        sig = read_wav(tone_wav)
        with caplog.at_level(logging.WARNING, logger="ringmod.render"):
            render_signal(sig, RingModParams())
        assert caplog.text == ""


class TestCli:
    def test_writes_output(self, tone_wav, tmp_path, capsys):
        out = tmp_path / "cli.wav"
        assert main([str(tone_wav), "-o", str(out)]) == 0
        assert out.exists()
        assert f"Wrote 4000 samples to {out}" in capsys.readouterr().out

    def test_reports_truncation(self, tone_wav, tmp_path, capsys):
        out = tmp_path / "cli.wav"
        assert main([str(tone_wav), "-o", str(out), "--length", "5000"]) == 0
        assert "Failed to write all samples (4000 of 5000)" in capsys.readouterr().out

    def test_bad_parameter_exit_code(self, tone_wav, tmp_path, capsys):
        assert main([str(tone_wav), "-o", str(tmp_path / "x.wav"), "--mix", "150"]) == 2
        assert "mix" in capsys.readouterr().err

    def test_negative_length_exit_code(self, tone_wav, tmp_path):
        assert main([str(tone_wav), "-o", str(tmp_path / "x.wav"), "--length", "-1"]) == 2

    def test_missing_input_exit_code(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.wav"), "-o", str(tmp_path / "x.wav")]) == 1
        assert "ERROR" in capsys.readouterr().err

    def test_malformed_input_exit_code(self, tmp_path, capsys):
        bad = tmp_path / "short.wav"
        bad.write_bytes(b"RIFF\x10\x00\x00\x00WAVEfmt ")
        assert main([str(bad), "-o", str(tmp_path / "x.wav")]) == 1
        assert "ERROR" in capsys.readouterr().err

    def test_directory_input_exit_code(self, tmp_path, capsys):
        assert main([str(tmp_path), "-o", str(tmp_path / "x.wav")]) == 1
        assert "ERROR" in capsys.readouterr().err

    def test_flags_override_config_file(self, tmp_path):
        cfg = tmp_path / "preset.json"
        cfg.write_text(json.dumps({"mix": 10, "rate": 2.0, "waveform": "sine"}))
        args = build_parser().parse_args(["in.wav", "--config", str(cfg), "--mix", "20"])
        params = resolve_params(args)
        assert params.mix == 20
        assert params.rate == 2.0
        assert params.lfo_waveform is Waveform.SINUSOIDAL
        assert params.frequency == RingModParams().frequency

    def test_no_flags_gives_defaults(self):
        args = build_parser().parse_args(["in.wav"])
        assert resolve_params(args) == RingModParams()
