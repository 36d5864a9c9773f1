"""Tests for convolab.cli – argument parsing and sub-commands."""

import contextlib
import io
import math
import os
import re
import tempfile
import unittest

from convolab.cli import _benchmark_operands, build_parser, main
from convolab.fileio import load_csv, load_wav, save_csv
from convolab.signal import Signal


def _run(argv):
    """Run the CLI and return its captured stdout."""
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        main(argv)
    return out.getvalue()


class TestCLIParsing(unittest.TestCase):
    def test_version(self):
        parser = build_parser()
        with self.assertRaises(SystemExit) as ctx:
            with contextlib.redirect_stdout(io.StringIO()):
                parser.parse_args(["--version"])
        self.assertEqual(ctx.exception.code, 0)

    def test_no_command_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            _run([])
        self.assertEqual(ctx.exception.code, 1)

    def test_convolve_defaults(self):
        args = build_parser().parse_args(["convolve", "a.csv", "b.csv"])
        self.assertEqual(args.method, "linear")
        self.assertIsNone(args.output)
        self.assertFalse(args.normalize)


class TestCLISubcommands(unittest.TestCase):
    """Integration tests that run each sub-command on small signal files."""

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.x_path = os.path.join(self.tmpdir, "x.csv")
        self.h_path = os.path.join(self.tmpdir, "h.csv")
        save_csv(Signal([1, 2, 1, 0, 0], 10.0, name="x"), self.x_path)
        save_csv(Signal([1, 0.5, 0.25], 10.0, name="h"), self.h_path)

    def tearDown(self):
        for f in os.listdir(self.tmpdir):
            os.unlink(os.path.join(self.tmpdir, f))
        os.rmdir(self.tmpdir)

    def _path(self, name):
        return os.path.join(self.tmpdir, name)

    def test_generate_csv_and_wav(self):
        csv_path = self._path("sine.csv")
        _run(["generate", "sine", "-o", csv_path, "--frequency", "50",
              "--duration", "0.5", "--sample-rate", "1000"])
        sig = load_csv(csv_path)
        self.assertEqual(sig.length, 500)
        self.assertEqual(sig.sample_rate, 1000.0)
        self.assertEqual(sig.name, "Sine Wave (50.0Hz, 1.00A)")

        wav_path = self._path("noise.wav")
        _run(["generate", "noise", "-o", wav_path, "--amplitude", "0.5",
              "--duration", "0.1", "--sample-rate", "8000", "--seed", "3"])
        self.assertEqual(load_wav(wav_path).length, 800)

    def test_convolve_linear_default_output(self):
        out = _run(["convolve", self.x_path, self.h_path])
        self.assertIn("[convolab] Running linear convolution", out)
        result = load_csv(self._path("x_linear.csv"))
        self.assertEqual(result.name, "Conv(x * h)")
        self.assertEqual(result.sample_rate, 10.0)
        for a, b in zip(result, [1.0, 2.5, 2.25, 1.0, 0.25, 0.0, 0.0]):
            self.assertAlmostEqual(a, b, places=5)

    def test_convolve_methods(self):
        fft_path = self._path("fft.csv")
        circ_path = self._path("circ.csv")
        _run(["convolve", self.x_path, self.h_path, "-m", "fft", "-o", fft_path])
        _run(["convolve", self.x_path, self.h_path, "--method", "circular",
              "-o", circ_path, "--plot"])
        self.assertEqual(load_csv(fft_path).length, 7)
        self.assertEqual(load_csv(circ_path).length, 5)

    def test_convolve_normalize(self):
        path = self._path("norm.csv")
        _run(["convolve", self.x_path, self.h_path, "--normalize", "-o", path])
        sig = load_csv(path)
        self.assertAlmostEqual(max(sig), 1.0, places=5)
        self.assertAlmostEqual(min(sig), -1.0, places=5)

    def test_info(self):
        out = _run(["info", self.x_path])
        self.assertIn("Name: x", out)
        self.assertIn("Length: 5 samples", out)
        self.assertIn("Mean: 0.800000", out)

    def test_spectrum(self):
        sig_path = self._path("tone.csv")
        _run(["generate", "sine", "-o", sig_path, "--frequency", "50",
              "--duration", "1", "--sample-rate", "1000"])
        out = _run(["spectrum", sig_path, "--window", "hann", "--width", "40", "--height", "10"])
        self.assertIn("FFT Magnitude Spectrum", out)
        self.assertIn("dominant frequency 49.8", out)

    def test_spectrogram(self):
        sig_path = self._path("tone.csv")
        _run(["generate", "sine", "-o", sig_path, "--frequency", "50",
              "--duration", "1", "--sample-rate", "1000"])
        out = _run(["spectrogram", sig_path, "--window-size", "100", "--max-windows", "3"])
        self.assertIn("Window 2 (t=0.100s)", out)
        self.assertNotIn("Window 3", out)

    def test_window(self):
        out_path = self._path("win.csv")
        _run(["window", self.x_path, "hanning", "-o", out_path])
        sig = load_csv(out_path)
        self.assertEqual(sig.name, "x (hann windowed)")
        self.assertAlmostEqual(sig[0], 0.0)
        self.assertAlmostEqual(sig[2], 1.0)

    def test_plot(self):
        out = _run(["plot", self.x_path, "--width", "20", "--height", "6"])
        self.assertIn("=== x ===", out)

    def test_benchmark(self):
        out = _run(["benchmark", "--lengths", "16", "32"])
        self.assertIn("Speedup", out)
        self.assertEqual(len([l for l in out.splitlines() if l.startswith("16 ")]), 1)

    def test_benchmark_operands_have_requested_length(self):
        for n in (1, 7, 1001, 1003, 1005, 1024):
            x, h = _benchmark_operands(n, 1000.0)
            self.assertEqual(x.length, n)
            self.assertEqual(h.length, n)
        x, h = _benchmark_operands(101, 1000.0)
        self.assertEqual(max(h), h[50])
        self.assertEqual(h[50], 1.0)

    def test_tutorial(self):
        out = _run(["tutorial"])
        self.assertIn("y[n] = 1, 2.5, 2.25, 1, 0.25, 0, 0", out)

    def test_missing_file_reports_error(self):
        err = io.StringIO()
        with self.assertRaises(SystemExit) as ctx:
            with contextlib.redirect_stderr(err):
                _run(["info", self._path("missing.csv")])
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("[convolab] error:", err.getvalue())

    def test_empty_file_reports_error(self):
        path = self._path("empty.csv")
        with open(path, "w", encoding="utf-8") as fh:
            fh.write("Time,Amplitude\n")
        with self.assertRaises(SystemExit) as ctx:
            with contextlib.redirect_stderr(io.StringIO()):
                _run(["convolve", path, self.h_path])
        self.assertEqual(ctx.exception.code, 2)


class TestCLIDemos(unittest.TestCase):
    def test_basic_lengths(self):
        out = _run(["demo", "basic", "--width", "40", "--height", "8"])
        self.assertIn("[convolab] Running basic demo", out)
        self.assertIn("output length = 1000 + 50 - 1 = 1049 samples", out)
        self.assertIn("output length = max(1000, 50) = 1000 samples", out)
        self.assertIn("=== Input vs Circular Convolution ===", out)

    def test_filter_removes_high_tone(self):
        out = _run(["demo", "filter", "--seed", "4", "--width", "40", "--height", "8"])
        self.assertIn("Output length: 1000 + 20 - 1 = 1019 samples", out)
        m = re.search(r"300 Hz magnitude: before ([\d.]+), after ([\d.]+)", out)
        self.assertIsNotNone(m)
        before, after = float(m.group(1)), float(m.group(2))
        self.assertLess(after, before / 10.0)

    def test_frequency_methods_agree(self):
        out = _run(["demo", "frequency", "--width", "40", "--height", "8"])
        self.assertIn("Direct convolution: 1999 samples", out)
        self.assertIn("FFT convolution: 1999 samples", out)
        m = re.search(r"Maximum difference: (\S+)", out)
        self.assertLess(float(m.group(1)), 1e-8)

    def test_system_step_response(self):
        out = _run(["demo", "system", "--width", "40", "--height", "8"])
        self.assertIn("Output length: 1000 + 200 - 1 = 1199 samples", out)
        gain = sum(math.exp(-i / 50.0) / 50.0 for i in range(200))
        self.assertIn(f"Steady-state output: {gain:.4f}", out)

    def test_unknown_demo_rejected(self):
        with self.assertRaises(SystemExit):
            with contextlib.redirect_stderr(io.StringIO()):
                build_parser().parse_args(["demo", "echo"])


if __name__ == "__main__":
    unittest.main()
