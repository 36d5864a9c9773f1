"""Tests for convolab.plot – ASCII rendering."""

import math
import unittest

from convolab.plot import render_comparison, render_signal, render_spectrum
from convolab.signal import Signal
from convolab.spectrum import compute_spectrum


class TestRenderSignal(unittest.TestCase):
    def test_dimensions(self):
        sig = Signal([math.sin(i / 10.0) for i in range(500)], 100.0, name="wave")
        text = render_signal(sig, width=60, height=12)
        lines = text.splitlines()
        self.assertEqual(lines[0], "=== wave ===")
        grid = [l for l in lines if l.startswith("        |")
                or l.startswith("  ") and "|" in l]
        # top border + height rows + bottom border
        self.assertEqual(len(grid), 12 + 2)
        self.assertIn("*", text)

    def test_short_signal_spans_rows_and_columns(self):
        text = render_signal(Signal([1, 2, 1, 0, 0], name="x"), width=40, height=10)
        star_rows = [l for l in text.splitlines() if "*" in l]
        self.assertGreater(len(star_rows), 1)
        self.assertEqual(sum(l.count("*") for l in star_rows), 40)

    def test_tail_beyond_width_is_drawn(self):
        sig = Signal([0.0] * 100 + [5.0] * 50)
        lines = render_signal(sig, width=100, height=10).splitlines()
        top = next(i for i, l in enumerate(lines) if l.startswith("  5.000 |"))
        self.assertIn("*", lines[top + 1])
        self.assertTrue(lines[top + 1].rstrip().endswith("*"))

    def test_constant_signal(self):
        text = render_signal(Signal([1.0] * 20), width=20, height=5)
        self.assertIn("Range: [0.900000, 1.100000]", text)

    def test_too_small_or_empty(self):
        self.assertEqual(render_signal(Signal([1.0]), width=5, height=10), "")
        self.assertEqual(render_signal(Signal([1.0]), width=20, height=2), "")
        self.assertEqual(render_signal(Signal([])), "")


class TestRenderSpectrum(unittest.TestCase):
    def test_peak_listed_in_phase_table(self):
        sr = 64.0
        sig = Signal([math.cos(2 * math.pi * 4 * i / sr) for i in range(64)], sr)
        text = render_spectrum(compute_spectrum(sig), width=32, height=8)
        self.assertIn("Max Magnitude: 32.000000", text)
        self.assertIn("Bin  4: Freq=4.0 Hz", text)

    def test_silence(self):
        text = render_spectrum(compute_spectrum([0.0] * 8))
        self.assertIn("No significant frequency content detected.", text)

    def test_without_phase(self):
        sig = Signal([math.cos(i) for i in range(32)])
        text = render_spectrum(compute_spectrum(sig), show_phase=False)
        self.assertNotIn("Phase Spectrum", text)


class TestRenderComparison(unittest.TestCase):
    def test_correlation_reported(self):
        a = Signal([math.sin(i / 4.0) for i in range(40)], name="a")
        text = render_comparison(a, a.copy(name="b"), "Same")
        self.assertIn("=== Same ===", text)
        self.assertIn("Cross-correlation: 1.000000", text)

    def test_lengths_differ(self):
        text = render_comparison(Signal([1.0, 2.0]), Signal([1.0]))
        self.assertIn("Length: 2 vs 1 samples", text)
        self.assertNotIn("Cross-correlation", text)


if __name__ == "__main__":
    unittest.main()
