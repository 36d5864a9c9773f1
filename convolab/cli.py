"""Command-line interface for convolab."""

import argparse
import math
import os
import sys
import time

from . import __version__
from .convolution import Method, convolve, convolve_circular, convolve_fft, convolve_linear
from .dsp import Window
from .errors import AllocationError, EmptyInputError
from .fileio import load_signal, save_signal
from .generators import gaussian_pulse, generate, noise, sine
from .plot import render_comparison, render_signal, render_spectrum
from .signal import Signal, SignalType, apply_window, normalize, statistics
from .spectrum import compute_spectrum, dominant_frequency, spectrogram


def _log(msg):
    print(f"[convolab] {msg}")


def _load(path):
    _log(f"Loading {path} …")
    signal = load_signal(path)
    _log(f"  {signal.length} samples @ {signal.sample_rate:g} Hz")
    return signal


def _save(signal, path):
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    save_signal(signal, path)
    _log(f"Wrote {path}")


def _default_output(input_path, suffix):
    """Build an output path by appending *suffix* before the extension."""
    base, ext = os.path.splitext(input_path)
    return f"{base}_{suffix}{ext or '.csv'}"


# ---------------------------------------------------------------------------
# Sub-command handlers
# ---------------------------------------------------------------------------

_GENERATOR_PARAMS = {
    SignalType.SINE: ("frequency", "amplitude", "phase"),
    SignalType.SQUARE: ("frequency", "amplitude"),
    SignalType.TRIANGLE: ("frequency", "amplitude"),
    SignalType.SAWTOOTH: ("frequency", "amplitude"),
    SignalType.NOISE: ("amplitude",),
    SignalType.IMPULSE: ("amplitude", "delay"),
    SignalType.GAUSSIAN: ("amplitude", "sigma", "center"),
}


def _cmd_generate(args):
    kind = SignalType(args.kind)
    params = {name: getattr(args, name) for name in _GENERATOR_PARAMS[kind]}
    params["duration"] = args.duration
    params["sample_rate"] = args.sample_rate
    if kind is SignalType.NOISE:
        params["rng"] = args.seed

    signal = generate(kind, **params)
    _log(f"Generated {signal.name}: {signal.length} samples")
    _save(signal, args.output)


def _cmd_info(args):
    signal = _load(args.input)
    stats = statistics(signal)
    print("Signal Information:")
    print(f"  Name: {signal.name}")
    print(f"  Type: {signal.kind.label}")
    print(f"  Length: {signal.length} samples")
    print(f"  Sample Rate: {signal.sample_rate:.1f} Hz")
    print(f"  Duration: {signal.duration:.3f} seconds")
    print(f"  Range: [{stats.minimum:.6f}, {stats.maximum:.6f}]")
    print(f"  Mean: {stats.mean:.6f}")
    print(f"  RMS: {stats.rms:.6f}")
    print(f"  Standard Deviation: {stats.std:.6f}")


def _cmd_convolve(args):
    x = _load(args.input)
    h = _load(args.kernel)

    _log(f"Running {args.method} convolution …")
    t0 = time.time()
    result = convolve(x, h, args.method)
    elapsed = time.time() - t0
    _log(f"  done in {elapsed:.3f}s, {result.length} samples")

    if args.normalize:
        normalize(result)
    if args.plot:
        print(render_comparison(x, result, "Input vs Convolution Result",
                                width=args.width, height=args.height))

    out_path = args.output or _default_output(args.input, args.method)
    _save(result, out_path)


def _cmd_spectrum(args):
    signal = _load(args.input)
    if args.window:
        signal = apply_window(signal, args.window)

    _log("Computing spectrum …")
    result = compute_spectrum(signal)
    _log(f"  {result.length} bins, resolution {result.resolution:.3f} Hz")

    peak = dominant_frequency(result)
    if peak is not None:
        _log(f"  dominant frequency {peak[0]:.2f} Hz (magnitude {peak[1]:.4f})")
    print(render_spectrum(result, args.width, args.height,
                          show_phase=not args.no_phase))


def _cmd_spectrogram(args):
    signal = _load(args.input)
    frames = spectrogram(signal, args.window_size, args.max_windows)
    if not frames:
        _log("Signal too short for spectrogram analysis.")
        return
    print(f"Window size: {args.window_size} samples")
    for frame in frames:
        print(f"Window {frame.index} (t={frame.start_time:.3f}s): "
              f"dominant frequency {frame.frequency:.1f} Hz "
              f"(magnitude: {frame.magnitude:.4f})")


def _cmd_window(args):
    signal = _load(args.input)
    windowed = apply_window(signal, args.window)
    _save(windowed, args.output)


def _cmd_plot(args):
    signal = _load(args.input)
    print(render_signal(signal, args.width, args.height))


def _benchmark_operands(n, sr):
    """A 50 Hz sine and a centred Gaussian pulse of exactly *n* samples."""
    center = n // 2
    sigma = 0.01
    x = Signal([math.sin(2.0 * math.pi * 50.0 * i / sr) for i in range(n)],
               sr, SignalType.SINE, "Sine Wave (50.0Hz, 1.00A)")
    h = Signal([math.exp(-(((i - center) / sr) ** 2) / (2.0 * sigma * sigma))
                for i in range(n)],
               sr, SignalType.GAUSSIAN, "Gaussian Pulse")
    return x, h


def _cmd_benchmark(args):
    sr = args.sample_rate
    print(f"{'Length':<10} {'Direct (ms)':<15} {'FFT (ms)':<15} {'Speedup':<15} {'Max error':<12}")
    print("-" * 70)
    for n in args.lengths:
        x, h = _benchmark_operands(n, sr)

        t0 = time.perf_counter()
        direct = convolve_linear(x, h)
        direct_ms = (time.perf_counter() - t0) * 1000.0

        t0 = time.perf_counter()
        fast = convolve_fft(x, h)
        fft_ms = (time.perf_counter() - t0) * 1000.0

        speedup = direct_ms / fft_ms if fft_ms > 0 else 0.0
        err = max(abs(a - b) for a, b in zip(direct, fast))
        print(f"{n:<10d} {direct_ms:<15.3f} {fft_ms:<15.3f} {speedup:<14.2f}x {err:<12.2e}")


def _cmd_tutorial(args):
    x = Signal([1, 2, 1, 0, 0], 1.0, name="Signal x[n] = [1, 2, 1, 0, 0]")
    h = Signal([1, 0.5, 0.25], 1.0, name="Signal h[n] = [1, 0.5, 0.25]")
    y = convolve_linear(x, h)

    print("The discrete convolution formula is:")
    print("    (x * h)[n] = Σ x[k] × h[n-k]")
    print()
    print(render_signal(x, args.width, args.height))
    print(render_signal(h, args.width, args.height))
    print(render_signal(y, args.width, args.height))
    print(f"Output length: {y.length} (input: {x.length} + kernel: {h.length} - 1)")
    print("y[n] = " + ", ".join(f"{v:g}" for v in y))
    print()
    print("Manual calculation:")
    print("y[0] = x[0]×h[0] = 1×1 = 1")
    print("y[1] = x[0]×h[1] + x[1]×h[0] = 1×0.5 + 2×1 = 2.5")
    print("y[2] = x[0]×h[2] + x[1]×h[1] + x[2]×h[0] = 1×0.25 + 2×0.5 + 1×1 = 2.25")


def _peak_near(signal, freq, tolerance=5.0):
    """Largest spectral magnitude within *tolerance* Hz of *freq*."""
    result = compute_spectrum(signal)
    half = result.length // 2
    return max(m for f, m in zip(result.frequency[:half], result.magnitude[:half])
               if abs(f - freq) <= tolerance)


def _demo_basic(args):
    sr = 1000.0
    x = sine(5.0, 1.0, 0.0, 1.0, sr)
    h = Signal([0.2 if i < 25 else 0.0 for i in range(50)], sr,
               SignalType.CUSTOM, "Rectangular Pulse")

    linear = convolve_linear(x, h)
    circular = convolve_circular(x, h)
    print(render_comparison(x, linear, "Input vs Linear Convolution",
                            width=args.width, height=args.height))
    print(render_comparison(x, circular, "Input vs Circular Convolution",
                            width=args.width, height=args.height))
    print(f"Linear convolution: output length = {x.length} + {h.length} - 1 "
          f"= {linear.length} samples")
    print(f"Circular convolution: output length = max({x.length}, {h.length}) "
          f"= {circular.length} samples")


def _demo_filter(args):
    sr = 2000.0
    low = sine(50.0, 0.8, 0.0, 0.5, sr)
    high = sine(300.0, 0.3, 0.0, 0.5, sr)
    hiss = noise(0.1, 0.5, sr, rng=args.seed)
    composite = Signal([a + b + c for a, b, c in zip(low, high, hiss)], sr,
                       SignalType.CUSTOM, "Composite (50 Hz + 300 Hz + noise)")
    taps = 20
    lpf = Signal([1.0 / taps] * taps, sr, SignalType.CUSTOM,
                 f"Moving Average ({taps} taps)")

    filtered = convolve_linear(composite, lpf)
    print(render_comparison(composite, filtered, "Before vs After Low-pass Filtering",
                            width=args.width, height=args.height))
    print(f"Output length: {composite.length} + {lpf.length} - 1 = {filtered.length} samples")
    print(f"50 Hz magnitude: before {_peak_near(composite, 50.0):.2f}, "
          f"after {_peak_near(filtered, 50.0):.2f}")
    print(f"300 Hz magnitude: before {_peak_near(composite, 300.0):.2f}, "
          f"after {_peak_near(filtered, 300.0):.2f}")


def _demo_frequency(args):
    sr = 1000.0
    x = sine(10.0, 1.0, 0.0, 1.0, sr)
    h = gaussian_pulse(1.0, 0.05, 0.5, 1.0, sr)

    t0 = time.perf_counter()
    direct = convolve_linear(x, h)
    direct_ms = (time.perf_counter() - t0) * 1000.0
    t0 = time.perf_counter()
    fast = convolve_fft(x, h)
    fft_ms = (time.perf_counter() - t0) * 1000.0

    print(render_comparison(direct, fast, "Direct vs FFT Convolution",
                            width=args.width, height=args.height))
    err = max(abs(a - b) for a, b in zip(direct, fast))
    print(f"Direct convolution: {direct.length} samples in {direct_ms:.3f} ms")
    print(f"FFT convolution: {fast.length} samples in {fft_ms:.3f} ms")
    print(f"Maximum difference: {err:.2e}")


def _demo_system(args):
    sr = 1000.0
    step = Signal([1.0 if i > 250 else 0.0 for i in range(1000)], sr,
                  SignalType.CUSTOM, "Step Input")
    taps = 200
    response = Signal([math.exp(-i / 50.0) / 50.0 for i in range(taps)], sr,
                      SignalType.CUSTOM, "Exponential Decay Response")

    output = convolve_linear(step, response)
    print(render_comparison(step, output, "Step Input vs System Output",
                            width=args.width, height=args.height))
    print(f"Output length: {step.length} + {response.length} - 1 = {output.length} samples")
    print(f"Steady-state output: {output[step.length - 1]:.4f}")


_DEMOS = {
    "basic": _demo_basic,
    "filter": _demo_filter,
    "frequency": _demo_frequency,
    "system": _demo_system,
}


def _cmd_demo(args):
    _log(f"Running {args.name} demo …")
    _DEMOS[args.name](args)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_plot_size(p, width=100, height=25):
    p.add_argument("--width", type=int, default=width, help=f"plot width in characters (default: {width})")
    p.add_argument("--height", type=int, default=height, help=f"plot height in lines (default: {height})")


def build_parser():
    """Construct and return the top-level :class:`ArgumentParser`."""
    parser = argparse.ArgumentParser(
        prog="convolab",
        description="Convolution and FFT signal processing – no external dependencies.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )

    sub = parser.add_subparsers(dest="command", help="operation")

    # --- generate -----------------------------------------------------------
    p_gen = sub.add_parser(
        "generate",
        help="Synthesize a test signal",
        description="Generate a sine, square, triangle, sawtooth, noise, impulse or Gaussian signal.",
    )
    p_gen.add_argument("kind", choices=[k.value for k in _GENERATOR_PARAMS])
    p_gen.add_argument("-o", "--output", required=True, help="output file (.csv or .wav)")
    p_gen.add_argument("--frequency", type=float, default=5.0, help="frequency in Hz (default: 5)")
    p_gen.add_argument("--amplitude", type=float, default=1.0, help="peak amplitude (default: 1)")
    p_gen.add_argument("--phase", type=float, default=0.0, help="sine phase in radians (default: 0)")
    p_gen.add_argument("--duration", type=float, default=1.0, help="duration in seconds (default: 1)")
    p_gen.add_argument("--sample-rate", type=float, default=1000.0, help="sample rate in Hz (default: 1000)")
    p_gen.add_argument("--delay", type=float, default=0.0, help="impulse delay in seconds (default: 0)")
    p_gen.add_argument("--sigma", type=float, default=0.05, help="Gaussian width in seconds (default: 0.05)")
    p_gen.add_argument("--center", type=float, default=0.5, help="Gaussian centre in seconds (default: 0.5)")
    p_gen.add_argument("--seed", type=int, default=None, help="random seed for noise")
    p_gen.set_defaults(func=_cmd_generate)

    # --- info ---------------------------------------------------------------
    p_info = sub.add_parser("info", help="Print signal metadata and statistics")
    p_info.add_argument("input", help="signal file (.csv or .wav)")
    p_info.set_defaults(func=_cmd_info)

    # --- convolve -----------------------------------------------------------
    p_conv = sub.add_parser(
        "convolve",
        help="Convolve a signal with a kernel",
        description="Linear (direct), circular, or FFT-accelerated convolution.",
    )
    p_conv.add_argument("input", help="input signal file")
    p_conv.add_argument("kernel", help="kernel / impulse response file")
    p_conv.add_argument("-o", "--output", default=None, help="output file (default: <input>_<method>.<ext>)")
    p_conv.add_argument("-m", "--method", choices=[m.value for m in Method], default=Method.LINEAR.value,
                        help="convolution algorithm (default: linear)")
    p_conv.add_argument("--normalize", action="store_true", help="rescale the result to [-1, 1]")
    p_conv.add_argument("--plot", action="store_true", help="print input and result plots")
    _add_plot_size(p_conv, height=20)
    p_conv.set_defaults(func=_cmd_convolve)

    # --- spectrum -----------------------------------------------------------
    p_spec = sub.add_parser("spectrum", help="Magnitude and phase spectrum of a signal")
    p_spec.add_argument("input", help="signal file")
    p_spec.add_argument("-w", "--window", choices=[w.value for w in Window], default=None,
                        help="window applied before the FFT (default: none)")
    p_spec.add_argument("--no-phase", action="store_true", help="omit the phase table")
    _add_plot_size(p_spec)
    p_spec.set_defaults(func=_cmd_spectrum)

    # --- spectrogram --------------------------------------------------------
    p_sg = sub.add_parser("spectrogram", help="Dominant frequency over sliding windows")
    p_sg.add_argument("input", help="signal file")
    p_sg.add_argument("--window-size", type=int, default=128, help="window length in samples (default: 128)")
    p_sg.add_argument("--max-windows", type=int, default=10, help="number of windows to report (default: 10)")
    p_sg.set_defaults(func=_cmd_spectrogram)

    # --- window -------------------------------------------------------------
    p_win = sub.add_parser("window", help="Apply a window function")
    p_win.add_argument("input", help="signal file")
    p_win.add_argument("window", type=Window.parse, help="rectangular, hann, hamming or blackman")
    p_win.add_argument("-o", "--output", required=True, help="output file")
    p_win.set_defaults(func=_cmd_window)

    # --- plot ---------------------------------------------------------------
    p_plot = sub.add_parser("plot", help="ASCII plot of a signal")
    p_plot.add_argument("input", help="signal file")
    _add_plot_size(p_plot)
    p_plot.set_defaults(func=_cmd_plot)

    # --- benchmark ----------------------------------------------------------
    p_bench = sub.add_parser("benchmark", help="Compare direct and FFT convolution speed")
    p_bench.add_argument("--lengths", type=int, nargs="+", default=[128, 256, 512, 1024],
                         help="signal lengths to time (default: 128 256 512 1024)")
    p_bench.add_argument("--sample-rate", type=float, default=1000.0)
    p_bench.set_defaults(func=_cmd_benchmark)

    # --- tutorial -----------------------------------------------------------
    p_tut = sub.add_parser("tutorial", help="Walk through a small convolution by hand")
    _add_plot_size(p_tut, width=40, height=10)
    p_tut.set_defaults(func=_cmd_tutorial)

    # --- demo ---------------------------------------------------------------
    p_demo = sub.add_parser(
        "demo",
        help="Run a worked convolution example",
        description="basic: linear vs circular; filter: moving-average low-pass; "
                    "frequency: direct vs FFT; system: step response.",
    )
    p_demo.add_argument("name", choices=list(_DEMOS))
    p_demo.add_argument("--seed", type=int, default=0, help="noise seed for the filter demo (default: 0)")
    _add_plot_size(p_demo, height=20)
    p_demo.set_defaults(func=_cmd_demo)

    return parser


def main(argv=None):
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except (EmptyInputError, AllocationError, ValueError, OSError) as exc:
        print(f"[convolab] error: {exc}", file=sys.stderr)
        sys.exit(2)
