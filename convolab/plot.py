"""Text-mode plots of signals and magnitude spectra.

The renderers return strings; the CLI decides where to print them.
"""

import math

from .signal import correlation

PLOT_CHAR = "*"
HAXIS_CHAR = "-"
ZERO_CHAR = "+"


def _grid(width, height):
    return [[" "] * width for _ in range(height)]


def render_signal(signal, width=100, height=25):
    """Return an ASCII plot of *signal*, or ``""`` if it cannot be drawn."""
    if signal is None or signal.length == 0 or width < 10 or height < 5:
        return ""

    data = signal.samples
    n = len(data)
    lo = min(data)
    hi = max(data)
    if abs(hi - lo) < 1e-10:
        hi += 0.1
        lo -= 0.1

    lines = [
        f"=== {signal.name} ===",
        f"Length: {n} samples, Sample Rate: {signal.sample_rate:.1f} Hz, "
        f"Duration: {signal.duration:.3f} s",
        f"Range: [{lo:.6f}, {hi:.6f}]",
        "",
    ]

    grid = _grid(width, height)
    zero_row = int(height * hi / (hi - lo))
    if 0 <= zero_row < height:
        grid[zero_row] = [HAXIS_CHAR] * width
        grid[zero_row][0] = ZERO_CHAR

    # Column x covers samples [x*n//width, (x+1)*n//width); short signals
    # repeat each sample across several columns.
    for x in range(width):
        start = x * n // width
        stop = max((x + 1) * n // width, start + 1)
        chunk = data[start:stop]
        value = sum(chunk) / len(chunk)
        y = int((height - 1) * (hi - value) / (hi - lo))
        if 0 <= y < height:
            grid[y][x] = PLOT_CHAR

    lines.append(f"  {hi:.3f} |" + "-" * width)
    for y, row in enumerate(grid):
        label = f"  {(hi + lo) / 2:.3f} |" if y == height // 2 else "        |"
        lines.append(label + "".join(row))
    lines.append(f"  {lo:.3f} |" + "-" * width)

    ruler = "0" + "".join(
        str(x // 10 % 10) if x % 10 == 0 else " " for x in range(1, width)
    )
    lines.append("        " + ruler)
    return "\n".join(lines) + "\n"


def render_spectrum(result, width=100, height=25, show_phase=True):
    """Return an ASCII plot of the positive half of *result*'s magnitude."""
    if result is None or width < 10 or height < 5:
        return ""

    half = result.length // 2
    mags = result.magnitude[:half]
    max_mag = max(mags) if mags else 0.0
    lines = ["=== FFT Magnitude Spectrum ==="]
    if max_mag < 1e-10:
        lines.append("No significant frequency content detected.")
        return "\n".join(lines) + "\n"

    lines.append(f"Max Magnitude: {max_mag:.6f}")
    lines.append(f"Frequency Resolution: {result.resolution:.2f} Hz")
    lines.append("")

    grid = _grid(width, height)
    for x in range(min(width, half)):
        m = mags[x * half // width]
        y = height - 1 - int((height - 1) * m / max_mag)
        if 0 <= y < height:
            grid[y][x] = PLOT_CHAR

    ticks = {height // 4: 0.75, height // 2: 0.5, 3 * height // 4: 0.25}
    lines.append(f"  {max_mag:.3f} |" + "-" * width)
    for y, row in enumerate(grid):
        if y in ticks:
            label = f"  {max_mag * ticks[y]:.3f} |"
        else:
            label = "        |"
        lines.append(label + "".join(row))
    lines.append("  0.000 |" + "-" * width)

    max_freq = result.frequency[half - 1]
    axis = "       0Hz"
    for x in range(10, width, 10):
        axis += f"   {x * max_freq / width:.0f}Hz"
    lines.append(axis)
    lines.append("")

    if show_phase:
        lines.append("=== FFT Phase Spectrum ===")
        for i in range(min(half, 20)):
            if result.magnitude[i] > max_mag * 0.1:
                lines.append(
                    f"Bin {i:2d}: Freq={result.frequency[i]:.1f} Hz, "
                    f"Mag={result.magnitude[i]:.4f}, "
                    f"Phase={result.phase[i]:.2f} rad "
                    f"({math.degrees(result.phase[i]):.1f}°)"
                )
        lines.append("")
    return "\n".join(lines) + "\n"


def render_comparison(a, b, title="Signal Comparison", width=100, height=20):
    """Plot two signals one above the other and compare their properties."""
    lines = [f"=== {title} ===", f"Signal 1: {a.name}", f"Signal 2: {b.name}", ""]
    lines.append(render_signal(a, width, height))
    lines.append(render_signal(b, width, height))
    lines.append("Comparison:")
    lines.append(f"  Length: {a.length} vs {b.length} samples")
    lines.append(f"  Sample Rate: {a.sample_rate:.1f} vs {b.sample_rate:.1f} Hz")
    lines.append(f"  Duration: {a.duration:.3f} vs {b.duration:.3f} seconds")
    r = correlation(a, b)
    if r is not None:
        lines.append(f"  Cross-correlation: {r:.6f}")
    return "\n".join(lines) + "\n"
