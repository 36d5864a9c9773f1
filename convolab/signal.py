"""The :class:`Signal` container and the in-place / derived operations on it."""

import enum
import math
from collections import namedtuple

from .dsp import Window, window_coefficients
from .errors import EmptyInputError


class SignalType(enum.Enum):
    """How a signal was produced."""

    SINE = "sine"
    SQUARE = "square"
    TRIANGLE = "triangle"
    SAWTOOTH = "sawtooth"
    NOISE = "noise"
    IMPULSE = "impulse"
    GAUSSIAN = "gaussian"
    CUSTOM = "custom"

    @property
    def label(self):
        return _LABELS[self]


_LABELS = {
    SignalType.SINE: "Sine Wave",
    SignalType.SQUARE: "Square Wave",
    SignalType.TRIANGLE: "Triangle Wave",
    SignalType.SAWTOOTH: "Sawtooth Wave",
    SignalType.NOISE: "White Noise",
    SignalType.IMPULSE: "Impulse",
    SignalType.GAUSSIAN: "Gaussian Pulse",
    SignalType.CUSTOM: "Custom Signal",
}


class Signal:
    """A real-valued, uniformly sampled, single-channel signal.

    Parameters
    ----------
    samples : iterable of float
        Sample values.  They are copied, so later changes to the caller's
        buffer do not leak into the signal.
    sample_rate : float
        Sampling rate in Hz.  Must be > 0.
    kind : SignalType
        Origin of the signal (defaults to ``CUSTOM``).
    name : str
        Display name.
    """

    def __init__(self, samples=(), sample_rate=1.0, kind=SignalType.CUSTOM,
                 name="Untitled Signal"):
        sample_rate = float(sample_rate)
        if not sample_rate > 0:
            raise ValueError(f"sample_rate must be > 0, got {sample_rate}")
        self.samples = [float(v) for v in samples]
        self.sample_rate = sample_rate
        self.kind = kind
        self.name = name

    @property
    def length(self):
        return len(self.samples)

    @property
    def duration(self):
        """Duration in seconds (``length / sample_rate``)."""
        return len(self.samples) / self.sample_rate

    def times(self):
        """Return the time stamp of every sample, in seconds."""
        return [i / self.sample_rate for i in range(len(self.samples))]

    def copy(self, name=None):
        return Signal(self.samples, self.sample_rate, self.kind,
                      self.name if name is None else name)

    def __len__(self):
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def __getitem__(self, index):
        return self.samples[index]

    def __repr__(self):
        return (f"Signal(name={self.name!r}, kind={self.kind.value}, "
                f"length={self.length}, sample_rate={self.sample_rate})")


def as_signal(value, sample_rate=1.0):
    """Return *value* as a :class:`Signal`.

    Plain sequences are wrapped in a ``CUSTOM`` signal.  ``None`` and empty
    operands raise :class:`EmptyInputError`.
    """
    if value is None:
        raise EmptyInputError("missing input signal")
    if not isinstance(value, Signal):
        value = Signal(value, sample_rate)
    if value.length == 0:
        raise EmptyInputError(f"input signal {value.name!r} has no samples")
    return value


# ---------------------------------------------------------------------------
# In-place and derived operations
# ---------------------------------------------------------------------------

def normalize(signal):
    """Linearly rescale *signal* in place to the range [-1, 1].

    Empty and constant signals (range below 1e-10) are left unchanged.
    Returns *signal* for chaining.
    """
    data = signal.samples
    if not data:
        return signal
    lo = min(data)
    hi = max(data)
    span = hi - lo
    if span < 1e-10:
        return signal
    signal.samples = [2.0 * (v - lo) / span - 1.0 for v in data]
    return signal


def apply_window(signal, window):
    """Return a windowed copy of *signal*.

    *window* is a :class:`~convolab.dsp.Window` or its name.
    """
    window = Window.parse(window)
    coeffs = window_coefficients(window, signal.length)
    return Signal(
        [v * w for v, w in zip(signal.samples, coeffs)],
        signal.sample_rate,
        signal.kind,
        f"{signal.name} ({window.value} windowed)",
    )


SignalStats = namedtuple(
    "SignalStats",
    ["minimum", "maximum", "mean", "rms", "variance", "std", "peak_to_peak"],
)


def statistics(signal):
    """Summary statistics of *signal* (population variance)."""
    signal = as_signal(signal)
    data = signal.samples
    n = len(data)
    mean = sum(data) / n
    variance = sum((v - mean) ** 2 for v in data) / n
    rms = math.sqrt(sum(v * v for v in data) / n)
    lo = min(data)
    hi = max(data)
    return SignalStats(lo, hi, mean, rms, variance, math.sqrt(variance), hi - lo)


def correlation(a, b):
    """Pearson correlation of two equal-length signals.

    Returns ``None`` when the lengths differ or either signal is flat.
    """
    x = list(a)
    y = list(b)
    n = len(x)
    if n == 0 or n != len(y):
        return None
    mean_x = sum(x) / n
    mean_y = sum(y) / n
    std_x = math.sqrt(max(sum(v * v for v in x) / n - mean_x * mean_x, 0.0))
    std_y = math.sqrt(max(sum(v * v for v in y) / n - mean_y * mean_y, 0.0))
    if std_x <= 1e-10 or std_y <= 1e-10:
        return None
    cross = sum(u * v for u, v in zip(x, y)) / n
    return (cross - mean_x * mean_y) / (std_x * std_y)
