"""Synthetic test-signal generators.

Every generator produces ``int(duration * sample_rate)`` samples with
``t = i / sample_rate``.
"""

import math
import random

from .signal import Signal, SignalType


def _length(duration, sample_rate):
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be > 0, got {sample_rate}")
    if duration < 0:
        raise ValueError(f"duration must be >= 0, got {duration}")
    return int(duration * sample_rate)


def sine(frequency, amplitude=1.0, phase=0.0, duration=1.0, sample_rate=1000.0):
    """``amplitude * sin(2*pi*frequency*t + phase)``."""
    n = _length(duration, sample_rate)
    data = [
        amplitude * math.sin(2.0 * math.pi * frequency * i / sample_rate + phase)
        for i in range(n)
    ]
    return Signal(data, sample_rate, SignalType.SINE,
                  f"Sine Wave ({frequency:.1f}Hz, {amplitude:.2f}A)")


def square(frequency, amplitude=1.0, duration=1.0, sample_rate=1000.0):
    """Square wave following the sign of the matching sine (``+A`` at zero)."""
    n = _length(duration, sample_rate)
    data = []
    for i in range(n):
        s = math.sin(2.0 * math.pi * frequency * i / sample_rate)
        data.append(amplitude if s >= 0 else -amplitude)
    return Signal(data, sample_rate, SignalType.SQUARE,
                  f"Square Wave ({frequency:.1f}Hz, {amplitude:.2f}A)")


def triangle(frequency, amplitude=1.0, duration=1.0, sample_rate=1000.0):
    """Triangle wave rising from ``-A`` to ``+A`` over the first half-cycle."""
    n = _length(duration, sample_rate)
    data = []
    for i in range(n):
        p = math.fmod(i / sample_rate * frequency, 1.0)
        if p < 0.5:
            data.append(amplitude * (4.0 * p - 1.0))
        else:
            data.append(amplitude * (3.0 - 4.0 * p))
    return Signal(data, sample_rate, SignalType.TRIANGLE,
                  f"Triangle Wave ({frequency:.1f}Hz, {amplitude:.2f}A)")


def sawtooth(frequency, amplitude=1.0, duration=1.0, sample_rate=1000.0):
    n = _length(duration, sample_rate)
    data = [
        amplitude * (2.0 * math.fmod(i / sample_rate * frequency, 1.0) - 1.0)
        for i in range(n)
    ]
    return Signal(data, sample_rate, SignalType.SAWTOOTH,
                  f"Sawtooth Wave ({frequency:.1f}Hz, {amplitude:.2f}A)")


def noise(amplitude=1.0, duration=1.0, sample_rate=1000.0, rng=None):
    """Uniform white noise in ``[-amplitude, amplitude]``.

    *rng* is a :class:`random.Random` instance or an integer seed; pass one
    for reproducible output.
    """
    if rng is None or isinstance(rng, int):
        rng = random.Random(rng)
    n = _length(duration, sample_rate)
    data = [amplitude * (2.0 * rng.random() - 1.0) for _ in range(n)]
    return Signal(data, sample_rate, SignalType.NOISE,
                  f"White Noise ({amplitude:.2f}A)")


def impulse(amplitude=1.0, delay=0.0, duration=1.0, sample_rate=1000.0):
    """A single sample of *amplitude* at ``int(delay * sample_rate)``.

    A delay outside the signal yields all zeros.
    """
    n = _length(duration, sample_rate)
    data = [0.0] * n
    pos = int(delay * sample_rate)
    if 0 <= pos < n:
        data[pos] = amplitude
    return Signal(data, sample_rate, SignalType.IMPULSE,
                  f"Impulse ({amplitude:.2f}A, {delay:.3f}s delay)")


def gaussian_pulse(amplitude=1.0, sigma=0.05, center=0.5, duration=1.0,
                   sample_rate=1000.0):
    """``amplitude * exp(-t**2 / (2 * sigma**2))`` centred at *center* seconds."""
    if sigma <= 0:
        raise ValueError(f"sigma must be > 0, got {sigma}")
    n = _length(duration, sample_rate)
    c = int(center * sample_rate)
    data = []
    for i in range(n):
        t = (i - c) / sample_rate
        data.append(amplitude * math.exp(-(t * t) / (2.0 * sigma * sigma)))
    return Signal(data, sample_rate, SignalType.GAUSSIAN,
                  f"Gaussian Pulse (σ={sigma:.3f}, center={center:.3f}s)")


_GENERATORS = {
    SignalType.SINE: sine,
    SignalType.SQUARE: square,
    SignalType.TRIANGLE: triangle,
    SignalType.SAWTOOTH: sawtooth,
    SignalType.NOISE: noise,
    SignalType.IMPULSE: impulse,
    SignalType.GAUSSIAN: gaussian_pulse,
}


def generate(kind, **params):
    """Build a signal of *kind* (a :class:`SignalType` or its name)."""
    try:
        kind = SignalType(kind)
        func = _GENERATORS[kind]
    except (ValueError, KeyError):
        choices = ", ".join(k.value for k in _GENERATORS)
        raise ValueError(f"Cannot generate {kind!r} signals (choose from {choices})")
    return func(**params)
