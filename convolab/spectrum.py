"""Frequency-domain analysis of real-valued signals."""

from collections import namedtuple

from .dsp import MAX_FFT_SIZE, fft, magnitude, next_pow2, pad_complex, phase
from .errors import AllocationError
from .signal import Signal, as_signal


def bin_frequencies(length, sample_rate):
    """Signed frequency (Hz) of every bin of a *length*-point FFT.

    Bin ``i`` maps to ``i * fs / N`` up to ``N / 2`` and to
    ``(i - N) * fs / N`` above it.
    """
    resolution = sample_rate / length
    return [
        (i if i <= length // 2 else i - length) * resolution
        for i in range(length)
    ]


class SpectralResult:
    """Spectrum of a signal, zero-padded to a power-of-two length.

    ``length`` is the FFT size, which is generally larger than the source
    signal; bins relate to the signal only through ``frequency``.
    """

    def __init__(self, bins, sample_rate):
        self.bins = list(bins)
        self.sample_rate = sample_rate
        self.magnitude = magnitude(self.bins)
        self.phase = phase(self.bins)
        self.frequency = bin_frequencies(len(self.bins), sample_rate)

    @property
    def length(self):
        return len(self.bins)

    @property
    def resolution(self):
        """Bin spacing in Hz."""
        return self.sample_rate / len(self.bins)

    def __len__(self):
        return len(self.bins)

    def __repr__(self):
        return (f"SpectralResult(length={self.length}, "
                f"sample_rate={self.sample_rate}, resolution={self.resolution:.4g})")


def compute_spectrum(signal):
    """Return the :class:`SpectralResult` of *signal*."""
    signal = as_signal(signal)
    size = next_pow2(signal.length)
    if size > MAX_FFT_SIZE:
        raise AllocationError(
            f"FFT size {size} exceeds the limit of {MAX_FFT_SIZE} bins"
        )
    try:
        bins = fft(pad_complex(signal.samples, size))
        return SpectralResult(bins, signal.sample_rate)
    except MemoryError as exc:
        raise AllocationError(f"could not allocate spectrum of size {size}") from exc


def dominant_frequency(result, skip_dc=True, max_bins=None):
    """Find the strongest non-negative-frequency bin of *result*.

    Returns ``(frequency, magnitude, index)`` or ``None`` if every candidate
    bin is zero.  *max_bins* restricts the search to the lowest bins.
    """
    stop = max(result.length // 2, 1)
    if max_bins is not None:
        stop = min(stop, max_bins)
    start = 1 if skip_dc else 0

    best = None
    best_mag = 0.0
    for i in range(start, stop):
        if result.magnitude[i] > best_mag:
            best_mag = result.magnitude[i]
            best = i
    if best is None:
        return None
    return result.frequency[best], best_mag, best


SpectrogramFrame = namedtuple(
    "SpectrogramFrame", ["index", "start_time", "frequency", "magnitude"],
)


def spectrogram(signal, window_size, max_windows=None, search_bins=20):
    """Track the dominant frequency over half-overlapping windows.

    Windows of *window_size* samples advance by ``window_size // 2``.  For
    each window only the first *search_bins* bins are searched.  Windows with
    no energy in that range are omitted.
    """
    signal = as_signal(signal)
    if window_size <= 0:
        raise ValueError(f"window_size must be > 0, got {window_size}")
    hop = max(window_size // 2, 1)

    frames = []
    start = 0
    index = 0
    while start + window_size <= signal.length:
        if max_windows is not None and index >= max_windows:
            break
        chunk = Signal(signal.samples[start:start + window_size],
                       signal.sample_rate, signal.kind, f"Window {index}")
        peak = dominant_frequency(compute_spectrum(chunk), max_bins=search_bins)
        if peak is not None:
            frames.append(SpectrogramFrame(
                index, start / signal.sample_rate, peak[0], peak[1],
            ))
        start += hop
        index += 1
    return frames
