"""Pure-Python DSP primitives: radix-2 FFT, inverse FFT, and windowing."""

import cmath
import enum
import math

# Largest FFT working size the convolution and spectrum routines allocate.
MAX_FFT_SIZE = 1 << 22


# ---------------------------------------------------------------------------
# Window functions
# ---------------------------------------------------------------------------

class Window(enum.Enum):
    """Tapering windows that can be applied to a signal."""

    RECTANGULAR = "rectangular"
    HANN = "hann"
    HAMMING = "hamming"
    BLACKMAN = "blackman"

    @classmethod
    def parse(cls, name):
        """Return the member called *name* (``"hanning"`` is an alias of hann)."""
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        if key == "hanning":
            key = "hann"
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(w.value for w in cls)
            raise ValueError(f"Unknown window {name!r} (choose from {choices})")


def window_coefficients(window, length):
    """Return the symmetric *window* of the given *length*."""
    if length <= 0:
        return []
    if window is Window.RECTANGULAR or length == 1:
        return [1.0] * length

    denom = length - 1
    if window is Window.HANN:
        return [
            0.5 * (1.0 - math.cos(2.0 * math.pi * n / denom))
            for n in range(length)
        ]
    if window is Window.HAMMING:
        return [
            0.54 - 0.46 * math.cos(2.0 * math.pi * n / denom)
            for n in range(length)
        ]
    if window is Window.BLACKMAN:
        return [
            0.42
            - 0.5 * math.cos(2.0 * math.pi * n / denom)
            + 0.08 * math.cos(4.0 * math.pi * n / denom)
            for n in range(length)
        ]
    raise ValueError(f"Unsupported window: {window!r}")


# ---------------------------------------------------------------------------
# FFT / IFFT  (recursive Cooley-Tukey radix-2)
# ---------------------------------------------------------------------------

def is_power_of_two(n):
    """Return True if *n* is a positive power of two."""
    return n > 0 and n & (n - 1) == 0


def next_pow2(n):
    """Return the smallest power-of-two >= *n*."""
    p = 1
    while p < n:
        p <<= 1
    return p


def pad_complex(samples, n):
    """Copy real *samples* into a zero-padded complex buffer of length *n*."""
    buf = [complex(0)] * n
    for i, v in enumerate(samples):
        if i >= n:
            break
        buf[i] = complex(v)
    return buf


def _check_length(n):
    if n > 1 and not is_power_of_two(n):
        raise ValueError(
            f"FFT length must be a power of two, got {n} "
            f"(zero-pad to {next_pow2(n)})"
        )


def fft(x):
    """Compute the DFT of sequence *x* (list of float/complex).

    ``len(x)`` must be a power of two; zero-pad with :func:`pad_complex`
    first otherwise.  Returns a new list and leaves *x* untouched.
    """
    n = len(x)
    _check_length(n)
    return _fft_radix2(x)


def ifft(X):
    """Compute the inverse DFT of spectrum *X*."""
    n = len(X)
    _check_length(n)
    if n <= 1:
        return [complex(z) for z in X]
    # IDFT via conjugate trick: ifft(X) = conj(fft(conj(X))) / N
    conj_X = [complex(z).conjugate() for z in X]
    result = _fft_radix2(conj_X)
    return [z.conjugate() / n for z in result]


def _fft_radix2(x):
    """Radix-2 Cooley-Tukey FFT.  *len(x)* must be a power of two."""
    n = len(x)
    if n <= 1:
        return [complex(v) for v in x]

    even = _fft_radix2(x[0::2])
    odd = _fft_radix2(x[1::2])

    half = n // 2
    result = [complex(0)] * n
    for k in range(half):
        angle = -2.0 * math.pi * k / n
        t = complex(math.cos(angle), math.sin(angle)) * odd[k]
        result[k] = even[k] + t
        result[k + half] = even[k] - t
    return result


# ---------------------------------------------------------------------------
# Spectrum helpers
# ---------------------------------------------------------------------------

def magnitude(spectrum):
    """Return the magnitude of each DFT bin."""
    return [abs(z) for z in spectrum]


def phase(spectrum):
    """Return the phase angle of each DFT bin, in (-pi, pi]."""
    return [cmath.phase(z) for z in spectrum]
