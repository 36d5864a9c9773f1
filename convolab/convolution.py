"""Discrete convolution: direct linear, circular, and FFT-accelerated.

All three routines take two real-valued operands (:class:`~convolab.signal.Signal`
objects or plain sequences), leave them untouched, and return a freshly
allocated ``CUSTOM`` signal carrying the sample rate of the first operand.
The engine never resamples.
"""

import enum

from .dsp import MAX_FFT_SIZE, fft, ifft, next_pow2, pad_complex
from .errors import AllocationError
from .signal import Signal, SignalType, as_signal


class Method(enum.Enum):
    LINEAR = "linear"
    CIRCULAR = "circular"
    FFT = "fft"


def _result(samples, x, name):
    return Signal(samples, x.sample_rate, SignalType.CUSTOM, name)


def convolve_linear(x, h):
    """Direct O(Lx*Lh) linear convolution.

    ``y[n] = sum_k x[k] * h[n - k]`` for ``n`` in ``[0, Lx + Lh - 1)``.
    """
    x = as_signal(x)
    h = as_signal(h)
    xs = x.samples
    hs = h.samples
    lx = len(xs)
    lh = len(hs)
    out_len = lx + lh - 1

    out = [0.0] * out_len
    for n in range(out_len):
        k_min = max(0, n - lh + 1)
        k_max = min(n, lx - 1)
        acc = 0.0
        for k in range(k_min, k_max + 1):
            acc += xs[k] * hs[n - k]
        out[n] = acc

    return _result(out, x, f"Conv({x.name} * {h.name})")


def convolve_circular(x, h):
    """Circular convolution over ``N = max(Lx, Lh)`` samples.

    The shorter operand is zero-padded to ``N``.  To reproduce linear
    convolution the caller must pad both operands to ``Lx + Lh - 1`` first.
    """
    x = as_signal(x)
    h = as_signal(h)
    n_len = max(x.length, h.length)
    xs = x.samples + [0.0] * (n_len - x.length)
    hs = h.samples + [0.0] * (n_len - h.length)

    out = [0.0] * n_len
    for n in range(n_len):
        acc = 0.0
        for k in range(n_len):
            acc += xs[k] * hs[(n - k) % n_len]
        out[n] = acc

    return _result(out, x, f"CircConv({x.name} * {h.name})")


def convolve_fft(x, h):
    """FFT-accelerated linear convolution.

    Both operands are zero-padded to the next power of two at or above
    ``Lx + Lh - 1``, multiplied bin-wise in the frequency domain and
    transformed back; the imaginary residue and padding are discarded.
    Agrees with :func:`convolve_linear` to within floating-point rounding.
    """
    x = as_signal(x)
    h = as_signal(h)
    conv_len = x.length + h.length - 1
    size = next_pow2(conv_len)
    if size > MAX_FFT_SIZE:
        raise AllocationError(
            f"FFT size {size} exceeds the limit of {MAX_FFT_SIZE} bins"
        )

    try:
        fx = fft(pad_complex(x.samples, size))
        fh = fft(pad_complex(h.samples, size))
        product = [a * b for a, b in zip(fx, fh)]
        y = ifft(product)
    except MemoryError as exc:
        raise AllocationError(f"could not allocate FFT buffers of size {size}") from exc

    return _result([z.real for z in y[:conv_len]], x,
                   f"FFTConv({x.name} * {h.name})")


_DISPATCH = {
    Method.LINEAR: convolve_linear,
    Method.CIRCULAR: convolve_circular,
    Method.FFT: convolve_fft,
}


def convolve(x, h, method=Method.LINEAR):
    """Convolve *x* with *h* using *method* (a :class:`Method` or its name)."""
    try:
        method = Method(method)
    except ValueError:
        choices = ", ".join(m.value for m in Method)
        raise ValueError(f"Unknown convolution method {method!r} (choose from {choices})")
    return _DISPATCH[method](x, h)
