"""Signal persistence: a commented CSV text table and PCM WAV files."""

import os
import re
import struct
import wave

from .errors import EmptyInputError
from .signal import Signal

DEFAULT_SAMPLE_RATE = 44100.0
LOADED_NAME = "Loaded from file"

_RATE_RE = re.compile(r"Sample Rate:\s*([-+0-9.eE]+)")
_META_RE = re.compile(r"^(Sample Rate|Length|Duration):")


# ---------------------------------------------------------------------------
# CSV text table
# ---------------------------------------------------------------------------

def save_csv(signal, path):
    """Write *signal* as ``#`` header lines, a ``Time,Amplitude`` header and
    one ``time,amplitude`` row per sample."""
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(f"# {signal.name}\n")
        fh.write(f"# Sample Rate: {signal.sample_rate!r} Hz\n")
        fh.write(f"# Length: {signal.length} samples\n")
        fh.write(f"# Duration: {signal.duration:.6f} seconds\n")
        fh.write("Time,Amplitude\n")
        for i, v in enumerate(signal.samples):
            fh.write(f"{i / signal.sample_rate:.6f},{v:.6f}\n")


def load_csv(path):
    """Read a signal written by :func:`save_csv`.

    The sample rate comes from the header (44100 Hz if absent).  Rows that
    do not parse as two numbers are skipped.
    """
    sample_rate = DEFAULT_SAMPLE_RATE
    name = None
    data = []
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            if line.startswith("#"):
                text = line[1:].strip()
                m = _RATE_RE.search(text)
                if m:
                    sample_rate = float(m.group(1))
                elif name is None and text and not _META_RE.match(text):
                    name = text
                continue
            if line.startswith("T"):
                continue
            fields = line.split(",")
            if len(fields) < 2:
                continue
            try:
                data.append(float(fields[1]))
            except ValueError:
                continue

    if not data:
        raise EmptyInputError(f"{path} contains no samples")
    return Signal(data, sample_rate, name=name or LOADED_NAME)


# ---------------------------------------------------------------------------
# WAV
# ---------------------------------------------------------------------------

def read_wav(path):
    """Read a WAV file and return (samples, sample_rate, num_channels).

    *samples* is a list of lists – one inner list per channel, each containing
    float values in the range [-1.0, 1.0].
    """
    with wave.open(path, "rb") as wf:
        n_channels = wf.getnchannels()
        sampwidth = wf.getsampwidth()
        sample_rate = wf.getframerate()
        n_frames = wf.getnframes()
        raw = wf.readframes(n_frames)

    if sampwidth == 1:
        fmt = "B"
        offset, scale = 128, 128.0
    elif sampwidth == 2:
        fmt = "<h"
        offset, scale = 0, 32768.0
    elif sampwidth == 3:
        fmt = None
        offset, scale = 0, 8388608.0
    elif sampwidth == 4:
        fmt = "<i"
        offset, scale = 0, 2147483648.0
    else:
        raise ValueError(f"Unsupported sample width: {sampwidth}")

    total_samples = n_frames * n_channels
    if fmt is not None:
        int_samples = [v for (v,) in struct.iter_unpack(fmt, raw[:total_samples * sampwidth])]
    else:
        # 24-bit samples – unpack manually
        int_samples = []
        for i in range(total_samples):
            b = raw[3 * i : 3 * i + 3]
            val = b[0] | (b[1] << 8) | (b[2] << 16)
            if val >= 0x800000:
                val -= 0x1000000
            int_samples.append(val)

    channels = [[] for _ in range(n_channels)]
    for idx, val in enumerate(int_samples):
        channels[idx % n_channels].append((val - offset) / scale)

    return channels, sample_rate, n_channels


def to_mono(channels):
    """Down-mix multi-channel audio to mono by averaging."""
    n = len(channels[0])
    k = len(channels)
    return [sum(channels[ch][i] for ch in range(k)) / k for i in range(n)]


def load_wav(path):
    """Load a WAV file as a mono :class:`Signal`."""
    channels, sr, nc = read_wav(path)
    mono = to_mono(channels) if nc > 1 else channels[0]
    if not mono:
        raise EmptyInputError(f"{path} contains no samples")
    base = os.path.splitext(os.path.basename(path))[0]
    return Signal(mono, sr, name=base)


def save_wav(signal, path, sampwidth=2):
    """Write *signal* as a mono PCM WAV; samples are clamped to [-1, 1].

    The sample rate is rounded to the nearest integer, as WAV requires.
    """
    if sampwidth == 2:
        fmt = "<h"
        scale = 32767.0
    elif sampwidth == 4:
        fmt = "<i"
        scale = 2147483647.0
    else:
        raise ValueError("Only 16-bit or 32-bit output is supported")

    frames = bytearray()
    for val in signal.samples:
        clamped = max(-1.0, min(1.0, val))
        frames.extend(struct.pack(fmt, int(clamped * scale)))

    with wave.open(path, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(sampwidth)
        wf.setframerate(int(round(signal.sample_rate)))
        wf.writeframes(bytes(frames))


# ---------------------------------------------------------------------------
# Extension dispatch
# ---------------------------------------------------------------------------

def _is_wav(path):
    return os.path.splitext(path)[1].lower() == ".wav"


def load_signal(path):
    """Load a signal from *path*: ``.wav`` files as WAV, anything else as CSV."""
    return load_wav(path) if _is_wav(path) else load_csv(path)


def save_signal(signal, path):
    """Save *signal* to *path*, choosing the format from the extension."""
    if _is_wav(path):
        save_wav(signal, path)
    else:
        save_csv(signal, path)
