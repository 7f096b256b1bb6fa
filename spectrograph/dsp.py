"""Pure-Python DSP primitives: twiddle factors and the radix-2 FFT."""

import functools
import math

from .windows import hann


# ---------------------------------------------------------------------------
# Twiddle factors
# ---------------------------------------------------------------------------

def omega_uncached(period, index):
    """Return the root of unity ``e^(i·2π·index/period)``."""
    angle = 2.0 * math.pi * index / period
    return complex(math.cos(angle), math.sin(angle))


@functools.lru_cache(maxsize=None)
def omega(period, index):
    """Memoized :func:`omega_uncached`, keyed on the exact integer pair."""
    return omega_uncached(period, index)


def clear_twiddle_cache():
    omega.cache_clear()


def twiddle_cache_info():
    return omega.cache_info()


# ---------------------------------------------------------------------------
# Padding and bit reversal
# ---------------------------------------------------------------------------

def reverse_bits(value, bits):
    """Reverse the low *bits* bits of *value*."""
    result = 0
    for _ in range(bits):
        result = (result << 1) | (value & 1)
        value >>= 1
    return result


def pad(signal, new_size):
    """Append zeros to *signal* in place until it holds *new_size* values."""
    if new_size > len(signal):
        signal.extend([complex(0)] * (new_size - len(signal)))


def pad_to_power2(signal, min_size=-1):
    """Zero-pad *signal* in place to a power-of-two length.

    The new length is the smallest ``2**p >= max(min_size, len(signal))``;
    the exponent *p* is returned.
    """
    target = max(min_size, len(signal))
    power = 0
    size = 1
    while size < target:
        size <<= 1
        power += 1
    pad(signal, size)
    return power


# ---------------------------------------------------------------------------
# FFT
# ---------------------------------------------------------------------------

def transform(signal, window=hann, min_size=-1):
    """Compute the windowed DFT of *signal* in place and return it.

    Iterative radix-2 Cooley-Tukey.  *signal* is zero-padded to the next
    power of two (at least *min_size*); a negative *min_size* pads only to
    the length of *signal* itself.  Each sample is multiplied by
    ``window(i, N)`` before the transform.  Signals of length 1 are left
    untouched.
    """
    power = pad_to_power2(signal, min_size)
    if power == 0:
        return signal

    size = len(signal)
    buffer = [complex(0)] * size
    for i in range(size):
        buffer[reverse_bits(i, power)] = signal[i] * window(i, size)

    n = 2
    while n <= size:
        half = n // 2
        for start in range(0, size, n):
            for m in range(start, start + half):
                term1 = buffer[m]
                term2 = omega(n, -m) * buffer[m + half]
                buffer[m] = term1 + term2
                buffer[m + half] = term1 - term2
        n <<= 1

    signal[:] = buffer
    return signal


def transform_recursive(signal, window=hann, min_size=-1):
    """Recursive even/odd formulation of :func:`transform`.

    Slower, but a handy reference: both must agree to floating-point
    tolerance for the same input.
    """
    pad_to_power2(signal, min_size)
    size = len(signal)
    if size <= 1:
        return signal
    windowed = [signal[i] * window(i, size) for i in range(size)]
    signal[:] = _transform_recursive(windowed)
    return signal


def _transform_recursive(x):
    n = len(x)
    if n == 1:
        return [complex(x[0])]

    even = _transform_recursive(x[0::2])
    odd = _transform_recursive(x[1::2])

    half = n // 2
    result = [complex(0)] * n
    for m in range(half):
        t = omega(n, -m) * odd[m]
        result[m] = even[m] + t
        result[m + half] = even[m] - t
    return result


# ---------------------------------------------------------------------------
# Spectrum helpers
# ---------------------------------------------------------------------------

def magnitude(spectrum):
    """Return the magnitude of each DFT bin."""
    return [abs(z) for z in spectrum]


def energy(values):
    """Sum of squared magnitudes."""
    return sum(abs(v) ** 2 for v in values)
