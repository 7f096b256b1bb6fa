"""Window functions used to taper each chunk before the FFT.

A window is any callable ``weight(index, length) -> float``.  Strategies are
selected by name through :func:`get_window`.
"""

import math

from .errors import ConfigError


def rectangular(index, length):
    """No tapering at all."""
    return 1.0


def hann(index, length):
    """Symmetric Hann window."""
    if length <= 1:
        return 1.0
    return 0.5 * (1.0 - math.cos(2.0 * math.pi * index / (length - 1)))


def hamming(index, length):
    """Symmetric Hamming window."""
    if length <= 1:
        return 1.0
    return 0.54 - 0.46 * math.cos(2.0 * math.pi * index / (length - 1))


def blackman(index, length):
    """Symmetric Blackman window."""
    if length <= 1:
        return 1.0
    x = 2.0 * math.pi * index / (length - 1)
    return 0.42 - 0.5 * math.cos(x) + 0.08 * math.cos(2.0 * x)


WINDOWS = {
    "rectangular": rectangular,
    "hann": hann,
    "hamming": hamming,
    "blackman": blackman,
}


def get_window(name):
    """Return the window function registered under *name*."""
    try:
        return WINDOWS[name.lower()]
    except KeyError:
        choices = ", ".join(sorted(WINDOWS))
        raise ConfigError(
            f"unknown window {name!r} (choose from {choices})"
        ) from None


def window_values(window, length):
    """Evaluate *window* for every index of a chunk of *length* samples."""
    return [window(i, length) for i in range(length)]
