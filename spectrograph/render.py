"""Turning a complex spectrogram into a grayscale image.

Each image row is tied to one frequency bin, either linearly or on a
logarithmic scale, and each pixel is the log-compressed magnitude of that
bin.  Only the lowest quarter of the bins is reachable in log mode.
"""

import math

from PIL import Image

from .config import DEFAULT_THRESHOLD
from .errors import ConfigError


# ---------------------------------------------------------------------------
# Magnitude → intensity
# ---------------------------------------------------------------------------

def intensity(value, threshold=DEFAULT_THRESHOLD):
    """Map a complex bin to a gray level in ``[0, 255]``.

    ``0.5 * log10(|value| + 1)`` is clipped at *threshold* and scaled so that
    *threshold* maps to 255.
    """
    if threshold <= 0:
        raise ConfigError(f"threshold must be positive, got {threshold}")
    val = min(0.5 * math.log10(abs(value) + 1.0), threshold)
    return int(round(255 * val / threshold))


def color(value, threshold=DEFAULT_THRESHOLD):
    """RGBA pixel for a complex bin (opaque gray)."""
    num = intensity(value, threshold)
    return (num, num, num, 255)


# ---------------------------------------------------------------------------
# Row → frequency bin
# ---------------------------------------------------------------------------

def linear_bin(y, height, spectrum_length):
    """Bin shown on row *y* (1 = bottom) on a linear frequency axis."""
    return int((y / height) * spectrum_length * 0.5)


def log_bin(y, height, spectrum_length):
    """Bin shown on row *y* (1 = bottom) on a logarithmic frequency axis."""
    used = int(spectrum_length * 0.25)
    log_coef = (1.0 / math.log(height + 1)) * used
    return max(used - 1 - int(log_coef * math.log(height + 1 - y)), 0)


def row_bins(height, spectrum_length, log_mode=False):
    """Frequency bin for each of the rows ``1..height``."""
    mapping = log_bin if log_mode else linear_bin
    return [mapping(y, height, spectrum_length) for y in range(1, height + 1)]


# ---------------------------------------------------------------------------
# Raster and image output
# ---------------------------------------------------------------------------

def rasterize(spectrogram, height, log_mode=False, threshold=DEFAULT_THRESHOLD):
    """Return a ``height`` × ``len(spectrogram)`` grid of gray levels.

    The grid is a list of rows, top row first, so the lowest frequencies
    end up at the bottom of the image.
    """
    if height <= 0:
        raise ConfigError(f"height must be positive, got {height}")
    if threshold <= 0:
        raise ConfigError(f"threshold must be positive, got {threshold}")

    raster = [[0] * len(spectrogram) for _ in range(height)]
    if not spectrogram:
        return raster

    bins = row_bins(height, len(spectrogram[0]), log_mode)
    for x, spectrum in enumerate(spectrogram):
        for y, freq in enumerate(bins, start=1):
            raster[height - y][x] = intensity(spectrum[freq], threshold)
    return raster


def to_image(raster):
    """Build an opaque RGBA :class:`PIL.Image.Image` from a gray raster."""
    height = len(raster)
    width = len(raster[0]) if height else 0
    image = Image.new("RGBA", (width, height))
    image.putdata([(v, v, v, 255) for row in raster for v in row])
    return image


def save_image(spectrogram, path, height, log_mode=False,
               threshold=DEFAULT_THRESHOLD, width=None, image_format="PNG"):
    """Render *spectrogram* and save it to *path*.

    When *width* is given the image is stretched or squeezed horizontally
    to that many columns; otherwise there is one column per chunk.
    """
    image = to_image(rasterize(spectrogram, height, log_mode, threshold))
    if width is not None and width != image.width:
        image = image.resize((width, height), Image.NEAREST)
    image.save(path, format=image_format)
    return path
