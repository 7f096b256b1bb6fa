"""Chunking, padding and the spectrogram driver.

The waveform is cut into chunks of ``chunk_size`` samples that start every
``step = int(chunk_size * (1 - overlap))`` samples.  The tail is zero-padded
so the last chunk ends exactly at the end of the padded data, and every
chunk is windowed and transformed into one spectrogram column.
"""

from concurrent.futures import ThreadPoolExecutor

from . import render
from .audio import Waveform, load_waveform
from .config import (
    DEFAULT_HEIGHT,
    DEFAULT_THRESHOLD,
    DEFAULT_WORKERS,
    validate,
    validate_chunking,
)
from .dsp import transform
from .errors import ConfigError, SpectrographError
from .windows import hann


def step_size(chunk_size, overlap):
    """Return the distance in samples between consecutive chunk starts."""
    return validate_chunking(chunk_size, overlap)


def padded_length(length, chunk_size, step):
    """Smallest ``k * step + chunk_size`` (k >= 0) that is >= *length*."""
    if length <= chunk_size:
        return chunk_size
    k = -(-(length - chunk_size) // step)
    return k * step + chunk_size


def pad_waveform(samples, chunk_size, step):
    """Extend *samples* in place with trailing zeros; return the new length."""
    new_size = padded_length(len(samples), chunk_size, step)
    if new_size > len(samples):
        samples.extend([0] * (new_size - len(samples)))
    return new_size


def segment_offsets(length, chunk_size, step):
    """Start offsets of every whole chunk inside *length* samples."""
    return range(0, length - chunk_size + 1, step)


def _transform_segment(samples, start, chunk_size, window):
    segment = [complex(v) for v in samples[start:start + chunk_size]]
    return transform(segment, window)


def compute_spectrogram(samples, chunk_size, overlap, window=hann,
                        workers=DEFAULT_WORKERS):
    """Compute the spectrogram of *samples*.

    Parameters
    ----------
    samples : list[int]
        Waveform samples.  Zero-padded **in place** to a whole number of
        steps (see :func:`padded_length`).
    chunk_size : int
        Samples per analysis chunk.
    overlap : float
        Fraction of each chunk shared with the next one, in ``[0, 1)``.
    window : callable
        ``window(index, length) -> float`` applied before each FFT.
    workers : int
        Number of threads transforming chunks; columns keep their order.

    Returns
    -------
    list[list[complex]]
        One spectrum per chunk, in time order.
    """
    step = step_size(chunk_size, overlap)
    if workers < 1:
        raise ConfigError(f"workers must be at least 1, got {workers}")

    length = pad_waveform(samples, chunk_size, step)
    offsets = segment_offsets(length, chunk_size, step)

    if workers == 1:
        return [
            _transform_segment(samples, start, chunk_size, window)
            for start in offsets
        ]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(
            lambda start: _transform_segment(samples, start, chunk_size, window),
            offsets,
        ))


class Spectrograph:
    """Load an audio file, compute its spectrogram and save it as an image.

    *source* is either a path to an audio file or an already decoded
    :class:`~spectrograph.audio.Waveform`.  Loading failures raise
    :class:`~spectrograph.errors.LoadError` immediately.
    """

    def __init__(self, source, width=None, height=DEFAULT_HEIGHT):
        validate(height=height, width=width)
        if isinstance(source, Waveform):
            self.fname = None
            waveform = source
        else:
            self.fname = source
            waveform = load_waveform(source)

        self.width = width
        self.height = height
        self.window = hann
        self.data = list(waveform.samples)
        self.data_size = len(self.data)
        self.sample_rate = waveform.sample_rate
        self.channels = waveform.channels
        self.duration = waveform.duration
        self.max_frequency = waveform.sample_rate * 0.5
        self.spectrogram = []
        self.step = None

    def set_window(self, window):
        self.window = window

    def compute(self, chunk_size, overlap, workers=DEFAULT_WORKERS):
        """Fill :attr:`spectrogram`; returns the number of columns."""
        self.step = step_size(chunk_size, overlap)
        del self.data[self.data_size:]
        self.spectrogram = compute_spectrogram(
            self.data, chunk_size, overlap, self.window, workers,
        )
        return len(self.spectrogram)

    def bin_frequency(self, index):
        """Centre frequency in Hz of bin *index* of the computed spectra."""
        if not self.spectrogram:
            raise SpectrographError("compute() has not been called")
        return index * self.sample_rate / len(self.spectrogram[0])

    def rasterize(self, log_mode=False, threshold=DEFAULT_THRESHOLD):
        if not self.spectrogram:
            raise SpectrographError("compute() has not been called")
        return render.rasterize(self.spectrogram, self.height, log_mode,
                                threshold)

    def save_image(self, fname, log_mode=False, threshold=DEFAULT_THRESHOLD,
                   image_format="PNG"):
        """Render the spectrogram and write it to *fname*."""
        if not self.spectrogram:
            raise SpectrographError("compute() has not been called")
        validate(height=self.height, threshold=threshold, width=self.width)
        return render.save_image(
            self.spectrogram, fname, self.height,
            log_mode=log_mode, threshold=threshold,
            width=self.width, image_format=image_format,
        )
