"""Default settings and validation for the spectrogram pipeline."""

from .errors import ConfigError

DEFAULT_CHUNK_SIZE = 1024
DEFAULT_OVERLAP = 0.5
DEFAULT_WIDTH = None  # one image column per chunk
DEFAULT_HEIGHT = 512
DEFAULT_THRESHOLD = 10.0
DEFAULT_WINDOW = "hann"
DEFAULT_WORKERS = 1


def validate_chunking(chunk_size, overlap):
    """Check *chunk_size* and *overlap* and return the resulting step size.

    Raises :class:`ConfigError` when the overlap lies outside ``[0, 1)``,
    the chunk size is not a positive integer, or the step truncates to 0.
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
        raise ConfigError(f"chunk size must be an integer, got {chunk_size!r}")
    if chunk_size <= 0:
        raise ConfigError(f"chunk size must be positive, got {chunk_size}")
    if not 0.0 <= overlap < 1.0:
        raise ConfigError(f"overlap must be in [0, 1), got {overlap}")

    step = int(chunk_size * (1.0 - overlap))
    if step < 1:
        raise ConfigError(
            f"chunk size {chunk_size} with overlap {overlap} gives a step of 0"
        )
    return step


def validate(chunk_size=DEFAULT_CHUNK_SIZE, overlap=DEFAULT_OVERLAP,
             height=DEFAULT_HEIGHT, threshold=DEFAULT_THRESHOLD, width=None,
             workers=DEFAULT_WORKERS):
    """Validate a full set of settings before any audio is processed."""
    validate_chunking(chunk_size, overlap)
    if height <= 0:
        raise ConfigError(f"height must be positive, got {height}")
    if width is not None and width <= 0:
        raise ConfigError(f"width must be positive, got {width}")
    if threshold <= 0:
        raise ConfigError(f"threshold must be positive, got {threshold}")
    if workers < 1:
        raise ConfigError(f"workers must be at least 1, got {workers}")
