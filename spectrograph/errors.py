"""Exceptions raised by the spectrograph pipeline."""


class SpectrographError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(SpectrographError, ValueError):
    """Invalid pipeline settings (chunk size, overlap, height, ...)."""


class LoadError(SpectrographError, OSError):
    """The audio source is missing, unreadable or in an unsupported format."""
