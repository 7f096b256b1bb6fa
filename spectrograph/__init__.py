"""Spectrograph – render audio files as spectrogram images."""

__version__ = "0.1.0"

from .errors import ConfigError, LoadError, SpectrographError
from .spectrogram import Spectrograph, compute_spectrogram

__all__ = [
    "ConfigError",
    "LoadError",
    "Spectrograph",
    "SpectrographError",
    "compute_spectrogram",
]
