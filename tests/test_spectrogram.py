"""Tests for spectrograph.spectrogram – chunking, padding and the driver."""

import math
import os
import tempfile
import unittest

from spectrograph.audio import Waveform
from spectrograph.errors import ConfigError, LoadError, SpectrographError
from spectrograph.spectrogram import (
    Spectrograph,
    compute_spectrogram,
    pad_waveform,
    padded_length,
    segment_offsets,
    step_size,
)
from spectrograph.windows import rectangular


def _sine(freq, sr, n, amplitude=10000):
    """Generate an integer sine-wave signal."""
    return [int(amplitude * math.sin(2 * math.pi * freq * i / sr)) for i in range(n)]


class TestStepSize(unittest.TestCase):
    def test_half_overlap(self):
        self.assertEqual(step_size(1024, 0.5), 512)

    def test_no_overlap(self):
        self.assertEqual(step_size(1024, 0.0), 1024)

    def test_truncates(self):
        self.assertEqual(step_size(100, 0.333), 66)

    def test_rejects_bad_overlap(self):
        for overlap in (1.0, 1.5, -0.1):
            with self.assertRaises(ConfigError):
                step_size(1024, overlap)

    def test_rejects_bad_chunk_size(self):
        for chunk in (0, -4, 2.5):
            with self.assertRaises(ConfigError):
                step_size(chunk, 0.5)

    def test_rejects_zero_step(self):
        with self.assertRaises(ConfigError):
            step_size(4, 0.9)


class TestPadding(unittest.TestCase):
    def test_known_lengths(self):
        self.assertEqual(padded_length(5000, 1024, 512), 5120)
        self.assertEqual(padded_length(5120, 1024, 512), 5120)
        self.assertEqual(padded_length(5121, 1024, 512), 5632)
        self.assertEqual(padded_length(100, 1024, 512), 1024)
        self.assertEqual(padded_length(0, 1024, 512), 1024)

    def test_invariant(self):
        for chunk in (1, 3, 8, 100):
            for overlap in (0.0, 0.25, 0.5, 0.9, 0.99):
                try:
                    step = step_size(chunk, overlap)
                except ConfigError:
                    continue
                for length in range(0, 5 * chunk + 7):
                    padded = padded_length(length, chunk, step)
                    self.assertGreaterEqual(padded, length)
                    self.assertEqual((padded - chunk) % step, 0)
                    if padded > chunk:
                        self.assertLess(padded - step, length)

    def test_pad_in_place(self):
        samples = [1] * 5000
        self.assertEqual(pad_waveform(samples, 1024, 512), 5120)
        self.assertEqual(len(samples), 5120)
        self.assertEqual(samples[4999], 1)
        self.assertEqual(samples[5000:], [0] * 120)

    def test_offsets_cover_padded_data(self):
        offsets = list(segment_offsets(5120, 1024, 512))
        self.assertEqual(offsets, [512 * k for k in range(9)])
        self.assertEqual(offsets[-1] + 1024, 5120)


class TestComputeSpectrogram(unittest.TestCase):
    def test_reference_scenario(self):
        samples = _sine(440, 44100, 5000)
        spectrogram = compute_spectrogram(samples, 1024, 0.5)
        self.assertEqual(len(samples), 5120)
        self.assertEqual(len(spectrogram), 9)
        for spectrum in spectrogram:
            self.assertEqual(len(spectrum), 1024)

    def test_sine_peak_in_every_column(self):
        sr = 8000
        samples = _sine(1000, sr, 2048)
        for spectrum in compute_spectrogram(samples, 256, 0.5):
            mags = [abs(z) for z in spectrum[:128]]
            self.assertLessEqual(abs(mags.index(max(mags)) - 32), 1)

    def test_silence(self):
        spectrogram = compute_spectrogram([0] * 3000, 256, 0.25)
        self.assertGreater(len(spectrogram), 0)
        for spectrum in spectrogram:
            self.assertTrue(all(abs(z) == 0.0 for z in spectrum))

    def test_non_power_of_two_chunk(self):
        spectrogram = compute_spectrogram(_sine(300, 8000, 1000), 100, 0.0)
        self.assertEqual(len(spectrogram), 10)
        self.assertEqual(len(spectrogram[0]), 128)

    def test_threads_match_sequential(self):
        sequential = compute_spectrogram(_sine(440, 8000, 3000), 128, 0.5)
        threaded = compute_spectrogram(_sine(440, 8000, 3000), 128, 0.5, workers=4)
        self.assertEqual(threaded, sequential)

    def test_config_checked_before_padding(self):
        samples = [1] * 10
        with self.assertRaises(ConfigError):
            compute_spectrogram(samples, 8, 1.0)
        with self.assertRaises(ConfigError):
            compute_spectrogram(samples, 8, 0.5, workers=0)
        self.assertEqual(len(samples), 10)


class TestSpectrograph(unittest.TestCase):
    def setUp(self):
        self.waveform = Waveform(_sine(1000, 8000, 4000), 8000, 1)

    def test_compute(self):
        spec = Spectrograph(self.waveform, height=64)
        self.assertEqual(spec.max_frequency, 4000)
        self.assertEqual(spec.compute(256, 0.5), len(spec.spectrogram))
        self.assertEqual(spec.step, 128)
        self.assertEqual(spec.bin_frequency(32), 1000)

    def test_recompute_starts_from_original_data(self):
        spec = Spectrograph(self.waveform, height=64)
        spec.compute(1000, 0.0)
        self.assertEqual(len(spec.data), 4000)
        first = spec.compute(256, 0.5)
        self.assertEqual(spec.compute(256, 0.5), first)
        self.assertEqual(len(spec.data), padded_length(4000, 256, 128))

    def test_set_window(self):
        spec = Spectrograph(self.waveform)
        spec.set_window(rectangular)
        spec.compute(256, 0.0)
        expected = compute_spectrogram(list(self.waveform.samples), 256, 0.0,
                                       rectangular)
        self.assertEqual(spec.spectrogram, expected)

    def test_failed_compute_keeps_state(self):
        spec = Spectrograph(self.waveform)
        spec.compute(256, 0.5)
        columns = len(spec.spectrogram)
        with self.assertRaises(ConfigError):
            spec.compute(256, 1.0)
        self.assertEqual(len(spec.spectrogram), columns)

    def test_rasterize(self):
        spec = Spectrograph(self.waveform, height=16)
        spec.compute(256, 0.5)
        raster = spec.rasterize(log_mode=True)
        self.assertEqual(len(raster), 16)
        self.assertEqual(len(raster[0]), len(spec.spectrogram))

    def test_save_before_compute(self):
        spec = Spectrograph(self.waveform)
        with self.assertRaises(SpectrographError):
            spec.save_image(os.path.join(tempfile.gettempdir(), "never.png"))

    def test_missing_file(self):
        with self.assertRaises(LoadError):
            Spectrograph(os.path.join(tempfile.gettempdir(), "does-not-exist.wav"))

    def test_bad_height(self):
        with self.assertRaises(ConfigError):
            Spectrograph(self.waveform, height=0)


if __name__ == "__main__":
    unittest.main()
