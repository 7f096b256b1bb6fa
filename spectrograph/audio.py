"""Audio loading using the standard-library ``wave`` module (ffmpeg for the rest)."""

import json
import os
import struct
import subprocess
import tempfile
import wave

from .errors import LoadError


class Waveform:
    """Decoded audio: interleaved integer samples plus stream parameters."""

    def __init__(self, samples, sample_rate, channels=1):
        self.samples = samples
        self.sample_rate = sample_rate
        self.channels = channels

    @property
    def frames(self):
        return len(self.samples) // self.channels

    @property
    def duration(self):
        """Length in seconds."""
        return self.frames / self.sample_rate

    def __len__(self):
        return len(self.samples)

    def __repr__(self):
        return (f"Waveform({len(self.samples)} samples, "
                f"{self.sample_rate} Hz, {self.channels} ch)")


def read_samples(path):
    """Read a WAV file and return a :class:`Waveform`.

    Samples stay interleaved across channels and are scaled to the signed
    16-bit range whatever the sample width on disk.
    """
    with wave.open(path, "rb") as wf:
        n_channels = wf.getnchannels()
        sampwidth = wf.getsampwidth()
        sample_rate = wf.getframerate()
        n_frames = wf.getnframes()
        raw = wf.readframes(n_frames)

    if sample_rate <= 0:
        raise LoadError(f"Bad sample rate in {path}: {sample_rate}")
    if n_channels <= 0:
        raise LoadError(f"Bad channel count in {path}: {n_channels}")

    total_samples = len(raw) // sampwidth
    if sampwidth == 1:
        samples = [(b - 128) << 8 for b in raw[:total_samples]]
    elif sampwidth == 2:
        samples = list(struct.unpack(f"<{total_samples}h", raw[:2 * total_samples]))
    elif sampwidth == 3:
        # 24-bit samples – unpack manually, keep the top 16 bits
        samples = []
        for i in range(total_samples):
            b = raw[3 * i : 3 * i + 3]
            val = b[0] | (b[1] << 8) | (b[2] << 16)
            if val >= 0x800000:
                val -= 0x1000000
            samples.append(val >> 8)
    elif sampwidth == 4:
        samples = [
            v >> 16
            for v in struct.unpack(f"<{total_samples}i", raw[:4 * total_samples])
        ]
    else:
        raise LoadError(f"Unsupported sample width: {sampwidth}")

    return Waveform(samples, sample_rate, n_channels)


def detect_audio_format(path):
    """Detect the audio format of a file.

    Returns the file extension (e.g., 'wav', 'mp3', 'flac') or None if detection fails.
    First tries file extension, then falls back to ffprobe if available.
    """
    ext = os.path.splitext(path)[1].lower().lstrip('.')
    if ext:
        return ext

    try:
        result = subprocess.run(
            ['ffprobe', '-v', 'quiet', '-print_format', 'json', '-show_format', path],
            capture_output=True,
            text=True,
            check=True
        )
        data = json.loads(result.stdout)
        format_name = data.get('format', {}).get('format_name', '').split(',')[0]
        return format_name if format_name else None
    except (subprocess.CalledProcessError, FileNotFoundError, KeyError, ValueError):
        return None


def convert_to_wav(input_path, output_path=None):
    """Convert an audio file to 16-bit WAV using ffmpeg.

    Args:
        input_path: Path to the input audio file
        output_path: Optional path for the output WAV file. If None, creates a temp file.

    Returns:
        Path to the converted WAV file

    Raises:
        LoadError: If ffmpeg is not available or conversion fails
    """
    if output_path is None:
        fd, output_path = tempfile.mkstemp(suffix='.wav')
        os.close(fd)

    try:
        subprocess.run(
            ['ffmpeg', '-y', '-i', input_path, '-acodec', 'pcm_s16le', output_path],
            capture_output=True,
            check=True
        )
        return output_path
    except FileNotFoundError:
        raise LoadError("ffmpeg is not installed or not in PATH")
    except subprocess.CalledProcessError as e:
        raise LoadError(f"Failed to convert {input_path} to WAV: {e.stderr.decode()}")


def load_waveform(path):
    """Load any supported audio file as a :class:`Waveform`.

    Non-WAV inputs go through a temporary WAV produced by ffmpeg.

    Raises:
        LoadError: If the file is missing, malformed or cannot be converted
    """
    if not os.path.isfile(path):
        raise LoadError(f"No such audio file: {path}")

    audio_format = detect_audio_format(path)
    temp_wav = None
    if audio_format and audio_format.lower() != 'wav':
        temp_wav = convert_to_wav(path)
        wav_path = temp_wav
    else:
        wav_path = path

    try:
        return read_samples(wav_path)
    except LoadError:
        raise
    except (wave.Error, EOFError, struct.error, OSError) as e:
        raise LoadError(f"Cannot read {path}: {e}") from e
    finally:
        if temp_wav and os.path.exists(temp_wav):
            os.unlink(temp_wav)
