"""Command-line interface for Spectrograph."""

import argparse
import os
import sys
import time

from . import __version__
from .config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_HEIGHT,
    DEFAULT_OVERLAP,
    DEFAULT_THRESHOLD,
    DEFAULT_WIDTH,
    DEFAULT_WINDOW,
    DEFAULT_WORKERS,
    validate,
)
from .errors import SpectrographError
from .spectrogram import Spectrograph, padded_length, step_size
from .windows import WINDOWS, get_window


def _resolve_output(input_path, output):
    """Return *output*, or ``<input base>_spectrogram.png`` beside the input."""
    if output:
        out_dir = os.path.dirname(output)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        return output
    base = os.path.splitext(input_path)[0]
    return f"{base}_spectrogram.png"


def _run(args):
    validate(
        chunk_size=args.chunk_size,
        overlap=args.overlap,
        height=args.height,
        threshold=args.threshold,
        width=args.width,
        workers=args.workers,
    )
    window = get_window(args.window)

    print(f"[spectrograph] Loading {args.input} …")
    spec = Spectrograph(args.input, width=args.width, height=args.height)
    spec.set_window(window)
    print(f"[spectrograph]   {len(spec.data)} samples @ {spec.sample_rate} Hz, "
          f"{spec.channels} channel(s), {spec.duration:.1f}s")

    step = step_size(args.chunk_size, args.overlap)
    print(f"[spectrograph] Chunk: {args.chunk_size}  Overlap: "
          f"{args.overlap * args.chunk_size:g}  Step: {step}")
    new_size = padded_length(len(spec.data), args.chunk_size, step)
    if new_size != len(spec.data):
        print(f"[spectrograph]   padding {len(spec.data)} → {new_size} samples")

    print("[spectrograph] Computing spectrogram …")
    t0 = time.time()
    columns = spec.compute(args.chunk_size, args.overlap, workers=args.workers)
    elapsed = time.time() - t0
    print(f"[spectrograph]   {columns} chunks in {elapsed:.1f}s")

    out_path = _resolve_output(args.input, args.output)
    print("[spectrograph] Drawing …")
    spec.save_image(out_path, log_mode=args.log, threshold=args.threshold)
    print(f"[spectrograph] Wrote {out_path}")
    return out_path


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def build_parser():
    """Construct and return the top-level :class:`ArgumentParser`."""
    parser = argparse.ArgumentParser(
        prog="spectrograph",
        description="Render an audio file as a grayscale spectrogram image.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument("input", help="input audio file (WAV, MP3, FLAC, etc.)")
    parser.add_argument("-o", "--output", default=None,
                        help="output image (default: <input>_spectrogram.png)")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH,
                        help="image width in pixels (default: one column per chunk)")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT,
                        help=f"image height in pixels (default: {DEFAULT_HEIGHT})")
    parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE,
                        help=f"samples per FFT chunk (default: {DEFAULT_CHUNK_SIZE})")
    parser.add_argument("--overlap", type=float, default=DEFAULT_OVERLAP,
                        help=f"overlap between chunks, in [0, 1) (default: {DEFAULT_OVERLAP})")
    parser.add_argument("--window", default=DEFAULT_WINDOW, choices=sorted(WINDOWS),
                        help=f"window function (default: {DEFAULT_WINDOW})")
    parser.add_argument("--log", action="store_true",
                        help="use a logarithmic frequency axis")
    parser.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD,
                        help=f"intensity clipping threshold (default: {DEFAULT_THRESHOLD})")
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS,
                        help="threads used to transform chunks (default: 1)")
    return parser


def main(argv=None):
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        _run(args)
    except SpectrographError as e:
        print(f"[spectrograph] error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
