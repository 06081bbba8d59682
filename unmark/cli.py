"""Command-line interface for unmark.

Supports human-readable progress on stderr and a JSON mode for scripting.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from unmark.core.modes import ModeName

MODE_MESSAGES = {
    ModeName.BASIC: "Applying Gaussian noise...",
    ModeName.AGGRESSIVE: "Applying aggressive removal (Resize + Blur + Noise)...",
    ModeName.DESTRUCTIVE: "Applying destructive removal (Quantization + Dithering)...",
    ModeName.THRESHOLD: "Applying Threshold Mode (Binary B&W)...",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unmark",
        description="Disrupt image watermarks with noise, resampling, dithering or thresholding.",
    )
    parser.add_argument("input", help="Input image file path.")
    parser.add_argument(
        "-o", "--output",
        help="Output file path. Defaults to <input>_<mode>.<ext>.",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--mode",
        choices=[m.value for m in ModeName],
        help="Processing mode (default: basic).",
    )
    mode.add_argument(
        "-a", "--aggressive",
        dest="mode",
        action="store_const",
        const=ModeName.AGGRESSIVE.value,
        help="Shortcut for --mode aggressive (Resize + Blur + Noise).",
    )
    mode.add_argument(
        "-d", "--destructive",
        dest="mode",
        action="store_const",
        const=ModeName.DESTRUCTIVE.value,
        help="Shortcut for --mode destructive (Quantization + Dithering).",
    )
    mode.add_argument(
        "--bw",
        dest="mode",
        action="store_const",
        const=ModeName.THRESHOLD.value,
        help="Shortcut for --mode threshold (binary black & white).",
    )

    parser.add_argument(
        "-s", "--sigma",
        type=float,
        default=30.0,
        help="Standard deviation of the Gaussian noise (default: 30).",
    )
    parser.add_argument(
        "--blur-sigma",
        type=float,
        default=1.0,
        help="Gaussian blur sigma for aggressive mode (default: 1.0).",
    )
    parser.add_argument(
        "--resize-scale",
        type=float,
        default=0.9,
        help="Resize scale for aggressive mode, in (0, 1] (default: 0.9).",
    )
    parser.add_argument(
        "--levels",
        type=int,
        default=4,
        help="Quantization levels per channel for destructive mode, >= 2 (default: 4).",
    )
    parser.add_argument(
        "--serpentine",
        action="store_true",
        help="Dither alternate rows right-to-left.",
    )
    parser.add_argument(
        "--threshold",
        type=int,
        default=128,
        help="Luminance cutoff for threshold mode, 0 to 255 (default: 128).",
    )
    parser.add_argument(
        "--force-bw",
        action="store_true",
        help="Run threshold mode even if the image looks colored.",
    )
    parser.add_argument(
        "--gray-tolerance",
        type=int,
        default=30,
        help="Max channel difference for a pixel to count as gray (default: 30).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible noise.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error (with --json).",
    )

    return parser


def _json_error(message: str, code: str) -> None:
    """Print JSON error to stderr and exit with code 1."""
    err = {"status": "error", "error": message, "code": code}
    print(json.dumps(err), file=sys.stderr)
    sys.exit(1)


def _fail(args: argparse.Namespace, message: str, code: str) -> None:
    if args.json:
        if args.debug and sys.exc_info()[0] is not None:
            import traceback
            traceback.print_exc(file=sys.stderr)
        _json_error(message, code)
    else:
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(1)


def _run(args: argparse.Namespace) -> None:
    """Load, transform and save one image."""
    from unmark.core.errors import UnmarkError
    from unmark.core.modes import build_mode
    from unmark.core.noise import make_rng
    from unmark.core.pipeline import run_pipeline
    from unmark.core.reader import detect_format, load_image
    from unmark.core.writer import default_output_path, save_image

    is_json = args.json
    mode_name = ModeName(args.mode or ModeName.BASIC.value)

    try:
        mode = build_mode(mode_name, **vars(args))
    except UnmarkError as e:
        _fail(args, str(e), e.code)

    input_path = Path(args.input).resolve()
    if not input_path.exists():
        _fail(args, f"File not found: {input_path}", "FILE_NOT_FOUND")

    if args.output:
        output_path = Path(args.output).resolve()
    else:
        output_path = default_output_path(input_path, mode_name.value)

    try:
        detect_format(output_path)
        buffer = load_image(input_path)
    except (ValueError, OSError) as e:
        _fail(args, str(e), "INVALID_INPUT")

    def report(stage: str, index: int, total: int) -> None:
        if not is_json:
            print(f"  [{index}/{total}] {stage}", file=sys.stderr)

    if not is_json:
        print(MODE_MESSAGES[mode_name], file=sys.stderr)

    try:
        result = run_pipeline(buffer, mode, rng=make_rng(args.seed), on_progress=report)
        save_image(result, output_path)
    except UnmarkError as e:
        _fail(args, str(e), e.code)
    except Exception as e:
        _fail(args, str(e), "PROCESSING_ERROR")

    if not is_json:
        print(f"Saved to {output_path}", file=sys.stderr)
    else:
        summary = {
            "status": "success",
            "input": str(input_path),
            "output": str(output_path),
            "settings": mode.to_dict(),
            "seed": args.seed,
            "metadata": {
                "width": result.width,
                "height": result.height,
                "channels": result.channels,
                "output_format": output_path.suffix.lstrip("."),
            },
        }
        print(json.dumps(summary, indent=2))


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    _run(args)
