"""Encode pixel buffers back to image files."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from unmark.core.buffer import PixelBuffer
from unmark.core.reader import detect_format

# Formats that cannot store an alpha channel
NO_ALPHA_FORMATS = {"JPEG", "BMP"}


def image_from_buffer(buffer: PixelBuffer) -> Image.Image:
    # (H, W, 3) uint8 maps to RGB, (H, W, 4) to RGBA
    return Image.fromarray(buffer.pixels)


def save_image(buffer: PixelBuffer, output_path: str | Path) -> None:
    """Save a buffer in the format given by the output file extension.

    Alpha is dropped for formats that cannot store it.
    """
    output_path = Path(output_path)
    fmt = detect_format(output_path)
    img = image_from_buffer(buffer)
    if fmt in NO_ALPHA_FORMATS and img.mode == "RGBA":
        img = img.convert("RGB")
    if fmt == "JPEG":
        img.save(str(output_path), format=fmt, quality=95)
    else:
        img.save(str(output_path), format=fmt)


def default_output_path(input_path: Path, mode_name: str) -> Path:
    """Generate the default output path next to the input."""
    input_path = Path(input_path)
    return input_path.parent / f"{input_path.stem}_{mode_name}{input_path.suffix}"
