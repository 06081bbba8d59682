"""Decode image files into pixel buffers."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from unmark.core.buffer import PixelBuffer

# Suffix → Pillow format name
FORMATS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".bmp": "BMP",
    ".tif": "TIFF",
    ".tiff": "TIFF",
    ".webp": "WEBP",
}


def detect_format(path: Path) -> str:
    """Detect the image format from the file extension."""
    suffix = Path(path).suffix.lower()
    if suffix not in FORMATS:
        raise ValueError(f"Unsupported format: {suffix or '(none)'}")
    return FORMATS[suffix]


def _has_alpha(img: Image.Image) -> bool:
    if img.mode in ("RGBA", "LA", "PA", "RGBa", "La"):
        return True
    return img.mode == "P" and "transparency" in img.info


def buffer_from_image(img: Image.Image) -> PixelBuffer:
    """Convert a Pillow image to an RGB or RGBA buffer."""
    target = "RGBA" if _has_alpha(img) else "RGB"
    return PixelBuffer.from_array(np.asarray(img.convert(target), dtype=np.uint8))


def load_image(path: str | Path) -> PixelBuffer:
    """Open an image file and decode it into a buffer.

    Images with an alpha channel load as RGBA, everything else as RGB.
    For multi-frame files only the first frame is used.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with Image.open(path) as img:
        img.load()
        return buffer_from_image(img)
