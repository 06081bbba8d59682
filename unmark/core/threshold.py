"""Luminance thresholding and the grayscale guard that gates it."""

from __future__ import annotations

import numpy as np

from unmark.core.buffer import PixelBuffer
from unmark.core.errors import GrayscaleGuardRejected, InvalidConfiguration

# Rec. 601 luma weights, in thousandths
LUMA_WEIGHTS = (299, 587, 114)
DEFAULT_GRAY_TOLERANCE = 30


def validate_intensity(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= 255:
        raise InvalidConfiguration(f"{name} must be between 0 and 255, got {value}")


def luminance(buffer: PixelBuffer) -> np.ndarray:
    """Integer luma per pixel, shape (H, W), values in [0, 255]."""
    rgb = buffer.color.astype(np.int32)
    wr, wg, wb = LUMA_WEIGHTS
    return (rgb[:, :, 0] * wr + rgb[:, :, 1] * wg + rgb[:, :, 2] * wb) // 1000


def threshold(buffer: PixelBuffer, cutoff: int = 128) -> PixelBuffer:
    """Map each pixel to pure black or pure white.

    Pixels with luminance below `cutoff` become (0, 0, 0); the rest,
    including luminance equal to the cutoff, become (255, 255, 255).
    """
    validate_intensity("Threshold", cutoff)
    white = luminance(buffer) >= cutoff
    color = np.where(white[:, :, None], 255, 0).astype(np.uint8)
    color = np.broadcast_to(color, (buffer.height, buffer.width, 3))
    return buffer.with_color(np.ascontiguousarray(color))


def channel_spread(buffer: PixelBuffer) -> np.ndarray:
    """Largest pairwise difference among R, G and B for each pixel."""
    rgb = buffer.color
    return rgb.max(axis=2).astype(np.int16) - rgb.min(axis=2).astype(np.int16)


def is_grayscale(buffer: PixelBuffer, tolerance: int = DEFAULT_GRAY_TOLERANCE) -> bool:
    """True when every pixel's channel spread is within `tolerance`.

    This is a heuristic: near-gray images with a slight color cast may
    land on either side of it.
    """
    validate_intensity("Grayscale tolerance", tolerance)
    return bool((channel_spread(buffer) <= tolerance).all())


def check_grayscale(buffer: PixelBuffer, tolerance: int = DEFAULT_GRAY_TOLERANCE) -> None:
    """Raise GrayscaleGuardRejected unless the image looks grayscale."""
    if not is_grayscale(buffer, tolerance):
        worst = int(channel_spread(buffer).max())
        raise GrayscaleGuardRejected(
            f"Image appears to be color (channel spread up to {worst}, "
            f"tolerance {tolerance}). Use --force-bw to proceed."
        )
