"""Separable Gaussian blur."""

from __future__ import annotations

import math

import cv2
import numpy as np

from unmark.core.buffer import PixelBuffer
from unmark.core.errors import InvalidConfiguration


def kernel_radius(sigma: float) -> int:
    return int(math.ceil(3.0 * sigma))


def gaussian_kernel(sigma: float) -> np.ndarray:
    """Normalized 1D Gaussian kernel of radius ceil(3 * sigma)."""
    if not math.isfinite(sigma) or sigma <= 0:
        raise InvalidConfiguration(f"Blur sigma must be > 0, got {sigma}")
    radius = kernel_radius(sigma)
    x = np.arange(-radius, radius + 1, dtype=np.float64)
    kernel = np.exp(-(x * x) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def gaussian_blur(buffer: PixelBuffer, sigma: float) -> PixelBuffer:
    """Blur the color planes: horizontal pass, then vertical pass.

    Borders are replicated. Alpha is copied through unchanged.
    """
    kernel = gaussian_kernel(sigma).astype(np.float32)
    color = np.ascontiguousarray(buffer.color, dtype=np.float32)
    blurred = cv2.sepFilter2D(
        color,
        -1,
        kernel,
        kernel,
        borderType=cv2.BORDER_REPLICATE,
    )
    return buffer.with_color(blurred)
