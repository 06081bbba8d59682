"""Scale-down/scale-up resampling that discards high-frequency detail."""

from __future__ import annotations

import math

import cv2
import numpy as np

from unmark.core.buffer import PixelBuffer
from unmark.core.errors import InvalidConfiguration


def validate_scale(scale: float) -> None:
    if not math.isfinite(scale) or scale <= 0 or scale > 1:
        raise InvalidConfiguration(f"Resize scale must be in (0, 1], got {scale}")


def squeezed_size(width: int, height: int, scale: float) -> tuple[int, int]:
    """Intermediate (width, height) for a squeeze, never below 1x1."""
    validate_scale(scale)
    new_w = max(1, int(math.floor(width * scale + 0.5)))
    new_h = max(1, int(math.floor(height * scale + 0.5)))
    return new_w, new_h


def squeeze(buffer: PixelBuffer, scale: float) -> PixelBuffer:
    """Downsample by `scale` with area averaging, then upsample bilinearly.

    The output has the input's dimensions. A scale that leaves the size
    unchanged returns the pixels as they are.
    """
    w, h = buffer.width, buffer.height
    small_w, small_h = squeezed_size(w, h, scale)
    if (small_w, small_h) == (w, h):
        return buffer.copy()

    color = np.ascontiguousarray(buffer.color, dtype=np.float32)
    small = cv2.resize(color, (small_w, small_h), interpolation=cv2.INTER_AREA)
    restored = cv2.resize(small, (w, h), interpolation=cv2.INTER_LINEAR)
    return buffer.with_color(restored)
