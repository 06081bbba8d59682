"""Even-level color quantization."""

from __future__ import annotations

import numpy as np

from unmark.core.buffer import PixelBuffer
from unmark.core.errors import InvalidConfiguration


def level_set(levels: int) -> np.ndarray:
    """The `levels` evenly spaced output values in [0, 255], ascending.

    Level i is i * 255 / (levels - 1) rounded half up, so 4 levels give
    0, 85, 170, 255 and 3 levels give 0, 128, 255.
    """
    if isinstance(levels, bool) or not isinstance(levels, (int, np.integer)):
        raise InvalidConfiguration(f"Level count must be an integer, got {levels!r}")
    if levels < 2:
        raise InvalidConfiguration(f"Level count must be >= 2, got {levels}")
    if levels > 256:
        raise InvalidConfiguration(f"Level count must be <= 256, got {levels}")
    idx = np.arange(levels, dtype=np.float64)
    return np.floor(idx * 255.0 / (levels - 1) + 0.5)


def quantize_values(values: np.ndarray, levels: np.ndarray) -> np.ndarray:
    """Snap each value to the nearest member of `levels`.

    Ties go to the lower level. Values outside [0, 255] snap to the end
    levels. Returns float64 with the shape of `values`.
    """
    values = np.asarray(values, dtype=np.float64)
    upper_idx = np.clip(np.searchsorted(levels, values, side="left"), 1, len(levels) - 1)
    lower = levels[upper_idx - 1]
    upper = levels[upper_idx]
    return np.where(upper - values < values - lower, upper, lower)


def quantize(buffer: PixelBuffer, levels: int) -> PixelBuffer:
    """Quantize every color sample to one of `levels` evenly spaced values."""
    return buffer.with_color(quantize_values(buffer.color, level_set(levels)))
