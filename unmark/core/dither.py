"""Floyd-Steinberg error diffusion dithering.

The scan loop is compiled with Numba; it is sequential by nature, so it
cannot be vectorized across pixels.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from unmark.core.buffer import PixelBuffer
from unmark.core.quantize import level_set

# (dx, dy, weight) for a left-to-right scan. Reversed rows mirror dx.
FS_WEIGHTS = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


@njit(cache=True)
def _nearest_level(value: float, levels: np.ndarray) -> float:
    """Nearest member of ascending `levels`; ties go to the lower level."""
    best = levels[0]
    best_dist = abs(value - best)
    for i in range(1, levels.shape[0]):
        dist = abs(value - levels[i])
        if dist < best_dist:
            best = levels[i]
            best_dist = dist
        elif dist > best_dist:
            break
    return best


@njit(cache=True)
def _diffuse_kernel(
    color: np.ndarray,
    levels: np.ndarray,
    serpentine: bool,
    out: np.ndarray,
    error: np.ndarray,
) -> None:
    h, w, c = color.shape
    for y in range(h):
        if serpentine and y % 2 == 1:
            start, stop, direction = w - 1, -1, -1
        else:
            start, stop, direction = 0, w, 1
        x = start
        while x != stop:
            for ch in range(c):
                value = color[y, x, ch] + error[y, x + 1, ch]
                new = _nearest_level(value, levels)
                out[y, x, ch] = new
                err = value - new

                error[y, x + 1 + direction, ch] += err * (7.0 / 16.0)
                error[y + 1, x + 1 - direction, ch] += err * (3.0 / 16.0)
                error[y + 1, x + 1, ch] += err * (5.0 / 16.0)
                error[y + 1, x + 1 + direction, ch] += err * (1.0 / 16.0)
            x += direction


def diffuse(
    color: np.ndarray, levels: np.ndarray, serpentine: bool = False
) -> tuple[np.ndarray, np.ndarray]:
    """Run one error diffusion pass over float color planes.

    Args:
        color: (H, W, 3) array of original channel values.
        levels: ascending quantization level set.
        serpentine: scan odd rows right-to-left with a mirrored kernel.

    Returns:
        (quantized, error) where quantized has the shape of `color` and
        error is the pass's carry arena of shape (H + 1, W + 2, 3). The
        arena is padded by one column on each side and one row below, so
        whatever is left in the padding is the error dropped at the edges.
    """
    color = np.ascontiguousarray(color, dtype=np.float64)
    levels = np.ascontiguousarray(levels, dtype=np.float64)
    h, w, c = color.shape
    out = np.empty((h, w, c), dtype=np.float64)
    error = np.zeros((h + 1, w + 2, c), dtype=np.float64)
    _diffuse_kernel(color, levels, bool(serpentine), out, error)
    return out, error


def floyd_steinberg(
    buffer: PixelBuffer, levels: int = 2, serpentine: bool = False
) -> PixelBuffer:
    """Quantize the color planes to `levels` values with error diffusion.

    Each channel carries its own error. Alpha is copied through unchanged.
    """
    level_values = level_set(levels)
    out, _ = diffuse(buffer.color.astype(np.float64), level_values, serpentine)
    return buffer.with_color(out)
