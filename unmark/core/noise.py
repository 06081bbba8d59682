"""Per-channel Gaussian noise injection."""

from __future__ import annotations

import math

import numpy as np

from unmark.core.buffer import PixelBuffer
from unmark.core.errors import InvalidConfiguration


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create the random source for noise injection.

    A None seed gives a non-deterministic generator; an integer seed gives
    reproducible output.
    """
    return np.random.default_rng(seed)


def add_gaussian_noise(
    buffer: PixelBuffer,
    sigma: float,
    rng: np.random.Generator | None = None,
) -> PixelBuffer:
    """Perturb every color sample with an independent N(0, sigma^2) draw.

    Args:
        buffer: input pixels. Alpha is copied through unchanged.
        sigma: standard deviation of the noise, in intensity units.
        rng: random source; a fresh unseeded one is used when omitted.

    Returns:
        New buffer with noisy samples rounded and clamped to [0, 255].
    """
    if not math.isfinite(sigma) or sigma <= 0:
        raise InvalidConfiguration(f"Noise sigma must be > 0, got {sigma}")
    if rng is None:
        rng = make_rng()

    color = buffer.color.astype(np.float64)
    noise = rng.normal(0.0, sigma, size=color.shape)
    return buffer.with_color(color + noise)
