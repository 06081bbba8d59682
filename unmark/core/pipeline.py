"""Mode-driven transformation pipeline.

basic:       noise
aggressive:  squeeze → blur → noise
destructive: quantize + Floyd-Steinberg dither (one pass)
threshold:   grayscale guard → black/white threshold
"""

from __future__ import annotations

from functools import partial
from typing import Callable

import numpy as np

from unmark.core.blur import gaussian_blur
from unmark.core.buffer import PixelBuffer
from unmark.core.dither import floyd_steinberg
from unmark.core.modes import (
    AggressiveMode,
    BasicMode,
    DestructiveMode,
    Mode,
    ThresholdMode,
)
from unmark.core.noise import add_gaussian_noise, make_rng
from unmark.core.resample import squeeze
from unmark.core.threshold import check_grayscale, threshold

Stage = Callable[[PixelBuffer], PixelBuffer]


def _guard(buffer: PixelBuffer, tolerance: int) -> PixelBuffer:
    check_grayscale(buffer, tolerance)
    return buffer


def pipeline_stages(
    mode: Mode, rng: np.random.Generator | None = None
) -> list[tuple[str, Stage]]:
    """Ordered (stage name, stage) pairs for a mode."""
    if isinstance(mode, BasicMode):
        return [("noise", partial(add_gaussian_noise, sigma=mode.sigma, rng=rng))]

    if isinstance(mode, AggressiveMode):
        return [
            ("resample", partial(squeeze, scale=mode.resize_scale)),
            ("blur", partial(gaussian_blur, sigma=mode.blur_sigma)),
            ("noise", partial(add_gaussian_noise, sigma=mode.sigma, rng=rng)),
        ]

    if isinstance(mode, DestructiveMode):
        return [
            (
                "dither",
                partial(floyd_steinberg, levels=mode.levels, serpentine=mode.serpentine),
            )
        ]

    if isinstance(mode, ThresholdMode):
        stages: list[tuple[str, Stage]] = []
        if not mode.force_bw:
            stages.append(("grayscale-guard", partial(_guard, tolerance=mode.tolerance)))
        stages.append(("threshold", partial(threshold, cutoff=mode.threshold)))
        return stages

    raise TypeError(f"Unknown mode: {mode!r}")


def run_pipeline(
    buffer: PixelBuffer,
    mode: Mode,
    rng: np.random.Generator | None = None,
    on_progress: Callable[[str, int, int], None] | None = None,
) -> PixelBuffer:
    """Run `buffer` through every stage of `mode` and return the result.

    Args:
        buffer: input pixels; never modified.
        mode: one of the mode records from unmark.core.modes.
        rng: random source for noise stages; unseeded when omitted.
        on_progress: callback(stage_name, stage_number, total_stages),
            called before each stage starts.

    Returns:
        New buffer with the input's dimensions and alpha.
    """
    if rng is None:
        rng = make_rng()
    stages = pipeline_stages(mode, rng)

    current = buffer
    for i, (name, stage) in enumerate(stages):
        if on_progress:
            on_progress(name, i + 1, len(stages))
        current = stage(current)

    return current
