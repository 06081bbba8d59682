"""Mode configuration: one frozen record per pipeline mode."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import ClassVar, Union

from unmark.core.errors import InvalidConfiguration
from unmark.core.quantize import level_set
from unmark.core.resample import validate_scale
from unmark.core.threshold import DEFAULT_GRAY_TOLERANCE, validate_intensity


class ModeName(str, Enum):
    BASIC = "basic"
    AGGRESSIVE = "aggressive"
    DESTRUCTIVE = "destructive"
    THRESHOLD = "threshold"


def _check_sigma(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfiguration(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidConfiguration(f"{name} must be > 0, got {value!r}")


@dataclass(frozen=True)
class BasicMode:
    """Gaussian noise only."""

    name: ClassVar[ModeName] = ModeName.BASIC

    sigma: float = 30.0

    def __post_init__(self) -> None:
        _check_sigma("Noise sigma", self.sigma)

    def to_dict(self) -> dict:
        return {"mode": self.name.value, **asdict(self)}


@dataclass(frozen=True)
class AggressiveMode:
    """Resize squeeze, then blur, then Gaussian noise."""

    name: ClassVar[ModeName] = ModeName.AGGRESSIVE

    resize_scale: float = 0.9
    blur_sigma: float = 1.0
    sigma: float = 30.0

    def __post_init__(self) -> None:
        validate_scale(self.resize_scale)
        _check_sigma("Blur sigma", self.blur_sigma)
        _check_sigma("Noise sigma", self.sigma)

    def to_dict(self) -> dict:
        return {"mode": self.name.value, **asdict(self)}


@dataclass(frozen=True)
class DestructiveMode:
    """Quantization with Floyd-Steinberg dithering."""

    name: ClassVar[ModeName] = ModeName.DESTRUCTIVE

    levels: int = 4
    serpentine: bool = False

    def __post_init__(self) -> None:
        level_set(self.levels)

    def to_dict(self) -> dict:
        return {"mode": self.name.value, **asdict(self)}


@dataclass(frozen=True)
class ThresholdMode:
    """Binary black and white, gated by the grayscale guard."""

    name: ClassVar[ModeName] = ModeName.THRESHOLD

    threshold: int = 128
    force_bw: bool = False
    tolerance: int = DEFAULT_GRAY_TOLERANCE

    def __post_init__(self) -> None:
        validate_intensity("Threshold", self.threshold)
        validate_intensity("Grayscale tolerance", self.tolerance)

    def to_dict(self) -> dict:
        return {"mode": self.name.value, **asdict(self)}


Mode = Union[BasicMode, AggressiveMode, DestructiveMode, ThresholdMode]

MODE_TYPES: dict[ModeName, type] = {
    ModeName.BASIC: BasicMode,
    ModeName.AGGRESSIVE: AggressiveMode,
    ModeName.DESTRUCTIVE: DestructiveMode,
    ModeName.THRESHOLD: ThresholdMode,
}

# Flat option names (as on the command line) to mode fields
_OPTION_FIELDS: dict[ModeName, dict[str, str]] = {
    ModeName.BASIC: {"sigma": "sigma"},
    ModeName.AGGRESSIVE: {
        "resize_scale": "resize_scale",
        "blur_sigma": "blur_sigma",
        "sigma": "sigma",
    },
    ModeName.DESTRUCTIVE: {"levels": "levels", "serpentine": "serpentine"},
    ModeName.THRESHOLD: {
        "threshold": "threshold",
        "force_bw": "force_bw",
        "gray_tolerance": "tolerance",
    },
}


def build_mode(name: ModeName | str, **options) -> Mode:
    """Construct the mode record for `name` from flat options.

    Options that do not apply to the chosen mode, and options set to None,
    are ignored so a whole argument namespace can be passed through.
    """
    try:
        mode_name = ModeName(name)
    except ValueError:
        choices = ", ".join(m.value for m in ModeName)
        raise InvalidConfiguration(
            f"Unknown mode: {name!r} (expected one of {choices})"
        ) from None

    kwargs = {
        field: options[option]
        for option, field in _OPTION_FIELDS[mode_name].items()
        if options.get(option) is not None
    }
    return MODE_TYPES[mode_name](**kwargs)
