"""In-memory RGB/RGBA pixel buffer shared by every filter."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from unmark.core.errors import InvalidConfiguration, UnsupportedChannelLayout

SUPPORTED_CHANNELS = (3, 4)


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """A row-major grid of 8-bit channel samples.

    `pixels` has shape (height, width, channels) and dtype uint8. Channels
    are RGB or RGBA; the alpha channel is carried along untouched by every
    transform.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3:
            raise InvalidConfiguration(
                f"Pixel array must be (height, width, channels), got shape {self.pixels.shape}"
            )
        h, w, c = self.pixels.shape
        if c not in SUPPORTED_CHANNELS:
            raise UnsupportedChannelLayout(
                f"Expected 3 (RGB) or 4 (RGBA) channels, got {c}"
            )
        if h == 0 or w == 0:
            raise InvalidConfiguration(f"Image must not be empty, got {w}x{h}")
        if self.pixels.dtype != np.uint8:
            raise InvalidConfiguration(
                f"Pixel array must be uint8, got {self.pixels.dtype}"
            )

    @classmethod
    def from_bytes(
        cls, width: int, height: int, channels: int, data: bytes
    ) -> PixelBuffer:
        """Build a buffer from a contiguous row-major sample sequence."""
        if channels not in SUPPORTED_CHANNELS:
            raise UnsupportedChannelLayout(
                f"Expected 3 (RGB) or 4 (RGBA) channels, got {channels}"
            )
        if width <= 0 or height <= 0:
            raise InvalidConfiguration(f"Image must not be empty, got {width}x{height}")
        expected = width * height * channels
        if len(data) != expected:
            raise InvalidConfiguration(
                f"Expected {expected} samples for {width}x{height}x{channels}, "
                f"got {len(data)}"
            )
        arr = np.frombuffer(bytes(data), dtype=np.uint8).reshape(
            height, width, channels
        )
        return cls(arr.copy())

    @classmethod
    def from_array(cls, arr: np.ndarray) -> PixelBuffer:
        """Build a buffer from an (H, W, C) array, copying it.

        Non-uint8 arrays must hold whole numbers in [0, 255].
        """
        arr = np.asarray(arr)
        if arr.dtype != np.uint8:
            if arr.dtype.kind not in "iuf":
                raise InvalidConfiguration(
                    f"Pixel array must be numeric, got {arr.dtype}"
                )
            if arr.size and (
                not np.isfinite(arr).all() or arr.min() < 0 or arr.max() > 255
            ):
                raise InvalidConfiguration("Pixel values must be within [0, 255]")
            if arr.dtype.kind == "f" and not np.array_equal(arr, np.rint(arr)):
                raise InvalidConfiguration("Pixel values must be whole numbers")
        return cls(np.array(arr, dtype=np.uint8, copy=True))

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def channels(self) -> int:
        return self.pixels.shape[2]

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4

    @property
    def color(self) -> np.ndarray:
        """The RGB planes as a (H, W, 3) view."""
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray | None:
        """The alpha plane as a (H, W) view, or None for RGB."""
        if not self.has_alpha:
            return None
        return self.pixels[:, :, 3]

    def with_color(self, color: np.ndarray) -> PixelBuffer:
        """Return a new buffer with replaced RGB planes and the same alpha.

        `color` may be float; it is rounded and clamped to [0, 255].
        """
        if color.shape != (self.height, self.width, 3):
            raise InvalidConfiguration(
                f"Color planes must be {(self.height, self.width, 3)}, got {color.shape}"
            )
        if color.dtype != np.uint8:
            color = np.clip(np.rint(color), 0, 255).astype(np.uint8)
        out = self.pixels.copy()
        out[:, :, :3] = color
        return PixelBuffer(out)

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.pixels.copy())

    def to_bytes(self) -> bytes:
        """Flatten back to a contiguous row-major sample sequence."""
        return np.ascontiguousarray(self.pixels).tobytes()
