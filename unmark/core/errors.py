"""Error kinds raised by the transformation pipeline."""

from __future__ import annotations


class UnmarkError(Exception):
    """Base class for pipeline errors.

    `code` is a stable identifier used in JSON error output.
    """

    code = "PROCESSING_ERROR"


class InvalidConfiguration(UnmarkError, ValueError):
    """A parameter is outside its allowed range."""

    code = "INVALID_CONFIG"


class UnsupportedChannelLayout(UnmarkError, ValueError):
    """Channel count is not 3 (RGB) or 4 (RGBA)."""

    code = "UNSUPPORTED_LAYOUT"


class GrayscaleGuardRejected(UnmarkError):
    """Threshold mode was requested on an image that looks colored."""

    code = "NOT_GRAYSCALE"
