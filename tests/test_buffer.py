"""Tests for the pixel buffer."""

import numpy as np
import pytest

from unmark.core.buffer import PixelBuffer
from unmark.core.errors import InvalidConfiguration, UnsupportedChannelLayout


def _rgba(width=3, height=2):
    arr = np.arange(width * height * 4, dtype=np.uint8).reshape(height, width, 4)
    return PixelBuffer.from_array(arr)


class TestConstruction:
    def test_from_bytes_rgb(self):
        data = bytes(range(2 * 2 * 3))
        buf = PixelBuffer.from_bytes(2, 2, 3, data)
        assert (buf.width, buf.height, buf.channels) == (2, 2, 3)
        assert buf.pixels[0, 1].tolist() == [3, 4, 5]
        assert buf.pixels[1, 0].tolist() == [6, 7, 8]

    def test_from_bytes_rgba(self):
        buf = PixelBuffer.from_bytes(1, 1, 4, b"\x01\x02\x03\x04")
        assert buf.has_alpha
        assert buf.alpha.tolist() == [[4]]

    def test_to_bytes_matches_input(self):
        data = bytes(range(4 * 3 * 3))
        buf = PixelBuffer.from_bytes(4, 3, 3, data)
        assert buf.to_bytes() == data

    @pytest.mark.parametrize("channels", [1, 2, 5])
    def test_rejects_unsupported_channels(self, channels):
        with pytest.raises(UnsupportedChannelLayout):
            PixelBuffer.from_bytes(1, 1, channels, bytes(channels))

    def test_rejects_unsupported_array_channels(self):
        with pytest.raises(UnsupportedChannelLayout):
            PixelBuffer(np.zeros((2, 2, 2), dtype=np.uint8))

    @pytest.mark.parametrize("width, height", [(-1, -2), (0, 5), (-3, -1)])
    def test_from_bytes_rejects_non_positive_dimensions(self, width, height):
        with pytest.raises(InvalidConfiguration):
            PixelBuffer.from_bytes(width, height, 3, bytes(6))

    def test_rejects_wrong_length(self):
        with pytest.raises(InvalidConfiguration):
            PixelBuffer.from_bytes(2, 2, 3, bytes(11))

    def test_rejects_empty(self):
        with pytest.raises(InvalidConfiguration):
            PixelBuffer(np.zeros((0, 4, 3), dtype=np.uint8))

    def test_rejects_non_uint8(self):
        with pytest.raises(InvalidConfiguration):
            PixelBuffer(np.zeros((2, 2, 3), dtype=np.float64))

    @pytest.mark.parametrize(
        "values",
        [
            [[[300, -5, 128]]],
            [[[256, 0, 0]]],
            [[[-1, 0, 0]]],
            [[[12.5, 0.0, 0.0]]],
            [[[float("nan"), 0.0, 0.0]]],
        ],
    )
    def test_from_array_rejects_values_outside_byte_range(self, values):
        with pytest.raises(InvalidConfiguration):
            PixelBuffer.from_array(np.array(values))

    def test_from_array_accepts_whole_numbers_in_range(self):
        buf = PixelBuffer.from_array(np.array([[[0.0, 128.0, 255.0]]]))
        assert buf.pixels.tolist() == [[[0, 128, 255]]]
        buf = PixelBuffer.from_array(np.array([[[0, 1, 255]]], dtype=np.int64))
        assert buf.pixels.tolist() == [[[0, 1, 255]]]

    def test_from_array_rejects_non_numeric(self):
        with pytest.raises(InvalidConfiguration):
            PixelBuffer.from_array(np.array([[["a", "b", "c"]]]))

    def test_from_array_copies(self):
        arr = np.zeros((2, 2, 3), dtype=np.uint8)
        buf = PixelBuffer.from_array(arr)
        arr[0, 0, 0] = 99
        assert buf.pixels[0, 0, 0] == 0


class TestChannels:
    def test_rgb_has_no_alpha(self):
        buf = PixelBuffer(np.zeros((2, 2, 3), dtype=np.uint8))
        assert buf.alpha is None
        assert buf.color.shape == (2, 2, 3)

    def test_with_color_preserves_alpha(self):
        buf = _rgba()
        result = buf.with_color(np.full((2, 3, 3), 7, dtype=np.uint8))
        assert np.array_equal(result.alpha, buf.alpha)
        assert (result.color == 7).all()

    def test_with_color_rounds_and_clamps_floats(self):
        buf = PixelBuffer(np.zeros((1, 3, 3), dtype=np.uint8))
        color = np.array([[[-20.0] * 3, [12.6] * 3, [300.0] * 3]])
        result = buf.with_color(color)
        assert result.color[0, :, 0].tolist() == [0, 13, 255]

    def test_with_color_does_not_touch_original(self):
        buf = _rgba()
        before = buf.pixels.copy()
        buf.with_color(np.zeros((2, 3, 3)))
        assert np.array_equal(buf.pixels, before)

    def test_with_color_rejects_wrong_shape(self):
        buf = _rgba()
        with pytest.raises(InvalidConfiguration):
            buf.with_color(np.zeros((3, 2, 3)))
