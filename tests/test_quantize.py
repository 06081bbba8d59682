"""Tests for even-level quantization."""

import numpy as np
import pytest

from unmark.core.buffer import PixelBuffer
from unmark.core.errors import InvalidConfiguration
from unmark.core.quantize import level_set, quantize, quantize_values


def _all_values_buffer():
    """A 16x16 RGB buffer whose red channel holds every byte value."""
    values = np.arange(256, dtype=np.uint8).reshape(16, 16)
    return PixelBuffer.from_array(np.stack([values] * 3, axis=2))


class TestLevelSet:
    def test_two_levels(self):
        assert level_set(2).tolist() == [0, 255]

    def test_four_levels(self):
        assert level_set(4).tolist() == [0, 85, 170, 255]

    def test_three_levels_round_half_up(self):
        assert level_set(3).tolist() == [0, 128, 255]

    def test_256_levels_is_every_value(self):
        assert level_set(256).tolist() == list(range(256))

    @pytest.mark.parametrize("levels", [0, 1, -3, 257])
    def test_rejects_out_of_range(self, levels):
        with pytest.raises(InvalidConfiguration):
            level_set(levels)

    @pytest.mark.parametrize("levels", [2.5, "4", True])
    def test_rejects_non_integer(self, levels):
        with pytest.raises(InvalidConfiguration):
            level_set(levels)


class TestQuantizeValues:
    def test_nearest_level(self):
        levels = level_set(4)
        out = quantize_values(np.array([0, 40, 43, 100, 130, 200, 255]), levels)
        assert out.tolist() == [0, 0, 85, 85, 170, 170, 255]

    def test_tie_goes_to_lower_level(self):
        levels = np.array([0.0, 100.0, 200.0])
        out = quantize_values(np.array([50.0, 150.0]), levels)
        assert out.tolist() == [0, 100]

    def test_out_of_range_snaps_to_ends(self):
        levels = level_set(4)
        out = quantize_values(np.array([-80.0, 400.0]), levels)
        assert out.tolist() == [0, 255]

    def test_exact_levels_unchanged(self):
        levels = level_set(5)
        assert np.array_equal(quantize_values(levels, levels), levels)


class TestQuantize:
    @pytest.mark.parametrize("n", [2, 3, 4, 7, 16])
    def test_outputs_are_level_members(self, n):
        result = quantize(_all_values_buffer(), n)
        assert set(np.unique(result.color).tolist()) <= set(level_set(n).tolist())

    @pytest.mark.parametrize("n", [2, 3, 4, 7, 16])
    def test_within_half_a_step(self, n):
        levels = level_set(n)
        buf = _all_values_buffer()
        result = quantize(buf, n)
        diff = np.abs(result.color.astype(int) - buf.color.astype(int))
        assert diff.max() <= np.diff(levels).max() / 2

    def test_deterministic(self):
        buf = _all_values_buffer()
        assert np.array_equal(quantize(buf, 5).pixels, quantize(buf, 5).pixels)

    def test_alpha_untouched(self):
        arr = np.full((2, 2, 4), 100, dtype=np.uint8)
        arr[:, :, 3] = [[1, 2], [3, 4]]
        buf = PixelBuffer.from_array(arr)
        assert np.array_equal(quantize(buf, 2).alpha, buf.alpha)

    def test_rejects_one_level(self):
        with pytest.raises(InvalidConfiguration):
            quantize(_all_values_buffer(), 1)
