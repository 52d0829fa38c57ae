"""Tests for contrast enhancement."""

import numpy as np
import pytest

from ascii_ripple.contrast import (AFFECTING_EXTERNAL_INDICES, apply_directional_contrast,
                                   apply_full_contrast, apply_global_contrast)

VECTOR = [0.2, 0.4, 0.6, 0.8, 0.5, 0.1]


class TestGlobalContrast:

    @pytest.mark.parametrize("exponent", [1, 0.5, 0, -2])
    def test_exponent_at_most_one_is_identity(self, exponent):
        np.testing.assert_array_equal(apply_global_contrast(VECTOR, exponent), VECTOR)

    def test_max_component_unchanged(self):
        result = apply_global_contrast(VECTOR, 2)
        assert result[3] == pytest.approx(0.8)

    def test_power_law_relative_to_max(self):
        result = apply_global_contrast(VECTOR, 2)
        expected = [(v / 0.8) ** 2 * 0.8 for v in VECTOR]
        np.testing.assert_allclose(result, expected)

    def test_zero_vector_unchanged(self):
        np.testing.assert_array_equal(apply_global_contrast([0] * 6, 3), np.zeros(6))

    def test_does_not_modify_input(self):
        vector = np.array(VECTOR)
        apply_global_contrast(vector, 2)
        np.testing.assert_array_equal(vector, VECTOR)


class TestDirectionalContrast:

    def test_exponent_one_is_identity(self):
        external = np.linspace(0, 1, 10)
        np.testing.assert_array_equal(apply_directional_contrast(VECTOR, external, 1), VECTOR)

    def test_dark_surroundings_use_own_value(self):
        # with all external samples at 0 each value is its own maximum
        result = apply_directional_contrast(VECTOR, np.zeros(10), 2)
        np.testing.assert_allclose(result, VECTOR)

    def test_bright_neighbour_darkens_sample(self):
        internal = [0.5] * 6
        external = np.zeros(10)
        external[0] = 1.0  # above top-left
        result = apply_directional_contrast(internal, external, 2)
        # affected: top-left, top-right, middle-left
        for i in range(6):
            expected = 0.25 if 0 in AFFECTING_EXTERNAL_INDICES[i] else 0.5
            assert result[i] == pytest.approx(expected)

    def test_zero_local_max_left_unchanged(self):
        result = apply_directional_contrast([0] * 6, np.zeros(10), 3)
        np.testing.assert_array_equal(result, np.zeros(6))

    def test_mapping_shape(self):
        assert AFFECTING_EXTERNAL_INDICES.shape == (6, 4)
        assert AFFECTING_EXTERNAL_INDICES.max() <= 9


class TestFullContrast:

    def test_no_external_only_global(self):
        np.testing.assert_allclose(
            apply_full_contrast(VECTOR, None, 2, 3),
            apply_global_contrast(VECTOR, 2))

    def test_directional_then_global(self):
        external = np.full(10, 0.9)
        expected = apply_global_contrast(apply_directional_contrast(VECTOR, external, 2), 1.5)
        np.testing.assert_allclose(apply_full_contrast(VECTOR, external, 1.5, 2), expected)

    def test_all_disabled_is_identity(self):
        np.testing.assert_array_equal(apply_full_contrast(VECTOR, np.ones(10), 1, 1), VECTOR)
