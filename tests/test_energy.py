"""Tests for energy functions."""

import numpy as np
import pytest

from incremental_carve.energy import (
    EnergyField,
    GradientEnergyFunction,
    luminance,
    luminance_map,
    pixel_energy,
)


def random_image(h, w, channels=3, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(h, w, channels)).astype(np.float64)


class TestLuminance:
    """Tests for the luminance sampler."""

    def test_rec709_weights(self):
        pixels = np.array([[[10.0, 20.0, 30.0]]])
        expected = 0.2126 * 10.0 + 0.7152 * 20.0 + 0.0722 * 30.0
        assert luminance(pixels, 0, 0) == expected

    def test_out_of_bounds_is_zero(self):
        pixels = np.full((2, 2, 3), 200.0)
        for x, y in [(-1, 0), (0, -1), (2, 0), (0, 2), (-1, -1), (2, 2)]:
            assert luminance(pixels, x, y) == 0.0

    def test_respects_live_width(self):
        """Columns at or beyond the live width read as black."""
        pixels = np.full((2, 4, 3), 100.0)
        assert luminance(pixels, 2, 0, width=3) > 0
        assert luminance(pixels, 3, 0, width=3) == 0.0

    def test_alpha_ignored(self):
        opaque = np.array([[[50.0, 60.0, 70.0, 255.0]]])
        clear = np.array([[[50.0, 60.0, 70.0, 0.0]]])
        assert luminance(opaque, 0, 0) == luminance(clear, 0, 0)

    def test_map_matches_sampler(self):
        pixels = random_image(5, 7)
        lum = luminance_map(pixels)
        for y in range(5):
            for x in range(7):
                assert lum[y, x] == luminance(pixels, x, y)


class TestGradientEnergy:
    """Tests for gradient-based energy function."""

    def test_computes_energy_map(self):
        """Test that gradient energy produces a valid energy map."""
        img = random_image(20, 30)

        energy = GradientEnergyFunction().compute(img)

        assert energy.shape == (20, 30)
        assert energy.min() >= 0

    def test_uniform_image_border_ring(self):
        """Uniform image only has energy where the zero border is sampled."""
        img = np.full((3, 3, 3), 100.0)
        lum = luminance(img, 1, 1)

        energy = GradientEnergyFunction().compute(img)

        expected = np.array([
            [4 * lum, 3 * lum, 4 * lum],
            [3 * lum, 0.0, 3 * lum],
            [4 * lum, 3 * lum, 4 * lum],
        ])
        np.testing.assert_allclose(energy, expected)
        assert energy[1, 1] == 0.0

    def test_interior_of_flat_region_is_zero(self):
        img = np.full((10, 10, 3), 42.0)
        energy = GradientEnergyFunction().compute(img)
        assert np.all(energy[1:-1, 1:-1] == 0.0)

    def test_detects_edges(self):
        """Test that edges have higher energy than flat regions."""
        img = np.zeros((20, 20, 3))
        img[:, 10:] = 255.0

        energy = GradientEnergyFunction().compute(img)

        assert energy[5, 10] > energy[5, 4]
        assert energy[5, 9] > energy[5, 4]

    def test_vectorized_matches_per_pixel(self):
        """Whole-field computation is bit-identical to the per-pixel form."""
        img = random_image(9, 13, channels=4, seed=3)

        energy = GradientEnergyFunction().compute(img)

        for y in range(9):
            for x in range(13):
                assert energy[y, x] == pixel_energy(img, x, y)

    def test_idempotent(self):
        img = random_image(8, 8, seed=5)
        fn = GradientEnergyFunction()
        assert np.array_equal(fn.compute(img), fn.compute(img))

    def test_live_width_limits_field(self):
        img = random_image(6, 10, seed=7)
        energy = GradientEnergyFunction().compute(img, width=7)
        assert energy.shape == (6, 7)
        assert np.array_equal(energy, GradientEnergyFunction().compute(img[:, :7]))


class TestEnergyField:
    """Tests for the energy field kept alongside the pixel buffer."""

    def test_initial_field(self):
        img = random_image(4, 6, seed=1)
        field = EnergyField(img)
        assert field.width == 6
        assert field.height == 4
        assert np.array_equal(field.live, GradientEnergyFunction().compute(img))

    def test_remove_seam_shrinks_and_patches_band(self):
        img = random_image(5, 8, seed=2)
        field = EnergyField(img)
        before = field.live.copy()
        seam = np.array([3, 4, 4, 3, 2])

        for y, x in enumerate(seam):
            img[y, x:7] = img[y, x + 1:8]
        field.remove_seam(seam, img)

        assert field.width == 7
        for y, x in enumerate(seam):
            # untouched columns are shifted copies of the previous values
            assert np.array_equal(field.values[y, : x - 1], before[y, : x - 1])
            assert np.array_equal(field.values[y, x + 1 : 7], before[y, x + 2 : 8])
            # the band around the seam is recomputed on the shifted pixels
            assert field.values[y, x] == pixel_energy(img, x, y, width=7)
            assert field.values[y, x - 1] == pixel_energy(img, x - 1, y, width=7)

    def test_remove_seam_at_right_edge(self):
        img = random_image(3, 4, seed=4)
        field = EnergyField(img)
        seam = np.array([3, 3, 3])

        field.remove_seam(seam, img)

        assert field.width == 3
        for y in range(3):
            assert field.values[y, 2] == pixel_energy(img, 2, y, width=3)
