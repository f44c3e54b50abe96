"""Tests for the high-level narrowing interface."""

import numpy as np
import pytest
from PIL import Image

from incremental_carve import ContentAwareNarrower, NarrowResult, narrow_image
from incremental_carve.seam_carving import InvalidSeamCountError


@pytest.fixture
def photo():
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(24, 32, 3), dtype=np.uint8)


class TestContentAwareNarrower:
    def test_target_width(self, photo):
        result = ContentAwareNarrower().narrow(photo, target_width=20, show_progress=False)

        assert isinstance(result, NarrowResult)
        assert result.image.shape == (24, 20, 3)
        assert result.original_size == (24, 32)
        assert result.narrowed_size == (24, 20)
        assert result.seams_removed == 12
        assert result.strategy == "incremental"
        assert result.metadata["energy_function"] == "GradientEnergyFunction"

    def test_scale(self, photo):
        result = ContentAwareNarrower().narrow(photo, scale=0.75, show_progress=False)
        assert result.narrowed_size == (24, 24)
        assert result.width_ratio == pytest.approx(0.75)

    def test_seams(self, photo):
        result = ContentAwareNarrower(strategy="full").narrow(
            photo, seams=5, show_progress=False
        )
        assert result.narrowed_size == (24, 27)
        assert result.strategy == "full"

    def test_no_target_is_noop(self, photo):
        result = ContentAwareNarrower().narrow(photo, show_progress=False)
        assert np.array_equal(result.image, photo)
        assert result.seams_removed == 0

    def test_conflicting_targets(self, photo):
        with pytest.raises(ValueError, match="only one"):
            ContentAwareNarrower().narrow(photo, target_width=10, seams=3)

    def test_too_narrow(self, photo):
        with pytest.raises(InvalidSeamCountError):
            ContentAwareNarrower().narrow(photo, target_width=0, show_progress=False)

    def test_from_path(self, photo, tmp_path):
        path = tmp_path / "photo.png"
        Image.fromarray(photo).save(path)

        result = narrow_image(path, seams=4, show_progress=False)

        assert result.narrowed_size == (24, 28)
        expected = ContentAwareNarrower().narrow(photo, seams=4, show_progress=False)
        assert np.array_equal(result.image, expected.image)

    def test_batch(self, photo):
        results = ContentAwareNarrower().narrow_batch(
            [photo, photo[:, :16]], seams=2, show_progress=False
        )
        assert [r.narrowed_size for r in results] == [(24, 30), (24, 14)]

    def test_analyze_content(self, photo):
        stats = ContentAwareNarrower().analyze_content(photo)
        assert stats["size"] == (24, 32)
        assert stats["max_energy"] >= stats["mean_energy"] >= 0
        assert 0 <= stats["high_importance_ratio"] <= 1
        assert 0 <= stats["low_importance_ratio"] <= 1


class TestNarrowResult:
    def test_save_png(self, photo, tmp_path):
        result = ContentAwareNarrower().narrow(photo, seams=3, show_progress=False)
        path = tmp_path / "out.png"

        result.save(path)

        with Image.open(path) as saved:
            assert saved.size == (29, 24)
            assert np.array_equal(np.array(saved), result.image)

    def test_save_rgba_as_jpeg(self, tmp_path):
        rgba = np.full((8, 8, 4), 200, dtype=np.uint8)
        result = ContentAwareNarrower().narrow(rgba, seams=2, show_progress=False)
        path = tmp_path / "out.jpg"

        result.save(path)

        with Image.open(path) as saved:
            assert saved.size == (6, 8)
            assert saved.mode == "RGB"

    def test_to_pil_scales_unit_floats(self):
        result = NarrowResult(
            image=np.ones((2, 3, 3), dtype=np.float32),
            original_size=(2, 4),
            narrowed_size=(2, 3),
            strategy="incremental",
        )
        pil = result.to_pil()
        assert pil.size == (3, 2)
        assert np.all(np.array(pil) == 255)
