"""High-level content-aware narrowing interface."""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image

from incremental_carve.cost_table import CostTableStrategy
from incremental_carve.energy import EnergyFunction
from incremental_carve.seam_carving import PixelBuffer, SeamCarver

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, np.ndarray, Image.Image]


class NarrowResult:
    """Result of a narrowing operation."""

    def __init__(
        self,
        image: np.ndarray,
        original_size: tuple[int, int],
        narrowed_size: tuple[int, int],
        strategy: str,
        metadata: Optional[dict] = None,
    ):
        self.image = image
        self.original_size = original_size
        self.narrowed_size = narrowed_size
        self.strategy = strategy
        self.metadata = metadata or {}

    @property
    def seams_removed(self) -> int:
        return self.original_size[1] - self.narrowed_size[1]

    @property
    def width_ratio(self) -> float:
        """Width after narrowing divided by width before."""
        return self.narrowed_size[1] / self.original_size[1]

    def to_pil(self) -> Image.Image:
        """Convert to PIL Image."""
        arr = self.image
        if arr.dtype != np.uint8:
            if arr.size and arr.max() <= 1.0:
                arr = arr * 255
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        return Image.fromarray(arr)

    def save(self, path: Union[str, Path], quality: int = 95) -> None:
        """Save narrowed image."""
        img = self.to_pil()
        if Path(path).suffix.lower() in (".jpg", ".jpeg") and img.mode == "RGBA":
            img = img.convert("RGB")
        img.save(path, quality=quality)


class ContentAwareNarrower:
    """Narrow images from paths, arrays or PIL images with seam carving."""

    def __init__(
        self,
        energy_function: Optional[EnergyFunction] = None,
        strategy: Union[str, CostTableStrategy] = "incremental",
    ):
        """Initialize narrower.

        Args:
            energy_function: Energy function for content importance
            strategy: Cost table update strategy, 'incremental' or 'full'
        """
        self.seam_carver = SeamCarver(energy_function=energy_function, strategy=strategy)

    @property
    def energy_function(self) -> EnergyFunction:
        return self.seam_carver.energy_function

    def narrow(
        self,
        image: ImageSource,
        target_width: Optional[int] = None,
        scale: Optional[float] = None,
        seams: Optional[int] = None,
        show_progress: bool = True,
    ) -> NarrowResult:
        """Narrow an image.

        Exactly one of ``target_width``, ``scale`` and ``seams`` may be given;
        with none of them the image is returned unchanged.

        Args:
            image: Input image (path, array, or PIL Image)
            target_width: Width of the result in pixels
            scale: Width scale factor (0.5 = half width)
            seams: Number of seams to remove
            show_progress: Show progress bar

        Returns:
            NarrowResult with the narrowed image and metadata
        """
        given = [v for v in (target_width, scale, seams) if v is not None]
        if len(given) > 1:
            raise ValueError("Specify only one of target_width, scale or seams")

        img = self._load_image(image)
        h, w = img.shape[:2]

        if seams is None:
            if scale is not None:
                target_width = int(w * scale)
            seams = w - (target_width if target_width is not None else w)

        logger.info("Narrowing %dx%d image by %d seams", w, h, seams)
        result = self.seam_carver.remove_vertical_seams(img, seams, show_progress)

        return NarrowResult(
            image=result,
            original_size=(h, w),
            narrowed_size=(result.shape[0], result.shape[1]),
            strategy=self.seam_carver.strategy.name,
            metadata={
                "energy_function": type(self.energy_function).__name__,
            },
        )

    def _load_image(self, image: ImageSource) -> np.ndarray:
        """Load image from various sources."""
        if isinstance(image, (str, Path)):
            with Image.open(image) as pil_img:
                return self.seam_carver._to_numpy(pil_img)
        return self.seam_carver._to_numpy(image)

    def narrow_batch(
        self,
        images: list[ImageSource],
        **kwargs,
    ) -> list[NarrowResult]:
        """Narrow multiple images."""
        return [self.narrow(img, **kwargs) for img in images]

    def analyze_content(self, image: ImageSource) -> dict:
        """Analyze image content and return energy statistics."""
        img = self._load_image(image)
        self.seam_carver._check_layout(img)
        energy = self.energy_function.compute(PixelBuffer(img).pixels)
        normalized = self.energy_function._normalize(energy)

        return {
            "mean_energy": float(energy.mean()),
            "max_energy": float(energy.max()),
            "energy_std": float(energy.std()),
            "high_importance_ratio": float((normalized > 0.7).sum() / normalized.size),
            "low_importance_ratio": float((normalized < 0.3).sum() / normalized.size),
            "size": img.shape[:2],
        }


def narrow_image(image: ImageSource, **kwargs) -> NarrowResult:
    """Convenience function for one-off narrowing.

    Example:
        >>> result = narrow_image("photo.jpg", scale=0.75)
        >>> result.save("photo_narrow.jpg")
    """
    narrower = ContentAwareNarrower()
    return narrower.narrow(image, **kwargs)
