"""Seam carving implementation for content-aware image narrowing.

Based on "Seam Carving for Content-Aware Image Resizing" by Avidan & Shamir (2007).
Vertical seams are removed one at a time; after each removal only a narrow
band of the energy field is recomputed and the cost table is either rebuilt
or patched inside the light cone below the seam (see ``cost_table``).
"""

import logging
from typing import Optional, Union

import numpy as np
from PIL import Image
from tqdm import tqdm

from incremental_carve.cost_table import CostTable, CostTableStrategy, get_strategy
from incremental_carve.energy import EnergyField, EnergyFunction, GradientEnergyFunction

logger = logging.getLogger(__name__)

ImageLike = Union[np.ndarray, Image.Image]


class CarveError(ValueError):
    """Base class for rejected carve requests."""


class InvalidSeamCountError(CarveError):
    """Seam count is negative, not an integer, or leaves no column behind."""


class DegenerateImageError(CarveError):
    """Image has zero width or zero height."""


def trace_minimal_seam(cost: np.ndarray, width: int, height: int) -> np.ndarray:
    """Find the cheapest vertical seam in a cost table.

    The seam ends at the leftmost minimum of the bottom row and is traced
    upwards. At every step straight up wins ties, then up-left, then
    up-right: a diagonal is only taken when strictly cheaper.

    Args:
        cost: Cost table, only the first ``width`` columns are read
        width: Live width
        height: Number of rows

    Returns:
        Column index per row, shape (height,)
    """
    seam = np.empty(height, dtype=np.intp)
    col = int(np.argmin(cost[height - 1, :width]))
    seam[height - 1] = col

    for y in range(height - 2, -1, -1):
        above = cost[y]
        best_col = col
        best = above[col]
        if col > 0 and above[col - 1] < best:
            best_col = col - 1
            best = above[col - 1]
        if col < width - 1 and above[col + 1] < best:
            best_col = col + 1
        col = best_col
        seam[y] = col

    return seam


class PixelBuffer:
    """Mutable float64 copy of an image with a shrinking live width.

    Grayscale input is expanded to three equal channels while carving and
    collapsed again on the way out. ``origin`` records the column each live
    pixel had in the input image.
    """

    def __init__(self, image: np.ndarray):
        self.grayscale = image.ndim == 2
        self.dtype = image.dtype
        if self.grayscale:
            image = np.repeat(image[:, :, np.newaxis], 3, axis=2)
        self.pixels = image.astype(np.float64)
        self.height, self.width = self.pixels.shape[:2]
        self.origin = np.tile(np.arange(self.width), (self.height, 1))

    def remove_seam(self, seam: np.ndarray) -> None:
        """Shift the pixels right of the seam one column left, row by row."""
        old_width = self.width
        self.width -= 1
        for y, x in enumerate(seam):
            x = int(x)
            self.pixels[y, x : old_width - 1] = self.pixels[y, x + 1 : old_width]
            self.origin[y, x : old_width - 1] = self.origin[y, x + 1 : old_width]

    def to_array(self) -> np.ndarray:
        """New array holding the live area in the input's dtype and layout."""
        live = self.pixels[:, : self.width]
        if self.grayscale:
            live = live[:, :, 0]
        return live.astype(self.dtype)


class CarveSession:
    """Pixel buffer, energy field and cost table for a single carve."""

    def __init__(
        self,
        image: np.ndarray,
        energy_function: Optional[EnergyFunction] = None,
        strategy: Union[str, CostTableStrategy] = "incremental",
    ):
        self.buffer = PixelBuffer(image)
        self.energy = EnergyField(self.buffer.pixels, energy_function=energy_function)
        self.cost = CostTable(self.energy)
        self.strategy = get_strategy(strategy)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    def trace(self) -> np.ndarray:
        return trace_minimal_seam(self.cost.values, self.buffer.width, self.buffer.height)

    def remove_seam(self, seam: np.ndarray) -> np.ndarray:
        """Remove a traced seam and bring energy and cost up to date.

        Returns:
            Columns of the removed pixels in input-image coordinates
        """
        removed = self.buffer.origin[np.arange(self.height), seam].copy()
        self.buffer.remove_seam(seam)
        # Energy must be refreshed against the already shifted pixels
        self.energy.remove_seam(seam, self.buffer.pixels)
        self.strategy.update(self.cost, self.energy, seam)
        return removed

    def step(self) -> np.ndarray:
        """Trace and remove one seam, returning it in current coordinates."""
        seam = self.trace()
        self.remove_seam(seam)
        return seam


class SeamCarver:
    """Content-aware image narrowing using seam carving.

    Seam carving removes connected top-to-bottom paths of pixels with the
    lowest energy, preserving important content while the image shrinks.
    """

    def __init__(
        self,
        energy_function: Optional[EnergyFunction] = None,
        strategy: Union[str, CostTableStrategy] = "incremental",
    ):
        """Initialize seam carver.

        Args:
            energy_function: Energy function for pixel importance (default: gradient)
            strategy: Cost table update strategy, 'incremental' or 'full'
        """
        self.energy_function = energy_function or GradientEnergyFunction()
        self.strategy = get_strategy(strategy)

    def remove_vertical_seams(
        self,
        image: ImageLike,
        seams_to_remove: int,
        show_progress: bool = False,
    ) -> np.ndarray:
        """Remove ``seams_to_remove`` vertical seams.

        The input is never modified. Invalid requests are rejected before
        any work is done.

        Returns:
            New array of width ``width - seams_to_remove`` and the input dtype
        """
        img = self._prepare(image, seams_to_remove)
        h, w = img.shape[:2]
        logger.debug(
            "Carving %d seams from %dx%d image (%s)", seams_to_remove, w, h, self.strategy.name
        )

        session = CarveSession(img, self.energy_function, self.strategy)
        iterator = (
            tqdm(range(seams_to_remove), desc="Removing vertical seams")
            if show_progress
            else range(seams_to_remove)
        )
        for _ in iterator:
            session.step()

        logger.debug("Carved image to %dx%d", session.width, session.height)
        return session.buffer.to_array()

    def find_vertical_seams(self, image: ImageLike, n_seams: int) -> list[np.ndarray]:
        """Seams that would be removed, each in the coordinates of its own step."""
        img = self._prepare(image, n_seams)
        session = CarveSession(img, self.energy_function, self.strategy)
        return [session.step() for _ in range(n_seams)]

    def resize(
        self,
        image: ImageLike,
        target_width: Optional[int] = None,
        scale_width: Optional[float] = None,
        show_progress: bool = True,
    ) -> np.ndarray:
        """Narrow an image to a target width.

        Args:
            image: Input image
            target_width: Target width in pixels
            scale_width: Scale factor for width (alternative to target_width)
            show_progress: Show progress bar

        Returns:
            Narrowed image as numpy array
        """
        img = self._to_numpy(image)
        w = img.shape[1]

        if target_width is None and scale_width is not None:
            target_width = int(w * scale_width)
        if target_width is None:
            target_width = w

        return self.remove_vertical_seams(img, w - target_width, show_progress)

    def visualize_energy(self, image: ImageLike) -> np.ndarray:
        """Visualize energy map for debugging."""
        img = self._to_numpy(image)
        self._check_layout(img)
        buffer = PixelBuffer(img)
        energy = self.energy_function.compute(buffer.pixels)

        # Colorize energy map
        from matplotlib import colormaps

        cmap = colormaps.get_cmap("hot")
        colored = cmap(self.energy_function._normalize(energy))[:, :, :3]

        return (colored * 255).astype(np.uint8)

    def visualize_seams(self, image: ImageLike, n_seams: int = 10) -> np.ndarray:
        """Visualize which pixels would be removed.

        Returns RGB image with removed pixels highlighted in red.
        """
        img = self._prepare(image, n_seams)
        result = _to_rgb_uint8(img)

        session = CarveSession(img, self.energy_function, self.strategy)
        rows = np.arange(session.height)
        for _ in range(n_seams):
            removed = session.remove_seam(session.trace())
            result[rows, removed] = [255, 0, 0]

        return result

    def _to_numpy(self, image: ImageLike) -> np.ndarray:
        """Convert image to numpy array."""
        if isinstance(image, Image.Image):
            if image.mode not in ("RGB", "RGBA", "L"):
                image = image.convert("RGBA")
            return np.array(image)
        if isinstance(image, np.ndarray):
            return image
        raise ValueError(f"Unsupported image type: {type(image)}")

    def _check_layout(self, img: np.ndarray) -> None:
        if img.ndim not in (2, 3) or (img.ndim == 3 and img.shape[2] not in (3, 4)):
            raise ValueError(
                f"Expected an (H, W), (H, W, 3) or (H, W, 4) image, got shape {img.shape}"
            )
        h, w = img.shape[:2]
        if h == 0 or w == 0:
            raise DegenerateImageError(f"Image has no pixels: {w}x{h}")

    def _prepare(self, image: ImageLike, seams_to_remove: int) -> np.ndarray:
        """Convert and validate the input before anything is copied or mutated."""
        img = self._to_numpy(image)
        self._check_layout(img)
        validate_seam_count(seams_to_remove, img.shape[1])
        return img


def validate_seam_count(seams_to_remove: int, width: int) -> None:
    """Reject seam counts that are not integers in ``[0, width)``."""
    if isinstance(seams_to_remove, bool) or not isinstance(
        seams_to_remove, (int, np.integer)
    ):
        raise InvalidSeamCountError(
            f"Seam count must be an integer, got {seams_to_remove!r}"
        )
    if seams_to_remove < 0:
        raise InvalidSeamCountError(
            f"Seam count must not be negative, got {seams_to_remove}"
        )
    if seams_to_remove >= width:
        raise InvalidSeamCountError(
            f"Cannot remove {seams_to_remove} seams from an image {width} pixels wide"
        )


def _to_rgb_uint8(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        img = np.repeat(img[:, :, np.newaxis], 3, axis=2)
    rgb = img[:, :, :3]
    if rgb.dtype != np.uint8:
        if rgb.size and rgb.max() <= 1.0:
            rgb = rgb * 255
        rgb = np.clip(rgb, 0, 255)
    return rgb.astype(np.uint8)


def remove_vertical_seams(
    image: ImageLike,
    seams_to_remove: int,
    strategy: Union[str, CostTableStrategy] = "incremental",
) -> np.ndarray:
    """Convenience function for one-off narrowing.

    Example:
        >>> narrowed = remove_vertical_seams(pixels, 64)
        >>> narrowed.shape[1] == pixels.shape[1] - 64
        True
    """
    return SeamCarver(strategy=strategy).remove_vertical_seams(image, seams_to_remove)
