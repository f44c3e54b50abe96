"""Energy functions for seam carving.

The energy of a pixel is the L1 magnitude of a Sobel-style luminance gradient
over its 8 neighbours. Neighbours outside the live image area read as
transparent black (luminance 0), which raises the energy along the borders.

Every function here works on float64 pixel arrays so that the vectorized
whole-field computation and the per-pixel computation used for incremental
updates produce identical values.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

# Rec. 709 luma coefficients
RED_WEIGHT = 0.2126
GREEN_WEIGHT = 0.7152
BLUE_WEIGHT = 0.0722


def luminance(
    pixels: np.ndarray, x: int, y: int, width: Optional[int] = None
) -> float:
    """Luminance of the pixel at ``(x, y)``, or 0.0 outside the live area.

    Args:
        pixels: Pixel array (H, W, C) with at least 3 colour channels
        x: Column index, may be one pixel outside the image
        y: Row index, may be one pixel outside the image
        width: Live width of the image (defaults to the array width)
    """
    if width is None:
        width = pixels.shape[1]
    if x < 0 or y < 0 or x >= width or y >= pixels.shape[0]:
        return 0.0
    pixel = pixels[y, x]
    return (
        RED_WEIGHT * float(pixel[0])
        + GREEN_WEIGHT * float(pixel[1])
        + BLUE_WEIGHT * float(pixel[2])
    )


def luminance_map(pixels: np.ndarray, width: Optional[int] = None) -> np.ndarray:
    """Luminance of every pixel in the live area as a (H, width) array."""
    if width is None:
        width = pixels.shape[1]
    live = pixels[:, :width].astype(np.float64, copy=False)
    return (
        RED_WEIGHT * live[:, :, 0]
        + GREEN_WEIGHT * live[:, :, 1]
        + BLUE_WEIGHT * live[:, :, 2]
    )


def pixel_energy(
    pixels: np.ndarray, x: int, y: int, width: Optional[int] = None
) -> float:
    """Gradient energy of a single pixel."""
    nw = luminance(pixels, x - 1, y - 1, width)
    n = luminance(pixels, x, y - 1, width)
    ne = luminance(pixels, x + 1, y - 1, width)
    w = luminance(pixels, x - 1, y, width)
    e = luminance(pixels, x + 1, y, width)
    sw = luminance(pixels, x - 1, y + 1, width)
    s = luminance(pixels, x, y + 1, width)
    se = luminance(pixels, x + 1, y + 1, width)

    gx = nw + w + sw - ne - e - se
    gy = nw + n + ne - sw - s - se
    return abs(gx) + abs(gy)


class EnergyFunction(ABC):
    """Abstract base class for energy functions.

    Incremental carving needs both a whole-field and a single-pixel form, and
    the two must agree exactly.
    """

    @abstractmethod
    def compute(self, pixels: np.ndarray, width: Optional[int] = None) -> np.ndarray:
        """Compute the energy map of the live area.

        Args:
            pixels: Pixel array (H, W, C) as float64
            width: Live width (defaults to the array width)

        Returns:
            Energy map (H, width), higher values marking more important pixels
        """

    @abstractmethod
    def compute_at(
        self, pixels: np.ndarray, x: int, y: int, width: Optional[int] = None
    ) -> float:
        """Compute the energy of one pixel of the live area."""

    def _normalize(self, energy: np.ndarray) -> np.ndarray:
        """Normalize energy map to [0, 1] range."""
        energy_min = energy.min()
        energy_max = energy.max()
        if energy_max > energy_min:
            return (energy - energy_min) / (energy_max - energy_min)
        return np.zeros_like(energy)


class GradientEnergyFunction(EnergyFunction):
    """Luminance gradient energy with a zero-luminance border.

    Computes ``|gx| + |gy|`` where ``gx`` and ``gy`` are Sobel-like sums of
    the 8 neighbouring luminances (unit weights on the edge neighbours).
    """

    def compute(self, pixels: np.ndarray, width: Optional[int] = None) -> np.ndarray:
        """Compute the gradient energy of every pixel at once."""
        lum = luminance_map(pixels, width)
        h, w = lum.shape

        padded = np.zeros((h + 2, w + 2), dtype=np.float64)
        padded[1:-1, 1:-1] = lum

        nw = padded[:-2, :-2]
        n = padded[:-2, 1:-1]
        ne = padded[:-2, 2:]
        west = padded[1:-1, :-2]
        east = padded[1:-1, 2:]
        sw = padded[2:, :-2]
        s = padded[2:, 1:-1]
        se = padded[2:, 2:]

        # Same operand order as pixel_energy so results match bit for bit
        gx = nw + west + sw - ne - east - se
        gy = nw + n + ne - sw - s - se
        return np.abs(gx) + np.abs(gy)

    def compute_at(
        self, pixels: np.ndarray, x: int, y: int, width: Optional[int] = None
    ) -> float:
        return pixel_energy(pixels, x, y, width)


class EnergyField:
    """Dense energy grid kept parallel to a shrinking pixel buffer.

    The backing array keeps its original width; ``width`` is the live width
    and nothing at or beyond it is read.
    """

    def __init__(self, pixels: np.ndarray, width: Optional[int] = None,
                 energy_function: Optional[EnergyFunction] = None):
        self.energy_function = energy_function or GradientEnergyFunction()
        self.height = pixels.shape[0]
        self.width = pixels.shape[1] if width is None else width
        self.values = np.zeros(pixels.shape[:2], dtype=np.float64)
        self.values[:, : self.width] = self.energy_function.compute(pixels, self.width)

    @property
    def live(self) -> np.ndarray:
        """View of the live area."""
        return self.values[:, : self.width]

    def remove_seam(self, seam: np.ndarray, pixels: np.ndarray) -> None:
        """Drop a seam and refresh the energy next to it.

        ``pixels`` must already have the seam removed. Only the new pixel at
        the seam column and its left neighbour are recomputed in each row.
        """
        old_width = self.width
        self.width -= 1

        for y, x in enumerate(seam):
            x = int(x)
            self.values[y, x : old_width - 1] = self.values[y, x + 1 : old_width]

        for y, x in enumerate(seam):
            x = int(x)
            if x < self.width:
                self.values[y, x] = self.energy_function.compute_at(pixels, x, y, self.width)
            if x > 0:
                self.values[y, x - 1] = self.energy_function.compute_at(
                    pixels, x - 1, y, self.width
                )
