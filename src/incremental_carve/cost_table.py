"""Cumulative minimum energy table and its update strategies.

``cost[y, x]`` is the cheapest total energy of any 8-connected path from the
top row down to ``(x, y)``. After a seam is removed the table can either be
rebuilt from scratch or patched inside the band the removal can influence;
both strategies leave exactly the same values behind.
"""

from abc import ABC, abstractmethod
from typing import Union

import numpy as np

from incremental_carve.energy import EnergyField


class CostTable:
    """Dynamic-programming table parallel to an energy field."""

    def __init__(self, energy: EnergyField):
        self.height = energy.height
        self.width = energy.width
        self.values = np.zeros_like(energy.values)
        self.build(energy)

    @property
    def live(self) -> np.ndarray:
        """View of the live area."""
        return self.values[:, : self.width]

    def build(self, energy: EnergyField) -> None:
        """Recompute every row from the energy field."""
        self.width = energy.width
        self.values[0, : self.width] = energy.values[0, : self.width]
        for y in range(1, self.height):
            self.relax_row(energy, y, 0, self.width - 1)

    def relax_row(self, energy: EnergyField, y: int, lo: int, hi: int) -> None:
        """Recompute columns ``lo..hi`` (inclusive) of row ``y`` from row ``y - 1``.

        At a border column only the in-range neighbours above are considered.
        """
        above = self.values[y - 1]
        best = above[lo : hi + 1].copy()

        # up-left exists for every column but the first
        start = max(lo, 1)
        if start <= hi:
            np.minimum(best[start - lo :], above[start - 1 : hi], out=best[start - lo :])

        # up-right exists for every column but the last
        stop = min(hi, self.width - 2)
        if lo <= stop:
            span = stop - lo + 1
            np.minimum(best[:span], above[lo + 1 : stop + 2], out=best[:span])

        self.values[y, lo : hi + 1] = energy.values[y, lo : hi + 1] + best

    def remove_seam(self, seam: np.ndarray) -> None:
        """Shift every row left over the seam, leaving values unrelaxed."""
        old_width = self.width
        self.width -= 1
        for y, x in enumerate(seam):
            x = int(x)
            self.values[y, x : old_width - 1] = self.values[y, x + 1 : old_width]


class CostTableStrategy(ABC):
    """How the cost table is brought up to date after a seam removal."""

    name = "abstract"

    @abstractmethod
    def update(self, table: CostTable, energy: EnergyField, seam: np.ndarray) -> None:
        """Update ``table`` after ``seam`` was removed.

        Args:
            table: Cost table still sized for the width before the removal
            energy: Energy field already shifted and patched for the removal
            seam: Column index of the removed pixel in every row
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FullRebuild(CostTableStrategy):
    """Recompute the whole table after every removal."""

    name = "full"

    def update(self, table: CostTable, energy: EnergyField, seam: np.ndarray) -> None:
        table.build(energy)


class IncrementalBand(CostTableStrategy):
    """Re-relax only the light cone below the removed seam.

    Energy changes only at the seam column and its left neighbour, so in row
    ``i`` a cost value can change only within ``[s0 - 1 - i, s0 + i]`` where
    ``s0`` is the seam's column in the top row. Everything outside the cone
    keeps its (shifted) previous value.
    """

    name = "incremental"

    def update(self, table: CostTable, energy: EnergyField, seam: np.ndarray) -> None:
        table.remove_seam(seam)
        width = table.width
        top = int(seam[0])

        lo = max(0, top - 1)
        hi = min(width - 1, top)
        table.values[0, lo : hi + 1] = energy.values[0, lo : hi + 1]

        for y in range(1, table.height):
            lo = max(0, top - 1 - y)
            hi = min(width - 1, top + y)
            table.relax_row(energy, y, lo, hi)


STRATEGIES = {
    FullRebuild.name: FullRebuild,
    IncrementalBand.name: IncrementalBand,
}


def get_strategy(strategy: Union[str, CostTableStrategy]) -> CostTableStrategy:
    """Resolve a strategy name ('incremental' or 'full') or pass an instance through."""
    if isinstance(strategy, CostTableStrategy):
        return strategy
    try:
        return STRATEGIES[strategy]()
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown cost table strategy: {strategy!r} "
            f"(expected one of {sorted(STRATEGIES)})"
        ) from None
