"""Incremental Carve: content-aware image narrowing with incremental seam carving."""

from incremental_carve.cost_table import (
    CostTable,
    CostTableStrategy,
    FullRebuild,
    IncrementalBand,
    get_strategy,
)
from incremental_carve.energy import (
    EnergyField,
    EnergyFunction,
    GradientEnergyFunction,
    luminance,
    pixel_energy,
)
from incremental_carve.narrower import ContentAwareNarrower, NarrowResult, narrow_image
from incremental_carve.seam_carving import (
    CarveError,
    DegenerateImageError,
    InvalidSeamCountError,
    SeamCarver,
    remove_vertical_seams,
    trace_minimal_seam,
)

__version__ = "0.1.0"
__all__ = [
    "CarveError",
    "ContentAwareNarrower",
    "CostTable",
    "CostTableStrategy",
    "DegenerateImageError",
    "EnergyField",
    "EnergyFunction",
    "FullRebuild",
    "GradientEnergyFunction",
    "IncrementalBand",
    "InvalidSeamCountError",
    "NarrowResult",
    "SeamCarver",
    "get_strategy",
    "luminance",
    "narrow_image",
    "pixel_energy",
    "remove_vertical_seams",
    "trace_minimal_seam",
]
