#!/usr/bin/env python3
"""Example: Narrow a photo while preserving its salient content."""

import sys
import time
from pathlib import Path

import numpy as np

# Add library to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from incremental_carve import ContentAwareNarrower, SeamCarver


def make_scene(height: int = 120, width: int = 200) -> np.ndarray:
    """Synthetic scene: sky gradient, textured ground and two bright objects."""
    rng = np.random.default_rng(0)
    scene = np.zeros((height, width, 3), dtype=np.uint8)
    scene[: height // 2] = np.linspace(120, 200, height // 2, dtype=np.uint8)[:, None, None]
    scene[height // 2 :] = rng.integers(40, 90, size=(height - height // 2, width, 3))
    scene[30:90, 30:60] = [220, 40, 40]
    scene[40:100, 140:170] = [40, 40, 220]
    return scene


def main():
    scene = make_scene()

    # Example 1: Narrow by a target width
    print("Example 1: Narrow to 75% width")
    print("=" * 50)

    result = ContentAwareNarrower().narrow(scene, scale=0.75, show_progress=False)
    print(f"  Original: {result.original_size}")
    print(f"  Narrowed: {result.narrowed_size}")
    print(f"  Seams removed: {result.seams_removed}")
    print()

    # Example 2: Compare the cost table strategies
    print("Example 2: Incremental band vs full rebuild")
    print("=" * 50)

    outputs = {}
    for strategy in ("full", "incremental"):
        carver = SeamCarver(strategy=strategy)
        start = time.perf_counter()
        outputs[strategy] = carver.remove_vertical_seams(scene, 80)
        print(f"  {strategy:>11}: {time.perf_counter() - start:.2f}s")
    print(f"  Identical output: {np.array_equal(outputs['full'], outputs['incremental'])}")
    print()

    # Example 3: Save results
    print("Example 3: Save results")
    print("=" * 50)
    print("""
result = narrow_image("photo.jpg", target_width=800)
result.save("photo_narrow.jpg")

vis = SeamCarver().visualize_seams(Image.open("photo.jpg"), n_seams=50)
Image.fromarray(vis).save("photo_seams.png")
""")


if __name__ == "__main__":
    main()
