#!/usr/bin/env python3
"""CLI for content-aware image narrowing."""

import argparse
import logging
import sys
from pathlib import Path

from PIL import Image

from incremental_carve import CarveError, ContentAwareNarrower, SeamCarver


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Content-aware image narrowing by seam carving"
    )
    parser.add_argument("input", type=str, help="Input image path")
    parser.add_argument("-o", "--output", type=str, help="Output image path")
    size = parser.add_mutually_exclusive_group()
    size.add_argument("-w", "--width", type=int, help="Target width in pixels")
    size.add_argument("-n", "--seams", type=int, help="Number of seams to remove")
    size.add_argument(
        "-s", "--scale", type=float, help="Width scale factor (e.g., 0.75)"
    )
    parser.add_argument(
        "--strategy", type=str, default="incremental",
        choices=["incremental", "full"],
        help="Cost table update strategy"
    )
    parser.add_argument(
        "--visualize-energy", action="store_true",
        help="Visualize energy map"
    )
    parser.add_argument(
        "--visualize-seams", type=int, metavar="N",
        help="Visualize N seams that would be removed"
    )
    parser.add_argument(
        "--analyze", action="store_true",
        help="Analyze content and print statistics"
    )
    parser.add_argument(
        "--no-progress", action="store_true",
        help="Hide the progress bar"
    )
    parser.add_argument(
        "--log-level", type=str, default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ...)"
    )

    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    # Validate input
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    narrower = ContentAwareNarrower(strategy=args.strategy)

    try:
        # Handle visualization modes
        if args.visualize_energy or args.visualize_seams:
            carver = SeamCarver(strategy=args.strategy)
            img = Image.open(args.input)

            if args.visualize_energy:
                vis = carver.visualize_energy(img)
                output = args.output or f"{input_path.stem}_energy.png"
                Image.fromarray(vis).save(output)
                print(f"Energy map saved to: {output}")

            if args.visualize_seams:
                vis = carver.visualize_seams(img, n_seams=args.visualize_seams)
                output = args.output or f"{input_path.stem}_seams.png"
                Image.fromarray(vis).save(output)
                print(f"Seam visualization saved to: {output}")

            return

        # Handle analysis mode
        if args.analyze:
            stats = narrower.analyze_content(args.input)
            print(f"Content Analysis for: {args.input}")
            print(f"  Image size: {stats['size']}")
            print(f"  Mean energy: {stats['mean_energy']:.3f}")
            print(f"  Max energy: {stats['max_energy']:.3f}")
            print(f"  Energy std: {stats['energy_std']:.3f}")
            print(f"  High importance pixels: {stats['high_importance_ratio']:.1%}")
            print(f"  Low importance pixels: {stats['low_importance_ratio']:.1%}")
            return

        # Narrowing mode
        if args.width is None and args.seams is None and args.scale is None:
            print(
                "Error: Please specify --width, --seams or --scale, "
                "or use --visualize-energy/--visualize-seams/--analyze",
                file=sys.stderr,
            )
            sys.exit(1)

        result = narrower.narrow(
            args.input,
            target_width=args.width,
            scale=args.scale,
            seams=args.seams,
            show_progress=not args.no_progress,
        )
    except CarveError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Save result
    output_path = args.output or f"{input_path.stem}_narrow.png"
    result.save(output_path)

    print(f"Narrowed: {args.input}")
    print(f"  Original: {result.original_size}")
    print(f"  Narrowed: {result.narrowed_size}")
    print(f"  Seams removed: {result.seams_removed}")
    print(f"  Strategy: {result.strategy}")
    print(f"  Saved to: {output_path}")


if __name__ == "__main__":
    main()
