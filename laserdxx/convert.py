#!/usr/bin/env python3
"""Command-line interface for cleaning and classifying DXF cut files"""

import argparse
import logging
import sys
from pathlib import Path

from .config import ExportMode
from .exceptions import LaserDXXError
from .main import process_dxf_file
from .postprocessors.r12 import export_filename


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Heal, classify (CUT/BOARDS) and re-export DXF cut paths as R12"
    )

    parser.add_argument(
        "input",
        type=str,
        help="Input DXF file path"
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Output DXF file path (default: input name plus export suffix)"
    )

    parser.add_argument(
        "-m", "--mode",
        type=str,
        default=ExportMode.ALL.value,
        choices=[mode.value for mode in ExportMode],
        help="Geometry to export (default: ALL)"
    )

    parser.add_argument(
        "--no-frame",
        action="store_true",
        help="Disable material frame detection"
    )

    parser.add_argument(
        "--labels",
        action="store_true",
        help="Place size labels on the largest piece of each size zone"
    )

    parser.add_argument(
        "--flip",
        type=int,
        action="append",
        default=[],
        metavar="ID",
        help="Swap the layer of a contour before export (repeatable)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every pipeline stage"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file '{args.input}' not found")
        return 1

    if not input_path.suffix.lower() == '.dxf':
        print("Error: Input file must be a DXF file")
        return 1

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = input_path.with_name(export_filename(input_path.name, args.mode))

    print(f"Processing {input_path.name}...")
    print(f"Frame detection: {'disabled' if args.no_frame else 'enabled'}")
    print(f"Labels: {'enabled' if args.labels else 'disabled'}")

    try:
        result = process_dxf_file(
            dxf_path=input_path,
            output_path=output_path,
            mode=args.mode,
            preserve_frame=not args.no_frame,
            enable_labeling=args.labels,
            flip_ids=args.flip,
        )
    except LaserDXXError as e:
        print(f"\nError: {e}")
        return 1

    stats = result.stats
    print(f"Chains read: {stats.original_count}")
    print(f"After healing: {stats.healed_count}")
    print(f"Debris removed: {stats.debris_removed}")
    print(f"Consumption: {stats.material_width_yards:.2f} yd long x {stats.material_height_yards:.2f} yd wide")
    print(f"\nSuccess! DXF written to: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
