#!/usr/bin/env python3
"""
CLI: validate a palette file and list its palettes.
Usage:
  python scripts/palettes.py                      # bundled palettes
  python scripts/palettes.py my_palettes.txt
  python scripts/palettes.py my_palettes.txt --table Hot --stripes
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import logging

from fluere.errors import FluereError
from fluere.palettes import build_color_table, load_default_palettes, load_palette_file, rgb_to_hex
from fluere.random_utils import RandomSource

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate and list a palette file.")
    parser.add_argument("path", type=Path, nargs="?", default=None, help="Palette file (default: bundled).")
    parser.add_argument("--table", type=str, default=None, help="Also print the band colors of this palette's table.")
    parser.add_argument("--randomize", action="store_true", help="Randomized band count and colors.")
    parser.add_argument("--stripes", action="store_true", help="Alternate bands with black.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for --randomize.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        store = load_palette_file(args.path) if args.path else load_default_palettes()
    except (FluereError, OSError) as e:
        logger.error("%s", e)
        return 1

    print(f"{len(store)} palettes")
    for i, p in enumerate(store):
        print(f"  {i:2d} {p.name:<20} {len(p)} colors: {' '.join(rgb_to_hex(c) for c in p.colors)}")

    if args.table:
        palette = store.get(args.table)
        if palette is None:
            logger.error("No palette named %r", args.table)
            return 1
        table = build_color_table(
            palette, randomize=args.randomize, stripes=args.stripes, rng=RandomSource(args.seed)
        )
        print(f"Table for {palette.name}: {table.band_count} bands")
        for band, color in enumerate(table.bands):
            print(f"  band {band:2d} starts at {band * 256 // table.band_count:3d}: {rgb_to_hex(color)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
