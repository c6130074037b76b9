#!/usr/bin/env python3
"""
CLI: Build one knot-field scene and (optionally) play its animation headlessly.
Nothing is written to disk; the scene parameters and a frame summary are printed.
Usage:
  python scripts/generate.py
  python scripts/generate.py --width 320 --height 240 --knots 6 --seed 7
  python scripts/generate.py --style1 spin --style2 leaf --palette Hot
  python scripts/generate.py --frames 900     # simulate 30s of animation at 30 fps
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import json
import logging
import time

from fluere.animation import AnimationSettings, ViewState
from fluere.config import load_config
from fluere.drawing import FieldStyle
from fluere.errors import FluereError
from fluere.random_utils import RandomSource
from fluere.scene import SceneBuilder, ScenePlayer

logger = logging.getLogger(__name__)


def main() -> int:
    style_names = [s.value for s in FieldStyle]
    parser = argparse.ArgumentParser(
        description="Generate a knot-field drawing and its cycling color table."
    )
    parser.add_argument("--width", type=int, default=None, help="Image width (default: from config).")
    parser.add_argument("--height", type=int, default=None, help="Image height (default: from config).")
    parser.add_argument("--knots", "-k", type=int, default=None, help="Number of knots, 1-50 (default: from config).")
    parser.add_argument("--style1", choices=style_names, default=None, help="Style for even pixels (default: random).")
    parser.add_argument("--style2", choices=style_names, default=None, help="Style for odd pixels (default: random).")
    parser.add_argument("--palette", "-p", type=str, default=None, help="Palette name (default: random per table).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="Also step the animation this many frames and report the states visited.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config YAML (default: config/default.yaml).",
    )
    parser.add_argument("--json", action="store_true", help="Print the scene summary as JSON.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    config = load_config(args.config)
    scene_cfg = config.setdefault("scene", {})
    if args.width is not None:
        scene_cfg["width"] = args.width
    if args.height is not None:
        scene_cfg["height"] = args.height
    if args.knots is not None:
        scene_cfg["num_knots"] = args.knots
    seed = args.seed if args.seed is not None else config.get("seed")

    try:
        builder = SceneBuilder.from_config(config, rng=RandomSource(seed), palette_name=args.palette)
        started = time.perf_counter()
        scene = builder.new_scene(args.style1, args.style2)
        elapsed = time.perf_counter() - started
    except (FluereError, OSError) as e:
        logger.error("%s", e)
        return 1

    summary = scene.summary()
    summary["seed"] = builder.rng.seed
    summary["seconds"] = round(elapsed, 3)
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(f"Scene: {summary['width']}x{summary['height']}, {summary['num_knots']} knots, "
              f"styles {summary['style1']}/{summary['style2']} (seed {summary['seed']})")
        print(f"Palette: {summary['palette']} ({summary['bands']} bands, "
              f"randomize={summary['randomize']}, stripes={summary['stripes']})")
        print(f"Index image: {summary['distinct_values']} distinct values, built in {elapsed:.2f}s")

    if args.frames > 0:
        player = ScenePlayer(builder, AnimationSettings.from_config(config))
        counts = {state: 0 for state in ViewState}
        for _ in range(args.frames):
            player.advance()
            counts[player.state] += 1
        print(f"Animation: {args.frames} frames, {player.animator.scenes} scenes, "
              + ", ".join(f"{s.value}={n}" for s, n in counts.items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
