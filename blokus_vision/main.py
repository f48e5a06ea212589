"""
Blokus Board Colours – Main Entry Point
=======================================

Commands:

  1. **Classify** – Read a cropped, pixelated board image and print the
                    colour of every tile.
  2. **Seeds**    – Print the seed cluster centres derived from the
                    reference swatches.

Usage examples
--------------

**Classify**::

    python blokus_vision.py classify \\
        --image cropped/28.09.2022.png \\
        --rows 20 --cols 20

**Classify with custom swatches, JSON output**::

    python blokus_vision.py classify \\
        --image board.png \\
        --swatches my_swatches.json \\
        --json

**Seeds**::

    python blokus_vision.py seeds --swatches my_swatches.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from blokus_vision.errors import BoardColorError
from blokus_vision.inference.clustering import (
    DEFAULT_DELTA_THRESHOLD,
    DEFAULT_MAX_ITERATIONS,
    ClusteringConfig,
)
from blokus_vision.inference.sampling import GRID_SIZE, read_board_image
from blokus_vision.models.palette import (
    TAG_NAMES,
    TAGS,
    default_seed_centers,
    load_seed_centers,
    load_swatch_table,
    rgb_to_hex,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("blokus_vision")


def _load_seeds(args: argparse.Namespace):
    if args.swatches:
        return load_seed_centers(load_swatch_table(args.swatches))
    return default_seed_centers()


# ═══════════════════════════════════════════════════════════════════════
# Classification
# ═══════════════════════════════════════════════════════════════════════

def cmd_classify(args: argparse.Namespace) -> None:
    """Run the colour pipeline on a board image."""
    from blokus_vision.inference.pipeline import BoardColorPipeline

    image = read_board_image(args.image)

    pipeline = BoardColorPipeline(
        seeds=_load_seeds(args),
        rows=args.rows,
        cols=args.cols,
        config=ClusteringConfig(
            delta_threshold=args.threshold,
            max_iterations=args.max_iterations or None,
        ),
    )

    def progress(delta: float) -> bool:
        log.info("Color clustering delta = %s...", delta)
        return delta < args.threshold

    result = pipeline.recognize(image, progress=progress)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        for row in result.board:
            print("".join(row))


# ═══════════════════════════════════════════════════════════════════════
# Seeds
# ═══════════════════════════════════════════════════════════════════════

def cmd_seeds(args: argparse.Namespace) -> None:
    """Print the seed centres in L*a*b* and RGB."""
    seeds = _load_seeds(args)
    rgb = seeds.as_rgb()
    for tag in TAGS:
        L, a, b = seeds[tag]
        print(f"{tag} {TAG_NAMES[tag]:<7} {rgb_to_hex(rgb[tag])}  "
              f"L={L:.2f} a={a:.2f} b={b:.2f}")


# ═══════════════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blokus_vision",
        description="Detect tile colours on photographs of Blokus boards.",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", help="Available commands")

    # ── classify ──
    p_cls = sub.add_parser("classify", help="Classify the tiles of a board image")
    p_cls.add_argument("--image", required=True,
                       help="Path to the cropped, pixelated board image")
    p_cls.add_argument("--rows", type=int, default=GRID_SIZE)
    p_cls.add_argument("--cols", type=int, default=GRID_SIZE)
    p_cls.add_argument("--swatches", default=None,
                       help="JSON swatch table overriding the built-in one")
    p_cls.add_argument("--threshold", type=float, default=DEFAULT_DELTA_THRESHOLD,
                       help="Stop when the centres moved less than this")
    p_cls.add_argument("--max-iterations", type=int, default=DEFAULT_MAX_ITERATIONS,
                       help="Iteration cap (0 disables it)")
    p_cls.add_argument("--json", action="store_true",
                       help="Print a JSON document instead of plain rows")

    # ── seeds ──
    p_seed = sub.add_parser("seeds", help="Show the seed cluster centres")
    p_seed.add_argument("--swatches", default=None,
                        help="JSON swatch table overriding the built-in one")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    dispatch = {
        "classify": cmd_classify,
        "seeds": cmd_seeds,
    }

    try:
        dispatch[args.command](args)
    except BoardColorError as exc:
        log.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
