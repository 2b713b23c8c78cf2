#!/usr/bin/env python3
"""
Show the best ways to lay down an Okey hand.

Usage:
    python analyze_hand.py --hand "R1 R2 R3 B5 Y5 K5 J"
    python analyze_hand.py --hand "R1 R2 R3 B6 B6 F" --indicator B5 --top-k 5
    python analyze_hand.py --hand "R1 R2 R3 Y7 Y8 Y9" --rules okey --verbose

Tiles: R/Y/B/K (red, yellow, blue, black) followed by 1-13,
J for a wild tile and F for a false joker (needs --indicator).
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

sys.path.insert(0, str(Path(__file__).parent))

from okey_optimizer.errors import OkeyOptimizerError
from okey_optimizer.indicator import IndicatorSystem
from okey_optimizer.melds import Partition
from okey_optimizer.optimizer import PartitionOptimizer
from okey_optimizer.rules import RULE_PRESETS
from okey_optimizer.tiles import Tile, TileSet
from okey_optimizer.validation import check_hand_size

logger = logging.getLogger(__name__)


def print_partitions(hand: List[Tile], partitions: List[Partition]) -> None:
    """Print ranked partitions, one meld per line."""
    print("=" * 60)
    tiles = TileSet(hand)
    print(f"Hand ({len(tiles)} tiles, {tiles.wild_count} wild): {tiles}")
    print("=" * 60)

    for rank, partition in enumerate(partitions, start=1):
        print(f"\n#{rank}  Score: {partition.score}  Leftover: {partition.leftover}")
        if not partition.melds:
            print("  No melds can be formed")
        for meld in partition.melds:
            print(f"  {meld}")
        if partition.unused_tiles:
            unused = " ".join(str(t) for t in partition.unused_tiles)
            print(f"  Unused: {unused}")


def main():
    parser = argparse.ArgumentParser(description="Find the best melds for an Okey hand")
    parser.add_argument("--hand", type=str, required=True,
                        help='Tiles separated by spaces, e.g. "R1 R2 R3 J"')
    parser.add_argument("--indicator", type=str, default=None,
                        help="Face-up indicator tile, e.g. B5 (okey is then B6)")
    parser.add_argument("--top-k", type=int, default=None,
                        help="Number of alternatives to show")
    parser.add_argument("--rules", type=str, default="okey101",
                        choices=sorted(RULE_PRESETS), help="Rule set")
    parser.add_argument("--verbose", action="store_true")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    rules = RULE_PRESETS[args.rules]

    try:
        hand = list(TileSet.from_string(args.hand))
        indicator = None
        if args.indicator:
            indicator = IndicatorSystem(Tile.from_string(args.indicator), rules)
            hand = indicator.resolve_hand(hand)
            print(indicator)

        check_hand_size(hand, rules)
        optimizer = PartitionOptimizer(rules, indicator)
        partitions = optimizer.optimize(hand, args.top_k)
    except (OkeyOptimizerError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    print_partitions(hand, partitions)


if __name__ == "__main__":
    main()
