#!/usr/bin/env python3
"""
Benchmark for the Okey hand optimizer

Runs the optimizer on predefined hands, checks the best score and
leftover count against known answers and reports how long each took.

Scenarios tested:
1. Basic melds - single runs and groups
2. Wild tiles - filling groups and extending runs
3. Conflicts - tiles that could go into more than one meld
4. Full hands - 101 Okey sized hands

Usage:
    python benchmark.py
    python benchmark.py --top-k 5 --verbose
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Dict, Optional
from dataclasses import dataclass

sys.path.insert(0, str(Path(__file__).parent))

from okey_optimizer.optimizer import PartitionOptimizer
from okey_optimizer.rules import OKEY_101_RULES
from okey_optimizer.tiles import TileSet


@dataclass
class BenchmarkCase:
    """A benchmark hand."""
    name: str
    description: str
    hand: str  # Tile notation, e.g. "R1 R2 R3 J"
    expected_score: Optional[int]  # None = not checked
    expected_leftover: Optional[int]  # None = not checked
    situation: str  # "basic", "wild", "conflict", "full"


BENCHMARK_CASES = [
    # =========================================
    # BASIC MELDS
    # =========================================
    BenchmarkCase(
        name="Single run",
        description="Three consecutive reds form one run.",
        hand="R1 R2 R3",
        expected_score=6,
        expected_leftover=0,
        situation="basic",
    ),
    BenchmarkCase(
        name="Single group",
        description="Three fives of different colors form one group.",
        hand="R5 B5 K5",
        expected_score=15,
        expected_leftover=0,
        situation="basic",
    ),
    BenchmarkCase(
        name="Nothing to meld",
        description="Unrelated tiles stay in hand.",
        hand="R1 B7",
        expected_score=0,
        expected_leftover=2,
        situation="basic",
    ),
    BenchmarkCase(
        name="Long run",
        description="Six consecutive reds are worth more as one run.",
        hand="R1 R2 R3 R4 R5 R6",
        expected_score=21,
        expected_leftover=0,
        situation="basic",
    ),
    BenchmarkCase(
        name="Four color group",
        description="All four tens form a single group of four.",
        hand="R10 Y10 B10 K10",
        expected_score=40,
        expected_leftover=0,
        situation="basic",
    ),

    # =========================================
    # WILD TILES
    # =========================================
    BenchmarkCase(
        name="Wild completes group",
        description="A wild tile stands in for the third color.",
        hand="R5 B5 J",
        expected_score=15,
        expected_leftover=0,
        situation="wild",
    ),
    BenchmarkCase(
        name="Wild extends run downwards",
        description="Runs stop at 13, so the wild becomes R10.",
        hand="R11 R12 R13 J",
        expected_score=46,
        expected_leftover=0,
        situation="wild",
    ),
    BenchmarkCase(
        name="Two wilds on a high tile",
        description="Both wilds go with K13 rather than padding low melds.",
        hand="R1 R2 R3 Y5 B5 K5 K13 J J",
        expected_score=60,
        expected_leftover=0,
        situation="wild",
    ),

    # =========================================
    # CONFLICTS
    # =========================================
    BenchmarkCase(
        name="Run beats group",
        description="R7 fits a run or a group; the run scores more.",
        hand="R7 R8 R9 Y7 B7",
        expected_score=24,
        expected_leftover=2,
        situation="conflict",
    ),
    BenchmarkCase(
        name="Duplicate copies",
        description="Two copies of each red number make two runs.",
        hand="R4 R4 R5 R5 R6 R6",
        expected_score=30,
        expected_leftover=0,
        situation="conflict",
    ),

    # =========================================
    # FULL HANDS
    # =========================================
    BenchmarkCase(
        name="Full 101 hand",
        description="21 tiles with two wilds.",
        hand="R1 R2 R3 R4 R5 Y5 B5 K5 Y9 Y10 Y11 B9 K9 B12 B13 K1 K2 K3 R12 J J",
        expected_score=132,
        expected_leftover=None,
        situation="full",
    ),
    BenchmarkCase(
        name="Full 101 hand, no wilds",
        description="21 tiles, many overlapping groups and runs.",
        hand="R7 Y7 B7 K7 R8 Y8 B8 K8 R9 Y9 B9 K9 R10 Y10 B10 R11 Y11 B11 K1 K2 K3",
        expected_score=165,
        expected_leftover=0,
        situation="full",
    ),
    BenchmarkCase(
        name="Dense 101 hand, two wilds",
        description="Both wilds run a color up to 13; K1 stays in hand.",
        hand="R7 Y7 B7 K7 R8 Y8 B8 K8 R9 Y9 B9 K9 R10 Y10 B10 R11 Y11 B11 K1 J J",
        expected_score=184,
        expected_leftover=1,
        situation="full",
    ),
]


class BenchmarkRunner:
    """Runs benchmark cases against the optimizer."""

    def __init__(self, top_k: int = 3):
        self.optimizer = PartitionOptimizer(OKEY_101_RULES)
        self.top_k = top_k
        self.results: List[Dict] = []

    def run_case(self, case: BenchmarkCase) -> Dict:
        """Run a single benchmark case."""
        hand = list(TileSet.from_string(case.hand))

        start = time.perf_counter()
        partitions = self.optimizer.optimize(hand, self.top_k)
        elapsed = time.perf_counter() - start

        best = partitions[0]
        passed = True
        if case.expected_score is not None and best.score != case.expected_score:
            passed = False
        if case.expected_leftover is not None and best.leftover != case.expected_leftover:
            passed = False

        result = {
            "name": case.name,
            "situation": case.situation,
            "score": best.score,
            "leftover": best.leftover,
            "alternatives": len(partitions),
            "seconds": elapsed,
            "passed": passed,
            "status": "✓ PASS" if passed else "✗ FAIL",
            "best": best,
        }

        self.results.append(result)
        return result

    def run_all(self) -> bool:
        """Run all benchmark cases."""
        print("\n" + "=" * 70)
        print("🀄 OKEY OPTIMIZER BENCHMARK")
        print("=" * 70 + "\n")

        for case in BENCHMARK_CASES:
            result = self.run_case(case)

            print(f"{result['status']} {case.name}")
            print(f"   Hand:     {case.hand}")
            print(f"   Best:     score {result['score']}, leftover {result['leftover']}")
            if case.expected_score is not None:
                print(f"   Expected: score {case.expected_score}, leftover {case.expected_leftover}")
            print(f"   Melds:    {' '.join(str(m) for m in result['best'].melds) or 'None'}")
            print(f"   Time:     {result['seconds'] * 1000:.1f} ms ({result['alternatives']} alternatives)")
            print(f"   {case.description}")
            print()

        passed = sum(1 for r in self.results if r["passed"])
        total_time = sum(r["seconds"] for r in self.results)

        print("=" * 70)
        print("SUMMARY")
        print("=" * 70)
        print(f"Total cases: {len(self.results)}")
        print(f"Passed: {passed}")
        print(f"Failed: {len(self.results) - passed}")
        print(f"Total time: {total_time:.2f} s")
        print("=" * 70)

        print("\nBy Situation:")
        for situation in ["basic", "wild", "conflict", "full"]:
            sit_results = [r for r in self.results if r["situation"] == situation]
            if sit_results:
                sit_time = sum(r["seconds"] for r in sit_results)
                sit_passed = sum(1 for r in sit_results if r["passed"])
                print(f"  {situation}: {sit_passed}/{len(sit_results)} passed, {sit_time * 1000:.1f} ms")

        return passed == len(self.results)


def main():
    parser = argparse.ArgumentParser(description="Benchmark the Okey hand optimizer")
    parser.add_argument("--top-k", type=int, default=3, help="Alternatives per hand")
    parser.add_argument("--verbose", action="store_true")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    runner = BenchmarkRunner(top_k=args.top_k)
    all_passed = runner.run_all()

    if all_passed:
        print("\n✓ All benchmark cases passed!")
        sys.exit(0)
    else:
        print("\n✗ Some benchmark cases failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
