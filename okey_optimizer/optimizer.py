"""
Okey Hand Optimizer

Finds the highest scoring ways to lay a hand down as groups and runs.

The search works on hand states (colored-number counts + wild tiles left).
For each state it tries every meld the generator offers, solves what is
left, and keeps the best `top_k` partitions of that state. States are
memoized by signature, so equivalent states reached through different
meld orders are solved once.

Keeping only `top_k` partitions per state is a heuristic: a partition
ranked below the cut in some state is never seen by the states above it,
so the final list is not guaranteed to be the exact global top-k. The
best partition is always exact.
"""

import logging
from collections import defaultdict, deque
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .generator import MeldPattern, generate_melds
from .indicator import IndicatorSystem
from .melds import Meld, MeldMember, Partition
from .rules import RuleSet, OKEY_101_RULES
from .signature import StateSignature, describe_signature, state_signature
from .tiles import Tile, TileSet
from .validation import check_wild_count, validate_hand

logger = logging.getLogger(__name__)

# (score, patterns) for one partition of a state
Candidate = Tuple[int, Tuple[MeldPattern, ...]]

EMPTY_CANDIDATE: Candidate = (0, ())


def partition_key(patterns: Iterable[MeldPattern]) -> Tuple:
    """Order-independent key identifying a set of melds"""
    return tuple(sorted(p.sort_key for p in patterns))


class PartitionSearch:
    """
    Memoized partition search for a single optimization call.

    The memo lives on the instance; create a new instance per call.

    Attributes:
        top_k: Partitions kept per state
        rules: Meld size limits
        memo: Signature -> ranked partitions of that state
        states_solved: States expanded (memo misses)
        cache_hits: Memo hits
        melds_tried: Meld patterns expanded over the whole search
    """

    def __init__(self, top_k: int, rules: RuleSet = OKEY_101_RULES):
        if top_k < 1:
            raise ValueError(f"top_k must be at least 1, got {top_k}")
        self.top_k = top_k
        self.rules = rules
        self.memo: Dict[StateSignature, List[Candidate]] = {}
        self.states_solved = 0
        self.cache_hits = 0
        self.melds_tried = 0

    def search(self, counts: np.ndarray, wilds: int) -> List[Candidate]:
        """
        Rank partitions of a state.

        Args:
            counts: (4, max_number) array of colored-number copies
            wilds: Wild tiles available

        Returns:
            Up to top_k (score, patterns) pairs, best first. Never empty.
        """
        check_wild_count(wilds, self.rules)
        if (counts < 0).any():
            raise ValueError("Tile counts cannot be negative")

        ranked = self._solve(counts, wilds)

        logger.debug(
            f"Search {describe_signature(counts, wilds)}: {self.states_solved} states, "
            f"{self.cache_hits} cache hits, {self.melds_tried} melds tried"
        )
        return ranked

    def _solve(self, counts: np.ndarray, wilds: int) -> List[Candidate]:
        """Recursively find the best partitions of a state"""
        key = state_signature(counts, wilds)
        cached = self.memo.get(key)
        if cached is not None:
            self.cache_hits += 1
            return cached

        self.states_solved += 1

        # No colored numbers left: leftover wild tiles cannot form a meld
        if not counts.any():
            result = [EMPTY_CANDIDATE]
            self.memo[key] = result
            return result

        candidates: Dict[Tuple, Candidate] = {}
        for pattern in generate_melds(counts, wilds, self.rules):
            self.melds_tried += 1
            remaining = pattern.remove_from(counts)
            for sub_score, sub_patterns in self._solve(remaining, wilds - pattern.wild_count):
                patterns = (pattern,) + sub_patterns
                pkey = partition_key(patterns)
                # Same melds reached in another order
                if pkey not in candidates:
                    candidates[pkey] = (pattern.value + sub_score, patterns)

        if not candidates:
            result = [EMPTY_CANDIDATE]
        else:
            ranked = sorted(
                candidates.items(),
                key=lambda item: (-item[1][0], len(item[1][1]), item[0]),
            )
            result = [candidate for _, candidate in ranked[:self.top_k]]

        self.memo[key] = result
        return result


class PartitionOptimizer:
    """
    Entry point for hand optimization.

    Validates a resolved hand, runs a fresh PartitionSearch and binds the
    chosen melds back to the hand's physical tiles.
    """

    def __init__(
        self,
        rules: RuleSet = OKEY_101_RULES,
        indicator: Optional[IndicatorSystem] = None,
    ):
        """
        Args:
            rules: Rule set describing the tile set and meld sizes
            indicator: When given, hands are also checked against the
                copies left after the indicator is turned face up
        """
        self.rules = rules
        self.indicator = indicator

    def optimize(self, hand: Iterable[Tile], top_k: Optional[int] = None) -> List[Partition]:
        """
        Find the best partitions of a hand.

        Args:
            hand: Resolved tiles (colored numbers and wild tiles)
            top_k: Number of partitions to return (rules default if None)

        Returns:
            Up to top_k partitions, highest score first

        Raises:
            InvalidTileError: Hand contains a tile outside the physical set
            CapacityExceeded: Hand holds too many wild tiles
            ValueError: top_k is less than 1
        """
        if top_k is None:
            top_k = self.rules.default_top_k
        if top_k < 1:
            raise ValueError(f"top_k must be at least 1, got {top_k}")

        tiles = list(hand)
        num_wilds = validate_hand(tiles, self.rules, self.indicator)

        counts = TileSet(tiles).to_count_array(self.rules.max_number)
        search = PartitionSearch(top_k, self.rules)
        ranked = search.search(counts, num_wilds)

        partitions = [self._bind(tiles, score, patterns) for score, patterns in ranked]

        logger.info(
            f"Optimized {len(tiles)} tiles ({num_wilds} wild): "
            f"{len(partitions)} partitions, best score {partitions[0].score}"
        )
        return partitions

    def _bind(
        self,
        tiles: List[Tile],
        score: int,
        patterns: Tuple[MeldPattern, ...],
    ) -> Partition:
        """
        Turn a search result into a Partition of physical tiles.

        Copies of a colored number are interchangeable, so each slot takes
        the first unused copy in hand order.
        """
        concrete, wilds = TileSet(tiles).split()
        wild_pool = deque(wilds)
        by_face = defaultdict(deque)
        for tile in concrete:
            by_face[tile.face].append(tile)

        melds = []
        for pattern in patterns:
            members = []
            for slot in pattern.slots:
                if slot.wild:
                    tile = wild_pool.popleft()
                else:
                    tile = by_face[(slot.color, slot.number)].popleft()
                members.append(MeldMember(tile, slot.color, slot.number))
            melds.append(Meld(pattern.meld_type, members))

        used_ids = {t.id for meld in melds for t in meld.tiles}
        unused = [t for t in tiles if t.id not in used_ids]

        return Partition(
            melds=melds,
            score=score,
            leftover=len(tiles) - sum(m.size for m in melds),
            unused_tiles=unused,
        )


def optimize_partition(
    hand: Iterable[Tile],
    top_k: int = 3,
    rules: RuleSet = OKEY_101_RULES,
) -> List[Partition]:
    """Find the top_k partitions of a resolved hand"""
    return PartitionOptimizer(rules).optimize(hand, top_k)
