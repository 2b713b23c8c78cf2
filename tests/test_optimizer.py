"""
Tests for the meld generator, state signatures and partition search
"""

import random

import pytest
import numpy as np
from typing import List, Optional

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from okey_optimizer.tiles import (
    Tile, TileSet, TileColor, red, yellow, blue, black, wild, false_joker,
)
from okey_optimizer.melds import Meld, MeldMember, MeldType, Partition
from okey_optimizer.generator import MeldPattern, MeldSlot, generate_melds
from okey_optimizer.signature import state_signature, describe_signature
from okey_optimizer.optimizer import (
    PartitionOptimizer, PartitionSearch, optimize_partition, partition_key,
)
from okey_optimizer.indicator import IndicatorSystem
from okey_optimizer.rules import OKEY_101_RULES
from okey_optimizer.errors import InvalidTileError, CapacityExceeded
from okey_optimizer.validation import check_hand_size


def counts_of(text: str) -> np.ndarray:
    return TileSet.from_string(text).to_count_array()


def random_hands(num_hands: int, hand_size: int, seed: int = 7, okeys: Optional[int] = None):
    """
    Resolved hands dealt from a full set, indicator R5.

    With okeys set, every hand holds exactly that many R6 tiles (wild once
    resolved); otherwise the deal decides.
    """
    rng = random.Random(seed)
    indicator_tile = red(5)
    indicator = IndicatorSystem(indicator_tile)
    pool = [t for t in TileSet.create_full_set() if t.id != indicator_tile.id]
    okey_tiles = [t for t in pool if indicator.is_wild_role(t)]
    others = [t for t in pool if not indicator.is_wild_role(t)]
    for _ in range(num_hands):
        if okeys is None:
            dealt = rng.sample(pool, hand_size)
        else:
            dealt = rng.sample(okey_tiles, okeys) + rng.sample(others, hand_size - okeys)
            rng.shuffle(dealt)
        yield indicator, indicator.resolve_hand(dealt)


def assert_valid_partition(partition: Partition, hand: List[Tile]):
    """Structural checks that hold for every returned partition"""
    hand_ids = {t.id for t in hand}
    used_ids = [t.id for meld in partition.melds for t in meld.tiles]

    assert len(used_ids) == len(set(used_ids)), "tile used twice"
    assert set(used_ids) <= hand_ids, "tile not in hand"
    assert partition.tile_count <= len(hand)
    assert partition.leftover == len(hand) - partition.tile_count
    assert partition.wild_count <= sum(1 for t in hand if t.is_wild)
    assert partition.score == sum(m.value for m in partition.melds)
    assert len(partition.unused_tiles) == partition.leftover

    for meld in partition.melds:
        if meld.meld_type == MeldType.GROUP:
            assert meld.size in (3, 4)
            assert len({m.number for m in meld.members}) == 1
            concrete_colors = [t.color for t in meld.concrete_tiles]
            assert len(concrete_colors) == len(set(concrete_colors))
        else:
            numbers = [m.number for m in meld.members]
            assert len(numbers) >= 3
            assert numbers == list(range(numbers[0], numbers[0] + len(numbers)))
            assert len({m.color for m in meld.members}) == 1


class TestMeld:
    """Test meld records"""

    def test_group_creation(self):
        """Test creating a group with a wild tile"""
        meld = Meld(MeldType.GROUP, [
            MeldMember(red(5), TileColor.RED, 5),
            MeldMember(wild(), TileColor.YELLOW, 5),
            MeldMember(blue(5), TileColor.BLUE, 5),
        ])
        assert meld.value == 15
        assert meld.wild_count == 1
        assert meld.concrete_tiles == [red(5), blue(5)]
        assert str(meld) == "[GROUP: R5 J(Y5) B5] = 15"

    def test_invalid_group(self):
        """Groups need distinct colors and one number"""
        with pytest.raises(ValueError):
            Meld(MeldType.GROUP, [
                MeldMember(red(5), TileColor.RED, 5),
                MeldMember(red(5, 1), TileColor.RED, 5),
                MeldMember(blue(5), TileColor.BLUE, 5),
            ])
        with pytest.raises(ValueError):
            Meld(MeldType.GROUP, [
                MeldMember(red(5), TileColor.RED, 5),
                MeldMember(yellow(6), TileColor.YELLOW, 6),
                MeldMember(blue(5), TileColor.BLUE, 5),
            ])

    def test_invalid_run(self):
        """Runs need consecutive numbers"""
        with pytest.raises(ValueError):
            Meld(MeldType.RUN, [
                MeldMember(red(1), TileColor.RED, 1),
                MeldMember(red(2), TileColor.RED, 2),
                MeldMember(red(4), TileColor.RED, 4),
            ])

    def test_concrete_member_keeps_face(self):
        """A colored number cannot stand for another face"""
        members = [
            MeldMember(red(1), TileColor.RED, 1),
            MeldMember(red(2), TileColor.RED, 2),
            MeldMember(blue(9), TileColor.RED, 3),
        ]
        with pytest.raises(ValueError):
            Meld(MeldType.RUN, members)


class TestMeldGenerator:
    """Test one-step meld generation"""

    def test_single_run(self):
        """Three consecutive reds give exactly one run"""
        patterns = generate_melds(counts_of("R1 R2 R3"), 0)
        assert len(patterns) == 1
        assert patterns[0].meld_type == MeldType.RUN
        assert patterns[0].value == 6
        assert patterns[0].wild_count == 0

    def test_group_with_wild(self):
        """The wild stands for the first missing color"""
        patterns = generate_melds(counts_of("R5 B5"), 1)
        assert len(patterns) == 1

        group = patterns[0]
        assert group.meld_type == MeldType.GROUP
        assert group.value == 15
        assert group.slots == (
            MeldSlot(TileColor.RED, 5, False),
            MeldSlot(TileColor.YELLOW, 5, True),
            MeldSlot(TileColor.BLUE, 5, False),
        )

    def test_four_colors(self):
        """Four groups of three and one group of four"""
        patterns = generate_melds(counts_of("R10 Y10 B10 K10"), 0)
        sizes = sorted(p.size for p in patterns)
        assert sizes == [3, 3, 3, 3, 4]
        assert all(p.meld_type == MeldType.GROUP for p in patterns)
        assert max(p.value for p in patterns) == 40

    def test_group_color_subsets(self):
        """Smaller color subsets are tried when a wild is available"""
        patterns = generate_melds(counts_of("R7 Y7 B7"), 1)
        assert len(patterns) == 5
        assert sum(1 for p in patterns if p.size == 4) == 1
        assert sum(1 for p in patterns if p.wild_count == 1) == 4

    def test_runs_do_not_wrap(self):
        """Runs stay inside 1-13"""
        patterns = generate_melds(counts_of("R12 R13"), 1)
        assert len(patterns) == 1
        assert [s.number for s in patterns[0].slots] == [11, 12, 13]
        assert patterns[0].slots[0].wild

    def test_run_with_gap(self):
        """Wild tiles fill gaps inside a window"""
        patterns = generate_melds(counts_of("K4 K6"), 1)
        assert len(patterns) == 1
        assert str(patterns[0]) == "RUN[K4 J(K5) K6]"

    def test_run_length_bounded(self):
        """A run is no longer than the numbers present plus the wilds"""
        patterns = generate_melds(counts_of("R1 R2 R9"), 1)
        assert [str(p) for p in patterns] == ["RUN[R1 R2 J(R3)]"]

        long_runs = [p for p in generate_melds(counts_of("Y2 Y3 Y5 Y6"), 2) if p.size > 6]
        assert long_runs == []

    def test_remove_from(self):
        """Removing a pattern takes out its concrete tiles only"""
        counts = counts_of("K4 K4 K6")
        pattern = generate_melds(counts, 1)[0]
        remaining = pattern.remove_from(counts)

        assert remaining[TileColor.BLACK, 3] == 1
        assert remaining[TileColor.BLACK, 5] == 0
        assert remaining.sum() == 1
        assert counts.sum() == 3

    def test_no_melds(self):
        """Unrelated tiles give nothing"""
        assert generate_melds(counts_of("R1 B7"), 0) == []
        assert generate_melds(counts_of(""), 2) == []

    def test_generated_patterns_are_valid(self):
        """Every pattern fits the state it came from"""
        rng = np.random.default_rng(3)
        for _ in range(20):
            counts = rng.integers(0, 3, size=(4, 13)).astype(np.int8)
            counts[rng.random((4, 13)) < 0.6] = 0
            wilds = int(rng.integers(0, 3))

            for p in generate_melds(counts, wilds):
                assert p.wild_count <= wilds
                assert len(p.concrete_slots) >= 1
                assert (p.remove_from(counts) >= 0).all()
                assert p.value == sum(s.number for s in p.slots)
                if p.meld_type == MeldType.GROUP:
                    assert p.size in (3, 4)
                    assert len({s.number for s in p.slots}) == 1
                    assert len({s.color for s in p.slots}) == p.size
                else:
                    numbers = [s.number for s in p.slots]
                    assert numbers == list(range(numbers[0], numbers[0] + p.size))
                    assert 1 <= numbers[0] and numbers[-1] <= 13

    def test_deterministic(self):
        """Same state, same patterns in the same order"""
        counts = counts_of("R1 R2 R3 Y3 B3 K3 R4")
        assert generate_melds(counts, 2) == generate_melds(counts.copy(), 2)


class TestSignature:
    """Test state signatures"""

    def test_order_independent(self):
        """Input order does not change the signature"""
        a = counts_of("R1 B5 B5 K13")
        b = counts_of("K13 B5 R1 B5")
        assert state_signature(a, 1) == state_signature(b, 1)

    def test_identity_independent(self):
        """Which copy is held does not matter"""
        a = TileSet([red(1, 0)]).to_count_array()
        b = TileSet([red(1, 1)]).to_count_array()
        assert state_signature(a, 0) == state_signature(b, 0)

    def test_wilds_distinguish(self):
        """Wild count is part of the signature"""
        counts = counts_of("R1 R2")
        assert state_signature(counts, 0) != state_signature(counts, 1)

    def test_describe(self):
        """Readable form for logs"""
        assert describe_signature(counts_of("B5 R1 B5"), 1) == "R1=1|B5=2|J=1"
        assert describe_signature(counts_of(""), 0) == "J=0"


class TestPartitionOptimizer:
    """Test the partition search end to end"""

    def test_scenario_single_run(self):
        """Red 1-2-3, no wilds"""
        hand = [red(1), red(2), red(3)]
        result = optimize_partition(hand, top_k=1)

        assert len(result) == 1
        best = result[0]
        assert best.score == 6
        assert best.leftover == 0
        assert len(best.melds) == 1
        assert best.melds[0].meld_type == MeldType.RUN
        assert best.melds[0].tiles == hand

    def test_scenario_single_group(self):
        """Three fives of different colors"""
        result = optimize_partition([red(5), blue(5), black(5)], top_k=1)

        assert result[0].score == 15
        assert result[0].leftover == 0
        assert result[0].melds[0].meld_type == MeldType.GROUP

    def test_scenario_group_with_wild(self):
        """The wild fills the third color"""
        j = wild()
        result = optimize_partition([red(5), blue(5), j], top_k=1)

        best = result[0]
        assert best.score == 15
        assert best.leftover == 0
        assert len(best.melds) == 1
        meld = best.melds[0]
        assert meld.meld_type == MeldType.GROUP
        assert meld.size == 3
        assert meld.wild_count == 1
        assert j in meld.tiles

    def test_scenario_nothing_formable(self):
        """No meld: score 0, every tile left over"""
        hand = [red(1), blue(7)]
        result = optimize_partition(hand, top_k=1)

        assert len(result) == 1
        assert result[0].melds == []
        assert result[0].score == 0
        assert result[0].leftover == 2
        assert result[0].unused_tiles == hand

    def test_empty_hand(self):
        """Empty hands give the empty partition"""
        result = optimize_partition([], top_k=3)
        assert len(result) == 1
        assert result[0].score == 0
        assert result[0].leftover == 0

    def test_only_wilds(self):
        """Wild tiles alone cannot form a meld"""
        result = optimize_partition([wild(0), wild(1)])
        assert result[0].score == 0
        assert result[0].leftover == 2

    def test_run_beats_group(self):
        """R7 goes into the run"""
        hand = list(TileSet.from_string("R7 R8 R9 Y7 B7"))
        best = optimize_partition(hand, top_k=1)[0]
        assert best.score == 24
        assert best.leftover == 2

    def test_wild_extends_run(self):
        """Runs end at 13, so the wild goes below"""
        hand = list(TileSet.from_string("R11 R12 R13 J"))
        best = optimize_partition(hand, top_k=1)[0]
        assert best.score == 46
        assert best.leftover == 0
        assert [m.number for m in best.melds[0].members] == [10, 11, 12, 13]

    def test_two_wilds(self):
        """Both wilds join the high tile"""
        hand = list(TileSet.from_string("R1 R2 R3 Y5 B5 K5 K13 J J"))
        best = optimize_partition(hand, top_k=1)[0]
        assert best.score == 60
        assert best.leftover == 0
        assert best.wild_count == 2
        assert_valid_partition(best, hand)

    def test_ranking_and_tie_break(self):
        """Equal scores: fewer melds first"""
        hand = list(TileSet.from_string("R1 R2 R3 R4 R5 R6"))
        result = optimize_partition(hand, top_k=3)

        assert [p.score for p in result] == [21, 21, 20]
        assert len(result[0].melds) == 1
        assert len(result[1].melds) == 2
        assert result[2].leftover == 1

    def test_same_melds_returned_once(self):
        """Melds found in a different order are not repeated"""
        hand = list(TileSet.from_string("R1 R2 R3 Y7 B7 K7"))
        result = optimize_partition(hand, top_k=3)

        assert len(result) == 1
        assert result[0].score == 27
        assert len(result[0].melds) == 2

    def test_top_k_limit(self):
        """Never more than top_k partitions"""
        hand = list(TileSet.from_string("R1 R2 R3 R4 R5 R6 Y3 B3 K3 J"))
        for k in (1, 2, 5):
            assert len(optimize_partition(hand, top_k=k)) <= k

    def test_invalid_top_k(self):
        """top_k must be positive"""
        with pytest.raises(ValueError):
            optimize_partition([red(1)], top_k=0)
        with pytest.raises(ValueError):
            PartitionSearch(0)

    def test_default_top_k(self):
        """Rule set default applies when top_k is omitted"""
        hand = list(TileSet.from_string("R1 R2 R3 R4 R5 R6"))
        result = PartitionOptimizer().optimize(hand)
        assert len(result) == OKEY_101_RULES.default_top_k

    def test_unresolved_hand_rejected(self):
        """False jokers must be resolved before optimizing"""
        with pytest.raises(InvalidTileError):
            optimize_partition([red(1), red(2), false_joker()])

    def test_too_many_wilds_rejected(self):
        """Wild capacity is checked before searching"""
        with pytest.raises(CapacityExceeded):
            optimize_partition([red(1), wild(0), wild(1), wild(2)])

    def test_search_rejects_negative_wilds(self):
        """Search-level wild count is checked too"""
        search = PartitionSearch(3)
        with pytest.raises(CapacityExceeded):
            search.search(counts_of("R1 R2 R3"), -1)

    def test_indicator_resolved_hand(self):
        """Okey tiles act as wild, false jokers as the okey face"""
        indicator = IndicatorSystem(blue(5))
        raw = [blue(6, 0), false_joker(0), blue(7), blue(8)]
        hand = indicator.resolve_hand(raw)

        optimizer = PartitionOptimizer(indicator=indicator)
        best = optimizer.optimize(hand, top_k=1)[0]

        assert best.score == 30
        assert best.leftover == 0
        members = best.melds[0].members
        assert [m.number for m in members] == [6, 7, 8, 9]
        assert members[-1].is_wild
        assert members[0].tile.id == false_joker(0).id

    def test_memo_is_per_call(self):
        """Each search owns its memo"""
        counts = counts_of("R1 R2 R3 R4")
        first = PartitionSearch(2)
        first.search(counts, 0)
        assert first.memo
        assert first.states_solved > 0

        second = PartitionSearch(2)
        assert second.memo == {}
        assert second.search(counts, 0) == first.search(counts, 0)

    def test_deterministic(self):
        """Same input, same output"""
        hand = list(TileSet.from_string("R3 R4 R5 Y5 B5 K5 K6 K7 Y1 J"))
        a = optimize_partition(hand, top_k=4)
        b = optimize_partition(hand, top_k=4)

        assert [p.score for p in a] == [p.score for p in b]
        assert [[m.tiles for m in p.melds] for p in a] == [[m.tiles for m in p.melds] for p in b]

    def test_input_order_does_not_change_scores(self):
        """Scores depend on the multiset, not the order"""
        hand = list(TileSet.from_string("R3 R4 R5 Y5 B5 K5 K6 K7 Y1 J"))
        forward = optimize_partition(hand, top_k=3)
        backward = optimize_partition(list(reversed(hand)), top_k=3)
        assert [p.score for p in forward] == [p.score for p in backward]

    def test_random_hands_invariants(self):
        """Structural invariants on dealt hands"""
        for indicator, hand in random_hands(4, 12):
            result = PartitionOptimizer(indicator=indicator).optimize(hand, top_k=3)

            assert 1 <= len(result) <= 3
            for partition in result:
                assert_valid_partition(partition, hand)

            scores = [p.score for p in result]
            assert scores == sorted(scores, reverse=True)

            keys = [partition_key(self._patterns_of(p)) for p in result]
            assert len(keys) == len(set(keys))

    def test_full_size_hands_invariants(self):
        """Structural invariants on 21-tile hands holding okey tiles"""
        dealt = [(1, deal) for deal in random_hands(2, 21, seed=11, okeys=1)]
        dealt += [(2, deal) for deal in random_hands(2, 21, seed=12, okeys=2)]

        for okeys, (indicator, hand) in dealt:
            check_hand_size(hand, OKEY_101_RULES)
            assert sum(1 for t in hand if t.is_wild) == okeys

            result = PartitionOptimizer(indicator=indicator).optimize(hand, top_k=3)

            assert 1 <= len(result) <= 3
            for partition in result:
                assert_valid_partition(partition, hand)
                assert partition.wild_count <= okeys

            scores = [p.score for p in result]
            assert scores == sorted(scores, reverse=True)

    def test_dense_full_hand(self):
        """21 tiles of overlapping runs and groups with two wilds"""
        hand = list(TileSet.from_string(
            "R7 Y7 B7 K7 R8 Y8 B8 K8 R9 Y9 B9 K9 R10 Y10 B10 R11 Y11 B11 K1 J J"
        ))
        check_hand_size(hand, OKEY_101_RULES)

        result = optimize_partition(hand, top_k=3)

        # Wilds extend a run to 12 and 13; K1 is left over
        assert [p.score for p in result] == [184, 184, 184]
        for partition in result:
            assert_valid_partition(partition, hand)
            assert partition.wild_count == 2
            assert [str(t) for t in partition.unused_tiles] == ["K1"]

    @staticmethod
    def _patterns_of(partition: Partition):
        return [
            MeldPattern(
                meld.meld_type,
                tuple(MeldSlot(m.color, m.number, m.is_wild) for m in meld.members),
            )
            for meld in partition.melds
        ]
