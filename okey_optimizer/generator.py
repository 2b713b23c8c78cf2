"""
Meld Generator

Lists every meld that can be laid down in one step from a hand state.
A state is a (4, 13) count array of colored numbers plus the number of
wild tiles still available. Melds are returned as patterns (which faces
they take and which slots wild tiles fill); physical tiles are bound to
them only once a whole partition has been chosen.
"""

import itertools
from dataclasses import dataclass
from functools import cached_property
from typing import List, NamedTuple, Tuple

import numpy as np

from .melds import MeldType
from .rules import RuleSet, OKEY_101_RULES
from .tiles import TileColor, COLOR_LETTERS


class MeldSlot(NamedTuple):
    """One position of a meld pattern"""
    color: TileColor
    number: int
    wild: bool  # filled by a wild tile standing for (color, number)


@dataclass(frozen=True)
class MeldPattern:
    """
    A meld described by faces rather than physical tiles.

    Attributes:
        meld_type: Group or run
        slots: Ordered slots; groups by color, runs by number
    """
    meld_type: MeldType
    slots: Tuple[MeldSlot, ...]

    @cached_property
    def value(self) -> int:
        """Sum of the numbers in the meld, wild slots included"""
        return sum(s.number for s in self.slots)

    @cached_property
    def wild_count(self) -> int:
        return sum(1 for s in self.slots if s.wild)

    @property
    def size(self) -> int:
        return len(self.slots)

    @property
    def concrete_slots(self) -> List[MeldSlot]:
        """Slots taken by colored-number tiles"""
        return [s for s in self.slots if not s.wild]

    @cached_property
    def sort_key(self) -> Tuple:
        """Total order over patterns, used for canonical partition keys"""
        return (int(self.meld_type), tuple((int(s.color), s.number, s.wild) for s in self.slots))

    @cached_property
    def _concrete_index(self) -> Tuple[List[int], List[int]]:
        """(colors, number - 1) of the concrete slots, for count array indexing"""
        slots = self.concrete_slots
        return [int(s.color) for s in slots], [s.number - 1 for s in slots]

    def remove_from(self, counts: np.ndarray) -> np.ndarray:
        """Return a copy of counts with this pattern's concrete tiles taken out"""
        remaining = counts.copy()
        # A pattern never uses the same face twice
        remaining[self._concrete_index] -= 1
        return remaining

    def __str__(self) -> str:
        parts = []
        for s in self.slots:
            face = f"{COLOR_LETTERS[s.color]}{s.number}"
            parts.append(f"J({face})" if s.wild else face)
        return f"{self.meld_type.name}[{' '.join(parts)}]"


def generate_melds(
    counts: np.ndarray,
    wilds: int,
    rules: RuleSet = OKEY_101_RULES,
) -> List[MeldPattern]:
    """
    Generate all melds extractable from a state in one step.

    Args:
        counts: (4, max_number) array of colored-number copies
        wilds: Wild tiles available
        rules: Meld size limits

    Returns:
        Groups followed by runs. Every pattern uses at least one
        colored-number tile and at most `wilds` wild tiles.
    """
    patterns = _generate_groups(counts, wilds, rules)
    patterns.extend(_generate_runs(counts, wilds, rules))
    return patterns


def _generate_groups(counts: np.ndarray, wilds: int, rules: RuleSet) -> List[MeldPattern]:
    """
    Groups: one number, different colors.

    For each size, every subset of the colors present at that number is
    tried, wild tiles standing for the colors not chosen.
    """
    num_colors, max_number = counts.shape
    colors = [TileColor(c) for c in range(num_colors)]
    rows = counts.tolist()
    groups = []

    for number in range(1, max_number + 1):
        present = [c for c in colors if rows[c][number - 1] > 0]
        if not present:
            continue

        for size in range(rules.min_meld_size, rules.max_group_size + 1):
            if size > num_colors:
                break
            for used in range(1, min(size, len(present)) + 1):
                need = size - used
                if need > wilds:
                    continue
                for chosen in itertools.combinations(present, used):
                    filled = [c for c in colors if c not in chosen][:need]
                    slots = [MeldSlot(c, number, False) for c in chosen]
                    slots.extend(MeldSlot(c, number, True) for c in filled)
                    slots.sort(key=lambda s: s.color)
                    groups.append(MeldPattern(MeldType.GROUP, tuple(slots)))

    return groups


def _generate_runs(counts: np.ndarray, wilds: int, rules: RuleSet) -> List[MeldPattern]:
    """
    Runs: one color, consecutive numbers, no wrap-around.

    Every window of at least min_meld_size numbers is tried; missing
    numbers are filled with wild tiles when enough are available. A run
    can be no longer than the numbers present in its color plus the wilds.
    """
    num_colors, max_number = counts.shape
    runs = []

    for c, row in enumerate(counts.tolist()):
        color = TileColor(c)
        # prefix[n] = distinct numbers present among 1..n
        prefix = [0]
        for copies in row:
            prefix.append(prefix[-1] + (copies > 0))

        max_length = min(max_number, prefix[-1] + wilds)
        for length in range(rules.min_meld_size, max_length + 1):
            for start in range(1, max_number - length + 2):
                end = start + length - 1
                present = prefix[end] - prefix[start - 1]
                if present == 0 or length - present > wilds:
                    continue
                slots = tuple(
                    MeldSlot(color, n, row[n - 1] == 0)
                    for n in range(start, end + 1)
                )
                runs.append(MeldPattern(MeldType.RUN, slots))

    return runs
