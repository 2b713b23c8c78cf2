"""
Okey Melds Module

Meld and partition records returned by the optimizer.
"""

from enum import IntEnum
from dataclasses import dataclass, field
from typing import List

from .tiles import Tile, TileColor, COLOR_LETTERS


class MeldType(IntEnum):
    """Types of melds (scoring combinations)"""
    GROUP = 0  # Same number, different colors (3 or 4 tiles)
    RUN = 1    # Same color, consecutive numbers (3 or more tiles)


@dataclass(frozen=True)
class MeldMember:
    """
    One tile placed in a meld.

    Attributes:
        tile: The physical tile
        color: Color this tile stands for in the meld
        number: Number this tile stands for in the meld
    """
    tile: Tile
    color: TileColor
    number: int

    @property
    def is_wild(self) -> bool:
        return self.tile.is_wild

    def __str__(self) -> str:
        face = f"{COLOR_LETTERS[self.color]}{self.number}"
        if self.tile.is_wild:
            return f"J({face})"
        return face


@dataclass
class Meld:
    """
    Represents a meld placed from a hand.

    Attributes:
        meld_type: Group or run
        members: Ordered members, wild tiles carrying the face they fill
    """
    meld_type: MeldType
    members: List[MeldMember]

    def __post_init__(self):
        """Validate meld"""
        for m in self.members:
            if m.tile.is_concrete and m.tile.face != (m.color, m.number):
                raise ValueError(f"Concrete tile {m.tile} cannot stand for {m}")
            if not (m.tile.is_concrete or m.tile.is_wild):
                raise ValueError(f"Unresolved tile in meld: {m.tile!r}")

        if self.meld_type == MeldType.GROUP:
            if len(self.members) not in (3, 4):
                raise ValueError("Group must have 3 or 4 tiles")
            if len({m.number for m in self.members}) != 1:
                raise ValueError("Group tiles must share one number")
            if len({m.color for m in self.members}) != len(self.members):
                raise ValueError("Group tiles must have different colors")
        elif self.meld_type == MeldType.RUN:
            if len(self.members) < 3:
                raise ValueError("Run must have at least 3 tiles")
            if len({m.color for m in self.members}) != 1:
                raise ValueError("Run tiles must share one color")
            numbers = [m.number for m in self.members]
            if numbers != list(range(numbers[0], numbers[0] + len(numbers))):
                raise ValueError("Invalid run sequence")

    @property
    def tiles(self) -> List[Tile]:
        """Physical tiles in meld order"""
        return [m.tile for m in self.members]

    @property
    def concrete_tiles(self) -> List[Tile]:
        """Colored-number tiles consumed by this meld"""
        return [m.tile for m in self.members if m.tile.is_concrete]

    @property
    def wild_count(self) -> int:
        """Number of wild tiles consumed by this meld"""
        return sum(1 for m in self.members if m.tile.is_wild)

    @property
    def value(self) -> int:
        """Sum of the numbers the members stand for"""
        return sum(m.number for m in self.members)

    @property
    def size(self) -> int:
        return len(self.members)

    def __repr__(self) -> str:
        return f"Meld({self.meld_type.name}, {[str(m) for m in self.members]})"

    def __str__(self) -> str:
        members_str = " ".join(str(m) for m in self.members)
        return f"[{self.meld_type.name}: {members_str}] = {self.value}"


@dataclass
class Partition:
    """
    Tile-disjoint melds drawn from one hand.

    Attributes:
        melds: Melds in the partition
        score: Sum of meld values
        leftover: Hand tiles not placed in any meld
        unused_tiles: The leftover tiles themselves, in hand order
    """
    melds: List[Meld] = field(default_factory=list)
    score: int = 0
    leftover: int = 0
    unused_tiles: List[Tile] = field(default_factory=list)

    @property
    def tile_count(self) -> int:
        """Tiles placed in melds"""
        return sum(m.size for m in self.melds)

    @property
    def wild_count(self) -> int:
        """Wild tiles placed in melds"""
        return sum(m.wild_count for m in self.melds)

    def __repr__(self) -> str:
        return f"Partition(score={self.score}, melds={len(self.melds)}, leftover={self.leftover})"

    def __str__(self) -> str:
        melds_str = " ".join(str(m) for m in self.melds) if self.melds else "None"
        return f"Score {self.score} (leftover {self.leftover}): {melds_str}"
