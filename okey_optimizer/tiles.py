"""
Okey Tiles System

Defines the physical tile set used in Okey and 101 Okey:
- 4 colors (Red, Yellow, Blue, Black)
- Numbers 1-13
- 2 copies of each colored number = 104
- 2 false jokers (printed placeholders for the okey) = 2
Total: 106 tiles

Wild tiles are a separate kind of tile rather than a colored number with a
special value. Which physical tiles become wild is decided by the indicator
(see indicator.py).
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import List, Optional, Tuple
import numpy as np

from .errors import InvalidTileError
from .rules import RuleSet, OKEY_101_RULES, MAX_NUMBER, COPIES_PER_TILE

# Instance ids: colored numbers take 0-103, false jokers follow
FALSE_JOKER_ID_BASE = 4 * MAX_NUMBER * COPIES_PER_TILE
# Ids for wild tiles built directly (not resolved from the catalog)
WILD_ID_BASE = 200


class TileColor(IntEnum):
    """Tile colors"""
    RED = 0
    YELLOW = 1
    BLUE = 2
    BLACK = 3


class TileKind(IntEnum):
    """What a tile can stand for"""
    CONCRETE = 0     # A colored number
    WILD = 1         # Stands for any tile once placed in a meld
    FALSE_JOKER = 2  # Printed placeholder, unresolved until the indicator is known


COLOR_LETTERS = {
    TileColor.RED: "R",
    TileColor.YELLOW: "Y",
    TileColor.BLUE: "B",
    TileColor.BLACK: "K",
}
LETTER_COLORS = {letter: color for color, letter in COLOR_LETTERS.items()}

WILD_LETTERS = ("J", "JOKER", "OKEY")
FALSE_JOKER_LETTERS = ("F", "FALSE")


def catalog_id(color: TileColor, number: int, copy: int = 0) -> int:
    """Instance id of a colored number in the full set"""
    if not 0 <= copy < COPIES_PER_TILE:
        raise InvalidTileError(
            f"Only {COPIES_PER_TILE} copies of each tile exist, got copy {copy} of "
            f"{COLOR_LETTERS[TileColor(color)]}{number}"
        )
    return (int(color) * MAX_NUMBER + number - 1) * COPIES_PER_TILE + copy


@dataclass(frozen=True)
class Tile:
    """
    Represents a single physical Okey tile.

    Attributes:
        kind: Concrete, wild or unresolved false joker
        color: Tile color (concrete tiles only)
        number: Tile number 1-13 (concrete tiles only)
        id: Unique identifier of this physical copy
    """
    kind: TileKind
    color: Optional[TileColor] = None
    number: Optional[int] = None
    id: int = 0

    def __post_init__(self):
        """Validate the kind/color/number combination"""
        try:
            object.__setattr__(self, "kind", TileKind(self.kind))
        except ValueError:
            raise InvalidTileError(f"Unknown tile kind: {self.kind!r}") from None

        if self.kind == TileKind.CONCRETE:
            if self.color is None or self.number is None:
                raise InvalidTileError("Concrete tiles need a color and a number")
            try:
                object.__setattr__(self, "color", TileColor(self.color))
            except ValueError:
                raise InvalidTileError(f"Unknown tile color: {self.color!r}") from None
            if isinstance(self.number, bool) or not isinstance(self.number, (int, np.integer)):
                raise InvalidTileError(f"Tile number must be an integer, got {self.number!r}")
            if not 1 <= self.number <= MAX_NUMBER:
                raise InvalidTileError(f"Tile number must be 1-{MAX_NUMBER}, got {self.number}")
            object.__setattr__(self, "number", int(self.number))
        elif self.color is not None or self.number is not None:
            raise InvalidTileError(
                f"{self.kind.name} tiles carry no color or number, "
                f"got {self.color!r}/{self.number!r}"
            )

    @property
    def is_concrete(self) -> bool:
        return self.kind == TileKind.CONCRETE

    @property
    def is_wild(self) -> bool:
        return self.kind == TileKind.WILD

    @property
    def is_false_joker(self) -> bool:
        return self.kind == TileKind.FALSE_JOKER

    @property
    def face(self) -> Optional[Tuple[TileColor, int]]:
        """(color, number) of a concrete tile, None otherwise"""
        if self.kind != TileKind.CONCRETE:
            return None
        return (self.color, self.number)

    def _sort_key(self) -> Tuple[int, int, int, int]:
        if self.kind == TileKind.CONCRETE:
            return (int(self.kind), int(self.color), self.number, self.id)
        return (int(self.kind), 0, 0, self.id)

    def __lt__(self, other) -> bool:
        """Concrete tiles by color then number, wild tiles after them"""
        if not isinstance(other, Tile):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __repr__(self) -> str:
        if self.kind == TileKind.CONCRETE:
            return f"Tile({self.color.name}, {self.number}, id={self.id})"
        return f"Tile({self.kind.name}, id={self.id})"

    def __str__(self) -> str:
        """Short notation: R5, K13, J (wild), F (false joker)"""
        if self.kind == TileKind.CONCRETE:
            return f"{COLOR_LETTERS[self.color]}{self.number}"
        if self.kind == TileKind.WILD:
            return "J"
        return "F"

    @classmethod
    def from_string(cls, s: str, instance_id: int = 0) -> 'Tile':
        """
        Create tile from its short notation.

        Args:
            s: String like "R5", "y12", "K1", "J" (wild) or "F" (false joker)
            instance_id: Copy of this tile (0 or 1 for colored numbers)
        """
        text = s.strip().upper()

        if text in WILD_LETTERS:
            return wild(instance_id)
        if text in FALSE_JOKER_LETTERS:
            return false_joker(instance_id)

        if len(text) >= 2 and text[0] in LETTER_COLORS and text[1:].isdigit():
            color = LETTER_COLORS[text[0]]
            number = int(text[1:])
            if not 1 <= number <= MAX_NUMBER:
                raise InvalidTileError(f"Tile number must be 1-{MAX_NUMBER}, got {s!r}")
            return cls(TileKind.CONCRETE, color, number, catalog_id(color, number, instance_id))

        raise InvalidTileError(f"Cannot parse tile string: {s!r}")


class TileSet:
    """
    A collection of tiles with utility methods.
    Used to represent hands and the full catalog.
    """

    NUM_COLORS = 4

    def __init__(self, tiles: Optional[List[Tile]] = None):
        """Initialize tile set with optional list of tiles"""
        self.tiles: List[Tile] = list(tiles) if tiles else []

    @property
    def wild_count(self) -> int:
        """Number of wild tiles in the set"""
        return sum(1 for t in self.tiles if t.is_wild)

    def split(self) -> Tuple[List[Tile], List[Tile]]:
        """Split into (concrete tiles, wild tiles), keeping order"""
        concrete = [t for t in self.tiles if t.is_concrete]
        wilds = [t for t in self.tiles if t.is_wild]
        return concrete, wilds

    def to_count_array(self, max_number: int = MAX_NUMBER) -> np.ndarray:
        """
        Convert to a (4, max_number) array counting each colored number.
        Entry [color, number - 1] holds the copies present. Wild tiles and
        false jokers are not counted.
        """
        counts = np.zeros((self.NUM_COLORS, max_number), dtype=np.int8)
        for tile in self.tiles:
            if tile.is_concrete:
                counts[tile.color, tile.number - 1] += 1
        return counts

    @classmethod
    def create_full_set(cls, rules: RuleSet = OKEY_101_RULES) -> 'TileSet':
        """Create the complete physical set, false jokers included"""
        tiles = []

        for color in TileColor:
            for number in range(1, rules.max_number + 1):
                for copy in range(rules.copies_per_tile):
                    tiles.append(Tile(TileKind.CONCRETE, color, number,
                                      catalog_id(color, number, copy)))

        for i in range(rules.num_false_jokers):
            tiles.append(false_joker(i))

        return cls(tiles)

    @classmethod
    def from_string(cls, text: str) -> 'TileSet':
        """
        Parse a space or comma separated hand such as "R1 R2 R3 J".
        Repeated faces get consecutive copy ids.
        """
        tiles = []
        seen = {}
        for token in text.replace(",", " ").split():
            key = token.strip().upper()
            if key in WILD_LETTERS:
                key = "J"
            elif key in FALSE_JOKER_LETTERS:
                key = "F"
            copy = seen.get(key, 0)
            seen[key] = copy + 1
            tiles.append(Tile.from_string(token, copy))
        return cls(tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self):
        return iter(self.tiles)

    def __getitem__(self, index):
        return self.tiles[index]

    def __repr__(self) -> str:
        return f"TileSet({len(self.tiles)} tiles)"

    def __str__(self) -> str:
        return " ".join(str(t) for t in sorted(self.tiles))


# Convenience functions for creating specific tiles
def red(number: int, copy: int = 0) -> Tile:
    """Create a red tile"""
    return Tile(TileKind.CONCRETE, TileColor.RED, number, catalog_id(TileColor.RED, number, copy))

def yellow(number: int, copy: int = 0) -> Tile:
    """Create a yellow tile"""
    return Tile(TileKind.CONCRETE, TileColor.YELLOW, number, catalog_id(TileColor.YELLOW, number, copy))

def blue(number: int, copy: int = 0) -> Tile:
    """Create a blue tile"""
    return Tile(TileKind.CONCRETE, TileColor.BLUE, number, catalog_id(TileColor.BLUE, number, copy))

def black(number: int, copy: int = 0) -> Tile:
    """Create a black tile"""
    return Tile(TileKind.CONCRETE, TileColor.BLACK, number, catalog_id(TileColor.BLACK, number, copy))

def wild(instance_id: int = 0) -> Tile:
    """Create a wild tile"""
    return Tile(TileKind.WILD, id=WILD_ID_BASE + instance_id)

def false_joker(instance_id: int = 0) -> Tile:
    """Create an unresolved false joker"""
    return Tile(TileKind.FALSE_JOKER, id=FALSE_JOKER_ID_BASE + instance_id)
