"""
Indicator System for Okey

Handles everything derived from the face-up indicator tile:
- The okey (wild) face: same color as the indicator, one number higher
- Turning the okey-face tiles of a hand into wild tiles
- Giving false jokers the okey face
- The indicator's own face having one copy fewer available to hands
"""

from dataclasses import dataclass
from typing import List, Tuple

from .errors import InvalidTileError
from .rules import RuleSet, OKEY_101_RULES
from .tiles import Tile, TileColor, TileKind


@dataclass(frozen=True)
class IndicatorSystem:
    """
    Resolves tiles against the indicator shown for the round.

    The optimizer only ever sees resolved hands: every tile is either a
    colored number or a wild tile, never a false joker.
    """

    indicator: Tile
    rules: RuleSet = OKEY_101_RULES

    def __post_init__(self):
        if not self.indicator.is_concrete:
            raise InvalidTileError(
                f"Indicator must be a colored number, got {self.indicator!r}"
            )

    @property
    def wild_face(self) -> Tuple[TileColor, int]:
        """
        Get the okey face from the indicator.

        The okey is the next number in the indicator's color,
        wrapping max_number -> 1.
        """
        next_number = self.indicator.number % self.rules.max_number + 1
        return (self.indicator.color, next_number)

    def is_wild_role(self, tile: Tile) -> bool:
        """Check if a tile is one of the physical okey tiles"""
        return tile.is_concrete and tile.face == self.wild_face

    def resolve_tile(self, tile: Tile) -> Tile:
        """
        Resolve a single tile for this round.

        - Okey-face tiles become wild tiles
        - False jokers become colored numbers with the okey face
        - Everything else is returned unchanged
        The physical id is kept in all cases.
        """
        if self.is_wild_role(tile):
            return Tile(TileKind.WILD, id=tile.id)
        if tile.is_false_joker:
            color, number = self.wild_face
            return Tile(TileKind.CONCRETE, color, number, tile.id)
        return tile

    def resolve_hand(self, tiles: List[Tile]) -> List[Tile]:
        """Resolve every tile of a hand, keeping order"""
        return [self.resolve_tile(t) for t in tiles]

    def max_copies(self, color: TileColor, number: int) -> int:
        """
        Physical copies of a colored number a hand can hold.
        The indicator itself stays face up, so its face has one fewer.
        """
        if (color, number) == self.indicator.face:
            return self.rules.copies_per_tile - 1
        return self.rules.copies_per_tile

    def __str__(self) -> str:
        color, number = self.wild_face
        return f"Indicator {self.indicator} -> okey {color.name.title()} {number}"
