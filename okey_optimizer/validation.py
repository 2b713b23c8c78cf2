"""
Hand validation.

Checks a resolved hand against the physical tile set before any search
runs. Anything that could not come out of a real set is rejected here.
"""

from collections import defaultdict
from typing import Iterable, Optional, Sequence

from .errors import CapacityExceeded, HandSizeExceeded, InvalidTileError
from .indicator import IndicatorSystem
from .rules import RuleSet, OKEY_101_RULES
from .tiles import Tile, TileKind


def validate_hand(
    tiles: Iterable[Tile],
    rules: RuleSet = OKEY_101_RULES,
    indicator: Optional[IndicatorSystem] = None,
) -> int:
    """
    Validate a resolved hand.

    Args:
        tiles: Resolved tiles (colored numbers and wild tiles)
        rules: Rule set describing the physical tile set
        indicator: When given, the indicator's face has one copy fewer

    Returns:
        Number of wild tiles in the hand

    Raises:
        InvalidTileError: A tile cannot belong to the physical set
        CapacityExceeded: More wild tiles than the rules allow
    """
    by_face = defaultdict(int)
    seen_ids = set()
    num_wilds = 0

    for tile in tiles:
        if not isinstance(tile, Tile):
            raise InvalidTileError(f"Not a tile: {tile!r}")

        if tile.kind == TileKind.FALSE_JOKER:
            raise InvalidTileError(
                f"Unresolved false joker (id={tile.id}); resolve the hand against the indicator first"
            )

        if tile.kind == TileKind.WILD:
            num_wilds += 1
        else:
            if tile.number > rules.max_number:
                raise InvalidTileError(
                    f"Tile number must be 1-{rules.max_number}, got {tile.number}"
                )
            by_face[tile.face] += 1

        if tile.id in seen_ids:
            raise InvalidTileError(f"Physical tile id {tile.id} appears twice ({tile})")
        seen_ids.add(tile.id)

    for (color, number), count in by_face.items():
        limit = rules.copies_per_tile
        if indicator is not None:
            limit = indicator.max_copies(color, number)
        if count > limit:
            raise InvalidTileError(
                f"Physical limit exceeded: {count} copies of {color.name.title()} {number} (max {limit})"
            )

    check_wild_count(num_wilds, rules)
    return num_wilds


def check_wild_count(num_wilds: int, rules: RuleSet = OKEY_101_RULES) -> None:
    """Raise CapacityExceeded unless 0 <= num_wilds <= rules.num_wilds"""
    if num_wilds < 0:
        raise CapacityExceeded(f"Wild count cannot be negative, got {num_wilds}")
    if num_wilds > rules.num_wilds:
        raise CapacityExceeded(
            f"Hand holds {num_wilds} wild tiles, {rules.name} allows at most {rules.num_wilds}"
        )


def check_hand_size(tiles: Sequence[Tile], rules: RuleSet = OKEY_101_RULES) -> None:
    """
    Enforce the variant's hand size limit.

    Called by front ends before optimizing; the optimizer itself accepts
    any hand size.
    """
    if len(tiles) > rules.max_hand_size:
        raise HandSizeExceeded(
            f"Hand holds {len(tiles)} tiles, {rules.name} allows at most {rules.max_hand_size}"
        )
