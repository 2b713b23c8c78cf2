"""
Okey Rule Sets

Defines the tile-set and hand limits for the supported Okey variants:
- 101 Okey (hands of up to 21 tiles)
- Classic Okey (hands of 14, 15 after drawing)
"""

from dataclasses import dataclass


# Printed tile set; tile ids are laid out over these
MAX_NUMBER = 13
COPIES_PER_TILE = 2


@dataclass(frozen=True)
class RuleSet:
    """
    Rule configuration for an Okey variant.
    
    Only the parts of the rules the optimizer depends on are kept here:
    the shape of the physical set and the meld size limits.
    """
    
    name: str = "Default"
    
    # Physical set: 4 colors x numbers 1..max_number x copies_per_tile.
    # A variant may play with fewer numbers or copies than are printed,
    # never more.
    max_number: int = MAX_NUMBER
    copies_per_tile: int = COPIES_PER_TILE
    
    # Wild tiles a hand may hold (the two okey tiles)
    num_wilds: int = 2
    
    # Printed "false okey" placeholders in the set
    num_false_jokers: int = 2
    
    # Enforced by callers, never by the search
    max_hand_size: int = 21
    
    # Meld sizes
    min_meld_size: int = 3
    max_group_size: int = 4
    
    # Number of alternative partitions returned by default
    default_top_k: int = 3

    def __post_init__(self):
        if not 1 <= self.max_number <= MAX_NUMBER:
            raise ValueError(f"max_number must be 1-{MAX_NUMBER}, got {self.max_number}")
        if not 1 <= self.copies_per_tile <= COPIES_PER_TILE:
            raise ValueError(
                f"copies_per_tile must be 1-{COPIES_PER_TILE}, got {self.copies_per_tile}"
            )

    def __repr__(self) -> str:
        return f"RuleSet({self.name})"


# 101 Okey: 21 tiles dealt to the starting player
OKEY_101_RULES = RuleSet(
    name="101 Okey",
    max_number=13,
    copies_per_tile=2,
    num_wilds=2,
    num_false_jokers=2,
    max_hand_size=21,
    min_meld_size=3,
    max_group_size=4,
    default_top_k=3,
)


# Classic Okey: 14 tiles, 15 for the player to move
OKEY_RULES = RuleSet(
    name="Okey",
    max_number=13,
    copies_per_tile=2,
    num_wilds=2,
    num_false_jokers=2,
    max_hand_size=15,
    min_meld_size=3,
    max_group_size=4,
    default_top_k=3,
)


RULE_PRESETS = {
    "okey101": OKEY_101_RULES,
    "okey": OKEY_RULES,
}
