"""
Okey Hand Optimizer
Finds the best ways to lay down a 101 Okey hand as groups and runs
"""

from .tiles import Tile, TileColor, TileKind, TileSet
from .melds import Meld, MeldMember, MeldType, Partition
from .generator import MeldPattern, MeldSlot, generate_melds
from .indicator import IndicatorSystem
from .optimizer import PartitionOptimizer, PartitionSearch, optimize_partition
from .rules import RuleSet, OKEY_101_RULES, OKEY_RULES
from .errors import (
    OkeyOptimizerError,
    InvalidTileError,
    CapacityExceeded,
    HandSizeExceeded,
)

__version__ = "0.1.0"
__all__ = [
    "Tile",
    "TileColor",
    "TileKind",
    "TileSet",
    "Meld",
    "MeldMember",
    "MeldType",
    "Partition",
    "MeldPattern",
    "MeldSlot",
    "generate_melds",
    "IndicatorSystem",
    "PartitionOptimizer",
    "PartitionSearch",
    "optimize_partition",
    "RuleSet",
    "OKEY_101_RULES",
    "OKEY_RULES",
    "OkeyOptimizerError",
    "InvalidTileError",
    "CapacityExceeded",
    "HandSizeExceeded",
]
