"""
State signatures for the partition search.

Two states with the same copies of every colored number and the same
number of wild tiles share a signature, whatever the physical tiles and
their order in the hand.
"""

from typing import Tuple

import numpy as np

from .tiles import TileColor, COLOR_LETTERS

StateSignature = Tuple[bytes, int]


def state_signature(counts: np.ndarray, wilds: int) -> StateSignature:
    """Hashable key for (counts, wilds)"""
    return (np.ascontiguousarray(counts, dtype=np.int8).tobytes(), int(wilds))


def describe_signature(counts: np.ndarray, wilds: int) -> str:
    """
    Readable form of a state, e.g. "R1=1|B5=2|J=1".
    Only used for logging.
    """
    parts = []
    for c, n in zip(*np.nonzero(counts)):
        parts.append(f"{COLOR_LETTERS[TileColor(int(c))]}{int(n) + 1}={int(counts[c, n])}")
    parts.append(f"J={int(wilds)}")
    return "|".join(parts)
