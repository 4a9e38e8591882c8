from .decomposition import HeavyLightDecomposition
from .segment_tree import SegmentTree
from .options import DecompositionOptions
from .errors import (
    AlreadyBuiltError,
    HeavyLightError,
    NodeIndexError,
    NotATreeError,
    NotBuiltError,
)

__all__ = [
    "AlreadyBuiltError",
    "DecompositionOptions",
    "HeavyLightDecomposition",
    "HeavyLightError",
    "NodeIndexError",
    "NotATreeError",
    "NotBuiltError",
    "SegmentTree",
]
