from __future__ import annotations
from collections.abc import Sequence
import operator
from typing import Any, Callable, Optional

import numpy as np

from .errors import AlreadyBuiltError, NotBuiltError

Combine = Callable[[Any, Any], Any]

# --- Configuration ---
STORAGE_FACTOR: int = 4  # backing array slots per position


class SegmentTree:
    """Fixed size range aggregate over positions [0, size)

    The tree is a flat array using implicit indexing: node i has its children
    at 2i+1 and 2i+2, the root at 0 covers the whole range and every leaf
    holds a single raw value. `combine` must be associative and commutative
    with `identity` as its neutral element.

    Storage is an object array, so values keep their own python type and
    integer sums never wrap.
    """

    __slots__: tuple[str, ...] = ("size", "combine", "identity", "tree")

    def __init__(
        self, size: int, combine: Combine = operator.add, identity: Any = 0
    ):
        if size < 1:
            raise ValueError("SegmentTree size must be at least 1")
        self.size: int = size
        self.combine: Combine = combine
        self.identity: Any = identity
        self.tree: Optional[np.ndarray] = None

    # --- Public API ---
    def __len__(self) -> int:
        return self.size

    @property
    def is_built(self) -> bool:
        return self.tree is not None

    def build(self, values: Sequence[Any]):
        """Initialize every position from `values`, in O(size).
        This can only be done once.
        """
        if self.tree is not None:
            raise AlreadyBuiltError("SegmentTree has already been built")
        if len(values) == 0:
            raise ValueError("Cannot build a SegmentTree from no values")
        if len(values) != self.size:
            raise ValueError(
                f"Expected {self.size} values, got {len(values)}"
            )

        tree = np.empty(STORAGE_FACTOR * self.size, dtype=object)
        self._build(tree, values, 0, 0, self.size - 1)
        self.tree = tree

    def update(self, index: int, value: Any):
        """Replace the value at `index`, then recombine all its ancestors"""
        tree = self._require_tree()
        self._check_position(index)

        history: list[tuple[int, bool]] = []  # (node, went left)
        node, start, end = 0, 0, self.size - 1
        while start != end:
            mid = (start + end) // 2
            history.append((node, index <= mid))
            if index <= mid:
                node, end = 2 * node + 1, mid
            else:
                node, start = 2 * node + 2, mid + 1

        # Combine everything before writing, so a failing combine changes nothing
        pending: list[tuple[int, Any]] = [(node, value)]
        for parent, went_left in reversed(history):
            child = pending[-1][1]
            if went_left:
                merged = self.combine(child, tree[2 * parent + 2])
            else:
                merged = self.combine(tree[2 * parent + 1], child)
            pending.append((parent, merged))

        for node, val in pending:
            tree[node] = val

    def query(self, left: int, right: int) -> Any:
        """Get the aggregate of the positions in [left, right], inclusive.

        An empty range (left > right) gives back the identity.
        """
        if left > right:
            return self.identity
        tree = self._require_tree()
        self._check_position(left)
        self._check_position(right)
        return self._query(tree, 0, 0, self.size - 1, left, right)

    def total(self) -> Any:
        """Get the aggregate over every position"""
        return self._require_tree()[0]

    def __getitem__(self, index: int) -> Any:
        if index < 0:
            index += self.size
        tree = self._require_tree()
        self._check_position(index)

        node, start, end = 0, 0, self.size - 1
        while start != end:
            mid = (start + end) // 2
            if index <= mid:
                node, end = 2 * node + 1, mid
            else:
                node, start = 2 * node + 2, mid + 1
        return tree[node]

    def __setitem__(self, index: int, value: Any):
        if index < 0:
            index += self.size
        self.update(index, value)

    def to_list(self) -> list[Any]:
        """Return the values of every position, in position order"""
        tree = self._require_tree()
        ret: list[Any] = []
        stack = [(0, 0, self.size - 1)]  # (node, start, end)
        while stack:
            node, start, end = stack.pop()
            if start == end:
                ret.append(tree[node])
                continue
            # Push right first so left is processed first
            mid = (start + end) // 2
            stack.append((2 * node + 2, mid + 1, end))
            stack.append((2 * node + 1, start, mid))
        return ret

    # ------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------

    def _require_tree(self) -> np.ndarray:
        if self.tree is None:
            raise NotBuiltError("SegmentTree must be built before use")
        return self.tree

    def _check_position(self, index: int):
        if index < 0 or index >= self.size:
            raise IndexError(
                f"Position {index} out of range for a SegmentTree of size {self.size}"
            )

    def _build(
        self, tree: np.ndarray, values: Sequence[Any], node: int, start: int, end: int
    ):
        if start == end:
            tree[node] = values[start]
            return
        mid = (start + end) // 2
        self._build(tree, values, 2 * node + 1, start, mid)
        self._build(tree, values, 2 * node + 2, mid + 1, end)
        tree[node] = self.combine(tree[2 * node + 1], tree[2 * node + 2])

    def _query(
        self, tree: np.ndarray, node: int, start: int, end: int, left: int, right: int
    ) -> Any:
        if right < start or end < left:
            return self.identity
        if left <= start and end <= right:
            return tree[node]
        mid = (start + end) // 2
        return self.combine(
            self._query(tree, 2 * node + 1, start, mid, left, right),
            self._query(tree, 2 * node + 2, mid + 1, end, left, right),
        )
