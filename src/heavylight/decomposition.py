from __future__ import annotations
from collections.abc import Iterable, Sequence
import logging
import operator
from typing import Any, Optional, Union

import numpy as np

from .errors import AlreadyBuiltError, NodeIndexError, NotATreeError, NotBuiltError
from .options import DecompositionOptions
from .segment_tree import Combine, SegmentTree

logger = logging.getLogger(__name__)


class HeavyLightDecomposition:
    """Path aggregates and point updates over a static tree.

    The tree is split into heavy paths (chains) laid out contiguously in a
    flat position array, so any node-to-node path is covered by O(log N)
    position ranges of a SegmentTree. That gives O(log^2 N) path queries and
    O(log N) point updates.

    Usage is always: add every edge, build() once, then any mix of
    update_node_value() and the queries.

    Properties:
        parent: The parent of each node when rooted at `root`, -1 for the root
        depth: The edge count from the root to each node
        subtree_size: The number of nodes in each node's subtree, itself included
        heavy_child: The child rooting the largest subtree, -1 for leaves
        head: The topmost node of the chain each node belongs to
        pos: Each node's index into the flat position array
    """

    def __init__(
        self,
        node_count: int,
        values: Sequence[Any],
        combine: Combine = operator.add,
        identity: Any = 0,
        options: Optional[Union[DecompositionOptions, dict[str, Any]]] = None,
    ):
        if node_count < 1:
            raise ValueError("A tree needs at least one node")
        if len(values) != node_count:
            raise ValueError(
                f"Expected {node_count} initial values, got {len(values)}"
            )
        if not isinstance(options, DecompositionOptions):
            options = DecompositionOptions(options)

        self.node_count: int = node_count
        self.combine: Combine = combine
        self.identity: Any = identity
        self.options: DecompositionOptions = options

        self.adj: list[list[int]] = [[] for _ in range(node_count)]
        self.edge_count: int = 0
        self.values: list[Any] = list(values)
        self.root: Optional[int] = None

        self._parent: np.ndarray
        self._depth: np.ndarray
        self._subtree_size: np.ndarray
        self._heavy_child: np.ndarray
        self._head: np.ndarray
        self._pos: np.ndarray

        self.seg_tree: SegmentTree = SegmentTree(node_count, combine, identity)

    @classmethod
    def from_edges(
        cls,
        values: Sequence[Any],
        edges: Iterable[tuple[int, int]],
        root: int = 0,
        **kwargs,
    ) -> HeavyLightDecomposition:
        """Construct, connect and build a decomposition in one go"""
        hld = cls(len(values), values, **kwargs)
        for u, v in edges:
            hld.add_edge(u, v)
        hld.build(root)
        return hld

    def __len__(self) -> int:
        return self.node_count

    def __repr__(self):
        state = f"root {self.root}" if self.is_built else "unbuilt"
        return f"<HeavyLightDecomposition n: {self.node_count} {state}>"

    @property
    def is_built(self) -> bool:
        return self.root is not None

    # --- Topology ---
    def add_edge(self, u: int, v: int):
        """Connect u and v. Only allowed before build()"""
        if self.is_built:
            raise AlreadyBuiltError("The topology is frozen once build() is called")
        self._check_node(u)
        self._check_node(v)
        self.adj[u].append(v)
        self.adj[v].append(u)
        self.edge_count += 1

    def build(self, root: int):
        """Root the tree at `root`, decompose it into chains and load the values.

        Nothing is committed unless both passes succeed, so a rejected build
        leaves the instance untouched.
        """
        if self.is_built:
            raise AlreadyBuiltError("build() can only be called once")
        self._check_node(root)

        validate = self.options["validate"]
        n = self.node_count
        if validate and self.edge_count != n - 1:
            logger.debug("Rejecting %d edges for %d nodes", self.edge_count, n)
            raise NotATreeError(
                f"A tree of {n} nodes needs {n - 1} edges, got {self.edge_count}"
            )

        order, children, parent, depth = self._walk_down(root, validate)
        if len(order) != n:
            logger.debug("Only %d of %d nodes reachable from %d", len(order), n, root)
            raise NotATreeError(
                f"Only {len(order)} of {n} nodes are reachable from node {root}"
            )
        subtree_size, heavy_child = self._size_subtrees(order, children)
        head, pos = self._assign_chains(root, children, heavy_child)

        self._parent = parent
        self._depth = depth
        self._subtree_size = subtree_size
        self._heavy_child = heavy_child
        self._head = head
        self._pos = pos

        values_at_pos: list[Any] = [self.identity] * n
        for u in range(n):
            values_at_pos[pos[u]] = self.values[u]
        self.seg_tree.build(values_at_pos)
        self.root = root

        if logger.isEnabledFor(logging.DEBUG):
            chains = int(np.count_nonzero(head == np.arange(n)))
            logger.debug(
                "Decomposed %d nodes rooted at %d into %d chains", n, root, chains
            )

    # --- Per-node bookkeeping ---
    @property
    def parent(self) -> np.ndarray:
        self._require_built()
        return self._parent.copy()

    @property
    def depth(self) -> np.ndarray:
        self._require_built()
        return self._depth.copy()

    @property
    def subtree_size(self) -> np.ndarray:
        self._require_built()
        return self._subtree_size.copy()

    @property
    def heavy_child(self) -> np.ndarray:
        self._require_built()
        return self._heavy_child.copy()

    @property
    def head(self) -> np.ndarray:
        self._require_built()
        return self._head.copy()

    @property
    def pos(self) -> np.ndarray:
        self._require_built()
        return self._pos.copy()

    # --- Values ---
    def value(self, u: int) -> Any:
        """Get the current value of node u"""
        self._check_node(u)
        return self.values[u]

    def update_node_value(self, u: int, new_value: Any):
        """Set the value of node u, in O(log N)"""
        self._require_built()
        self._check_node(u)
        self.seg_tree.update(int(self._pos[u]), new_value)
        self.values[u] = new_value

    # --- Queries ---
    def path_segments(self, u: int, v: int) -> list[tuple[int, int]]:
        """Get the inclusive position ranges that together cover the u-v path.

        There's one range per chain the path touches, so O(log N) of them.
        """
        self._require_built()
        self._check_node(u)
        self._check_node(v)
        segments, top, bottom = self._climb(u, v)
        segments.append((int(self._pos[top]), int(self._pos[bottom])))
        return segments

    def query_path(self, u: int, v: int) -> Any:
        """Get the aggregate of every node value on the u-v path, both ends included"""
        seg_tree = self.seg_tree
        total = self.identity
        for left, right in self.path_segments(u, v):
            total = self.combine(total, seg_tree.query(left, right))
        return total

    def get_lca(self, u: int, v: int) -> int:
        """Get the lowest common ancestor of u and v"""
        self._require_built()
        self._check_node(u)
        self._check_node(v)
        _segments, top, _bottom = self._climb(u, v)
        return top

    def distance(self, u: int, v: int) -> int:
        """Get the number of edges on the u-v path"""
        lca = self.get_lca(u, v)
        depth = self._depth
        return int(depth[u] + depth[v] - 2 * depth[lca])

    def path_nodes(self, u: int, v: int) -> list[int]:
        """Get the nodes on the u-v path, in order from u to v"""
        lca = self.get_lca(u, v)
        parent = self._parent

        up: list[int] = []
        while u != lca:
            up.append(u)
            u = int(parent[u])
        down: list[int] = []
        while v != lca:
            down.append(v)
            v = int(parent[v])
        return up + [lca] + down[::-1]

    def query_subtree(self, u: int) -> Any:
        """Get the aggregate of every node value in u's subtree.

        The chain layout places a whole subtree in one contiguous range
        starting at pos[u].
        """
        self._require_built()
        self._check_node(u)
        start = int(self._pos[u])
        return self.seg_tree.query(start, start + int(self._subtree_size[u]) - 1)

    # ------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------

    def _require_built(self):
        if not self.is_built:
            raise NotBuiltError("build() must be called before using the tree")

    def _check_node(self, u: int):
        if not self.options["validate"]:
            return
        if u < 0 or u >= self.node_count:
            raise NodeIndexError(u, self.node_count)

    def _walk_down(
        self, root: int, validate: bool
    ) -> tuple[list[int], list[list[int]], np.ndarray, np.ndarray]:
        """First pass: parents, depths and the child lists of the rooted tree

        Returns:
            list[int]: Every reached node in preorder
            list[list[int]]: The children of each node, in adjacency order
            np.ndarray: The parent of each node
            np.ndarray: The depth of each node
        """
        n = self.node_count
        parent = np.full(n, -1, dtype=np.int64)
        depth = np.zeros(n, dtype=np.int64)
        seen = np.zeros(n, dtype=bool)
        children: list[list[int]] = [[] for _ in range(n)]
        order: list[int] = []

        seen[root] = True
        stack = [root]
        while stack:
            u = stack.pop()
            order.append(u)
            p = parent[u]
            for v in self.adj[u]:
                if v == p:
                    continue
                if seen[v]:
                    if validate:
                        logger.debug("Edge %d-%d closes a cycle", u, v)
                        raise NotATreeError(f"Edge {u}-{v} closes a cycle")
                    continue
                seen[v] = True
                parent[v] = u
                depth[v] = depth[u] + 1
                children[u].append(v)
                stack.append(v)
        return order, children, parent, depth

    def _size_subtrees(
        self, order: list[int], children: list[list[int]]
    ) -> tuple[np.ndarray, np.ndarray]:
        """First pass, continued: subtree sizes and heavy children.

        Children are always finished before their parent when walking the
        preorder backwards.
        """
        n = self.node_count
        lowest_id = self.options["tie_break"] == "lowest_id"
        subtree_size = np.ones(n, dtype=np.int64)
        heavy_child = np.full(n, -1, dtype=np.int64)

        for u in reversed(order):
            best = 0
            for v in children[u]:
                size = subtree_size[v]
                subtree_size[u] += size
                if size > best or (lowest_id and size == best and v < heavy_child[u]):
                    best = size
                    heavy_child[u] = v
        return subtree_size, heavy_child

    def _assign_chains(
        self, root: int, children: list[list[int]], heavy_child: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray]:
        """Second pass: chain heads and flat positions.

        The heavy child is always visited right after its parent, carrying
        the parent's head along, so each chain ends up contiguous. Every
        light child starts a chain of its own.
        """
        n = self.node_count
        head = np.full(n, -1, dtype=np.int64)
        pos = np.full(n, -1, dtype=np.int64)

        cur_pos = 0
        stack = [(root, root)]  # (node, chain head)
        while stack:
            u, h = stack.pop()
            head[u] = h
            pos[u] = cur_pos
            cur_pos += 1

            heavy = heavy_child[u]
            # Push in reverse so light children pop in adjacency order
            for v in reversed(children[u]):
                if v != heavy:
                    stack.append((v, v))
            if heavy != -1:
                stack.append((int(heavy), h))
        return head, pos

    def _climb(self, u: int, v: int) -> tuple[list[tuple[int, int]], int, int]:
        """Jump u and v up a chain at a time until they share a chain

        Returns:
            list[tuple[int, int]]: The position ranges of the chains left behind
            int: The shallower of the two nodes once on the shared chain
            int: The deeper of the two nodes once on the shared chain
        """
        head, depth, pos, parent = self._head, self._depth, self._pos, self._parent
        segments: list[tuple[int, int]] = []
        while head[u] != head[v]:
            if depth[head[u]] < depth[head[v]]:
                u, v = v, u
            segments.append((int(pos[head[u]]), int(pos[u])))
            u = int(parent[head[u]])

        if depth[u] > depth[v]:
            u, v = v, u
        return segments, int(u), int(v)
