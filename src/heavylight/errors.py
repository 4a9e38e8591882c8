"""Error kinds raised by the decomposition and its range structure.

Each one also subclasses the builtin that would normally be raised for the
situation, so code catching ``IndexError`` or ``ValueError`` keeps working.
"""


class HeavyLightError(Exception):
    """Base class for every heavylight error"""


class NodeIndexError(HeavyLightError, IndexError):
    """A node index was outside of [0, node_count)"""

    def __init__(self, node: int, node_count: int):
        super().__init__(f"Node {node} out of range for a tree of {node_count} nodes")
        self.node = node
        self.node_count = node_count


class NotBuiltError(HeavyLightError, RuntimeError):
    """A query or update was issued before build()"""


class AlreadyBuiltError(HeavyLightError, RuntimeError):
    """build() was called twice, or the topology was changed after build()"""


class NotATreeError(HeavyLightError, ValueError):
    """The edges given do not form a single connected, acyclic tree"""
