"""JsonNodeNavigator: NodeNavigator implementation over a built JSON tree.

Maps node kinds as DOCUMENT -> ROOT, ELEMENT -> ELEMENT, TEXT -> TEXT.
Anonymous array items report the local name ``"element"``, the same tag the
markup rendering uses, so ``//element`` selects array items.

The navigator's root is the node it was created on, not necessarily the
DOCUMENT node: an absolute path evaluated from a sub-node starts at that
sub-node.  ``move_to_parent`` may still climb above it.
"""

from __future__ import annotations

from json_tree_query.protocols import NodeKind, NodeNavigator
from json_tree_query.tree.nodes import ANONYMOUS_TAG, Node, NodeType

__all__ = ["ANONYMOUS_ELEMENT_NAME", "JsonNodeNavigator", "create_xpath_navigator"]

ANONYMOUS_ELEMENT_NAME = ANONYMOUS_TAG

_KINDS = {
    NodeType.DOCUMENT: NodeKind.ROOT,
    NodeType.ELEMENT: NodeKind.ELEMENT,
    NodeType.TEXT: NodeKind.TEXT,
}


class JsonNodeNavigator:
    """Cursor over a ``NodeTree`` satisfying the ``NodeNavigator`` protocol.

    Args:
        root:    Node returned to by ``move_to_root``.
        current: Starting position.  Defaults to ``root``.
    """

    __slots__ = ("_current", "_root")

    def __init__(self, root: Node, current: Node | None = None) -> None:
        self._root = root
        self._current = current if current is not None else root

    def __repr__(self) -> str:
        return f"JsonNodeNavigator(current={self._current!r})"

    @property
    def node(self) -> Node:
        """The node under the cursor."""
        return self._current

    @property
    def node_kind(self) -> NodeKind:
        return _KINDS[self._current.node_type]

    @property
    def local_name(self) -> str:
        if self._current.node_type is not NodeType.ELEMENT:
            return ""
        return self._current.name or ANONYMOUS_ELEMENT_NAME

    @property
    def value(self) -> str:
        return self._current.inner_text()

    def current(self) -> Node:
        return self._current

    def order_key(self) -> int:
        # Arena order is document order.
        return self._current.index

    def copy(self) -> JsonNodeNavigator:
        return JsonNodeNavigator(self._root, self._current)

    def move_to(self, other: NodeNavigator) -> bool:
        if not isinstance(other, JsonNodeNavigator):
            return False
        if other._root.tree is not self._root.tree:
            return False
        self._current = other._current
        return True

    def move_to_root(self) -> None:
        self._current = self._root

    def move_to_parent(self) -> bool:
        return self._move(self._current.parent)

    def move_to_child(self) -> bool:
        return self._move(self._current.first_child)

    def move_to_next(self) -> bool:
        return self._move(self._current.next_sibling)

    def move_to_previous(self) -> bool:
        return self._move(self._current.prev_sibling)

    def _move(self, target: Node | None) -> bool:
        if target is None:
            return False
        self._current = target
        return True


def create_xpath_navigator(top: Node) -> JsonNodeNavigator:
    """Create a navigator rooted and positioned at ``top``."""
    return JsonNodeNavigator(top)
