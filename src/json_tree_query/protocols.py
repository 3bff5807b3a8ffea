"""NodeNavigator Protocol: the traversal surface the XPath engine evaluates over.

The engine in ``json_tree_query.xpath`` never touches ``Node`` objects.  It
moves a cursor around a tree through this protocol, so any tree can be queried
by supplying a conformant navigator; no inheritance is required.

Example::

    from json_tree_query.protocols import NodeKind, NodeNavigator

    class ListNavigator:
        # a cursor over some other tree ...
        node_kind = NodeKind.ROOT
        ...

    isinstance(ListNavigator(), NodeNavigator)  # structural conformance
"""

from __future__ import annotations

from collections.abc import Hashable
from enum import StrEnum, auto
from typing import Protocol, runtime_checkable

__all__ = ["NodeKind", "NodeNavigator"]


class NodeKind(StrEnum):
    """XPath node kinds a navigator can report.

    - ROOT    -> "root"    : the document node
    - ELEMENT -> "element" : a named (or anonymous) element
    - TEXT    -> "text"    : a text node
    """

    ROOT = auto()
    ELEMENT = auto()
    TEXT = auto()


@runtime_checkable
class NodeNavigator(Protocol):
    """Structural protocol for a cursor over a document tree.

    Every ``move_*`` method returns True and repositions the cursor on
    success, or returns False and leaves the cursor where it was.

    ``current()`` returns an opaque, hashable identity for the node under the
    cursor; two navigators on the same node must return equal identities.
    ``order_key()`` returns a value whose natural ordering is document order.
    """

    @property
    def node_kind(self) -> NodeKind: ...

    @property
    def local_name(self) -> str: ...

    @property
    def value(self) -> str: ...

    def current(self) -> Hashable: ...

    def order_key(self) -> int: ...

    def copy(self) -> NodeNavigator: ...

    def move_to(self, other: NodeNavigator) -> bool: ...

    def move_to_root(self) -> None: ...

    def move_to_parent(self) -> bool: ...

    def move_to_child(self) -> bool: ...

    def move_to_next(self) -> bool: ...

    def move_to_previous(self) -> bool: ...
