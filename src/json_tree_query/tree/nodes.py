"""Node handles, NodeType StrEnum and the NodeTree arena.

A built document lives in a ``NodeTree``: a flat list of node records whose
parent/child/sibling links are integer indices into the same list.  Records
are appended in pre-order, so arena order is document order.

``Node`` is a small immutable handle ``(tree, index)``.  Handles compare equal
when they address the same slot of the same tree and can be used as dict keys.
The tree exposes no mutation API; only ``TreeBuilder`` writes records.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from json_tree_query.xpath import XPathExpr

__all__ = ["NO_NODE", "XML_DECLARATION", "Node", "NodeTree", "NodeType"]

# Index sentinel for an absent link.
NO_NODE = -1

XML_DECLARATION = '<?xml version="1.0"?>'

# Tag used when rendering an array item, which has no key of its own.
ANONYMOUS_TAG = "element"


class NodeType(StrEnum):
    """The three kinds of node in a document tree.

    - DOCUMENT -> "document" : synthetic root, exactly one per tree
    - ELEMENT  -> "element"  : a JSON object key or an array item
    - TEXT     -> "text"     : canonical string form of a JSON scalar
    """

    DOCUMENT = auto()
    ELEMENT = auto()
    TEXT = auto()


@dataclass(slots=True)
class _NodeRecord:
    node_type: NodeType
    data: str
    parent: int = NO_NODE
    prev_sibling: int = NO_NODE
    next_sibling: int = NO_NODE
    first_child: int = NO_NODE
    last_child: int = NO_NODE


class NodeTree:
    """Arena holding every node of one document.

    Index 0 is always the DOCUMENT node.  Instances are created and populated
    by ``TreeBuilder``; callers only read them through ``Node`` handles.
    """

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: list[_NodeRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"NodeTree(nodes={len(self._records)})"

    @property
    def root(self) -> Node:
        """The DOCUMENT node of this tree."""
        return Node(self, 0)

    def node(self, index: int) -> Node:
        """Return the handle for the record at ``index``."""
        if not 0 <= index < len(self._records):
            msg = f"node index {index} out of range for tree of {len(self._records)}"
            raise IndexError(msg)
        return Node(self, index)

    def iter_nodes(self) -> Iterator[Node]:
        """Yield every node in document order, the DOCUMENT node first."""
        for index in range(len(self._records)):
            yield Node(self, index)

    def _append(self, node_type: NodeType, data: str) -> int:
        self._records.append(_NodeRecord(node_type=node_type, data=data))
        return len(self._records) - 1

    def _record(self, index: int) -> _NodeRecord:
        return self._records[index]

    def _handle(self, index: int) -> Node | None:
        return None if index == NO_NODE else Node(self, index)


@dataclass(frozen=True, slots=True)
class Node:
    """Read-only handle to one node of a ``NodeTree``.

    Attributes:
        tree:  The arena the node lives in.
        index: Position of the node's record in the arena (document order).
    """

    tree: NodeTree = field(repr=False)
    index: int

    def __repr__(self) -> str:
        return f"Node({self.node_type.value}, {self.data!r}, index={self.index})"

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    @property
    def node_type(self) -> NodeType:
        return self.tree._record(self.index).node_type

    @property
    def data(self) -> str:
        """Key name for elements, scalar text for text nodes, empty for the document."""
        return self.tree._record(self.index).data

    @property
    def name(self) -> str:
        """Element name; empty for anonymous array items and non-elements."""
        record = self.tree._record(self.index)
        return record.data if record.node_type is NodeType.ELEMENT else ""

    @property
    def text(self) -> str:
        """Scalar text of a TEXT node; empty for every other kind."""
        record = self.tree._record(self.index)
        return record.data if record.node_type is NodeType.TEXT else ""

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Node | None:
        return self.tree._handle(self.tree._record(self.index).parent)

    @property
    def first_child(self) -> Node | None:
        return self.tree._handle(self.tree._record(self.index).first_child)

    @property
    def last_child(self) -> Node | None:
        return self.tree._handle(self.tree._record(self.index).last_child)

    @property
    def prev_sibling(self) -> Node | None:
        return self.tree._handle(self.tree._record(self.index).prev_sibling)

    @property
    def next_sibling(self) -> Node | None:
        return self.tree._handle(self.tree._record(self.index).next_sibling)

    # ------------------------------------------------------------------
    # Traversal and rendering
    # ------------------------------------------------------------------

    def iter_children(self) -> Iterator[Node]:
        """Yield direct children by walking the sibling chain."""
        records = self.tree._records
        child = records[self.index].first_child
        while child != NO_NODE:
            yield Node(self.tree, child)
            child = records[child].next_sibling

    def child_nodes(self) -> list[Node]:
        """Return the direct children in order (empty for text nodes)."""
        return list(self.iter_children())

    def inner_text(self) -> str:
        """Concatenate the text of every TEXT node below this one, pre-order."""
        records = self.tree._records
        parts: list[str] = []
        stack = [self.index]
        while stack:
            index = stack.pop()
            record = records[index]
            if record.node_type is NodeType.TEXT:
                parts.append(record.data)
                continue
            children: list[int] = []
            child = record.first_child
            while child != NO_NODE:
                children.append(child)
                child = records[child].next_sibling
            stack.extend(reversed(children))
        return "".join(parts)

    def render_markup(self) -> str:
        """Render this node's children as minimal, unescaped tags.

        Anonymous array items become ``<element>...</element>``, named elements
        ``<name>...</name>`` and text is written raw.  This is a debugging aid,
        not an XML serializer.
        """
        parts: list[str] = []
        for child in self.iter_children():
            _write_markup(parts, child)
        return "".join(parts)

    def output_xml(self) -> str:
        """Return ``render_markup()`` prefixed with the XML declaration."""
        return XML_DECLARATION + self.render_markup()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(self, expression: str) -> Node | None:
        """First node matching ``expression``; raises QuerySyntaxError on bad syntax."""
        from json_tree_query.query import query

        return query(self, expression)

    def query_all(self, expression: str) -> list[Node]:
        """All nodes matching ``expression``; raises QuerySyntaxError on bad syntax."""
        from json_tree_query.query import query_all

        return query_all(self, expression)

    def query_selector(self, selector: XPathExpr) -> Node | None:
        from json_tree_query.query import query_selector

        return query_selector(self, selector)

    def query_selector_all(self, selector: XPathExpr) -> list[Node]:
        from json_tree_query.query import query_selector_all

        return query_selector_all(self, selector)

    def select_element(self, expression: str) -> Node | None:
        """Like ``query`` but raises InvalidQueryUsage if the expression is invalid."""
        from json_tree_query.query import find_one

        return find_one(self, expression)

    def select_elements(self, expression: str) -> list[Node]:
        """Like ``query_all`` but raises InvalidQueryUsage on an invalid expression."""
        from json_tree_query.query import find

        return find(self, expression)


def _write_markup(parts: list[str], node: Node) -> None:
    if node.node_type is NodeType.TEXT:
        parts.append(node.data)
        return
    tag = node.data or ANONYMOUS_TAG
    parts.append(f"<{tag}>")
    for child in node.iter_children():
        _write_markup(parts, child)
    parts.append(f"</{tag}>")
