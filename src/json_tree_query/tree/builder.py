"""TreeBuilder: converts a decoded JSON value into a NodeTree.

One recursive walk creates every node.  Each call receives the node the value
belongs under, and every node it creates is appended as that parent's last
child: the first child if the parent has none yet, otherwise the next sibling
of the current last child.  Siblings at one level are therefore emitted and
linked in order, and records land in the arena in document order.

Object keys are sorted before their elements are emitted.  JSON objects are
unordered, so sorting is what makes traversal and query results reproducible.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from json_tree_query.tree.nodes import NO_NODE, Node, NodeTree, NodeType
from json_tree_query.tree.scalars import format_scalar

__all__ = ["JsonValue", "TreeBuilder"]

logger = logging.getLogger(__name__)

# Type alias for valid JSON values
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


@dataclass
class TreeBuilder:
    """Converts any valid JSON value into a DOCUMENT-rooted node tree.

    Mapping of JSON kinds to nodes:
        array  -> one anonymous ELEMENT per item, in array order
        object -> one ELEMENT per key named after it, in ascending key order
        string, number, boolean -> a TEXT node holding the canonical text
        null   -> nothing

    Example::
        builder = TreeBuilder()
        doc = builder.build({"name": "John", "age": 31})
        [n.name for n in doc.child_nodes()]   # ["age", "name"]
        doc.child_nodes()[0].inner_text()     # "31"
    """

    def build(self, value: JsonValue) -> Node:
        """Convert a JSON value to a node tree.

        Args:
            value: Any decoded JSON value (dict, list, str, int, float, bool, None).

        Returns:
            The DOCUMENT node of a new ``NodeTree``.

        Raises:
            TypeError:  If the value graph contains a non-JSON type or a
                        non-string object key.
            ValueError: If it contains a NaN or infinite float.
        """
        tree = NodeTree()
        document = tree._append(NodeType.DOCUMENT, "")
        self._parse_value(tree, value, document)
        logger.debug("built JSON tree with %d nodes", len(tree))
        return tree.root

    def _parse_value(
        self,
        tree: NodeTree,
        value: Any,
        parent: int,
    ) -> None:
        # bool passes the int check too; format_scalar tests it first
        if isinstance(value, (bool, str, int, float)):
            text = format_scalar(value)
            self._append_child(tree, parent, NodeType.TEXT, text)
            return

        if isinstance(value, Mapping):
            for key in self._sorted_keys(value):
                node = self._append_child(tree, parent, NodeType.ELEMENT, key)
                self._parse_value(tree, value[key], node)
            return

        if isinstance(value, (list, tuple)):
            for item in value:
                node = self._append_child(tree, parent, NodeType.ELEMENT, "")
                self._parse_value(tree, item, node)
            return

        if value is None:
            return

        raise TypeError(f"Unsupported JSON value type: {type(value)!r}")

    @staticmethod
    def _sorted_keys(obj: Mapping[Any, Any]) -> list[str]:
        keys = list(obj)
        for key in keys:
            if not isinstance(key, str):
                raise TypeError(f"JSON object keys must be str, got {type(key)!r}")
        return sorted(keys)

    @staticmethod
    def _append_child(
        tree: NodeTree, parent: int, node_type: NodeType, data: str
    ) -> int:
        index = tree._append(node_type, data)
        node = tree._record(index)
        parent_node = tree._record(parent)
        node.parent = parent
        if parent_node.first_child == NO_NODE:
            parent_node.first_child = index
        else:
            last = parent_node.last_child
            tree._record(last).next_sibling = index
            node.prev_sibling = last
        parent_node.last_child = index
        return index
