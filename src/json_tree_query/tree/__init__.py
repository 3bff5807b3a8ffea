"""Tree subpackage for JSON-to-node-tree conversion.

Re-exports the public API for the tree module:
- Node: immutable handle to one node of a built tree
- NodeTree: arena holding every node of a document
- NodeType: StrEnum of the three node kinds (DOCUMENT, ELEMENT, TEXT)
- TreeBuilder: converts any decoded JSON value into a node tree
- format_scalar: canonical text rendering of JSON scalars
"""

from json_tree_query.tree.builder import TreeBuilder
from json_tree_query.tree.nodes import Node, NodeTree, NodeType
from json_tree_query.tree.scalars import format_scalar

__all__ = ["Node", "NodeTree", "NodeType", "TreeBuilder", "format_scalar"]
