"""json-tree-query - XPath queries over JSON documents via an XML-like node tree."""

from __future__ import annotations

from json_tree_query.config import QueryConfig
from json_tree_query.errors import (
    DocumentError,
    DocumentLoadError,
    DocumentParseError,
    InvalidQueryUsage,
    JsonTreeQueryError,
    QueryError,
    QueryEvaluationError,
    QuerySyntaxError,
)
from json_tree_query.loader import load_url, parse, parse_bytes, parse_string
from json_tree_query.navigator import JsonNodeNavigator, create_xpath_navigator
from json_tree_query.protocols import NodeKind, NodeNavigator
from json_tree_query.query import (
    configure_selector_cache,
    find,
    find_one,
    get_query,
    query,
    query_all,
    query_selector,
    query_selector_all,
)
from json_tree_query.tree import Node, NodeTree, NodeType, TreeBuilder
from json_tree_query.xpath import XPathExpr

__version__: str = "0.1.0"
__all__: list[str] = [
    "DocumentError",
    "DocumentLoadError",
    "DocumentParseError",
    "InvalidQueryUsage",
    "JsonNodeNavigator",
    "JsonTreeQueryError",
    "Node",
    "NodeKind",
    "NodeNavigator",
    "NodeTree",
    "NodeType",
    "QueryConfig",
    "QueryError",
    "QueryEvaluationError",
    "QuerySyntaxError",
    "TreeBuilder",
    "XPathExpr",
    "configure_selector_cache",
    "create_xpath_navigator",
    "find",
    "find_one",
    "get_query",
    "load_url",
    "parse",
    "parse_bytes",
    "parse_string",
    "query",
    "query_all",
    "query_selector",
    "query_selector_all",
]
