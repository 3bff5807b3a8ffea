"""XPath 1.0 subset engine.

The engine evaluates over the ``NodeNavigator`` protocol only and knows
nothing about JSON.  Re-exports:

- compile: text -> XPathExpr (raises QuerySyntaxError)
- XPathExpr: compiled expression with ``select()`` and ``evaluate()``
- Axis: the supported axes
- FUNCTIONS: name -> FunctionSpec table of the core function library
"""

from json_tree_query.xpath.ast import Axis
from json_tree_query.xpath.expression import XPathExpr, compile
from json_tree_query.xpath.functions import FUNCTIONS, XPathValue

__all__ = ["FUNCTIONS", "Axis", "XPathExpr", "XPathValue", "compile"]
