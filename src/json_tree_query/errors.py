"""Exception hierarchy for json-tree-query.

Two families are kept apart so callers can tell a bad document from a bad
query:

- ``DocumentError``: the input bytes could not be read or decoded.
- ``QueryError``: a path expression failed to compile or to evaluate.

``InvalidQueryUsage`` sits outside both families on purpose.  It is raised only
by the convenience helpers (``find``, ``find_one``, ``Node.select_element``,
``Node.select_elements``) whose callers promise the expression is valid, so an
``except JsonTreeQueryError`` handler never swallows it.
"""

from __future__ import annotations

__all__ = [
    "DocumentError",
    "DocumentLoadError",
    "DocumentParseError",
    "InvalidQueryUsage",
    "JsonTreeQueryError",
    "QueryError",
    "QueryEvaluationError",
    "QuerySyntaxError",
]


class JsonTreeQueryError(Exception):
    """Base class for every recoverable error raised by this package."""


class DocumentError(JsonTreeQueryError):
    """The JSON document could not be obtained or decoded."""


class DocumentParseError(DocumentError, ValueError):
    """The input is not a well-formed JSON document."""


class DocumentLoadError(DocumentError):
    """Reading the input stream or fetching the URL failed."""


class QueryError(JsonTreeQueryError):
    """Base class for path expression failures."""


class QuerySyntaxError(QueryError, ValueError):
    """A path expression could not be compiled.

    Attributes:
        expression: The full expression text.
        position:   Zero-based character offset of the offending token.
    """

    def __init__(self, message: str, expression: str = "", position: int = 0) -> None:
        self.expression = expression
        self.position = position
        if expression:
            message = f"{message} at position {position} in {expression!r}"
        super().__init__(message)


class QueryEvaluationError(QueryError, TypeError):
    """A compiled expression produced a value of the wrong type at run time."""


class InvalidQueryUsage(RuntimeError):
    """A convenience query helper was handed an expression that does not compile."""
