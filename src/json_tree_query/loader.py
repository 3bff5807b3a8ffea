"""Document loading: bytes, text, streams and URLs into a node tree.

Everything that can fail because of the environment happens here, before the
tree builder runs, and is reported as a ``DocumentError``:

- ``DocumentParseError``: malformed JSON, undecodable bytes or text, numbers
  too large for a float, or the non-standard ``NaN`` / ``Infinity`` literals
  that Python's ``json`` module would otherwise accept
- ``DocumentLoadError``: a failing stream read or HTTP transport error

No partial tree is ever returned.  ``load_url`` hands the response body to the
decoder whatever its status code or content type; a non-JSON body simply fails
to decode.
"""

from __future__ import annotations

import json
import logging
import math
from typing import IO, Any

import httpx

from json_tree_query.errors import DocumentLoadError, DocumentParseError
from json_tree_query.tree.builder import TreeBuilder
from json_tree_query.tree.nodes import Node

__all__ = [
    "DEFAULT_TIMEOUT",
    "decode_json",
    "load_url",
    "parse",
    "parse_bytes",
    "parse_string",
]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

# Module-level builder (stateless, safe to share across calls)
_builder = TreeBuilder()


def _reject_constant(name: str) -> Any:
    raise DocumentParseError(f"{name} is not a valid JSON number")


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise DocumentParseError(f"number {text} is out of range")
    return value


def decode_json(data: str | bytes | bytearray) -> Any:
    """Decode a JSON document into Python values.

    Args:
        data: JSON text, or bytes in UTF-8, UTF-16 or UTF-32.

    Returns:
        The decoded value (dict, list, str, int, float, bool or None).

    Raises:
        DocumentParseError: If ``data`` is not a well-formed JSON document.
    """
    try:
        return json.loads(
            data, parse_constant=_reject_constant, parse_float=_parse_float
        )
    except json.JSONDecodeError as exc:
        raise DocumentParseError(f"invalid JSON document: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise DocumentParseError(f"JSON document is not valid Unicode: {exc}") from exc


def parse_bytes(data: bytes | bytearray) -> Node:
    """Decode ``data`` and build its tree, returning the DOCUMENT node."""
    return _builder.build(decode_json(data))


def parse_string(text: str) -> Node:
    """Decode ``text`` and build its tree, returning the DOCUMENT node."""
    return _builder.build(decode_json(text))


def parse(stream: IO[bytes] | IO[str]) -> Node:
    """Read ``stream`` to the end, decode it and build its tree.

    Raises:
        DocumentLoadError:  If reading the stream fails.
        DocumentParseError: If the content is not a JSON document, or a text
                            stream cannot decode it.
    """
    try:
        data = stream.read()
    except UnicodeDecodeError as exc:
        raise DocumentParseError(f"JSON document is not valid Unicode: {exc}") from exc
    except OSError as exc:
        raise DocumentLoadError(f"failed to read JSON document: {exc}") from exc
    return _builder.build(decode_json(data))


def load_url(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.Client | None = None,
) -> Node:
    """Fetch ``url`` with HTTP GET and build a tree from the response body.

    Args:
        url:     Address of the JSON document.
        timeout: Seconds before the request is abandoned.  Ignored when a
                 ``client`` is supplied (the client's own timeout applies).
        client:  Optional ``httpx.Client`` to send the request with, e.g. one
                 carrying auth headers or a mock transport.

    Raises:
        DocumentLoadError:  On any transport error (DNS, connect, timeout, ...).
        DocumentParseError: If the body is not a JSON document.
    """
    try:
        if client is not None:
            response = client.get(url)
        else:
            response = httpx.get(url, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as exc:
        raise DocumentLoadError(f"failed to fetch {url}: {exc}") from exc

    logger.debug(
        "fetched %s: status=%d content-type=%s bytes=%d",
        url,
        response.status_code,
        response.headers.get("content-type", ""),
        len(response.content),
    )
    return parse_bytes(response.content)
