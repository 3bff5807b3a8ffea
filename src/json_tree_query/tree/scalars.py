"""Canonical text rendering for JSON scalars.

Text nodes store scalars as strings.  The rendering is fixed so that the same
document always yields the same tree text:

- strings are kept verbatim
- booleans become "true" / "false"
- integers keep every digit ("365823929453", never "3.65823929453e+11")
- floats use the shortest decimal that round-trips, never exponent notation,
  and drop a trailing ".0" (30.0 -> "30", 1e21 -> "1000000000000000000000")

Non-finite floats have no JSON spelling and are rejected with ValueError.
"""

from __future__ import annotations

import math

import numpy as np

__all__ = ["format_bool", "format_number", "format_scalar"]


def format_bool(value: bool) -> str:
    """Render a boolean as its JSON literal."""
    return "true" if value else "false"


def format_number(value: int | float) -> str:
    """Render a JSON number without exponent notation.

    Args:
        value: An ``int`` (rendered exactly) or a finite ``float``.

    Returns:
        The positional decimal string.

    Raises:
        ValueError: If ``value`` is NaN or infinite.
    """
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        msg = f"non-finite number {value!r} cannot be represented in a JSON tree"
        raise ValueError(msg)
    # unique=True picks the shortest digits that round-trip to the same double;
    # trim="-" removes the trailing "." left on integral values.
    return np.format_float_positional(value, unique=True, trim="-")


def format_scalar(value: str | int | float | bool) -> str:
    """Render any JSON scalar as node text.

    bool is dispatched before int because bool subclasses int.
    """
    if isinstance(value, bool):
        return format_bool(value)
    if isinstance(value, str):
        return value
    return format_number(value)
