"""Shared fixtures: the sample documents used across the test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from json_tree_query import Node, parse_string
from json_tree_query.config import QueryConfig
from json_tree_query.query import configure_selector_cache

CARS_JSON = """{
    "name": "John",
    "age": 30,
    "motorist": true,
    "cars": [
        { "name": "Ford", "models": [ "Fiesta", "Focus", "Mustang" ] },
        { "name": "BMW", "models": [ "320", "X3", "X5" ] },
        { "name": "Fiat", "models": [ "500", "Panda" ] }
    ]
}"""


@pytest.fixture
def cars_json() -> str:
    """Raw text of the cars sample document."""
    return CARS_JSON


@pytest.fixture
def cars_doc() -> Node:
    """DOCUMENT node of the cars sample document."""
    return parse_string(CARS_JSON)


@pytest.fixture(autouse=True)
def _fresh_selector_cache() -> Iterator[None]:
    """Give every test an empty, default-sized selector cache."""
    configure_selector_cache(QueryConfig())
    yield
    configure_selector_cache(QueryConfig())
