"""Tests for document loading: strings, bytes, streams and URLs.

HTTP is exercised through ``httpx.MockTransport`` so no network is needed.
"""

from __future__ import annotations

import io
from typing import IO

import httpx
import pytest

from json_tree_query import (
    DocumentError,
    DocumentLoadError,
    DocumentParseError,
    JsonTreeQueryError,
    NodeType,
    load_url,
    parse,
    parse_bytes,
    parse_string,
)
from json_tree_query.loader import decode_json

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _client(body: bytes, content_type: str, status_code: int = 200) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code, content=body, headers={"Content-Type": content_type}
        )

    return httpx.Client(transport=httpx.MockTransport(handler))


class _BrokenStream(io.BytesIO):
    def read(self, size: int = -1) -> bytes:
        raise OSError("disk on fire")


# ---------------------------------------------------------------------------
# decode_json
# ---------------------------------------------------------------------------


class TestDecodeJson:
    def test_decodes_text(self) -> None:
        assert decode_json('{"a": [1, 2.5, null]}') == {"a": [1, 2.5, None]}

    def test_decodes_utf8_bytes(self) -> None:
        assert decode_json('{"a": "é"}'.encode()) == {"a": "é"}

    def test_decodes_utf16_bytes(self) -> None:
        assert decode_json('["x"]'.encode("utf-16")) == ["x"]

    @pytest.mark.parametrize("text", ["", "{", "[1,]", "{'a': 1}", "nul", "1 2"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(DocumentParseError, match="invalid JSON document"):
            decode_json(text)

    @pytest.mark.parametrize("text", ["NaN", "[Infinity]", '{"x": -Infinity}'])
    def test_non_standard_constants_rejected(self, text: str) -> None:
        with pytest.raises(DocumentParseError, match="not a valid JSON number"):
            decode_json(text)

    @pytest.mark.parametrize("text", ["1e400", '{"x": 1e400}', "[-1e999]"])
    def test_overflowing_number_rejected(self, text: str) -> None:
        with pytest.raises(DocumentParseError, match="out of range"):
            decode_json(text)

    def test_large_finite_number_kept(self) -> None:
        assert decode_json("1e300") == 1e300

    def test_invalid_utf8(self) -> None:
        with pytest.raises(DocumentParseError):
            decode_json(b'"\xff\xfe\xfa"')

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode_json("{")


# ---------------------------------------------------------------------------
# parse_string / parse_bytes / parse
# ---------------------------------------------------------------------------


class TestParse:
    def test_parse_string_returns_document(self, cars_json: str) -> None:
        doc = parse_string(cars_json)
        assert doc.node_type is NodeType.DOCUMENT
        names = [n.name for n in doc.child_nodes()]
        assert names == ["age", "cars", "motorist", "name"]

    def test_parse_bytes(self, cars_json: str) -> None:
        doc = parse_bytes(cars_json.encode())
        assert doc.output_xml() == parse_string(cars_json).output_xml()

    def test_parse_text_stream(self) -> None:
        doc = parse(io.StringIO("[1,2,3,4,5,6]"))
        assert ",".join(n.inner_text() for n in doc.child_nodes()) == "1,2,3,4,5,6"

    def test_parse_binary_stream(self) -> None:
        doc = parse(io.BytesIO(b'{"name": "John", "age": 31, "city": "New York"}'))
        values = {n.name: n.inner_text() for n in doc.child_nodes()}
        assert values == {"name": "John", "age": "31", "city": "New York"}

    def test_parse_object_array(self) -> None:
        doc = parse_string(
            '[{"name": "Ford", "models": ["Fiesta", "Focus", "Mustang"]},'
            ' {"name": "BMW", "models": ["320", "X3", "X5"]},'
            ' {"name": "Fiat", "models": ["500", "Panda"]}]'
        )
        cars = doc.child_nodes()
        assert len(cars) == 3
        models = {}
        for car in cars:
            name = car.select_element("name")
            assert name is not None
            models[name.inner_text()] = [
                n.inner_text() for n in car.select_elements("models/*")
            ]
        assert models == {
            "Ford": ["Fiesta", "Focus", "Mustang"],
            "BMW": ["320", "X3", "X5"],
            "Fiat": ["500", "Panda"],
        }

    def test_malformed_document(self) -> None:
        with pytest.raises(DocumentParseError):
            parse_string('{"name": ')

    def test_nan_literal_rejected(self) -> None:
        with pytest.raises(DocumentParseError):
            parse_string('{"x": NaN}')

    def test_overflowing_number_is_document_error(self) -> None:
        with pytest.raises(DocumentError):
            parse_string('{"x": 1e400}')

    def test_undecodable_text_stream(self) -> None:
        stream = io.TextIOWrapper(io.BytesIO(b'{"x": "\xff"}'), encoding="utf-8")
        with pytest.raises(DocumentParseError, match="not valid Unicode") as excinfo:
            parse(stream)
        assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)

    def test_read_failure(self) -> None:
        stream: IO[bytes] = _BrokenStream()
        with pytest.raises(DocumentLoadError, match="disk on fire") as excinfo:
            parse(stream)
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_errors_share_document_base(self) -> None:
        with pytest.raises(DocumentError):
            parse_string("{")
        with pytest.raises(JsonTreeQueryError):
            parse(_BrokenStream())


# ---------------------------------------------------------------------------
# load_url
# ---------------------------------------------------------------------------


class TestLoadUrl:
    @pytest.mark.parametrize(
        "content_type", ["application/json", "application/geo+json"]
    )
    def test_success(self, cars_json: str, content_type: str) -> None:
        with _client(cars_json.encode(), content_type) as client:
            doc = load_url("http://example.test/cars.json", client=client)
        age = doc.select_element("age")
        assert age is not None
        assert age.inner_text() == "30"

    def test_content_type_ignored(self) -> None:
        with _client(b"[1, 2]", "text/plain") as client:
            doc = load_url("http://example.test/data", client=client)
        assert len(doc.child_nodes()) == 2

    def test_status_code_ignored(self) -> None:
        with _client(b'{"error": "missing"}', "application/json", 404) as client:
            doc = load_url("http://example.test/missing", client=client)
        error = doc.select_element("error")
        assert error is not None
        assert error.inner_text() == "missing"

    def test_non_json_body(self) -> None:
        with _client(b"<html></html>", "text/html") as client:
            with pytest.raises(DocumentParseError):
                load_url("http://example.test/page", client=client)

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(DocumentLoadError, match="failed to fetch") as excinfo:
                load_url("http://example.test/cars.json", client=client)
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)

    def test_sends_get_to_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"{}")

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            load_url("http://example.test/doc.json", client=client)
        (request,) = seen
        assert request.method == "GET"
        assert str(request.url) == "http://example.test/doc.json"

    def test_default_client_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple[str, float]] = []

        def fake_get(
            url: str, *, timeout: float, follow_redirects: bool
        ) -> httpx.Response:
            calls.append((url, timeout))
            return httpx.Response(200, content=b'{"a": 1}')

        monkeypatch.setattr(httpx, "get", fake_get)
        doc = load_url("http://example.test/a.json", timeout=2.5)
        assert calls == [("http://example.test/a.json", 2.5)]
        assert doc.inner_text() == "1"
