"""Tests for wren.http.response — Response chaining and payload serialization."""

import pytest

from wren.http.response import (
    BINARY_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    Response,
    serialize_payload,
)


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == b""
        assert r.status == 200
        assert r.content_type is None
        assert r.headers == ()

    def test_with_status(self) -> None:
        assert Response().with_status(201).status == 201

    def test_chained_headers(self) -> None:
        r = Response().with_header("A", "1").with_header("B", "2")
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_headers_dict(self) -> None:
        r = Response().with_headers({"A": "1", "B": "2"})
        assert ("A", "1") in r.headers
        assert ("B", "2") in r.headers

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("text/csv").content_type == "text/csv"

    def test_transformations_return_new_instance(self) -> None:
        original = Response()
        changed = original.with_status(404)
        assert original.status == 200
        assert changed is not original

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Response().status = 500  # type: ignore[misc]


class TestBodyHelpers:
    def test_text_and_bytes(self) -> None:
        r = Response("héllo")
        assert r.body_bytes == "héllo".encode()
        assert r.text == "héllo"

    def test_json(self) -> None:
        assert Response(b'{"id": 1}').json() == {"id": 1}

    def test_header_lookup_case_insensitive(self) -> None:
        r = Response(headers=(("X-Total", "3"),), content_type="text/plain")
        assert r.header("x-total") == "3"
        assert r.header("Content-Type") == "text/plain"
        assert r.header("missing") is None


class TestSerializePayload:
    def test_none(self) -> None:
        assert serialize_payload(None) == (b"", None)

    def test_str(self) -> None:
        assert serialize_payload("hi") == (b"hi", TEXT_CONTENT_TYPE)

    def test_bytes(self) -> None:
        assert serialize_payload(b"\x00\x01") == (b"\x00\x01", BINARY_CONTENT_TYPE)

    @pytest.mark.parametrize("payload", [{"id": 1}, [1, 2], 3, True])
    def test_json_values(self, payload: object) -> None:
        body, content_type = serialize_payload(payload)
        assert content_type == JSON_CONTENT_TYPE
        assert body.decode() != ""
