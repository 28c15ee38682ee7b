"""Tests for wren.http.headers — immutable, case-insensitive Headers."""

import pytest

from wren.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "application/json"))
        assert h["content-type"] == "application/json"
        assert h["CONTENT-TYPE"] == "application/json"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h(("Accept", "*/*"))["X-Missing"]

    def test_contains(self) -> None:
        h = _h(("Authorization", "Bearer x"))
        assert "authorization" in h
        assert "Authorization" in h
        assert 42 not in h  # type: ignore[operator]

    def test_first_value_and_list(self) -> None:
        h = _h(("Accept", "text/html"), ("accept", "application/json"))
        assert h["accept"] == "text/html"
        assert h.get_list("Accept") == ["text/html", "application/json"]
        assert len(h) == 1

    def test_get_list_missing(self) -> None:
        assert _h().get_list("accept") == []

    def test_raw_preserved(self) -> None:
        raw = ((b"X-Trace", b"1"),)
        assert Headers(raw).raw == raw

    def test_immutable(self) -> None:
        h = _h(("Accept", "*/*"))
        with pytest.raises(AttributeError, match="immutable"):
            h._values = {}  # type: ignore[misc]
