"""Tests for wren.routing.params — path parameter converter patterns."""

import pytest

from wren.errors import ConfigurationError
from wren.routing.params import CONVERTERS, converter_pattern


class TestConverters:
    def test_all_types_registered(self) -> None:
        assert set(CONVERTERS) == {"str", "int", "float", "path"}

    def test_str_excludes_slash(self) -> None:
        pattern = converter_pattern("str", path="/x/{v}")
        assert pattern.match("rex")
        assert not pattern.match("a/b")

    def test_int(self) -> None:
        pattern = converter_pattern("int", path="/x/{v:int}")
        assert pattern.match("42")
        assert not pattern.match("4a")

    def test_float(self) -> None:
        pattern = converter_pattern("float", path="/x/{v:float}")
        assert pattern.match("3.14")
        assert pattern.match("3")
        assert not pattern.match("3.")

    def test_path_matches_slashes(self) -> None:
        assert converter_pattern("path", path="/x/{v:path}").match("a/b/c")

    def test_unknown_converter(self) -> None:
        with pytest.raises(ConfigurationError, match=r"Unknown path converter 'uuid' in '/x'"):
            converter_pattern("uuid", path="/x")
