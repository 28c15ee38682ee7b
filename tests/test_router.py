"""Tests for wren.routing.router — compiled trie-based router."""

import pytest

from wren.errors import ConfigurationError, MethodNotAllowed, NotFound
from wren.routing.route import Route
from wren.routing.router import Router, parse_path


def _handler(request, reply):
    return reply.send("ok")


def _route(path: str, methods: frozenset[str] | None = None) -> Route:
    return Route(path=path, handler=_handler, methods=methods or frozenset({"GET"}))


class TestParsePath:
    def test_static(self) -> None:
        segments = parse_path("/pets")
        assert len(segments) == 1
        assert segments[0].value == "pets"
        assert segments[0].is_param is False

    def test_param(self) -> None:
        segments = parse_path("/pets/{id}")
        assert len(segments) == 2
        assert segments[1].is_param is True
        assert segments[1].param_name == "id"
        assert segments[1].param_type == "str"

    def test_typed_param(self) -> None:
        segments = parse_path("/pets/{id:int}")
        assert segments[1].param_type == "int"

    def test_path_param(self) -> None:
        segments = parse_path("/files/{rest:path}")
        assert segments[1].param_type == "path"
        assert segments[1].param_name == "rest"

    @pytest.mark.parametrize("path", ["/", ""])
    def test_root(self, path: str) -> None:
        assert parse_path(path) == []

    @pytest.mark.parametrize("part", ["<id>", ":id"])
    def test_rejects_foreign_param_syntax(self, part: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_path(f"/pets/{part}")
        assert "{param}" in str(exc_info.value)
        assert part in str(exc_info.value)


class TestRouterStaticRoutes:
    def test_root(self) -> None:
        r = Router()
        r.add(_route("/"))
        r.compile()

        match = r.match("GET", "/")
        assert match.path_params == {}
        assert match.route.path == "/"

    def test_multiple_routes(self) -> None:
        r = Router()
        r.add(_route("/pets"))
        r.add(_route("/owners"))
        r.compile()

        assert r.match("GET", "/pets").route.path == "/pets"
        assert r.match("GET", "/owners").route.path == "/owners"

    def test_trailing_slash_ignored(self) -> None:
        r = Router()
        r.add(_route("/pets"))
        r.compile()

        assert r.match("GET", "/pets/").route.path == "/pets"

    def test_routes_in_registration_order(self) -> None:
        r = Router()
        r.add(_route("/b"))
        r.add(_route("/a"))
        assert [route.path for route in r.routes] == ["/b", "/a"]


class TestRouterParams:
    def test_string_param(self) -> None:
        r = Router()
        r.add(_route("/pets/{name}"))
        r.compile()

        assert r.match("GET", "/pets/rex").path_params == {"name": "rex"}

    def test_int_param_rejects_non_digit(self) -> None:
        r = Router()
        r.add(_route("/pets/{id:int}"))
        r.compile()

        assert r.match("GET", "/pets/42").path_params == {"id": "42"}
        with pytest.raises(NotFound):
            r.match("GET", "/pets/rex")

    def test_multiple_params(self) -> None:
        r = Router()
        r.add(_route("/owners/{owner_id:int}/pets/{pet_id:int}"))
        r.compile()

        match = r.match("GET", "/owners/1/pets/42")
        assert match.path_params == {"owner_id": "1", "pet_id": "42"}

    def test_path_param(self) -> None:
        r = Router()
        r.add(_route("/files/{rest:path}"))
        r.compile()

        match = r.match("GET", "/files/docs/api/index.html")
        assert match.path_params == {"rest": "docs/api/index.html"}

    def test_static_preferred_over_param(self) -> None:
        r = Router()
        r.add(_route("/pets/mine"))
        r.add(_route("/pets/{id}"))
        r.compile()

        assert r.match("GET", "/pets/mine").route.path == "/pets/mine"
        assert r.match("GET", "/pets/42").route.path == "/pets/{id}"

    def test_conflicting_param_names(self) -> None:
        r = Router()
        r.add(_route("/pets/{id}"))
        with pytest.raises(ConfigurationError, match="'petId'"):
            r.add(_route("/pets/{petId}/toys", frozenset({"POST"})))

    def test_unknown_converter(self) -> None:
        r = Router()
        with pytest.raises(ConfigurationError, match="Unknown path converter 'uuid'"):
            r.add(_route("/pets/{id:uuid}"))


class TestRouterMethods:
    def test_method_filtering(self) -> None:
        r = Router()
        r.add(_route("/pets", frozenset({"GET"})))
        r.add(_route("/pets", frozenset({"POST"})))
        r.compile()

        assert "GET" in r.match("GET", "/pets").route.methods
        assert "POST" in r.match("POST", "/pets").route.methods

    def test_method_not_allowed(self) -> None:
        r = Router()
        r.add(_route("/pets", frozenset({"GET", "HEAD"})))
        r.compile()

        with pytest.raises(MethodNotAllowed) as exc_info:
            r.match("POST", "/pets")

        err = exc_info.value
        assert err.status == 405
        assert dict(err.headers)["Allow"] == "GET, HEAD"

    def test_same_method_twice_collides(self) -> None:
        r = Router()
        r.add(_route("/pets"))
        with pytest.raises(ConfigurationError, match="collides"):
            r.add(_route("/pets/"))


class TestRouterErrors:
    def test_not_found(self) -> None:
        r = Router()
        r.add(_route("/pets"))
        r.compile()

        with pytest.raises(NotFound) as exc_info:
            r.match("GET", "/owners")
        assert exc_info.value.status == 404

    def test_add_after_compile_raises(self) -> None:
        r = Router()
        r.compile()

        with pytest.raises(RuntimeError, match="Cannot add routes after compilation"):
            r.add(_route("/pets"))
