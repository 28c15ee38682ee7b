"""Compiled router with trie-based path matching.

Routes are added while the app is being set up and the router is frozen
when the app freezes. Matching walks one trie level per path segment,
preferring static segments over parameters over catch-alls.
"""

import re
from dataclasses import dataclass, field

from wren.errors import ConfigurationError, MethodNotAllowed, NotFound
from wren.routing.params import converter_pattern
from wren.routing.route import PathSegment, Route, RouteMatch

_FOREIGN_PARAM = re.compile(r"^(?:<[^>]+>|:\w+)$")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/pets"            -> [PathSegment("pets")]
        "/pets/{id}"       -> [PathSegment("pets"), PathSegment("{id}", is_param=True, ...)]
        "/pets/{id:int}"   -> [..., PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{rest:path}" -> [..., PathSegment("{rest:path}", is_param=True, param_type="path")]

    The root (``""`` or ``"/"``) parses to no segments.
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if _FOREIGN_PARAM.match(part):
            msg = (
                f"Route {path!r} uses {part!r}; path parameters are written "
                f"as {{param}} (or {{param:int}})."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            name, _, param_type = part[1:-1].partition(":")
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=name,
                    param_type=param_type or "str",
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


@dataclass(slots=True)
class _Node:
    """A trie node. Mutable until the router is compiled."""

    static: dict[str, "_Node"] = field(default_factory=dict)
    param: "_ParamEdge | None" = None
    catch_all: "_ParamEdge | None" = None
    routes: dict[str, Route] = field(default_factory=dict)


@dataclass(slots=True)
class _ParamEdge:
    name: str
    pattern: re.Pattern[str]
    node: _Node


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/pets", handler, frozenset({"GET"})))
        router.add(Route("/pets/{id:int}", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/pets/42")
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _Node()
        self._routes: list[Route] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before ``compile()``."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if not seg.is_param:
                node = node.static.setdefault(seg.value, _Node())
                continue
            name = seg.param_name or seg.param_type
            if seg.param_type == "path":
                if node.catch_all is None:
                    node.catch_all = _ParamEdge(name, converter_pattern("path", path=route.path), _Node())
                node = node.catch_all.node
                break
            if node.param is None:
                node.param = _ParamEdge(name, converter_pattern(seg.param_type, path=route.path), _Node())
            elif node.param.name != name:
                msg = (
                    f"Route {route.path!r} names parameter {name!r} where another "
                    f"route already uses {node.param.name!r} at the same position."
                )
                raise ConfigurationError(msg)
            node = node.param.node

        for method in route.methods:
            if method in node.routes:
                msg = (
                    f"Route {route.path!r} collides with {node.routes[method].path!r} "
                    f"for {method}."
                )
                raise ConfigurationError(msg)
            node.routes[method] = route
        self._routes.append(route)

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        found = self._walk(self._root, parts, {})
        if found is None:
            raise NotFound(f"No route matches {method} {path!r}")

        node, params = found
        route = node.routes.get(method)
        if route is None:
            raise MethodNotAllowed(frozenset(node.routes))
        return RouteMatch(route=route, path_params=params)

    def _walk(
        self,
        node: _Node,
        parts: list[str],
        params: dict[str, str],
    ) -> tuple[_Node, dict[str, str]] | None:
        if not parts:
            return (node, params) if node.routes else None

        head, rest = parts[0], parts[1:]

        child = node.static.get(head)
        if child is not None:
            found = self._walk(child, rest, params)
            if found is not None:
                return found

        edge = node.param
        if edge is not None and edge.pattern.match(head):
            found = self._walk(edge.node, rest, {**params, edge.name: head})
            if found is not None:
                return found

        edge = node.catch_all
        if edge is not None and edge.node.routes:
            return edge.node, {**params, edge.name: "/".join(parts)}

        return None
