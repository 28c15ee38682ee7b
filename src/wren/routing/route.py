"""Route records: the mutable registration record and the frozen compiled route."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from wren.schema.contract import ResponseContract


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/pets``        (is_param=False)
    Param:   ``/{id}``        (is_param=True, param_name="id")
    Typed:   ``/{id:int}``    (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(slots=True)
class RouteOptions:
    """A route as seen by ``on_route`` hooks, before it is stored.

    Hooks may replace or edit ``schema`` (and ``config``); everything else
    is informational. ``route_path`` is the path exactly as passed to
    ``add_route`` (``""`` and ``"/"`` stay distinct here); ``url`` is the
    full template including the group prefix.
    """

    method: str
    url: str
    route_path: str
    prefix: str
    handler: Callable[..., Any]
    schema: dict[str, Any] | None = None
    name: str | None = None
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created when the app freezes, from the ``RouteOptions`` the hooks left
    behind. ``path`` is the route template used for matching and for
    ``request.route_path``; the root is always ``"/"``.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None
    schema: dict[str, Any] | None = None
    request_hooks: tuple[Callable[..., Any], ...] = ()
    config: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def contract(self) -> ResponseContract:
        """Response contract derived from the resolved schema."""
        label = f"{'|'.join(sorted(self.methods))} {self.path}"
        return ResponseContract.from_schema(label, self.schema)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
