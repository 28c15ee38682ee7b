"""Service registration: turn a ``{"<METHOD> <path>": handler}`` map into routes.

A service declaration pairs every operation of a compiled schema table with
its handler::

    service = {
        "GET /pets": list_pets,
        "POST /pets": {"handler": create_pet, "name": "create_pet"},
    }
    register_service(app, table, service)

Values are either the handler itself or a mapping of route options with a
callable ``handler`` entry. ``register_service`` installs the schema
resolver and the operation-path annotator on *app* (the app or a route
group), validates every entry, and only then registers the routes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from wren.errors import ConfigurationError
from wren.schema.resolve import SchemaResolver
from wren.schema.table import SchemaTable, thaw

if TYPE_CHECKING:
    from wren.app import RouteGroup
    from wren.http.reply import Reply
    from wren.http.request import Request

logger = logging.getLogger("wren.service")

HTTP_METHODS = frozenset({"DELETE", "GET", "HEAD", "PATCH", "POST", "PUT", "OPTIONS"})

# Route options owned by the declaration key; never taken from an options mapping.
_RESERVED_OPTIONS = frozenset({"handler", "method", "url"})


@dataclass(frozen=True, slots=True)
class RouteDeclaration:
    """One validated service entry, ready to be registered."""

    key: str
    method: str
    path: str
    handler: Callable[..., Any]
    options: dict[str, Any] = field(default_factory=dict)


def parse_declaration(key: str, value: Any) -> RouteDeclaration:
    """Validate one service entry.

    The key is split on its first space: the head is the method, the rest
    (spaces kept) the path. Raises ``ConfigurationError`` for an unknown
    method or a value that is neither a handler nor an options mapping with
    a callable ``handler``.
    """
    method, _, path = key.partition(" ")
    http_method = method.upper()
    if not method or http_method not in HTTP_METHODS:
        msg = f"Wrong configuration for {key}, method [{method}] is unknown HTTP method"
        raise ConfigurationError(msg)

    if isinstance(value, Mapping):
        handler = value.get("handler")
        if not callable(handler):
            msg = f"Unknown handler for {key}: options must include a callable 'handler'"
            raise ConfigurationError(msg)
        options = {k: v for k, v in value.items() if k not in _RESERVED_OPTIONS}
        return RouteDeclaration(key, http_method, path, handler, options)

    if callable(value):
        return RouteDeclaration(key, http_method, path, value)

    msg = f"Unknown handler for {key}: expected a callable or an options mapping, got {type(value).__name__}"
    raise ConfigurationError(msg)


def annotate_operation_path(request: Request, reply: Reply) -> None:
    """``on_request`` hook: record ``"<METHOD> <route template>"`` on the request."""
    request.context.operation_path = f"{request.method} {request.route_path}"


def register_service(
    app: RouteGroup,
    table: SchemaTable | Mapping[str, Any],
    service: Mapping[str, Any],
    *,
    security: Mapping[str, Any] | None = None,
) -> list[RouteDeclaration]:
    """Register every operation of *service* on *app* against *table*.

    Args:
        app: The app or route group to register on. The schema resolver
            only attaches schemas to routes registered under this group's
            prefix.
        table: Compiled schema table, or the mapping it is built from.
        service: ``"<METHOD> <path>"`` to handler (or options mapping).
        security: Optional route key to security requirement map, merged
            into resolved schemas as documentation.

    Returns:
        The registered declarations, in service order.

    Raises:
        ConfigurationError: The shared schema has no ``$id`` (or it is
            already registered), or any service entry is invalid. Nothing
            is registered in that case.
    """
    if not isinstance(table, SchemaTable):
        table = SchemaTable.from_mapping(table)

    if not table.schema_id:
        msg = "Schema was ignored, $id is missing; service schema was not registered"
        raise ConfigurationError(msg)

    declarations = [parse_declaration(key, value) for key, value in service.items()]
    _check_unique(app, declarations)

    app.add_schema(thaw(table.schema))
    app.add_hook("on_request", annotate_operation_path)
    app.add_hook("on_route", SchemaResolver(table, prefix=app.prefix, security=security))

    for decl in declarations:
        app.add_route(decl.method, decl.path, decl.handler, **decl.options)
        logger.debug("Registered %s", decl.key)

    logger.info(
        "Registered %d operations for schema %r under prefix %r",
        len(declarations),
        table.schema_id,
        app.prefix or "/",
    )
    return declarations


def _check_unique(app: RouteGroup, declarations: list[RouteDeclaration]) -> None:
    """Reject collisions with existing routes, or between two entries."""
    seen: dict[tuple[str, str], str] = {}
    for decl in declarations:
        if app.has_route(decl.method, decl.path):
            msg = f"Route already registered: {decl.key}"
            raise ConfigurationError(msg)
        slot = (decl.method, (app.prefix + decl.path) or "/")
        if slot in seen:
            msg = f"Service declares {decl.key!r} and {seen[slot]!r} for the same route"
            raise ConfigurationError(msg)
        seen[slot] = decl.key
