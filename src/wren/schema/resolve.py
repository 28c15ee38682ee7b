"""Route schema resolution — attach schema-table fragments to routes.

``SchemaResolver`` is an ``on_route`` hook. For every route registered on
the group it was installed for, it looks the route up in the schema table
and, on a hit, replaces the route's schema with a merge of:

1. the schema the route was declared with,
2. the security requirement for the route (documentation only),
3. the fragment's request shape (``querystring``, ``params``, ``headers``,
   ``body`` become top-level schema keys),
4. the fragment's ``response`` map, when the fragment has one.

Later entries win on key collisions. A miss leaves the route untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from wren.schema.table import SchemaTable, freeze, thaw

if TYPE_CHECKING:
    from wren.routing.route import RouteOptions

logger = logging.getLogger("wren.schema")


def request_shape(fragment: Mapping[str, Any]) -> Mapping[str, Any]:
    """The request-shape keys of a fragment.

    Accepts both the plain form (``{"params": ..., "body": ...}``) and the
    compiled JSON Schema form (``{"type": "object", "properties": {...}}``).
    """
    request = fragment.get("request")
    if not isinstance(request, Mapping):
        return {}
    properties = request.get("properties")
    if isinstance(properties, Mapping):
        return properties
    return request


def merge_schema(
    existing: Mapping[str, Any] | None,
    fragment: Mapping[str, Any],
    security: Any = None,
) -> dict[str, Any]:
    """Merge a table fragment over a route's declared schema.

    Returns a new dict; neither *existing* nor *fragment* is modified.
    """
    merged: dict[str, Any] = dict(existing or {})
    if security is not None:
        merged["security"] = thaw(security)
    merged.update(thaw(request_shape(fragment)))
    if fragment.get("response") is not None:
        merged["response"] = thaw(fragment["response"])
    return merged


class SchemaResolver:
    """``on_route`` hook that resolves route schemas from a ``SchemaTable``.

    Bound to one route-group prefix: routes registered under a different
    prefix (nested groups with their own tables) are skipped.

    Usage::

        app.add_hook("on_route", SchemaResolver(table, prefix=app.prefix))
    """

    __slots__ = ("prefix", "security", "table")

    def __init__(
        self,
        table: SchemaTable,
        *,
        prefix: str = "",
        security: Mapping[str, Any] | None = None,
    ) -> None:
        self.table = table
        self.prefix = prefix
        self.security: Mapping[str, Any] = freeze(security or {})

    def resolve(
        self,
        method: str,
        route_path: str,
        existing: Mapping[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Resolved schema for a route, or *existing* unchanged on a miss."""
        key, fragment = self.table.lookup(method, route_path)
        if fragment is None:
            logger.debug("No schema fragment for %r", key)
            return dict(existing) if existing is not None else None
        logger.debug("Attaching schema fragment %r", key)
        return merge_schema(existing, fragment, self.security.get(key))

    def __call__(self, options: RouteOptions) -> None:
        if options.prefix != self.prefix:
            return
        options.schema = self.resolve(options.method, options.route_path, options.schema)
