"""Immutable HTTP request.

Frozen metadata with async body access. The only per-request mutable
piece is ``context``, which hooks annotate before the handler runs.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from wren._internal.asgi import Receive, Scope
from wren.http.headers import Headers
from wren.http.query import QueryParams

if TYPE_CHECKING:
    from wren.routing.route import RouteMatch


@dataclass(slots=True)
class RequestContext:
    """Per-request annotations written by ``on_request`` hooks.

    ``operation_path`` is ``"<METHOD> <route template>"``, set by the
    operation-path annotator that ``register_service`` installs.
    """

    operation_path: str | None = None


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is read asynchronously via ``.body()``, ``.json()``, ``.text()``.

    ``route_path`` is the template of the matched route (``/pets/{id}``),
    not the literal URL. It is ``None`` until the router has matched.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    route_path: str | None = None
    context: RequestContext = field(default_factory=RequestContext, compare=False)

    # Private: body cache shared between copies made by with_match()
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def operation_path(self) -> str | None:
        """Shortcut for ``request.context.operation_path``."""
        return self.context.operation_path

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Request path plus query string."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive channel is consumed once; later calls return the
        cached bytes.
        """
        if "_body" not in self._cache:
            self._cache["_body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["_body"]

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        return (await self.body()).decode("utf-8")

    # -- Factories --

    def with_match(self, match: RouteMatch) -> Request:
        """Return a copy bound to a router match (params + route template)."""
        return replace(self, path_params=match.path_params, route_path=match.route.path)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )
