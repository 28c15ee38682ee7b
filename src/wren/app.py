"""Wren application class.

Mutable during setup (route registration, hooks, shared schemas).
Frozen at runtime when app.run(), app.routes or __call__() is first used.

Routes are registered on the app or on a route group. A group is a
registration scope with a path prefix and its own hooks; it inherits the
hooks of every ancestor::

    app = App()
    v1 = app.group("/v1")

    @v1.on_request
    def stamp(request, reply):
        ...

    v1.add_route("GET", "/pets", list_pets)   # served at /v1/pets
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.types import ErrorHandler, Handler, RequestHook, RouteHook
from wren.config import AppConfig
from wren.errors import ConfigurationError
from wren.routing.route import Route, RouteOptions
from wren.routing.router import Router
from wren.server.handler import handle_request

logger = logging.getLogger("wren.server")

HOOK_NAMES = frozenset({"on_route", "on_request"})


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    options: RouteOptions
    group: RouteGroup
    request_hooks: tuple[RequestHook, ...] = ()


def _normalize_prefix(prefix: str) -> str:
    prefix = prefix.strip()
    if not prefix or prefix == "/":
        return ""
    if not prefix.startswith("/"):
        msg = f"Group prefix must start with '/': {prefix!r}"
        raise ConfigurationError(msg)
    return prefix.rstrip("/")


class RouteGroup:
    """A registration scope sharing a path prefix and a set of hooks.

    Created with ``App.group()`` (or ``RouteGroup.group()`` for nesting).
    Hooks registered on a group apply to its routes and to the routes of
    its descendants, after the hooks of its ancestors.
    """

    __slots__ = ("_request_hooks", "_route_hooks", "parent", "prefix")

    def __init__(self, prefix: str = "", parent: RouteGroup | None = None) -> None:
        self.prefix = prefix
        self.parent = parent
        self._route_hooks: list[RouteHook] = []
        self._request_hooks: list[RequestHook] = []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} prefix={self.prefix!r}>"

    @property
    def app(self) -> App:
        """The application this group belongs to."""
        group = self
        while group.parent is not None:
            group = group.parent
        assert isinstance(group, App)
        return group

    def group(self, prefix: str) -> RouteGroup:
        """Create a child group whose prefix extends this one."""
        self.app._check_not_frozen()
        return RouteGroup(self.prefix + _normalize_prefix(prefix), parent=self)

    # -- Hooks --

    def add_hook(self, name: str, hook: Callable[..., Any]) -> None:
        """Register an ``on_route`` or ``on_request`` hook on this group.

        ``on_route`` hooks run once per route registered after them, with the
        mutable ``RouteOptions``. ``on_request`` hooks run before the handler
        of every route of the group, as ``hook(request, reply)``.
        """
        self.app._check_not_frozen()
        if name == "on_route":
            self._route_hooks.append(hook)
        elif name == "on_request":
            self._request_hooks.append(hook)
        else:
            msg = f"Unknown hook {name!r}; expected one of {sorted(HOOK_NAMES)}"
            raise ConfigurationError(msg)

    def on_route(self, func: RouteHook) -> RouteHook:
        """Register an ``on_route`` hook via decorator."""
        self.add_hook("on_route", func)
        return func

    def on_request(self, func: RequestHook) -> RequestHook:
        """Register an ``on_request`` hook via decorator."""
        self.add_hook("on_request", func)
        return func

    def _lineage(self) -> list[RouteGroup]:
        """This group and its ancestors, root first."""
        chain: list[RouteGroup] = []
        group: RouteGroup | None = self
        while group is not None:
            chain.append(group)
            group = group.parent
        chain.reverse()
        return chain

    def route_hooks(self) -> tuple[RouteHook, ...]:
        """Effective ``on_route`` hooks, ancestors first."""
        return tuple(h for g in self._lineage() for h in g._route_hooks)

    def request_hooks(self) -> tuple[RequestHook, ...]:
        """Effective ``on_request`` hooks, ancestors first."""
        return tuple(h for g in self._lineage() for h in g._request_hooks)

    # -- Route registration --

    def add_route(
        self,
        method: str,
        path: str,
        handler: Handler,
        *,
        schema: Mapping[str, Any] | None = None,
        name: str | None = None,
        on_request: Iterable[RequestHook] = (),
        **config: Any,
    ) -> RouteOptions:
        """Register a route on this group.

        Runs the effective ``on_route`` hooks immediately; they may replace
        ``options.schema``. Returns the options as the hooks left them.

        Raises ``ConfigurationError`` if the same method and path is already
        registered.
        """
        app = self.app
        app._check_not_frozen()
        method = method.upper()
        url = self.prefix + path
        key = (method, url or "/")
        if key in app._route_keys:
            msg = f"Route already registered: {method} {key[1]}"
            raise ConfigurationError(msg)

        options = RouteOptions(
            method=method,
            url=url,
            route_path=path,
            prefix=self.prefix,
            handler=handler,
            schema=dict(schema) if schema is not None else None,
            name=name,
            config=dict(config),
        )
        for hook in self.route_hooks():
            hook(options)

        app._route_keys.add(key)
        app._pending_routes.append(_PendingRoute(options, self, tuple(on_request)))
        return options

    def has_route(self, method: str, path: str) -> bool:
        """Whether *method* and *path* (relative to this group) are taken."""
        return (method.upper(), (self.prefix + path) or "/") in self.app._route_keys

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
        schema: Mapping[str, Any] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern, relative to the group prefix. Use
                ``{param}`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
            name: Optional route name.
            schema: Schema declared on the route itself.
        """

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.add_route(method, path, func, schema=schema, name=name)
            return func

        return decorator

    # -- Shared schemas (stored on the app) --

    def add_schema(self, schema: Mapping[str, Any]) -> None:
        """Register a shared JSON Schema document, keyed by its ``$id``."""
        app = self.app
        app._check_not_frozen()
        schema_id = schema.get("$id")
        if not schema_id:
            msg = "Cannot add schema without $id"
            raise ConfigurationError(msg)
        if schema_id in app._schemas:
            msg = f"Schema with $id {schema_id!r} already added"
            raise ConfigurationError(msg)
        app._schemas[schema_id] = schema

    def get_schema(self, schema_id: str) -> Mapping[str, Any] | None:
        """Shared schema registered under *schema_id*, if any."""
        return self.app._schemas.get(schema_id)

    @property
    def schemas(self) -> dict[str, Mapping[str, Any]]:
        """All shared schemas, keyed by ``$id``."""
        return dict(self.app._schemas)


class App(RouteGroup):
    """The wren application: the root route group plus the ASGI entry point.

    Thread safety:
        The setup phase is single-threaded (registration at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the router, even if several ASGI workers call
        ``__call__()`` concurrently on the first request.
    """

    __slots__ = (
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        "_route_keys",
        # Compiled state (populated by _freeze)
        "_router",
        "_schemas",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        super().__init__()
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._route_keys: set[tuple[str, str]] = set()
        self._schemas: dict[str, Mapping[str, Any]] = {}
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._router: Router | None = None

    # -- Error handlers --

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator.

        The handler is called with ``(request, reply, exc)`` (or a leading
        subset) and responds through the reply like a route handler::

            @app.error(404)
            def not_found(request, reply):
                return reply.send({"missing": request.path})
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """Compiled routes in registration order. Freezes the app."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    # -- Server --

    def run(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        app_path: str | None = None,
    ) -> None:
        """Compile the app and serve it with uvicorn.

        Args:
            host: Override bind host.
            port: Override bind port.
            app_path: ``"module:attribute"`` import string. Required for
                auto-reload, which re-imports the app on every change.
        """
        self._ensure_frozen()

        from wren.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.reload,
            log_level=self.config.log_level,
            app_path=app_path,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to the
        request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            error_handlers=self._error_handlers,
            debug=self.config.debug,
            redirect_status=self.config.redirect_status,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup so registration errors surface before
        the first request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    logger.exception("Failed to compile routes")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile pending routes into the router.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            options = pending.options
            route = Route(
                path=options.url or "/",
                handler=options.handler,
                methods=frozenset({options.method}),
                name=options.name,
                schema=options.schema,
                request_hooks=pending.group.request_hooks() + pending.request_hooks,
                config=options.config,
            )
            router.add(route)
        router.compile()
        self._router = router
        self._frozen = True
        logger.debug("Compiled %d routes", len(self._pending_routes))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, hooks, and schemas before calling app.run()."
            )
            raise ConfigurationError(msg)
