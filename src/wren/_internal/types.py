"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: called as handler(request, reply), sync or async
Handler: TypeAlias = Callable[..., Any]

# on_route hook: receives the mutable RouteOptions before the route is stored
RouteHook: TypeAlias = Callable[..., None]

# on_request hook: called as hook(request, reply) before the handler
RequestHook: TypeAlias = Callable[..., Any]

# Error handler: receives (request, reply, exc) or a leading subset
ErrorHandler: TypeAlias = Callable[..., Any]
