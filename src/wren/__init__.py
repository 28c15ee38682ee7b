"""Wren: schema-driven routes and reply contracts for ASGI services.

A compiled schema table describes every operation of a service; wren
attaches each operation's schema to its route, records which operation a
request is serving, and makes handlers honour the declared responses.

Basic usage::

    from wren import App, SchemaTable, register_service

    app = App()
    table = SchemaTable.from_file("petstore.schema.json")

    def list_pets(request, reply):
        return reply.status(200).header("x-total", 2).send(["rex", "tom"])

    register_service(app, table, {"GET /pets": list_pets})
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "ContractViolation",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "Reply",
    "ReplyToken",
    "Request",
    "Response",
    "RouteGroup",
    "SchemaResolver",
    "SchemaTable",
    "WrenError",
    "get_request",
    "register_service",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name in ("App", "RouteGroup"):
        from wren import app as _app

        return getattr(_app, name)

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name in ("Reply", "ReplyToken"):
        from wren.http import reply as _reply

        return getattr(_reply, name)

    if name in ("SchemaTable", "SchemaResolver"):
        from wren import schema as _schema

        return getattr(_schema, name)

    if name == "register_service":
        from wren.service import register_service

        return register_service

    if name == "get_request":
        from wren.context import get_request

        return get_request

    if name in (
        "WrenError",
        "ConfigurationError",
        "ContractViolation",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
