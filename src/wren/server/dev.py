"""Development server.

Serves the live wren App object with uvicorn. Auto-reload needs an import
string, because uvicorn re-imports the app in a fresh process on change.
"""

import logging

logger = logging.getLogger("wren.server")


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    log_level: str = "info",
    app_path: str | None = None,
) -> None:
    """Start uvicorn with the given wren App.

    Args:
        app: ASGI callable (wren App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        log_level: uvicorn log level (``"debug"``, ``"info"``, ...).
        app_path: Optional ``"module:attribute"`` import string. When
            given with reload, uvicorn imports the app itself.
    """
    import uvicorn

    if reload and app_path is None:
        logger.warning("Auto-reload needs an import string; serving without reload")
        reload = False

    target = app_path if reload else app
    uvicorn.run(target, host=host, port=port, reload=reload, log_level=log_level)
