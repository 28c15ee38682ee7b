"""``wren run``: serve an app with the development server.

Resolves an import string to a wren App and hands it to uvicorn. The
import string is forwarded so ``--reload`` can re-import the app.
"""

import argparse
import sys

from wren.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Start the wren dev server.

    CLI flags override the app's ``AppConfig``.
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    from wren.server.dev import run_dev_server

    run_dev_server(
        app,
        args.host or app.config.host,
        args.port or app.config.port,
        reload=args.reload or app.config.reload,
        log_level=app.config.log_level,
        app_path=args.app,
    )
