"""``wren routes``: list registered routes.

Resolves an import string to a wren App and prints every route with its
method, path, handler and declared response statuses. With ``--schema``
the resolved schemas are printed as JSON instead, keyed by route.
"""

import argparse
import json as json_module
import sys

from wren.cli._resolve import resolve_app
from wren.errors import ConfigurationError


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a wren app."""
    try:
        app = resolve_app(args.app)
        routes = app.routes
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if getattr(args, "schema", False):
        schemas = {
            f"{method} {route.path}": route.schema
            for route in routes
            for method in sorted(route.methods)
        }
        print(json_module.dumps(schemas, indent=2, sort_keys=True))
        return

    if not routes:
        print("No routes registered.")
        return

    # Build rows: (methods, path, handler, statuses)
    rows: list[tuple[str, str, str, str]] = []
    for route in routes:
        methods_str = ", ".join(sorted(route.methods))
        handler_name = getattr(route.handler, "__name__", str(route.handler))
        if route.name:
            handler_name = f"{handler_name} ({route.name})"
        contract = route.contract
        statuses = ", ".join(contract.statuses) if contract.declared else "-"
        rows.append((methods_str, route.path, handler_name, statuses))

    max_methods = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header
    max_handler = max(7, *(len(r[2]) for r in rows))  # "HANDLER" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{:<{max_handler}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER", "RESPONSES"))
    sep_len = max_methods + max_path + max_handler + 6 + max(len(r[3]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row).rstrip())
