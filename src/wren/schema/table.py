"""Schema table — the compiled, read-only route → schema fragment map.

The table is produced outside wren (by whatever compiles the API
description) and loaded once at startup. It holds two things:

- ``schema``: the shared JSON Schema document, identified by ``$id``,
  which route fragments reference (``{"$ref": "petstore#/properties/Pet"}``).
- ``routes``: ``{"<METHOD> <path>": fragment}`` where a fragment looks like::

      {
          "request": {"type": "object", "properties": {"params": ..., "body": ...}},
          "response": {"200": {...}, "404": {...}},
      }

Everything is deep-frozen at construction (mappings become read-only
proxies, lists become tuples). ``thaw()`` hands out fresh mutable copies,
so nothing a route does to its schema can leak back into the table.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from wren.errors import ConfigurationError

# Spellings the server may report for the root of a route group.
ROOT_PATHS = frozenset({"", "/"})


def route_key(method: str, path: str) -> str:
    """Canonical lookup key: ``"<UPPER_METHOD> <path>"``."""
    return f"{method.upper()} {path}"


def freeze(value: Any) -> Any:
    """Recursively convert mappings to read-only proxies and lists to tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, list | tuple):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of ``freeze``: fresh dicts and lists, safe to mutate."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


@dataclass(frozen=True, slots=True)
class SchemaTable:
    """Immutable schema table. Construct once, share by reference.

    Usage::

        table = SchemaTable.from_file("petstore.schema.json")
        fragment = table.get("GET /pets")
        key, fragment = table.lookup("GET", "")   # root fallback -> "GET /"
    """

    schema: Mapping[str, Any]
    routes: Mapping[str, Mapping[str, Any]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "schema", freeze(self.schema))
        object.__setattr__(self, "routes", freeze(self.routes))

    @property
    def schema_id(self) -> str | None:
        """The shared document's ``$id``, or ``None`` if it has none."""
        value = self.schema.get("$id")
        return value if isinstance(value, str) and value else None

    def get(self, key: str) -> Mapping[str, Any] | None:
        """Fragment stored under an exact route key."""
        return self.routes.get(key)

    def lookup(self, method: str, route_path: str) -> tuple[str, Mapping[str, Any] | None]:
        """Find the fragment for a registered route.

        Tries ``"<method> <route_path>"`` first. A miss on either root
        spelling (``""`` or ``"/"``) retries with ``"<method> /"``, so both
        spellings resolve to the same fragment. No other path is rewritten:
        ``/pets`` and ``/pets/`` stay distinct keys.

        Returns ``(key, fragment)``; *key* is the key that matched (or the
        first key tried, on a miss).
        """
        key = route_key(method, route_path)
        fragment = self.routes.get(key)
        if fragment is None and route_path in ROOT_PATHS:
            root_key = route_key(method, "/")
            fragment = self.routes.get(root_key)
            if fragment is not None:
                key = root_key
        return key, fragment

    def __contains__(self, key: object) -> bool:
        return key in self.routes

    def __len__(self) -> int:
        return len(self.routes)

    # -- Factories --

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SchemaTable:
        """Build from ``{"schema": {...}, "routes": {...}}``."""
        schema = data.get("schema")
        routes = data.get("routes")
        if not isinstance(schema, Mapping):
            msg = "Schema table is missing the 'schema' document."
            raise ConfigurationError(msg)
        if not isinstance(routes, Mapping):
            msg = "Schema table is missing the 'routes' map."
            raise ConfigurationError(msg)
        return cls(schema=schema, routes=routes)

    @classmethod
    def from_file(cls, path: str | Path) -> SchemaTable:
        """Load a table from a JSON file written by the schema compiler."""
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json_module.loads(text)
        except json_module.JSONDecodeError as exc:
            msg = f"Schema table {str(path)!r} is not valid JSON: {exc}"
            raise ConfigurationError(msg) from exc
        return cls.from_mapping(data)
