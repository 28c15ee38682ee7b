"""Route schemas — the compiled schema table, resolution onto routes,
and the per-route response contract the reply builder enforces.
"""

from wren.schema.contract import ResponseContract
from wren.schema.resolve import SchemaResolver, merge_schema
from wren.schema.table import SchemaTable, route_key

__all__ = [
    "ResponseContract",
    "SchemaResolver",
    "SchemaTable",
    "merge_schema",
    "route_key",
]
