"""Shared fixtures: a small compiled petstore schema table."""

from typing import Any

import pytest

from wren.schema.table import SchemaTable


def petstore_data() -> dict[str, Any]:
    """Fresh copy of the petstore table data, as the schema compiler writes it."""
    pet = {"$ref": "petstore#/properties/Pet"}
    return {
        "schema": {
            "$id": "petstore",
            "type": "object",
            "properties": {
                "Pet": {
                    "type": "object",
                    "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
                    "required": ["id", "name"],
                },
            },
        },
        "routes": {
            "GET /": {
                "request": {"type": "object", "properties": {}},
                "response": {"200": {"type": "string"}},
            },
            "GET /pets": {
                "request": {
                    "type": "object",
                    "properties": {
                        "querystring": {
                            "type": "object",
                            "properties": {"limit": {"type": "integer"}},
                        },
                    },
                },
                "response": {
                    "200": {
                        "type": "array",
                        "items": pet,
                        "headers": {
                            "type": "object",
                            "properties": {"x-total": {"type": "integer"}},
                            "required": ["x-total"],
                        },
                    },
                },
            },
            "POST /pets": {
                "request": {
                    "type": "object",
                    "properties": {"body": pet},
                },
                "response": {"201": pet, "400": {"type": "object"}},
            },
            "GET /pets/{id}": {
                "request": {
                    "type": "object",
                    "properties": {
                        "params": {
                            "type": "object",
                            "properties": {"id": {"type": "string"}},
                            "required": ["id"],
                        },
                    },
                },
                "response": {"200": pet, "404": {"type": "object"}},
            },
            "GET /old-pets": {
                "response": {"301": {"type": "null"}, "302": {"type": "null"}},
            },
            "DELETE /pets/{id}": {
                "request": {"params": {"type": "object"}},
                "response": {},
            },
        },
    }


@pytest.fixture
def table_data() -> dict[str, Any]:
    return petstore_data()


@pytest.fixture
def table(table_data: dict[str, Any]) -> SchemaTable:
    return SchemaTable.from_mapping(table_data)
