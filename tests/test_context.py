"""Tests for wren.context — request-scoped ContextVar access."""

import pytest

from wren.app import App
from wren.context import get_operation_path, get_request, request_var
from wren.testing import TestClient


class TestGetRequest:
    def test_outside_request_raises(self) -> None:
        with pytest.raises(LookupError):
            get_request()

    async def test_available_in_handler(self) -> None:
        app = App()
        seen: list[str] = []

        @app.route("/pets/{id}")
        def show(request, reply):
            seen.append(get_request().path)
            return reply.send("ok")

        async with TestClient(app) as client:
            response = await client.get("/pets/3")

        assert response.status == 200
        assert seen == ["/pets/3"]

    async def test_reset_after_request(self) -> None:
        app = App()

        @app.route("/")
        def index(request, reply):
            return reply.send("ok")

        async with TestClient(app) as client:
            await client.get("/")

        assert request_var.get(None) is None


class TestGetOperationPath:
    async def test_annotated_route(self, table) -> None:
        from wren.service import register_service

        app = App()
        seen: list[str | None] = []

        def show_pet(request, reply):
            seen.append(get_operation_path())
            return reply.status(200).send({"id": 1, "name": "rex"})

        register_service(app, table, {"GET /pets/{id}": show_pet})

        async with TestClient(app) as client:
            await client.get("/pets/1")

        assert seen == ["GET /pets/{id}"]

    async def test_unannotated_route(self) -> None:
        app = App()
        seen: list[str | None] = []

        @app.route("/plain")
        def plain(request, reply):
            seen.append(get_operation_path())
            return reply.send("ok")

        async with TestClient(app) as client:
            await client.get("/plain")

        assert seen == [None]
