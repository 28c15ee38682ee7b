"""Tests for the petstore example — contracts, annotation, redirects."""

from wren.testing import TestClient


class TestIndex:
    async def test_root(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "petstore"


class TestPets:
    async def test_empty_list_has_total_header(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/pets")
            assert response.status == 200
            assert response.json() == []
            assert response.header("x-total") == "0"

    async def test_create_then_fetch(self, example_app) -> None:
        async with TestClient(example_app) as client:
            created = await client.post("/pets", json={"name": "rex", "tag": "dog"})
            assert created.status == 201
            pet_id = created.json()["id"]

            response = await client.get(f"/pets/{pet_id}")
            assert response.status == 200
            assert response.json() == {"id": pet_id, "name": "rex", "tag": "dog"}

    async def test_create_without_name(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/pets", json={"tag": "cat"})
            assert response.status == 400
            assert response.json() == {"message": "name is required"}

    async def test_limit(self, example_app) -> None:
        async with TestClient(example_app) as client:
            for name in ("a", "b", "c"):
                await client.post("/pets", json={"name": name})
            response = await client.get("/pets?limit=2")
            assert len(response.json()) == 2
            assert response.header("x-total") == "3"

    async def test_missing_pet(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/pets/999")
            assert response.status == 404

    async def test_delete(self, example_app) -> None:
        async with TestClient(example_app) as client:
            created = await client.post("/pets", json={"name": "rex"})
            pet_id = created.json()["id"]

            response = await client.delete(f"/pets/{pet_id}")
            assert response.status == 204
            assert response.body == b""

            again = await client.delete(f"/pets/{pet_id}")
            assert again.status == 404


class TestStore:
    async def test_redirect(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/store")
            assert response.status == 301
            assert response.header("location") == "/pets"


class TestSchemas:
    def test_routes_carry_resolved_schemas(self, example_app) -> None:
        schemas = {f"{next(iter(r.methods))} {r.path}": r.schema for r in example_app.routes}
        assert schemas["GET /pets/{id}"]["params"]["required"] == ["id"]
        assert set(schemas["POST /pets"]["response"]) == {"201", "400"}
        assert example_app.get_schema("petstore")["$id"] == "petstore"
