"""Petstore — a schema-driven JSON service.

Every operation is declared in ``petstore.schema.json`` and bound to its
handler with ``register_service``. Handlers answer through the reply: the
contract rejects undeclared statuses and missing required headers.

Run:
    cd examples/petstore && python app.py
"""

import threading
from dataclasses import asdict, dataclass
from pathlib import Path

from wren import App, SchemaTable, register_service

app = App()
table = SchemaTable.from_file(Path(__file__).parent / "petstore.schema.json")


# ---------------------------------------------------------------------------
# In-memory storage
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Pet:
    id: int
    name: str
    tag: str | None = None


_pets: dict[int, Pet] = {}
_next_id = 1
_lock = threading.Lock()


def _create(name: str, tag: str | None) -> Pet:
    global _next_id
    with _lock:
        pet = Pet(id=_next_id, name=name, tag=tag)
        _pets[pet.id] = pet
        _next_id += 1
        return pet


def _to_dict(pet: Pet) -> dict:
    return {k: v for k, v in asdict(pet).items() if v is not None}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def index(request, reply):
    return reply.send("petstore")


def list_pets(request, reply):
    pets = [_to_dict(p) for p in _pets.values()]
    limit = request.query.get("limit")
    if limit is not None and limit.isdigit():
        pets = pets[: int(limit)]
    return reply.status(200).header("x-total", len(_pets)).send(pets)


async def create_pet(request, reply):
    data = await request.json()
    name = data.get("name") if isinstance(data, dict) else None
    if not isinstance(name, str) or not name:
        return reply.status(400).send({"message": "name is required"})
    pet = _create(name, data.get("tag"))
    return reply.status(201).send(_to_dict(pet))


def _pet_id(request) -> int | None:
    raw = request.path_params["id"]
    return int(raw) if raw.isdigit() else None


def show_pet(request, reply):
    pet = _pets.get(_pet_id(request))
    if pet is None:
        return reply.status(404).send({"message": "pet not found"})
    return reply.status(200).send(_to_dict(pet))


def delete_pet(request, reply):
    with _lock:
        pet = _pets.pop(_pet_id(request), None)
    if pet is None:
        return reply.status(404).send({"message": "pet not found"})
    return reply.status(204).send()


def store(request, reply):
    return reply.redirect(301, "/pets")


register_service(
    app,
    table,
    {
        "GET /": index,
        "GET /pets": list_pets,
        "POST /pets": {"handler": create_pet, "name": "create_pet"},
        "GET /pets/{id}": show_pet,
        "DELETE /pets/{id}": delete_pet,
        "GET /store": store,
    },
)


if __name__ == "__main__":
    app.run()
