from __future__ import annotations

import json

import pytest
from motor.motor_asyncio import AsyncIOMotorClient


async def _contents(mongo_url: str, database: str, name: str) -> list[dict]:
    client = AsyncIOMotorClient(mongo_url)
    try:
        return await client[database][name].find({}, {"_id": 0}).to_list(length=None)
    finally:
        client.close()


@pytest.mark.asyncio
async def test_seed_replaces_collections_and_is_idempotent(mongo_url: str, write_fixtures) -> None:
    from db.seed import seed

    seeds = write_fixtures(
        {
            "widgets.json": json.dumps([{"a": 1}, {"a": 2}]),
            "empty.json": "",
            "single.json": json.dumps({"a": 1}),
            "notes.txt": "ignored",
        }
    )

    client = AsyncIOMotorClient(mongo_url)
    await client["seeding"]["widgets"].insert_one({"stale": True})
    client.close()

    for _ in range(2):
        result = await seed(seeds, uri=mongo_url, database_name="seeding")

        assert sorted(o.collection for o in result.succeeded) == ["empty", "widgets"]
        assert [o.collection for o in result.failed] == ["single"]
        assert await _contents(mongo_url, "seeding", "widgets") == [{"a": 1}, {"a": 2}]
        assert await _contents(mongo_url, "seeding", "empty") == []


@pytest.mark.asyncio
async def test_seed_unreachable_server_raises_connection_error(write_fixtures) -> None:
    from db.errors import StoreConnectionError
    from db.store import MongoStore

    seeds = write_fixtures({"widgets.json": "[]"})

    async def connect(uri: str, database_name: str | None = None) -> MongoStore:
        return await MongoStore.connect(uri, database_name, server_selection_timeout_ms=200)

    from db.seed import seed

    with pytest.raises(StoreConnectionError):
        await seed(seeds, uri="localhost:1/seeding", connect=connect)
