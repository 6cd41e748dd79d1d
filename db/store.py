from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any, Protocol

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from db.errors import StoreConnectionError, StoreError
from db.logging import logger


MONGO_SCHEMES = ("mongodb://", "mongodb+srv://")
_CREDENTIALS_RE = re.compile(r"(?<=://)[^/@]*@")


def normalize_uri(uri: str) -> str:
    # Settings may carry a bare "host/db" seed target; the driver needs a scheme.
    if uri.startswith(MONGO_SCHEMES):
        return uri
    return "mongodb://" + uri


def redact_uri(uri: str) -> str:
    return _CREDENTIALS_RE.sub("***@", uri)


class Store(Protocol):
    """The capability set the seeder needs from a document store."""

    async def collection_exists(self, name: str) -> bool: ...

    async def drop_collection(self, name: str) -> None: ...

    async def create_collection(self, name: str) -> None: ...

    async def insert_many(self, name: str, records: Sequence[dict[str, Any]]) -> int: ...

    async def close(self) -> None: ...


class MongoStore:
    def __init__(self, client: AsyncIOMotorClient, db: AsyncIOMotorDatabase):
        self._client = client
        self._db = db

    @classmethod
    async def connect(
        cls,
        uri: str,
        database_name: str | None = None,
        *,
        server_selection_timeout_ms: int = 5000,
    ) -> MongoStore:
        uri = normalize_uri(uri)
        logger.info("mongo_connecting", uri=redact_uri(uri))
        client: AsyncIOMotorClient | None = None
        try:
            client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=server_selection_timeout_ms)
            # The database named in the URI wins; database_name is the fallback.
            db = client.get_default_database(database_name)
            await client.admin.command("ping")
        except PyMongoError as exc:
            if client is not None:
                client.close()
            raise StoreConnectionError(f"cannot connect to {redact_uri(uri)}: {exc}") from exc
        logger.info("mongo_connected", database=db.name)
        return cls(client, db)

    @property
    def database_name(self) -> str:
        return self._db.name

    async def collection_exists(self, name: str) -> bool:
        try:
            names = await self._db.list_collection_names(filter={"name": name})
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        return name in names

    async def drop_collection(self, name: str) -> None:
        try:
            await self._db.drop_collection(name)
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    async def create_collection(self, name: str) -> None:
        try:
            await self._db.create_collection(name)
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    async def insert_many(self, name: str, records: Sequence[dict[str, Any]]) -> int:
        try:
            result = await self._db[name].insert_many(list(records), ordered=True)
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        return len(result.inserted_ids)

    async def close(self) -> None:
        self._client.close()
