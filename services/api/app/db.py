from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from db.store import normalize_uri
from services.api.app.settings import SETTINGS


COLLECTION_NAME = "Collection"


def create_client() -> AsyncIOMotorClient:
    # Motor connects lazily; nothing touches the network until the first command.
    return AsyncIOMotorClient(normalize_uri(SETTINGS.mongo_uri), serverSelectionTimeoutMS=5000)


CLIENT = create_client()


def get_database() -> AsyncIOMotorDatabase:
    return CLIENT.get_default_database(SETTINGS.database_name)


def get_collection() -> AsyncIOMotorCollection:
    return get_database()[COLLECTION_NAME]


async def ping() -> None:
    await CLIENT.admin.command("ping")
