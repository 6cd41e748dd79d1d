from __future__ import annotations

from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument


def _to_api(doc: dict[str, Any]) -> dict[str, Any]:
    out = dict(doc)
    out["_id"] = str(out["_id"])
    return out


def _object_id(doc_id: str) -> ObjectId | None:
    try:
        return ObjectId(doc_id)
    except (InvalidId, TypeError):
        return None


async def list_documents(collection: AsyncIOMotorCollection) -> list[dict[str, Any]]:
    return [_to_api(doc) async for doc in collection.find({})]


async def create_document(collection: AsyncIOMotorCollection, fields: dict[str, Any]) -> dict[str, Any]:
    doc = {k: v for k, v in fields.items() if k != "_id"}
    result = await collection.insert_one(doc)
    doc["_id"] = result.inserted_id
    return _to_api(doc)


async def update_document(
    collection: AsyncIOMotorCollection, doc_id: str, fields: dict[str, Any]
) -> dict[str, Any] | None:
    """Merge `fields` into the stored document. None when no such document exists."""
    oid = _object_id(doc_id)
    if oid is None:
        return None
    changes = {k: v for k, v in fields.items() if k != "_id"}
    if not changes:
        doc = await collection.find_one({"_id": oid})
    else:
        doc = await collection.find_one_and_update(
            {"_id": oid}, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
    return _to_api(doc) if doc else None


async def delete_document(collection: AsyncIOMotorCollection, doc_id: str) -> bool:
    oid = _object_id(doc_id)
    if oid is None:
        return False
    result = await collection.delete_one({"_id": oid})
    return result.deleted_count > 0
