from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class CollectionCreate(StrictModel):
    # Clients may echo back an _id; the store always assigns its own.
    id: str | None = Field(default=None, alias="_id")
    property: str | None = None


class CollectionUpdate(StrictModel):
    id: str | None = Field(default=None, alias="_id")
    property: str | None = None


class CollectionDocument(BaseModel):
    # Stored documents may carry fields outside the schema; they are not echoed.
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    property: str | None = None
