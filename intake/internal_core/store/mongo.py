from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from bson.errors import BSONError
from pymongo import ASCENDING, AsyncMongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..config import IntakeConfig
from .base import DRAFT_ID_FIELD, DraftStore, DuplicateDraftError, StorageError

logger = logging.getLogger(__name__)

UUID_INDEX_NAME = "uuid_unique"

# Drivers add _id on insert; it never leaves the store.
_PROJECTION = {"_id": 0}

# Encoding failures (oversized ints, bad keys) surface before the driver wraps them.
_STORE_ERRORS = (PyMongoError, BSONError, OverflowError)


class MongoDraftStore(DraftStore):
    def __init__(self, collection: Any, client: Optional[AsyncMongoClient] = None):
        self._collection = collection
        self._client = client

    @classmethod
    def from_config(cls, config: IntakeConfig) -> "MongoDraftStore":
        client: AsyncMongoClient = AsyncMongoClient(
            config.MONGODB_URI,
            appname=config.INTAKE_APP_NAME,
            serverSelectionTimeoutMS=config.INTAKE_MONGO_TIMEOUT_MS,
        )
        collection = client[config.DB_NAME][config.INTAKE_COLLECTION]
        return cls(collection, client=client)

    def _wrap(self, action: str, exc: Exception) -> StorageError:
        if isinstance(exc, DuplicateKeyError):
            return DuplicateDraftError("duplicate_id", f"{action} failed: {exc}", self.name())
        return StorageError(f"{action}_failed", f"{action} failed: {exc}", self.name())

    async def ensure_indexes(self) -> None:
        try:
            await self._collection.create_index(
                [(DRAFT_ID_FIELD, ASCENDING)], unique=True, name=UUID_INDEX_NAME
            )
        except _STORE_ERRORS as exc:
            raise self._wrap("create_index", exc) from exc
        logger.info("mongo_index_ready index=%s", UUID_INDEX_NAME)

    async def insert(self, document: Mapping[str, Any]) -> None:
        try:
            # insert_one mutates its argument with _id.
            await self._collection.insert_one(dict(document))
        except _STORE_ERRORS as exc:
            raise self._wrap("insert", exc) from exc

    async def find_by_id(self, draft_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self._collection.find_one({DRAFT_ID_FIELD: draft_id}, _PROJECTION)
        except _STORE_ERRORS as exc:
            raise self._wrap("find", exc) from exc

    async def find_one_and_update(
        self, filter: Mapping[str, Any], fields: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        try:
            return await self._collection.find_one_and_update(
                dict(filter),
                {"$set": dict(fields)},
                projection=_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except _STORE_ERRORS as exc:
            raise self._wrap("find_and_modify", exc) from exc

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    def name(self) -> str:
        return "mongo"
