"""
MongoDB persistence gateway.

Handles:
- Connecting with pymongo's asyncio client
- Mapping Mongo's ObjectId `_id` to a string `id`
- Translating driver errors into PersistError / QueryError
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import AsyncMongoClient, DESCENDING
from pymongo.errors import PyMongoError

from hopehub.config import Settings
from hopehub.core.errors import PersistError, QueryError
from hopehub.core.time_utils import now_utc
from .gateway import PersistenceGateway, resolve_server_timestamps


logger = logging.getLogger(__name__)


def to_public(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a raw Mongo document into a gateway document with a string id."""
    d = dict(doc)
    _id = d.pop("_id", None)
    if _id is not None:
        d["id"] = str(_id)
    return d


def to_mongo_filter(filters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Translate an `id` equality filter into an `_id` filter."""
    query = dict(filters or {})
    if "id" in query:
        raw_id = query.pop("id")
        try:
            query["_id"] = ObjectId(raw_id)
        except (InvalidId, TypeError):
            query["_id"] = raw_id
    return query


class MongoGateway(PersistenceGateway):
    """
    Document store backed by MongoDB.

    Usage:
        gateway = MongoGateway.from_settings(Settings.from_env())
        doc_id = await gateway.insert_document("hopehub_requests", fields)
        await gateway.close()
    """

    def __init__(self, client: AsyncMongoClient, db_name: str):
        """
        Initialize gateway.

        Args:
            client: Connected AsyncMongoClient
            db_name: Database holding the HopeHub collections
        """
        self.client = client
        self.db = client[db_name]
        logger.info(f"MongoGateway using database: {db_name}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoGateway":
        client = AsyncMongoClient(settings.mongo_uri, serverSelectionTimeoutMS=5000)
        return cls(client, settings.mongo_db_name)

    async def close(self) -> None:
        await self.client.close()

    async def insert_document(self, collection: str, fields: Dict[str, Any]) -> str:
        doc = resolve_server_timestamps(fields, now_utc())
        try:
            result = await self.db[collection].insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Insert into {collection} failed: {e}")
            raise PersistError(str(e)) from e

        doc_id = str(result.inserted_id)
        logger.debug(f"Inserted {collection}/{doc_id}")
        return doc_id

    async def query_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        cursor = self.db[collection].find(to_mongo_filter(filters))
        if order_by:
            cursor = cursor.sort(order_by, DESCENDING)
        if limit:
            cursor = cursor.limit(limit)

        try:
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Query on {collection} failed: {e}")
            raise QueryError(str(e)) from e

        logger.debug(f"Fetched {len(docs)} documents from {collection}")
        return [to_public(d) for d in docs]
