from __future__ import annotations

import time
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from .errors import PersistError


class Storage:
    """Crawl records keyed by URL; a later write for the same URL replaces the earlier one."""

    def __init__(self, mongo_url: str, db_name: str, collection: str = "aws_docs") -> None:
        self._client: AsyncIOMotorClient = AsyncIOMotorClient(mongo_url)
        self._db = self._client[db_name]
        self._records: AsyncIOMotorCollection = self._db[collection]

    async def init(self) -> None:
        # create_index is a no-op when the index already exists
        try:
            await self._records.create_index("url", unique=True)
        except PyMongoError as exc:
            raise PersistError(self._records.full_name, str(exc)) from exc

    async def put_record(self, url: str, url_hash: str, content_hash: str) -> None:
        doc: Dict[str, Any] = {
            "url": url,
            "url_hash": url_hash,
            "content_hash": content_hash,
            "crawled_at": time.time(),
        }
        try:
            await self._records.update_one({"url": url}, {"$set": doc}, upsert=True)
        except PyMongoError as exc:
            raise PersistError(url, str(exc)) from exc

    async def get_record(self, url: str) -> Optional[dict]:
        try:
            return await self._records.find_one({"url": url}, {"_id": 0})
        except PyMongoError as exc:
            raise PersistError(url, str(exc)) from exc

    async def count_records(self) -> int:
        try:
            return await self._records.count_documents({})
        except PyMongoError as exc:
            raise PersistError(self._records.full_name, str(exc)) from exc

    async def close(self) -> None:
        self._client.close()
