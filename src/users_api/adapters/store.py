from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, TypeVar

from pymongo import AsyncMongoClient
from pymongo.errors import ConnectionFailure, PyMongoError
from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreUnavailableError(Exception):
    """The document store could not serve the operation."""


class StoreTimeoutError(StoreUnavailableError):
    """The operation did not finish within its deadline."""


class DocumentStore:
    """Pooled handle to one collection of the external document store.

    One instance lives for the whole process: ``connect`` opens the client
    pool at startup and ``close`` releases it on shutdown. Each attempt of a
    collection call is bounded by ``operation_timeout`` seconds; transient
    connectivity errors are retried with exponential backoff, timeouts are not.
    """

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str,
        *,
        operation_timeout: float = 5.0,
        retry_attempts: int = 3,
        retry_backoff: float = 0.1,
        server_selection_timeout_ms: int = 3000,
        max_pool_size: int = 100,
    ) -> None:
        self._uri = uri
        self._database_name = database
        self._collection_name = collection
        self._operation_timeout = operation_timeout
        self._retry_attempts = retry_attempts
        self._retry_backoff = retry_backoff
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._max_pool_size = max_pool_size
        self._client: Any = None
        self._collection: Any = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self, client: Any = None) -> None:
        if self._client is not None:
            return
        if client is None:
            client = AsyncMongoClient(
                self._uri,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                maxPoolSize=self._max_pool_size,
            )
        self._client = client
        self._collection = client[self._database_name][self._collection_name]
        logger.info("document store client opened for %s.%s", self._database_name, self._collection_name)

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client, self._collection = self._client, None, None
        await client.close()
        logger.info("document store client closed")

    async def ping(self) -> None:
        await self._run("ping", lambda _: self._client.admin.command("ping"))

    async def find_many(self, limit: int) -> List[Dict[str, Any]]:
        return await self._run("find_many", lambda collection: collection.find({}, limit=limit).to_list(length=limit))

    async def find_one(self, query: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        return await self._run("find_one", lambda collection: collection.find_one(query))

    async def insert_one(self, document: Dict[str, Any]) -> Any:
        result = await self._run("insert_one", lambda collection: collection.insert_one(document))
        return result.inserted_id

    async def update_one(self, query: Mapping[str, Any], update: Mapping[str, Any]) -> int:
        result = await self._run("update_one", lambda collection: collection.update_one(query, update))
        return result.matched_count

    async def delete_one(self, query: Mapping[str, Any]) -> int:
        result = await self._run("delete_one", lambda collection: collection.delete_one(query))
        return result.deleted_count

    async def _run(self, name: str, operation: Callable[[Any], Awaitable[T]]) -> T:
        if self._collection is None:
            raise StoreUnavailableError("Document store is not connected")
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=self._retry_backoff, min=0, max=2),
            retry=retry_if_exception_type(ConnectionFailure),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await asyncio.wait_for(operation(self._collection), timeout=self._operation_timeout)
        except asyncio.TimeoutError as error:
            logger.error("store %s exceeded %.1fs deadline", name, self._operation_timeout)
            raise StoreTimeoutError(f"Document store did not answer {name} in time") from error
        except PyMongoError as error:
            logger.error("store %s failed: %s", name, error)
            raise StoreUnavailableError(f"Document store error during {name}: {error}") from error
