from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId

from users_api.adapters.store import DocumentStore
from users_api.domain.user import OPTIONAL_FIELDS, User

from .base import IRepository


class UserRepository(IRepository):
    def __init__(self, store: DocumentStore, list_limit: int = 100) -> None:
        self._store = store
        self._list_limit = list_limit

    async def add(self, data: User) -> ObjectId:  # type: ignore[override]
        inserted_id = await self._store.insert_one(data.to_document())
        data.user_id = inserted_id
        return inserted_id

    async def list(self) -> List[Dict[str, Any]]:
        return await self._store.find_many(limit=self._list_limit)

    async def get(self, object_id: ObjectId) -> Optional[Dict[str, Any]]:
        return await self._store.find_one({"_id": object_id})

    async def replace(self, object_id: ObjectId, data: User) -> bool:  # type: ignore[override]
        """Overwrite every user field; optional fields missing from ``data`` are removed."""

        document = data.to_document()
        document.pop("_id", None)
        update: Dict[str, Any] = {"$set": document}
        missing = {field: "" for field in OPTIONAL_FIELDS if field not in document}
        if missing:
            update["$unset"] = missing
        matched = await self._store.update_one({"_id": object_id}, update)
        return matched > 0

    async def delete(self, object_id: ObjectId) -> bool:
        deleted = await self._store.delete_one({"_id": object_id})
        return deleted > 0
