from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from bson import ObjectId


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in query.items())


class InMemoryCursor:
    def __init__(self, documents: List[Dict[str, Any]]) -> None:
        self._documents = documents

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._documents if length is None else self._documents[:length]


class InMemoryCollection:
    """Async collection double with the subset of the pymongo API the store uses."""

    def __init__(self) -> None:
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}

    def find(self, query: Dict[str, Any], limit: int = 0) -> InMemoryCursor:
        found = [copy.deepcopy(doc) for doc in self.documents.values() if _matches(doc, query)]
        return InMemoryCursor(found[:limit] if limit else found)

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for document in self.documents.values():
            if _matches(document, query):
                return copy.deepcopy(document)
        return None

    async def insert_one(self, document: Dict[str, Any]) -> SimpleNamespace:
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = copy.deepcopy(document)
        return SimpleNamespace(inserted_id=document["_id"])

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> SimpleNamespace:
        for document in self.documents.values():
            if _matches(document, query):
                document.update(copy.deepcopy(update.get("$set", {})))
                for field in update.get("$unset", {}):
                    document.pop(field, None)
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: Dict[str, Any]) -> SimpleNamespace:
        for object_id, document in list(self.documents.items()):
            if _matches(document, query):
                del self.documents[object_id]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class InMemoryDatabase:
    def __init__(self, collection: Any) -> None:
        self.collection = collection

    def __getitem__(self, name: str) -> Any:
        return self.collection


class InMemoryClient:
    def __init__(self, collection: Any = None) -> None:
        self.collection = collection if collection is not None else InMemoryCollection()
        self.closed = False
        self.admin = SimpleNamespace(command=self._command)

    async def _command(self, name: str) -> Dict[str, Any]:
        return {"ok": 1.0, "command": name}

    def __getitem__(self, name: str) -> InMemoryDatabase:
        return InMemoryDatabase(self.collection)

    async def close(self) -> None:
        self.closed = True
