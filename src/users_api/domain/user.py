from __future__ import annotations

from typing import Any, Dict, Optional

from bson import ObjectId

from .base import IDomain

NAME_FIELD = "nombre"
OPTIONAL_FIELDS = ("email", "age")


class User(IDomain):
    def __init__(
        self,
        name: str,
        password: str,
        email: Optional[str] = None,
        age: Optional[int] = None,
        user_id: Optional[ObjectId] = None,
    ) -> None:
        if not name.strip():
            raise ValueError("User name must not be empty")
        self.user_id = user_id
        self.name = name
        self.password = password
        self.email = email
        self.age = age

    def to_document(self) -> Dict[str, Any]:
        """Mongo document for this user, with ``_id`` only once it is assigned."""

        document: Dict[str, Any] = {NAME_FIELD: self.name, "password": self.password}
        if self.email is not None:
            document["email"] = self.email
        if self.age is not None:
            document["age"] = self.age
        if self.user_id is not None:
            document["_id"] = self.user_id
        return document

    def __str__(self) -> str:
        return self.name
