from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import HTTPException, status

from users_api.adapters.codec import InvalidIdentifier, decode_id, encode_id, stringify_ids
from users_api.adapters.repository import UserRepository
from users_api.domain.user import NAME_FIELD, User

logger = logging.getLogger(__name__)

NO_USERS_MESSAGE = "No hay usuarios registrados"
NOT_FOUND_MESSAGE = "Usuario no encontrado"
UPDATED_MESSAGE = "Usuario actualizado correctamente"
DELETED_MESSAGE = "Usuario eliminado correctamente"


class UserService:
    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    async def list_users(self) -> Dict[str, Any]:
        documents = await self._repository.list()
        users = [user for user in map(self._normalise, documents) if user is not None]
        logger.info("listed %d users", len(users))
        if not users:
            return {"message": NO_USERS_MESSAGE}
        return {"usuarios": users}

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        object_id = self._parse_identifier(user_id)
        document = await self._repository.get(object_id)
        payload = self._normalise(document) if document is not None else None
        if payload is None:
            raise self._not_found(user_id)
        payload.pop("_id", None)
        payload.pop("id", None)
        return {"id": encode_id(object_id), **payload}

    async def create_user(
        self,
        name: str,
        password: str,
        email: Optional[str] = None,
        age: Optional[int] = None,
    ) -> Dict[str, Any]:
        user = User(name=name, password=password, email=email, age=age)
        inserted_id = await self._repository.add(user)
        logger.info("created user %s", inserted_id)
        return stringify_ids(user.to_document())

    async def update_user(
        self,
        user_id: str,
        name: str,
        password: str,
        email: Optional[str] = None,
        age: Optional[int] = None,
    ) -> Dict[str, str]:
        object_id = self._parse_identifier(user_id)
        user = User(name=name, password=password, email=email, age=age, user_id=object_id)
        if not await self._repository.replace(object_id, user):
            raise self._not_found(user_id)
        logger.info("updated user %s", user_id)
        return {"message": UPDATED_MESSAGE}

    async def delete_user(self, user_id: str) -> Dict[str, str]:
        object_id = self._parse_identifier(user_id)
        if not await self._repository.delete(object_id):
            raise self._not_found(user_id)
        logger.info("deleted user %s", user_id)
        return {"message": DELETED_MESSAGE}

    def _normalise(self, document: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Encode identifiers and enforce the user invariant on a stored document.

        Records written with the legacy ``name`` key are renamed to ``nombre``.
        Documents that would not form a valid user response are skipped.
        """

        payload = stringify_ids(document)
        if NAME_FIELD not in payload and "name" in payload:
            payload[NAME_FIELD] = payload.pop("name")
        name = payload.get(NAME_FIELD)
        valid = (
            isinstance(payload.get("_id"), str)
            and bool(payload["_id"])
            and isinstance(name, str)
            and bool(name.strip())
            and isinstance(payload.get("password"), str)
            and isinstance(payload.get("email"), (str, type(None)))
            and isinstance(payload.get("age"), (int, type(None)))
        )
        if not valid:
            logger.warning("skipping malformed user document %s", payload.get("_id"))
            return None
        return payload

    def _parse_identifier(self, user_id: str) -> ObjectId:
        # Malformed identifiers cannot match any record, so they share the 404 path.
        try:
            return decode_id(user_id)
        except InvalidIdentifier:
            raise self._not_found(user_id) from None

    def _not_found(self, user_id: str) -> HTTPException:
        logger.info("user %s not found", user_id)
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
