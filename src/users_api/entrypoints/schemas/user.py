from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class UserPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(
        ...,
        validation_alias=AliasChoices("nombre", "name"),
        min_length=1,
        description="User name",
    )
    password: str = Field(..., min_length=1, description="Password, stored as given")
    email: Optional[str] = Field(default=None, description="Contact email")
    age: Optional[int] = Field(default=None, ge=0, description="Age in years")

    @field_validator("name")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value


class UserCreateRequest(UserPayload):
    pass


class UserUpdateRequest(UserPayload):
    pass


class StoredUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id")
    nombre: str
    password: str
    email: Optional[str] = None
    age: Optional[int] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    nombre: str
    password: str
    email: Optional[str] = None
    age: Optional[int] = None


class UserListResponse(BaseModel):
    usuarios: List[StoredUser]


class MessageResponse(BaseModel):
    message: str
