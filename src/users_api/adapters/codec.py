from __future__ import annotations

from typing import Any

from bson import ObjectId
from bson.errors import InvalidId


class InvalidIdentifier(ValueError):
    def __init__(self, value: Any) -> None:
        super().__init__(f"Invalid identifier: {value!r}")
        self.value = value


def encode_id(object_id: ObjectId) -> str:
    return str(object_id)


def decode_id(value: Any) -> ObjectId:
    """Parse the 24-hex string form of an identifier.

    ``ObjectId`` itself also accepts 12-byte values, which are not a valid
    transport encoding, so only ``str`` input is considered.
    """

    if not isinstance(value, str) or len(value) != 24:
        raise InvalidIdentifier(value)
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as error:
        raise InvalidIdentifier(value) from error


def stringify_ids(value: Any) -> Any:
    """Replace every ``ObjectId`` nested in dicts, lists or tuples with its string form."""

    if isinstance(value, ObjectId):
        return encode_id(value)
    if isinstance(value, dict):
        return {key: stringify_ids(item) for key, item in value.items()}
    if isinstance(value, list):
        return [stringify_ids(item) for item in value]
    if isinstance(value, tuple):
        return tuple(stringify_ids(item) for item in value)
    return value
