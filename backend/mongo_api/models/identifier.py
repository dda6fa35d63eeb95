"""
Mongo API — Record Identifier
==============================

What:  Opaque identifier value type for stored records.
How:   Wraps a BSON ObjectId; the only wire representation is its
       24-character lowercase hex string.
Who:   Adapters convert to/from the native id; routes only ever parse
       and print RecordId values.
"""

import re
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from mongo_api.exceptions import InvalidArgumentError

_HEX_ID = re.compile(r"[0-9a-fA-F]{24}")


class RecordId:
    """Store-assigned identifier of a User or Image."""

    __slots__ = ("_oid",)

    def __init__(self, oid: ObjectId):
        if not isinstance(oid, ObjectId):
            raise TypeError(f"RecordId wraps an ObjectId, got {type(oid).__name__}")
        self._oid = oid

    @classmethod
    def from_hex(cls, text: str) -> "RecordId":
        """
        Parse a path segment into an identifier.

        Raises:
            InvalidArgumentError: text is not 24 hexadecimal characters
        """
        if not isinstance(text, str) or not _HEX_ID.fullmatch(text):
            raise InvalidArgumentError(
                message=f"'{text}' is not a valid identifier",
                field="id",
            )
        try:
            return cls(ObjectId(text))
        except InvalidId:
            raise InvalidArgumentError(
                message=f"'{text}' is not a valid identifier",
                field="id",
            )

    @classmethod
    def generate(cls) -> "RecordId":
        return cls(ObjectId())

    @property
    def hex(self) -> str:
        return str(self._oid)

    def to_native(self) -> ObjectId:
        return self._oid

    def __str__(self) -> str:
        return self.hex

    def __repr__(self) -> str:
        return f"RecordId('{self.hex}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, RecordId):
            return self._oid == other._oid
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._oid)
