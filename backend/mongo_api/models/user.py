"""
Mongo API — User Record
========================

What:  The User entity and its mapping to/from a MongoDB document.

Document shape (collection "users"):
    {"_id": ObjectId, "username": str, "email": str}

Empty attributes are not written, so a user created without an email has
no "email" key at all. Reading a document back treats missing keys as "".
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from mongo_api.models.identifier import RecordId


@dataclass
class User:
    username: str = ""
    email: str = ""
    id: Optional[RecordId] = None

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {}
        if self.id is not None:
            document["_id"] = self.id.to_native()
        if self.username:
            document["username"] = self.username
        if self.email:
            document["email"] = self.email
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "User":
        oid = document.get("_id")
        return cls(
            username=document.get("username") or "",
            email=document.get("email") or "",
            id=RecordId(oid) if oid is not None else None,
        )
