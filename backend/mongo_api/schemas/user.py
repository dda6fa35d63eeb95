"""
Mongo API — User Request/Response Schemas
==========================================

What:  Pydantic models for the JSON that crosses the HTTP boundary.
How:   UserCreate decodes the POST /users body; UserResponse is the shape
       returned by GET /users/{id} and by every element of GET /users/all.

Decoding rules for UserCreate:
    - missing keys and null values become ""
    - a JSON null body is an empty user
    - unknown keys are ignored
    - a non-string value (number, object, list) is a decoding error
"""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from mongo_api.models.user import User


class UserCreate(BaseModel):
    username: str = Field(default="", description="Display name (not validated)")
    email: str = Field(default="", description="Email address (not validated)")

    model_config = {"extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def null_body_as_empty(cls, data: Any) -> Any:
        return {} if data is None else data

    @field_validator("username", "email", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    def to_user(self) -> User:
        return User(username=self.username, email=self.email)


class UserResponse(BaseModel):
    """
    What:  A stored user as returned to clients.
    How:   Empty attributes are set to None and dropped on serialization,
           so {"id": "..."} is a valid response for a user without fields.
    """
    id: str = Field(description="24-character lowercase hex identifier")
    username: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=str(user.id) if user.id is not None else "",
            username=user.username or None,
            email=user.email or None,
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), ensure_ascii=False, separators=(",", ":"))
