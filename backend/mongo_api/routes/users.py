"""
Mongo API — User Route Handlers
================================

What:  POST /users, GET /users/all, GET /users/{id}, DELETE /users/{id}.
How:   Each handler decodes its input, awaits one UserStore call and
       encodes the result. Errors are raised as application exceptions and
       turned into responses by the global handlers in main.py.

Route order matters: /users/all is registered before /users/{user_id}
so that "all" is never parsed as an identifier.
"""

import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import ClientDisconnect

from mongo_api.database import get_user_store
from mongo_api.exceptions import InvalidArgumentError
from mongo_api.models.identifier import RecordId
from mongo_api.models.user import User
from mongo_api.schemas.common import ErrorResponse
from mongo_api.schemas.user import UserCreate, UserResponse
from mongo_api.services.user_store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


@router.post(
    "/users",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Identifier of the new user (hex string)"},
        400: {"description": "Body is not a JSON user object", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    request: Request,
    users: UserStore = Depends(get_user_store),
) -> PlainTextResponse:
    """
    Decode {"username", "email"} from the body and insert it.

    The body is decoded by hand rather than declared as a parameter so that a
    malformed body answers 400 (FastAPI's automatic validation answers 422).
    """
    try:
        raw = await request.body()
    except ClientDisconnect:
        raise InvalidArgumentError(message="Failed to read request body", field="body")

    try:
        payload = UserCreate.model_validate_json(raw)
    except PydanticValidationError as e:
        raise InvalidArgumentError(
            message="Request body must be a JSON object with string 'username' and 'email'",
            field="body",
            context={"errors": e.error_count()},
        )

    record_id = await users.insert(payload.to_user())
    return PlainTextResponse(record_id.hex)


@router.get(
    "/users/all",
    responses={
        200: {"description": "JSON array of every user", "model": list[UserResponse]},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="List all users",
)
async def list_users(users: UserStore = Depends(get_user_store)) -> StreamingResponse:
    """
    Stream every user as a JSON array, one element at a time.

    The first user is fetched before the response starts, so a query that
    fails outright still produces a proper 500 error response.
    """
    iterator = users.list_all().__aiter__()
    first = await _next_or_none(iterator)
    return StreamingResponse(
        _stream_json_array(first, iterator),
        media_type="application/json",
    )


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Malformed identifier", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Get a user by ID",
)
async def get_user(
    user_id: str,
    users: UserStore = Depends(get_user_store),
) -> UserResponse:
    user = await users.find_by_id(RecordId.from_hex(user_id))
    return UserResponse.from_user(user)


@router.delete(
    "/users/{user_id}",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "User deleted"},
        400: {"description": "Malformed identifier", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Delete a user by ID",
)
async def delete_user(
    user_id: str,
    users: UserStore = Depends(get_user_store),
) -> PlainTextResponse:
    await users.delete_by_id(RecordId.from_hex(user_id))
    return PlainTextResponse("User deleted successfully")


# ── Streaming Helpers ─────────────────────────────────────────────────────
async def _next_or_none(iterator: AsyncIterator[User]) -> Optional[User]:
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return None


async def _stream_json_array(
    first: Optional[User],
    rest: AsyncIterator[User],
) -> AsyncIterator[str]:
    """
    Yield "[", the comma-joined users, then "]".

    Once the opening bracket is sent the status line is gone, so a store
    failure here can only be logged and re-raised; the server then aborts the
    chunked body and the client sees an incomplete transfer.
    """
    yield "["
    if first is not None:
        yield UserResponse.from_user(first).to_json()
        try:
            async for user in rest:
                yield "," + UserResponse.from_user(user).to_json()
        except Exception:
            logger.error("User listing aborted mid-stream", exc_info=True)
            raise
    yield "]"
