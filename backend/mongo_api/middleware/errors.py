"""
Mongo API — Catch-All Error Middleware
=======================================

What:  Turns any exception that escaped the route handlers into a JSON 500.
How:   Runs innermost, below CORS and Request ID, so the 500 still carries
       Access-Control-Allow-Origin and X-Request-ID. Application errors
       (MongoApiError) never reach it; their handlers answer first.

Exceptions raised while a streaming body is being sent are not caught here:
the response has already started by then.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from mongo_api.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


def internal_error_response(rid: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again.",
            "request_id": rid,
        },
    )


class CatchAllExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            rid = request_id_var.get("")
            logger.error(
                "[%s] %s on %s: %s", rid, type(exc).__name__, request.url.path, exc,
                exc_info=True,
            )
            return internal_error_response(rid)
