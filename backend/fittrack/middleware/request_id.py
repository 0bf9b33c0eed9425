"""
FitTrack Backend — Request ID Middleware
==========================================

What:  Tags each request with a correlation ID and echoes it in X-Request-ID.
Why:   Every log line from one request, and the error body a client gets
       back, share the same ID, so a failed workout create can be traced from
       the client report to the store's rollback log.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Use the client's X-Request-ID when present, otherwise generate a short
    one; store it in request_id_var and request.state, return it in the
    response headers.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = rid
        return response
