"""Middleware that scopes a correlation id to each inbound request."""

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.correlation import correlation_id_ctx_var, new_correlation_id
from core.headers import Header


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = request.headers.get(Header.CORRELATION_ID)
        correlation_id = incoming or new_correlation_id()

        request.state.correlation_id = correlation_id
        token = correlation_id_ctx_var.set(correlation_id)
        try:
            response: Response = await call_next(request)
        finally:
            correlation_id_ctx_var.reset(token)

        # Echo back for client correlation
        response.headers[Header.CORRELATION_ID] = correlation_id
        return response
