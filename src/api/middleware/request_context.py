# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request logging context middleware.

Binds a request ID and the calling user's ID into the structlog context so
that every log line emitted while serving a request carries them. The
request ID is taken from the X-Request-ID header when the gateway supplies
one, otherwise generated, and echoed back on the response.

Example:
    GET /api/v1/dashboard/stats
    X-User-Id: 0b6f...

    # Log lines while serving it include request_id=... user_id=0b6f...
"""

from typing import Awaitable, Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.utils.logging import bind_context, clear_context

REQUEST_ID_HEADER = "X-Request-ID"
USER_ID_HEADER = "X-User-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware binding per-request logging context.

    The request ID is also stored in request.state.request_id.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Bind context, process the request and clear context afterwards.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler.

        Returns:
            HTTP response carrying the X-Request-ID header.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        clear_context()
        bind_context(
            request_id=request_id,
            user_id=request.headers.get(USER_ID_HEADER),
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        finally:
            clear_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
