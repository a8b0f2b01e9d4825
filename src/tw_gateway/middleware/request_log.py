"""Request logging middleware.

Every wallet API call is logged with the active account, so a failed
transfer can be traced back to the session that sent it. The request_id is
stored on request.state for ApiResponse and echoed in X-Request-ID.

Log format:
    INFO [POST] /api/v1/wallet/transfers -> 200 (23ms) acct=acc-1 req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("tw.request")


def _active_account(request: Request) -> str:
    sessions = getattr(request.app.state, "sessions", None)
    if sessions is None or not sessions.has_session:
        return "-"
    return sessions.current.account_id


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = request.headers.get("x-request-id") or f"req_{uuid.uuid4().hex[:12]}"

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = request.state.request_id

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s -> %d (%.0fms) acct=%s %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            _active_account(request),
            request.state.request_id,
        )
        return response
