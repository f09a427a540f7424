from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from keycalc.core.context import request_scope

logger = logging.getLogger("keycalc.request")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:
        with request_scope(request.headers.get("x-request-id")) as request_id:
            start_time = time.perf_counter()
            extra = {"path": request.url.path, "method": request.method}
            logger.info("request.start", extra=extra)

            status_code = 500
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                extra.update({"duration_ms": round(duration_ms, 2), "status_code": status_code})
                logger.info("request.end", extra=extra)

        response.headers["X-Request-ID"] = request_id
        return response
