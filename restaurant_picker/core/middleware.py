"""HTTP middleware: request correlation and CORS.

Usage:
    app.middleware("http")(cors_middleware)
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from restaurant_picker.core.config import settings
from restaurant_picker.core.cors import build_cors_headers
from restaurant_picker.core.logging import clear_request_id, set_request_id


async def request_id_middleware(request: Request, call_next) -> Response:
    """Attach a correlation id to the request context and the response.

    The incoming ``X-Request-ID`` (header name configurable via
    ``LOG_REQUEST_ID_HEADER``) is reused when present, otherwise a UUID is
    generated. The response echoes it along with ``X-Request-Duration-ms``.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def cors_middleware(request: Request, call_next) -> Response:
    """Answer preflight requests and add CORS headers to every response.

    Any ``OPTIONS`` request gets an empty 200 so browsers can always read
    the preflight, whether or not they sent ``Origin``.
    """

    if request.method == "OPTIONS":
        return Response(status_code=200, headers=build_cors_headers())

    response: Response = await call_next(request)
    response.headers.update(build_cors_headers())
    return response
