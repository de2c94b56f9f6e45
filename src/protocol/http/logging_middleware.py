from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
GAMES_PREFIX = "/api/games/"


def _game_id_from_path(path: str) -> Optional[str]:
    if not path.startswith(GAMES_PREFIX):
        return None
    gid = path[len(GAMES_PREFIX):].split("/", 1)[0]
    return gid or None


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID (the caller's, if sent) and log the round trip.

    Game routes also carry the ``game_id`` so worker logs and request logs can
    be lined up.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        game_id = _game_id_from_path(request.url.path)

        logger.info(
            "request",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "game_id": game_id,
            },
        )

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            "response",
            extra={
                "request_id": request_id,
                "game_id": game_id,
                "status_code": response.status_code,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return response
