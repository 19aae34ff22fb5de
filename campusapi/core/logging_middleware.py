import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

# campusapi 로거는 JSON 핸들러로 출력됨
logger = logging.getLogger("campusapi")

# 헬스체크는 요청 로그 생략
_QUIET_PATHS = {"/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.time()
        method = request.method
        path = request.url.path
        client = request.client.host if request.client else "-"

        if path not in _QUIET_PATHS:
            logger.info(f"[Request] {method} {path} from {client}")
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"[Unhandled Error] {method} {path} from {client}")
            raise

        duration_ms = (time.time() - start) * 1000
        message = (
            f"[Response] {method} {path} from {client} -> "
            f"{response.status_code} in {duration_ms:.1f}ms"
        )
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        elif path not in _QUIET_PATHS:
            logger.info(message)
        return response
