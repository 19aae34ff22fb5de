import logging
import traceback
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse

from .exceptions import InternalServerError, ServiceException

logger = logging.getLogger("campusapi")


def _request_context(request: Request) -> Dict[str, Any]:
    client = request.client.host if request.client else "-"
    return {
        "method": request.method,
        "path": request.url.path,
        "client": client,
    }


def _error_content(code: str, message: str, details: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return {
        "success": False,
        "error": {"code": code, "message": message, "details": details or {}},
    }


async def handle_base_api_exception(request, exc):
    ctx = _request_context(request)
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"[BaseAPIException] {ctx['method']} {ctx['path']} from {ctx['client']} "
        f"-> {exc.status_code}: {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content=exc.detail)  # type: ignore[arg-type]


async def handle_http_exception(request, exc):
    ctx = _request_context(request)
    error_msg = (
        f"[HTTPException] {ctx['method']} {ctx['path']} from {ctx['client']} "
        f"-> {exc.status_code}: {exc.detail}"
    )

    if exc.status_code >= 500:
        tb_str = "".join(traceback.format_tb(exc.__traceback__))
        logger.error(f"{error_msg}\n\nStack Trace:\n{tb_str}")
    else:
        logger.warning(error_msg)

    # 이미 구조화된 detail은 그대로 전달
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = _error_content("HTTP_ERROR", str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request, exc):
    ctx = _request_context(request)
    logger.warning(
        f"[ValidationError] {ctx['method']} {ctx['path']} from {ctx['client']} -> 422: {exc.errors()}"
    )
    return JSONResponse(
        status_code=422,
        content=_error_content(
            "VALIDATION_001", "Validation failed", {"errors": exc.errors()}
        ),
    )


async def handle_service_exception(request, exc: ServiceException):
    ctx = _request_context(request)
    logger.error(
        f"[ServiceException] {ctx['method']} {ctx['path']} from {ctx['client']}: {str(exc)}"
    )
    return JSONResponse(
        status_code=500,
        content=_error_content(exc.error_code, exc.message or "Service error"),
    )


async def handle_unexpected_error(request, exc):
    ctx = _request_context(request)
    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        f"[Unhandled Error] {ctx['method']} {ctx['path']} from {ctx['client']}\n"
        f"Exception Type: {type(exc).__name__}\n"
        f"Exception Message: {str(exc)}\n\n"
        f"Full Stack Trace:\n{tb_str}"
    )

    # 호출자에게는 스택 트레이스를 노출하지 않음
    internal = InternalServerError()
    return JSONResponse(status_code=internal.status_code, content=internal.detail)  # type: ignore[arg-type]
