"""Domain exceptions and their HTTP mapping.

서비스 계층은 HTTP 를 모르는 도메인 예외만 던지고,
main 에서 등록한 exception handler 가 상태 코드와 공통 에러 바디로 변환합니다.

공통 에러 바디:
    {"timestamp": ..., "status": 409, "error": "User Already Exists", "message": ...}
"""
from __future__ import annotations

import logging
from http import HTTPStatus
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class ArenaError(Exception):
    """Base class for errors that map to a specific HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UserAlreadyExistsError(ArenaError):
    """Raised when a username or email is already registered."""

    status_code = status.HTTP_409_CONFLICT
    error = "User Already Exists"


class InvalidCredentialsError(ArenaError):
    """Raised when login fails. The message never says which part was wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Invalid Credentials"


class ProfileValidationError(ArenaError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class UserNotFoundError(ArenaError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


def error_body(
    status_code: int,
    error: str,
    message: str,
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status_code,
        "error": error,
        "message": message,
    }
    if extra:
        body.update(extra)
    return body


def _field_name(loc: tuple) -> str:
    # ("body", "username") -> "username", ("query", "limit") -> "limit"
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


def _error_message(err: Dict[str, Any]) -> str:
    # field_validator 의 ValueError 는 "Value error, " 접두사 없이 원래 메시지를 사용
    ctx_error = (err.get("ctx") or {}).get("error")
    if err.get("type") == "value_error" and ctx_error is not None:
        return str(ctx_error)
    return err.get("msg") or "Invalid value"


async def arena_error_handler(request: Request, exc: ArenaError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.error, exc.message),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map request validation failures to 400 with per-field messages.

    같은 필드에 여러 에러가 있으면 첫 번째 메시지만 유지합니다.
    """
    field_errors: Dict[str, str] = {}
    for err in exc.errors():
        field = _field_name(tuple(err.get("loc", ())))
        field_errors.setdefault(field, _error_message(err))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            status.HTTP_400_BAD_REQUEST,
            "Validation Error",
            "Input validation failed",
            {"fieldErrors": field_errors},
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    try:
        error = HTTPStatus(exc.status_code).phrase
    except ValueError:
        error = "Error"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, error, message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # 내부 정보는 로그에만 남기고 클라이언트에는 숨김
    logger.error(
        "An unexpected error occurred while handling %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            GENERIC_ERROR_MESSAGE,
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ArenaError, arena_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
