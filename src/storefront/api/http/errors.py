"""Uniform JSON error envelope for every failure the API reports."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse

from src.storefront.core.errors import AppError


def error_response(
    request: Request, status_code: int, message: str, **extra: Any
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    content = {"success": False, "message": message, **extra}
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(
        status_code=status_code, content=jsonable_encoder(content), headers=headers
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.bind(status_code=exc.status_code, error_type=type(exc).__name__).info(
        "request.rejected: {}", exc.message
    )
    return error_response(request, exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(request, exc.status_code, message)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    fields = sorted(
        {str(err["loc"][-1]) for err in errors if err.get("loc") and len(err["loc"]) > 1}
    )
    message = (
        f"Invalid or missing fields: {', '.join(fields)}" if fields else "Invalid request body"
    )
    return error_response(request, 400, message, errors=errors)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
