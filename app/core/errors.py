# app/core/errors.py
#
# Domain errors raised by the services. Routers never build HTTP errors for
# these themselves; the handlers registered in app/main.py render them as
# {"message": ..., "error": ...}.

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("app.errors")


class StockServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: str | None = None):
        super().__init__(message)
        self.message = message
        self.error = error


class ValidationError(StockServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(StockServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(StockServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str, error: str | None = None) -> dict:
    body = {"message": message}
    if error:
        body["error"] = error
    return body


async def stock_service_error_handler(request: Request, exc: StockServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Body/query parsing failures are the caller's fault, same as ValidationError
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Invalid request", "; ".join(problems)),
    )
