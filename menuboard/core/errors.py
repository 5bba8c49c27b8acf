import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

log = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Error raised by services and crud helpers.

    `details` is returned to the client, `cause` never is: it only ends up
    in the logs.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: Optional[Any] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.cause = cause

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


def _is_unique_violation(exc: IntegrityError) -> bool:
    text = str(getattr(exc, "orig", exc)).lower()
    return "unique" in text or "duplicate" in text


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        log.error("%s %s -> %s", request.method, request.url.path, exc.message, exc_info=exc.cause or exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"path": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Invalid data", "details": details})


async def integrity_error_handler(request: Request, exc: IntegrityError):
    if _is_unique_violation(exc):
        return JSONResponse(status_code=409, content={"message": "Value already in use"})
    return JSONResponse(status_code=400, content={"message": "Invalid reference"})


async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
