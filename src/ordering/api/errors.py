"""Error envelope for the HTTP API.

Every failure is reported as ``{"success": false, "error": ..., "code": ...}``
with the HTTP status that matches ``code``. Field-level ``details`` and raw
exception messages are only exposed outside production.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from ordering.shared.errors import OrderingError
from ordering.utils.logging import is_production

logger = structlog.get_logger(__name__)

STATUS_BY_CODE = {
    "VALIDATION_ERROR": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "SERVER_ERROR": 500,
}

GENERIC_SERVER_ERROR = "Internal server error"


def error_response(code: str, message: str, details=None) -> JSONResponse:
    content = {"success": False, "error": message, "code": code}
    if details and not is_production():
        content["details"] = details
    return JSONResponse(status_code=STATUS_BY_CODE.get(code, 500), content=content)


def _request_validation_details(exc: RequestValidationError) -> dict:
    details = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        details.setdefault(".".join(location) or "request", []).append(error.get("msg", "Invalid value"))
    return details


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return error_response("VALIDATION_ERROR", "Validation failed", exc.messages)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return error_response("VALIDATION_ERROR", "Validation failed", _request_validation_details(exc))

    @app.exception_handler(ObjectNotFoundError)
    async def handle_not_found(request: Request, exc: ObjectNotFoundError):
        return error_response("NOT_FOUND", str(exc.args[0]) if exc.args else "Not found")

    @app.exception_handler(OrderingError)
    async def handle_ordering_error(request: Request, exc: OrderingError):
        if exc.code == "SERVER_ERROR":
            logger.error("Ordering error", path=request.url.path, error=exc.message)
            return error_response("SERVER_ERROR", GENERIC_SERVER_ERROR if is_production() else exc.message)
        return error_response(exc.code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path, method=request.method)
        return error_response("SERVER_ERROR", GENERIC_SERVER_ERROR if is_production() else str(exc))
