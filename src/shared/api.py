"""HTTP plumbing shared by every router: error rendering and request context."""

from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError as DomainValidationError
from protean.integrations.fastapi import register_exception_handlers as register_domain_exception_handlers
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from shared.config import get_settings
from shared.errors import InternalError, StorefrontError, ValidationError
from shared.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


def error_response(exc: StorefrontError, debug: str | None = None) -> JSONResponse:
    content = exc.to_dict()
    debug = debug or getattr(exc, "debug", None)
    if debug and get_settings().expose_error_details:
        content["debug"] = debug
    return JSONResponse(status_code=exc.status_code, content=content)


def _validation_messages(errors) -> dict:
    messages: dict[str, list[str]] = {}
    for error in errors:
        location = [str(part) for part in error["loc"] if part not in ("body", "query", "path", "header")]
        messages.setdefault(".".join(location) or "__root__", []).append(error["msg"])
    return messages


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", kind=exc.kind, message=exc.message)
    return error_response(exc)


async def domain_validation_handler(request: Request, exc: DomainValidationError) -> JSONResponse:
    messages = exc.messages if isinstance(exc.messages, dict) else {"__root__": list(exc.messages)}
    return error_response(ValidationError("Invalid request", messages))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(ValidationError("Invalid request", _validation_messages(exc.errors())))


async def model_validation_handler(request: Request, exc: PydanticValidationError) -> JSONResponse:
    return error_response(ValidationError("Invalid request", _validation_messages(exc.errors())))


async def store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error("store_error", error=str(exc), error_type=type(exc).__name__)
    return error_response(InternalError(), debug=str(exc))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))
    return error_response(InternalError(), debug=str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"success": false, "kind", "message", "errors"}``.

    Protean's handlers are installed first; the ones below replace them for
    Storefront errors and domain validation failures.
    """
    register_domain_exception_handlers(app)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(DomainValidationError, domain_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PydanticValidationError, model_validation_handler)
    app.add_exception_handler(PyMongoError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


async def request_context_middleware(request: Request, call_next):
    """Bind request id, method and path into the log context for this request."""
    request_id = request.headers.get("X-Request-Id") or str(uuid4())
    clear_context()
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-Id"] = request_id
    return response
