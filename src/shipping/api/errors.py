"""Map connector errors to HTTP responses.

Error bodies are ``{"errorCode", "errorDetail", "tag", "context"}`` where
``tag`` is the request id.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shipping.errors import ShippingError, ValidationError

logger = structlog.get_logger(__name__)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def error_response(request: Request, exc: ShippingError) -> JSONResponse:
    body = exc.to_dict()
    body["tag"] = _request_id(request)
    return JSONResponse(status_code=exc.status_code, content=body)


async def shipping_error_handler(request: Request, exc: ShippingError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log("request_failed", status=exc.status_code, error_code=exc.error_code, error=str(exc))
    return error_response(request, exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["type"]} for error in exc.errors()
    ]
    return error_response(request, ValidationError("Malformed request", {"errors": errors}))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShippingError, shipping_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
