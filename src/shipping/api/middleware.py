"""Request tracking middleware.

Every request gets a random id, returned in the ``X-ShippingConnector-Request-Id``
header, bound to the structlog context and echoed as ``tag`` in error bodies.
"""

import secrets

from fastapi import Request

from shipping.utils.logging import add_context, clear_context

REQUEST_ID_HEADER = "X-ShippingConnector-Request-Id"


def generate_request_id(length: int = 16) -> str:
    return secrets.token_urlsafe(length)[:length]


async def request_tracking_middleware(request: Request, call_next):
    request_id = generate_request_id()
    request.state.request_id = request_id
    clear_context()
    add_context(request_id=request_id, path=request.url.path)

    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
