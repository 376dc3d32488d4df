"""Shipping connector API package."""

from shipping.api.errors import register_error_handlers
from shipping.api.routes import shipments_router

__all__ = ["shipments_router", "register_error_handlers"]
