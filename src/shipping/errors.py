"""Error taxonomy for the shipping connector.

Every error carries an HTTP status, a stable machine-readable ``error_code``
and a human-readable ``detail``. The API layer renders them as
``{"errorCode", "errorDetail", "tag", "context"}``.
"""

from typing import Any


class ShippingError(Exception):
    """Base class for all errors surfaced to connector callers."""

    status_code = 500
    error_code = "internal.error"

    def __init__(self, detail: Any = None, context: dict | None = None) -> None:
        self.detail = detail if detail is not None else self.default_detail()
        self.context = context
        super().__init__(self.detail if isinstance(self.detail, str) else repr(self.detail))

    def default_detail(self) -> Any:
        return self.__class__.__name__

    def to_dict(self) -> dict:
        return {
            "errorCode": self.error_code,
            "errorDetail": self.detail,
            "context": self.context,
        }


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------
class ValidationError(ShippingError):
    """Malformed input. Never reaches the carrier."""

    MALFORMED_REQUEST = "malformed_request"
    INVALID_ADDRESS = "invalid_address"

    def __init__(
        self,
        detail: Any = None,
        context: dict | None = None,
        kind: str = MALFORMED_REQUEST,
    ) -> None:
        self.kind = kind
        if kind == self.INVALID_ADDRESS:
            self.status_code = 422
            self.error_code = "invalid.address"
        else:
            self.status_code = 400
            self.error_code = "invalid.request"
        super().__init__(detail, context)


class UnsupportedUnitError(ShippingError):
    status_code = 400
    error_code = "unsupported.unit"

    def __init__(self, unit: str) -> None:
        self.unit = unit
        super().__init__(f"Unsupported unit of measurement: {unit!r}")


class UnsupportedCountryError(ShippingError):
    status_code = 501
    error_code = "unsupported.country"

    def __init__(self, country: str | None, detail: str = "country.cannot.be.validated.by.ups") -> None:
        self.country = country
        super().__init__(detail, {"country": country})


class NotFoundError(ShippingError):
    status_code = 404
    error_code = "not.found"

    def __init__(self, resource: str, identifier: str) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"No {resource} found for {identifier!r}")


class PreconditionFailedError(ShippingError):
    status_code = 412
    error_code = "precondition.failed"


class ConflictError(ShippingError):
    """The quote behind a rate token has already been consumed."""

    status_code = 409
    error_code = "already.shipped"

    def __init__(self, detail: Any = None, context: dict | None = None, reason: str = "already_shipped") -> None:
        self.reason = reason
        super().__init__(detail, context)


class AuthenticationError(ShippingError):
    status_code = 401
    error_code = "unauthorized"


# ---------------------------------------------------------------------------
# Carrier errors
# ---------------------------------------------------------------------------
class CarrierFault(ShippingError):
    """A structured fault reported by (or on behalf of) the carrier."""

    origin = "carrier"

    def __init__(
        self,
        detail: Any = None,
        code: str | None = None,
        description: str | None = None,
        context: dict | None = None,
    ) -> None:
        self.code = code
        self.description = description
        ctx = {"origin": self.origin, "code": code, "description": description}
        if context:
            ctx.update(context)
        super().__init__(detail or description, ctx)


class CarrierClientFault(CarrierFault):
    """The carrier rejected the request because of caller-supplied data."""

    status_code = 400
    error_code = "carrier.client.fault"
    origin = "client"


class CarrierServiceFault(CarrierFault):
    """The carrier failed, timed out or could not be reached."""

    status_code = 502
    error_code = "carrier.service.fault"
    origin = "carrier"


class MalformedCarrierResponseError(ShippingError):
    """The carrier answered with a shape this connector does not support."""

    status_code = 502
    error_code = "carrier.malformed.response"


class ShipmentRecordingError(ShippingError):
    """The carrier booked a shipment that could not be recorded locally.

    Never retried: a retry would book the shipment with the carrier twice.
    """

    status_code = 500
    error_code = "shipment.not.recorded"


# ---------------------------------------------------------------------------
# Marketplace errors
# ---------------------------------------------------------------------------
class NotificationError(ShippingError):
    status_code = 502
    error_code = "notification.failed"
