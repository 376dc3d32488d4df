"""FastAPI routes for the shipping connector.

All routes live under ``/api/shipments/v1/{channel_id}`` and require the
shared secret as a bearer token. The channel id selects the marketplace
channel the request comes from.
"""

from fastapi import APIRouter, Body, Depends, Header, Query

from shipping.api.schemas import AddressValidationResponse, ErrorResponse, RateView, ShipmentView
from shipping.carrier import get_carrier
from shipping.config import ChannelConfig, get_config
from shipping.domain import shipping
from shipping.errors import AuthenticationError, NotFoundError, ValidationError
from shipping.shipment.address_validation import AddressValidationWorkflow
from shipping.shipment.booking import ShipmentWorkflow
from shipping.shipment.persistence import PersistenceGateway
from shipping.shipment.quoting import QuoteWorkflow
from shipping.shipment.tracking import TrackingStatusLookup


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
def require_shared_secret(authorization: str = Header(default="")) -> None:
    """Accept only requests carrying the configured shared secret as a bearer token."""
    token_type, _, token = authorization.partition(" ")
    if token_type.strip().lower() != "bearer":
        raise AuthenticationError("Invalid auth token type (expected bearer token)")
    secret = get_config().shared_auth_secret
    if not secret or token.strip() != secret:
        raise AuthenticationError("Unauthorized")


def get_channel(channel_id: str) -> ChannelConfig:
    channel = get_config().get_channel(channel_id)
    if channel is None:
        raise NotFoundError("channel", channel_id)
    return channel


# ---------------------------------------------------------------------------
# Shipments Router
# ---------------------------------------------------------------------------
shipments_router = APIRouter(
    prefix="/api/shipments/v1/{channel_id}",
    tags=["shipments"],
    dependencies=[Depends(require_shared_secret)],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@shipments_router.post("/validateAddress", response_model=AddressValidationResponse)
def validate_address(
    payload: dict = Body(...),
    channel: ChannelConfig = Depends(get_channel),
) -> dict:
    """Validate a US shipping address with the carrier."""
    with shipping.domain_context():
        return AddressValidationWorkflow(get_carrier()).validate(payload)


@shipments_router.post("/quote", response_model=list[RateView])
def get_quotes(
    payload: dict = Body(...),
    channel: ChannelConfig = Depends(get_channel),
) -> list[dict]:
    """Quote every service level for a shipment and record the quote."""
    with shipping.domain_context():
        workflow = QuoteWorkflow(get_config(), get_carrier(), PersistenceGateway())
        return workflow.get_quotes(payload, partner_id=channel.partner)


@shipments_router.post("/shipment", response_model=ShipmentView)
def create_shipment(
    payload: dict = Body(...),
    channel: ChannelConfig = Depends(get_channel),
) -> dict:
    """Book a shipment for a previously quoted rate."""
    with shipping.domain_context():
        workflow = ShipmentWorkflow(get_config(), get_carrier(), PersistenceGateway())
        return workflow.create_shipment(payload)


@shipments_router.get("/tracking/status", response_model=ShipmentView)
def get_tracking_status(
    tracking_number: str = Query(default="", alias="trackingNumber"),
    channel: ChannelConfig = Depends(get_channel),
) -> dict:
    """Current carrier status of a package. Nothing is recorded."""
    if not tracking_number:
        raise ValidationError('The "trackingNumber" query param is required')
    return TrackingStatusLookup(get_config(), get_carrier()).get_tracking_status(tracking_number)
