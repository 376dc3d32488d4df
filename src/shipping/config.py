"""Connector configuration.

Values are read from the environment once and passed explicitly into each
workflow and adapter. ``get_config()`` / ``set_config()`` hold the
process-wide instance the same way the adapter factories do.
"""

import json
import os
from dataclasses import dataclass, field

DEFAULT_UPS_BASE_URL = "https://wwwcie.ups.com/rest"
DEFAULT_TRACKING_BASE_URL = "https://wwwapps.ups.com/WebTracking/track"
DEFAULT_MARKETPLACE_URL = "https://testmarketplace.appdirect.com"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ShipperInfo:
    """The account holder shipping every parcel."""

    name: str = ""
    shipper_number: str = ""
    tax_identification_number: str = ""
    street1: str = ""
    street2: str = ""
    city: str = ""
    state_code: str = ""
    zip: str = ""
    country: str = ""
    phone: str = ""


@dataclass(frozen=True)
class CarrierSettings:
    base_url: str = DEFAULT_UPS_BASE_URL
    access_key: str = ""
    username: str = ""
    password: str = ""
    account_number: str = ""
    tracking_base_url: str = DEFAULT_TRACKING_BASE_URL
    use_negotiated_rates: bool = False
    dimension_precision: int = 2
    label_format: str = "GIF"  # GIF, EPL, ZPL or STARPL
    timeout: float = 30.0
    shipper: ShipperInfo = field(default_factory=ShipperInfo)


@dataclass(frozen=True)
class ChannelConfig:
    """A marketplace channel that may call this connector."""

    partner: str
    base_url: str
    key: str = ""
    secret: str = ""


@dataclass(frozen=True)
class ConnectorConfig:
    shared_auth_secret: str = ""
    carrier: CarrierSettings = field(default_factory=CarrierSettings)
    channels: tuple[ChannelConfig, ...] = (ChannelConfig(partner="APPDIRECT", base_url=DEFAULT_MARKETPLACE_URL),)
    tracking_concurrency: int = 8
    notification_timeout: float = 10.0

    def get_channel(self, partner: str) -> ChannelConfig | None:
        """Return the channel configured for ``partner``, or None."""
        return next((c for c in self.channels if c.partner == partner), None)

    @classmethod
    def from_env(cls) -> "ConnectorConfig":
        env = os.environ
        shipper = ShipperInfo(
            name=env.get("UPS_SHIPPER_NAME", ""),
            shipper_number=env.get("UPS_SHIPPER_NUMBER", ""),
            tax_identification_number=env.get("UPS_SHIPPER_TAX_ID", ""),
            street1=env.get("UPS_SHIPPER_STREET1", ""),
            street2=env.get("UPS_SHIPPER_STREET2", ""),
            city=env.get("UPS_SHIPPER_CITY", ""),
            state_code=env.get("UPS_SHIPPER_STATE", ""),
            zip=env.get("UPS_SHIPPER_POSTALCODE", ""),
            country=env.get("UPS_SHIPPER_COUNTRY", ""),
            phone=env.get("UPS_SHIPPER_PHONE", ""),
        )
        carrier = CarrierSettings(
            base_url=env.get("UPS_BASE_URL", DEFAULT_UPS_BASE_URL),
            access_key=env.get("UPS_ACCESS_KEY", ""),
            username=env.get("UPS_USERNAME", ""),
            password=env.get("UPS_PASSWORD", ""),
            account_number=env.get("UPS_ACCOUNT_NUMBER", ""),
            tracking_base_url=env.get("UPS_TRACKING_BASE_URL", DEFAULT_TRACKING_BASE_URL),
            use_negotiated_rates=_env_flag("UPS_NEGOTIATED_RATES_FLAG"),
            dimension_precision=int(env.get("UPS_DIMENSION_PRECISION", "2")),
            label_format=env.get("UPS_LABEL_FORMAT", "GIF"),
            timeout=float(env.get("UPS_TIMEOUT_SECONDS", "30")),
            shipper=shipper,
        )

        channels = cls.channels
        raw_channels = env.get("APPDIRECT_CHANNELS")
        if raw_channels:
            channels = tuple(
                ChannelConfig(
                    partner=item["partner"],
                    base_url=item["baseUrl"],
                    key=item.get("credentials", {}).get("key", ""),
                    secret=item.get("credentials", {}).get("secret", ""),
                )
                for item in json.loads(raw_channels)
            )

        return cls(
            shared_auth_secret=env.get("SHARED_AUTH_SECRET", ""),
            carrier=carrier,
            channels=channels,
            tracking_concurrency=int(env.get("TRACKING_CONCURRENCY", "8")),
            notification_timeout=float(env.get("APPDIRECT_TIMEOUT_SECONDS", "10")),
        )


_config: ConnectorConfig | None = None


def get_config() -> ConnectorConfig:
    """Return the active configuration, loading it from the environment once."""
    global _config
    if _config is None:
        _config = ConnectorConfig.from_env()
    return _config


def set_config(config: ConnectorConfig) -> None:
    """Override the active configuration (useful for tests)."""
    global _config
    _config = config


def reset_config() -> None:
    global _config
    _config = None
