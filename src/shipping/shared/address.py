"""ShippingAddress value object: a carrier-agnostic postal address."""

from protean.fields import String

from shipping.domain import shipping


@shipping.value_object
class ShippingAddress:
    """A postal address as exchanged with marketplace callers.

    Carriers take a single display name and a single address line, so the
    helpers below join the optional parts when present.
    """

    name: String(required=True, max_length=255)
    company: String(max_length=255)
    street1: String(required=True, max_length=255)
    street2: String(max_length=255)
    city: String(required=True, max_length=100)
    state_code: String(required=True, max_length=50)
    zip: String(required=True, max_length=20)
    country: String(required=True, max_length=2)
    phone: String(max_length=50)
    email: String(max_length=255)

    def display_name(self) -> str:
        return ", ".join(part for part in (self.name, self.company) if part)

    def address_lines(self) -> list[str]:
        return [line for line in (self.street1, self.street2) if line]
