"""Parcel value object: one package with dimensions and weight."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String

from shipping.carrier.units import LENGTH_UNITS, WEIGHT_UNITS
from shipping.domain import shipping


@shipping.value_object
class Parcel:
    length: Float(required=True, min_value=0.0)
    width: Float(required=True, min_value=0.0)
    height: Float(required=True, min_value=0.0)
    length_unit: String(required=True, max_length=2)
    weight: Float(required=True, min_value=0.0)
    weight_unit: String(required=True, max_length=2)

    @invariant.post
    def units_must_be_known(self):
        errors = {}
        if self.length_unit not in LENGTH_UNITS:
            errors["length_unit"] = [f"Unsupported length unit: {self.length_unit}"]
        if self.weight_unit not in WEIGHT_UNITS:
            errors["weight_unit"] = [f"Unsupported weight unit: {self.weight_unit}"]
        if errors:
            raise ValidationError(errors)
