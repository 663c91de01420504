"""Length and area units with exact Decimal conversion."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum

# Default comparison tolerance for lengths, in the unit being compared.
LENGTH_TOLERANCE = Decimal("0.01")

# Precision that converted lengths are rounded to.
LENGTH_QUANTUM = Decimal("0.0001")


class AreaUnit(str, Enum):
    """Area units for roll goods."""

    SQUARE_INCHES = "sqin"
    SQUARE_FEET = "sqft"
    SQUARE_MILLIMETERS = "sqmm"
    SQUARE_CENTIMETERS = "sqcm"
    SQUARE_METERS = "sqm"


class LengthUnit(str, Enum):
    """Length units accepted for stock and demand."""

    INCHES = "inches"
    FEET = "ft"
    MILLIMETERS = "mm"
    CENTIMETERS = "cm"
    METERS = "m"

    @classmethod
    def parse(cls, value: str | LengthUnit) -> LengthUnit:
        """Resolve a unit name, accepting common aliases.

        Args:
            value: Unit name such as "ft", "feet", "in" or "mm".

        Returns:
            The matching LengthUnit.

        Raises:
            ValueError: If the name is not a known length unit.
        """
        if isinstance(value, LengthUnit):
            return value
        key = value.strip().lower()
        unit = _ALIASES.get(key)
        if unit is None:
            raise ValueError(f"Unknown length unit: {value!r}")
        return unit

    @property
    def area_unit(self) -> AreaUnit:
        """Square unit matching this length unit."""
        return _AREA_UNITS[self]

    @property
    def per_foot(self) -> Decimal:
        """How many of this unit make up one foot."""
        return _UNITS_PER_FOOT[self]


_UNITS_PER_FOOT: dict[LengthUnit, Decimal] = {
    LengthUnit.INCHES: Decimal("12"),
    LengthUnit.FEET: Decimal("1"),
    LengthUnit.MILLIMETERS: Decimal("304.8"),
    LengthUnit.CENTIMETERS: Decimal("30.48"),
    LengthUnit.METERS: Decimal("0.3048"),
}

_AREA_UNITS: dict[LengthUnit, AreaUnit] = {
    LengthUnit.INCHES: AreaUnit.SQUARE_INCHES,
    LengthUnit.FEET: AreaUnit.SQUARE_FEET,
    LengthUnit.MILLIMETERS: AreaUnit.SQUARE_MILLIMETERS,
    LengthUnit.CENTIMETERS: AreaUnit.SQUARE_CENTIMETERS,
    LengthUnit.METERS: AreaUnit.SQUARE_METERS,
}

_ALIASES: dict[str, LengthUnit] = {
    "in": LengthUnit.INCHES,
    "inch": LengthUnit.INCHES,
    "inches": LengthUnit.INCHES,
    "ft": LengthUnit.FEET,
    "foot": LengthUnit.FEET,
    "feet": LengthUnit.FEET,
    "mm": LengthUnit.MILLIMETERS,
    "cm": LengthUnit.CENTIMETERS,
    "m": LengthUnit.METERS,
}


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a numeric value to a finite Decimal.

    Floats go through their shortest repr so 9.5 becomes Decimal("9.5")
    rather than its binary expansion.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        except (InvalidOperation, TypeError) as e:
            raise ValueError(f"Not a valid number: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def convert_length(value: Decimal, from_unit: LengthUnit, to_unit: LengthUnit) -> Decimal:
    """Convert a length between units.

    Same-unit conversions return the value untouched; others are rounded
    to LENGTH_QUANTUM.
    """
    if from_unit == to_unit:
        return value
    converted = value * to_unit.per_foot / from_unit.per_foot
    return converted.quantize(LENGTH_QUANTUM)


def to_feet(value: Decimal, unit: LengthUnit) -> Decimal:
    """Convert a length to feet."""
    return convert_length(value, unit, LengthUnit.FEET)


def lengths_match(
    a: Decimal,
    a_unit: LengthUnit,
    b: Decimal,
    b_unit: LengthUnit,
    tolerance: Decimal = LENGTH_TOLERANCE,
) -> bool:
    """Check whether two lengths are equal within tolerance.

    The comparison happens in the unit of the first length.
    """
    return abs(a - convert_length(b, b_unit, a_unit)) <= tolerance
