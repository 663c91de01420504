"""Value objects for demand, stock catalog entries and cutting results.

All lengths are Decimals in the unit named alongside them. Instances are
frozen so a generated plan cannot be altered after assembly.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ._status import Orientation
from ._units import LENGTH_TOLERANCE, AreaUnit, LengthUnit, convert_length

_PERCENT = Decimal("0.01")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DemandLine:
    """A required cut piece for a profile material.

    Attributes:
        material_id: Material the piece is cut from.
        required_length: Piece length in the material's usage unit.
        source_item_ref: Order item the piece belongs to.
        gauge: Material gauge, if the material has gauges.
        quantity: Number of identical pieces.
    """

    material_id: str
    required_length: Decimal
    source_item_ref: str
    gauge: str | None = None
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.required_length <= 0:
            raise ValueError("Required length must be positive")
        if self.quantity < 1:
            raise ValueError("Quantity must be at least 1")


@dataclass(frozen=True)
class RollDemandLine:
    """A required wire mesh panel.

    Attributes:
        material_id: Roll material the panel is cut from.
        required_width: Panel width in the material's usage unit.
        required_length: Panel length in the material's usage unit.
        source_item_ref: Order item the panel belongs to.
        quantity: Number of identical panels.
    """

    material_id: str
    required_width: Decimal
    required_length: Decimal
    source_item_ref: str
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.required_width <= 0 or self.required_length <= 0:
            raise ValueError("Panel dimensions must be positive")
        if self.quantity < 1:
            raise ValueError("Quantity must be at least 1")


@dataclass(frozen=True)
class StockCatalogEntry:
    """A purchasable standard length (or roll width) of a material."""

    material_id: str
    standard_length: Decimal
    unit: LengthUnit
    gauge: str | None = None

    def __post_init__(self) -> None:
        if self.standard_length <= 0:
            raise ValueError("Standard length must be positive")

    def in_unit(self, unit: LengthUnit) -> StockCatalogEntry:
        """Return this entry expressed in another unit."""
        if unit == self.unit:
            return self
        return StockCatalogEntry(
            material_id=self.material_id,
            standard_length=convert_length(self.standard_length, self.unit, unit),
            unit=unit,
            gauge=self.gauge,
        )


@dataclass(frozen=True)
class BatchAvailability:
    """Point-in-time stock available at one standard length."""

    material_id: str
    standard_length: Decimal
    unit: LengthUnit
    available_quantity: Decimal
    gauge: str | None = None


@dataclass(frozen=True)
class CutMade:
    """One piece cut from a stock pipe."""

    required_length: Decimal
    source_item_ref: str


@dataclass(frozen=True)
class PipeAssignment:
    """A single stock pipe consumed by a plan and the cuts taken from it.

    Attributes:
        standard_length: Length of the stock pipe.
        unit: Unit of every length on this assignment.
        cuts_made: Pieces cut from the pipe in placement order.
        scrap_length: Leftover length after all cuts.
        calculated_weight: Weight of the whole pipe, zero if unknown.
    """

    standard_length: Decimal
    unit: LengthUnit
    cuts_made: tuple[CutMade, ...]
    scrap_length: Decimal
    calculated_weight: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if not self.cuts_made:
            raise ValueError("A pipe assignment needs at least one cut")
        if self.scrap_length < 0:
            raise ValueError("Scrap length must be non-negative")
        used = self.total_cut_length
        if used > self.standard_length + LENGTH_TOLERANCE:
            raise ValueError("Cuts exceed the standard length of the pipe")
        if abs(used + self.scrap_length - self.standard_length) > LENGTH_TOLERANCE:
            raise ValueError("Cut lengths plus scrap must equal the standard length")

    @property
    def total_cut_length(self) -> Decimal:
        """Sum of the lengths of all cuts on this pipe."""
        return sum((cut.required_length for cut in self.cuts_made), Decimal("0"))


@dataclass(frozen=True)
class WidthSelection:
    """Standard roll width chosen for a required width."""

    required_width: Decimal
    selected_width: Decimal
    unit: LengthUnit

    def __post_init__(self) -> None:
        if self.selected_width < self.required_width:
            raise ValueError("Selected width cannot be narrower than required width")

    @property
    def wastage_width(self) -> Decimal:
        """Width trimmed off the roll."""
        return self.selected_width - self.required_width

    @property
    def waste_percentage(self) -> Decimal:
        """Trimmed width as a percentage of the selected width."""
        return (self.wastage_width / self.selected_width * _HUNDRED).quantize(_PERCENT)

    @property
    def efficiency(self) -> Decimal:
        """Used width as a percentage of the selected width."""
        return _HUNDRED - self.waste_percentage

    def consumed_area(self, required_length: Decimal) -> Decimal:
        """Roll area consumed for a panel of the given length."""
        return self.selected_width * required_length

    def wastage_area(self, required_length: Decimal) -> Decimal:
        """Area trimmed off for a panel of the given length."""
        return self.wastage_width * required_length


@dataclass(frozen=True)
class RollAssignment:
    """A wire mesh panel mapped onto a standard roll width.

    ``selected_width`` runs across the roll and ``consumed_length`` along it.
    When the orientation is swapped, the panel's length is laid across the
    roll instead of its width.
    """

    required_width: Decimal
    required_length: Decimal
    selected_width: Decimal
    consumed_length: Decimal
    unit: LengthUnit
    source_item_ref: str
    orientation: Orientation = Orientation.ORIGINAL

    @property
    def area_unit(self) -> AreaUnit:
        return self.unit.area_unit

    @property
    def required_area(self) -> Decimal:
        return self.required_width * self.required_length

    @property
    def consumed_area(self) -> Decimal:
        return self.selected_width * self.consumed_length

    @property
    def wastage_area(self) -> Decimal:
        return self.consumed_area - self.required_area

    @property
    def waste_percentage(self) -> Decimal:
        return (self.wastage_area / self.consumed_area * _HUNDRED).quantize(_PERCENT)

    @property
    def efficiency(self) -> Decimal:
        return (self.required_area / self.consumed_area * _HUNDRED).quantize(_PERCENT)


@dataclass(frozen=True)
class PipeLengthSummary:
    """Procurement line: how many pipes of one standard length a plan uses."""

    standard_length: Decimal
    unit: LengthUnit
    quantity: int
    total_scrap: Decimal


@dataclass(frozen=True)
class MaterialPlan:
    """Cutting result for a single material and gauge.

    Attributes:
        material_id: Material the plan consumes.
        material_name: Material name at the time of planning.
        gauge: Gauge planned for, if any.
        usage_unit: Unit of all lengths in the plan.
        pipes_used: Stock pipes consumed, in the order they were opened.
        total_pipes_per_length: Pipe counts and scrap grouped by length.
        total_weight: Weight of all pipes, zero if no reference weight exists.
        rolls_used: Mesh panels mapped to roll widths (wire mesh only).
    """

    material_id: str
    material_name: str
    gauge: str | None
    usage_unit: LengthUnit
    pipes_used: tuple[PipeAssignment, ...] = ()
    total_pipes_per_length: tuple[PipeLengthSummary, ...] = ()
    total_weight: Decimal = Decimal("0")
    rolls_used: tuple[RollAssignment, ...] = ()

    @property
    def total_scrap(self) -> Decimal:
        """Scrap summed over all pipes."""
        return sum((pipe.scrap_length for pipe in self.pipes_used), Decimal("0"))

    @property
    def pipe_count(self) -> int:
        return len(self.pipes_used)

    @property
    def total_wastage_area(self) -> Decimal:
        """Trimmed roll area summed over all mesh panels."""
        return sum((roll.wastage_area for roll in self.rolls_used), Decimal("0"))


@dataclass(frozen=True)
class Shortfall:
    """Stock missing for one standard length during commit validation.

    Attributes:
        material_id: Material short of stock.
        material_name: Display name of the material.
        standard_length: Length (or roll width) that is short.
        unit: Unit of the standard length.
        required: Quantity the plan needs (pieces, or area for rolls).
        available: Quantity on hand; None when no stock entry exists at all.
        gauge: Gauge of the required stock, if any.
    """

    material_id: str
    material_name: str
    standard_length: Decimal
    unit: LengthUnit
    required: Decimal
    available: Decimal | None
    gauge: str | None = None

    @property
    def message(self) -> str:
        """Human-readable description of the shortfall."""
        label = f"{self.material_name} of length {self.standard_length} {self.unit.value}"
        if self.gauge:
            label = f"{label} (gauge {self.gauge})"
        if self.available is None:
            return f"No stock entry found for {label}"
        return (
            f"Insufficient stock for {label}. "
            f"Available: {self.available}, Required: {self.required}"
        )


@dataclass(frozen=True)
class Deduction:
    """Stock removed from inventory by one deduct call.

    Attributes:
        material_id: Material the stock belongs to.
        batch_id: Batch consumed; None for stock tracked without batches.
        quantity: Amount removed, in ``quantity_unit``.
        quantity_unit: "pcs" for pipes, an area unit for rolls.
        unit_rate: Cost of one unit of quantity at deduction time.
        length: Standard length (or roll width) of the stock.
        unit: Unit of ``length``.
        gauge: Gauge of the stock, if any.
    """

    material_id: str
    batch_id: str | None
    quantity: Decimal
    quantity_unit: str
    unit_rate: Decimal
    length: Decimal
    unit: LengthUnit
    gauge: str | None = None

    @property
    def value(self) -> Decimal:
        """Cost of the stock removed."""
        return self.quantity * self.unit_rate
