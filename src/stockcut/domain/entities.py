"""Domain entities: materials, stock batches, orders and cutting plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from stockcut.domain.exceptions import AlreadyCommitted, NotGenerated
from stockcut.domain.value_objects import (
    InventoryTracking,
    LengthUnit,
    MaterialCategory,
    MaterialPlan,
    OrderStatus,
    PlanStatus,
    StockCatalogEntry,
    TransactionType,
)

OPTIMIZATION_FAILED_PREFIX = "Optimization failed:"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


@dataclass
class Batch:
    """A purchase lot of profile pipes at one standard length.

    Attributes:
        batch_id: Lot identifier.
        length: Standard length of every pipe in the lot.
        unit: Unit of ``length``.
        original_quantity: Pipes received.
        current_quantity: Pipes still on hand.
        rate_per_piece: Cost basis of one pipe.
        purchase_date: Receipt date, used for FIFO/LIFO ordering.
        gauge: Gauge of the pipes, if tracked.
    """

    batch_id: str
    length: Decimal
    unit: LengthUnit
    original_quantity: Decimal
    current_quantity: Decimal
    rate_per_piece: Decimal
    purchase_date: datetime
    gauge: str | None = None
    supplier: str | None = None
    invoice_number: str | None = None
    is_active: bool = True
    is_completed: bool = False

    def __post_init__(self) -> None:
        if self.current_quantity < 0:
            raise ValueError("Batch quantity cannot be negative")

    @property
    def is_available(self) -> bool:
        """True if the batch can still supply pipes."""
        return self.is_active and not self.is_completed and self.current_quantity > 0


@dataclass
class RollBatch:
    """A purchase lot of wire mesh rolls at one width."""

    batch_id: str
    width: Decimal
    unit: LengthUnit
    current_rolls: Decimal
    area_per_roll: Decimal
    total_area: Decimal
    rate_per_area: Decimal
    purchase_date: datetime
    supplier: str | None = None
    is_active: bool = True
    is_completed: bool = False

    def __post_init__(self) -> None:
        if self.area_per_roll <= 0:
            raise ValueError("Area per roll must be positive")
        if self.total_area < 0 or self.current_rolls < 0:
            raise ValueError("Roll stock cannot be negative")

    @property
    def is_available(self) -> bool:
        return self.is_active and not self.is_completed and self.total_area > 0


@dataclass
class LegacyStockEntry:
    """Stock-by-length row for materials tracked without batches."""

    length: Decimal
    unit: LengthUnit
    quantity: Decimal
    unit_rate: Decimal = Decimal("0")
    gauge: str | None = None


@dataclass
class Material:
    """A stock material and everything known about its inventory.

    For wire mesh, ``standard_lengths`` holds the standard roll widths.
    ``gauge_weights`` maps a gauge to its weight per foot of length.
    """

    material_id: str
    name: str
    category: MaterialCategory = MaterialCategory.PROFILE
    usage_unit: LengthUnit = LengthUnit.FEET
    standard_lengths: list[StockCatalogEntry] = field(default_factory=list)
    gauge_weights: dict[str, Decimal] = field(default_factory=dict)
    weight_unit: str = "kg"
    tracking: InventoryTracking = InventoryTracking.BATCH
    batches: list[Batch] = field(default_factory=list)
    roll_batches: list[RollBatch] = field(default_factory=list)
    stock_by_length: list[LegacyStockEntry] = field(default_factory=list)

    @property
    def is_roll_goods(self) -> bool:
        return self.category == MaterialCategory.WIRE_MESH

    def catalog(self, gauge: str | None = None) -> list[StockCatalogEntry]:
        """Standard lengths usable for the given gauge.

        Entries without a gauge apply to every gauge.
        """
        return [
            entry
            for entry in self.standard_lengths
            if entry.gauge is None or entry.gauge == gauge
        ]

    def weight_per_foot(self, gauge: str | None) -> Decimal | None:
        """Reference weight per foot for a gauge, or None if unknown."""
        if gauge is None:
            return None
        return self.gauge_weights.get(gauge)


@dataclass(frozen=True)
class RequiredMaterialCut:
    """Pieces of one profile material an order item needs."""

    material_id: str
    cut_lengths: tuple[Decimal, ...]
    gauge: str | None = None


@dataclass(frozen=True)
class RequiredMeshPanel:
    """A wire mesh panel an order item needs."""

    material_id: str
    width: Decimal
    length: Decimal
    quantity: int = 1


@dataclass
class OrderItem:
    """An order line with its material requirements."""

    item_ref: str
    material_cuts: list[RequiredMaterialCut] = field(default_factory=list)
    mesh_panels: list[RequiredMeshPanel] = field(default_factory=list)


@dataclass(frozen=True)
class HistoryEntry:
    """A status change recorded on an order."""

    status: str
    notes: str
    updated_by: str | None
    timestamp: datetime


@dataclass
class Order:
    """The slice of an order that manufacturing reads and updates."""

    order_id: str
    company_id: str | None = None
    display_id: str | None = None
    items: list[OrderItem] = field(default_factory=list)
    status: str = OrderStatus.READY_FOR_OPTIMIZATION.value
    cutting_plan_id: str | None = None
    cutting_plan_status: str | None = None
    notes: str = ""
    history: list[HistoryEntry] = field(default_factory=list)

    @property
    def label(self) -> str:
        """Identifier to show to people."""
        return self.display_id or self.order_id

    def append_note(self, line: str) -> None:
        """Append a line to the order notes."""
        self.notes = f"{self.notes}\n{line}" if self.notes else line

    def record_history(
        self, status: str, notes: str, updated_by: str | None = None
    ) -> HistoryEntry:
        entry = HistoryEntry(
            status=status, notes=notes, updated_by=updated_by, timestamp=utc_now()
        )
        self.history.append(entry)
        return entry

    def last_failure_reason(self) -> str | None:
        """Most recent optimization failure message found in the notes."""
        for line in reversed(self.notes.splitlines()):
            if line.startswith(OPTIMIZATION_FAILED_PREFIX):
                return line[len(OPTIMIZATION_FAILED_PREFIX):].strip()
        return None


@dataclass
class CuttingPlan:
    """Cutting plan aggregate for one order.

    A plan starts as Generated and may move once to Committed. Committed
    plans never change again.
    """

    order_id: str
    material_plans: tuple[MaterialPlan, ...]
    generated_at: datetime
    generated_by: str | None = None
    company_id: str | None = None
    plan_id: str = field(default_factory=new_id)
    status: PlanStatus = PlanStatus.GENERATED
    committed_by: str | None = None
    committed_at: datetime | None = None
    material_errors: tuple[str, ...] = ()

    @property
    def is_committed(self) -> bool:
        return self.status == PlanStatus.COMMITTED

    @property
    def pipe_count(self) -> int:
        return sum(plan.pipe_count for plan in self.material_plans)

    def ensure_committable(self) -> None:
        """Check the plan can be committed.

        Raises:
            AlreadyCommitted: If the plan is already committed.
            NotGenerated: If the plan is in any other non-Generated state.
        """
        if self.status == PlanStatus.COMMITTED:
            raise AlreadyCommitted()
        if self.status != PlanStatus.GENERATED:
            raise NotGenerated(
                f"Cutting plan status is '{self.status.value}'. "
                "Must be 'Generated' to commit."
            )

    def mark_committed(self, committed_by: str | None) -> None:
        self.ensure_committable()
        self.status = PlanStatus.COMMITTED
        self.committed_by = committed_by
        self.committed_at = utc_now()


@dataclass(frozen=True)
class StockTransaction:
    """Immutable audit record of one inventory movement.

    Attributes:
        quantity_change: Signed quantity; negative for stock leaving.
        quantity_unit: "pcs" for pipes, an area unit for rolls.
        unit_rate_at_transaction: Cost of one unit when the movement happened.
        total_value_change: Signed value of the movement.
        related_plan_id: Cutting plan that caused the movement, if any.
        related_pipe_index: Position of the pipe within its material plan.
    """

    material_id: str
    type: TransactionType
    quantity_change: Decimal
    quantity_unit: str
    unit_rate_at_transaction: Decimal
    total_value_change: Decimal
    transaction_id: str = field(default_factory=new_id)
    batch_id: str | None = None
    related_plan_id: str | None = None
    related_pipe_index: int | None = None
    length: Decimal | None = None
    length_unit: LengthUnit | None = None
    gauge: str | None = None
    notes: str = ""
    created_by: str | None = None
    transaction_date: datetime = field(default_factory=utc_now)
