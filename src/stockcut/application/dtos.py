"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from stockcut.domain.entities import CuttingPlan, Order, StockTransaction
from stockcut.domain.value_objects import LengthUnit


@dataclass(frozen=True)
class OptimizeResult:
    """Outcome of a successful optimization run."""

    order: Order
    cutting_plan: CuttingPlan

    @property
    def cutting_plan_id(self) -> str:
        return self.cutting_plan.plan_id

    @property
    def status(self) -> str:
        return self.cutting_plan.status.value


@dataclass(frozen=True)
class CommitResult:
    """Outcome of committing a cutting plan to inventory.

    Attributes:
        order: The order after its status moved to the production stage.
        cutting_plan: The plan, now Committed.
        transactions: Stock transactions written, one per pipe (profiles)
            or per batch drawn from (wire mesh).
    """

    order: Order
    cutting_plan: CuttingPlan
    transactions: tuple[StockTransaction, ...] = ()

    @property
    def total_value(self) -> Decimal:
        """Stock value consumed by the commit, as a positive number."""
        return -sum((t.total_value_change for t in self.transactions), Decimal("0"))


@dataclass(frozen=True)
class PipeOrderLine:
    """Pipes of one standard length to pull from stock or buy."""

    material_id: str
    material_name: str
    gauge: str | None
    standard_length: Decimal
    unit: LengthUnit
    quantity: int
    total_scrap: Decimal


@dataclass(frozen=True)
class PipeOrderSummary:
    """Procurement view of a cutting plan across all materials."""

    order_id: str
    cutting_plan_id: str
    lines: tuple[PipeOrderLine, ...] = field(default_factory=tuple)
    total_weight: Decimal = Decimal("0")

    @property
    def total_pipes(self) -> int:
        return sum(line.quantity for line in self.lines)
