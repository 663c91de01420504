"""Pydantic response schemas for the REST API.

Lengths, weights and money are returned as JSON numbers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from stockcut.application.dtos import CommitResult, PipeOrderSummary
from stockcut.domain.entities import CuttingPlan, Order, StockTransaction
from stockcut.domain.value_objects import (
    MaterialPlan,
    Orientation,
    PipeAssignment,
    RollAssignment,
    WidthSelection,
)
from stockcut.web.schemas.common import HistoryEntrySchema


class CutSchema(BaseModel):
    """A piece cut from a stock pipe."""

    required_length: float = Field(..., description="Piece length")
    source_item_ref: str = Field(..., description="Order item the piece belongs to")


class PipeSchema(BaseModel):
    """A stock pipe and the pieces cut from it."""

    standard_length: float
    unit: str
    cuts: list[CutSchema]
    scrap_length: float
    calculated_weight: float

    @classmethod
    def from_domain(cls, pipe: PipeAssignment) -> PipeSchema:
        return cls(
            standard_length=float(pipe.standard_length),
            unit=pipe.unit.value,
            cuts=[
                CutSchema(
                    required_length=float(cut.required_length),
                    source_item_ref=cut.source_item_ref,
                )
                for cut in pipe.cuts_made
            ],
            scrap_length=float(pipe.scrap_length),
            calculated_weight=float(pipe.calculated_weight),
        )


class PipeLengthSummarySchema(BaseModel):
    """Pipe count and scrap for one standard length."""

    standard_length: float
    unit: str
    quantity: int
    total_scrap: float


class RollSchema(BaseModel):
    """A wire mesh panel mapped onto a roll width."""

    required_width: float
    required_length: float
    selected_width: float
    consumed_length: float
    orientation: str
    unit: str
    area_unit: str
    consumed_area: float
    wastage_area: float
    source_item_ref: str

    @classmethod
    def from_domain(cls, roll: RollAssignment) -> RollSchema:
        return cls(
            required_width=float(roll.required_width),
            required_length=float(roll.required_length),
            selected_width=float(roll.selected_width),
            consumed_length=float(roll.consumed_length),
            orientation=roll.orientation.value,
            unit=roll.unit.value,
            area_unit=roll.area_unit.value,
            consumed_area=float(roll.consumed_area),
            wastage_area=float(roll.wastage_area),
            source_item_ref=roll.source_item_ref,
        )


class MaterialPlanSchema(BaseModel):
    """Cutting result for one material and gauge."""

    material_id: str
    material_name: str
    gauge: str | None
    usage_unit: str
    pipes_used: list[PipeSchema]
    total_pipes_per_length: list[PipeLengthSummarySchema]
    total_scrap: float
    total_weight: float
    rolls_used: list[RollSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, plan: MaterialPlan) -> MaterialPlanSchema:
        return cls(
            material_id=plan.material_id,
            material_name=plan.material_name,
            gauge=plan.gauge,
            usage_unit=plan.usage_unit.value,
            pipes_used=[PipeSchema.from_domain(p) for p in plan.pipes_used],
            total_pipes_per_length=[
                PipeLengthSummarySchema(
                    standard_length=float(s.standard_length),
                    unit=s.unit.value,
                    quantity=s.quantity,
                    total_scrap=float(s.total_scrap),
                )
                for s in plan.total_pipes_per_length
            ],
            total_scrap=float(plan.total_scrap),
            total_weight=float(plan.total_weight),
            rolls_used=[RollSchema.from_domain(r) for r in plan.rolls_used],
        )


class CuttingPlanSchema(BaseModel):
    """A cutting plan for an order."""

    plan_id: str
    order_id: str
    status: str
    generated_at: str
    generated_by: str | None = None
    committed_by: str | None = None
    committed_at: str | None = None
    material_plans: list[MaterialPlanSchema]
    material_errors: list[str] = Field(
        default_factory=list, description="Materials that could not be planned"
    )
    total_pipes: int

    @classmethod
    def from_domain(cls, plan: CuttingPlan) -> CuttingPlanSchema:
        return cls(
            plan_id=plan.plan_id,
            order_id=plan.order_id,
            status=plan.status.value,
            generated_at=plan.generated_at.isoformat(),
            generated_by=plan.generated_by,
            committed_by=plan.committed_by,
            committed_at=plan.committed_at.isoformat() if plan.committed_at else None,
            material_plans=[MaterialPlanSchema.from_domain(mp) for mp in plan.material_plans],
            material_errors=list(plan.material_errors),
            total_pipes=plan.pipe_count,
        )


class OrderSchema(BaseModel):
    """The manufacturing view of an order."""

    order_id: str
    display_id: str | None = None
    status: str
    cutting_plan_id: str | None = None
    cutting_plan_status: str | None = None
    notes: str = ""
    history: list[HistoryEntrySchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, order: Order) -> OrderSchema:
        return cls(
            order_id=order.order_id,
            display_id=order.display_id,
            status=order.status,
            cutting_plan_id=order.cutting_plan_id,
            cutting_plan_status=order.cutting_plan_status,
            notes=order.notes,
            history=[
                HistoryEntrySchema(
                    status=h.status,
                    notes=h.notes,
                    updated_by=h.updated_by,
                    timestamp=h.timestamp.isoformat(),
                )
                for h in order.history
            ],
        )


class OptimizeResponseSchema(BaseModel):
    """Response for a successful optimization."""

    cutting_plan_id: str = Field(..., description="Id of the generated plan")
    status: str = Field(..., description="Plan status")
    order_status: str = Field(..., description="Order status after optimization")
    material_errors: list[str] = Field(default_factory=list)


class TransactionSchema(BaseModel):
    """A stock movement written by a commit."""

    transaction_id: str
    material_id: str
    type: str
    batch_id: str | None
    quantity_change: float
    quantity_unit: str
    unit_rate_at_transaction: float
    total_value_change: float
    related_pipe_index: int | None
    notes: str

    @classmethod
    def from_domain(cls, txn: StockTransaction) -> TransactionSchema:
        return cls(
            transaction_id=txn.transaction_id,
            material_id=txn.material_id,
            type=txn.type.value,
            batch_id=txn.batch_id,
            quantity_change=float(txn.quantity_change),
            quantity_unit=txn.quantity_unit,
            unit_rate_at_transaction=float(txn.unit_rate_at_transaction),
            total_value_change=float(txn.total_value_change),
            related_pipe_index=txn.related_pipe_index,
            notes=txn.notes,
        )


class CommitResponseSchema(BaseModel):
    """Response for a successful commit."""

    message: str = "Cuts committed successfully. Inventory updated and order status changed."
    order: OrderSchema
    cutting_plan: CuttingPlanSchema
    transactions: list[TransactionSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: CommitResult) -> CommitResponseSchema:
        return cls(
            order=OrderSchema.from_domain(result.order),
            cutting_plan=CuttingPlanSchema.from_domain(result.cutting_plan),
            transactions=[TransactionSchema.from_domain(t) for t in result.transactions],
        )


class PipeOrderLineSchema(BaseModel):
    """Pipes of one standard length to procure."""

    material_id: str
    material_name: str
    gauge: str | None
    standard_length: float
    unit: str
    quantity: int
    total_scrap: float


class PipeOrderSummarySchema(BaseModel):
    """Procurement summary of a cutting plan."""

    order_id: str
    cutting_plan_id: str
    lines: list[PipeOrderLineSchema]
    total_pipes: int
    total_weight: float

    @classmethod
    def from_domain(cls, summary: PipeOrderSummary) -> PipeOrderSummarySchema:
        return cls(
            order_id=summary.order_id,
            cutting_plan_id=summary.cutting_plan_id,
            lines=[
                PipeOrderLineSchema(
                    material_id=line.material_id,
                    material_name=line.material_name,
                    gauge=line.gauge,
                    standard_length=float(line.standard_length),
                    unit=line.unit.value,
                    quantity=line.quantity,
                    total_scrap=float(line.total_scrap),
                )
                for line in summary.lines
            ],
            total_pipes=summary.total_pipes,
            total_weight=float(summary.total_weight),
        )


class WidthSelectionSchema(BaseModel):
    """Response for standard width selection."""

    required_width: float
    selected_width: float
    wastage_width: float
    waste_percentage: float
    efficiency: float
    unit: str
    orientation: str | None = Field(
        default=None, description="Set when a panel length was given"
    )
    consumed_area: float | None = None
    wastage_area: float | None = None

    @classmethod
    def from_selection(cls, selection: WidthSelection) -> WidthSelectionSchema:
        return cls(
            required_width=float(selection.required_width),
            selected_width=float(selection.selected_width),
            wastage_width=float(selection.wastage_width),
            waste_percentage=float(selection.waste_percentage),
            efficiency=float(selection.efficiency),
            unit=selection.unit.value,
        )

    @classmethod
    def from_roll(cls, roll: RollAssignment) -> WidthSelectionSchema:
        across = (
            roll.required_width
            if roll.orientation == Orientation.ORIGINAL
            else roll.required_length
        )
        return cls(
            required_width=float(across),
            selected_width=float(roll.selected_width),
            wastage_width=float(roll.selected_width - across),
            waste_percentage=float(roll.waste_percentage),
            efficiency=float(roll.efficiency),
            unit=roll.unit.value,
            orientation=roll.orientation.value,
            consumed_area=float(roll.consumed_area),
            wastage_area=float(roll.wastage_area),
        )


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )
