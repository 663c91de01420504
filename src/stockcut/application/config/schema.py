"""Pydantic models for settings and inventory workspace files.

Two kinds of JSON document are validated here:

- StockCutConfiguration: tuning for the optimizer, commit and locks.
- WorkspaceSchema: a snapshot of materials (with their stock) and orders,
  used by the command line tools.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from stockcut.domain.value_objects import (
    PRODUCTION_STAGES,
    ConsumptionOrder,
    InventoryTracking,
    LengthUnit,
    MaterialCategory,
    OrderStatus,
)

# Supported schema versions for configuration and workspace files
# Version 1.0: Initial schema
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


def _check_version(v: str) -> str:
    """Accept known versions and newer minor versions of a known major."""
    if v in SUPPORTED_VERSIONS:
        return v
    major = v.split(".")[0]
    if any(s.split(".")[0] == major for s in SUPPORTED_VERSIONS):
        return v
    raise ValueError(
        f"Unsupported schema version: {v}. "
        f"Supported versions: {', '.join(sorted(SUPPORTED_VERSIONS))}"
    )


# =============================================================================
# Settings
# =============================================================================


class OptimizerConfigSchema(BaseModel):
    """Cutting optimizer settings."""

    model_config = ConfigDict(extra="forbid")

    tolerance: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        le=1,
        description="Slack allowed when checking a cut fits, in the material's unit",
    )
    kerf_inches: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=Decimal("0.5"),
        description="Blade width lost between adjacent cuts on a pipe, in inches",
    )


class CommitConfigSchema(BaseModel):
    """Inventory commit settings."""

    model_config = ConfigDict(extra="forbid")

    consumption_order: ConsumptionOrder = Field(
        default=ConsumptionOrder.FIFO,
        description="Batch selection discipline: FIFO (oldest first) or LIFO",
    )
    production_stage: str = Field(
        default=OrderStatus.CUTTING.value,
        description="Order status set once a plan is committed",
    )
    commit_wait_seconds: float = Field(
        default=5.0,
        gt=0,
        le=300,
        description="How long a commit waits for a concurrent commit of the same plan",
    )

    @field_validator("production_stage")
    @classmethod
    def validate_stage(cls, v: str) -> str:
        if v not in PRODUCTION_STAGES:
            raise ValueError(f"production_stage must be one of: {', '.join(PRODUCTION_STAGES)}")
        return v


class LockConfigSchema(BaseModel):
    """Optimization lock settings."""

    model_config = ConfigDict(extra="forbid")

    lease_seconds: float | None = Field(
        default=300.0,
        gt=0,
        description="Lease after which a stale optimization lock is taken over; null for none",
    )


class StockCutConfiguration(BaseModel):
    """Root settings model.

    Example:
        >>> config = StockCutConfiguration(schema_version="1.0")
        >>> config.commit.consumption_order
        <ConsumptionOrder.FIFO: 'FIFO'>
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", pattern=r"^\d+\.\d+$")
    optimizer: OptimizerConfigSchema = Field(default_factory=OptimizerConfigSchema)
    commit: CommitConfigSchema = Field(default_factory=CommitConfigSchema)
    locks: LockConfigSchema = Field(default_factory=LockConfigSchema)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        return _check_version(v)


# =============================================================================
# Workspace: materials and stock
# =============================================================================


class StandardLengthSchema(BaseModel):
    """A purchasable standard length (or roll width)."""

    model_config = ConfigDict(extra="forbid")

    length: Decimal = Field(..., gt=0, description="Standard length")
    unit: LengthUnit = Field(default=LengthUnit.FEET, description="Length unit")
    gauge: str | None = Field(default=None, description="Gauge this length applies to")


class BatchSchema(BaseModel):
    """A purchase lot of profile pipes."""

    model_config = ConfigDict(extra="forbid")

    batch_id: str = Field(..., min_length=1)
    length: Decimal = Field(..., gt=0)
    unit: LengthUnit = LengthUnit.FEET
    gauge: str | None = None
    current_quantity: Decimal = Field(..., ge=0)
    original_quantity: Decimal | None = Field(
        default=None, ge=0, description="Defaults to the current quantity"
    )
    rate_per_piece: Decimal = Field(default=Decimal("0"), ge=0)
    purchase_date: datetime
    supplier: str | None = None
    invoice_number: str | None = None
    is_active: bool = True
    is_completed: bool = False


class RollBatchSchema(BaseModel):
    """A purchase lot of wire mesh rolls."""

    model_config = ConfigDict(extra="forbid")

    batch_id: str = Field(..., min_length=1)
    width: Decimal = Field(..., gt=0)
    unit: LengthUnit = LengthUnit.FEET
    current_rolls: Decimal = Field(..., ge=0)
    area_per_roll: Decimal = Field(..., gt=0)
    total_area: Decimal | None = Field(
        default=None, ge=0, description="Defaults to rolls times area per roll"
    )
    rate_per_area: Decimal = Field(default=Decimal("0"), ge=0)
    purchase_date: datetime
    supplier: str | None = None
    is_active: bool = True
    is_completed: bool = False


class LegacyStockSchema(BaseModel):
    """Stock-by-length row for materials tracked without batches."""

    model_config = ConfigDict(extra="forbid")

    length: Decimal = Field(..., gt=0)
    unit: LengthUnit = LengthUnit.FEET
    quantity: Decimal = Field(..., ge=0)
    unit_rate: Decimal = Field(default=Decimal("0"), ge=0)
    gauge: str | None = None


class MaterialSchema(BaseModel):
    """A stock material with its catalog and inventory."""

    model_config = ConfigDict(extra="forbid")

    material_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: MaterialCategory = MaterialCategory.PROFILE
    usage_unit: LengthUnit = LengthUnit.FEET
    standard_lengths: list[StandardLengthSchema] = Field(default_factory=list)
    gauge_weights: dict[str, Decimal] = Field(
        default_factory=dict, description="Weight per foot keyed by gauge"
    )
    weight_unit: str = "kg"
    tracking: InventoryTracking = InventoryTracking.BATCH
    batches: list[BatchSchema] = Field(default_factory=list)
    roll_batches: list[RollBatchSchema] = Field(default_factory=list)
    stock_by_length: list[LegacyStockSchema] = Field(default_factory=list)

    @field_validator("gauge_weights")
    @classmethod
    def validate_weights(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        for gauge, weight in v.items():
            if weight < 0:
                raise ValueError(f"weight for gauge {gauge} must be non-negative")
        return v


# =============================================================================
# Workspace: orders
# =============================================================================


class MaterialCutSchema(BaseModel):
    """Profile pieces an order item needs."""

    model_config = ConfigDict(extra="forbid")

    material_id: str = Field(..., min_length=1)
    gauge: str | None = None
    cut_lengths: list[Decimal] = Field(..., min_length=1)

    @field_validator("cut_lengths")
    @classmethod
    def validate_lengths(cls, v: list[Decimal]) -> list[Decimal]:
        if any(length <= 0 for length in v):
            raise ValueError("cut lengths must be positive")
        return v


class MeshPanelSchema(BaseModel):
    """A wire mesh panel an order item needs."""

    model_config = ConfigDict(extra="forbid")

    material_id: str = Field(..., min_length=1)
    width: Decimal = Field(..., gt=0)
    length: Decimal = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1)


class OrderItemSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    item_ref: str = Field(..., min_length=1)
    material_cuts: list[MaterialCutSchema] = Field(default_factory=list)
    mesh_panels: list[MeshPanelSchema] = Field(default_factory=list)


class OrderSchema(BaseModel):
    """The manufacturing view of an order."""

    model_config = ConfigDict(extra="forbid")

    order_id: str = Field(..., min_length=1)
    company_id: str | None = None
    display_id: str | None = None
    status: str = OrderStatus.READY_FOR_OPTIMIZATION.value
    cutting_plan_id: str | None = None
    cutting_plan_status: str | None = None
    notes: str = ""
    items: list[OrderItemSchema] = Field(default_factory=list)


class WorkspaceSchema(BaseModel):
    """Materials and orders loaded together for command line runs."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", pattern=r"^\d+\.\d+$")
    materials: list[MaterialSchema] = Field(default_factory=list)
    orders: list[OrderSchema] = Field(default_factory=list)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        return _check_version(v)

    @model_validator(mode="after")
    def validate_references(self) -> "WorkspaceSchema":
        """Check ids are unique and orders only reference known materials."""
        material_ids = [m.material_id for m in self.materials]
        if len(set(material_ids)) != len(material_ids):
            raise ValueError("material_id values must be unique")
        order_ids = [o.order_id for o in self.orders]
        if len(set(order_ids)) != len(order_ids):
            raise ValueError("order_id values must be unique")

        known = set(material_ids)
        for order in self.orders:
            for item in order.items:
                referenced = [c.material_id for c in item.material_cuts] + [
                    p.material_id for p in item.mesh_panels
                ]
                unknown = [m for m in referenced if m not in known]
                if unknown:
                    raise ValueError(
                        f"order {order.order_id} item {item.item_ref} references "
                        f"unknown material: {', '.join(unknown)}"
                    )
        return self
