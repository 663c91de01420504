"""Pydantic request schemas for the REST API."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from stockcut.web.schemas.common import LengthUnitEnum


class OptimizeRequest(BaseModel):
    """Request to generate a cutting plan for an order."""

    model_config = ConfigDict(extra="forbid")

    order_id: str = Field(..., min_length=1, description="Order to optimize")
    generated_by: str | None = Field(default=None, description="Requesting user")


class CommitRequest(BaseModel):
    """Request to commit an order's cutting plan to inventory."""

    model_config = ConfigDict(extra="forbid")

    committed_by: str | None = Field(default=None, description="Committing user")


class StageUpdateRequest(BaseModel):
    """Request to move an order to another manufacturing stage."""

    model_config = ConfigDict(extra="forbid")

    status: str = Field(..., description="Target stage, e.g. 'Assembly'")
    notes: str | None = Field(default=None, description="History note")
    updated_by: str | None = Field(default=None, description="Updating user")


class WidthSelectRequest(BaseModel):
    """Request to pick a standard roll width for a wire mesh panel."""

    model_config = ConfigDict(extra="forbid")

    required_width: Decimal = Field(..., gt=0, description="Panel width")
    standard_widths: list[Decimal] = Field(
        default_factory=list, description="Available roll widths"
    )
    required_length: Decimal | None = Field(
        default=None,
        gt=0,
        description="Panel length; when given, the panel may be turned to fit",
    )
    unit: LengthUnitEnum = Field(default=LengthUnitEnum.FEET, description="Unit of all sizes")
