"""Common Pydantic schemas shared across requests and responses."""

from enum import Enum

from pydantic import BaseModel, Field


class LengthUnitEnum(str, Enum):
    """Length unit options."""

    INCHES = "inches"
    FEET = "ft"
    MILLIMETERS = "mm"
    CENTIMETERS = "cm"
    METERS = "m"


class HistoryEntrySchema(BaseModel):
    """Status change recorded on an order."""

    status: str = Field(..., description="Status the order moved to")
    notes: str = Field(..., description="Reason or description of the change")
    updated_by: str | None = Field(default=None, description="User who made the change")
    timestamp: str = Field(..., description="ISO 8601 time of the change")
