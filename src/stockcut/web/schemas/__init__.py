"""Pydantic schemas for the REST API."""

from stockcut.web.schemas.common import HistoryEntrySchema, LengthUnitEnum
from stockcut.web.schemas.requests import (
    CommitRequest,
    OptimizeRequest,
    StageUpdateRequest,
    WidthSelectRequest,
)
from stockcut.web.schemas.responses import (
    CommitResponseSchema,
    CuttingPlanSchema,
    CutSchema,
    ErrorResponseSchema,
    MaterialPlanSchema,
    OptimizeResponseSchema,
    OrderSchema,
    PipeLengthSummarySchema,
    PipeOrderLineSchema,
    PipeOrderSummarySchema,
    PipeSchema,
    RollSchema,
    TransactionSchema,
    WidthSelectionSchema,
)

__all__ = [
    # Common
    "HistoryEntrySchema",
    "LengthUnitEnum",
    # Requests
    "CommitRequest",
    "OptimizeRequest",
    "StageUpdateRequest",
    "WidthSelectRequest",
    # Responses
    "CommitResponseSchema",
    "CuttingPlanSchema",
    "CutSchema",
    "ErrorResponseSchema",
    "MaterialPlanSchema",
    "OptimizeResponseSchema",
    "OrderSchema",
    "PipeLengthSummarySchema",
    "PipeOrderLineSchema",
    "PipeOrderSummarySchema",
    "PipeSchema",
    "RollSchema",
    "TransactionSchema",
    "WidthSelectionSchema",
]
