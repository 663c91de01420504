"""Value objects for the stock cutting domain.

This module provides immutable data types used throughout the system.
All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

# Units and numeric helpers
from ._units import (
    LENGTH_QUANTUM,
    LENGTH_TOLERANCE,
    AreaUnit,
    LengthUnit,
    convert_length,
    lengths_match,
    to_decimal,
    to_feet,
)

# Status and classification enums
from ._status import (
    OPTIMIZABLE_STATUSES,
    PRODUCTION_STAGES,
    ConsumptionOrder,
    InventoryTracking,
    MaterialCategory,
    Orientation,
    OrderStatus,
    PlanStatus,
    TransactionType,
)

# Demand, catalog and plan results
from ._planning import (
    BatchAvailability,
    CutMade,
    Deduction,
    DemandLine,
    MaterialPlan,
    PipeAssignment,
    PipeLengthSummary,
    RollAssignment,
    RollDemandLine,
    Shortfall,
    StockCatalogEntry,
    WidthSelection,
)

__all__ = [
    # Units
    "LENGTH_QUANTUM",
    "LENGTH_TOLERANCE",
    "AreaUnit",
    "LengthUnit",
    "convert_length",
    "lengths_match",
    "to_decimal",
    "to_feet",
    # Status
    "OPTIMIZABLE_STATUSES",
    "PRODUCTION_STAGES",
    "ConsumptionOrder",
    "InventoryTracking",
    "MaterialCategory",
    "Orientation",
    "OrderStatus",
    "PlanStatus",
    "TransactionType",
    # Planning
    "BatchAvailability",
    "CutMade",
    "Deduction",
    "DemandLine",
    "MaterialPlan",
    "PipeAssignment",
    "PipeLengthSummary",
    "RollAssignment",
    "RollDemandLine",
    "Shortfall",
    "StockCatalogEntry",
    "WidthSelection",
]
