"""Status and classification enums shared across the domain."""

from __future__ import annotations

from enum import Enum


class PlanStatus(str, Enum):
    """Lifecycle of a cutting plan."""

    GENERATED = "Generated"
    COMMITTED = "Committed"
    FAILED = "Failed"


class OrderStatus(str, Enum):
    """Coarse production status carried on an order."""

    READY_FOR_OPTIMIZATION = "Ready for Optimization"
    OPTIMIZATION_COMPLETE = "Optimization Complete"
    OPTIMIZATION_FAILED = "Optimization Failed"
    CUTTING = "Cutting"
    ASSEMBLY = "Assembly"
    QC = "QC"
    PACKED = "Packed"
    READY_FOR_DISPATCH = "Ready for Dispatch"
    ON_HOLD = "On Hold"


# Order statuses from which an optimization run may start.
OPTIMIZABLE_STATUSES: frozenset[str] = frozenset(
    {
        OrderStatus.READY_FOR_OPTIMIZATION.value,
        OrderStatus.OPTIMIZATION_FAILED.value,
        OrderStatus.OPTIMIZATION_COMPLETE.value,
    }
)

# Manufacturing stages an order can be moved to once cutting starts.
PRODUCTION_STAGES: tuple[str, ...] = (
    OrderStatus.CUTTING.value,
    OrderStatus.ASSEMBLY.value,
    OrderStatus.QC.value,
    OrderStatus.PACKED.value,
    OrderStatus.READY_FOR_DISPATCH.value,
    OrderStatus.ON_HOLD.value,
)


class MaterialCategory(str, Enum):
    """Kinds of stock material the optimizer understands."""

    PROFILE = "Profile"
    WIRE_MESH = "Wire Mesh"


class InventoryTracking(str, Enum):
    """How a material's stock is recorded."""

    BATCH = "batch"
    LEGACY = "legacy"


class ConsumptionOrder(str, Enum):
    """Batch selection discipline when deducting stock."""

    FIFO = "FIFO"
    LIFO = "LIFO"


class TransactionType(str, Enum):
    """Kinds of stock transaction recorded in the audit log."""

    INWARD = "Inward"
    OUTWARD_MANUAL = "Outward-Manual"
    OUTWARD_ORDER_CUT = "Outward-OrderCut"
    SCRAP = "Scrap"
    CORRECTION = "Correction"
    INITIAL_STOCK = "InitialStock"


class Orientation(str, Enum):
    """Which dimension of a mesh panel runs across the roll width."""

    ORIGINAL = "original"
    SWAPPED = "swapped"
