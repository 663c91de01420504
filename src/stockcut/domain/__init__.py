"""Domain layer: value objects, entities, exceptions and pure services."""

from stockcut.domain.entities import (
    Batch,
    CuttingPlan,
    HistoryEntry,
    LegacyStockEntry,
    Material,
    Order,
    OrderItem,
    RequiredMaterialCut,
    RequiredMeshPanel,
    RollBatch,
    StockTransaction,
)
from stockcut.domain.exceptions import (
    AlreadyCommitted,
    CommitInProgress,
    CuttingPlanNotFound,
    InsufficientInventory,
    InvalidOrderState,
    InvalidStage,
    LockUnavailable,
    MaterialNotFound,
    NoFeasibleStock,
    NotGenerated,
    OptimizationFailed,
    OptimizationInProgress,
    OrderNotFound,
    PersistenceError,
    StockCutError,
)
from stockcut.domain.services import PlanAssembler
from stockcut.domain.value_objects import (
    ConsumptionOrder,
    DemandLine,
    LengthUnit,
    MaterialCategory,
    MaterialPlan,
    OrderStatus,
    PipeAssignment,
    PlanStatus,
    StockCatalogEntry,
)

__all__ = [
    # Entities
    "Batch",
    "CuttingPlan",
    "HistoryEntry",
    "LegacyStockEntry",
    "Material",
    "Order",
    "OrderItem",
    "RequiredMaterialCut",
    "RequiredMeshPanel",
    "RollBatch",
    "StockTransaction",
    # Exceptions
    "AlreadyCommitted",
    "CommitInProgress",
    "CuttingPlanNotFound",
    "InsufficientInventory",
    "InvalidOrderState",
    "InvalidStage",
    "LockUnavailable",
    "MaterialNotFound",
    "NoFeasibleStock",
    "NotGenerated",
    "OptimizationFailed",
    "OptimizationInProgress",
    "OrderNotFound",
    "PersistenceError",
    "StockCutError",
    # Services
    "PlanAssembler",
    # Value objects
    "ConsumptionOrder",
    "DemandLine",
    "LengthUnit",
    "MaterialCategory",
    "MaterialPlan",
    "OrderStatus",
    "PipeAssignment",
    "PlanStatus",
    "StockCatalogEntry",
]
