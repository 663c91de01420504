"""Infrastructure: optimizer, locks, inventory, repositories and formatters."""

from stockcut.infrastructure.formatters import (
    CommitFormatter,
    CuttingPlanFormatter,
    commit_to_json,
    plan_to_json,
    roll_assignment_to_text,
    width_selection_to_text,
)
from stockcut.infrastructure.inventory import (
    BatchInventory,
    InMemoryInventoryStore,
    LegacyStockInventory,
)
from stockcut.infrastructure.locks import InMemoryLockService
from stockcut.infrastructure.pipe_packing import CuttingOptimizer, PipePackingConfig
from stockcut.infrastructure.repositories import (
    InMemoryCuttingPlanRepository,
    InMemoryOrderRepository,
    InMemoryStockTransactionLog,
)

__all__ = [
    "BatchInventory",
    "CommitFormatter",
    "CuttingOptimizer",
    "CuttingPlanFormatter",
    "InMemoryCuttingPlanRepository",
    "InMemoryInventoryStore",
    "InMemoryLockService",
    "InMemoryOrderRepository",
    "InMemoryStockTransactionLog",
    "LegacyStockInventory",
    "PipePackingConfig",
    "commit_to_json",
    "plan_to_json",
    "roll_assignment_to_text",
    "width_selection_to_text",
]
