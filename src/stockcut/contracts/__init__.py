"""Contracts between layers.

Protocols here let the application layer depend on behaviour rather than on
the in-memory infrastructure that ships with the package.
"""

from stockcut.contracts.protocols import (
    CuttingOptimizerProtocol,
    CuttingPlanRepositoryProtocol,
    InventoryStoreProtocol,
    LockServiceProtocol,
    MaterialInventoryProtocol,
    OrderRepositoryProtocol,
    StockTransactionLogProtocol,
)

__all__ = [
    "CuttingOptimizerProtocol",
    "CuttingPlanRepositoryProtocol",
    "InventoryStoreProtocol",
    "LockServiceProtocol",
    "MaterialInventoryProtocol",
    "OrderRepositoryProtocol",
    "StockTransactionLogProtocol",
]
