"""Service protocols for dependency injection.

This module defines protocol classes that establish contracts between layers.
Infrastructure implementations depend on these protocols, enabling loose coupling
and testability through dependency injection.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from stockcut.domain.entities import CuttingPlan, Material, Order, StockTransaction
    from stockcut.domain.value_objects import (
        BatchAvailability,
        ConsumptionOrder,
        Deduction,
        DemandLine,
        LengthUnit,
        MaterialPlan,
        StockCatalogEntry,
    )


class CuttingOptimizerProtocol(Protocol):
    """Protocol for one-dimensional cutting optimization.

    Implementations assign demanded cut lengths to standard-length stock
    without reading inventory.

    Example:
        ```python
        class ExactSolver:
            def optimize(self, demand, catalog, unit, material_name=None) -> MaterialPlan:
                # Integer-programming implementation
                ...
        ```
    """

    def optimize(
        self,
        demand: Sequence[DemandLine],
        catalog: Sequence[StockCatalogEntry],
        unit: LengthUnit,
        material_name: str | None = None,
    ) -> MaterialPlan:
        """Assign every demanded cut to a stock pipe.

        Args:
            demand: Required pieces of one material and gauge.
            catalog: Standard lengths available for the material.
            unit: Usage unit of the demand lengths.
            material_name: Display name for messages.

        Returns:
            MaterialPlan listing the pipes used.

        Raises:
            NoFeasibleStock: If some cut cannot be placed on any standard length.
        """
        ...


@runtime_checkable
class LockServiceProtocol(Protocol):
    """Protocol for keyed mutual exclusion.

    ``hold`` must release the lock on every exit path of the ``with`` block.
    """

    def acquire(
        self, key: str, owner: str, blocking: bool = False, timeout: float | None = None
    ) -> bool:
        """Try to take the lock; return True on success."""
        ...

    def release(self, key: str, owner: str) -> bool:
        """Release the lock if ``owner`` holds it."""
        ...

    def is_locked(self, key: str) -> bool:
        """True if the key is currently held."""
        ...

    def hold(
        self,
        key: str,
        owner: str | None = None,
        blocking: bool = False,
        timeout: float | None = None,
    ) -> AbstractContextManager[str]:
        """Context manager holding the lock; raises LockUnavailable if not acquired."""
        ...


@runtime_checkable
class MaterialInventoryProtocol(Protocol):
    """Protocol for reading and deducting one material's stock.

    A single interface covers both batch-tracked and legacy stock so the
    commit path never branches on how stock is recorded.

    Example:
        ```python
        inventory = store.open("alu-pipe-40")
        if (inventory.available_pieces(Decimal("12"), LengthUnit.FEET) or 0) >= 1:
            deduction = inventory.deduct_piece(Decimal("12"), LengthUnit.FEET)
        ```
    """

    @property
    def material_id(self) -> str:
        ...

    def available_pieces(
        self, length: Decimal, unit: LengthUnit, gauge: str | None = None
    ) -> Decimal | None:
        """Pieces on hand at a standard length; None if never stocked."""
        ...

    def pieces_by_gauge(self, length: Decimal, unit: LengthUnit) -> dict[str | None, Decimal]:
        """Pieces on hand at a standard length, keyed by stock gauge.

        Gauge-less stock (key None) can supply any gauge.
        """
        ...

    def deduct_piece(
        self,
        length: Decimal,
        unit: LengthUnit,
        gauge: str | None = None,
        order: ConsumptionOrder = ...,
    ) -> Deduction:
        """Remove exactly one piece, rejecting if stock ran out concurrently."""
        ...

    def available_area(self, width: Decimal, unit: LengthUnit) -> Decimal | None:
        """Roll area on hand at a width; None if never stocked."""
        ...

    def deduct_area(
        self,
        width: Decimal,
        unit: LengthUnit,
        area: Decimal,
        order: ConsumptionOrder = ...,
    ) -> list[Deduction]:
        """Remove roll area at a width."""
        ...

    def restore(self, deduction: Deduction) -> None:
        """Undo a deduction."""
        ...


class InventoryStoreProtocol(Protocol):
    """Protocol for the stock catalog and inventory collaborator."""

    def get_material(self, material_id: str) -> Material:
        ...

    def get_stock_catalog(
        self, material_id: str, gauge: str | None = None
    ) -> list[StockCatalogEntry]:
        ...

    def get_batch_availability(
        self,
        material_id: str,
        standard_length: Decimal,
        unit: LengthUnit,
        gauge: str | None = None,
    ) -> BatchAvailability:
        ...

    def weight_per_foot(self, material_id: str, gauge: str | None) -> Decimal | None:
        ...

    def open(self, material_id: str) -> MaterialInventoryProtocol:
        """Open a material's inventory in the representation it is tracked in."""
        ...


class OrderRepositoryProtocol(Protocol):
    """Protocol for the order collaborator.

    Implementations raise OrderNotFound for unknown ids and PersistenceError
    for storage failures.
    """

    def get(self, order_id: str) -> Order:
        ...

    def save(self, order: Order) -> None:
        ...


class CuttingPlanRepositoryProtocol(Protocol):
    """Protocol for cutting plan persistence.

    Implementations raise PersistenceError for storage failures.
    """

    def get(self, plan_id: str) -> CuttingPlan | None:
        ...

    def get_for_order(self, order_id: str) -> CuttingPlan | None:
        ...

    def save(self, plan: CuttingPlan) -> None:
        """Store a plan, superseding the order's non-committed plan."""
        ...

    def discard_for_order(self, order_id: str) -> CuttingPlan | None:
        """Remove the order's plan if it is not committed."""
        ...

    def mark_committed(self, plan_id: str, committed_by: str | None) -> CuttingPlan:
        """Atomically move a plan from Generated to Committed."""
        ...


class StockTransactionLogProtocol(Protocol):
    """Protocol for the stock transaction audit log."""

    def append(self, transaction: StockTransaction) -> None:
        ...

    def list_transactions(
        self, material_id: str | None = None, plan_id: str | None = None
    ) -> list[StockTransaction]:
        ...
