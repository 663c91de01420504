"""Service factory for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from stockcut.application.config.schema import StockCutConfiguration

if TYPE_CHECKING:
    from stockcut.application.services import (
        CommitCoordinator,
        CuttingPlanQueries,
        OptimizationOrchestrator,
        ProductionStageService,
    )
    from stockcut.contracts.protocols import CuttingOptimizerProtocol
    from stockcut.domain.entities import Material, Order
    from stockcut.domain.services import PlanAssembler
    from stockcut.infrastructure import (
        CommitFormatter,
        CuttingPlanFormatter,
        InMemoryCuttingPlanRepository,
        InMemoryInventoryStore,
        InMemoryLockService,
        InMemoryOrderRepository,
        InMemoryStockTransactionLog,
    )


@dataclass
class ServiceFactory:
    """Factory for creating service instances.

    Centralizes service instantiation to support:
    - Dependency injection for testing
    - Configuration-based service settings
    - Sharing one set of stores and locks between all services

    Stores and services are created on first use and cached, so every
    service obtained from one factory sees the same orders, plans and stock.

    Example:
        ```python
        factory = ServiceFactory.from_domain(materials, orders)
        result = factory.get_orchestrator().optimize("order-1")
        factory.get_commit_coordinator().commit("order-1")
        ```
    """

    config: StockCutConfiguration = field(default_factory=StockCutConfiguration)

    # Cached instances (use field with init=False for dataclass)
    _inventory: "InMemoryInventoryStore | None" = field(
        default=None, init=False, repr=False
    )
    _orders: "InMemoryOrderRepository | None" = field(default=None, init=False, repr=False)
    _plans: "InMemoryCuttingPlanRepository | None" = field(
        default=None, init=False, repr=False
    )
    _transactions: "InMemoryStockTransactionLog | None" = field(
        default=None, init=False, repr=False
    )
    _locks: "InMemoryLockService | None" = field(default=None, init=False, repr=False)
    _optimizer: "CuttingOptimizerProtocol | None" = field(
        default=None, init=False, repr=False
    )
    _orchestrator: "OptimizationOrchestrator | None" = field(
        default=None, init=False, repr=False
    )
    _commit_coordinator: "CommitCoordinator | None" = field(
        default=None, init=False, repr=False
    )

    @classmethod
    def from_domain(
        cls,
        materials: "Iterable[Material]" = (),
        orders: "Iterable[Order]" = (),
        config: StockCutConfiguration | None = None,
    ) -> "ServiceFactory":
        """Create a factory whose stores start with the given records."""
        from stockcut.infrastructure import InMemoryInventoryStore, InMemoryOrderRepository

        factory = cls(config=config or StockCutConfiguration())
        factory._inventory = InMemoryInventoryStore(
            materials, tolerance=factory.config.optimizer.tolerance
        )
        factory._orders = InMemoryOrderRepository(orders)
        return factory

    # -------------------------------------------------------------------------
    # Stores
    # -------------------------------------------------------------------------

    def get_inventory_store(self) -> "InMemoryInventoryStore":
        """Get or create the inventory store."""
        if self._inventory is None:
            from stockcut.infrastructure import InMemoryInventoryStore

            self._inventory = InMemoryInventoryStore(
                tolerance=self.config.optimizer.tolerance
            )
        return self._inventory

    def get_order_repository(self) -> "InMemoryOrderRepository":
        """Get or create the order repository."""
        if self._orders is None:
            from stockcut.infrastructure import InMemoryOrderRepository

            self._orders = InMemoryOrderRepository()
        return self._orders

    def get_plan_repository(self) -> "InMemoryCuttingPlanRepository":
        """Get or create the cutting plan repository."""
        if self._plans is None:
            from stockcut.infrastructure import InMemoryCuttingPlanRepository

            self._plans = InMemoryCuttingPlanRepository()
        return self._plans

    def get_transaction_log(self) -> "InMemoryStockTransactionLog":
        """Get or create the stock transaction log."""
        if self._transactions is None:
            from stockcut.infrastructure import InMemoryStockTransactionLog

            self._transactions = InMemoryStockTransactionLog()
        return self._transactions

    def get_lock_service(self) -> "InMemoryLockService":
        """Get or create the lock service."""
        if self._locks is None:
            from stockcut.infrastructure import InMemoryLockService

            self._locks = InMemoryLockService(
                lease_seconds=self.config.locks.lease_seconds
            )
        return self._locks

    # -------------------------------------------------------------------------
    # Domain services
    # -------------------------------------------------------------------------

    def get_optimizer(self) -> "CuttingOptimizerProtocol":
        """Get or create the cutting optimizer."""
        if self._optimizer is None:
            from stockcut.application.config.adapters import config_to_packing_config
            from stockcut.infrastructure import CuttingOptimizer

            self._optimizer = CuttingOptimizer(config_to_packing_config(self.config))
        return self._optimizer

    def get_plan_assembler(self) -> "PlanAssembler":
        """Create a plan assembler reading weights from the inventory store."""
        from stockcut.domain.services import PlanAssembler

        return PlanAssembler(weight_lookup=self.get_inventory_store().weight_per_foot)

    # -------------------------------------------------------------------------
    # Application services
    # -------------------------------------------------------------------------

    def get_orchestrator(self) -> "OptimizationOrchestrator":
        """Get or create the optimization orchestrator."""
        if self._orchestrator is None:
            from stockcut.application.services import OptimizationOrchestrator

            self._orchestrator = OptimizationOrchestrator(
                orders=self.get_order_repository(),
                plans=self.get_plan_repository(),
                inventory=self.get_inventory_store(),
                optimizer=self.get_optimizer(),
                assembler=self.get_plan_assembler(),
                locks=self.get_lock_service(),
            )
        return self._orchestrator

    def get_commit_coordinator(self) -> "CommitCoordinator":
        """Get or create the commit coordinator."""
        if self._commit_coordinator is None:
            from stockcut.application.services import CommitCoordinator

            commit = self.config.commit
            self._commit_coordinator = CommitCoordinator(
                orders=self.get_order_repository(),
                plans=self.get_plan_repository(),
                inventory=self.get_inventory_store(),
                transactions=self.get_transaction_log(),
                locks=self.get_lock_service(),
                consumption_order=commit.consumption_order,
                production_stage=commit.production_stage,
                wait_seconds=commit.commit_wait_seconds,
            )
        return self._commit_coordinator

    def get_plan_queries(self) -> "CuttingPlanQueries":
        """Create cutting plan queries."""
        from stockcut.application.services import CuttingPlanQueries

        return CuttingPlanQueries(self.get_order_repository(), self.get_plan_repository())

    def get_stage_service(self) -> "ProductionStageService":
        """Create the production stage service."""
        from stockcut.application.services import ProductionStageService

        return ProductionStageService(self.get_order_repository())

    # -------------------------------------------------------------------------
    # Formatters
    # -------------------------------------------------------------------------

    def get_plan_formatter(self) -> "CuttingPlanFormatter":
        from stockcut.infrastructure import CuttingPlanFormatter

        return CuttingPlanFormatter()

    def get_commit_formatter(self) -> "CommitFormatter":
        from stockcut.infrastructure import CommitFormatter

        return CommitFormatter()


# Module-level default factory
_default_factory: ServiceFactory | None = None


def get_factory() -> ServiceFactory:
    """Get the default service factory."""
    global _default_factory
    if _default_factory is None:
        _default_factory = ServiceFactory()
    return _default_factory


def set_factory(factory: ServiceFactory | None) -> None:
    """Set a custom factory (for testing)."""
    global _default_factory
    _default_factory = factory


def reset_factory() -> None:
    """Reset the factory to default (for testing cleanup)."""
    global _default_factory
    _default_factory = None
