"""Optimization orchestrator service.

Coordinates demand collection, per-material optimization, plan assembly
and persistence for one order, and keeps the order's status in step.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from stockcut.application.dtos import OptimizeResult
from stockcut.application.services.commit_coordinator import commit_lock_key
from stockcut.domain.entities import OPTIMIZATION_FAILED_PREFIX, CuttingPlan, Order, new_id
from stockcut.domain.exceptions import (
    AlreadyCommitted,
    CommitInProgress,
    InvalidOrderState,
    MaterialNotFound,
    NoFeasibleStock,
    OptimizationFailed,
    OptimizationInProgress,
    PersistenceError,
)
from stockcut.domain.services import (
    PlanAssembler,
    collect_profile_demand,
    collect_roll_demand,
    plan_rolls,
)
from stockcut.domain.value_objects import (
    OPTIMIZABLE_STATUSES,
    MaterialPlan,
    OrderStatus,
    PlanStatus,
)

if TYPE_CHECKING:
    from stockcut.contracts.protocols import (
        CuttingOptimizerProtocol,
        CuttingPlanRepositoryProtocol,
        InventoryStoreProtocol,
        LockServiceProtocol,
        OrderRepositoryProtocol,
    )

logger = logging.getLogger(__name__)


class OptimizationOrchestrator:
    """Generates and stores the cutting plan for an order.

    Only one optimization per order runs at a time. A second request for
    the same order while one is running fails fast with
    OptimizationInProgress rather than waiting.
    """

    def __init__(
        self,
        orders: "OrderRepositoryProtocol",
        plans: "CuttingPlanRepositoryProtocol",
        inventory: "InventoryStoreProtocol",
        optimizer: "CuttingOptimizerProtocol",
        assembler: PlanAssembler,
        locks: "LockServiceProtocol",
    ) -> None:
        """Initialize with required dependencies.

        Args:
            orders: Order repository.
            plans: Cutting plan repository.
            inventory: Stock catalog source.
            optimizer: One-dimensional optimizer for profile materials.
            assembler: Builds the plan from per-material results.
            locks: Lock service guarding concurrent runs per order.
        """
        self._orders = orders
        self._plans = plans
        self._inventory = inventory
        self._optimizer = optimizer
        self._assembler = assembler
        self._locks = locks

    def optimize(self, order_id: str, generated_by: str | None = None) -> OptimizeResult:
        """Generate a cutting plan for an order.

        Args:
            order_id: Order to optimize.
            generated_by: User requesting the optimization.

        Returns:
            The updated order and its new Generated plan.

        Raises:
            OptimizationInProgress: If another run for the order holds the lock.
            OrderNotFound: If the order does not exist.
            InvalidOrderState: If the order status does not allow optimization.
            AlreadyCommitted: If the order's plan was already committed,
                including by a commit that finished during this run.
            CommitInProgress: If the plan being replaced is mid-commit.
            OptimizationFailed: If no material could be planned. The order is
                marked Optimization Failed with the reason in its notes.
        """
        key = f"optimize:{order_id}"
        token = new_id()
        if not self._locks.acquire(key, token):
            raise OptimizationInProgress(order_id)
        try:
            return self._run(order_id, generated_by)
        finally:
            self._locks.release(key, token)

    def _run(self, order_id: str, generated_by: str | None) -> OptimizeResult:
        order = self._orders.get(order_id)
        self._check_entry(order)

        try:
            material_plans, errors = self._plan_materials(order)
            if not material_plans:
                reason = (
                    "; ".join(errors)
                    if errors
                    else f"No material requirements found for order {order.label}"
                )
                raise OptimizationFailed(reason, errors)

            plan = self._assembler.assemble(
                material_plans,
                order_id=order.order_id,
                generated_by=generated_by,
                company_id=order.company_id,
                material_errors=errors,
            )
        except Exception as e:
            self._record_failure(order, str(e), generated_by)
            raise

        try:
            with self._commit_guard(order.order_id, plan.plan_id):
                self._plans.save(plan)
                self._mark_generated(order, plan, generated_by)
        except (AlreadyCommitted, CommitInProgress):
            # The order belongs to a commit now; leave it as the commit left it.
            raise
        except Exception as e:
            self._record_failure(order, str(e), generated_by)
            raise

        logger.info(
            "Generated plan %s for order %s: %d material(s), %d pipe(s), %d skipped",
            plan.plan_id,
            order.label,
            len(plan.material_plans),
            plan.pipe_count,
            len(errors),
        )
        return OptimizeResult(order=order, cutting_plan=plan)

    @contextmanager
    def _commit_guard(self, order_id: str, plan_id: str | None = None) -> Iterator[None]:
        """Hold the commit locks of the order's current plan and of ``plan_id``.

        A commit of the old plan that is already running makes this fail
        with CommitInProgress. A commit that starts while the guard is held
        waits, then finds the old plan gone or the new one fully published.
        """
        token = new_id()
        keys = [] if plan_id is None else [commit_lock_key(plan_id)]
        current = self._plans.get_for_order(order_id)
        if current is not None and current.plan_id != plan_id:
            keys.append(commit_lock_key(current.plan_id))

        held: list[str] = []
        try:
            for key in keys:
                if not self._locks.acquire(key, token):
                    raise CommitInProgress(order_id)
                held.append(key)
            yield
        finally:
            for key in reversed(held):
                self._locks.release(key, token)

    def _mark_generated(
        self, order: Order, plan: CuttingPlan, generated_by: str | None
    ) -> None:
        order.status = OrderStatus.OPTIMIZATION_COMPLETE.value
        order.cutting_plan_status = PlanStatus.GENERATED.value
        order.cutting_plan_id = plan.plan_id
        order.record_history(
            order.status,
            f"Cutting plan {plan.plan_id[-6:]} generated with {plan.pipe_count} pipe(s)",
            generated_by,
        )
        self._orders.save(order)

    def _check_entry(self, order: Order) -> None:
        # A committed plan moves the order into production, so check it first.
        existing = self._plans.get_for_order(order.order_id)
        if existing is not None and existing.is_committed:
            raise AlreadyCommitted(
                "A cutting plan has already been committed for this order."
            )
        if order.status not in OPTIMIZABLE_STATUSES:
            raise InvalidOrderState(
                f"Order status is '{order.status}'. Optimization requires one of: "
                f"{', '.join(sorted(OPTIMIZABLE_STATUSES))}."
            )

    def _plan_materials(self, order: Order) -> tuple[list[MaterialPlan], list[str]]:
        """Optimize every material the order needs.

        A material that cannot be planned is skipped with its error
        recorded; the others are still planned.
        """
        plans: list[MaterialPlan] = []
        errors: list[str] = []

        for (material_id, gauge), demand in collect_profile_demand(order).items():
            try:
                material = self._inventory.get_material(material_id)
                catalog = self._inventory.get_stock_catalog(material_id, gauge)
                plans.append(
                    self._optimizer.optimize(
                        demand, catalog, material.usage_unit, material.name
                    )
                )
            except (NoFeasibleStock, MaterialNotFound) as e:
                logger.warning("Skipping %s (gauge %s): %s", material_id, gauge, e)
                errors.append(str(e))

        for material_id, demand in collect_roll_demand(order).items():
            try:
                material = self._inventory.get_material(material_id)
                widths = [
                    entry.in_unit(material.usage_unit).standard_length
                    for entry in material.catalog()
                ]
                rolls = plan_rolls(demand, widths, material.usage_unit)
            except (NoFeasibleStock, MaterialNotFound) as e:
                logger.warning("Skipping wire mesh %s: %s", material_id, e)
                errors.append(str(e))
                continue
            plans.append(
                MaterialPlan(
                    material_id=material_id,
                    material_name=material.name,
                    gauge=None,
                    usage_unit=material.usage_unit,
                    rolls_used=rolls,
                )
            )

        return plans, errors

    def _record_failure(self, order: Order, message: str, updated_by: str | None) -> None:
        """Mark the order failed and drop any stale plan it still points at.

        An order whose plan is committed, or is being committed, keeps its
        state; the failure is only logged.
        """
        reason = " ".join(message.split())
        logger.warning("Optimization failed for order %s: %s", order.label, reason)
        try:
            with self._commit_guard(order.order_id):
                current = self._plans.get_for_order(order.order_id)
                if current is not None and current.is_committed:
                    logger.info(
                        "Order %s keeps committed plan %s", order.label, current.plan_id
                    )
                    return

                note = f"{OPTIMIZATION_FAILED_PREFIX} {reason}"
                order.status = OrderStatus.OPTIMIZATION_FAILED.value
                order.cutting_plan_status = PlanStatus.FAILED.value
                order.append_note(note)
                order.record_history(order.status, note, updated_by)
                discarded = self._plans.discard_for_order(order.order_id)
                if discarded is not None:
                    logger.info("Discarded stale plan %s", discarded.plan_id)
                order.cutting_plan_id = None
                self._orders.save(order)
        except CommitInProgress:
            logger.warning(
                "Order %s is being committed; optimization failure not recorded",
                order.label,
            )
        except PersistenceError:
            logger.exception("Could not record optimization failure for %s", order.label)
