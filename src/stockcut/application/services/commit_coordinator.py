"""Commit a generated cutting plan against inventory.

A commit runs in two phases under a per-plan lock:

1. Validate (read only): every pipe and mesh panel in the plan is checked
   against stock, aggregated per standard length, and every shortfall is
   reported together.
2. Apply: stock is deducted one pipe at a time from the batch chosen by the
   consumption discipline, with an audit transaction for each deduction.
   If any deduction fails, the ones already made are reversed.

Only after the apply phase succeeds is the plan marked Committed and the
order moved to its production stage.
"""

from __future__ import annotations

import logging
from collections import Counter
from decimal import Decimal
from typing import TYPE_CHECKING

from stockcut.application.dtos import CommitResult
from stockcut.application.services.compensation import CompensationLog
from stockcut.domain.entities import CuttingPlan, Order, StockTransaction
from stockcut.domain.exceptions import (
    AlreadyCommitted,
    InsufficientInventory,
    LockUnavailable,
    NotGenerated,
)
from stockcut.domain.value_objects import (
    ConsumptionOrder,
    Deduction,
    MaterialPlan,
    OrderStatus,
    PlanStatus,
    Shortfall,
    TransactionType,
)

if TYPE_CHECKING:
    from stockcut.contracts.protocols import (
        CuttingPlanRepositoryProtocol,
        InventoryStoreProtocol,
        LockServiceProtocol,
        MaterialInventoryProtocol,
        OrderRepositoryProtocol,
        StockTransactionLogProtocol,
    )

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")

SUPERSEDED_MESSAGE = (
    "The cutting plan was replaced by a newer optimization. Commit the current plan."
)


def _short_id(plan_id: str) -> str:
    return plan_id[-6:]


def commit_lock_key(plan_id: str) -> str:
    """Lock key serializing commits of a plan with its replacement."""
    return f"commit:{plan_id}"


class CommitCoordinator:
    """Validates and applies a cutting plan's stock consumption.

    Attributes:
        consumption_order: FIFO or LIFO batch selection.
        production_stage: Order status set after a successful commit.
        wait_seconds: How long to wait for a concurrent commit of the
            same plan before giving up.
    """

    def __init__(
        self,
        orders: "OrderRepositoryProtocol",
        plans: "CuttingPlanRepositoryProtocol",
        inventory: "InventoryStoreProtocol",
        transactions: "StockTransactionLogProtocol",
        locks: "LockServiceProtocol",
        consumption_order: ConsumptionOrder = ConsumptionOrder.FIFO,
        production_stage: str = OrderStatus.CUTTING.value,
        wait_seconds: float = 5.0,
    ) -> None:
        self._orders = orders
        self._plans = plans
        self._inventory = inventory
        self._transactions = transactions
        self._locks = locks
        self.consumption_order = consumption_order
        self.production_stage = production_stage
        self.wait_seconds = wait_seconds

    def commit(self, order_id: str, committed_by: str | None = None) -> CommitResult:
        """Commit the order's cutting plan to inventory.

        Args:
            order_id: Order whose plan to commit.
            committed_by: User performing the commit.

        Returns:
            The updated order and plan with the transactions written.

        Raises:
            OrderNotFound: If the order does not exist.
            NotGenerated: If the order has no plan, or its plan is not Generated.
            AlreadyCommitted: If the plan was already committed, including by
                a concurrent caller.
            InsufficientInventory: If stock cannot cover the plan. Nothing is
                deducted in that case.
        """
        order = self._orders.get(order_id)
        plan = self._plans.get_for_order(order_id)
        if plan is None:
            raise NotGenerated("No cutting plan has been generated for this order.")
        plan.ensure_committable()

        try:
            with self._locks.hold(
                commit_lock_key(plan.plan_id), blocking=True, timeout=self.wait_seconds
            ):
                return self._commit_locked(order, plan.plan_id, committed_by)
        except LockUnavailable as e:
            raise AlreadyCommitted(
                "A commit for this cutting plan is already in progress."
            ) from e

    def validate(self, plan: CuttingPlan) -> list[Shortfall]:
        """Check stock for a plan without changing anything.

        Pipes are counted per standard length, so a plan needing N pipes of
        one length needs N in stock. Gauge-less stock can serve every gauge,
        so the gauges of one material are also checked against it together.

        Returns:
            Every shortfall found; empty if the plan can be committed.
        """
        by_material: dict[str, list[MaterialPlan]] = {}
        for material_plan in plan.material_plans:
            by_material.setdefault(material_plan.material_id, []).append(material_plan)

        shortfalls: list[Shortfall] = []
        for material_id, material_plans in by_material.items():
            inventory = self._inventory.open(material_id)
            pipe_shortfalls: list[Shortfall] = []
            for material_plan in material_plans:
                pipe_shortfalls.extend(self._pipe_shortfalls(material_plan, inventory))
                shortfalls.extend(self._roll_shortfalls(material_plan, inventory))
            if len(material_plans) > 1:
                pipe_shortfalls.extend(
                    self._shared_stock_shortfalls(
                        material_plans,
                        inventory,
                        {s.standard_length for s in pipe_shortfalls},
                    )
                )
            shortfalls.extend(pipe_shortfalls)
        return shortfalls

    def _commit_locked(
        self, order: Order, plan_id: str, committed_by: str | None
    ) -> CommitResult:
        # Re-read under the lock; a concurrent commit may have finished, or a
        # re-optimization may have replaced the plan.
        plan = self._plans.get(plan_id)
        if plan is None:
            raise NotGenerated(SUPERSEDED_MESSAGE)
        plan.ensure_committable()

        shortfalls = self.validate(plan)
        if shortfalls:
            logger.info(
                "Commit of plan %s rejected: %d shortfall(s)", plan_id, len(shortfalls)
            )
            raise InsufficientInventory(shortfalls)

        compensation = CompensationLog()
        written: list[StockTransaction] = []
        try:
            for material_plan in plan.material_plans:
                inventory = self._inventory.open(material_plan.material_id)
                written.extend(
                    self._apply_pipes(
                        order, plan, material_plan, inventory, compensation, committed_by
                    )
                )
                written.extend(
                    self._apply_rolls(
                        order, plan, material_plan, inventory, compensation, committed_by
                    )
                )
            plan = self._plans.mark_committed(plan_id, committed_by)
        except Exception:
            compensation.rollback()
            raise
        compensation.clear()

        order.cutting_plan_id = plan.plan_id
        order.cutting_plan_status = PlanStatus.COMMITTED.value
        order.status = self.production_stage
        order.record_history(
            order.status,
            f"Cutting plan {_short_id(plan.plan_id)} committed. "
            f"Production stage: {order.status}",
            committed_by,
        )
        self._orders.save(order)

        logger.info(
            "Committed plan %s for order %s: %d transaction(s)",
            plan.plan_id,
            order.label,
            len(written),
        )
        return CommitResult(order=order, cutting_plan=plan, transactions=tuple(written))

    def _pipe_shortfalls(
        self, material_plan: MaterialPlan, inventory: "MaterialInventoryProtocol"
    ) -> list[Shortfall]:
        needed = Counter(pipe.standard_length for pipe in material_plan.pipes_used)
        shortfalls = []
        for length, count in needed.items():
            required = Decimal(count)
            available = inventory.available_pieces(
                length, material_plan.usage_unit, material_plan.gauge
            )
            if available is None or available < required:
                shortfalls.append(
                    Shortfall(
                        material_id=material_plan.material_id,
                        material_name=material_plan.material_name,
                        standard_length=length,
                        unit=material_plan.usage_unit,
                        required=required,
                        available=available,
                        gauge=material_plan.gauge,
                    )
                )
        return shortfalls

    def _shared_stock_shortfalls(
        self,
        material_plans: list[MaterialPlan],
        inventory: "MaterialInventoryProtocol",
        reported: set[Decimal],
    ) -> list[Shortfall]:
        """Check gauges that compete for the same gauge-less stock.

        Each gauge first uses its own stock; whatever it still lacks must
        come from the shared pool. A gauge-less demand can use any stock.
        """
        demand: dict[Decimal, Counter[str | None]] = {}
        for material_plan in material_plans:
            for pipe in material_plan.pipes_used:
                demand.setdefault(pipe.standard_length, Counter())[material_plan.gauge] += 1

        first = material_plans[0]
        shortfalls = []
        for length, by_gauge in demand.items():
            if len(by_gauge) < 2 or length in reported:
                continue
            supply = inventory.pieces_by_gauge(length, first.usage_unit)
            if None in by_gauge:
                required = Decimal(sum(by_gauge.values()))
                available = sum(supply.values(), _ZERO)
            else:
                lacking = [g for g, n in by_gauge.items() if n > supply.get(g, _ZERO)]
                required = Decimal(sum(by_gauge[g] for g in lacking))
                available = supply.get(None, _ZERO) + sum(
                    (supply.get(g, _ZERO) for g in lacking), _ZERO
                )
            if required > available:
                shortfalls.append(
                    Shortfall(
                        material_id=first.material_id,
                        material_name=first.material_name,
                        standard_length=length,
                        unit=first.usage_unit,
                        required=required,
                        available=available,
                    )
                )
        return shortfalls

    def _roll_shortfalls(
        self, material_plan: MaterialPlan, inventory: "MaterialInventoryProtocol"
    ) -> list[Shortfall]:
        needed: dict[Decimal, Decimal] = {}
        for roll in material_plan.rolls_used:
            needed[roll.selected_width] = (
                needed.get(roll.selected_width, _ZERO) + roll.consumed_area
            )
        shortfalls = []
        for width, area in needed.items():
            available = inventory.available_area(width, material_plan.usage_unit)
            if available is None or available < area:
                shortfalls.append(
                    Shortfall(
                        material_id=material_plan.material_id,
                        material_name=material_plan.material_name,
                        standard_length=width,
                        unit=material_plan.usage_unit,
                        required=area,
                        available=available,
                    )
                )
        return shortfalls

    def _apply_pipes(
        self,
        order: Order,
        plan: CuttingPlan,
        material_plan: MaterialPlan,
        inventory: "MaterialInventoryProtocol",
        compensation: CompensationLog,
        committed_by: str | None,
    ) -> list[StockTransaction]:
        written = []
        for index, pipe in enumerate(material_plan.pipes_used):
            deduction = inventory.deduct_piece(
                pipe.standard_length,
                material_plan.usage_unit,
                material_plan.gauge,
                self.consumption_order,
            )
            self._register_undo(compensation, inventory, deduction, plan, committed_by)
            written.append(
                self._record(
                    deduction,
                    plan,
                    index,
                    committed_by,
                    f"Cut for Order {order.label}, Cutting Plan {_short_id(plan.plan_id)}. "
                    f"Material: {material_plan.material_name}, "
                    f"Pipe: {pipe.standard_length} {pipe.unit.value}",
                )
            )
        return written

    def _apply_rolls(
        self,
        order: Order,
        plan: CuttingPlan,
        material_plan: MaterialPlan,
        inventory: "MaterialInventoryProtocol",
        compensation: CompensationLog,
        committed_by: str | None,
    ) -> list[StockTransaction]:
        written = []
        for index, roll in enumerate(material_plan.rolls_used):
            deductions = inventory.deduct_area(
                roll.selected_width,
                material_plan.usage_unit,
                roll.consumed_area,
                self.consumption_order,
            )
            for deduction in deductions:
                self._register_undo(compensation, inventory, deduction, plan, committed_by)
                written.append(
                    self._record(
                        deduction,
                        plan,
                        index,
                        committed_by,
                        f"Wire mesh for Order {order.label}, Cutting Plan "
                        f"{_short_id(plan.plan_id)}. Panel {roll.required_width}x"
                        f"{roll.required_length} on width {roll.selected_width} "
                        f"{roll.unit.value}",
                    )
                )
        return written

    def _record(
        self,
        deduction: Deduction,
        plan: CuttingPlan,
        index: int,
        committed_by: str | None,
        notes: str,
    ) -> StockTransaction:
        transaction = StockTransaction(
            material_id=deduction.material_id,
            type=TransactionType.OUTWARD_ORDER_CUT,
            quantity_change=-deduction.quantity,
            quantity_unit=deduction.quantity_unit,
            unit_rate_at_transaction=deduction.unit_rate,
            total_value_change=-deduction.value,
            batch_id=deduction.batch_id,
            related_plan_id=plan.plan_id,
            related_pipe_index=index,
            length=deduction.length,
            length_unit=deduction.unit,
            gauge=deduction.gauge,
            notes=notes,
            created_by=committed_by,
        )
        self._transactions.append(transaction)
        return transaction

    def _register_undo(
        self,
        compensation: CompensationLog,
        inventory: "MaterialInventoryProtocol",
        deduction: Deduction,
        plan: CuttingPlan,
        committed_by: str | None,
    ) -> None:
        def undo() -> None:
            inventory.restore(deduction)
            self._transactions.append(
                StockTransaction(
                    material_id=deduction.material_id,
                    type=TransactionType.CORRECTION,
                    quantity_change=deduction.quantity,
                    quantity_unit=deduction.quantity_unit,
                    unit_rate_at_transaction=deduction.unit_rate,
                    total_value_change=deduction.value,
                    batch_id=deduction.batch_id,
                    related_plan_id=plan.plan_id,
                    length=deduction.length,
                    length_unit=deduction.unit,
                    gauge=deduction.gauge,
                    notes=f"Reversal of failed commit for Cutting Plan {_short_id(plan.plan_id)}",
                    created_by=committed_by,
                )
            )

        compensation.register(
            f"restore {deduction.quantity} {deduction.quantity_unit} of "
            f"{deduction.material_id} to batch {deduction.batch_id}",
            undo,
        )
