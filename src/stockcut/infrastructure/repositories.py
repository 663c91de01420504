"""In-memory persistence for orders, cutting plans and stock transactions."""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from stockcut.domain.entities import CuttingPlan, Order, StockTransaction
from stockcut.domain.exceptions import AlreadyCommitted, NotGenerated, OrderNotFound

logger = logging.getLogger(__name__)


class InMemoryOrderRepository:
    """Order store keyed by order id."""

    def __init__(self, orders: Iterable[Order] = ()) -> None:
        self._orders: dict[str, Order] = {o.order_id: o for o in orders}
        self._lock = threading.RLock()

    def get(self, order_id: str) -> Order:
        """Look up an order.

        Raises:
            OrderNotFound: If the order does not exist.
        """
        with self._lock:
            order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def save(self, order: Order) -> None:
        with self._lock:
            self._orders[order.order_id] = order

    def list_orders(self) -> list[Order]:
        with self._lock:
            return list(self._orders.values())


class InMemoryCuttingPlanRepository:
    """Cutting plan store with at most one plan per order.

    A new plan for an order replaces its previous plan unless that plan was
    committed; committed plans are kept permanently and block replacement.
    """

    def __init__(self) -> None:
        self._plans: dict[str, CuttingPlan] = {}
        self._by_order: dict[str, str] = {}
        self._lock = threading.RLock()

    def get(self, plan_id: str) -> CuttingPlan | None:
        with self._lock:
            return self._plans.get(plan_id)

    def get_for_order(self, order_id: str) -> CuttingPlan | None:
        with self._lock:
            plan_id = self._by_order.get(order_id)
            return self._plans.get(plan_id) if plan_id else None

    def save(self, plan: CuttingPlan) -> None:
        """Store a plan, superseding the order's non-committed plan.

        Raises:
            AlreadyCommitted: If the order already has a different,
                committed plan.
        """
        with self._lock:
            current = self.get_for_order(plan.order_id)
            if current is not None and current.plan_id != plan.plan_id:
                if current.is_committed:
                    raise AlreadyCommitted(
                        "A cutting plan has already been committed for this order."
                    )
                del self._plans[current.plan_id]
                logger.info(
                    "Plan %s for order %s superseded by %s",
                    current.plan_id,
                    plan.order_id,
                    plan.plan_id,
                )
            self._plans[plan.plan_id] = plan
            self._by_order[plan.order_id] = plan.plan_id

    def discard_for_order(self, order_id: str) -> CuttingPlan | None:
        """Remove an order's plan if it is not committed.

        Returns:
            The removed plan, or None if there was nothing to remove.
        """
        with self._lock:
            plan = self.get_for_order(order_id)
            if plan is None or plan.is_committed:
                return None
            del self._plans[plan.plan_id]
            del self._by_order[order_id]
            return plan

    def mark_committed(self, plan_id: str, committed_by: str | None) -> CuttingPlan:
        """Move a stored plan from Generated to Committed atomically.

        Raises:
            AlreadyCommitted: If another caller committed it first.
            NotGenerated: If the plan is in any other state, or was replaced
                by a newer plan and is no longer stored.
        """
        with self._lock:
            plan = self._plans.get(plan_id)
            if plan is None:
                raise NotGenerated(f"Cutting plan {plan_id} no longer exists; it was replaced.")
            plan.mark_committed(committed_by)
            return plan


class InMemoryStockTransactionLog:
    """Append-only list of stock transactions."""

    def __init__(self) -> None:
        self._transactions: list[StockTransaction] = []
        self._lock = threading.Lock()

    def append(self, transaction: StockTransaction) -> None:
        with self._lock:
            self._transactions.append(transaction)

    def list_transactions(
        self,
        material_id: str | None = None,
        plan_id: str | None = None,
    ) -> list[StockTransaction]:
        """Transactions in the order they were written, optionally filtered."""
        with self._lock:
            return [
                t
                for t in self._transactions
                if (material_id is None or t.material_id == material_id)
                and (plan_id is None or t.related_plan_id == plan_id)
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)
