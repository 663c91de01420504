"""Read-side queries over cutting plans."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from stockcut.application.dtos import PipeOrderLine, PipeOrderSummary
from stockcut.domain.entities import CuttingPlan
from stockcut.domain.exceptions import CuttingPlanNotFound, OptimizationFailed
from stockcut.domain.value_objects import OrderStatus

if TYPE_CHECKING:
    from stockcut.contracts.protocols import (
        CuttingPlanRepositoryProtocol,
        OrderRepositoryProtocol,
    )


class CuttingPlanQueries:
    """Looks up an order's cutting plan and its procurement summary."""

    def __init__(
        self,
        orders: "OrderRepositoryProtocol",
        plans: "CuttingPlanRepositoryProtocol",
    ) -> None:
        self._orders = orders
        self._plans = plans

    def get_for_order(self, order_id: str) -> CuttingPlan:
        """Return the order's current cutting plan.

        Raises:
            OrderNotFound: If the order does not exist.
            OptimizationFailed: If the last optimization failed; the message
                is the recorded failure reason.
            CuttingPlanNotFound: If the order has no plan.
        """
        order = self._orders.get(order_id)
        if order.status == OrderStatus.OPTIMIZATION_FAILED.value:
            reason = order.last_failure_reason() or "Optimization failed for this order."
            raise OptimizationFailed(reason)

        plan = self._plans.get_for_order(order_id)
        if plan is None:
            raise CuttingPlanNotFound(f"No cutting plan found for order {order.label}")
        return plan

    def pipe_order_summary(self, order_id: str) -> PipeOrderSummary:
        """Pipes to procure per material, gauge and standard length."""
        plan = self.get_for_order(order_id)
        lines = tuple(
            PipeOrderLine(
                material_id=material_plan.material_id,
                material_name=material_plan.material_name,
                gauge=material_plan.gauge,
                standard_length=summary.standard_length,
                unit=summary.unit,
                quantity=summary.quantity,
                total_scrap=summary.total_scrap,
            )
            for material_plan in plan.material_plans
            for summary in material_plan.total_pipes_per_length
        )
        return PipeOrderSummary(
            order_id=plan.order_id,
            cutting_plan_id=plan.plan_id,
            lines=lines,
            total_weight=sum(
                (mp.total_weight for mp in plan.material_plans), Decimal("0")
            ),
        )
