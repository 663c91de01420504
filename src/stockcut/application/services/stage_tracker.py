"""Manual manufacturing stage updates for orders in production."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stockcut.domain.entities import Order
from stockcut.domain.exceptions import InvalidStage
from stockcut.domain.value_objects import PRODUCTION_STAGES

if TYPE_CHECKING:
    from stockcut.contracts.protocols import OrderRepositoryProtocol

logger = logging.getLogger(__name__)


class ProductionStageService:
    """Moves orders between manufacturing stages and records history."""

    def __init__(self, orders: "OrderRepositoryProtocol") -> None:
        self._orders = orders

    def update_stage(
        self,
        order_id: str,
        stage: str,
        notes: str | None = None,
        updated_by: str | None = None,
    ) -> Order:
        """Set an order's manufacturing stage.

        Args:
            order_id: Order to update.
            stage: One of the production stages, e.g. "Assembly".
            notes: History note; defaults to "Stage changed from X to Y".
            updated_by: User making the change.

        Raises:
            InvalidStage: If ``stage`` is not a production stage.
            OrderNotFound: If the order does not exist.
        """
        if stage not in PRODUCTION_STAGES:
            raise InvalidStage(stage, PRODUCTION_STAGES)

        order = self._orders.get(order_id)
        previous = order.status
        order.status = stage
        order.record_history(
            stage, notes or f"Stage changed from {previous} to {stage}", updated_by
        )
        self._orders.save(order)
        logger.info("Order %s moved from %s to %s", order.label, previous, stage)
        return order
