"""Cutting plan lookup and commit endpoints."""

from fastapi import APIRouter

from stockcut.web.dependencies import CommitCoordinatorDep, PlanQueriesDep
from stockcut.web.schemas.requests import CommitRequest
from stockcut.web.schemas.responses import (
    CommitResponseSchema,
    CuttingPlanSchema,
    PipeOrderSummarySchema,
)

router = APIRouter(prefix="/manufacturing/cutting-plan", tags=["cutting-plan"])


@router.get("/{order_id}", response_model=CuttingPlanSchema)
def get_cutting_plan(order_id: str, queries: PlanQueriesDep) -> CuttingPlanSchema:
    """Return the order's cutting plan.

    Responds 400 with the recorded reason when the last optimization failed,
    and 404 when the order has no plan.
    """
    return CuttingPlanSchema.from_domain(queries.get_for_order(order_id))


@router.get("/{order_id}/pipe-order-summary", response_model=PipeOrderSummarySchema)
def get_pipe_order_summary(order_id: str, queries: PlanQueriesDep) -> PipeOrderSummarySchema:
    """Return pipes to procure per material and standard length."""
    return PipeOrderSummarySchema.from_domain(queries.pipe_order_summary(order_id))


@router.post("/{order_id}/commit", response_model=CommitResponseSchema)
def commit_cutting_plan(
    order_id: str,
    coordinator: CommitCoordinatorDep,
    request: CommitRequest | None = None,
) -> CommitResponseSchema:
    """Deduct the plan's stock from inventory and start production.

    Responds 400 listing every shortfall if stock cannot cover the plan.
    """
    committed_by = request.committed_by if request is not None else None
    return CommitResponseSchema.from_domain(coordinator.commit(order_id, committed_by))
