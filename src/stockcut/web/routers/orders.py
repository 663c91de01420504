"""Manufacturing stage endpoint."""

from fastapi import APIRouter

from stockcut.web.dependencies import StageServiceDep
from stockcut.web.schemas.requests import StageUpdateRequest
from stockcut.web.schemas.responses import OrderSchema

router = APIRouter(prefix="/manufacturing/orders", tags=["orders"])


@router.patch("/{order_id}/stage", response_model=OrderSchema)
def update_order_stage(
    order_id: str,
    request: StageUpdateRequest,
    stages: StageServiceDep,
) -> OrderSchema:
    """Move an order to another manufacturing stage."""
    order = stages.update_stage(order_id, request.status, request.notes, request.updated_by)
    return OrderSchema.from_domain(order)
