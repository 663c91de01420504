"""Cutting plan generation endpoint."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from stockcut.domain.exceptions import AlreadyCommitted
from stockcut.web.dependencies import OrchestratorDep
from stockcut.web.exceptions import error_response
from stockcut.web.schemas.requests import OptimizeRequest
from stockcut.web.schemas.responses import OptimizeResponseSchema

router = APIRouter(prefix="/manufacturing", tags=["optimize"])


@router.post("/optimize", response_model=OptimizeResponseSchema)
def optimize_cuts(
    request: OptimizeRequest,
    orchestrator: OrchestratorDep,
) -> OptimizeResponseSchema | JSONResponse:
    """Generate a cutting plan for an order.

    Args:
        request: Order to optimize and the requesting user.
        orchestrator: Injected optimization orchestrator.

    Returns:
        The new plan id and status, or a 409 error body if the order's plan
        is already committed. Committing a plan twice is a 400 elsewhere;
        here it means the order has moved past optimization.
    """
    try:
        result = orchestrator.optimize(request.order_id, request.generated_by)
    except AlreadyCommitted as e:
        return error_response(409, str(e), "already_committed", {"order_id": request.order_id})

    return OptimizeResponseSchema(
        cutting_plan_id=result.cutting_plan_id,
        status=result.status,
        order_status=result.order.status,
        material_errors=list(result.cutting_plan.material_errors),
    )
