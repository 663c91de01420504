"""Error handlers for the REST API.

Every domain error is rendered as ``{"error", "error_type", "details"}``.
Handlers are looked up along the exception's class hierarchy, so the
StockCutError handler only applies to errors without a specific one.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stockcut.domain.exceptions import (
    AlreadyCommitted,
    CommitInProgress,
    CuttingPlanNotFound,
    InsufficientInventory,
    InvalidOrderState,
    InvalidStage,
    LockUnavailable,
    MaterialNotFound,
    NoFeasibleStock,
    NotGenerated,
    OptimizationFailed,
    OptimizationInProgress,
    OrderNotFound,
    PersistenceError,
    StockCutError,
)

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, error_type: str, details: object = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "error_type": error_type, "details": details},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(OptimizationInProgress)
    async def in_progress_handler(
        request: Request, exc: OptimizationInProgress
    ) -> JSONResponse:
        return error_response(409, str(exc), "optimization_in_progress", {"order_id": exc.order_id})

    @app.exception_handler(CommitInProgress)
    async def commit_in_progress_handler(
        request: Request, exc: CommitInProgress
    ) -> JSONResponse:
        return error_response(409, str(exc), "commit_in_progress", {"order_id": exc.order_id})

    @app.exception_handler(LockUnavailable)
    async def lock_unavailable_handler(
        request: Request, exc: LockUnavailable
    ) -> JSONResponse:
        return error_response(409, str(exc), "locked", {"key": exc.key})

    @app.exception_handler(AlreadyCommitted)
    async def already_committed_handler(
        request: Request, exc: AlreadyCommitted
    ) -> JSONResponse:
        return error_response(400, str(exc), "already_committed")

    @app.exception_handler(NotGenerated)
    async def not_generated_handler(request: Request, exc: NotGenerated) -> JSONResponse:
        return error_response(400, str(exc), "not_generated")

    @app.exception_handler(InsufficientInventory)
    async def insufficient_inventory_handler(
        request: Request, exc: InsufficientInventory
    ) -> JSONResponse:
        return error_response(
            400,
            str(exc),
            "insufficient_inventory",
            [
                {
                    "material_id": s.material_id,
                    "standard_length": str(s.standard_length),
                    "unit": s.unit.value,
                    "gauge": s.gauge,
                    "required": str(s.required),
                    "available": None if s.available is None else str(s.available),
                    "message": s.message,
                }
                for s in exc.shortfalls
            ],
        )

    @app.exception_handler(OptimizationFailed)
    async def optimization_failed_handler(
        request: Request, exc: OptimizationFailed
    ) -> JSONResponse:
        return error_response(
            400, str(exc), "optimization_failed", [{"message": e} for e in exc.errors] or None
        )

    @app.exception_handler(NoFeasibleStock)
    async def no_feasible_stock_handler(
        request: Request, exc: NoFeasibleStock
    ) -> JSONResponse:
        details = {"material_id": exc.material_id} if exc.material_id else None
        return error_response(400, str(exc), "no_feasible_stock", details)

    @app.exception_handler(InvalidOrderState)
    async def invalid_state_handler(
        request: Request, exc: InvalidOrderState
    ) -> JSONResponse:
        return error_response(400, str(exc), "invalid_order_state")

    @app.exception_handler(InvalidStage)
    async def invalid_stage_handler(request: Request, exc: InvalidStage) -> JSONResponse:
        return error_response(
            400, str(exc), "invalid_stage", {"stage": exc.stage, "valid": list(exc.valid)}
        )

    @app.exception_handler(OrderNotFound)
    async def order_not_found_handler(
        request: Request, exc: OrderNotFound
    ) -> JSONResponse:
        return error_response(404, "Order not found.", "not_found", {"order_id": exc.order_id})

    @app.exception_handler(CuttingPlanNotFound)
    async def plan_not_found_handler(
        request: Request, exc: CuttingPlanNotFound
    ) -> JSONResponse:
        return error_response(404, str(exc), "not_found")

    @app.exception_handler(MaterialNotFound)
    async def material_not_found_handler(
        request: Request, exc: MaterialNotFound
    ) -> JSONResponse:
        return error_response(404, str(exc), "not_found", {"material_id": exc.material_id})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        logger.error("Persistence failure on %s: %s", request.url.path, exc)
        return error_response(500, str(exc), "persistence")

    @app.exception_handler(StockCutError)
    async def stockcut_error_handler(request: Request, exc: StockCutError) -> JSONResponse:
        return error_response(400, str(exc), "stockcut")
