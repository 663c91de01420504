"""API routers for the REST API."""

from stockcut.web.routers.cutting_plan import router as cutting_plan_router
from stockcut.web.routers.optimize import router as optimize_router
from stockcut.web.routers.orders import router as orders_router
from stockcut.web.routers.wire_mesh import router as wire_mesh_router

__all__ = [
    "cutting_plan_router",
    "optimize_router",
    "orders_router",
    "wire_mesh_router",
]
