"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockcut.application.factory import ServiceFactory
from stockcut.web.dependencies import get_service_factory
from stockcut.web.exceptions import register_exception_handlers
from stockcut.web.routers import (
    cutting_plan_router,
    optimize_router,
    orders_router,
    wire_mesh_router,
)


def create_app(factory: ServiceFactory | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        factory: Service factory to serve from. Defaults to the module-level
            factory returned by ``get_factory``.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Stock Cutting API",
        description="Cutting plan optimization and inventory commit for profile and mesh stock",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware for browser access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure as needed for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    if factory is not None:
        app.dependency_overrides[get_service_factory] = lambda: factory

    app.include_router(optimize_router, prefix="/api/v1")
    app.include_router(cutting_plan_router, prefix="/api/v1")
    app.include_router(orders_router, prefix="/api/v1")
    app.include_router(wire_mesh_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Application instance for ASGI servers
app = create_app()
