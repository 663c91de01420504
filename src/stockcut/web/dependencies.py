"""FastAPI dependency injection for stock cutting services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from stockcut.application.factory import ServiceFactory, get_factory
from stockcut.application.services import (
    CommitCoordinator,
    CuttingPlanQueries,
    OptimizationOrchestrator,
    ProductionStageService,
)


@lru_cache(maxsize=1)
def get_service_factory() -> ServiceFactory:
    """Get cached ServiceFactory instance."""
    return get_factory()


def get_orchestrator(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> OptimizationOrchestrator:
    """Dependency for OptimizationOrchestrator."""
    return factory.get_orchestrator()


def get_commit_coordinator(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> CommitCoordinator:
    """Dependency for CommitCoordinator."""
    return factory.get_commit_coordinator()


def get_plan_queries(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> CuttingPlanQueries:
    """Dependency for CuttingPlanQueries."""
    return factory.get_plan_queries()


def get_stage_service(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> ProductionStageService:
    """Dependency for ProductionStageService."""
    return factory.get_stage_service()


# Type aliases for cleaner endpoint signatures
ServiceFactoryDep = Annotated[ServiceFactory, Depends(get_service_factory)]
OrchestratorDep = Annotated[OptimizationOrchestrator, Depends(get_orchestrator)]
CommitCoordinatorDep = Annotated[CommitCoordinator, Depends(get_commit_coordinator)]
PlanQueriesDep = Annotated[CuttingPlanQueries, Depends(get_plan_queries)]
StageServiceDep = Annotated[ProductionStageService, Depends(get_stage_service)]
