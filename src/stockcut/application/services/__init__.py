"""Application services.

- optimization_orchestrator: Generates and stores cutting plans per order
- commit_coordinator: Validates and applies a plan against inventory
- compensation: Undo log used to reverse partially applied commits
- plan_queries: Read-side plan lookups and procurement summaries
- stage_tracker: Manual manufacturing stage updates
"""

from .commit_coordinator import CommitCoordinator
from .compensation import CompensationLog, CompensationStep
from .optimization_orchestrator import OptimizationOrchestrator
from .plan_queries import CuttingPlanQueries
from .stage_tracker import ProductionStageService

__all__ = [
    "CommitCoordinator",
    "CompensationLog",
    "CompensationStep",
    "CuttingPlanQueries",
    "OptimizationOrchestrator",
    "ProductionStageService",
]
