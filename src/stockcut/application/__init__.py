"""Application layer - use cases and orchestration."""

from .dtos import CommitResult, OptimizeResult, PipeOrderLine, PipeOrderSummary
from .factory import ServiceFactory, get_factory, reset_factory, set_factory

__all__ = [
    "CommitResult",
    "OptimizeResult",
    "PipeOrderLine",
    "PipeOrderSummary",
    "ServiceFactory",
    "get_factory",
    "reset_factory",
    "set_factory",
]
