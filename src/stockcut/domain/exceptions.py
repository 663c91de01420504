"""Domain exceptions for cutting optimization and inventory commit.

Every error raised by the core derives from StockCutError so callers can
catch the whole family. The web layer maps each type to an HTTP status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stockcut.domain.value_objects import Shortfall


class StockCutError(Exception):
    """Base class for all stock cutting errors."""


class NoFeasibleStock(StockCutError):
    """Raised when a required length exceeds every available standard length."""

    def __init__(self, message: str, material_id: str | None = None) -> None:
        self.material_id = material_id
        super().__init__(message)


class OptimizationInProgress(StockCutError):
    """Raised when an optimization for the same order is already running."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(
            "Optimization is already in progress for this order. "
            "Please wait for it to complete."
        )


class AlreadyCommitted(StockCutError):
    """Raised when a cutting plan for the order has already been committed."""

    def __init__(self, message: str = "This cutting plan has already been committed.") -> None:
        super().__init__(message)


class CommitInProgress(StockCutError):
    """Raised when an order's plan cannot be replaced while it is being committed."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(
            "The cutting plan for this order is being committed. "
            "Reload the order before optimizing again."
        )


class NotGenerated(StockCutError):
    """Raised when committing a plan that is not in the Generated state."""


class InsufficientInventory(StockCutError):
    """Raised when stock cannot cover a plan, listing every shortfall at once."""

    def __init__(self, shortfalls: list[Shortfall], message: str | None = None) -> None:
        self.shortfalls = list(shortfalls)
        if message is None:
            lines = "\n".join(f"- {s.message}" for s in self.shortfalls)
            message = f"Cannot commit cutting plan due to insufficient inventory:\n{lines}"
        super().__init__(message)

    @property
    def messages(self) -> list[str]:
        return [s.message for s in self.shortfalls]


class PersistenceError(StockCutError):
    """Raised when a storage operation fails."""


class OptimizationFailed(StockCutError):
    """Raised when an order produced no usable cutting plan.

    Attributes:
        errors: Per-material error messages collected during the run.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class InvalidOrderState(StockCutError):
    """Raised when an order is not in a status the operation accepts."""


class InvalidStage(StockCutError):
    """Raised when an unknown manufacturing stage is requested."""

    def __init__(self, stage: str, valid: tuple[str, ...]) -> None:
        self.stage = stage
        self.valid = valid
        super().__init__(f"Invalid manufacturing stage: {stage}.")


class OrderNotFound(StockCutError):
    """Raised when an order does not exist."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class CuttingPlanNotFound(StockCutError):
    """Raised when no cutting plan exists for an order."""


class MaterialNotFound(StockCutError):
    """Raised when a material referenced by an order or plan is unknown."""

    def __init__(self, material_id: str) -> None:
        self.material_id = material_id
        super().__init__(f"Material not found: {material_id}")


class LockUnavailable(StockCutError):
    """Raised when a scoped lock could not be acquired."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Lock is held: {key}")
