"""Undo log for multi-step inventory mutations.

Each applied mutation registers how to reverse itself. If a later step
fails, ``rollback`` runs the registered undos newest first so stock ends up
where it started.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompensationStep:
    """A reversible action that has already been applied."""

    description: str
    undo: Callable[[], None]


class CompensationLog:
    """Ordered record of applied steps and their undos.

    Example:
        ```python
        log = CompensationLog()
        try:
            deduction = inventory.deduct_piece(length, unit)
            log.register("deduct 1 pipe", lambda: inventory.restore(deduction))
            ...
        except Exception:
            log.rollback()
            raise
        ```
    """

    def __init__(self) -> None:
        self._steps: list[CompensationStep] = []

    def register(self, description: str, undo: Callable[[], None]) -> None:
        self._steps.append(CompensationStep(description=description, undo=undo))

    def __len__(self) -> int:
        return len(self._steps)

    def rollback(self) -> int:
        """Undo every registered step in reverse order.

        A failing undo is logged and the remaining undos still run; the log
        is empty afterwards.

        Returns:
            Number of undos that failed.
        """
        failures = 0
        steps, self._steps = self._steps, []
        logger.warning("Rolling back %d applied step(s)", len(steps))
        for step in reversed(steps):
            try:
                step.undo()
            except Exception:
                failures += 1
                logger.exception("Compensation failed: %s", step.description)
        return failures

    def clear(self) -> None:
        """Forget all steps once the operation has succeeded."""
        self._steps.clear()
