"""Assemble optimizer output into a cutting plan with procurement totals."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Callable, Iterable, Sequence

from stockcut.domain.entities import CuttingPlan, utc_now
from stockcut.domain.value_objects import (
    LengthUnit,
    MaterialPlan,
    PipeAssignment,
    PipeLengthSummary,
    to_feet,
)

logger = logging.getLogger(__name__)

WEIGHT_QUANTUM = Decimal("0.001")

# Returns the weight per foot for (material_id, gauge), or None if unknown.
WeightLookup = Callable[[str, str | None], Decimal | None]


def pipe_weight(
    standard_length: Decimal, unit: LengthUnit, weight_per_foot: Decimal
) -> Decimal:
    """Weight of one pipe from its length and the reference weight per foot."""
    return (weight_per_foot * to_feet(standard_length, unit)).quantize(WEIGHT_QUANTUM)


def summarize_pipes(pipes: Iterable[PipeAssignment]) -> tuple[PipeLengthSummary, ...]:
    """Group pipes by standard length, counting them and summing their scrap.

    Returns:
        One summary per standard length, longest first.
    """
    groups: dict[tuple[Decimal, LengthUnit], list[PipeAssignment]] = {}
    for pipe in pipes:
        groups.setdefault((pipe.standard_length, pipe.unit), []).append(pipe)

    summaries = [
        PipeLengthSummary(
            standard_length=length,
            unit=unit,
            quantity=len(group),
            total_scrap=sum((p.scrap_length for p in group), Decimal("0")),
        )
        for (length, unit), group in groups.items()
    ]
    summaries.sort(key=lambda s: s.standard_length, reverse=True)
    return tuple(summaries)


class PlanAssembler:
    """Turns per-material optimizer results into a CuttingPlan.

    The assembler is a pure transformation: it fills in procurement totals
    and weights, and never touches inventory.
    """

    def __init__(self, weight_lookup: WeightLookup | None = None) -> None:
        """Initialize the assembler.

        Args:
            weight_lookup: Source of weight-per-foot references by material
                and gauge. Without one, every weight is zero.
        """
        self._weight_lookup = weight_lookup

    def complete(self, material_plan: MaterialPlan) -> MaterialPlan:
        """Add pipe weights and per-length totals to a material plan."""
        weight_per_foot = None
        if self._weight_lookup is not None and material_plan.pipes_used:
            weight_per_foot = self._weight_lookup(
                material_plan.material_id, material_plan.gauge
            )
            if weight_per_foot is None:
                logger.warning(
                    "No reference weight for %s gauge %s; weight reported as zero",
                    material_plan.material_name,
                    material_plan.gauge,
                )

        pipes = material_plan.pipes_used
        if weight_per_foot is not None:
            pipes = tuple(
                replace(
                    pipe,
                    calculated_weight=pipe_weight(
                        pipe.standard_length, pipe.unit, weight_per_foot
                    ),
                )
                for pipe in pipes
            )

        return replace(
            material_plan,
            pipes_used=pipes,
            total_pipes_per_length=summarize_pipes(pipes),
            total_weight=sum((p.calculated_weight for p in pipes), Decimal("0")),
        )

    def assemble(
        self,
        material_plans: Sequence[MaterialPlan],
        order_id: str,
        generated_by: str | None = None,
        company_id: str | None = None,
        material_errors: Sequence[str] = (),
    ) -> CuttingPlan:
        """Build a Generated cutting plan for an order.

        Args:
            material_plans: Optimizer results, one per material and gauge.
            order_id: Order the plan belongs to.
            generated_by: User who requested the optimization.
            company_id: Owning company, if any.
            material_errors: Per-material failures to record on the plan.

        Returns:
            A new CuttingPlan in the Generated state.
        """
        plan = CuttingPlan(
            order_id=order_id,
            company_id=company_id,
            material_plans=tuple(self.complete(mp) for mp in material_plans),
            generated_by=generated_by,
            generated_at=utc_now(),
            material_errors=tuple(material_errors),
        )
        logger.debug(
            "Assembled plan %s for order %s: %d materials, %d pipes",
            plan.plan_id,
            order_id,
            len(plan.material_plans),
            plan.pipe_count,
        )
        return plan
