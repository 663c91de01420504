"""One-dimensional cutting stock optimization for profile pipes.

Required piece lengths are packed onto standard-length pipes with a
first-fit decreasing heuristic. The optimizer is a pure computation: it
reads neither inventory nor availability, and identical inputs always
produce identical plans.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

from stockcut.domain.exceptions import NoFeasibleStock
from stockcut.domain.value_objects import (
    LENGTH_TOLERANCE,
    CutMade,
    DemandLine,
    LengthUnit,
    MaterialPlan,
    PipeAssignment,
    StockCatalogEntry,
    convert_length,
)

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
MAX_KERF_INCHES = Decimal("0.5")


@dataclass(frozen=True)
class PipePackingConfig:
    """Configuration for pipe packing.

    Attributes:
        tolerance: Slack allowed when checking that a cut fits, in the
            usage unit of the material.
        kerf_inches: Material lost to the saw between adjacent cuts on the
            same pipe, in inches whatever the material's unit. Zero means
            cuts are treated as exact. A typical saw blade takes 0.125.
    """

    tolerance: Decimal = LENGTH_TOLERANCE
    kerf_inches: Decimal = _ZERO

    def __post_init__(self) -> None:
        if not _ZERO <= self.tolerance <= Decimal("1"):
            raise ValueError("Tolerance must be between 0 and 1")
        if not _ZERO <= self.kerf_inches <= MAX_KERF_INCHES:
            raise ValueError(f"Kerf must be between 0 and {MAX_KERF_INCHES} inches")


@dataclass
class _OpenPipe:
    """Internal state for a pipe that has been started.

    Attributes:
        standard_length: Length of the stock pipe.
        used: Length consumed so far, including kerf.
        cuts: Cuts placed on the pipe in placement order.
    """

    standard_length: Decimal
    used: Decimal = _ZERO
    cuts: list[CutMade] = field(default_factory=list)

    @property
    def remaining(self) -> Decimal:
        return self.standard_length - self.used

    def space_needed(self, cut: CutMade, kerf: Decimal) -> Decimal:
        """Capacity a cut takes on this pipe, including the saw kerf."""
        return cut.required_length + (kerf if self.cuts else _ZERO)

    def add(self, cut: CutMade, kerf: Decimal) -> None:
        self.used += self.space_needed(cut, kerf)
        self.cuts.append(cut)


class CuttingOptimizer:
    """First-fit decreasing packer for standard-length stock.

    Cuts are placed longest first. Each cut goes on the first already
    opened pipe with room for it; otherwise a new pipe is opened at the
    shortest standard length that can hold the cut.

    Attributes:
        config: Packing tolerance and kerf.
    """

    def __init__(self, config: PipePackingConfig | None = None) -> None:
        """Initialize the optimizer.

        Args:
            config: Packing configuration. Defaults to a 0.01 tolerance
                and no kerf.
        """
        self.config = config or PipePackingConfig()

    def optimize(
        self,
        demand: Sequence[DemandLine],
        catalog: Sequence[StockCatalogEntry],
        unit: LengthUnit = LengthUnit.FEET,
        material_name: str | None = None,
    ) -> MaterialPlan:
        """Assign every demanded cut to a stock pipe.

        Args:
            demand: Required pieces, all of one material and gauge. Lengths
                are in ``unit``.
            catalog: Standard lengths available for the material. Entries in
                other units are converted to ``unit``.
            unit: Usage unit of the material.
            material_name: Display name used in messages and on the plan.

        Returns:
            MaterialPlan with the pipes used, in the order they were opened.
            Procurement totals are left for the plan assembler.

        Raises:
            ValueError: If demand lines mix materials or gauges.
            NoFeasibleStock: If no standard lengths exist or a cut is longer
                than the longest standard length.
        """
        if not demand:
            raise ValueError("Demand must contain at least one cut")
        material_id = demand[0].material_id
        gauge = demand[0].gauge
        if any(d.material_id != material_id or d.gauge != gauge for d in demand):
            raise ValueError("All demand lines must share one material and gauge")

        name = material_name or material_id
        lengths = self._standard_lengths(catalog, unit)
        if not lengths:
            raise NoFeasibleStock(
                f"No standard lengths defined for {name}", material_id=material_id
            )

        cuts = self._sort_by_length(self._expand_demand(demand))
        tolerance = self.config.tolerance
        kerf = convert_length(self.config.kerf_inches, LengthUnit.INCHES, unit)

        longest = cuts[0]
        if longest.required_length > lengths[0] + tolerance:
            raise NoFeasibleStock(
                f"Largest cut for {name} ({longest.required_length}{unit.value}, "
                f"item {longest.source_item_ref}) is greater than the largest "
                f"available standard pipe ({lengths[0]}{unit.value}).",
                material_id=material_id,
            )

        logger.debug(
            "Packing %d cuts for %s onto %d standard lengths",
            len(cuts),
            name,
            len(lengths),
        )

        pipes: list[_OpenPipe] = []
        for cut in cuts:
            target = next(
                (
                    pipe
                    for pipe in pipes
                    if pipe.space_needed(cut, kerf) <= pipe.remaining + tolerance
                ),
                None,
            )
            if target is None:
                target = self._open_pipe(cut, lengths, tolerance, name, material_id, unit)
                pipes.append(target)
            target.add(cut, kerf)

        assignments = tuple(self._to_assignment(pipe, unit) for pipe in pipes)
        logger.debug(
            "Packed %d cuts for %s onto %d pipes, %s%s scrap",
            len(cuts),
            name,
            len(assignments),
            sum((a.scrap_length for a in assignments), _ZERO),
            unit.value,
        )
        return MaterialPlan(
            material_id=material_id,
            material_name=name,
            gauge=gauge,
            usage_unit=unit,
            pipes_used=assignments,
        )

    def _standard_lengths(
        self, catalog: Sequence[StockCatalogEntry], unit: LengthUnit
    ) -> list[Decimal]:
        """Distinct standard lengths in ``unit``, longest first."""
        return sorted(
            {entry.in_unit(unit).standard_length for entry in catalog}, reverse=True
        )

    def _expand_demand(self, demand: Sequence[DemandLine]) -> list[CutMade]:
        """Expand demand lines with quantity > 1 into individual cuts.

        Args:
            demand: Demand lines, possibly with quantity > 1.

        Returns:
            One CutMade per physical piece, in demand order.
        """
        cuts: list[CutMade] = []
        for line in demand:
            cut = CutMade(
                required_length=line.required_length,
                source_item_ref=line.source_item_ref,
            )
            cuts.extend([cut] * line.quantity)
        return cuts

    def _sort_by_length(self, cuts: list[CutMade]) -> list[CutMade]:
        """Sort cuts longest first; equal lengths keep their demand order."""
        return sorted(cuts, key=lambda c: c.required_length, reverse=True)

    def _open_pipe(
        self,
        cut: CutMade,
        lengths: list[Decimal],
        tolerance: Decimal,
        name: str,
        material_id: str,
        unit: LengthUnit,
    ) -> _OpenPipe:
        """Start a pipe at the shortest standard length that holds the cut."""
        fitting = [length for length in lengths if cut.required_length <= length + tolerance]
        if not fitting:
            raise NoFeasibleStock(
                f"Cannot fulfill cut of {cut.required_length}{unit.value} for {name} "
                f"(item {cut.source_item_ref}): no standard length is long enough",
                material_id=material_id,
            )
        return _OpenPipe(standard_length=min(fitting))

    def _to_assignment(self, pipe: _OpenPipe, unit: LengthUnit) -> PipeAssignment:
        used = sum((cut.required_length for cut in pipe.cuts), _ZERO)
        return PipeAssignment(
            standard_length=pipe.standard_length,
            unit=unit,
            cuts_made=tuple(pipe.cuts),
            scrap_length=max(pipe.standard_length - used, _ZERO),
        )
