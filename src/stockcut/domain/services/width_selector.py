"""Standard width selection for wire mesh rolls.

Roll goods are not packed along their length: each panel is mapped to the
narrowest standard roll width that can hold it, and the difference is
counted as wastage.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from stockcut.domain.exceptions import NoFeasibleStock
from stockcut.domain.value_objects import (
    LengthUnit,
    Orientation,
    RollAssignment,
    RollDemandLine,
    WidthSelection,
)

logger = logging.getLogger(__name__)


def select_width(
    required_width: Decimal,
    standard_widths: Sequence[Decimal],
    unit: LengthUnit = LengthUnit.FEET,
) -> WidthSelection:
    """Pick the smallest standard width that covers the required width.

    Args:
        required_width: Width the panel needs.
        standard_widths: Available roll widths, in the same unit.
        unit: Unit of all widths.

    Returns:
        The selection with its wastage figures.

    Raises:
        NoFeasibleStock: If no widths exist or none is wide enough.
    """
    if not standard_widths:
        raise NoFeasibleStock("No standard widths available for wire mesh material")

    suitable = [w for w in standard_widths if w >= required_width]
    if not suitable:
        raise NoFeasibleStock(
            f"Required width {required_width}{unit.value} exceeds largest available "
            f"standard width {max(standard_widths)}{unit.value}"
        )
    return WidthSelection(
        required_width=required_width, selected_width=min(suitable), unit=unit
    )


def calculate_consumption(
    required_width: Decimal,
    required_length: Decimal,
    standard_widths: Sequence[Decimal],
    unit: LengthUnit = LengthUnit.FEET,
    source_item_ref: str = "",
) -> RollAssignment:
    """Map one panel onto a roll, turning it if it only fits sideways.

    The original orientation is always tried first. Only when no standard
    width can hold the panel's width is its length laid across the roll.
    Without any standard widths the panel consumes exactly its own area.

    Raises:
        NoFeasibleStock: If neither orientation fits any standard width.
    """
    if not standard_widths:
        return RollAssignment(
            required_width=required_width,
            required_length=required_length,
            selected_width=required_width,
            consumed_length=required_length,
            unit=unit,
            source_item_ref=source_item_ref,
        )

    try:
        selection = select_width(required_width, standard_widths, unit)
        return RollAssignment(
            required_width=required_width,
            required_length=required_length,
            selected_width=selection.selected_width,
            consumed_length=required_length,
            unit=unit,
            source_item_ref=source_item_ref,
        )
    except NoFeasibleStock as original_error:
        try:
            selection = select_width(required_length, standard_widths, unit)
        except NoFeasibleStock as swapped_error:
            raise NoFeasibleStock(
                "Wire mesh optimization failed: neither orientation works. "
                f"Original: {original_error}. Swapped: {swapped_error}"
            ) from swapped_error

    logger.debug(
        "Panel %sx%s %s fits only when turned; using width %s",
        required_width,
        required_length,
        unit.value,
        selection.selected_width,
    )
    return RollAssignment(
        required_width=required_width,
        required_length=required_length,
        selected_width=selection.selected_width,
        consumed_length=required_width,
        unit=unit,
        source_item_ref=source_item_ref,
        orientation=Orientation.SWAPPED,
    )


def plan_rolls(
    demand: Sequence[RollDemandLine],
    standard_widths: Sequence[Decimal],
    unit: LengthUnit = LengthUnit.FEET,
) -> tuple[RollAssignment, ...]:
    """Map every panel in a demand list onto a roll width.

    Panels with quantity > 1 yield one assignment per panel.

    Raises:
        NoFeasibleStock: If any panel cannot be placed. The material id of
            the failing demand line is attached to the error.
    """
    assignments: list[RollAssignment] = []
    for line in demand:
        try:
            assignment = calculate_consumption(
                line.required_width,
                line.required_length,
                standard_widths,
                unit,
                line.source_item_ref,
            )
        except NoFeasibleStock as e:
            raise NoFeasibleStock(str(e), material_id=line.material_id) from e
        assignments.extend([assignment] * line.quantity)
    return tuple(assignments)
