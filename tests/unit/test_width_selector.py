"""Tests for wire mesh standard width selection."""

from __future__ import annotations

from decimal import Decimal

import pytest

from stockcut.domain.exceptions import NoFeasibleStock
from stockcut.domain.services import calculate_consumption, plan_rolls, select_width
from stockcut.domain.value_objects import LengthUnit, Orientation, RollDemandLine

WIDTHS = [Decimal("3"), Decimal("4"), Decimal("5")]


class TestSelectWidth:
    def test_narrowest_covering_width(self) -> None:
        selection = select_width(Decimal("3.5"), WIDTHS)

        assert selection.selected_width == Decimal("4")
        assert selection.wastage_width == Decimal("0.5")
        assert selection.waste_percentage == Decimal("12.5")
        assert selection.efficiency == Decimal("87.5")

    def test_exact_width(self) -> None:
        selection = select_width(Decimal("3"), WIDTHS)
        assert selection.selected_width == Decimal("3")
        assert selection.wastage_width == Decimal("0")

    def test_unsorted_widths(self) -> None:
        selection = select_width(Decimal("3.5"), [Decimal("5"), Decimal("4"), Decimal("3")])
        assert selection.selected_width == Decimal("4")

    def test_too_wide(self) -> None:
        with pytest.raises(NoFeasibleStock, match="exceeds largest"):
            select_width(Decimal("6"), WIDTHS)

    def test_no_widths(self) -> None:
        with pytest.raises(NoFeasibleStock, match="No standard widths"):
            select_width(Decimal("3"), [])

    def test_area_helpers(self) -> None:
        selection = select_width(Decimal("3.5"), WIDTHS)
        assert selection.consumed_area(Decimal("10")) == Decimal("40")
        assert selection.wastage_area(Decimal("10")) == Decimal("5")


class TestCalculateConsumption:
    def test_original_orientation(self) -> None:
        roll = calculate_consumption(Decimal("3.5"), Decimal("10"), WIDTHS, source_item_ref="P1")

        assert roll.orientation == Orientation.ORIGINAL
        assert roll.selected_width == Decimal("4")
        assert roll.consumed_length == Decimal("10")
        assert roll.consumed_area == Decimal("40")
        assert roll.wastage_area == Decimal("5")
        assert roll.source_item_ref == "P1"

    def test_original_preferred_when_both_fit(self) -> None:
        roll = calculate_consumption(Decimal("4.5"), Decimal("2"), WIDTHS)
        assert roll.orientation == Orientation.ORIGINAL
        assert roll.selected_width == Decimal("5")

    def test_swapped_when_only_length_fits(self) -> None:
        roll = calculate_consumption(Decimal("6"), Decimal("4"), WIDTHS)

        assert roll.orientation == Orientation.SWAPPED
        assert roll.selected_width == Decimal("4")
        assert roll.consumed_length == Decimal("6")
        assert roll.wastage_area == Decimal("0")
        assert roll.efficiency == Decimal("100")

    def test_neither_orientation(self) -> None:
        with pytest.raises(NoFeasibleStock, match="neither orientation"):
            calculate_consumption(Decimal("6"), Decimal("7"), WIDTHS)

    def test_without_widths_consumes_own_area(self) -> None:
        roll = calculate_consumption(Decimal("3.5"), Decimal("10"), [], LengthUnit.METERS)

        assert roll.selected_width == Decimal("3.5")
        assert roll.wastage_area == Decimal("0")
        assert roll.area_unit.value == "sqm"


class TestPlanRolls:
    def test_quantity_expands(self) -> None:
        demand = [
            RollDemandLine(
                material_id="mesh-1",
                required_width=Decimal("3.5"),
                required_length=Decimal("10"),
                source_item_ref="P1",
                quantity=2,
            )
        ]
        rolls = plan_rolls(demand, WIDTHS)
        assert len(rolls) == 2
        assert sum(r.consumed_area for r in rolls) == Decimal("80")

    def test_failure_carries_material(self) -> None:
        demand = [
            RollDemandLine(
                material_id="mesh-1",
                required_width=Decimal("6"),
                required_length=Decimal("7"),
                source_item_ref="P1",
            )
        ]
        with pytest.raises(NoFeasibleStock) as exc_info:
            plan_rolls(demand, WIDTHS)
        assert exc_info.value.material_id == "mesh-1"
