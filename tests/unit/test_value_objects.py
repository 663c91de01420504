"""Tests for units, plan value objects and entity state checks."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from stockcut.domain.entities import CuttingPlan, Order
from stockcut.domain.exceptions import AlreadyCommitted, NotGenerated
from stockcut.domain.value_objects import (
    AreaUnit,
    CutMade,
    DemandLine,
    LengthUnit,
    PipeAssignment,
    PlanStatus,
    Shortfall,
    StockCatalogEntry,
    convert_length,
    lengths_match,
    to_decimal,
    to_feet,
)


class TestLengthUnit:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("ft", LengthUnit.FEET),
            ("Feet", LengthUnit.FEET),
            ("in", LengthUnit.INCHES),
            (" mm ", LengthUnit.MILLIMETERS),
            ("m", LengthUnit.METERS),
        ],
    )
    def test_parse_aliases(self, name: str, expected: LengthUnit) -> None:
        assert LengthUnit.parse(name) == expected

    def test_parse_unknown_unit(self) -> None:
        with pytest.raises(ValueError, match="Unknown length unit"):
            LengthUnit.parse("furlong")

    def test_area_unit(self) -> None:
        assert LengthUnit.FEET.area_unit == AreaUnit.SQUARE_FEET
        assert LengthUnit.METERS.area_unit.value == "sqm"


class TestConversions:
    def test_feet_to_inches(self) -> None:
        assert convert_length(Decimal("12"), LengthUnit.FEET, LengthUnit.INCHES) == Decimal(
            "144"
        )

    def test_millimeters_to_feet(self) -> None:
        assert to_feet(Decimal("3048"), LengthUnit.MILLIMETERS) == Decimal("10")

    def test_same_unit_is_untouched(self) -> None:
        value = Decimal("9.123456")
        assert convert_length(value, LengthUnit.FEET, LengthUnit.FEET) is value

    def test_lengths_match_across_units(self) -> None:
        assert lengths_match(Decimal("12"), LengthUnit.FEET, Decimal("144"), LengthUnit.INCHES)
        assert not lengths_match(Decimal("12"), LengthUnit.FEET, Decimal("16"), LengthUnit.FEET)

    def test_to_decimal_keeps_float_repr(self) -> None:
        assert to_decimal(9.5) == Decimal("9.5")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_to_decimal_rejects_non_finite(self) -> None:
        with pytest.raises(ValueError):
            to_decimal("NaN")
        with pytest.raises(ValueError):
            to_decimal("abc")


class TestDemandAndCatalog:
    def test_demand_requires_positive_length(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            DemandLine(material_id="m", required_length=Decimal("0"), source_item_ref="W1")

    def test_catalog_entry_in_other_unit(self) -> None:
        entry = StockCatalogEntry("m", Decimal("1"), LengthUnit.METERS)
        converted = entry.in_unit(LengthUnit.MILLIMETERS)
        assert converted.standard_length == Decimal("1000")
        assert converted.unit == LengthUnit.MILLIMETERS


class TestPipeAssignment:
    def test_scrap_must_balance(self) -> None:
        with pytest.raises(ValueError, match="equal the standard length"):
            PipeAssignment(
                standard_length=Decimal("12"),
                unit=LengthUnit.FEET,
                cuts_made=(CutMade(Decimal("9.5"), "W1"),),
                scrap_length=Decimal("1"),
            )

    def test_cuts_cannot_exceed_pipe(self) -> None:
        with pytest.raises(ValueError, match="exceed"):
            PipeAssignment(
                standard_length=Decimal("12"),
                unit=LengthUnit.FEET,
                cuts_made=(CutMade(Decimal("9.5"), "W1"), CutMade(Decimal("4.8"), "W1")),
                scrap_length=Decimal("0"),
            )

    def test_total_cut_length(self) -> None:
        pipe = PipeAssignment(
            standard_length=Decimal("12"),
            unit=LengthUnit.FEET,
            cuts_made=(CutMade(Decimal("4.8"), "W1"), CutMade(Decimal("4.8"), "W2")),
            scrap_length=Decimal("2.4"),
        )
        assert pipe.total_cut_length == Decimal("9.6")


class TestShortfall:
    def test_message_with_stock(self) -> None:
        shortfall = Shortfall(
            material_id="alu-1",
            material_name="Profile",
            standard_length=Decimal("12"),
            unit=LengthUnit.FEET,
            required=Decimal("3"),
            available=Decimal("1"),
        )
        assert shortfall.message == (
            "Insufficient stock for Profile of length 12 ft. Available: 1, Required: 3"
        )

    def test_message_without_entry(self) -> None:
        shortfall = Shortfall(
            material_id="alu-1",
            material_name="Profile",
            standard_length=Decimal("16"),
            unit=LengthUnit.FEET,
            required=Decimal("1"),
            available=None,
            gauge="18",
        )
        assert shortfall.message == "No stock entry found for Profile of length 16 ft (gauge 18)"


class TestCuttingPlanState:
    def _plan(self) -> CuttingPlan:
        return CuttingPlan(
            order_id="SO-1",
            material_plans=(),
            generated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    def test_commit_once(self) -> None:
        plan = self._plan()
        plan.mark_committed("alice")
        assert plan.status == PlanStatus.COMMITTED
        assert plan.committed_by == "alice"
        assert plan.committed_at is not None

        with pytest.raises(AlreadyCommitted):
            plan.mark_committed("bob")
        assert plan.committed_by == "alice"

    def test_failed_plan_is_not_committable(self) -> None:
        plan = self._plan()
        plan.status = PlanStatus.FAILED
        with pytest.raises(NotGenerated, match="Must be 'Generated'"):
            plan.ensure_committable()


class TestOrderNotes:
    def test_last_failure_reason(self) -> None:
        order = Order(order_id="SO-1")
        order.append_note("Customer wants white finish")
        order.append_note("Optimization failed: first reason")
        order.append_note("Optimization failed: second reason")
        assert order.last_failure_reason() == "second reason"

    def test_no_failure_reason(self) -> None:
        assert Order(order_id="SO-1", notes="hello").last_failure_reason() is None

    def test_label_prefers_display_id(self) -> None:
        assert Order(order_id="abc", display_id="#1001").label == "#1001"
        assert Order(order_id="abc").label == "abc"
