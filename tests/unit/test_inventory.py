"""Tests for batch and legacy inventory deduction."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from conftest import make_batch, make_mesh, make_profile
from stockcut.domain.entities import LegacyStockEntry, Material, RollBatch
from stockcut.domain.exceptions import InsufficientInventory, MaterialNotFound
from stockcut.domain.value_objects import ConsumptionOrder, InventoryTracking, LengthUnit
from stockcut.infrastructure.inventory import (
    PIECES,
    BatchInventory,
    InMemoryInventoryStore,
    LegacyStockInventory,
)

FT = LengthUnit.FEET


@pytest.fixture
def store(profile: Material, mesh: Material) -> InMemoryInventoryStore:
    return InMemoryInventoryStore([profile, mesh])


def _quantities(material: Material) -> dict[str, Decimal]:
    return {b.batch_id: b.current_quantity for b in material.batches}


class TestBatchInventory:
    def test_open_picks_representation(self, store: InMemoryInventoryStore) -> None:
        assert isinstance(store.open("alu-1"), BatchInventory)

    def test_available_pieces(self, store: InMemoryInventoryStore) -> None:
        inventory = store.open("alu-1")

        assert inventory.available_pieces(Decimal("12"), FT) == Decimal("7")
        assert inventory.available_pieces(Decimal("144"), LengthUnit.INCHES) == Decimal("7")
        assert inventory.available_pieces(Decimal("20"), FT) is None

    def test_fifo_takes_oldest_batch(
        self, store: InMemoryInventoryStore, profile: Material
    ) -> None:
        inventory = store.open("alu-1")

        deduction = inventory.deduct_piece(Decimal("12"), FT)

        assert deduction.batch_id == "B-OLD"
        assert deduction.quantity == Decimal("1")
        assert deduction.quantity_unit == PIECES
        assert deduction.value == Decimal("100")
        assert _quantities(profile)["B-OLD"] == Decimal("1")

    def test_fifo_moves_to_next_batch_when_exhausted(
        self, store: InMemoryInventoryStore, profile: Material
    ) -> None:
        inventory = store.open("alu-1")

        batches = [inventory.deduct_piece(Decimal("12"), FT).batch_id for _ in range(3)]

        assert batches == ["B-OLD", "B-OLD", "B-NEW"]
        old = next(b for b in profile.batches if b.batch_id == "B-OLD")
        assert old.current_quantity == Decimal("0")
        assert old.is_completed

    def test_lifo_takes_newest_batch(self, store: InMemoryInventoryStore) -> None:
        deduction = store.open("alu-1").deduct_piece(
            Decimal("12"), FT, order=ConsumptionOrder.LIFO
        )
        assert deduction.batch_id == "B-NEW"
        assert deduction.unit_rate == Decimal("120")

    def test_inactive_batch_skipped(self, profile: Material) -> None:
        profile.batches[1].is_active = False  # B-OLD
        store = InMemoryInventoryStore([profile])

        assert store.open("alu-1").deduct_piece(Decimal("12"), FT).batch_id == "B-NEW"

    def test_exhausted_stock(self) -> None:
        profile = make_profile([make_batch("B1", "12", "1", "100", datetime(2024, 1, 1))])
        inventory = InMemoryInventoryStore([profile]).open("alu-1")
        inventory.deduct_piece(Decimal("12"), FT)

        with pytest.raises(InsufficientInventory) as exc_info:
            inventory.deduct_piece(Decimal("12"), FT)
        assert exc_info.value.shortfalls[0].available == Decimal("0")

    def test_gauge_batches_before_gaugeless(self) -> None:
        shared = make_batch("B-ANY", "12", "1", "100", datetime(2024, 1, 1))
        gauged = make_batch("B-18", "12", "1", "110", datetime(2024, 5, 1))
        gauged.gauge = "18"
        inventory = InMemoryInventoryStore([make_profile([shared, gauged])]).open("alu-1")

        assert inventory.pieces_by_gauge(Decimal("12"), FT) == {
            None: Decimal("1"),
            "18": Decimal("1"),
        }
        assert inventory.deduct_piece(Decimal("12"), FT, "18").batch_id == "B-18"
        assert inventory.deduct_piece(Decimal("12"), FT, "18").batch_id == "B-ANY"

    def test_restore_reopens_batch(
        self, store: InMemoryInventoryStore, profile: Material
    ) -> None:
        inventory = store.open("alu-1")
        deductions = [inventory.deduct_piece(Decimal("12"), FT) for _ in range(2)]

        for deduction in deductions:
            inventory.restore(deduction)

        old = next(b for b in profile.batches if b.batch_id == "B-OLD")
        assert old.current_quantity == Decimal("2")
        assert not old.is_completed


class TestRollInventory:
    def test_deduct_area(self, store: InMemoryInventoryStore, mesh: Material) -> None:
        deductions = store.open("mesh-1").deduct_area(Decimal("4"), FT, Decimal("40"))

        assert len(deductions) == 1
        assert deductions[0].quantity_unit == "sqft"
        assert deductions[0].value == Decimal("80")
        roll = mesh.roll_batches[0]
        assert roll.total_area == Decimal("160")
        assert roll.current_rolls == Decimal("1.6")

    def test_area_spread_across_batches(self) -> None:
        mesh = make_mesh(total_area="30")
        mesh.roll_batches.append(
            RollBatch(
                batch_id="R-4b",
                width=Decimal("4"),
                unit=FT,
                current_rolls=Decimal("1"),
                area_per_roll=Decimal("100"),
                total_area=Decimal("100"),
                rate_per_area=Decimal("3"),
                purchase_date=datetime(2024, 3, 1),
            )
        )
        deductions = InMemoryInventoryStore([mesh]).open("mesh-1").deduct_area(
            Decimal("4"), FT, Decimal("40")
        )

        assert [(d.batch_id, d.quantity) for d in deductions] == [
            ("R-4", Decimal("30")),
            ("R-4b", Decimal("10")),
        ]
        assert mesh.roll_batches[0].is_completed

    def test_insufficient_area(self, store: InMemoryInventoryStore, mesh: Material) -> None:
        with pytest.raises(InsufficientInventory):
            store.open("mesh-1").deduct_area(Decimal("4"), FT, Decimal("500"))
        assert mesh.roll_batches[0].total_area == Decimal("200")

    def test_unstocked_width(self, store: InMemoryInventoryStore) -> None:
        assert store.open("mesh-1").available_area(Decimal("5"), FT) is None


class TestLegacyStockInventory:
    @pytest.fixture
    def legacy(self) -> Material:
        material = make_profile()
        material.tracking = InventoryTracking.LEGACY
        material.stock_by_length = [
            LegacyStockEntry(
                length=Decimal("12"), unit=FT, quantity=Decimal("2"), unit_rate=Decimal("90")
            )
        ]
        return material

    def test_deduct_and_restore(self, legacy: Material) -> None:
        inventory = InMemoryInventoryStore([legacy]).open("alu-1")
        assert isinstance(inventory, LegacyStockInventory)

        deduction = inventory.deduct_piece(Decimal("12"), FT, order=ConsumptionOrder.LIFO)
        assert deduction.batch_id is None
        assert deduction.unit_rate == Decimal("90")
        assert inventory.available_pieces(Decimal("12"), FT) == Decimal("1")

        inventory.restore(deduction)
        assert legacy.stock_by_length[0].quantity == Decimal("2")

    def test_missing_length(self, legacy: Material) -> None:
        inventory = InMemoryInventoryStore([legacy]).open("alu-1")

        assert inventory.available_pieces(Decimal("16"), FT) is None
        with pytest.raises(InsufficientInventory) as exc_info:
            inventory.deduct_piece(Decimal("16"), FT)
        assert exc_info.value.shortfalls[0].available is None

    def test_roll_area_not_tracked(self, legacy: Material) -> None:
        inventory = InMemoryInventoryStore([legacy]).open("alu-1")
        assert inventory.available_area(Decimal("4"), FT) is None


class TestInventoryStore:
    def test_unknown_material(self, store: InMemoryInventoryStore) -> None:
        with pytest.raises(MaterialNotFound):
            store.open("nope")

    def test_batch_availability(self, store: InMemoryInventoryStore) -> None:
        availability = store.get_batch_availability("alu-1", Decimal("16"), FT)
        assert availability.available_quantity == Decimal("3")

        missing = store.get_batch_availability("alu-1", Decimal("20"), FT)
        assert missing.available_quantity == Decimal("0")

    def test_stock_catalog_and_weight(self, store: InMemoryInventoryStore) -> None:
        catalog = store.get_stock_catalog("alu-1", "18")
        assert sorted(e.standard_length for e in catalog) == [Decimal("12"), Decimal("16")]
        assert store.weight_per_foot("alu-1", "18") == Decimal("0.25")
        assert store.weight_per_foot("alu-1", None) is None
