"""Tests for the first-fit decreasing pipe packer.

Tests cover:
- Shortest fitting standard length is opened for each new pipe
- Every demanded cut is placed exactly once
- Scrap conservation per pipe
- Kerf between adjacent cuts
- Unit conversion of the stock catalog
- NoFeasibleStock for oversize cuts and empty catalogs
"""

from __future__ import annotations

from collections import Counter
from decimal import Decimal

import pytest

from stockcut.domain.exceptions import NoFeasibleStock
from stockcut.domain.value_objects import DemandLine, LengthUnit, StockCatalogEntry
from stockcut.infrastructure.pipe_packing import CuttingOptimizer, PipePackingConfig


# =============================================================================
# Fixtures
# =============================================================================


def _demand(*lengths: str, item: str = "W1", gauge: str | None = None) -> list[DemandLine]:
    return [
        DemandLine(
            material_id="alu-1",
            required_length=Decimal(length),
            source_item_ref=item,
            gauge=gauge,
        )
        for length in lengths
    ]


def _catalog(*lengths: str, unit: LengthUnit = LengthUnit.FEET) -> list[StockCatalogEntry]:
    return [StockCatalogEntry("alu-1", Decimal(length), unit) for length in lengths]


@pytest.fixture
def optimizer() -> CuttingOptimizer:
    return CuttingOptimizer()


# =============================================================================
# Tests
# =============================================================================


class TestPipePackingConfig:
    def test_defaults(self) -> None:
        config = PipePackingConfig()
        assert config.tolerance == Decimal("0.01")
        assert config.kerf_inches == Decimal("0")

    def test_rejects_large_kerf(self) -> None:
        with pytest.raises(ValueError, match="Kerf"):
            PipePackingConfig(kerf_inches=Decimal("1"))


class TestCuttingOptimizer:
    def test_worked_example(self, optimizer: CuttingOptimizer) -> None:
        """9.5, 9.5 and 4.8 ft on 12/16 ft stock use three 12 ft pipes."""
        plan = optimizer.optimize(
            _demand("9.5", "9.5", "4.8"), _catalog("12", "16"), material_name="Profile"
        )

        assert plan.pipe_count == 3
        assert [p.standard_length for p in plan.pipes_used] == [Decimal("12")] * 3
        assert [p.scrap_length for p in plan.pipes_used] == [
            Decimal("2.5"),
            Decimal("2.5"),
            Decimal("7.2"),
        ]
        assert plan.total_scrap == Decimal("12.2")
        assert plan.material_name == "Profile"

    def test_first_fit_reuses_open_pipes(self, optimizer: CuttingOptimizer) -> None:
        plan = optimizer.optimize(_demand("6", "5", "4", "3", "2"), _catalog("10"))

        assert plan.pipe_count == 2
        assert [[c.required_length for c in p.cuts_made] for p in plan.pipes_used] == [
            [Decimal("6"), Decimal("4")],
            [Decimal("5"), Decimal("3"), Decimal("2")],
        ]

    def test_opens_shortest_fitting_length(self, optimizer: CuttingOptimizer) -> None:
        plan = optimizer.optimize(_demand("13", "5"), _catalog("12", "16", "20"))

        assert [p.standard_length for p in plan.pipes_used] == [Decimal("16"), Decimal("12")]
        assert [p.scrap_length for p in plan.pipes_used] == [Decimal("3"), Decimal("7")]

    def test_every_cut_placed_once(self, optimizer: CuttingOptimizer) -> None:
        lengths = ["3.2", "7.75", "1.1", "5", "5", "11.9", "2.25", "6.6", "4.4"]
        plan = optimizer.optimize(_demand(*lengths), _catalog("12", "16"))

        placed = Counter(c.required_length for p in plan.pipes_used for c in p.cuts_made)
        assert placed == Counter(Decimal(length) for length in lengths)

    def test_scrap_conservation(self, optimizer: CuttingOptimizer) -> None:
        plan = optimizer.optimize(
            _demand("3.2", "7.75", "1.1", "5", "5", "11.9"), _catalog("12", "16")
        )

        for pipe in plan.pipes_used:
            assert pipe.total_cut_length + pipe.scrap_length == pipe.standard_length
            assert pipe.scrap_length >= 0

    def test_deterministic(self, optimizer: CuttingOptimizer) -> None:
        demand = _demand("3.2", "7.75", "1.1", "5", "5", "11.9")
        catalog = _catalog("12", "16")
        assert optimizer.optimize(demand, catalog) == optimizer.optimize(demand, catalog)

    def test_source_item_preserved(self, optimizer: CuttingOptimizer) -> None:
        demand = _demand("4", item="W1") + _demand("5", item="W2")
        plan = optimizer.optimize(demand, _catalog("12"))

        refs = [(c.required_length, c.source_item_ref) for c in plan.pipes_used[0].cuts_made]
        assert refs == [(Decimal("5"), "W2"), (Decimal("4"), "W1")]

    def test_quantity_expands(self, optimizer: CuttingOptimizer) -> None:
        demand = [
            DemandLine(
                material_id="alu-1",
                required_length=Decimal("4"),
                source_item_ref="W1",
                quantity=3,
            )
        ]
        plan = optimizer.optimize(demand, _catalog("12"))

        assert plan.pipe_count == 1
        assert len(plan.pipes_used[0].cuts_made) == 3
        assert plan.pipes_used[0].scrap_length == Decimal("0")

    def test_tolerance_allows_near_fit(self, optimizer: CuttingOptimizer) -> None:
        plan = optimizer.optimize(_demand("12.005"), _catalog("12"))
        assert plan.pipes_used[0].scrap_length == Decimal("0")

    def test_kerf_between_cuts(self) -> None:
        demand = _demand("5", "5")
        catalog = _catalog("10")

        without = CuttingOptimizer().optimize(demand, catalog)
        with_kerf = CuttingOptimizer(PipePackingConfig(kerf_inches=Decimal("0.25"))).optimize(
            demand, catalog
        )

        assert without.pipe_count == 1
        assert with_kerf.pipe_count == 2

    def test_kerf_counts_as_scrap(self) -> None:
        optimizer = CuttingOptimizer(PipePackingConfig(kerf_inches=Decimal("0.125")))
        plan = optimizer.optimize(_demand("4", "4"), _catalog("10"))

        assert plan.pipe_count == 1
        assert plan.pipes_used[0].scrap_length == Decimal("2")

    def test_kerf_in_inches_on_feet_catalog(self) -> None:
        """Half an inch is 0.0417 ft, so 6 + 5.99 no longer fits on 12 ft."""
        optimizer = CuttingOptimizer(PipePackingConfig(kerf_inches=Decimal("0.5")))

        assert optimizer.optimize(_demand("6", "5.99"), _catalog("12")).pipe_count == 2
        assert optimizer.optimize(_demand("6", "5.95"), _catalog("12")).pipe_count == 1

    def test_kerf_in_inches_on_mm_catalog(self) -> None:
        """0.125 in is 3.175 mm between cuts."""
        optimizer = CuttingOptimizer(PipePackingConfig(kerf_inches=Decimal("0.125")))
        catalog = _catalog("3000", unit=LengthUnit.MILLIMETERS)

        tight = optimizer.optimize(
            _demand("1500", "1498"), catalog, LengthUnit.MILLIMETERS
        )
        loose = optimizer.optimize(
            _demand("1500", "1490"), catalog, LengthUnit.MILLIMETERS
        )

        assert tight.pipe_count == 2
        assert loose.pipe_count == 1
        assert loose.pipes_used[0].scrap_length == Decimal("10")

    def test_catalog_converted_to_usage_unit(self, optimizer: CuttingOptimizer) -> None:
        plan = optimizer.optimize(
            _demand("100", "40"), _catalog("144", unit=LengthUnit.INCHES), LengthUnit.INCHES
        )
        assert plan.usage_unit == LengthUnit.INCHES
        assert plan.pipe_count == 1
        assert plan.pipes_used[0].scrap_length == Decimal("4")

    def test_gauge_carried_on_plan(self, optimizer: CuttingOptimizer) -> None:
        plan = optimizer.optimize(_demand("4", gauge="18"), _catalog("12"))
        assert plan.gauge == "18"

    def test_cut_longer_than_stock(self, optimizer: CuttingOptimizer) -> None:
        with pytest.raises(NoFeasibleStock, match="greater than the largest") as exc_info:
            optimizer.optimize(_demand("4", "20"), _catalog("12", "16"))
        assert exc_info.value.material_id == "alu-1"

    def test_no_standard_lengths(self, optimizer: CuttingOptimizer) -> None:
        with pytest.raises(NoFeasibleStock, match="No standard lengths"):
            optimizer.optimize(_demand("4"), [])

    def test_mixed_materials_rejected(self, optimizer: CuttingOptimizer) -> None:
        demand = _demand("4") + [
            DemandLine(material_id="other", required_length=Decimal("4"), source_item_ref="W1")
        ]
        with pytest.raises(ValueError, match="share one material"):
            optimizer.optimize(demand, _catalog("12"))

    def test_empty_demand_rejected(self, optimizer: CuttingOptimizer) -> None:
        with pytest.raises(ValueError):
            optimizer.optimize([], _catalog("12"))
