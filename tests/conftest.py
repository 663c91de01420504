"""Pytest configuration and shared fixtures for stock cutting tests."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from stockcut.application.factory import ServiceFactory, reset_factory
from stockcut.domain.entities import (
    Batch,
    Material,
    Order,
    OrderItem,
    RequiredMaterialCut,
    RequiredMeshPanel,
    RollBatch,
)
from stockcut.domain.value_objects import LengthUnit, MaterialCategory, StockCatalogEntry


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests that exercise the API or CLI end to end"
    )
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Builders
# =============================================================================


def make_profile(
    batches: list[Batch] | None = None,
    lengths: tuple[str, ...] = ("12", "16"),
    material_id: str = "alu-1",
    name: str = "Aluminium Profile 1x1",
) -> Material:
    """Create a profile material with standard lengths in feet."""
    return Material(
        material_id=material_id,
        name=name,
        standard_lengths=[
            StockCatalogEntry(material_id, Decimal(length), LengthUnit.FEET)
            for length in lengths
        ],
        gauge_weights={"18": Decimal("0.25")},
        batches=batches if batches is not None else [],
    )


def make_batch(
    batch_id: str,
    length: str,
    quantity: str,
    rate: str,
    purchased: datetime,
) -> Batch:
    return Batch(
        batch_id=batch_id,
        length=Decimal(length),
        unit=LengthUnit.FEET,
        original_quantity=Decimal(quantity),
        current_quantity=Decimal(quantity),
        rate_per_piece=Decimal(rate),
        purchase_date=purchased,
    )


def make_mesh(total_area: str = "200") -> Material:
    """Create a wire mesh material with 3, 4 and 5 ft roll widths."""
    return Material(
        material_id="mesh-1",
        name="Wire Mesh",
        category=MaterialCategory.WIRE_MESH,
        standard_lengths=[
            StockCatalogEntry("mesh-1", Decimal(w), LengthUnit.FEET) for w in ("3", "4", "5")
        ],
        roll_batches=[
            RollBatch(
                batch_id="R-4",
                width=Decimal("4"),
                unit=LengthUnit.FEET,
                current_rolls=Decimal(total_area) / Decimal("100"),
                area_per_roll=Decimal("100"),
                total_area=Decimal(total_area),
                rate_per_area=Decimal("2"),
                purchase_date=datetime(2024, 1, 1),
            )
        ],
    )


def make_pipe_order(
    order_id: str = "SO-1",
    cut_lengths: tuple[str, ...] = ("9.5", "9.5", "4.8"),
    material_id: str = "alu-1",
) -> Order:
    """Create an order with one item needing profile cuts of gauge 18."""
    return Order(
        order_id=order_id,
        display_id=f"#{order_id}",
        items=[
            OrderItem(
                item_ref="W1",
                material_cuts=[
                    RequiredMaterialCut(
                        material_id=material_id,
                        cut_lengths=tuple(Decimal(c) for c in cut_lengths),
                        gauge="18",
                    )
                ],
            )
        ],
    )


def make_mesh_order(order_id: str = "SO-2", width: str = "3.5", length: str = "10") -> Order:
    return Order(
        order_id=order_id,
        items=[
            OrderItem(
                item_ref="P1",
                mesh_panels=[
                    RequiredMeshPanel(
                        material_id="mesh-1", width=Decimal(width), length=Decimal(length)
                    )
                ],
            )
        ],
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def profile_batches() -> list[Batch]:
    """Two 12 ft batches (older one cheaper) and one 16 ft batch."""
    return [
        make_batch("B-NEW", "12", "5", "120", datetime(2024, 6, 1)),
        make_batch("B-OLD", "12", "2", "100", datetime(2024, 1, 1)),
        make_batch("B-16", "16", "3", "150", datetime(2024, 2, 1)),
    ]


@pytest.fixture
def profile(profile_batches: list[Batch]) -> Material:
    return make_profile(profile_batches)


@pytest.fixture
def mesh() -> Material:
    return make_mesh()


@pytest.fixture
def factory(profile: Material, mesh: Material) -> ServiceFactory:
    """Factory holding the profile and mesh materials and two orders.

    SO-1 needs 9.5, 9.5 and 4.8 ft cuts; SO-2 needs one 3.5 x 10 ft panel.
    """
    return ServiceFactory.from_domain(
        [profile, mesh], [make_pipe_order(), make_mesh_order()]
    )


@pytest.fixture(autouse=True)
def _reset_default_factory():
    yield
    reset_factory()
