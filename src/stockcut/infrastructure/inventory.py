"""In-memory inventory store with batch-level and legacy stock tracking.

Materials either track stock as purchase batches (each with its own
remaining quantity and cost) or as legacy stock-by-length rows. The store
chooses the matching MaterialInventory implementation once, when a
material is opened, so callers never branch on the representation.

All reads and writes of quantities happen under the store lock, which
turns every deduction into a compare-and-decrement: a deduction that
finds the stock already exhausted by a concurrent caller is rejected.
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Iterable

from stockcut.domain.entities import Batch, LegacyStockEntry, Material, RollBatch
from stockcut.domain.exceptions import InsufficientInventory, MaterialNotFound
from stockcut.domain.value_objects import (
    LENGTH_TOLERANCE,
    BatchAvailability,
    ConsumptionOrder,
    Deduction,
    InventoryTracking,
    LengthUnit,
    Shortfall,
    StockCatalogEntry,
    lengths_match,
)

logger = logging.getLogger(__name__)

PIECES = "pcs"
_ONE = Decimal("1")
_ZERO = Decimal("0")
# Remaining roll area at or below this is treated as used up.
_AREA_EPSILON = Decimal("0.001")


def _gauge_matches(stock_gauge: str | None, wanted: str | None) -> bool:
    return wanted is None or stock_gauge is None or stock_gauge == wanted


def _shared_last(stock_gauge: str | None, wanted: str | None) -> bool:
    # Stock of the wanted gauge goes before gauge-less stock other gauges may need.
    return wanted is not None and stock_gauge is None


class BatchInventory:
    """MaterialInventory over purchase batches.

    Pipes are taken one at a time from a single batch chosen by purchase
    date (oldest first for FIFO, newest first for LIFO). Batches of the
    requested gauge are used before gauge-less ones. Roll area may be drawn
    from several batches of the same width.
    """

    def __init__(
        self,
        material: Material,
        lock: threading.RLock,
        tolerance: Decimal = LENGTH_TOLERANCE,
    ) -> None:
        self.material = material
        self._lock = lock
        self._tolerance = tolerance

    @property
    def material_id(self) -> str:
        return self.material.material_id

    def _batches_for(
        self, length: Decimal, unit: LengthUnit, gauge: str | None
    ) -> list[Batch]:
        return [
            batch
            for batch in self.material.batches
            if batch.is_active
            and _gauge_matches(batch.gauge, gauge)
            and lengths_match(length, unit, batch.length, batch.unit, self._tolerance)
        ]

    def _rolls_for(self, width: Decimal, unit: LengthUnit) -> list[RollBatch]:
        return [
            batch
            for batch in self.material.roll_batches
            if batch.is_active
            and lengths_match(width, unit, batch.width, batch.unit, self._tolerance)
        ]

    def available_pieces(
        self, length: Decimal, unit: LengthUnit, gauge: str | None = None
    ) -> Decimal | None:
        """Pipes on hand at a standard length, or None if none was ever stocked."""
        with self._lock:
            batches = self._batches_for(length, unit, gauge)
            if not batches:
                return None
            return sum(
                (b.current_quantity for b in batches if b.is_available), _ZERO
            )

    def pieces_by_gauge(self, length: Decimal, unit: LengthUnit) -> dict[str | None, Decimal]:
        """Pipes on hand at a standard length, keyed by batch gauge."""
        pieces: dict[str | None, Decimal] = {}
        with self._lock:
            for batch in self._batches_for(length, unit, None):
                if batch.is_available:
                    pieces[batch.gauge] = pieces.get(batch.gauge, _ZERO) + batch.current_quantity
        return pieces

    def deduct_piece(
        self,
        length: Decimal,
        unit: LengthUnit,
        gauge: str | None = None,
        order: ConsumptionOrder = ConsumptionOrder.FIFO,
    ) -> Deduction:
        """Take one pipe from the first eligible batch.

        Raises:
            InsufficientInventory: If no batch holds a whole pipe at the
                moment of deduction.
        """
        with self._lock:
            candidates = sorted(
                (b for b in self._batches_for(length, unit, gauge) if b.is_available),
                key=lambda b: b.purchase_date,
                reverse=order == ConsumptionOrder.LIFO,
            )
            candidates.sort(key=lambda b: _shared_last(b.gauge, gauge))
            batch = next((b for b in candidates if b.current_quantity >= _ONE), None)
            if batch is None:
                available = sum((b.current_quantity for b in candidates), _ZERO)
                raise InsufficientInventory(
                    [
                        Shortfall(
                            material_id=self.material_id,
                            material_name=self.material.name,
                            standard_length=length,
                            unit=unit,
                            required=_ONE,
                            available=available,
                            gauge=gauge,
                        )
                    ]
                )

            batch.current_quantity -= _ONE
            if batch.current_quantity <= _ZERO:
                batch.is_completed = True
            logger.debug(
                "Took 1 pipe of %s %s from batch %s (%s left)",
                length,
                unit.value,
                batch.batch_id,
                batch.current_quantity,
            )
            return Deduction(
                material_id=self.material_id,
                batch_id=batch.batch_id,
                quantity=_ONE,
                quantity_unit=PIECES,
                unit_rate=batch.rate_per_piece,
                length=batch.length,
                unit=batch.unit,
                gauge=batch.gauge,
            )

    def available_area(self, width: Decimal, unit: LengthUnit) -> Decimal | None:
        """Roll area on hand at a width, or None if the width was never stocked."""
        with self._lock:
            rolls = self._rolls_for(width, unit)
            if not rolls:
                return None
            return sum((r.total_area for r in rolls if r.is_available), _ZERO)

    def deduct_area(
        self,
        width: Decimal,
        unit: LengthUnit,
        area: Decimal,
        order: ConsumptionOrder = ConsumptionOrder.FIFO,
    ) -> list[Deduction]:
        """Consume roll area at one width, spreading across batches.

        Raises:
            InsufficientInventory: If the batches at this width hold less
                area than requested.
        """
        with self._lock:
            rolls = sorted(
                (r for r in self._rolls_for(width, unit) if r.is_available),
                key=lambda r: r.purchase_date,
                reverse=order == ConsumptionOrder.LIFO,
            )
            available = sum((r.total_area for r in rolls), _ZERO)
            if available < area:
                raise InsufficientInventory(
                    [
                        Shortfall(
                            material_id=self.material_id,
                            material_name=self.material.name,
                            standard_length=width,
                            unit=unit,
                            required=area,
                            available=available,
                        )
                    ]
                )

            deductions: list[Deduction] = []
            remaining = area
            for roll in rolls:
                if remaining <= _ZERO:
                    break
                taken = min(remaining, roll.total_area)
                roll.total_area -= taken
                roll.current_rolls = max(
                    roll.current_rolls - taken / roll.area_per_roll, _ZERO
                )
                if roll.total_area <= _AREA_EPSILON:
                    roll.is_completed = True
                remaining -= taken
                deductions.append(
                    Deduction(
                        material_id=self.material_id,
                        batch_id=roll.batch_id,
                        quantity=taken,
                        quantity_unit=roll.unit.area_unit.value,
                        unit_rate=roll.rate_per_area,
                        length=roll.width,
                        unit=roll.unit,
                    )
                )
            return deductions

    def restore(self, deduction: Deduction) -> None:
        """Put back stock removed by an earlier deduction."""
        with self._lock:
            if deduction.quantity_unit == PIECES:
                batch = next(
                    b for b in self.material.batches if b.batch_id == deduction.batch_id
                )
                batch.current_quantity += deduction.quantity
                batch.is_completed = False
            else:
                roll = next(
                    r
                    for r in self.material.roll_batches
                    if r.batch_id == deduction.batch_id
                )
                roll.total_area += deduction.quantity
                roll.current_rolls += deduction.quantity / roll.area_per_roll
                roll.is_completed = False


class LegacyStockInventory:
    """MaterialInventory over stock-by-length rows without batches.

    Rows carry no purchase date, so the consumption order has no effect.
    Roll area is not tracked in this representation.
    """

    def __init__(
        self,
        material: Material,
        lock: threading.RLock,
        tolerance: Decimal = LENGTH_TOLERANCE,
    ) -> None:
        self.material = material
        self._lock = lock
        self._tolerance = tolerance

    @property
    def material_id(self) -> str:
        return self.material.material_id

    def _rows_for(
        self, length: Decimal, unit: LengthUnit, gauge: str | None
    ) -> list[LegacyStockEntry]:
        return [
            row
            for row in self.material.stock_by_length
            if _gauge_matches(row.gauge, gauge)
            and lengths_match(length, unit, row.length, row.unit, self._tolerance)
        ]

    def available_pieces(
        self, length: Decimal, unit: LengthUnit, gauge: str | None = None
    ) -> Decimal | None:
        with self._lock:
            rows = self._rows_for(length, unit, gauge)
            if not rows:
                return None
            return sum((max(row.quantity, _ZERO) for row in rows), _ZERO)

    def pieces_by_gauge(self, length: Decimal, unit: LengthUnit) -> dict[str | None, Decimal]:
        pieces: dict[str | None, Decimal] = {}
        with self._lock:
            for row in self._rows_for(length, unit, None):
                pieces[row.gauge] = pieces.get(row.gauge, _ZERO) + max(row.quantity, _ZERO)
        return pieces

    def deduct_piece(
        self,
        length: Decimal,
        unit: LengthUnit,
        gauge: str | None = None,
        order: ConsumptionOrder = ConsumptionOrder.FIFO,
    ) -> Deduction:
        with self._lock:
            rows = sorted(
                self._rows_for(length, unit, gauge), key=lambda r: _shared_last(r.gauge, gauge)
            )
            row = next((r for r in rows if r.quantity >= _ONE), None)
            if row is None:
                raise InsufficientInventory(
                    [
                        Shortfall(
                            material_id=self.material_id,
                            material_name=self.material.name,
                            standard_length=length,
                            unit=unit,
                            required=_ONE,
                            available=sum((r.quantity for r in rows), _ZERO) if rows else None,
                            gauge=gauge,
                        )
                    ]
                )
            row.quantity -= _ONE
            return Deduction(
                material_id=self.material_id,
                batch_id=None,
                quantity=_ONE,
                quantity_unit=PIECES,
                unit_rate=row.unit_rate,
                length=row.length,
                unit=row.unit,
                gauge=row.gauge,
            )

    def available_area(self, width: Decimal, unit: LengthUnit) -> Decimal | None:
        return None

    def deduct_area(
        self,
        width: Decimal,
        unit: LengthUnit,
        area: Decimal,
        order: ConsumptionOrder = ConsumptionOrder.FIFO,
    ) -> list[Deduction]:
        raise InsufficientInventory(
            [
                Shortfall(
                    material_id=self.material_id,
                    material_name=self.material.name,
                    standard_length=width,
                    unit=unit,
                    required=area,
                    available=None,
                )
            ]
        )

    def restore(self, deduction: Deduction) -> None:
        with self._lock:
            row = self._rows_for(deduction.length, deduction.unit, deduction.gauge)[0]
            row.quantity += deduction.quantity


class InMemoryInventoryStore:
    """Materials and their stock, held in process memory.

    Attributes:
        tolerance: Tolerance used when matching stock lengths.
    """

    def __init__(
        self,
        materials: Iterable[Material] = (),
        tolerance: Decimal = LENGTH_TOLERANCE,
    ) -> None:
        self.tolerance = tolerance
        self._materials: dict[str, Material] = {m.material_id: m for m in materials}
        self._lock = threading.RLock()

    def add_material(self, material: Material) -> None:
        with self._lock:
            self._materials[material.material_id] = material

    def get_material(self, material_id: str) -> Material:
        """Look up a material.

        Raises:
            MaterialNotFound: If the material is unknown.
        """
        with self._lock:
            material = self._materials.get(material_id)
        if material is None:
            raise MaterialNotFound(material_id)
        return material

    def list_materials(self) -> list[Material]:
        with self._lock:
            return list(self._materials.values())

    def get_stock_catalog(
        self, material_id: str, gauge: str | None = None
    ) -> list[StockCatalogEntry]:
        """Standard lengths purchasable for a material and gauge."""
        return self.get_material(material_id).catalog(gauge)

    def get_batch_availability(
        self,
        material_id: str,
        standard_length: Decimal,
        unit: LengthUnit,
        gauge: str | None = None,
    ) -> BatchAvailability:
        """Current pieces on hand at one standard length."""
        available = self.open(material_id).available_pieces(standard_length, unit, gauge)
        return BatchAvailability(
            material_id=material_id,
            standard_length=standard_length,
            unit=unit,
            available_quantity=available if available is not None else _ZERO,
            gauge=gauge,
        )

    def weight_per_foot(self, material_id: str, gauge: str | None) -> Decimal | None:
        """Reference weight per foot for a material gauge."""
        return self.get_material(material_id).weight_per_foot(gauge)

    def open(self, material_id: str) -> BatchInventory | LegacyStockInventory:
        """Open a material's inventory in the representation it is tracked in.

        Raises:
            MaterialNotFound: If the material is unknown.
        """
        material = self.get_material(material_id)
        if material.tracking == InventoryTracking.LEGACY:
            return LegacyStockInventory(material, self._lock, self.tolerance)
        return BatchInventory(material, self._lock, self.tolerance)
