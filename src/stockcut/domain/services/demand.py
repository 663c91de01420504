"""Flatten order requirements into per-material demand lists."""

from __future__ import annotations

from stockcut.domain.entities import Order
from stockcut.domain.value_objects import DemandLine, RollDemandLine

# Profile demand is keyed by material and gauge; stock of different
# gauges is not interchangeable.
DemandKey = tuple[str, str | None]


def collect_profile_demand(order: Order) -> dict[DemandKey, list[DemandLine]]:
    """Group every required profile cut of an order by material and gauge.

    Each cut becomes its own DemandLine carrying the item it came from, in
    the order items and cuts appear on the order.

    Args:
        order: Order whose items list their required cuts.

    Returns:
        Mapping of (material_id, gauge) to demand lines, in first-seen order.
    """
    demand: dict[DemandKey, list[DemandLine]] = {}
    for item in order.items:
        for requirement in item.material_cuts:
            key = (requirement.material_id, requirement.gauge)
            lines = demand.setdefault(key, [])
            for length in requirement.cut_lengths:
                lines.append(
                    DemandLine(
                        material_id=requirement.material_id,
                        required_length=length,
                        source_item_ref=item.item_ref,
                        gauge=requirement.gauge,
                    )
                )
    return demand


def collect_roll_demand(order: Order) -> dict[str, list[RollDemandLine]]:
    """Group every wire mesh panel of an order by material."""
    demand: dict[str, list[RollDemandLine]] = {}
    for item in order.items:
        for panel in item.mesh_panels:
            demand.setdefault(panel.material_id, []).append(
                RollDemandLine(
                    material_id=panel.material_id,
                    required_width=panel.width,
                    required_length=panel.length,
                    source_item_ref=item.item_ref,
                    quantity=panel.quantity,
                )
            )
    return demand
