"""Text and JSON formatters for cutting plans and commit results."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from stockcut.domain.entities import CuttingPlan, StockTransaction
from stockcut.domain.value_objects import MaterialPlan, RollAssignment, WidthSelection


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class CuttingPlanFormatter:
    """Formats a cutting plan as a readable cut sheet."""

    def format(self, plan: CuttingPlan) -> str:
        """Format every material plan followed by the procurement summary."""
        lines = [
            f"CUTTING PLAN {plan.plan_id}",
            f"Order: {plan.order_id}   Status: {plan.status.value}",
            "=" * 70,
        ]
        if not plan.material_plans:
            lines.append("No material plans.")
        for material_plan in plan.material_plans:
            lines.append("")
            lines.extend(self._format_material(material_plan))
        if plan.material_errors:
            lines.append("")
            lines.append("Materials skipped:")
            lines.extend(f"  - {error}" for error in plan.material_errors)
        return "\n".join(lines)

    def _format_material(self, plan: MaterialPlan) -> list[str]:
        unit = plan.usage_unit.value
        title = plan.material_name if not plan.gauge else f"{plan.material_name} ({plan.gauge})"
        lines = [title, "-" * 70]

        for index, pipe in enumerate(plan.pipes_used, start=1):
            cuts = ", ".join(
                f"{cut.required_length} [{cut.source_item_ref}]" for cut in pipe.cuts_made
            )
            lines.append(
                f"Pipe {index:<3} {pipe.standard_length}{unit:<6} "
                f"cuts: {cuts}  scrap: {pipe.scrap_length}{unit}"
            )

        for roll in plan.rolls_used:
            lines.append(
                f"Panel {roll.required_width}x{roll.required_length}{unit} "
                f"[{roll.source_item_ref}] -> width {roll.selected_width}{unit} "
                f"({roll.orientation.value}), waste {roll.wastage_area} {roll.area_unit.value}"
            )

        if plan.total_pipes_per_length:
            lines.append(f"{'Length':<12} {'Qty':<6} {'Scrap':<12}")
            for summary in plan.total_pipes_per_length:
                lines.append(
                    f"{str(summary.standard_length) + unit:<12} {summary.quantity:<6} "
                    f"{str(summary.total_scrap) + unit:<12}"
                )
            lines.append(f"Total weight: {plan.total_weight}")
        return lines


class CommitFormatter:
    """Formats the stock transactions written by a commit."""

    def format(self, transactions: list[StockTransaction]) -> str:
        if not transactions:
            return "No stock transactions written."
        lines = [
            "STOCK TRANSACTIONS",
            "=" * 70,
            f"{'Batch':<16} {'Qty':<10} {'Unit':<6} {'Rate':<10} {'Value':<10}",
            "-" * 70,
        ]
        for txn in transactions:
            lines.append(
                f"{txn.batch_id or '-':<16} {str(txn.quantity_change):<10} "
                f"{txn.quantity_unit:<6} {str(txn.unit_rate_at_transaction):<10} "
                f"{str(txn.total_value_change):<10}"
            )
        return "\n".join(lines)


def plan_to_json(plan: CuttingPlan, indent: int = 2) -> str:
    """Serialize a cutting plan to JSON, with Decimals as strings."""
    return json.dumps(asdict(plan), default=_json_default, indent=indent)


def commit_to_json(
    plan: CuttingPlan, transactions: list[StockTransaction], indent: int = 2
) -> str:
    """Serialize a committed plan with the stock transactions it wrote."""
    return json.dumps(
        {
            "cutting_plan": asdict(plan),
            "transactions": [asdict(t) for t in transactions],
        },
        default=_json_default,
        indent=indent,
    )


def width_selection_to_text(selection: WidthSelection) -> str:
    unit = selection.unit.value
    return "\n".join(
        [
            f"Required width: {selection.required_width}{unit}",
            f"Selected width: {selection.selected_width}{unit}",
            f"Wastage width:  {selection.wastage_width}{unit}",
            f"Waste:          {selection.waste_percentage}%",
            f"Efficiency:     {selection.efficiency}%",
        ]
    )


def roll_assignment_to_text(roll: RollAssignment) -> str:
    unit = roll.unit.value
    area = roll.area_unit.value
    return "\n".join(
        [
            f"Panel:          {roll.required_width} x {roll.required_length}{unit}",
            f"Orientation:    {roll.orientation.value}",
            f"Selected width: {roll.selected_width}{unit}",
            f"Consumed area:  {roll.consumed_area} {area}",
            f"Wastage area:   {roll.wastage_area} {area}",
            f"Waste:          {roll.waste_percentage}%",
            f"Efficiency:     {roll.efficiency}%",
        ]
    )
