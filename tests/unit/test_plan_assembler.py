"""Tests for plan assembly, procurement summaries and weights."""

from __future__ import annotations

from decimal import Decimal

from stockcut.domain.entities import Order, OrderItem, RequiredMaterialCut, RequiredMeshPanel
from stockcut.domain.services import (
    PlanAssembler,
    collect_profile_demand,
    collect_roll_demand,
    pipe_weight,
    summarize_pipes,
)
from stockcut.domain.value_objects import (
    CutMade,
    LengthUnit,
    MaterialPlan,
    PipeAssignment,
    PlanStatus,
)


def _pipe(length: str, *cuts: str) -> PipeAssignment:
    used = sum((Decimal(c) for c in cuts), Decimal("0"))
    return PipeAssignment(
        standard_length=Decimal(length),
        unit=LengthUnit.FEET,
        cuts_made=tuple(CutMade(Decimal(c), "W1") for c in cuts),
        scrap_length=Decimal(length) - used,
    )


def _material_plan(*pipes: PipeAssignment, gauge: str | None = "18") -> MaterialPlan:
    return MaterialPlan(
        material_id="alu-1",
        material_name="Profile",
        gauge=gauge,
        usage_unit=LengthUnit.FEET,
        pipes_used=pipes,
    )


class TestSummaries:
    def test_summarize_groups_by_length(self) -> None:
        summaries = summarize_pipes(
            [_pipe("12", "9.5"), _pipe("16", "15"), _pipe("12", "4.8")]
        )

        assert [(s.standard_length, s.quantity, s.total_scrap) for s in summaries] == [
            (Decimal("16"), 1, Decimal("1")),
            (Decimal("12"), 2, Decimal("9.7")),
        ]

    def test_pipe_weight(self) -> None:
        assert pipe_weight(Decimal("12"), LengthUnit.FEET, Decimal("0.25")) == Decimal("3.000")
        assert pipe_weight(Decimal("144"), LengthUnit.INCHES, Decimal("0.25")) == Decimal(
            "3.000"
        )


class TestPlanAssembler:
    def test_weights_from_lookup(self) -> None:
        lookups: list[tuple[str, str | None]] = []

        def lookup(material_id: str, gauge: str | None) -> Decimal | None:
            lookups.append((material_id, gauge))
            return Decimal("0.25")

        plan = PlanAssembler(lookup).assemble(
            [_material_plan(_pipe("12", "9.5"), _pipe("16", "15"))],
            order_id="SO-1",
            generated_by="alice",
        )

        material_plan = plan.material_plans[0]
        assert lookups == [("alu-1", "18")]
        assert [p.calculated_weight for p in material_plan.pipes_used] == [
            Decimal("3.000"),
            Decimal("4.000"),
        ]
        assert material_plan.total_weight == Decimal("7.000")
        assert plan.status == PlanStatus.GENERATED
        assert plan.generated_by == "alice"
        assert plan.pipe_count == 2

    def test_unknown_weight_is_zero(self) -> None:
        plan = PlanAssembler(lambda m, g: None).assemble(
            [_material_plan(_pipe("12", "9.5"))], order_id="SO-1"
        )
        assert plan.material_plans[0].total_weight == Decimal("0")

    def test_without_lookup(self) -> None:
        plan = PlanAssembler().assemble([_material_plan(_pipe("12", "9.5"))], order_id="SO-1")

        material_plan = plan.material_plans[0]
        assert material_plan.total_weight == Decimal("0")
        assert material_plan.total_pipes_per_length[0].quantity == 1

    def test_material_errors_recorded(self) -> None:
        plan = PlanAssembler().assemble(
            [_material_plan(_pipe("12", "9.5"))],
            order_id="SO-1",
            material_errors=["Material not found: gone"],
        )
        assert plan.material_errors == ("Material not found: gone",)

    def test_each_plan_gets_new_id(self) -> None:
        assembler = PlanAssembler()
        first = assembler.assemble([_material_plan(_pipe("12", "9.5"))], order_id="SO-1")
        second = assembler.assemble([_material_plan(_pipe("12", "9.5"))], order_id="SO-1")
        assert first.plan_id != second.plan_id


class TestDemandCollection:
    def test_profile_demand_grouped_by_material_and_gauge(self) -> None:
        order = Order(
            order_id="SO-1",
            items=[
                OrderItem(
                    item_ref="W1",
                    material_cuts=[
                        RequiredMaterialCut("alu-1", (Decimal("9.5"), Decimal("4.8")), "18"),
                        RequiredMaterialCut("alu-1", (Decimal("3"),), "16"),
                    ],
                ),
                OrderItem(
                    item_ref="W2",
                    material_cuts=[RequiredMaterialCut("alu-1", (Decimal("2"),), "18")],
                ),
            ],
        )

        demand = collect_profile_demand(order)

        assert list(demand) == [("alu-1", "18"), ("alu-1", "16")]
        assert [(d.required_length, d.source_item_ref) for d in demand[("alu-1", "18")]] == [
            (Decimal("9.5"), "W1"),
            (Decimal("4.8"), "W1"),
            (Decimal("2"), "W2"),
        ]

    def test_roll_demand(self) -> None:
        order = Order(
            order_id="SO-2",
            items=[
                OrderItem(
                    item_ref="P1",
                    mesh_panels=[
                        RequiredMeshPanel("mesh-1", Decimal("3"), Decimal("6"), quantity=2)
                    ],
                )
            ],
        )

        demand = collect_roll_demand(order)

        assert demand["mesh-1"][0].quantity == 2
        assert demand["mesh-1"][0].source_item_ref == "P1"
