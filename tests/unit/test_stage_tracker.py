"""Tests for manual manufacturing stage updates."""

from __future__ import annotations

import pytest

from stockcut.application.factory import ServiceFactory
from stockcut.domain.exceptions import InvalidStage, OrderNotFound
from stockcut.domain.value_objects import PRODUCTION_STAGES


class TestProductionStageService:
    def test_update_stage_records_history(self, factory: ServiceFactory) -> None:
        order = factory.get_stage_service().update_stage("SO-1", "Assembly", updated_by="carol")

        assert order.status == "Assembly"
        entry = order.history[-1]
        assert entry.status == "Assembly"
        assert entry.notes == "Stage changed from Ready for Optimization to Assembly"
        assert entry.updated_by == "carol"
        assert factory.get_order_repository().get("SO-1").status == "Assembly"

    def test_custom_note(self, factory: ServiceFactory) -> None:
        order = factory.get_stage_service().update_stage("SO-1", "QC", notes="Welds checked")
        assert order.history[-1].notes == "Welds checked"

    def test_invalid_stage(self, factory: ServiceFactory) -> None:
        with pytest.raises(InvalidStage) as exc_info:
            factory.get_stage_service().update_stage("SO-1", "Painting")

        assert exc_info.value.valid == PRODUCTION_STAGES
        assert factory.get_order_repository().get("SO-1").history == []

    def test_invalid_stage_checked_before_lookup(self, factory: ServiceFactory) -> None:
        with pytest.raises(InvalidStage):
            factory.get_stage_service().update_stage("nope", "Painting")

    def test_unknown_order(self, factory: ServiceFactory) -> None:
        with pytest.raises(OrderNotFound):
            factory.get_stage_service().update_stage("nope", "Packed")
