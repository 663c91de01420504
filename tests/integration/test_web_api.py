"""Integration tests for the REST API.

Each test serves a fresh ServiceFactory through ``create_app`` so stock
and orders never leak between tests.
"""

from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from conftest import make_batch, make_mesh, make_pipe_order, make_profile
from stockcut.application.factory import ServiceFactory
from stockcut.application.services.commit_coordinator import commit_lock_key
from stockcut.web import create_app

API = "/api/v1/manufacturing"

pytestmark = pytest.mark.integration


@pytest.fixture
def client(factory: ServiceFactory) -> TestClient:
    return TestClient(create_app(factory))


def _optimize(client: TestClient, order_id: str = "SO-1") -> dict:
    response = client.post(f"{API}/optimize", json={"order_id": order_id, "generated_by": "alice"})
    assert response.status_code == 200, response.text
    return response.json()


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.json() == {"status": "healthy"}


class TestOptimizeEndpoint:
    def test_optimize(self, client: TestClient) -> None:
        body = _optimize(client)

        assert body["status"] == "Generated"
        assert body["order_status"] == "Optimization Complete"
        assert body["material_errors"] == []
        assert body["cutting_plan_id"]

    def test_unknown_order(self, client: TestClient) -> None:
        response = client.post(f"{API}/optimize", json={"order_id": "nope"})

        assert response.status_code == 404
        assert response.json()["error"] == "Order not found."

    def test_missing_order_id(self, client: TestClient) -> None:
        response = client.post(f"{API}/optimize", json={})
        assert response.status_code == 422

    def test_in_progress(self, client: TestClient, factory: ServiceFactory) -> None:
        factory.get_lock_service().acquire("optimize:SO-1", "another-request")

        response = client.post(f"{API}/optimize", json={"order_id": "SO-1"})

        assert response.status_code == 409
        assert response.json()["error_type"] == "optimization_in_progress"

    def test_already_committed(self, client: TestClient) -> None:
        _optimize(client)
        client.post(f"{API}/cutting-plan/SO-1/commit", json={"committed_by": "bob"})

        response = client.post(f"{API}/optimize", json={"order_id": "SO-1"})

        assert response.status_code == 409
        body = response.json()
        assert body["error_type"] == "already_committed"
        assert body["details"] == {"order_id": "SO-1"}
        assert "detail" not in body

    def test_commit_in_progress(self, client: TestClient, factory: ServiceFactory) -> None:
        plan_id = _optimize(client)["cutting_plan_id"]
        factory.get_lock_service().acquire(commit_lock_key(plan_id), "committing-request")

        response = client.post(f"{API}/optimize", json={"order_id": "SO-1"})

        assert response.status_code == 409
        assert response.json()["error_type"] == "commit_in_progress"
        assert factory.get_plan_repository().get(plan_id) is not None

    def test_optimization_failure(self, client: TestClient, factory: ServiceFactory) -> None:
        factory.get_order_repository().save(make_pipe_order("SO-9", cut_lengths=("20",)))

        response = client.post(f"{API}/optimize", json={"order_id": "SO-9"})

        assert response.status_code == 400
        body = response.json()
        assert body["error_type"] == "optimization_failed"
        assert "greater than the largest" in body["error"]


class TestCuttingPlanEndpoints:
    def test_get_plan(self, client: TestClient) -> None:
        plan_id = _optimize(client)["cutting_plan_id"]

        response = client.get(f"{API}/cutting-plan/SO-1")

        assert response.status_code == 200
        body = response.json()
        assert body["plan_id"] == plan_id
        assert body["total_pipes"] == 3
        material_plan = body["material_plans"][0]
        assert material_plan["total_scrap"] == pytest.approx(12.2)
        assert material_plan["total_weight"] == pytest.approx(9.0)
        assert material_plan["pipes_used"][0]["cuts"][0] == {
            "required_length": 9.5,
            "source_item_ref": "W1",
        }

    def test_no_plan(self, client: TestClient) -> None:
        response = client.get(f"{API}/cutting-plan/SO-1")

        assert response.status_code == 404
        assert response.json()["error_type"] == "not_found"

    def test_failed_optimization_reason(
        self, client: TestClient, factory: ServiceFactory
    ) -> None:
        factory.get_order_repository().save(make_pipe_order("SO-9", cut_lengths=("20",)))
        client.post(f"{API}/optimize", json={"order_id": "SO-9"})

        response = client.get(f"{API}/cutting-plan/SO-9")

        assert response.status_code == 400
        assert "greater than the largest" in response.json()["error"]

    def test_pipe_order_summary(self, client: TestClient) -> None:
        _optimize(client)

        response = client.get(f"{API}/cutting-plan/SO-1/pipe-order-summary")

        assert response.status_code == 200
        body = response.json()
        assert body["total_pipes"] == 3
        assert body["lines"][0]["standard_length"] == 12.0
        assert body["lines"][0]["quantity"] == 3


class TestCommitEndpoint:
    def test_commit(self, client: TestClient) -> None:
        _optimize(client)

        response = client.post(f"{API}/cutting-plan/SO-1/commit", json={"committed_by": "bob"})

        assert response.status_code == 200
        body = response.json()
        assert body["order"]["status"] == "Cutting"
        assert body["order"]["cutting_plan_status"] == "Committed"
        assert body["cutting_plan"]["status"] == "Committed"
        assert body["cutting_plan"]["committed_by"] == "bob"
        assert [t["batch_id"] for t in body["transactions"]] == ["B-OLD", "B-OLD", "B-NEW"]

    def test_commit_without_body(self, client: TestClient) -> None:
        _optimize(client)

        response = client.post(f"{API}/cutting-plan/SO-1/commit")

        assert response.status_code == 200
        assert response.json()["cutting_plan"]["committed_by"] is None

    def test_second_commit(self, client: TestClient) -> None:
        _optimize(client)
        client.post(f"{API}/cutting-plan/SO-1/commit")

        response = client.post(f"{API}/cutting-plan/SO-1/commit")

        assert response.status_code == 400
        assert response.json()["error_type"] == "already_committed"

    def test_not_generated(self, client: TestClient) -> None:
        response = client.post(f"{API}/cutting-plan/SO-1/commit")

        assert response.status_code == 400
        assert response.json()["error_type"] == "not_generated"

    def test_insufficient_inventory(self) -> None:
        profile = make_profile([make_batch("B1", "12", "1", "100", datetime(2024, 1, 1))])
        factory = ServiceFactory.from_domain([profile, make_mesh()], [make_pipe_order()])
        client = TestClient(create_app(factory))
        _optimize(client)

        response = client.post(f"{API}/cutting-plan/SO-1/commit")

        assert response.status_code == 400
        body = response.json()
        assert body["error_type"] == "insufficient_inventory"
        assert body["details"][0]["required"] == "3"
        assert body["details"][0]["available"] == "1"
        assert "Insufficient stock" in body["error"]
        assert profile.batches[0].current_quantity == 1


class TestStageEndpoint:
    def test_update_stage(self, client: TestClient) -> None:
        response = client.patch(
            f"{API}/orders/SO-1/stage", json={"status": "Assembly", "updated_by": "carol"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "Assembly"
        assert body["history"][-1]["updated_by"] == "carol"

    def test_invalid_stage(self, client: TestClient) -> None:
        response = client.patch(f"{API}/orders/SO-1/stage", json={"status": "Painting"})

        assert response.status_code == 400
        body = response.json()
        assert body["error_type"] == "invalid_stage"
        assert "Assembly" in body["details"]["valid"]


class TestWireMeshEndpoint:
    def test_select_width(self, client: TestClient) -> None:
        response = client.post(
            f"{API}/wire-mesh/select-width",
            json={"required_width": 3.5, "standard_widths": [3, 4, 5]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["selected_width"] == 4.0
        assert body["wastage_width"] == 0.5
        assert body["waste_percentage"] == 12.5
        assert body["orientation"] is None

    def test_select_width_with_turn(self, client: TestClient) -> None:
        response = client.post(
            f"{API}/wire-mesh/select-width",
            json={"required_width": 6, "required_length": 4, "standard_widths": [3, 4, 5]},
        )

        body = response.json()
        assert body["orientation"] == "swapped"
        assert body["selected_width"] == 4.0
        assert body["consumed_area"] == 24.0

    def test_no_fit(self, client: TestClient) -> None:
        response = client.post(
            f"{API}/wire-mesh/select-width",
            json={"required_width": 6, "standard_widths": [3, 4, 5]},
        )

        assert response.status_code == 400
        assert response.json()["error_type"] == "no_feasible_stock"
