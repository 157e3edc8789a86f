import unittest
from datetime import datetime, timezone

from fastapi.testclient import TestClient

from app.core.security import get_current_user
from app.db import models
from app.main import app
from app.timeline.router import get_timeline_service
from app.timeline.service import TimelineService

from tests.fakes import (
    BrokenStore,
    FakeActivityStore,
    FakeGpsLogStore,
    FakeInspectionStore,
    FakeOperationStore,
    make_operation,
    scenario_a_service,
)


def _user(role="MANAGER"):
    return models.User(id="user-1", username="gestor", name="Gestor", role=role, status="active")


class TimelineEndpointTests(unittest.TestCase):
    def setUp(self):
        self.service = scenario_a_service()
        app.dependency_overrides[get_current_user] = lambda: _user()
        app.dependency_overrides[get_timeline_service] = lambda: self.service
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_timeline_payload(self):
        res = self.client.get("/api/operations/op-1/timeline")
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["total"], 5)
        self.assertEqual(
            [(e["sequenceNumber"], e["eventType"]) for e in body["data"]],
            [
                (1, "TRIP_START"),
                (2, "PRE_INSPECTION"),
                (3, "LOADING"),
                (4, "POST_INSPECTION"),
                (5, "TRIP_END"),
            ],
        )
        summary = body["data"][1]["inspectionSummary"]
        self.assertEqual(summary["inspectionRecordId"], "insp-pre")
        self.assertEqual((summary["total"], summary["passed"], summary["failed"]), (3, 2, 1))
        self.assertEqual(body["data"][2]["quantity"], 12.5)
        self.assertEqual(body["operation"]["operationNumber"], "OP-0001")
        self.assertEqual(body["operation"]["vehicle"]["plateNumber"], "ABC-1234")
        self.assertEqual(len(body["routeGpsLogs"]), 2)
        self.assertIn("recordedAt", body["routeGpsLogs"][0])
        self.assertEqual(body["meta"]["unresolvedTimestamps"], 0)

    def test_query_filters_forwarded(self):
        res = self.client.get(
            "/api/operations/op-1/timeline",
            params={
                "activityType": "LOADING",
                "startDate": "2026-03-02T00:00:00Z",
                "locationId": "loc-1",
                "itemId": "item-1",
            },
        )
        self.assertEqual(res.status_code, 200)
        filters = self.service._activities.last_filters
        self.assertEqual(filters.activity_type, "LOADING")
        self.assertEqual(filters.start_date, datetime(2026, 3, 2, tzinfo=timezone.utc))
        self.assertIsNone(filters.end_date)
        self.assertEqual(filters.location_id, "loc-1")
        self.assertEqual(filters.item_id, "item-1")

    def test_invalid_activity_type(self):
        res = self.client.get("/api/operations/op-1/timeline", params={"activityType": "FLYING"})
        self.assertEqual(res.status_code, 422)

    def test_unknown_operation(self):
        res = self.client.get("/api/operations/missing/timeline")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json(), {"detail": "Operacao nao encontrada"})

    def test_aggregation_failure(self):
        self.service = TimelineService(
            operations=FakeOperationStore(make_operation()),
            inspections=FakeInspectionStore(),
            activities=BrokenStore(),
            gps_logs=FakeGpsLogStore(),
        )
        with self.assertLogs("fleet.timeline", level="ERROR"):
            res = self.client.get("/api/operations/op-1/timeline")
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.json(), {"message": "Nao foi possivel montar a timeline da operacao"})

    def test_role_guard(self):
        app.dependency_overrides[get_current_user] = lambda: _user(role="DRIVER")
        self.assertEqual(self.client.get("/api/operations/op-1/timeline").status_code, 200)
        app.dependency_overrides[get_current_user] = lambda: _user(role="GUEST")
        self.assertEqual(self.client.get("/api/operations/op-1/timeline").status_code, 403)

    def test_requires_token(self):
        del app.dependency_overrides[get_current_user]
        res = self.client.get("/api/operations/op-1/timeline")
        self.assertEqual(res.status_code, 401)


class HealthEndpointTests(unittest.TestCase):
    def test_health(self):
        res = TestClient(app).get("/api/health")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
