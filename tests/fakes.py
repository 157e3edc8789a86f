from datetime import datetime, timedelta, timezone

from app.timeline.schemas import (
    ActivityRecord,
    DriverRef,
    GpsLogRecord,
    InspectionRecordData,
    InspectionResultData,
    OperationRecord,
    VehicleRef,
)
from app.timeline.service import TimelineService

T0 = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)
FIXED_NOW = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)


def minutes(n):
    return T0 + timedelta(minutes=n)


class FakeOperationStore:
    def __init__(self, *operations):
        self.operations = {operation.id: operation for operation in operations}
        self.calls = 0

    def get_by_id(self, operation_id):
        self.calls += 1
        return self.operations.get(operation_id)


class FakeInspectionStore:
    def __init__(self, *records):
        self.records = list(records)

    def list_by_operation(self, operation_id):
        return [record for record in self.records if record.operation_id == operation_id]


class FakeActivityStore:
    def __init__(self, *records):
        self.records = list(records)
        self.last_filters = None
        self.calls = 0

    def list_by_operation(self, operation_id, filters=None):
        self.last_filters = filters
        self.calls += 1
        return [record for record in self.records if record.operation_id == operation_id]


class FakeGpsLogStore:
    def __init__(self, *logs):
        self.logs = list(logs)

    def list_by_operation(self, operation_id):
        return [log for log in self.logs if log.operation_id == operation_id]


class BrokenStore:
    def list_by_operation(self, operation_id, filters=None):
        raise RuntimeError("connection reset")


def make_operation(operation_id="op-1", start=T0, end=None, **overrides):
    data = {
        "id": operation_id,
        "operation_number": "OP-0001",
        "status": "COMPLETED",
        "actual_start_time": start,
        "actual_end_time": end,
        "vehicle": VehicleRef(id="veh-1", plate_number="ABC-1234", model="Actros"),
        "driver": DriverRef(id="drv-1", name="Joana Lima"),
        "total_distance_km": 42.5,
        "notes": "rota padrao",
    }
    data.update(overrides)
    return OperationRecord(**data)


def make_inspection(record_id, inspection_type, started_at, outcomes, operation_id="op-1", **overrides):
    data = {
        "id": record_id,
        "operation_id": operation_id,
        "inspection_type": inspection_type,
        "status": "COMPLETED",
        "started_at": started_at,
        "created_at": started_at,
        "results": [InspectionResultData(result_value="ok", is_passed=outcome) for outcome in outcomes],
    }
    data.update(overrides)
    return InspectionRecordData(**data)


def make_activity(activity_id, activity_type, start, sequence_number=1, operation_id="op-1", **overrides):
    data = {
        "id": activity_id,
        "operation_id": operation_id,
        "sequence_number": sequence_number,
        "activity_type": activity_type,
        "actual_start_time": start,
        "quantity": 0,
    }
    data.update(overrides)
    return ActivityRecord(**data)


def make_gps(recorded_at, latitude=-23.55, longitude=-46.63, operation_id="op-1", speed_kmh=None):
    return GpsLogRecord(
        operation_id=operation_id,
        vehicle_id="veh-1",
        latitude=latitude,
        longitude=longitude,
        speed_kmh=speed_kmh,
        recorded_at=recorded_at,
    )


def scenario_a_service(max_workers=1):
    """Start, one pre-trip check, one loading, one post-trip check, end."""
    return TimelineService(
        operations=FakeOperationStore(make_operation(end=minutes(4))),
        inspections=FakeInspectionStore(
            make_inspection("insp-pre", "PRE_TRIP", minutes(1), [True, True, False]),
            make_inspection("insp-post", "POST_TRIP", minutes(3), [True, True, True]),
        ),
        activities=FakeActivityStore(make_activity("act-1", "LOADING", minutes(2), quantity="12.5")),
        gps_logs=FakeGpsLogStore(
            make_gps(minutes(3), latitude=-23.56),
            make_gps(minutes(1), latitude=-23.55),
        ),
        max_workers=max_workers,
        clock=lambda: FIXED_NOW,
    )
