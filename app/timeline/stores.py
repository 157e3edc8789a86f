"""Read accessors feeding the operation timeline.

Each store returns detached pydantic records, never ORM instances, so the
results can cross thread boundaries. The SQL implementations open a fresh
session per call from the injected session factory.
"""

from datetime import datetime
from typing import Callable, Optional, Protocol

from sqlalchemy.orm import Session, joinedload, selectinload

from app.db import models
from app.timeline.normalizer import parse_instant
from app.timeline.schemas import (
    ActivityFilters,
    ActivityRecord,
    DriverRef,
    GpsLogRecord,
    InspectionRecordData,
    InspectionResultData,
    ItemRef,
    LocationRef,
    OperationRecord,
    VehicleRef,
)

TIMELINE_INSPECTION_TYPES = ("PRE_TRIP", "POST_TRIP")


class OperationStore(Protocol):
    def get_by_id(self, operation_id: str) -> Optional[OperationRecord]:
        ...


class InspectionStore(Protocol):
    def list_by_operation(self, operation_id: str) -> list[InspectionRecordData]:
        ...


class ActivityStore(Protocol):
    def list_by_operation(
        self, operation_id: str, filters: Optional[ActivityFilters] = None
    ) -> list[ActivityRecord]:
        ...


class GpsLogStore(Protocol):
    def list_by_operation(self, operation_id: str) -> list[GpsLogRecord]:
        ...


def _location_ref(location: Optional[models.Location]) -> Optional[LocationRef]:
    if location is None:
        return None
    return LocationRef(
        id=location.id,
        name=location.name,
        address=location.address,
        latitude=location.latitude,
        longitude=location.longitude,
    )


def _item_ref(item: Optional[models.Item]) -> Optional[ItemRef]:
    if item is None:
        return None
    return ItemRef(id=item.id, name=item.name, unit=item.unit)


def _operation_record(operation: models.Operation) -> OperationRecord:
    vehicle = operation.vehicle
    driver = operation.driver
    return OperationRecord(
        id=operation.id,
        operation_number=operation.operation_number or "",
        status=operation.status,
        actual_start_time=operation.actual_start_time,
        actual_end_time=operation.actual_end_time,
        vehicle=VehicleRef(id=vehicle.id, plate_number=vehicle.plate_number, model=vehicle.model) if vehicle else None,
        driver=DriverRef(id=driver.id, name=driver.name) if driver else None,
        total_distance_km=operation.total_distance_km,
        notes=operation.notes,
    )


def _inspection_record(record: models.InspectionRecord) -> InspectionRecordData:
    return InspectionRecordData(
        id=record.id,
        operation_id=record.operation_id,
        inspection_type=record.inspection_type,
        status=record.status,
        started_at=record.started_at,
        created_at=record.created_at,
        latitude=record.latitude,
        longitude=record.longitude,
        overall_notes=record.overall_notes,
        results=[
            InspectionResultData(result_value=result.result_value, is_passed=result.is_passed)
            for result in record.results
        ],
    )


def _activity_record(detail: models.OperationDetail) -> ActivityRecord:
    return ActivityRecord(
        id=detail.id,
        operation_id=detail.operation_id,
        sequence_number=detail.sequence_number or 0,
        activity_type=detail.activity_type,
        location_id=detail.location_id,
        item_id=detail.item_id,
        planned_time=detail.planned_time,
        actual_start_time=detail.actual_start_time,
        actual_end_time=detail.actual_end_time,
        quantity=detail.quantity_tons,
        notes=detail.notes,
        latitude=detail.latitude,
        longitude=detail.longitude,
        gps_recorded_at=detail.gps_recorded_at,
        location=_location_ref(detail.location),
        item=_item_ref(detail.item),
    )


def _gps_record(log: models.GpsLog) -> GpsLogRecord:
    return GpsLogRecord(
        id=log.id,
        operation_id=log.operation_id,
        vehicle_id=log.vehicle_id,
        latitude=log.latitude,
        longitude=log.longitude,
        speed_kmh=log.speed_kmh,
        recorded_at=log.recorded_at,
    )


def _bound(db: Session, value: datetime) -> datetime:
    """Filter bound in UTC; SQLite keeps naive UTC and drops offsets on bind."""
    instant = parse_instant(value)
    if db.get_bind().dialect.name == "sqlite":
        return instant.replace(tzinfo=None)
    return instant


class SqlOperationStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get_by_id(self, operation_id: str) -> Optional[OperationRecord]:
        with self._session_factory() as db:
            operation = (
                db.query(models.Operation)
                .options(joinedload(models.Operation.vehicle), joinedload(models.Operation.driver))
                .filter(models.Operation.id == operation_id)
                .first()
            )
            if not operation:
                return None
            return _operation_record(operation)


class SqlInspectionStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_by_operation(self, operation_id: str) -> list[InspectionRecordData]:
        with self._session_factory() as db:
            records = (
                db.query(models.InspectionRecord)
                .options(selectinload(models.InspectionRecord.results))
                .filter(
                    models.InspectionRecord.operation_id == operation_id,
                    models.InspectionRecord.inspection_type.in_(TIMELINE_INSPECTION_TYPES),
                )
                .order_by(models.InspectionRecord.created_at.asc(), models.InspectionRecord.id.asc())
                .all()
            )
            return [_inspection_record(record) for record in records]


class SqlActivityStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_by_operation(
        self, operation_id: str, filters: Optional[ActivityFilters] = None
    ) -> list[ActivityRecord]:
        with self._session_factory() as db:
            query = (
                db.query(models.OperationDetail)
                .options(joinedload(models.OperationDetail.location), joinedload(models.OperationDetail.item))
                .filter(models.OperationDetail.operation_id == operation_id)
            )
            if filters:
                if filters.activity_type:
                    query = query.filter(models.OperationDetail.activity_type == filters.activity_type)
                if filters.location_id:
                    query = query.filter(models.OperationDetail.location_id == filters.location_id)
                if filters.item_id:
                    query = query.filter(models.OperationDetail.item_id == filters.item_id)
                if filters.start_date:
                    query = query.filter(models.OperationDetail.planned_time >= _bound(db, filters.start_date))
                if filters.end_date:
                    query = query.filter(models.OperationDetail.planned_time <= _bound(db, filters.end_date))
            details = query.order_by(
                models.OperationDetail.sequence_number.asc(), models.OperationDetail.created_at.asc()
            ).all()
            return [_activity_record(detail) for detail in details]


class SqlGpsLogStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_by_operation(self, operation_id: str) -> list[GpsLogRecord]:
        with self._session_factory() as db:
            logs = (
                db.query(models.GpsLog)
                .filter(models.GpsLog.operation_id == operation_id)
                .order_by(models.GpsLog.recorded_at.asc(), models.GpsLog.created_at.asc())
                .all()
            )
            return [_gps_record(log) for log in logs]
