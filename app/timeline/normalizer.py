import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from dateutil import parser

from app.timeline.schemas import (
    ActivityRecord,
    GpsPoint,
    InspectionRecordData,
    InspectionResultData,
    InspectionSummary,
    OperationRecord,
    TimelineEvent,
)

logger = logging.getLogger("fleet.timeline")

TRIP_START = "TRIP_START"
TRIP_END = "TRIP_END"
PRE_INSPECTION = "PRE_INSPECTION"
POST_INSPECTION = "POST_INSPECTION"

INSPECTION_EVENT_TYPES = {
    "PRE_TRIP": PRE_INSPECTION,
    "POST_TRIP": POST_INSPECTION,
}


@dataclass
class NormalizedEvents:
    events: list[TimelineEvent]
    anomalies: list[str] = field(default_factory=list)


def parse_instant(value: Any) -> Optional[datetime]:
    """Coerce a stored timestamp into an aware UTC datetime.

    Naive datetimes are read as UTC. Strings are tried as strict ISO 8601
    first, then through dateutil's general parser (e.g. "... 08:00 UTC").
    Anything that cannot be read returns None instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = parser.isoparse(text)
        except (ValueError, OverflowError):
            try:
                parsed = parser.parse(text)
            except (ValueError, OverflowError):
                return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def coerce_quantity(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def summarize_results(results: Iterable[InspectionResultData]) -> tuple[int, int, int]:
    total = passed = failed = 0
    for result in results:
        total += 1
        if result.is_passed is True:
            passed += 1
        elif result.is_passed is False:
            failed += 1
    return total, passed, failed


def _has_coordinates(latitude: Optional[float], longitude: Optional[float]) -> bool:
    return latitude is not None and longitude is not None


def _first_instant(*values: Any) -> Optional[datetime]:
    # first non-null value wins, even when it cannot be parsed
    for value in values:
        if value is not None:
            return parse_instant(value)
    return None


def normalize_operation(operation: OperationRecord) -> list[TimelineEvent]:
    events: list[TimelineEvent] = []
    if operation.actual_start_time is not None:
        events.append(
            TimelineEvent(
                id=f"trip-start-{operation.id}",
                event_type=TRIP_START,
                timestamp=parse_instant(operation.actual_start_time),
            )
        )
    if operation.actual_end_time is not None:
        events.append(
            TimelineEvent(
                id=f"trip-end-{operation.id}",
                event_type=TRIP_END,
                timestamp=parse_instant(operation.actual_end_time),
            )
        )
    return events


def normalize_inspection(record: InspectionRecordData, now: datetime) -> TimelineEvent:
    timestamp = _first_instant(record.started_at, record.created_at)
    gps_location = None
    if _has_coordinates(record.latitude, record.longitude):
        gps_location = GpsPoint(
            latitude=record.latitude,
            longitude=record.longitude,
            recorded_at=timestamp or now,
        )
    total, passed, failed = summarize_results(record.results)
    return TimelineEvent(
        id=f"inspection-{record.id}",
        event_type=INSPECTION_EVENT_TYPES[record.inspection_type],
        timestamp=timestamp,
        gps_location=gps_location,
        inspection_summary=InspectionSummary(
            inspection_record_id=record.id,
            status=record.status,
            total=total,
            passed=passed,
            failed=failed,
        ),
        notes=record.overall_notes,
    )


def normalize_activity(activity: ActivityRecord, now: datetime, anomalies: list[str]) -> TimelineEvent:
    timestamp = _first_instant(activity.actual_start_time, activity.planned_time)
    gps_location = None
    if _has_coordinates(activity.latitude, activity.longitude):
        recorded_at = _first_instant(activity.gps_recorded_at, activity.actual_start_time, activity.planned_time)
        gps_location = GpsPoint(
            latitude=activity.latitude,
            longitude=activity.longitude,
            recorded_at=recorded_at or now,
        )

    location = None
    if activity.location_id:
        location = activity.location
        if location is None:
            logger.warning(
                "timeline activity_id=%s location_id=%s referenced location missing",
                activity.id,
                activity.location_id,
            )
            anomalies.append(f"activity:{activity.id}:location:{activity.location_id}")

    item = None
    if activity.item_id:
        item = activity.item
        if item is None:
            logger.warning(
                "timeline activity_id=%s item_id=%s referenced item missing",
                activity.id,
                activity.item_id,
            )
            anomalies.append(f"activity:{activity.id}:item:{activity.item_id}")

    return TimelineEvent(
        id=f"activity-{activity.id}",
        event_type=activity.activity_type,
        timestamp=timestamp,
        location=location,
        gps_location=gps_location,
        quantity=coerce_quantity(activity.quantity),
        item=item,
        notes=activity.notes,
    )


def normalize_all(
    operation: OperationRecord,
    inspections: Iterable[InspectionRecordData],
    activities: Iterable[ActivityRecord],
    now: Optional[datetime] = None,
) -> NormalizedEvents:
    """Map every source record into a TimelineEvent.

    Events come out in tie-break order: trip start, pre-trip inspections in
    source order, activities by their stored sequence number, post-trip
    inspections, trip end.
    """
    now = parse_instant(now) or datetime.now(timezone.utc)
    anomalies: list[str] = []

    trip_events = normalize_operation(operation)
    start = [event for event in trip_events if event.event_type == TRIP_START]
    end = [event for event in trip_events if event.event_type == TRIP_END]

    pre: list[TimelineEvent] = []
    post: list[TimelineEvent] = []
    for record in inspections:
        event = normalize_inspection(record, now)
        if event.event_type == PRE_INSPECTION:
            pre.append(event)
        else:
            post.append(event)

    ordered_activities = sorted(activities, key=lambda activity: activity.sequence_number)
    work = [normalize_activity(activity, now, anomalies) for activity in ordered_activities]

    return NormalizedEvents(events=start + pre + work + post + end, anomalies=anomalies)
