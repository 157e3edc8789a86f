import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Optional

from app.timeline.merge import merge_events
from app.timeline.normalizer import normalize_all, parse_instant
from app.timeline.route import extract_route, route_distance_km
from app.timeline.schemas import (
    ActivityFilters,
    ActivityRecord,
    GpsLogRecord,
    InspectionRecordData,
    OperationRecord,
    OperationSummary,
    TimelineMeta,
    TimelineResponse,
)
from app.timeline.stores import ActivityStore, GpsLogStore, InspectionStore, OperationStore

logger = logging.getLogger("fleet.timeline")


class OperationNotFoundError(Exception):
    def __init__(self, operation_id: str):
        self.operation_id = operation_id
        super().__init__(f"Operacao {operation_id} nao encontrada")


class TimelineAggregationError(Exception):
    def __init__(self, operation_id: str, fetched: dict[str, int]):
        self.operation_id = operation_id
        self.fetched = dict(fetched)
        super().__init__(f"Nao foi possivel montar a timeline da operacao {operation_id}")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_operation_summary(operation: OperationRecord) -> OperationSummary:
    return OperationSummary(
        id=operation.id,
        operation_number=operation.operation_number,
        status=operation.status,
        vehicle=operation.vehicle,
        driver=operation.driver,
        actual_start_time=parse_instant(operation.actual_start_time),
        actual_end_time=parse_instant(operation.actual_end_time),
        total_distance_km=operation.total_distance_km,
        notes=operation.notes,
    )


class TimelineService:
    """Builds the merged timeline and route track of one operation.

    Every call works on its own freshly fetched rows; the service keeps no
    state between calls and can be shared across requests.
    """

    def __init__(
        self,
        operations: OperationStore,
        inspections: InspectionStore,
        activities: ActivityStore,
        gps_logs: GpsLogStore,
        max_workers: int = 1,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._operations = operations
        self._inspections = inspections
        self._activities = activities
        self._gps_logs = gps_logs
        self._max_workers = max(1, max_workers)
        self._clock = clock

    def _fetch_sources(
        self,
        operation_id: str,
        filters: Optional[ActivityFilters],
        fetched: dict[str, int],
    ) -> tuple[list[InspectionRecordData], list[ActivityRecord], list[GpsLogRecord]]:
        calls = {
            "inspections": lambda: self._inspections.list_by_operation(operation_id),
            "activities": lambda: self._activities.list_by_operation(operation_id, filters),
            "gps_logs": lambda: self._gps_logs.list_by_operation(operation_id),
        }
        results: dict[str, list] = {}
        if self._max_workers == 1:
            for name, call in calls.items():
                results[name] = list(call())
                fetched[name] = len(results[name])
        else:
            with ThreadPoolExecutor(max_workers=min(self._max_workers, len(calls))) as pool:
                futures = {name: pool.submit(call) for name, call in calls.items()}
                for name, future in futures.items():
                    results[name] = list(future.result())
                    fetched[name] = len(results[name])
        return results["inspections"], results["activities"], results["gps_logs"]

    def build_timeline(self, operation_id: str, filters: Optional[ActivityFilters] = None) -> TimelineResponse:
        fetched = {"operation": 0, "inspections": 0, "activities": 0, "gps_logs": 0}
        try:
            operation = self._operations.get_by_id(operation_id)
        except Exception as exc:
            logger.exception("Erro ao buscar operacao operation_id=%s", operation_id)
            raise TimelineAggregationError(operation_id, fetched) from exc
        if operation is None:
            logger.info("timeline operation_id=%s not found", operation_id)
            raise OperationNotFoundError(operation_id)
        fetched["operation"] = 1

        try:
            inspections, activities, gps_logs = self._fetch_sources(operation_id, filters, fetched)
            now = self._clock()
            normalized = normalize_all(operation, inspections, activities, now=now)
            merged = merge_events(normalized.events)
            route = extract_route(gps_logs)
            response = TimelineResponse(
                data=merged.events,
                total=len(merged.events),
                operation=build_operation_summary(operation),
                route_gps_logs=route,
                meta=TimelineMeta(
                    unresolved_timestamps=merged.unresolved_timestamps,
                    anomalies=normalized.anomalies,
                    route_distance_km=route_distance_km(route),
                    generated_at=now,
                ),
            )
        except Exception as exc:
            logger.exception(
                "Erro ao montar timeline operation_id=%s fetched=%s",
                operation_id,
                fetched,
            )
            raise TimelineAggregationError(operation_id, fetched) from exc

        logger.info(
            "timeline operation_id=%s events=%s route_points=%s inspections=%s activities=%s",
            operation_id,
            response.total,
            len(route),
            fetched["inspections"],
            fetched["activities"],
        )
        return response
