from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ActivityType = Literal[
    "LOADING",
    "UNLOADING",
    "TRANSPORTING",
    "WAITING",
    "MAINTENANCE",
    "REFUELING",
    "BREAK",
    "OTHER",
]
InspectionType = Literal["PRE_TRIP", "POST_TRIP"]
EventType = Literal[
    "TRIP_START",
    "TRIP_END",
    "PRE_INSPECTION",
    "POST_INSPECTION",
    "LOADING",
    "UNLOADING",
    "TRANSPORTING",
    "WAITING",
    "MAINTENANCE",
    "REFUELING",
    "BREAK",
    "OTHER",
]

# Raw source timestamps may arrive as strings; the normalizer resolves them.
RawTimestamp = Optional[datetime | str]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationRef(CamelModel):
    id: str
    name: str
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class ItemRef(CamelModel):
    id: str
    name: str
    unit: Optional[str] = None


class VehicleRef(CamelModel):
    id: str
    plate_number: str
    model: Optional[str] = None


class DriverRef(CamelModel):
    id: str
    name: str


# Records handed over by the data stores


class OperationRecord(CamelModel):
    id: str
    operation_number: str = ""
    status: str
    actual_start_time: RawTimestamp = None
    actual_end_time: RawTimestamp = None
    vehicle: Optional[VehicleRef] = None
    driver: Optional[DriverRef] = None
    total_distance_km: Optional[float] = None
    notes: Optional[str] = None


class InspectionResultData(CamelModel):
    result_value: Optional[str] = None
    is_passed: Optional[bool] = None


class InspectionRecordData(CamelModel):
    id: str
    operation_id: str
    inspection_type: InspectionType
    status: str
    started_at: RawTimestamp = None
    created_at: RawTimestamp = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    overall_notes: Optional[str] = None
    results: list[InspectionResultData] = Field(default_factory=list)


class ActivityRecord(CamelModel):
    id: str
    operation_id: str
    sequence_number: int = 0
    activity_type: ActivityType
    location_id: Optional[str] = None
    item_id: Optional[str] = None
    planned_time: RawTimestamp = None
    actual_start_time: RawTimestamp = None
    actual_end_time: RawTimestamp = None
    quantity: Any = None
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    gps_recorded_at: RawTimestamp = None
    location: Optional[LocationRef] = None
    item: Optional[ItemRef] = None


class GpsLogRecord(CamelModel):
    id: Optional[str] = None
    operation_id: str
    vehicle_id: str
    latitude: float
    longitude: float
    speed_kmh: Optional[float] = None
    recorded_at: datetime


class ActivityFilters(CamelModel):
    activity_type: Optional[ActivityType] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location_id: Optional[str] = None
    item_id: Optional[str] = None


# Response shapes


class GpsPoint(CamelModel):
    latitude: float
    longitude: float
    recorded_at: datetime


class InspectionSummary(CamelModel):
    inspection_record_id: str
    status: str
    total: int
    passed: int
    failed: int


class TimelineEvent(CamelModel):
    id: str
    sequence_number: int = 0
    event_type: EventType
    timestamp: Optional[datetime] = None
    location: Optional[LocationRef] = None
    gps_location: Optional[GpsPoint] = None
    quantity: Optional[float] = None
    item: Optional[ItemRef] = None
    inspection_summary: Optional[InspectionSummary] = None
    notes: Optional[str] = None


class RoutePoint(CamelModel):
    latitude: float
    longitude: float
    recorded_at: datetime
    speed_kmh: Optional[float] = None


class OperationSummary(CamelModel):
    id: str
    operation_number: str
    status: str
    vehicle: Optional[VehicleRef] = None
    driver: Optional[DriverRef] = None
    actual_start_time: Optional[datetime] = None
    actual_end_time: Optional[datetime] = None
    total_distance_km: Optional[float] = None
    notes: Optional[str] = None


class TimelineMeta(CamelModel):
    unresolved_timestamps: int = 0
    anomalies: list[str] = Field(default_factory=list)
    route_distance_km: float = 0.0
    generated_at: datetime


class TimelineResponse(CamelModel):
    data: list[TimelineEvent]
    total: int
    operation: OperationSummary
    route_gps_logs: list[RoutePoint]
    meta: TimelineMeta
