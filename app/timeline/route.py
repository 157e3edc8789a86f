import math
from datetime import datetime
from typing import Iterable, Optional

from app.timeline.normalizer import parse_instant
from app.timeline.schemas import GpsLogRecord, RoutePoint

EARTH_RADIUS_KM = 6371.0


def extract_route(gps_logs: Iterable[GpsLogRecord]) -> list[RoutePoint]:
    points = [
        RoutePoint(
            latitude=log.latitude,
            longitude=log.longitude,
            recorded_at=parse_instant(log.recorded_at),
            speed_kmh=log.speed_kmh,
        )
        for log in gps_logs
    ]
    # sorted() is stable, so duplicates keep their source order
    return sorted(points, key=lambda point: point.recorded_at)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def route_distance_km(points: list[RoutePoint]) -> float:
    total = 0.0
    for previous, current in zip(points, points[1:]):
        total += haversine_km(previous.latitude, previous.longitude, current.latitude, current.longitude)
    return round(total, 3)


def find_nearest_point(
    points: list[RoutePoint],
    at: datetime,
    max_gap_seconds: Optional[float] = None,
) -> Optional[RoutePoint]:
    """Closest route point in time to ``at``.

    Not used to place timeline events; events only carry the coordinates
    stored on their own rows.
    """
    target = parse_instant(at)
    if target is None or not points:
        return None
    nearest = min(points, key=lambda point: abs((point.recorded_at - target).total_seconds()))
    if max_gap_seconds is not None and abs((nearest.recorded_at - target).total_seconds()) > max_gap_seconds:
        return None
    return nearest
