import logging
from dataclasses import dataclass
from typing import Iterable

from app.timeline.normalizer import POST_INSPECTION, PRE_INSPECTION, TRIP_END, TRIP_START, parse_instant
from app.timeline.schemas import TimelineEvent

logger = logging.getLogger("fleet.timeline")

_TIE_BREAK_RANKS = {
    TRIP_START: 0,
    PRE_INSPECTION: 1,
    POST_INSPECTION: 3,
    TRIP_END: 4,
}
_ACTIVITY_RANK = 2

# Undateable events sort as the earliest possible instant.
_FLOOR_INSTANT = float("-inf")


@dataclass
class MergeResult:
    events: list[TimelineEvent]
    unresolved_timestamps: int


def _sort_instant(event: TimelineEvent) -> float | None:
    parsed = parse_instant(event.timestamp)
    if parsed is None:
        return None
    return parsed.timestamp()


def merge_events(events: Iterable[TimelineEvent]) -> MergeResult:
    """Order events chronologically and renumber them from 1.

    Ties keep the fixed order trip start, pre-trip inspections, activities,
    post-trip inspections, trip end; inside one group the incoming order wins.
    """
    keyed = []
    unresolved = 0
    for position, event in enumerate(events):
        instant = _sort_instant(event)
        if instant is None:
            unresolved += 1
            instant = _FLOOR_INSTANT
        rank = _TIE_BREAK_RANKS.get(event.event_type, _ACTIVITY_RANK)
        keyed.append(((instant, rank, position), event))

    keyed.sort(key=lambda pair: pair[0])
    ordered = [
        event.model_copy(update={"sequence_number": index})
        for index, (_, event) in enumerate(keyed, start=1)
    ]
    if unresolved:
        logger.warning("timeline unresolved_timestamps=%s events floored to the start", unresolved)
    return MergeResult(events=ordered, unresolved_timestamps=unresolved)
