import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.security import FLEET_ROLES, require_roles
from app.db import models
from app.db.session import SessionLocal
from app.timeline.schemas import ActivityFilters, ActivityType, TimelineResponse
from app.timeline.service import OperationNotFoundError, TimelineAggregationError, TimelineService
from app.timeline.stores import SqlActivityStore, SqlGpsLogStore, SqlInspectionStore, SqlOperationStore

logger = logging.getLogger("fleet.timeline")

router = APIRouter(tags=["Timeline"])


def get_timeline_service() -> TimelineService:
    return TimelineService(
        operations=SqlOperationStore(SessionLocal),
        inspections=SqlInspectionStore(SessionLocal),
        activities=SqlActivityStore(SessionLocal),
        gps_logs=SqlGpsLogStore(SessionLocal),
        max_workers=settings.TIMELINE_FETCH_WORKERS,
    )


@router.get("/operations/{operation_id}/timeline", response_model=TimelineResponse)
def get_operation_timeline(
    operation_id: str,
    activity_type: Optional[ActivityType] = Query(default=None, alias="activityType"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    location_id: Optional[str] = Query(default=None, alias="locationId"),
    item_id: Optional[str] = Query(default=None, alias="itemId"),
    current_user: models.User = Depends(require_roles(*FLEET_ROLES)),
    service: TimelineService = Depends(get_timeline_service),
):
    # filters narrow the activity source only
    filters = ActivityFilters(
        activity_type=activity_type,
        start_date=start_date,
        end_date=end_date,
        location_id=location_id,
        item_id=item_id,
    )
    try:
        return service.build_timeline(operation_id, filters)
    except OperationNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Operacao nao encontrada")
    except TimelineAggregationError:
        logger.error("timeline failed operation_id=%s user_id=%s", operation_id, current_user.id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Nao foi possivel montar a timeline da operacao"},
        )
