"""Calendar day/month views and work-day schedule preview."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.calendar_utils import generate_work_days
from app.services.planning_service import PlanningService
from app.services.reporting_service import ReportingService

router = APIRouter(tags=["calendar"])


def _service(db: Session) -> ReportingService:
    return ReportingService(db)


@router.get("/calendar/days/{day}")
def get_calendar_day(
    day: date,
    member_id: UUID | None = None,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _service(db)
    return service.serialize_calendar_day(service.calendar_day(day, member_id))


@router.get("/calendar/members/{member_id}/hours/{day}")
def get_member_hours_on_date(
    member_id: UUID,
    day: date,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _service(db)
    hours = service.member_hours_on_date(day, member_id)
    return {"member_id": str(member_id), "date": day.isoformat(), "hours": str(hours)}


@router.get("/calendar/months/{year}/{month}")
def get_calendar_month(
    year: int,
    month: int,
    member_id: UUID | None = None,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _service(db)
    days = service.calendar_month(year, month, member_id)
    return {
        "year": year,
        "month": month,
        "member_id": str(member_id) if member_id is not None else None,
        "days": [service.serialize_calendar_day(day) for day in days],
    }


@router.get("/work-days/preview")
def preview_work_days(
    start_date: date,
    end_date: date,
    hours_per_day: Decimal = Query(ge=0),
) -> dict[str, list[object]]:
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must be greater than or equal to start_date.",
        )
    work_days = generate_work_days(start_date, end_date, hours_per_day)
    return {"items": [PlanningService.serialize_work_day(day) for day in work_days]}
