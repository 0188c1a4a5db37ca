"""Dashboard endpoint for the portfolio overview."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.reporting_service import ReportingService

router = APIRouter(prefix="/dashboards", tags=["dashboards"])


@router.get("/summary")
def get_dashboard_summary(
    as_of: date | None = None,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = ReportingService(db)
    return service.serialize_summary(service.dashboard_summary(today=as_of))
