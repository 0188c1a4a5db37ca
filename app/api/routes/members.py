"""Team member endpoints."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.models.entities import CompensationType
from app.services.planning_service import MemberData, PlanningService
from app.services.reporting_service import ReportingService

router = APIRouter(prefix="/members", tags=["members"])


class MemberPayload(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    role: str = Field(default="", max_length=255)
    compensation_type: CompensationType = CompensationType.HOURLY
    hourly_rate: Decimal | None = Field(default=None, ge=0)
    monthly_salary: Decimal | None = Field(default=None, ge=0)
    hours_per_week: Decimal = Field(default=Decimal("40"), ge=0)
    available_hours: Decimal = Field(default=Decimal("160"), ge=0)

    def to_data(self) -> MemberData:
        return MemberData(
            name=self.name,
            role=self.role,
            compensation_type=self.compensation_type,
            hourly_rate=self.hourly_rate,
            monthly_salary=self.monthly_salary,
            hours_per_week=self.hours_per_week,
            available_hours=self.available_hours,
        )


def _planning_service(db: Session) -> PlanningService:
    return PlanningService(db)


@router.get("")
def list_members(db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _planning_service(db)
    return {"items": [service.serialize_member(member) for member in service.list_members()]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_member(payload: MemberPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _planning_service(db)
    member = service.create_member(payload.to_data())
    return service.serialize_member(member)


@router.get("/{member_id}")
def get_member(member_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _planning_service(db)
    return service.serialize_member(service.get_member(member_id))


@router.put("/{member_id}")
def replace_member(
    member_id: UUID,
    payload: MemberPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    member = service.replace_member(member_id, payload.to_data())
    return service.serialize_member(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(member_id: UUID, db: Session = Depends(get_db_session)) -> Response:
    service = _planning_service(db)
    service.delete_member(member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{member_id}/stats")
def get_member_stats(member_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = ReportingService(db)
    return service.serialize_member_stats(service.member_stats(member_id))
