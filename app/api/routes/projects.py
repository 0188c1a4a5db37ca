"""Project and project-scoped assignment endpoints."""

from __future__ import annotations

import datetime
from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.models.entities import AssignmentType
from app.models.snapshots import WorkDay
from app.services.planning_service import AssignmentData, PlanningService, ProjectData
from app.services.reporting_service import ReportingService

router = APIRouter(prefix="/projects", tags=["projects"])


class ProjectPayload(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=2000)
    start_date: date
    end_date: date
    estimated_hours: Decimal = Field(default=Decimal("0"), ge=0)
    actual_hours: Decimal = Field(default=Decimal("0"), ge=0)
    budget: Decimal = Field(default=Decimal("0"), ge=0)

    def to_data(self) -> ProjectData:
        return ProjectData(
            title=self.title,
            description=self.description,
            start_date=self.start_date,
            end_date=self.end_date,
            estimated_hours=self.estimated_hours,
            actual_hours=self.actual_hours,
            budget=self.budget,
        )


class ProjectEndDatePayload(BaseModel):
    end_date: date


class ProjectActualHoursPayload(BaseModel):
    actual_hours: Decimal = Field(ge=0)


class WorkDayPayload(BaseModel):
    date: datetime.date
    hours: Decimal = Field(ge=0)
    enabled: bool = True

    def to_work_day(self) -> WorkDay:
        return WorkDay(date=self.date.isoformat(), hours=self.hours, enabled=self.enabled)


class AssignmentPayload(BaseModel):
    member_id: UUID
    assignment_type: AssignmentType = AssignmentType.DAILY
    start_date: date
    end_date: date
    hours_per_day: Decimal | None = Field(default=None, ge=0)
    total_hours: Decimal | None = Field(default=None, ge=0)
    actual_hours: Decimal | None = Field(default=None, ge=0)
    work_days: list[WorkDayPayload] | None = None
    # Daily assignments without explicit work_days get a default schedule.
    generate_work_days: bool = True

    def to_data(self) -> AssignmentData:
        return AssignmentData(
            member_id=self.member_id,
            assignment_type=self.assignment_type,
            start_date=self.start_date,
            end_date=self.end_date,
            hours_per_day=self.hours_per_day,
            total_hours=self.total_hours,
            actual_hours=self.actual_hours,
            work_days=[day.to_work_day() for day in self.work_days] if self.work_days is not None else None,
            generate_work_days=self.generate_work_days,
        )


class HoursPerDayPayload(BaseModel):
    hours_per_day: Decimal = Field(ge=0)


class WorkDaysPayload(BaseModel):
    work_days: list[WorkDayPayload]


class FixedHoursPayload(BaseModel):
    total_hours: Decimal = Field(ge=0)
    actual_hours: Decimal = Field(default=Decimal("0"), ge=0)


def _planning_service(db: Session) -> PlanningService:
    return PlanningService(db)


# ---------- Projects ----------
@router.get("")
def list_projects(db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _planning_service(db)
    return {"items": [service.serialize_project(project) for project in service.list_projects()]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(payload: ProjectPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _planning_service(db)
    project = service.create_project(payload.to_data())
    return service.serialize_project(project)


@router.get("/{project_id}")
def get_project(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _planning_service(db)
    return service.serialize_project(service.get_project(project_id))


@router.put("/{project_id}")
def replace_project(
    project_id: UUID,
    payload: ProjectPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.replace_project(project_id, payload.to_data())
    return service.serialize_project(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: UUID, db: Session = Depends(get_db_session)) -> Response:
    service = _planning_service(db)
    service.delete_project(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{project_id}/end-date")
def extend_project_end_date(
    project_id: UUID,
    payload: ProjectEndDatePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.extend_project_end_date(project_id, payload.end_date)
    return service.serialize_project(project)


@router.patch("/{project_id}/actual-hours")
def record_project_actual_hours(
    project_id: UUID,
    payload: ProjectActualHoursPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.record_project_actual_hours(project_id, payload.actual_hours)
    return service.serialize_project(project)


@router.get("/{project_id}/stats")
def get_project_stats(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = ReportingService(db)
    return service.serialize_project_stats(service.project_stats(project_id))


# ---------- Assignments ----------
@router.get("/{project_id}/assignments")
def list_project_assignments(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _planning_service(db)
    return {"items": [service.serialize_assignment(row) for row in service.list_assignments(project_id)]}


@router.post("/{project_id}/assignments", status_code=status.HTTP_201_CREATED)
def assign_member(
    project_id: UUID,
    payload: AssignmentPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.assign_member(project_id, payload.to_data())
    return service.serialize_project(project)


@router.put("/{project_id}/assignments/{member_id}")
def update_assignment(
    project_id: UUID,
    member_id: UUID,
    payload: AssignmentPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.update_assignment(project_id, member_id, payload.to_data())
    return service.serialize_project(project)


@router.delete("/{project_id}/assignments/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_assignment(project_id: UUID, member_id: UUID, db: Session = Depends(get_db_session)) -> Response:
    service = _planning_service(db)
    service.remove_assignment(project_id, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{project_id}/assignments/{member_id}/hours-per-day")
def update_assignment_hours_per_day(
    project_id: UUID,
    member_id: UUID,
    payload: HoursPerDayPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.update_assignment_hours_per_day(project_id, member_id, payload.hours_per_day)
    return service.serialize_project(project)


@router.put("/{project_id}/assignments/{member_id}/work-days")
def update_assignment_work_days(
    project_id: UUID,
    member_id: UUID,
    payload: WorkDaysPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.update_assignment_work_days(
        project_id,
        member_id,
        [day.to_work_day() for day in payload.work_days],
    )
    return service.serialize_project(project)


@router.patch("/{project_id}/assignments/{member_id}/fixed-hours")
def update_assignment_fixed_hours(
    project_id: UUID,
    member_id: UUID,
    payload: FixedHoursPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.update_assignment_fixed_hours(
        project_id,
        member_id,
        total_hours=payload.total_hours,
        actual_hours=payload.actual_hours,
    )
    return service.serialize_project(project)
