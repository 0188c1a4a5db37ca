"""Application service for the member/project/assignment store."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models.entities import AssignmentType, CompensationType, Member, Project, ProjectAssignment
from app.models.snapshots import (
    Assignment,
    DailyAssignment,
    FixedAssignment,
    MemberSnapshot,
    PlanningSnapshot,
    ProjectSnapshot,
    WorkDay,
)
from app.repositories.planning_repository import PlanningRepository
from app.services.calendar_utils import covers_range, generate_work_days, with_uniform_hours

logger = get_logger(__name__)

ZERO = Decimal("0.00")
Q2 = Decimal("0.01")


def _q2(value: Decimal) -> Decimal:
    return value.quantize(Q2)


def _q2_or_none(value: Decimal | None) -> str | None:
    return None if value is None else str(_q2(value))


@dataclass(slots=True)
class MemberData:
    name: str
    role: str
    compensation_type: CompensationType
    hours_per_week: Decimal
    available_hours: Decimal
    hourly_rate: Decimal | None = None
    monthly_salary: Decimal | None = None


@dataclass(slots=True)
class ProjectData:
    title: str
    description: str
    start_date: date
    end_date: date
    estimated_hours: Decimal
    budget: Decimal
    actual_hours: Decimal = ZERO


@dataclass(slots=True)
class AssignmentData:
    member_id: UUID
    assignment_type: AssignmentType
    start_date: date
    end_date: date
    hours_per_day: Decimal | None = None
    total_hours: Decimal | None = None
    actual_hours: Decimal | None = None
    work_days: list[WorkDay] | None = None
    generate_work_days: bool = True


# ---------- Row <-> snapshot conversion ----------
def encode_work_days(work_days: Iterable[WorkDay]) -> list[dict[str, object]]:
    return [{"date": day.date, "hours": str(day.hours), "enabled": day.enabled} for day in work_days]


def decode_work_days(raw: list | None) -> tuple[WorkDay, ...] | None:
    if raw is None:
        return None
    return tuple(
        WorkDay(date=str(item["date"]), hours=Decimal(str(item["hours"])), enabled=bool(item["enabled"]))
        for item in raw
    )


def member_snapshot(member: Member) -> MemberSnapshot:
    return MemberSnapshot(
        id=member.id,
        name=member.name,
        role=member.role,
        compensation_type=member.compensation_type,
        hours_per_week=member.hours_per_week,
        available_hours=member.available_hours,
        hourly_rate=member.hourly_rate,
        monthly_salary=member.monthly_salary,
    )


def assignment_snapshot(row: ProjectAssignment) -> Assignment:
    if row.assignment_type is AssignmentType.FIXED:
        return FixedAssignment(
            member_id=row.member_id,
            start_date=row.start_date,
            end_date=row.end_date,
            total_hours=row.total_hours,
            actual_hours=row.actual_hours,
        )
    return DailyAssignment(
        member_id=row.member_id,
        start_date=row.start_date,
        end_date=row.end_date,
        hours_per_day=row.hours_per_day,
        work_days=decode_work_days(row.work_days),
    )


def project_snapshot(project: Project, assignments: Iterable[ProjectAssignment]) -> ProjectSnapshot:
    return ProjectSnapshot(
        id=project.id,
        title=project.title,
        description=project.description,
        start_date=project.start_date,
        end_date=project.end_date,
        original_end_date=project.original_end_date,
        estimated_hours=project.estimated_hours,
        actual_hours=project.actual_hours,
        budget=project.budget,
        assignments=tuple(assignment_snapshot(row) for row in assignments),
    )


class PlanningService:
    """Store operations on whole-entity snapshots.

    Every mutator commits a single transaction and hands back fresh
    immutable snapshots; ORM rows never leave this service.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = PlanningRepository(db)

    # ---------- Serialization ----------
    @staticmethod
    def serialize_member(member: MemberSnapshot) -> dict[str, object]:
        return {
            "id": str(member.id),
            "name": member.name,
            "role": member.role,
            "compensation_type": member.compensation_type.value,
            "hourly_rate": _q2_or_none(member.hourly_rate),
            "monthly_salary": _q2_or_none(member.monthly_salary),
            "hours_per_week": str(_q2(member.hours_per_week)),
            "available_hours": str(_q2(member.available_hours)),
        }

    @staticmethod
    def serialize_work_day(day: WorkDay) -> dict[str, object]:
        return {"date": day.date, "hours": str(_q2(day.hours)), "enabled": day.enabled}

    @classmethod
    def serialize_assignment(cls, assignment: Assignment) -> dict[str, object]:
        row: dict[str, object] = {
            "member_id": str(assignment.member_id),
            "assignment_type": assignment.assignment_type.value,
            "start_date": assignment.start_date.isoformat(),
            "end_date": assignment.end_date.isoformat(),
        }
        if isinstance(assignment, FixedAssignment):
            row["total_hours"] = _q2_or_none(assignment.total_hours)
            row["actual_hours"] = _q2_or_none(assignment.actual_hours)
        else:
            row["hours_per_day"] = _q2_or_none(assignment.hours_per_day)
            row["work_days"] = (
                [cls.serialize_work_day(day) for day in assignment.work_days]
                if assignment.work_days is not None
                else None
            )
        return row

    @classmethod
    def serialize_project(cls, project: ProjectSnapshot) -> dict[str, object]:
        return {
            "id": str(project.id),
            "title": project.title,
            "description": project.description,
            "start_date": project.start_date.isoformat(),
            "end_date": project.end_date.isoformat(),
            "original_end_date": project.original_end_date.isoformat(),
            "was_extended": project.was_extended,
            "estimated_hours": str(_q2(project.estimated_hours)),
            "actual_hours": str(_q2(project.actual_hours)),
            "budget": str(_q2(project.budget)),
            "assignments": [cls.serialize_assignment(assignment) for assignment in project.assignments],
        }

    # ---------- Reads ----------
    def snapshot(self) -> PlanningSnapshot:
        assignments_by_project: dict[UUID, list[ProjectAssignment]] = {}
        for row in self.repo.list_assignments():
            assignments_by_project.setdefault(row.project_id, []).append(row)

        return PlanningSnapshot(
            members=tuple(member_snapshot(member) for member in self.repo.list_members()),
            projects=tuple(
                project_snapshot(project, assignments_by_project.get(project.id, []))
                for project in self.repo.list_projects()
            ),
        )

    def list_members(self) -> list[MemberSnapshot]:
        return [member_snapshot(member) for member in self.repo.list_members()]

    def get_member(self, member_id: UUID) -> MemberSnapshot:
        return member_snapshot(self._require_member(member_id))

    def list_projects(self) -> list[ProjectSnapshot]:
        return list(self.snapshot().projects)

    def get_project(self, project_id: UUID) -> ProjectSnapshot:
        return self._project_snapshot(self._require_project(project_id))

    def list_assignments(self, project_id: UUID) -> list[Assignment]:
        return list(self.get_project(project_id).assignments)

    # ---------- Internal lookups ----------
    def _require_member(self, member_id: UUID) -> Member:
        member = self.repo.get_member(member_id)
        if member is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found.")
        return member

    def _require_project(self, project_id: UUID) -> Project:
        project = self.repo.get_project(project_id)
        if project is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
        return project

    def _require_assignment(self, project_id: UUID, member_id: UUID) -> ProjectAssignment:
        assignment = self.repo.get_assignment(project_id, member_id)
        if assignment is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found.")
        return assignment

    def _project_snapshot(self, project: Project) -> ProjectSnapshot:
        return project_snapshot(project, self.repo.list_assignments_for_project(project.id))

    def _commit(self, conflict_detail: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("Store commit rejected", extra={"context": {"detail": conflict_detail}})
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=conflict_detail) from exc

    # ---------- Validation ----------
    @staticmethod
    def _validate_date_range(start: date, end: date, *, label: str) -> None:
        if end < start:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"{label} end_date must be greater than or equal to start_date.",
            )

    @staticmethod
    def _normalize_compensation(data: MemberData) -> tuple[Decimal | None, Decimal | None]:
        if data.compensation_type is CompensationType.HOURLY:
            if data.hourly_rate is None or data.hourly_rate < ZERO:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="hourly_rate is required and must be greater or equal zero for hourly members.",
                )
            return data.hourly_rate, None

        if data.monthly_salary is None or data.monthly_salary < ZERO:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="monthly_salary is required and must be greater or equal zero for monthly members.",
            )
        return None, data.monthly_salary

    @staticmethod
    def _ensure_work_days_cover(work_days: list[WorkDay], start: date, end: date) -> None:
        if not covers_range(work_days, start, end):
            logger.warning(
                "Rejected work-day list not covering assignment range",
                extra={"context": {"start_date": start.isoformat(), "end_date": end.isoformat()}},
            )
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="work_days must contain exactly one entry per date from start_date to end_date.",
            )

    @staticmethod
    def _ensure_type(assignment: ProjectAssignment, expected: AssignmentType) -> None:
        if assignment.assignment_type is not expected:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Operation requires a {expected.value} assignment.",
            )

    # ---------- Member CRUD ----------
    def create_member(self, data: MemberData) -> MemberSnapshot:
        hourly_rate, monthly_salary = self._normalize_compensation(data)
        now = datetime.utcnow()
        member = Member(
            name=data.name.strip(),
            role=data.role.strip(),
            compensation_type=data.compensation_type,
            hourly_rate=hourly_rate,
            monthly_salary=monthly_salary,
            hours_per_week=data.hours_per_week,
            available_hours=data.available_hours,
            created_at=now,
            updated_at=now,
        )
        self.repo.add_member(member)
        self._commit("Member could not be stored.")
        self.db.refresh(member)
        logger.info("Member created", extra={"context": {"member_id": member.id}})
        return member_snapshot(member)

    def replace_member(self, member_id: UUID, data: MemberData) -> MemberSnapshot:
        member = self._require_member(member_id)
        hourly_rate, monthly_salary = self._normalize_compensation(data)

        member.name = data.name.strip()
        member.role = data.role.strip()
        member.compensation_type = data.compensation_type
        member.hourly_rate = hourly_rate
        member.monthly_salary = monthly_salary
        member.hours_per_week = data.hours_per_week
        member.available_hours = data.available_hours
        member.updated_at = datetime.utcnow()

        self._commit("Member could not be stored.")
        self.db.refresh(member)
        return member_snapshot(member)

    def delete_member(self, member_id: UUID) -> None:
        member = self._require_member(member_id)
        removed = self.repo.delete_assignments_for_member(member.id)
        self.repo.delete_member(member)
        self.db.commit()
        logger.info(
            "Member deleted",
            extra={"context": {"member_id": member_id, "removed_assignments": removed}},
        )

    # ---------- Project CRUD ----------
    def create_project(self, data: ProjectData) -> ProjectSnapshot:
        self._validate_date_range(data.start_date, data.end_date, label="Project")

        now = datetime.utcnow()
        project = Project(
            title=data.title.strip(),
            description=data.description.strip(),
            start_date=data.start_date,
            end_date=data.end_date,
            original_end_date=data.end_date,
            estimated_hours=data.estimated_hours,
            actual_hours=data.actual_hours,
            budget=data.budget,
            created_at=now,
            updated_at=now,
        )
        self.repo.add_project(project)
        self._commit("Project could not be stored.")
        self.db.refresh(project)
        logger.info("Project created", extra={"context": {"project_id": project.id}})
        return self._project_snapshot(project)

    def replace_project(self, project_id: UUID, data: ProjectData) -> ProjectSnapshot:
        project = self._require_project(project_id)
        self._validate_date_range(data.start_date, data.end_date, label="Project")

        project.title = data.title.strip()
        project.description = data.description.strip()
        project.start_date = data.start_date
        project.end_date = data.end_date
        project.estimated_hours = data.estimated_hours
        project.actual_hours = data.actual_hours
        project.budget = data.budget
        project.updated_at = datetime.utcnow()

        self._commit("Project could not be stored.")
        self.db.refresh(project)
        return self._project_snapshot(project)

    def delete_project(self, project_id: UUID) -> None:
        project = self._require_project(project_id)
        self.repo.delete_assignments_for_project(project.id)
        self.repo.delete_project(project)
        self.db.commit()
        logger.info("Project deleted", extra={"context": {"project_id": project_id}})

    def extend_project_end_date(self, project_id: UUID, new_end_date: date) -> ProjectSnapshot:
        project = self._require_project(project_id)
        self._validate_date_range(project.start_date, new_end_date, label="Project")

        # original_end_date is fixed at creation and survives extensions.
        project.end_date = new_end_date
        project.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(project)
        logger.info(
            "Project end date changed",
            extra={"context": {"project_id": project.id, "end_date": new_end_date.isoformat()}},
        )
        return self._project_snapshot(project)

    def record_project_actual_hours(self, project_id: UUID, hours: Decimal) -> ProjectSnapshot:
        project = self._require_project(project_id)
        project.actual_hours = hours
        project.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(project)
        return self._project_snapshot(project)

    # ---------- Assignments ----------
    def _validate_assignment_data(self, data: AssignmentData) -> None:
        self._validate_date_range(data.start_date, data.end_date, label="Assignment")
        if data.assignment_type is AssignmentType.FIXED:
            if data.work_days is not None:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Fixed assignments do not take work_days.",
                )
        elif data.work_days is not None:
            self._ensure_work_days_cover(data.work_days, data.start_date, data.end_date)

    @staticmethod
    def _apply_assignment_data(row: ProjectAssignment, data: AssignmentData) -> None:
        row.assignment_type = data.assignment_type
        row.start_date = data.start_date
        row.end_date = data.end_date

        if data.assignment_type is AssignmentType.FIXED:
            row.total_hours = data.total_hours if data.total_hours is not None else ZERO
            row.actual_hours = data.actual_hours if data.actual_hours is not None else ZERO
            row.hours_per_day = None
            row.work_days = None
            return

        row.hours_per_day = data.hours_per_day
        row.total_hours = None
        row.actual_hours = None
        if data.work_days is not None:
            row.work_days = encode_work_days(data.work_days)
        elif data.generate_work_days:
            row.work_days = encode_work_days(
                generate_work_days(data.start_date, data.end_date, data.hours_per_day or ZERO)
            )
        else:
            row.work_days = None

    def assign_member(self, project_id: UUID, data: AssignmentData) -> ProjectSnapshot:
        """Assign a member, replacing any assignment they already hold on the project."""

        project = self._require_project(project_id)
        if self.repo.get_member(data.member_id) is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="member_id must reference an existing member.",
            )
        self._validate_assignment_data(data)

        existing = self.repo.get_assignment(project.id, data.member_id)
        if existing is not None:
            self.repo.delete_assignment(existing)

        row = ProjectAssignment(
            project_id=project.id,
            member_id=data.member_id,
            position=self.repo.next_assignment_position(project.id),
        )
        self._apply_assignment_data(row, data)
        self.repo.add_assignment(row)
        self._commit("Member is already assigned to this project.")
        logger.info(
            "Member assigned to project",
            extra={
                "context": {
                    "project_id": project.id,
                    "member_id": data.member_id,
                    "replaced": existing is not None,
                }
            },
        )
        return self._project_snapshot(project)

    def update_assignment(self, project_id: UUID, member_id: UUID, data: AssignmentData) -> ProjectSnapshot:
        """Replace one assignment in place, keeping its position."""

        project = self._require_project(project_id)
        row = self._require_assignment(project.id, member_id)
        if data.member_id != member_id:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="member_id in payload must match the assignment being replaced.",
            )
        self._validate_assignment_data(data)
        self._apply_assignment_data(row, data)
        self._commit("Assignment could not be stored.")
        return self._project_snapshot(project)

    def remove_assignment(self, project_id: UUID, member_id: UUID) -> ProjectSnapshot:
        project = self._require_project(project_id)
        row = self._require_assignment(project.id, member_id)
        self.repo.delete_assignment(row)
        self.db.commit()
        logger.info(
            "Member removed from project",
            extra={"context": {"project_id": project.id, "member_id": member_id}},
        )
        return self._project_snapshot(project)

    def update_assignment_hours_per_day(
        self,
        project_id: UUID,
        member_id: UUID,
        hours_per_day: Decimal,
    ) -> ProjectSnapshot:
        """Change the uniform daily rate of a daily assignment.

        An existing work-day list gets every entry's hours overwritten with the
        new value (enabled flags are kept, per-day hour customizations are not);
        without a list a fresh default schedule is generated.
        """

        project = self._require_project(project_id)
        row = self._require_assignment(project.id, member_id)
        self._ensure_type(row, AssignmentType.DAILY)

        existing = decode_work_days(row.work_days)
        if existing is not None:
            work_days = with_uniform_hours(existing, hours_per_day)
        else:
            work_days = generate_work_days(row.start_date, row.end_date, hours_per_day)

        row.hours_per_day = hours_per_day
        row.work_days = encode_work_days(work_days)
        self.db.commit()
        logger.info(
            "Assignment hours per day updated",
            extra={
                "context": {
                    "project_id": project.id,
                    "member_id": member_id,
                    "overwrote_work_days": existing is not None,
                }
            },
        )
        return self._project_snapshot(project)

    def update_assignment_work_days(
        self,
        project_id: UUID,
        member_id: UUID,
        work_days: list[WorkDay],
    ) -> ProjectSnapshot:
        project = self._require_project(project_id)
        row = self._require_assignment(project.id, member_id)
        self._ensure_type(row, AssignmentType.DAILY)
        self._ensure_work_days_cover(work_days, row.start_date, row.end_date)

        row.work_days = encode_work_days(work_days)
        self.db.commit()
        return self._project_snapshot(project)

    def update_assignment_fixed_hours(
        self,
        project_id: UUID,
        member_id: UUID,
        *,
        total_hours: Decimal,
        actual_hours: Decimal,
    ) -> ProjectSnapshot:
        project = self._require_project(project_id)
        row = self._require_assignment(project.id, member_id)
        self._ensure_type(row, AssignmentType.FIXED)

        row.total_hours = total_hours
        row.actual_hours = actual_hours
        self.db.commit()
        return self._project_snapshot(project)
