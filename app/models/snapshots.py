"""Immutable snapshots of planning entities.

The hour-accounting engine works exclusively on these frozen value objects.
ORM rows are converted into snapshots by the planning service, so every read
path (member stats, project stats, calendar) sees the same data shape.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar, Union
from uuid import UUID

from app.models.entities import AssignmentType, CompensationType


class HoursMode(str, enum.Enum):
    ESTIMATE = "estimate"
    ACTUAL = "actual"


@dataclass(frozen=True, slots=True)
class WorkDay:
    """Hours override for a single calendar date, keyed by ISO date string."""

    date: str
    hours: Decimal
    enabled: bool


@dataclass(frozen=True, slots=True)
class DailyAssignment:
    member_id: UUID
    start_date: date
    end_date: date
    hours_per_day: Decimal | None = None
    # When present the list is authoritative over hours_per_day.
    work_days: tuple[WorkDay, ...] | None = None

    assignment_type: ClassVar[AssignmentType] = AssignmentType.DAILY


@dataclass(frozen=True, slots=True)
class FixedAssignment:
    member_id: UUID
    start_date: date
    end_date: date
    total_hours: Decimal | None = None
    actual_hours: Decimal | None = None

    assignment_type: ClassVar[AssignmentType] = AssignmentType.FIXED


Assignment = Union[DailyAssignment, FixedAssignment]


@dataclass(frozen=True, slots=True)
class MemberSnapshot:
    id: UUID
    name: str
    role: str
    compensation_type: CompensationType
    hours_per_week: Decimal
    available_hours: Decimal
    hourly_rate: Decimal | None = None
    monthly_salary: Decimal | None = None


@dataclass(frozen=True, slots=True)
class ProjectSnapshot:
    id: UUID
    title: str
    description: str
    start_date: date
    end_date: date
    original_end_date: date
    estimated_hours: Decimal
    actual_hours: Decimal
    budget: Decimal
    assignments: tuple[Assignment, ...] = ()

    def assignment_for(self, member_id: UUID) -> Assignment | None:
        for assignment in self.assignments:
            if assignment.member_id == member_id:
                return assignment
        return None

    def is_active_on(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def was_extended(self) -> bool:
        return self.original_end_date != self.end_date


@dataclass(frozen=True, slots=True)
class PlanningSnapshot:
    """Point-in-time view of the whole store."""

    members: tuple[MemberSnapshot, ...]
    projects: tuple[ProjectSnapshot, ...]

    def member(self, member_id: UUID) -> MemberSnapshot | None:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def project(self, project_id: UUID) -> ProjectSnapshot | None:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None
