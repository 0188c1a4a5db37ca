"""Hour-accounting engine.

Pure functions over planning snapshots. Member stats, project stats and the
calendar views all resolve assignment hours through ``resolve_hours`` and
``day_hours`` so the three read paths cannot drift apart.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from app.models.entities import CompensationType
from app.models.snapshots import (
    Assignment,
    DailyAssignment,
    FixedAssignment,
    HoursMode,
    MemberSnapshot,
    ProjectSnapshot,
)
from app.services.calendar_utils import iso_day, month_days, span_days

ZERO = Decimal("0")
HUNDRED = Decimal("100")
# Average weeks per month; kept as 4.33 rather than 52/12 for compatibility.
WEEKS_PER_MONTH = Decimal("4.33")
STRESS_THRESHOLD = Decimal("80")
STRESS_SLOPE = Decimal("5")
Q1 = Decimal("0.1")


def _num(value: Decimal | None) -> Decimal:
    return ZERO if value is None else value


def round_hours(value: Decimal) -> Decimal:
    """Round to one decimal place, halves away from zero."""

    return value.quantize(Q1, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class MemberStats:
    member_id: UUID
    member_name: str
    total_hours: Decimal
    available_hours: Decimal
    utilization_rate: Decimal
    stress_level: Decimal


@dataclass(frozen=True, slots=True)
class ProjectStats:
    project_id: UUID
    project_title: str
    estimated_hours: Decimal
    actual_hours: Decimal
    budget: Decimal
    cost: Decimal
    profitability: Decimal


@dataclass(frozen=True, slots=True)
class CalendarEntry:
    project_id: UUID
    project_title: str
    hours: Decimal


@dataclass(frozen=True, slots=True)
class CalendarDay:
    date: date
    entries: tuple[CalendarEntry, ...]
    total_hours: Decimal


@dataclass(frozen=True, slots=True)
class PortfolioSummary:
    total_members: int
    total_projects: int
    active_projects: int
    total_budget: Decimal
    total_cost: Decimal
    total_profit: Decimal
    overall_profitability: Decimal
    high_stress_members: tuple[MemberStats, ...]


# ---------- Rate normalizer ----------
def effective_hourly_rate(member: MemberSnapshot) -> Decimal:
    if member.compensation_type is CompensationType.HOURLY:
        return _num(member.hourly_rate)

    monthly_work_hours = _num(member.hours_per_week) * WEEKS_PER_MONTH
    if monthly_work_hours <= ZERO:
        return ZERO
    return _num(member.monthly_salary) / monthly_work_hours


# ---------- Hour resolver ----------
def resolve_hours(assignment: Assignment, mode: HoursMode = HoursMode.ESTIMATE) -> Decimal:
    """Total hours of one assignment.

    Precedence: fixed totals, then an explicit work-day list, then the
    uniform daily rate over the ceil-rounded day span.
    """

    if isinstance(assignment, FixedAssignment):
        if mode is HoursMode.ACTUAL and assignment.actual_hours is not None:
            return assignment.actual_hours
        return _num(assignment.total_hours)

    if assignment.work_days is not None:
        return sum((day.hours for day in assignment.work_days if day.enabled), ZERO)

    return span_days(assignment.start_date, assignment.end_date) * _num(assignment.hours_per_day)


def estimated_hours(assignment: Assignment) -> Decimal:
    return resolve_hours(assignment, HoursMode.ESTIMATE)


def actual_hours(assignment: Assignment) -> Decimal:
    return resolve_hours(assignment, HoursMode.ACTUAL)


def _in_range(assignment: Assignment, day: date) -> bool:
    return assignment.start_date <= day <= assignment.end_date


def day_hours(assignment: Assignment, day: date) -> Decimal:
    """Hours an assignment contributes on one calendar date."""

    if isinstance(assignment, DailyAssignment):
        if assignment.work_days is not None:
            key = iso_day(day)
            for work_day in assignment.work_days:
                if work_day.date == key:
                    return work_day.hours if work_day.enabled else ZERO
            return ZERO
        return _num(assignment.hours_per_day) if _in_range(assignment, day) else ZERO

    if not _in_range(assignment, day):
        return ZERO
    total_days = span_days(assignment.start_date, assignment.end_date)
    if total_days <= 0:
        return ZERO
    return _num(assignment.total_hours) / total_days


def is_scheduled_on(assignment: Assignment, day: date) -> bool:
    """Whether the assignment puts its member on the project that day.

    An explicit work-day list gates membership through its enabled flag.
    """

    if isinstance(assignment, DailyAssignment) and assignment.work_days is not None:
        key = iso_day(day)
        return any(work_day.date == key and work_day.enabled for work_day in assignment.work_days)
    return _in_range(assignment, day)


# ---------- Aggregators ----------
def stress_level(utilization_rate: Decimal) -> Decimal:
    if utilization_rate > HUNDRED:
        return HUNDRED
    if utilization_rate > STRESS_THRESHOLD:
        return (utilization_rate - STRESS_THRESHOLD) * STRESS_SLOPE
    return ZERO


def member_stats(member: MemberSnapshot, projects: Iterable[ProjectSnapshot]) -> MemberStats:
    total_hours = ZERO
    for project in projects:
        assignment = project.assignment_for(member.id)
        if assignment is not None:
            total_hours += resolve_hours(assignment, HoursMode.ESTIMATE)

    available = _num(member.available_hours)
    utilization_rate = total_hours / available * HUNDRED if available > ZERO else ZERO

    return MemberStats(
        member_id=member.id,
        member_name=member.name,
        total_hours=total_hours,
        available_hours=available,
        utilization_rate=utilization_rate,
        stress_level=stress_level(utilization_rate),
    )


def project_stats(project: ProjectSnapshot, members: Iterable[MemberSnapshot]) -> ProjectStats:
    members_by_id = {member.id: member for member in members}

    cost = ZERO
    for assignment in project.assignments:
        member = members_by_id.get(assignment.member_id)
        if member is None:
            continue
        cost += resolve_hours(assignment, HoursMode.ACTUAL) * effective_hourly_rate(member)

    budget = _num(project.budget)
    profitability = (budget - cost) / budget * HUNDRED if budget > ZERO else ZERO

    return ProjectStats(
        project_id=project.id,
        project_title=project.title,
        estimated_hours=project.estimated_hours,
        actual_hours=project.actual_hours,
        budget=project.budget,
        cost=cost,
        profitability=profitability,
    )


# ---------- Calendar queries ----------
def projects_active_on_date(
    day: date,
    projects: Iterable[ProjectSnapshot],
    member_id: UUID | None = None,
) -> list[ProjectSnapshot]:
    active: list[ProjectSnapshot] = []
    for project in projects:
        if not project.is_active_on(day):
            continue
        if member_id is not None:
            assignment = project.assignment_for(member_id)
            if assignment is None or not is_scheduled_on(assignment, day):
                continue
        active.append(project)
    return active


def hours_for_member_on_date(day: date, member_id: UUID, projects: Iterable[ProjectSnapshot]) -> Decimal:
    total = ZERO
    for project in projects:
        if not project.is_active_on(day):
            continue
        assignment = project.assignment_for(member_id)
        if assignment is not None:
            total += day_hours(assignment, day)
    return round_hours(total)


def calendar_day(day: date, projects: Sequence[ProjectSnapshot], member_id: UUID | None = None) -> CalendarDay:
    entries: list[CalendarEntry] = []
    for project in projects_active_on_date(day, projects, member_id):
        if member_id is not None:
            assignment = project.assignment_for(member_id)
            hours = day_hours(assignment, day) if assignment is not None else ZERO
        else:
            hours = sum((day_hours(assignment, day) for assignment in project.assignments), ZERO)
        entries.append(
            CalendarEntry(project_id=project.id, project_title=project.title, hours=round_hours(hours))
        )

    if member_id is not None:
        total_hours = hours_for_member_on_date(day, member_id, projects)
    else:
        total_hours = round_hours(sum((entry.hours for entry in entries), ZERO))
    return CalendarDay(date=day, entries=tuple(entries), total_hours=total_hours)


def calendar_month(
    year: int,
    month: int,
    projects: Sequence[ProjectSnapshot],
    member_id: UUID | None = None,
) -> list[CalendarDay]:
    return [calendar_day(day, projects, member_id) for day in month_days(year, month)]


# ---------- Portfolio ----------
def portfolio_summary(
    members: Sequence[MemberSnapshot],
    projects: Sequence[ProjectSnapshot],
    *,
    today: date,
    high_stress_threshold: Decimal = Decimal("50"),
) -> PortfolioSummary:
    all_member_stats = [member_stats(member, projects) for member in members]
    all_project_stats = [project_stats(project, members) for project in projects]

    total_budget = sum((_num(project.budget) for project in projects), ZERO)
    total_cost = sum((stats.cost for stats in all_project_stats), ZERO)
    total_profit = total_budget - total_cost
    overall_profitability = total_profit / total_budget * HUNDRED if total_budget > ZERO else ZERO

    return PortfolioSummary(
        total_members=len(members),
        total_projects=len(projects),
        active_projects=sum(1 for project in projects if project.end_date >= today),
        total_budget=total_budget,
        total_cost=total_cost,
        total_profit=total_profit,
        overall_profitability=overall_profitability,
        high_stress_members=tuple(
            stats for stats in all_member_stats if stats.stress_level > high_stress_threshold
        ),
    )
