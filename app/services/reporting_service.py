"""Read paths: statistics, reports, dashboard and calendar views."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.models.snapshots import PlanningSnapshot
from app.services import planning_engine as engine
from app.services.planning_engine import CalendarDay, MemberStats, PortfolioSummary, ProjectStats
from app.services.planning_service import PlanningService

Q1 = Decimal("0.1")
Q2 = Decimal("0.01")


def _q2(value: Decimal) -> str:
    return str(value.quantize(Q2))


def _q1(value: Decimal) -> str:
    return str(value.quantize(Q1))


class ReportingService:
    """Service exposing the hour-accounting engine over the current store state."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.store = PlanningService(db)
        self.settings = get_settings()

    def _snapshot(self) -> PlanningSnapshot:
        return self.store.snapshot()

    # ---------- Serialization ----------
    @staticmethod
    def serialize_member_stats(stats: MemberStats) -> dict[str, object]:
        return {
            "member_id": str(stats.member_id),
            "member_name": stats.member_name,
            "total_hours": _q2(stats.total_hours),
            "available_hours": _q2(stats.available_hours),
            "utilization_rate": _q2(stats.utilization_rate),
            "stress_level": _q2(stats.stress_level),
        }

    @staticmethod
    def serialize_project_stats(stats: ProjectStats) -> dict[str, object]:
        return {
            "project_id": str(stats.project_id),
            "project_title": stats.project_title,
            "estimated_hours": _q2(stats.estimated_hours),
            "actual_hours": _q2(stats.actual_hours),
            "budget": _q2(stats.budget),
            "cost": _q2(stats.cost),
            "profitability": _q2(stats.profitability),
        }

    @staticmethod
    def serialize_calendar_day(day: CalendarDay) -> dict[str, object]:
        return {
            "date": day.date.isoformat(),
            "projects": [
                {
                    "project_id": str(entry.project_id),
                    "project_title": entry.project_title,
                    "hours": _q1(entry.hours),
                }
                for entry in day.entries
            ],
            "total_hours": _q1(day.total_hours),
        }

    @classmethod
    def serialize_summary(cls, summary: PortfolioSummary) -> dict[str, object]:
        return {
            "total_members": summary.total_members,
            "total_projects": summary.total_projects,
            "active_projects": summary.active_projects,
            "total_budget": _q2(summary.total_budget),
            "total_cost": _q2(summary.total_cost),
            "total_profit": _q2(summary.total_profit),
            "overall_profitability": _q2(summary.overall_profitability),
            "high_stress_members": [cls.serialize_member_stats(stats) for stats in summary.high_stress_members],
        }

    # ---------- Stats ----------
    def member_stats(self, member_id: UUID) -> MemberStats:
        snapshot = self._snapshot()
        member = snapshot.member(member_id)
        if member is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found.")
        return engine.member_stats(member, snapshot.projects)

    def project_stats(self, project_id: UUID) -> ProjectStats:
        snapshot = self._snapshot()
        project = snapshot.project(project_id)
        if project is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
        return engine.project_stats(project, snapshot.members)

    def all_member_stats(self) -> list[MemberStats]:
        snapshot = self._snapshot()
        return [engine.member_stats(member, snapshot.projects) for member in snapshot.members]

    def all_project_stats(self) -> list[ProjectStats]:
        snapshot = self._snapshot()
        return [engine.project_stats(project, snapshot.members) for project in snapshot.projects]

    def dashboard_summary(self, *, today: date | None = None) -> PortfolioSummary:
        snapshot = self._snapshot()
        return engine.portfolio_summary(
            snapshot.members,
            snapshot.projects,
            today=today or date.today(),
            high_stress_threshold=Decimal(self.settings.high_stress_threshold),
        )

    # ---------- Calendar ----------
    def _ensure_member(self, snapshot: PlanningSnapshot, member_id: UUID | None) -> None:
        if member_id is not None and snapshot.member(member_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found.")

    def calendar_day(self, day: date, member_id: UUID | None = None) -> CalendarDay:
        snapshot = self._snapshot()
        self._ensure_member(snapshot, member_id)
        return engine.calendar_day(day, snapshot.projects, member_id)

    def member_hours_on_date(self, day: date, member_id: UUID) -> Decimal:
        snapshot = self._snapshot()
        self._ensure_member(snapshot, member_id)
        return engine.hours_for_member_on_date(day, member_id, snapshot.projects)

    def calendar_month(self, year: int, month: int, member_id: UUID | None = None) -> list[CalendarDay]:
        if not 1 <= month <= 12:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="month must be between 1 and 12.",
            )
        snapshot = self._snapshot()
        self._ensure_member(snapshot, member_id)
        return engine.calendar_month(year, month, snapshot.projects, member_id)
