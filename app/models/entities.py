"""ORM entities for the resource planning schema."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class CompensationType(str, enum.Enum):
    HOURLY = "hourly"
    MONTHLY = "monthly"


class AssignmentType(str, enum.Enum):
    DAILY = "daily"
    FIXED = "fixed"


class Member(Base):
    __tablename__ = "members"
    __table_args__ = (
        CheckConstraint("hourly_rate IS NULL OR hourly_rate >= 0", name="ck_members_hourly_rate_non_negative"),
        CheckConstraint(
            "monthly_salary IS NULL OR monthly_salary >= 0",
            name="ck_members_monthly_salary_non_negative",
        ),
        Index("ix_members_name", "name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    compensation_type: Mapped[CompensationType] = mapped_column(
        SQLEnum(
            CompensationType,
            name="compensation_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=CompensationType.HOURLY,
    )
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    monthly_salary: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    hours_per_week: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("40.00"))
    available_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=Decimal("160.00"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_projects_date_range"),
        Index("ix_projects_start_end", "start_date", "end_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(String(2000), nullable=False, default="")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    original_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    estimated_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    actual_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    budget: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class ProjectAssignment(Base):
    __tablename__ = "project_assignments"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_project_assignments_date_range"),
        Index("ix_project_assignments_project_id", "project_id"),
        Index("ix_project_assignments_member_id", "member_id"),
        UniqueConstraint("project_id", "member_id", name="uq_project_assignments_project_member"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False)
    member_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("members.id"), nullable=False)
    # Insertion order within the project; a replaced assignment moves to the end.
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assignment_type: Mapped[AssignmentType] = mapped_column(
        SQLEnum(
            AssignmentType,
            name="assignment_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours_per_day: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    total_hours: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    actual_hours: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    # [{"date": "YYYY-MM-DD", "hours": "8.00", "enabled": true}, ...]
    work_days: Mapped[list | None] = mapped_column(JSON, nullable=True)
