"""Repository helpers for members, projects and assignments."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import and_, delete, func, select
from sqlalchemy.orm import Session

from app.models.entities import Member, Project, ProjectAssignment


class PlanningRepository:
    """Persistence operations used by the planning store service."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ---------- Members ----------
    def list_members(self) -> list[Member]:
        return self.db.scalars(select(Member).order_by(Member.created_at.asc(), Member.name.asc())).all()

    def get_member(self, member_id: UUID) -> Member | None:
        return self.db.scalar(select(Member).where(Member.id == member_id))

    def add_member(self, member: Member) -> Member:
        self.db.add(member)
        self.db.flush()
        return member

    def delete_member(self, member: Member) -> None:
        self.db.delete(member)
        self.db.flush()

    # ---------- Projects ----------
    def list_projects(self) -> list[Project]:
        return self.db.scalars(select(Project).order_by(Project.created_at.asc(), Project.title.asc())).all()

    def get_project(self, project_id: UUID) -> Project | None:
        return self.db.scalar(select(Project).where(Project.id == project_id))

    def add_project(self, project: Project) -> Project:
        self.db.add(project)
        self.db.flush()
        return project

    def delete_project(self, project: Project) -> None:
        self.db.delete(project)
        self.db.flush()

    # ---------- Assignments ----------
    def list_assignments(self) -> list[ProjectAssignment]:
        return self.db.scalars(
            select(ProjectAssignment).order_by(
                ProjectAssignment.project_id.asc(),
                ProjectAssignment.position.asc(),
            )
        ).all()

    def list_assignments_for_project(self, project_id: UUID) -> list[ProjectAssignment]:
        return self.db.scalars(
            select(ProjectAssignment)
            .where(ProjectAssignment.project_id == project_id)
            .order_by(ProjectAssignment.position.asc())
        ).all()

    def get_assignment(self, project_id: UUID, member_id: UUID) -> ProjectAssignment | None:
        return self.db.scalar(
            select(ProjectAssignment).where(
                and_(
                    ProjectAssignment.project_id == project_id,
                    ProjectAssignment.member_id == member_id,
                )
            )
        )

    def next_assignment_position(self, project_id: UUID) -> int:
        current = self.db.scalar(
            select(func.max(ProjectAssignment.position)).where(ProjectAssignment.project_id == project_id)
        )
        return 0 if current is None else current + 1

    def add_assignment(self, assignment: ProjectAssignment) -> ProjectAssignment:
        self.db.add(assignment)
        self.db.flush()
        return assignment

    def delete_assignment(self, assignment: ProjectAssignment) -> None:
        self.db.delete(assignment)
        self.db.flush()

    def delete_assignments_for_member(self, member_id: UUID) -> int:
        result = self.db.execute(delete(ProjectAssignment).where(ProjectAssignment.member_id == member_id))
        self.db.flush()
        return result.rowcount or 0

    def delete_assignments_for_project(self, project_id: UUID) -> int:
        result = self.db.execute(delete(ProjectAssignment).where(ProjectAssignment.project_id == project_id))
        self.db.flush()
        return result.rowcount or 0
