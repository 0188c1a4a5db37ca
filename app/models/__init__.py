"""ORM model package."""

from app.models.entities import (
    AssignmentType,
    CompensationType,
    Member,
    Project,
    ProjectAssignment,
)

__all__ = [
    "AssignmentType",
    "CompensationType",
    "Member",
    "Project",
    "ProjectAssignment",
]
