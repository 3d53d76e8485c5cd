"""Derived project status computed from a project's task statuses.

A project's status is never stored. It is recomputed on every read from
the current task collection, so it cannot go stale:
- No tasks means the project is still planned
- Any stuck task puts the whole project at risk, even at 100% completion
- Otherwise completion decides between completed, planned and in progress
"""
import math
from dataclasses import dataclass
from typing import Iterable

from .models import ProjectHealth, TaskStatus


@dataclass(frozen=True)
class ProjectStatusSummary:
    """Aggregate status of a project."""

    status: ProjectHealth
    completion_percentage: int


def completion_percentage(completed: int, total: int) -> int:
    """Percentage of completed tasks, rounded half up (2/3 -> 67, 1/8 -> 13)."""
    if total == 0:
        return 0
    return math.floor(100 * completed / total + 0.5)


def calculate_project_status(statuses: Iterable[TaskStatus]) -> ProjectStatusSummary:
    """
    Compute a project's status and completion from its task statuses.

    Args:
        statuses: Status of every task in the project (may be empty)

    Returns:
        ProjectStatusSummary with the derived status and completion percentage
    """
    statuses = [TaskStatus(s) for s in statuses]
    if not statuses:
        return ProjectStatusSummary(ProjectHealth.PLANNED, 0)

    completed = sum(1 for s in statuses if s == TaskStatus.COMPLETED)
    percentage = completion_percentage(completed, len(statuses))

    if TaskStatus.STUCK in statuses:
        status = ProjectHealth.AT_RISK
    elif percentage == 100:
        status = ProjectHealth.COMPLETED
    elif percentage == 0 and all(s == TaskStatus.PLANNED for s in statuses):
        status = ProjectHealth.PLANNED
    else:
        status = ProjectHealth.IN_PROGRESS

    return ProjectStatusSummary(status, percentage)
