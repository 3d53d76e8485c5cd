"""API routers."""
from . import organizations, projects, tasks, teams, finance, users, notifications

__all__ = ["organizations", "projects", "tasks", "teams", "finance", "users", "notifications"]
