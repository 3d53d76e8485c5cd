"""CRUD operations for organizations, projects, tasks, comments and notifications.

The task update flow and the bulk reorder live in task_mutation and reorder;
everything here is validate-then-persist.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from . import models, schemas
from .errors import ConflictError, NotFoundError, ValidationError
from .notifications import NotificationService

logger = logging.getLogger("taskboard-core.crud")


def commit_or_rollback(db: Session, action: str) -> None:
    """
    Commit the session, rolling back on any store error.

    Args:
        db: Database session
        action: Short description of the write, used in error messages

    Raises:
        ConflictError: If the commit violates a uniqueness constraint
        SQLAlchemyError: Any other store failure, after rollback
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error while trying to {action}: {e.orig}")
        raise ConflictError(f"Could not {action}: conflicts with an existing record.") from e
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Store error while trying to {action}", exc_info=True)
        raise


# ============================================================================
# Users
# ============================================================================

def create_user(db: Session, email: str, full_name: Optional[str] = None) -> models.User:
    """Create a user record."""
    user = models.User(email=email, full_name=full_name)
    db.add(user)
    commit_or_rollback(db, f"create user {email}")
    db.refresh(user)
    logger.debug(f"Created user {user.id} ({user.email})")
    return user


def get_user(db: Session, user_id: UUID) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


# ============================================================================
# Organizations and membership
# ============================================================================

def create_organization(db: Session, name: str) -> models.Organization:
    """
    Create a new organization.

    Args:
        db: Database session
        name: Organization display name

    Returns:
        Created organization instance
    """
    org = models.Organization(name=name)
    db.add(org)
    commit_or_rollback(db, "create organization")
    db.refresh(org)
    logger.info(f"Created organization {org.id} ({org.name})")
    return org


def get_organization(db: Session, organization_id: UUID) -> models.Organization:
    """
    Get an organization by ID.

    Raises:
        NotFoundError: If no such organization exists
    """
    org = db.query(models.Organization).filter(models.Organization.id == organization_id).first()
    if not org:
        raise NotFoundError("Organization not found.")
    return org


def add_organization_member(
    db: Session,
    organization_id: UUID,
    user_id: UUID,
    role: models.MemberRole = models.MemberRole.EMPLOYEE,
) -> models.OrganizationMember:
    """
    Add a user to an organization with a role.

    Raises:
        NotFoundError: If the organization or user does not exist
        ConflictError: If the user is already a member
    """
    get_organization(db, organization_id)
    if not get_user(db, user_id):
        raise NotFoundError("User not found.")

    member = models.OrganizationMember(
        organization_id=organization_id,
        user_id=user_id,
        role=role,
    )
    db.add(member)
    commit_or_rollback(db, "add organization member")
    db.refresh(member)
    logger.info(f"Added user {user_id} to org {organization_id} as {models.MemberRole(role).value}")
    return member


def get_organization_members(db: Session, organization_id: UUID) -> list[models.OrganizationMember]:
    """List members of an organization, oldest first."""
    return (
        db.query(models.OrganizationMember)
        .filter(models.OrganizationMember.organization_id == organization_id)
        .order_by(models.OrganizationMember.joined_at.asc())
        .all()
    )


def _get_membership(db: Session, organization_id: UUID, user_id: UUID) -> models.OrganizationMember:
    member = (
        db.query(models.OrganizationMember)
        .filter(
            models.OrganizationMember.organization_id == organization_id,
            models.OrganizationMember.user_id == user_id,
        )
        .first()
    )
    if not member:
        raise NotFoundError("Member not found in this organization.")
    return member


def update_organization_member_role(
    db: Session,
    organization_id: UUID,
    user_id: UUID,
    role: models.MemberRole,
) -> models.OrganizationMember:
    """Change a member's organization-wide role."""
    member = _get_membership(db, organization_id, user_id)
    member.role = role
    commit_or_rollback(db, "update member role")
    db.refresh(member)
    logger.info(f"Changed role of {user_id} in org {organization_id} to {member.role.value}")
    return member


def remove_organization_member(db: Session, organization_id: UUID, user_id: UUID) -> None:
    """Remove a user from an organization."""
    member = _get_membership(db, organization_id, user_id)
    db.delete(member)
    commit_or_rollback(db, "remove organization member")
    logger.info(f"Removed user {user_id} from org {organization_id}")


def get_member_role(
    db: Session,
    user_id: UUID,
    organization_id: UUID,
) -> Optional[models.MemberRole]:
    """
    Get user's role in an organization.

    Args:
        db: Database session
        user_id: User UUID
        organization_id: Organization UUID

    Returns:
        MemberRole enum or None if not a member
    """
    membership = (
        db.query(models.OrganizationMember)
        .filter(
            models.OrganizationMember.user_id == user_id,
            models.OrganizationMember.organization_id == organization_id,
        )
        .first()
    )
    return membership.role if membership else None


def filter_member_ids(db: Session, organization_id: UUID, user_ids: Iterable[UUID]) -> set[UUID]:
    """Return the subset of user_ids that hold membership in the organization."""
    user_ids = set(user_ids)
    if not user_ids:
        return set()
    rows = (
        db.query(models.OrganizationMember.user_id)
        .filter(
            models.OrganizationMember.organization_id == organization_id,
            models.OrganizationMember.user_id.in_(user_ids),
        )
        .all()
    )
    return {user_id for (user_id,) in rows}


def require_members(
    db: Session,
    organization_id: UUID,
    user_ids: Iterable[UUID],
    field: str,
) -> list[models.User]:
    """
    Resolve user ids that must all belong to the organization.

    Args:
        db: Database session
        organization_id: Organization the users must be members of
        user_ids: Candidate user ids (duplicates are collapsed)
        field: Request field name reported on failure

    Returns:
        User instances for the given ids

    Raises:
        ValidationError: Naming every id that is not a member
    """
    wanted = list(dict.fromkeys(user_ids))
    if not wanted:
        return []
    valid = filter_member_ids(db, organization_id, wanted)
    invalid = [uid for uid in wanted if uid not in valid]
    if invalid:
        logger.warning(f"Rejected {field}: {len(invalid)} id(s) are not members of org {organization_id}")
        raise ValidationError(
            "One or more specified users are invalid or not members of this organization.",
            field=field,
            invalid_ids=invalid,
        )
    return db.query(models.User).filter(models.User.id.in_(wanted)).all()


# ============================================================================
# Teams
# ============================================================================

def get_teams(
    db: Session,
    organization_id: UUID,
    user_id: UUID,
    role: models.MemberRole,
    skip: int = 0,
    limit: int = 25,
) -> tuple[list[models.Team], int]:
    """
    Get teams visible to a user, with pagination.

    Admins and super admins see every team in the organization. Other roles
    see the teams they lead or belong to.

    Returns:
        Tuple of (teams, total_count)
    """
    query = db.query(models.Team).filter(models.Team.organization_id == organization_id)

    if models.MemberRole(role) < models.MemberRole.ADMIN:
        query = query.filter(
            or_(
                models.Team.leads.any(models.User.id == user_id),
                models.Team.members.any(models.User.id == user_id),
            )
        )

    total = query.count()
    teams = query.order_by(models.Team.name.asc()).offset(skip).limit(limit).all()
    return teams, total


def get_team_in_org(db: Session, organization_id: UUID, team_id: UUID) -> models.Team:
    """
    Get a team scoped to its organization.

    Raises:
        NotFoundError: If the team does not exist in this organization
    """
    team = (
        db.query(models.Team)
        .filter(
            models.Team.id == team_id,
            models.Team.organization_id == organization_id,
        )
        .first()
    )
    if not team:
        raise NotFoundError("Team not found in this organization.")
    return team


def require_teams(db: Session, organization_id: UUID, team_ids: Iterable[UUID]) -> list[models.Team]:
    """
    Resolve team ids that must all belong to the organization.

    Raises:
        ValidationError: Naming every id that is not a team of the organization
    """
    wanted = list(dict.fromkeys(team_ids))
    if not wanted:
        return []
    teams = (
        db.query(models.Team)
        .filter(
            models.Team.organization_id == organization_id,
            models.Team.id.in_(wanted),
        )
        .all()
    )
    found = {t.id for t in teams}
    invalid = [tid for tid in wanted if tid not in found]
    if invalid:
        raise ValidationError(
            "One or more specified teams are invalid or not part of this organization.",
            field="team_ids",
            invalid_ids=invalid,
        )
    return teams


def create_team(db: Session, organization_id: UUID, team_data: schemas.TeamCreate) -> models.Team:
    """
    Create a team with its leads and members.

    Raises:
        ValidationError: If a lead or member is not an organization member
    """
    get_organization(db, organization_id)
    leads = require_members(db, organization_id, team_data.lead_ids, "lead_ids")
    members = require_members(db, organization_id, team_data.member_ids, "member_ids")

    team = models.Team(organization_id=organization_id, name=team_data.name)
    team.leads = leads
    team.members = members
    db.add(team)
    commit_or_rollback(db, "create team")
    db.refresh(team)
    logger.info(f"Created team {team.id} ({team.name}) in org {organization_id}")
    return team


def update_team(
    db: Session,
    organization_id: UUID,
    team_id: UUID,
    team_update: schemas.TeamUpdate,
) -> models.Team:
    """
    Update a team. Lead and member lists replace the existing sets when given.

    Raises:
        NotFoundError: If the team does not exist in this organization
        ValidationError: If a lead or member is not an organization member
    """
    team = get_team_in_org(db, organization_id, team_id)
    changes = team_update.model_dump(exclude_unset=True)

    if changes.get("name", "") is None:
        raise ValidationError("Team name cannot be empty.", field="name")

    lead_ids = changes.pop("lead_ids", None)
    member_ids = changes.pop("member_ids", None)
    leads = require_members(db, organization_id, lead_ids, "lead_ids") if lead_ids is not None else None
    members = require_members(db, organization_id, member_ids, "member_ids") if member_ids is not None else None

    if "name" in changes:
        team.name = changes["name"]
    if leads is not None:
        team.leads = leads
    if members is not None:
        team.members = members

    commit_or_rollback(db, "update team")
    db.refresh(team)
    logger.info(f"Updated team {team.id}")
    return team


def delete_team(db: Session, organization_id: UUID, team_id: UUID) -> None:
    """Delete a team with its lead, member and project links."""
    team = get_team_in_org(db, organization_id, team_id)
    db.delete(team)
    commit_or_rollback(db, "delete team")
    logger.info(f"Deleted team {team_id} from org {organization_id}")


# ============================================================================
# Projects
# ============================================================================

def create_project(
    db: Session,
    organization_id: UUID,
    project_data: schemas.ProjectCreate,
    user_id: Optional[UUID] = None,
) -> models.Project:
    """
    Create a new project.

    Args:
        db: Database session
        organization_id: Parent organization UUID
        project_data: Project creation data
        user_id: Optional user ID (creator)

    Returns:
        Created project instance

    Raises:
        NotFoundError: If the organization does not exist
        ValidationError: If a team lead is not an organization member or a
            team belongs to another organization
    """
    get_organization(db, organization_id)
    leads = require_members(db, organization_id, project_data.team_lead_ids, "team_lead_ids")
    teams = require_teams(db, organization_id, project_data.team_ids)

    db_project = models.Project(
        organization_id=organization_id,
        title=project_data.title,
        description=project_data.description,
        start_date=project_data.start_date,
        end_date=project_data.end_date,
        created_by_user_id=user_id,
    )
    db_project.team_leads = leads
    db_project.teams = teams
    db.add(db_project)
    commit_or_rollback(db, "create project")
    db.refresh(db_project)
    logger.info(f"Created project {db_project.id} ({db_project.title}) in org {organization_id}")
    return db_project


def get_project_in_org(db: Session, organization_id: UUID, project_id: UUID) -> models.Project:
    """
    Get a project scoped to its organization.

    Raises:
        NotFoundError: If the project does not exist in this organization
    """
    project = (
        db.query(models.Project)
        .filter(
            models.Project.id == project_id,
            models.Project.organization_id == organization_id,
        )
        .first()
    )
    if not project:
        raise NotFoundError("Project not found or does not belong to your organization.")
    return project


def get_projects(
    db: Session,
    organization_id: UUID,
    user_id: UUID,
    role: models.MemberRole,
    skip: int = 0,
    limit: int = 25,
    is_archived: bool = False,
) -> tuple[list[models.Project], int]:
    """
    Get projects visible to a user, with pagination.

    Admins and super admins see every project in the organization. Other
    roles see the projects they lead, plus the projects attached to a team
    they lead or belong to.

    Returns:
        Tuple of (projects, total_count)
    """
    query = db.query(models.Project).filter(
        models.Project.organization_id == organization_id,
        models.Project.is_archived == is_archived,
    )

    if models.MemberRole(role) < models.MemberRole.ADMIN:
        query = query.filter(
            or_(
                models.Project.team_leads.any(models.User.id == user_id),
                models.Project.teams.any(
                    or_(
                        models.Team.leads.any(models.User.id == user_id),
                        models.Team.members.any(models.User.id == user_id),
                    )
                ),
            )
        )

    total = query.count()
    projects = query.order_by(models.Project.created_at.desc()).offset(skip).limit(limit).all()
    return projects, total


def update_project(
    db: Session,
    organization_id: UUID,
    project_id: UUID,
    project_update: schemas.ProjectUpdate,
) -> models.Project:
    """
    Update a project. Team leads and teams are replaced as a whole when given.

    Raises:
        NotFoundError: If the project does not exist in this organization
        ValidationError: If a new team lead is not an organization member
            or a new team is not a team of the organization
    """
    project = get_project_in_org(db, organization_id, project_id)
    changes = project_update.model_dump(exclude_unset=True)

    if changes.get("title", "") is None:
        raise ValidationError("Project title cannot be empty.", field="title")

    lead_ids = changes.pop("team_lead_ids", None)
    leads = require_members(db, organization_id, lead_ids, "team_lead_ids") if lead_ids is not None else None
    team_ids = changes.pop("team_ids", None)
    teams = require_teams(db, organization_id, team_ids) if team_ids is not None else None

    for field, value in changes.items():
        setattr(project, field, value)
    if leads is not None:
        project.team_leads = leads
    if teams is not None:
        project.teams = teams

    commit_or_rollback(db, "update project")
    db.refresh(project)
    logger.info(f"Updated project {project.id}")
    return project


def archive_project(db: Session, organization_id: UUID, project_id: UUID, is_archived: bool) -> models.Project:
    """Archive or restore a project."""
    project = get_project_in_org(db, organization_id, project_id)
    project.is_archived = is_archived
    commit_or_rollback(db, "archive project")
    db.refresh(project)
    logger.info(f"Set archived={is_archived} on project {project.id}")
    return project


def delete_project(db: Session, organization_id: UUID, project_id: UUID) -> None:
    """Delete a project with its tasks, comments and lead links."""
    project = get_project_in_org(db, organization_id, project_id)
    db.delete(project)
    commit_or_rollback(db, "delete project")
    logger.info(f"Deleted project {project_id}")


# ============================================================================
# Tasks
# ============================================================================

def get_task_in_project(
    db: Session,
    organization_id: UUID,
    project_id: UUID,
    task_id: UUID,
) -> tuple[models.Project, models.Task]:
    """
    Get a task scoped to its project and organization.

    Returns:
        Tuple of (project, task)

    Raises:
        NotFoundError: If the project is not in the organization or the task
            is not in the project
    """
    project = get_project_in_org(db, organization_id, project_id)
    task = (
        db.query(models.Task)
        .filter(
            models.Task.id == task_id,
            models.Task.project_id == project.id,
        )
        .first()
    )
    if not task:
        raise NotFoundError("Task not found in this project.")
    return project, task


def get_tasks_for_project(
    db: Session,
    organization_id: UUID,
    project_id: UUID,
    skip: int = 0,
    limit: int = 25,
) -> tuple[list[models.Task], int]:
    """
    Get a project's tasks in display order, with pagination.

    Returns:
        Tuple of (tasks, total_count)
    """
    project = get_project_in_org(db, organization_id, project_id)
    query = db.query(models.Task).filter(models.Task.project_id == project.id)
    total = query.count()
    tasks = (
        query.order_by(models.Task.display_order.asc(), models.Task.created_at.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return tasks, total


def next_display_order(db: Session, project_id: UUID) -> int:
    """Display order for a task appended to the project (0 for the first task)."""
    current_max = (
        db.query(func.max(models.Task.display_order))
        .filter(models.Task.project_id == project_id)
        .scalar()
    )
    return 0 if current_max is None else current_max + 1


def create_task(
    db: Session,
    organization_id: UUID,
    project_id: UUID,
    task_data: schemas.TaskCreate,
) -> models.Task:
    """
    Create a new task at the end of the project's display order.

    Args:
        db: Database session
        organization_id: Organization UUID
        project_id: Parent project UUID
        task_data: Task creation data

    Returns:
        Created Task object

    Raises:
        NotFoundError: If the project does not exist in this organization
        ValidationError: If an assignee is not an organization member
    """
    project = get_project_in_org(db, organization_id, project_id)
    assignees = require_members(db, organization_id, task_data.assignee_ids, "assignee_ids")

    task = models.Task(
        project_id=project.id,
        title=task_data.title,
        description=task_data.description,
        status=models.TaskStatus.PLANNED,
        start_date=task_data.start_date,
        end_date=task_data.end_date,
        expense=task_data.expense,
        color=task_data.color,
        display_order=next_display_order(db, project.id),
    )
    task.assignees = assignees
    db.add(task)
    commit_or_rollback(db, "create task")
    db.refresh(task)
    logger.info(f"Created task {task.id} ({task.title}) in project {project.id} at position {task.display_order}")
    return task


def delete_task(db: Session, organization_id: UUID, project_id: UUID, task_id: UUID) -> None:
    """Delete a task together with its comments and assignee links."""
    _, task = get_task_in_project(db, organization_id, project_id, task_id)
    db.delete(task)
    commit_or_rollback(db, "delete task")
    logger.info(f"Deleted task {task_id} from project {project_id}")


def add_comment(
    db: Session,
    organization_id: UUID,
    project_id: UUID,
    task_id: UUID,
    author_id: UUID,
    content: str,
    notifier: Optional[NotificationService] = None,
) -> models.Comment:
    """
    Append a comment to a task and notify the people following it.

    Args:
        db: Database session
        organization_id: Organization UUID
        project_id: Project UUID
        task_id: Task UUID
        author_id: Commenting user
        content: Comment body
        notifier: Notification service for the fan-out (skipped when None)

    Returns:
        Created Comment
    """
    project, task = get_task_in_project(db, organization_id, project_id, task_id)
    if not content or not content.strip():
        raise ValidationError("Comment content is required.", field="content")

    comment = models.Comment(task_id=task.id, author_id=author_id, content=content)
    db.add(comment)
    commit_or_rollback(db, "add comment")
    db.refresh(comment)
    logger.info(f"Added comment {comment.id} to task {task.id}")

    if notifier is not None:
        notifier.notify_new_comment(db, task, project, comment)
    return comment


# ============================================================================
# Finance
# ============================================================================

FINANCE_SORT_FIELDS = ("date", "amount", "created_at")


def get_finance_summary(db: Session, organization_id: UUID, project_id: Optional[UUID] = None) -> dict:
    """
    Sum the organization's income and expense entries.

    Args:
        db: Database session
        organization_id: Organization UUID
        project_id: Restrict the totals to one project when given

    Returns:
        Dict with total_income, total_expenses and balance

    Raises:
        NotFoundError: If project_id is not a project of this organization
    """
    query = db.query(models.FinanceEntry.type, func.sum(models.FinanceEntry.amount)).filter(
        models.FinanceEntry.organization_id == organization_id
    )
    if project_id is not None:
        get_project_in_org(db, organization_id, project_id)
        query = query.filter(models.FinanceEntry.project_id == project_id)

    totals = dict(query.group_by(models.FinanceEntry.type).all())
    income = totals.get(models.FinanceEntryType.INCOME, Decimal("0"))
    expenses = totals.get(models.FinanceEntryType.EXPENSE, Decimal("0"))
    return {
        "project_id": project_id,
        "total_income": income,
        "total_expenses": expenses,
        "balance": income - expenses,
    }


def get_finance_entries(
    db: Session,
    organization_id: UUID,
    project_id: Optional[UUID] = None,
    skip: int = 0,
    limit: int = 25,
    sort_by: str = "date",
    sort_order: str = "desc",
) -> tuple[list[models.FinanceEntry], int]:
    """
    Get the organization's finance entries, with pagination and sorting.

    Returns:
        Tuple of (entries, total_count)

    Raises:
        NotFoundError: If project_id is not a project of this organization
        ValidationError: If sort_by or sort_order is not supported
    """
    if sort_by not in FINANCE_SORT_FIELDS:
        raise ValidationError(f"Cannot sort finance entries by {sort_by!r}.", field="sort_by")
    if sort_order not in ("asc", "desc"):
        raise ValidationError("sort_order must be 'asc' or 'desc'.", field="sort_order")

    query = db.query(models.FinanceEntry).filter(models.FinanceEntry.organization_id == organization_id)
    if project_id is not None:
        get_project_in_org(db, organization_id, project_id)
        query = query.filter(models.FinanceEntry.project_id == project_id)

    column = getattr(models.FinanceEntry, sort_by)
    ordering = column.asc() if sort_order == "asc" else column.desc()
    total = query.count()
    entries = query.order_by(ordering, models.FinanceEntry.created_at.desc()).offset(skip).limit(limit).all()
    return entries, total


def create_finance_entry(
    db: Session,
    organization_id: UUID,
    entry_data: schemas.FinanceEntryCreate,
) -> models.FinanceEntry:
    """
    Book an income or expense entry.

    Raises:
        NotFoundError: If the project is not in the organization, or the task
            is not in that project
        ValidationError: If a task is given without its project
    """
    get_organization(db, organization_id)
    if entry_data.task_id is not None and entry_data.project_id is None:
        raise ValidationError("A task can only be referenced together with its project.", field="task_id")
    if entry_data.project_id is not None:
        get_project_in_org(db, organization_id, entry_data.project_id)
    if entry_data.task_id is not None:
        get_task_in_project(db, organization_id, entry_data.project_id, entry_data.task_id)

    entry = models.FinanceEntry(
        organization_id=organization_id,
        project_id=entry_data.project_id,
        task_id=entry_data.task_id,
        type=entry_data.type,
        amount=Decimal(str(entry_data.amount)),
        description=entry_data.description,
        date=entry_data.date,
    )
    db.add(entry)
    commit_or_rollback(db, "create finance entry")
    db.refresh(entry)
    logger.info(f"Booked {entry.type.value} of {entry.amount} in org {organization_id}")
    return entry


# ============================================================================
# Notifications
# ============================================================================

def get_notifications(
    db: Session,
    user_id: UUID,
    unread_only: bool = False,
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[models.Notification], int]:
    """
    Get a user's notifications, newest first.

    Returns:
        Tuple of (notifications, total_count)
    """
    query = db.query(models.Notification).filter(models.Notification.user_id == user_id)
    if unread_only:
        query = query.filter(models.Notification.is_read.is_(False))
    total = query.count()
    items = query.order_by(models.Notification.created_at.desc()).offset(skip).limit(limit).all()
    return items, total


def mark_notification_read(db: Session, notification_id: UUID, user_id: UUID) -> models.Notification:
    """
    Mark one of the user's notifications as read.

    Raises:
        NotFoundError: If the notification does not exist or belongs to someone else
    """
    notification = (
        db.query(models.Notification)
        .filter(
            models.Notification.id == notification_id,
            models.Notification.user_id == user_id,
        )
        .first()
    )
    if not notification:
        raise NotFoundError("Notification not found.")
    notification.is_read = True
    commit_or_rollback(db, "mark notification read")
    db.refresh(notification)
    return notification


# ============================================================================
# Deadlines
# ============================================================================

def get_tasks_due_between(db: Session, start: date, end: date) -> list[models.Task]:
    """Active (not completed) tasks whose end date falls within [start, end]."""
    return (
        db.query(models.Task)
        .filter(
            models.Task.status.in_([
                models.TaskStatus.PLANNED,
                models.TaskStatus.IN_PROGRESS,
                models.TaskStatus.STUCK,
            ]),
            models.Task.end_date >= start,
            models.Task.end_date <= end,
        )
        .order_by(models.Task.end_date.asc())
        .all()
    )
