"""SQLAlchemy database models."""
from datetime import datetime
from uuid import uuid4
import enum

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Date,
    DateTime,
    Numeric,
    ForeignKey,
    Enum,
    Boolean,
    UniqueConstraint,
    Table,
    Uuid,
)
from sqlalchemy.orm import declarative_base, relationship

# Base class for all models
Base = declarative_base()


class MemberRole(str, enum.Enum):
    """Organization member role enum.

    Roles are totally ordered: employee < team_leader < admin < super_admin.
    Comparisons use the rank, never the string value.
    """

    EMPLOYEE = "employee"
    TEAM_LEADER = "team_leader"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @property
    def rank(self) -> int:
        return ROLE_HIERARCHY[self]

    def __lt__(self, other):
        if not isinstance(other, MemberRole):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, MemberRole):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, MemberRole):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, MemberRole):
            return NotImplemented
        return self.rank >= other.rank


ROLE_HIERARCHY: dict[MemberRole, int] = {
    MemberRole.EMPLOYEE: 1,
    MemberRole.TEAM_LEADER: 2,
    MemberRole.ADMIN: 3,
    MemberRole.SUPER_ADMIN: 4,
}


class TaskStatus(str, enum.Enum):
    """Task lifecycle status enum."""

    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    STUCK = "stuck"
    COMPLETED = "completed"


class ProjectHealth(str, enum.Enum):
    """Derived project status. Never stored, computed from the task set."""

    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    AT_RISK = "at_risk"
    COMPLETED = "completed"


class NotificationType(str, enum.Enum):
    """Notification type enum."""

    COMMENT = "comment"
    ASSIGNMENT = "assignment"
    STATUS_CHANGE = "status_change"
    DEADLINE = "deadline"


class FinanceEntryType(str, enum.Enum):
    """Finance entry direction."""

    INCOME = "income"
    EXPENSE = "expense"


class Organization(Base):
    """
    Organization model, the tenant boundary.

    Projects, tasks and memberships are all scoped to one organization.
    """

    __tablename__ = "organizations"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)

    # Audit fields
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    members = relationship("OrganizationMember", back_populates="organization", cascade="all, delete-orphan")
    projects = relationship("Project", back_populates="organization", cascade="all, delete-orphan")
    teams = relationship("Team", back_populates="organization", cascade="all, delete-orphan")
    finance_entries = relationship("FinanceEntry", back_populates="organization", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Organization {self.id}: {self.name}>"


class User(Base):
    """
    User model.

    Authentication happens upstream; users can belong to multiple
    organizations with a different role in each.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255))
    is_active = Column(Boolean, nullable=False, default=True)

    # Audit fields
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    memberships = relationship("OrganizationMember", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class OrganizationMember(Base):
    """
    Junction table linking users to organizations with roles.

    The role here is organization-wide; project leadership is tracked
    separately in project_team_leads.
    """

    __tablename__ = "organization_members"

    id = Column(Uuid, primary_key=True, default=uuid4)
    organization_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(MemberRole, values_callable=lambda x: [e.value for e in x]), nullable=False, default=MemberRole.EMPLOYEE, index=True)
    joined_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    organization = relationship("Organization", back_populates="members")
    user = relationship("User", back_populates="memberships")

    # Constraints
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="unique_org_user"),
    )

    def __repr__(self) -> str:
        return f"<OrganizationMember {self.role.value}>"


# Association tables for team leads and team members (many-to-many)
team_leads = Table(
    'team_leads',
    Base.metadata,
    Column('team_id', Uuid, ForeignKey('teams.id', ondelete='CASCADE'), primary_key=True),
    Column('user_id', Uuid, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, index=True),
)

team_members = Table(
    'team_members',
    Base.metadata,
    Column('team_id', Uuid, ForeignKey('teams.id', ondelete='CASCADE'), primary_key=True),
    Column('user_id', Uuid, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, index=True),
)

# Association table linking teams to the projects they work on
project_teams = Table(
    'project_teams',
    Base.metadata,
    Column('project_id', Uuid, ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True),
    Column('team_id', Uuid, ForeignKey('teams.id', ondelete='CASCADE'), primary_key=True, index=True),
)


class Team(Base):
    """
    Named group of organization members.

    Leads and members are both plain organization members; attaching a team
    to a project makes the project visible to everyone in the team.
    """

    __tablename__ = "teams"

    id = Column(Uuid, primary_key=True, default=uuid4)
    organization_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    # Audit fields
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    organization = relationship("Organization", back_populates="teams")
    leads = relationship("User", secondary=team_leads, backref="led_teams")
    members = relationship("User", secondary=team_members, backref="teams")
    projects = relationship("Project", secondary=project_teams, back_populates="teams")

    @property
    def lead_ids(self) -> set:
        return {u.id for u in self.leads}

    @property
    def member_ids(self) -> set:
        return {u.id for u in self.members}

    def __repr__(self) -> str:
        return f"<Team {self.id}: {self.name}>"


# Association table for project team leads (many-to-many)
project_team_leads = Table(
    'project_team_leads',
    Base.metadata,
    Column('project_id', Uuid, ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True),
    Column('user_id', Uuid, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, index=True),
    Column('assigned_at', DateTime, nullable=False, default=datetime.utcnow),
)


class Project(Base):
    """
    Project model within an organization.

    Status and completion percentage are not columns: they are derived from
    the task collection on every read (see project_status).
    """

    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid4)
    organization_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)

    # Core fields
    title = Column(String(255), nullable=False)
    description = Column(Text)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False, index=True)

    # Audit fields
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    created_by_user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), index=True)

    # Relationships
    organization = relationship("Organization", back_populates="projects")
    team_leads = relationship("User", secondary=project_team_leads, backref="led_projects")
    teams = relationship("Team", secondary=project_teams, back_populates="projects")
    tasks = relationship(
        "Task",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Task.display_order",
    )
    created_by_user = relationship("User", foreign_keys=[created_by_user_id])

    @property
    def team_lead_ids(self) -> set:
        return {u.id for u in self.team_leads}

    @property
    def team_ids(self) -> set:
        return {t.id for t in self.teams}

    def __repr__(self) -> str:
        return f"<Project {self.id}: {self.title}>"


# Association table for task assignees (many-to-many)
task_assignees = Table(
    'task_assignees',
    Base.metadata,
    Column('task_id', Uuid, ForeignKey('tasks.id', ondelete='CASCADE'), primary_key=True),
    Column('user_id', Uuid, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, index=True),
    Column('assigned_at', DateTime, nullable=False, default=datetime.utcnow),
)


class Task(Base):
    """Task within a project.

    display_order ranks tasks inside their project for rendering. It is not
    unique-constrained; a bulk reorder renumbers it to 0..N-1.
    """

    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid4)
    project_id = Column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Core task fields
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    # Use values_callable to serialize enum values (lowercase) instead of names (UPPERCASE)
    status = Column(Enum(TaskStatus, values_callable=lambda obj: [e.value for e in obj]), nullable=False, default=TaskStatus.PLANNED, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False, index=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    expense = Column(Numeric(12, 2), nullable=True)
    color = Column(String(32), nullable=False)

    # Audit fields
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    assignees = relationship("User", secondary=task_assignees, backref="assigned_tasks")
    comments = relationship(
        "Comment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )

    @property
    def assignee_ids(self) -> set:
        return {u.id for u in self.assignees}

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title[:30]}>"


class FinanceEntry(Base):
    """Income or expense booked against the organization.

    An entry may point at a project and one of its tasks; deleting either
    keeps the entry and clears the reference.
    """

    __tablename__ = "finance_entries"

    id = Column(Uuid, primary_key=True, default=uuid4)
    organization_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True, index=True)

    type = Column(Enum(FinanceEntryType, values_callable=lambda obj: [e.value for e in obj]), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    organization = relationship("Organization", back_populates="finance_entries")
    project = relationship("Project")
    task = relationship("Task")

    def __repr__(self) -> str:
        return f"<FinanceEntry {self.type.value} {self.amount}>"


class Comment(Base):
    """Append-only task comment."""

    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid4)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    # Relationships
    task = relationship("Task", back_populates="comments")
    author = relationship("User")

    def __repr__(self) -> str:
        return f"<Comment {self.id} on {self.task_id}>"


class Notification(Base):
    """Per-recipient notification record.

    Written by the fan-out step; only is_read changes afterwards.
    """

    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Enum(NotificationType, values_callable=lambda obj: [e.value for e in obj]), nullable=False)
    text = Column(Text, nullable=False)
    link = Column(String(500), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    user = relationship("User")

    def __repr__(self) -> str:
        return f"<Notification {self.type.value} -> {self.user_id}>"
