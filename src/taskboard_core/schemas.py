"""Pydantic schemas for request/response validation."""
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict, model_validator

from .models import (
    MemberRole,
    TaskStatus,
    ProjectHealth,
    NotificationType,
    FinanceEntryType,
)


# ============================================================================
# Organization Schemas
# ============================================================================

class OrganizationCreate(BaseModel):
    """Schema for creating a new organization."""

    name: str = Field(..., min_length=1, max_length=255)


class OrganizationResponse(BaseModel):
    """Schema for organization responses."""

    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


# ============================================================================
# User and Membership Schemas
# ============================================================================

class UserCreate(BaseModel):
    """Schema for registering a user record."""

    email: str = Field(..., min_length=3, max_length=255)
    full_name: Optional[str] = Field(None, max_length=255)


class UserResponse(BaseModel):
    """Schema for user responses."""

    id: UUID
    email: str
    full_name: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class OrganizationMemberCreate(BaseModel):
    """Schema for adding a user to an organization."""

    user_id: UUID
    role: MemberRole = MemberRole.EMPLOYEE


class OrganizationMemberUpdate(BaseModel):
    """Schema for updating a member's role."""

    role: MemberRole


class OrganizationMemberResponse(BaseModel):
    """Schema for organization member responses."""

    id: UUID
    organization_id: UUID
    user_id: UUID
    role: MemberRole
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


# ============================================================================
# Team Schemas
# ============================================================================

class TeamCreate(BaseModel):
    """Schema for creating a team."""

    name: str = Field(..., min_length=1, max_length=255)
    lead_ids: list[UUID] = Field(default_factory=list, description="Organization members leading the team")
    member_ids: list[UUID] = Field(default_factory=list, description="Organization members in the team")


class TeamUpdate(BaseModel):
    """Schema for updating a team. Given id lists replace the existing sets."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    lead_ids: Optional[list[UUID]] = None
    member_ids: Optional[list[UUID]] = None


class TeamResponse(BaseModel):
    """Schema for team responses."""

    id: UUID
    organization_id: UUID
    name: str
    lead_ids: list[UUID] = Field(default_factory=list)
    member_ids: list[UUID] = Field(default_factory=list)
    project_ids: list[UUID] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class TeamListResponse(BaseModel):
    """Schema for paginated team list."""

    items: list[TeamResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# ============================================================================
# Project Schemas
# ============================================================================

class ProjectCreate(BaseModel):
    """Schema for creating a new project."""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    team_lead_ids: list[UUID] = Field(default_factory=list, description="Users leading this project")
    team_ids: list[UUID] = Field(default_factory=list, description="Teams working on this project")


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    team_lead_ids: Optional[list[UUID]] = Field(None, description="Replaces the team lead set when given")
    team_ids: Optional[list[UUID]] = Field(None, description="Replaces the team set when given")


class ProjectArchive(BaseModel):
    """Schema for archiving or restoring a project."""

    is_archived: bool


class ProjectResponse(BaseModel):
    """Schema for project responses, annotated with the derived status."""

    id: UUID
    organization_id: UUID
    title: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_archived: bool
    team_lead_ids: list[UUID] = Field(default_factory=list)
    team_ids: list[UUID] = Field(default_factory=list)
    status: ProjectHealth = Field(description="Derived from task statuses on every read")
    completion_percentage: int = Field(ge=0, le=100)
    task_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(use_enum_values=True)


class ProjectListResponse(BaseModel):
    """Schema for paginated project list."""

    items: list[ProjectResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# ============================================================================
# Task Schemas
# ============================================================================

class CommentCreate(BaseModel):
    """Schema for adding a comment to a task."""

    content: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    """Schema for task comments."""

    id: UUID
    task_id: UUID
    author_id: Optional[UUID] = None
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskCreate(BaseModel):
    """Schema for creating a new task.

    New tasks start as planned and are placed after the project's last task.
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    assignee_ids: list[UUID] = Field(default_factory=list, description="Organization members to assign")
    start_date: date
    end_date: date
    expense: Optional[float] = Field(None, ge=0)
    color: str = Field(..., min_length=1, max_length=32)

    @model_validator(mode="after")
    def check_dates(self) -> "TaskCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TaskUpdate(BaseModel):
    """Schema for a partial task update. Only fields that are sent are applied."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    assignee_ids: Optional[list[UUID]] = Field(None, description="Replaces the assignee set when given")
    status: Optional[TaskStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    expense: Optional[float] = Field(None, ge=0)
    color: Optional[str] = Field(None, min_length=1, max_length=32)
    display_order: Optional[int] = Field(None, ge=0)


class TaskReorder(BaseModel):
    """Schema for repositioning every task of a project."""

    task_ids: list[UUID] = Field(..., min_length=1, description="Task ids in the desired display order")


class TaskResponse(BaseModel):
    """Schema for full task response."""

    id: UUID
    project_id: UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    start_date: date
    end_date: date
    display_order: int
    expense: Optional[float] = None
    color: str
    assignee_ids: list[UUID] = Field(default_factory=list)
    comments: list[CommentResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(use_enum_values=True)


class TaskListResponse(BaseModel):
    """Schema for paginated task list."""

    items: list[TaskResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# ============================================================================
# Finance Schemas
# ============================================================================

class FinanceEntryCreate(BaseModel):
    """Schema for booking an income or expense entry.

    A task can only be referenced together with the project it belongs to.
    """

    type: FinanceEntryType
    amount: float = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    date: date
    project_id: Optional[UUID] = None
    task_id: Optional[UUID] = None

    @model_validator(mode="after")
    def check_task_has_project(self) -> "FinanceEntryCreate":
        if self.task_id is not None and self.project_id is None:
            raise ValueError("task_id requires project_id")
        return self


class FinanceEntryResponse(BaseModel):
    """Schema for finance entry responses."""

    id: UUID
    organization_id: UUID
    project_id: Optional[UUID] = None
    project_title: Optional[str] = None
    task_id: Optional[UUID] = None
    type: FinanceEntryType
    amount: float
    description: str
    date: date
    created_at: datetime

    model_config = ConfigDict(use_enum_values=True)


class FinanceEntryListResponse(BaseModel):
    """Schema for paginated finance entry list."""

    items: list[FinanceEntryResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class FinanceSummaryResponse(BaseModel):
    """Totals over the organization's entries, or one project's."""

    project_id: Optional[UUID] = None
    total_income: float
    total_expenses: float
    balance: float


# ============================================================================
# Notification Schemas
# ============================================================================

class NotificationResponse(BaseModel):
    """Schema for notification responses."""

    id: UUID
    user_id: UUID
    type: NotificationType
    text: str
    link: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
