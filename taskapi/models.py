"""Pydantic models for the Task Tracker API.

Request bodies keep their fields loosely typed; the service layer owns the
title and status rules so that violations surface as ``ValidationError``
with a stable message instead of a framework-generated 422.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

TITLE_MAX_LENGTH = 200

SortField = Literal["created_at", "updated_at", "title", "status"]
SortOrder = Literal["asc", "desc"]

SORT_FIELDS: tuple[str, ...] = ("created_at", "updated_at", "title", "status")
SORT_ORDERS: tuple[str, ...] = ("asc", "desc")


def utcnow() -> datetime:
    """Timezone-aware current time used for every timestamp."""
    return datetime.now(UTC)


class TaskStatus(str, Enum):
    """Lifecycle states of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class User(BaseModel):
    """A seeded account. The password is never serialised."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str
    password: str = Field(..., exclude=True, repr=False)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Task(BaseModel):
    """A task owned by exactly one user."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier for the task")
    title: str = Field(..., description="The task title")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current status")
    user_id: UUID = Field(..., description="Owner of the task")
    created_at: datetime = Field(default_factory=utcnow, description="When the task was created")
    updated_at: datetime = Field(default_factory=utcnow, description="When the task was last updated")


class TaskCreate(BaseModel):
    """Request body for creating a new task."""

    title: str = Field(default="", description="The task title (1-200 characters after trimming)")


class TaskUpdate(BaseModel):
    """Request body for updating an existing task.

    Each field is independently optional; absent (or null) fields are left
    untouched.
    """

    title: str | None = Field(default=None, description="New title for the task")
    status: str | None = Field(default=None, description="New status for the task")


class TaskFilter(BaseModel):
    """Status equality and title substring predicates."""

    status: str | None = None
    search: str | None = None

    def is_empty(self) -> bool:
        return self.status is None and not self.search

    def describe(self) -> str:
        """Render as ``status:x,search:y`` for response metadata."""
        parts: list[str] = []
        if self.status is not None:
            parts.append(f"status:{self.status}")
        if self.search:
            parts.append(f"search:{self.search}")
        return ",".join(parts)


class TaskSort(BaseModel):
    field: SortField = "created_at"
    order: SortOrder = "desc"

    def describe(self) -> str:
        return f"{self.field}:{self.order}"


class PaginationInfo(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class MetaInfo(BaseModel):
    pagination: PaginationInfo
    sort: str | None = None
    filter: str | None = None


class APIResponse(BaseModel):
    """Envelope shared by every endpoint."""

    error: bool = False
    message: str
    data: Any | None = None
    meta: MetaInfo | None = None


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str = "ok"
    message: str = "Todo API is running"
    time: datetime = Field(default_factory=utcnow)
