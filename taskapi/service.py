"""Task lifecycle operations with ownership checks."""

import logging
from uuid import UUID

from taskapi import query
from taskapi.errors import AccessDeniedError, NotFoundError, ValidationError
from taskapi.identity import IdentityStore
from taskapi.models import (
    TITLE_MAX_LENGTH,
    PaginationInfo,
    Task,
    TaskFilter,
    TaskSort,
    TaskStatus,
    TaskUpdate,
    utcnow,
)
from taskapi.store import TaskStore

logger = logging.getLogger(__name__)

ACCESS_DENIED = "access denied"
INVALID_STATUS = "invalid status"


def validate_title(title: str, *, empty_message: str = "title is required") -> str:
    """Return the trimmed title or raise ValidationError."""
    trimmed = title.strip()
    if not trimmed:
        raise ValidationError(empty_message)
    if len(trimmed) > TITLE_MAX_LENGTH:
        raise ValidationError(f"title must be at most {TITLE_MAX_LENGTH} characters")
    return trimmed


def validate_status(status: str) -> TaskStatus:
    try:
        return TaskStatus(status)
    except ValueError as exc:
        raise ValidationError(INVALID_STATUS) from exc


class TaskService:
    """Create, read, update, delete and list tasks on behalf of a user."""

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    @property
    def store(self) -> TaskStore:
        return self._store

    def create_task(self, title: str, owner_id: UUID) -> Task:
        clean_title = validate_title(title)
        now = utcnow()
        task = Task(title=clean_title, user_id=owner_id, created_at=now, updated_at=now)
        self._store.insert(task)
        logger.info("task %s created by %s", task.id, owner_id)
        return task

    def _owned(self, task_id: UUID, requester_id: UUID) -> Task:
        # Existence first, then ownership: a missing id is always NotFound.
        task = self._store.get(task_id)
        if task.user_id != requester_id:
            raise AccessDeniedError(ACCESS_DENIED)
        return task

    def get_task(self, task_id: UUID, requester_id: UUID) -> Task:
        return self._owned(task_id, requester_id)

    def update_task(self, task_id: UUID, requester_id: UUID, patch: TaskUpdate) -> Task:
        """Apply the present fields of ``patch``.

        All fields are validated before the store is touched. ``updated_at``
        is refreshed even when the patch is empty.
        """
        changes: dict[str, object] = {}
        if patch.title is not None:
            changes["title"] = validate_title(patch.title, empty_message="title cannot be empty")
        if patch.status is not None:
            changes["status"] = validate_status(patch.status)

        with self._store.transaction():
            current = self._owned(task_id, requester_id)
            changes["updated_at"] = max(utcnow(), current.updated_at)
            updated = current.model_copy(update=changes)
            self._store.replace(updated)
        logger.info("task %s updated by %s", task_id, requester_id)
        return updated

    def delete_task(self, task_id: UUID, requester_id: UUID) -> None:
        with self._store.transaction():
            self._owned(task_id, requester_id)
            self._store.delete(task_id)
        logger.info("task %s deleted by %s", task_id, requester_id)

    def list_tasks(
        self,
        requester_id: UUID,
        task_filter: TaskFilter | None = None,
        sort: TaskSort | None = None,
        page: int | None = query.DEFAULT_PAGE,
        limit: int | None = query.DEFAULT_LIMIT,
    ) -> tuple[list[Task], PaginationInfo]:
        return query.run_query(self._store.values(), requester_id, task_filter, sort, page, limit)


DEMO_TASKS: tuple[tuple[str, str, TaskStatus], ...] = (
    ("john.doe@example.com", "Complete project documentation", TaskStatus.IN_PROGRESS),
    ("john.doe@example.com", "Review code changes", TaskStatus.PENDING),
    ("jane.smith@example.com", "Plan team meeting", TaskStatus.COMPLETED),
    ("jane.smith@example.com", "Update system configuration", TaskStatus.PENDING),
)


def seed_demo_tasks(service: TaskService, identity: IdentityStore) -> list[Task]:
    """Insert the demo tasks for whichever demo users exist."""
    seeded: list[Task] = []
    for email, title, status in DEMO_TASKS:
        try:
            owner = identity.lookup_by_email(email)
        except NotFoundError:
            logger.debug("skipping demo task %r: no user %s", title, email)
            continue
        task = service.create_task(title, owner.id)
        if status is not TaskStatus.PENDING:
            task = service.update_task(task.id, owner.id, TaskUpdate(status=status.value))
        seeded.append(task)
    return seeded
