"""In-memory task storage.

State lives for the lifetime of the process only. Every read and write takes
the store lock; callers that need a read-check-write sequence to be atomic
wrap it in ``transaction()``.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

from taskapi.errors import NotFoundError
from taskapi.models import Task

TASK_NOT_FOUND = "Task not found"


class TaskStore:
    """Mapping of task id to task, kept in insertion order."""

    def __init__(self) -> None:
        """Initialize an empty task store."""
        self._tasks: dict[UUID, Task] = {}
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator["TaskStore"]:
        """Hold the store lock for the duration of the block."""
        with self._lock:
            yield self

    def insert(self, task: Task) -> Task:
        """Add a new task. The id must not already be present."""
        with self._lock:
            if task.id in self._tasks:
                raise ValueError(f"task {task.id} already exists")
            self._tasks[task.id] = task
            return task

    def get(self, task_id: UUID) -> Task:
        """Get a task by its ID, raising NotFoundError if absent."""
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise NotFoundError(TASK_NOT_FOUND)
            return task

    def replace(self, task: Task) -> Task:
        """Overwrite an existing task with an updated copy."""
        with self._lock:
            if task.id not in self._tasks:
                raise NotFoundError(TASK_NOT_FOUND)
            self._tasks[task.id] = task
            return task

    def delete(self, task_id: UUID) -> None:
        """Delete a task, raising NotFoundError if absent."""
        with self._lock:
            if task_id not in self._tasks:
                raise NotFoundError(TASK_NOT_FOUND)
            del self._tasks[task_id]

    def values(self) -> list[Task]:
        """Snapshot of all tasks in insertion order."""
        with self._lock:
            return list(self._tasks.values())

    def clear(self) -> None:
        """Clear all tasks. Useful for testing."""
        with self._lock:
            self._tasks.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)
