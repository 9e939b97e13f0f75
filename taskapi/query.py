"""Task query pipeline: owner scope, filter, sort and page window.

The pipeline only reads. It runs over a snapshot taken from the store, so
the store lock is not held while filtering and sorting.
"""

import math
from collections.abc import Callable, Iterable
from typing import Any
from uuid import UUID

from taskapi.models import PaginationInfo, Task, TaskFilter, TaskSort, TaskStatus

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

STATUS_RANK: dict[TaskStatus, int] = {
    TaskStatus.PENDING: 1,
    TaskStatus.IN_PROGRESS: 2,
    TaskStatus.COMPLETED: 3,
    TaskStatus.CANCELLED: 4,
}

_SORT_KEYS: dict[str, Callable[[Task], Any]] = {
    "created_at": lambda t: t.created_at,
    "updated_at": lambda t: t.updated_at,
    "title": lambda t: t.title,
    "status": lambda t: STATUS_RANK[t.status],
}


def select_owned(tasks: Iterable[Task], owner_id: UUID) -> list[Task]:
    return [t for t in tasks if t.user_id == owner_id]


def apply_filter(tasks: list[Task], task_filter: TaskFilter | None) -> list[Task]:
    """Keep tasks matching the status and case-insensitive title search."""
    if task_filter is None or task_filter.is_empty():
        return tasks
    result = tasks
    if task_filter.status is not None:
        result = [t for t in result if t.status.value == task_filter.status]
    if task_filter.search:
        needle = task_filter.search.lower()
        result = [t for t in result if needle in t.title.lower()]
    return result


def apply_sort(tasks: list[Task], sort: TaskSort | None) -> list[Task]:
    """Stable sort by one field; ties keep their incoming order."""
    sort = sort or TaskSort()
    key = _SORT_KEYS.get(sort.field, _SORT_KEYS["created_at"])
    return sorted(tasks, key=key, reverse=sort.order == "desc")


def normalize_page(page: int | None, limit: int | None) -> tuple[int, int]:
    """Clamp or default out-of-range page parameters instead of rejecting them."""
    if page is None or page < 1:
        page = DEFAULT_PAGE
    if limit is None or limit < 1:
        limit = DEFAULT_LIMIT
    elif limit > MAX_LIMIT:
        limit = MAX_LIMIT
    return page, limit


def paginate(tasks: list[Task], page: int, limit: int) -> tuple[list[Task], PaginationInfo]:
    total = len(tasks)
    total_pages = math.ceil(total / limit) if total else 0
    start = (page - 1) * limit
    items = tasks[start : start + limit] if start < total else []
    return items, PaginationInfo(page=page, limit=limit, total=total, total_pages=total_pages)


def run_query(
    tasks: Iterable[Task],
    owner_id: UUID,
    task_filter: TaskFilter | None = None,
    sort: TaskSort | None = None,
    page: int | None = DEFAULT_PAGE,
    limit: int | None = DEFAULT_LIMIT,
) -> tuple[list[Task], PaginationInfo]:
    """Return one page of the owner's matching tasks plus pagination metadata."""
    page, limit = normalize_page(page, limit)
    owned = select_owned(tasks, owner_id)
    filtered = apply_filter(owned, task_filter)
    ordered = apply_sort(filtered, sort)
    return paginate(ordered, page, limit)


__all__ = [
    "STATUS_RANK",
    "apply_filter",
    "apply_sort",
    "normalize_page",
    "paginate",
    "run_query",
    "select_owned",
]
