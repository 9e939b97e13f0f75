"""Tests for the task query pipeline."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from taskapi.models import Task, TaskFilter, TaskSort, TaskStatus
from taskapi.query import apply_filter, apply_sort, normalize_page, paginate, run_query

OWNER = UUID("3484ec33-20f9-4993-a25f-f49f6f5dbe54")
OTHER = UUID("550e8400-e29b-41d4-a716-446655440002")
EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def _task(
    title: str,
    *,
    minute: int = 0,
    status: TaskStatus = TaskStatus.PENDING,
    owner: UUID = OWNER,
    updated_minute: int | None = None,
) -> Task:
    created = EPOCH + timedelta(minutes=minute)
    updated = EPOCH + timedelta(minutes=minute if updated_minute is None else updated_minute)
    return Task(title=title, status=status, user_id=owner, created_at=created, updated_at=updated)


@pytest.fixture
def tasks() -> list[Task]:
    return [
        _task("Write report", minute=1, status=TaskStatus.COMPLETED, updated_minute=9),
        _task("buy milk", minute=2, status=TaskStatus.PENDING),
        _task("Report bug", minute=3, status=TaskStatus.CANCELLED, updated_minute=4),
        _task("Deploy", minute=4, status=TaskStatus.IN_PROGRESS),
        _task("Not mine", minute=5, owner=OTHER),
    ]


def _titles(items: list[Task]) -> list[str]:
    return [t.title for t in items]


def test_owner_scope(tasks: list[Task]) -> None:
    items, pagination = run_query(tasks, OWNER)
    assert "Not mine" not in _titles(items)
    assert pagination.total == 4

    items, pagination = run_query(tasks, uuid4())
    assert items == []
    assert pagination.total == 0
    assert pagination.total_pages == 0


def test_default_sort_is_newest_first(tasks: list[Task]) -> None:
    items, _ = run_query(tasks, OWNER)
    assert _titles(items) == ["Deploy", "Report bug", "buy milk", "Write report"]


def test_filter_is_subset(tasks: list[Task]) -> None:
    """Filtered results never contain anything the unfiltered list lacks."""
    everything, _ = run_query(tasks, OWNER)
    for task_filter in (
        TaskFilter(status="pending"),
        TaskFilter(search="report"),
        TaskFilter(status="completed", search="REPORT"),
    ):
        filtered, pagination = run_query(tasks, OWNER, task_filter)
        assert {t.id for t in filtered} <= {t.id for t in everything}
        assert pagination.total == len(filtered)


def test_search_is_case_insensitive_substring(tasks: list[Task]) -> None:
    items = apply_filter(tasks[:4], TaskFilter(search="REPORT"))
    assert sorted(_titles(items)) == ["Report bug", "Write report"]

    items = apply_filter(tasks[:4], TaskFilter(search="ort b"))
    assert _titles(items) == ["Report bug"]


def test_status_filter(tasks: list[Task]) -> None:
    assert _titles(apply_filter(tasks[:4], TaskFilter(status="in_progress"))) == ["Deploy"]
    assert apply_filter(tasks[:4], TaskFilter(status="unknown")) == []


def test_empty_filter_matches_all(tasks: list[Task]) -> None:
    assert apply_filter(tasks, TaskFilter()) == tasks
    assert apply_filter(tasks, TaskFilter(search="")) == tasks
    assert apply_filter(tasks, None) == tasks


def test_sort_by_status_rank(tasks: list[Task]) -> None:
    items = apply_sort(tasks[:4], TaskSort(field="status", order="asc"))
    assert [t.status for t in items] == [
        TaskStatus.PENDING,
        TaskStatus.IN_PROGRESS,
        TaskStatus.COMPLETED,
        TaskStatus.CANCELLED,
    ]
    items = apply_sort(tasks[:4], TaskSort(field="status", order="desc"))
    assert items[0].status is TaskStatus.CANCELLED


def test_sort_by_title_uses_codepoints(tasks: list[Task]) -> None:
    items = apply_sort(tasks[:4], TaskSort(field="title", order="asc"))
    assert _titles(items) == ["Deploy", "Report bug", "Write report", "buy milk"]


def test_sort_by_updated_at(tasks: list[Task]) -> None:
    items = apply_sort(tasks[:4], TaskSort(field="updated_at", order="desc"))
    assert _titles(items) == ["Write report", "Report bug", "Deploy", "buy milk"]


def test_sort_is_stable_and_repeatable() -> None:
    """Ties keep their incoming order in both directions."""
    same = [_task(f"t{i}", status=TaskStatus.PENDING) for i in range(6)]
    for order in ("asc", "desc"):
        sort = TaskSort(field="status", order=order)
        first = apply_sort(same, sort)
        assert first == same
        assert apply_sort(same, sort) == first


def test_pagination_window() -> None:
    items = [_task(str(i), minute=i) for i in range(5)]
    ordered = apply_sort(items, TaskSort(field="created_at", order="asc"))

    pages = [paginate(ordered, page, 2) for page in (1, 2, 3, 4)]
    assert [len(p[0]) for p in pages] == [2, 2, 1, 0]
    assert all(p[1].total_pages == 3 and p[1].total == 5 for p in pages)
    assert _titles(pages[2][0]) == ["4"]


def test_pagination_of_empty_list() -> None:
    items, pagination = paginate([], 3, 10)
    assert items == []
    assert pagination.model_dump() == {"page": 3, "limit": 10, "total": 0, "total_pages": 0}


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        (None, None, (1, 10)),
        (0, 5, (1, 5)),
        (-2, 0, (1, 10)),
        (3, -1, (3, 10)),
        (2, 100, (2, 100)),
        (2, 101, (2, 100)),
    ],
)
def test_normalize_page(page: int | None, limit: int | None, expected: tuple[int, int]) -> None:
    assert normalize_page(page, limit) == expected
