from typing import Iterable, List, Optional, Sequence, TypeVar

from ..models.enums import TaskFilter, TaskStatus, Priority

T = TypeVar("T")


def _matches(task, active_filter: TaskFilter, user_id: Optional[str]) -> bool:
    if active_filter == TaskFilter.ALL:
        return True
    if active_filter == TaskFilter.COMPLETED:
        return task.status == TaskStatus.COMPLETED.value
    if active_filter == TaskFilter.PENDING:
        return task.status == TaskStatus.PENDING.value
    if active_filter == TaskFilter.IN_PROGRESS:
        return task.status == TaskStatus.IN_PROGRESS.value
    if active_filter == TaskFilter.ASSIGNED_TO_ME:
        return user_id is not None and any(
            a.get("id") == user_id for a in (task.assigned_to or [])
        )
    if active_filter == TaskFilter.HIGH_PRIORITY:
        return task.priority == Priority.HIGH.value
    if active_filter == TaskFilter.MEDIUM_PRIORITY:
        return task.priority == Priority.MEDIUM.value
    if active_filter == TaskFilter.LOW_PRIORITY:
        return task.priority == Priority.LOW.value
    return True


def apply_task_filter(
    tasks: Iterable[T],
    active_filter: TaskFilter = TaskFilter.ALL,
    user_id: Optional[str] = None,
) -> List[T]:
    """Filter a fetched task list; only the "all" view is sorted by due time.

    Other views keep the fetch order.
    """
    active_filter = TaskFilter(active_filter)
    filtered = [t for t in tasks if _matches(t, active_filter, user_id)]
    if active_filter == TaskFilter.ALL:
        filtered.sort(key=lambda t: t.due_time)
    return filtered


def narrow_tasks(
    tasks: Iterable[T],
    household_id: Optional[str] = None,
    helper_id: Optional[str] = None,
) -> List[T]:
    """Restrict to one household and/or one assignee"""
    result = list(tasks)
    if household_id:
        result = [t for t in result if t.household_id == household_id]
    if helper_id:
        result = [
            t for t in result if any(a.get("id") == helper_id for a in t.assigned_to or [])
        ]
    return result


def chunked(items: Sequence[T], size: int) -> List[Sequence[T]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


def summarize_tasks(tasks: Sequence) -> dict:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED.value)
    in_progress = sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS.value)
    pending = sum(1 for t in tasks if t.status == TaskStatus.PENDING.value)

    return {
        "total": total,
        "completed": completed,
        "in_progress": in_progress,
        "pending": pending,
        "completion_rate": round(completed / total * 100) if total else 0,
    }
