"""
List ordering for activity screens: most urgent first, newest first within a bucket.
"""
from datetime import datetime
from typing import Any, Iterable, List, Optional, Tuple

from .actions import action_priority
from .models import Task


def underlying_task(item: Any) -> Optional[Task]:
    """
    Resolve the task behind a list item.

    Tasks resolve to themselves; applications and work-list items resolve
    to their embedded task, which may be missing.
    """
    if isinstance(item, Task):
        return item
    task = getattr(item, 'task', None)
    return task if isinstance(task, Task) else None


def _recency(created_at: Optional[datetime]) -> Tuple[int, float]:
    # Missing timestamps rank as the oldest
    if created_at is None:
        return (1, 0.0)
    return (0, -created_at.timestamp())


def priority_key(item: Any, is_creator: bool, viewer_id: Optional[int] = None) -> Tuple[int, int, float]:
    """Sort key: (priority ascending, created_at descending)."""
    task = underlying_task(item)
    priority = action_priority(task, viewer_id, is_creator)
    created_at = task.created_at if task is not None else None
    return (priority,) + _recency(created_at)


def sort_by_priority(
    items: Optional[Iterable[Any]],
    is_creator: bool,
    viewer_id: Optional[int] = None,
) -> List[Any]:
    """
    Order tasks, applications or work-list items by action priority, then recency.

    The sort is stable: items tying on both priority and created_at keep
    their original relative order. Items without a resolvable task sort as
    priority 10 with no timestamp, so they land at the end but stay visible.

    Args:
        items: Task, TaskApplication or work-list items
        is_creator: Rank from the poster's perspective
        viewer_id: Current user id

    Returns:
        New sorted list; the input is not modified
    """
    return sorted(items or [], key=lambda item: priority_key(item, is_creator, viewer_id))
