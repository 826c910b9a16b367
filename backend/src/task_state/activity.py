"""
Activity aggregation for the dashboard and badge counts.

Combines the viewer's applications with the work already assigned to them,
dropping applications whose task has since turned into an assignment, and
counts the items that currently need the viewer's attention.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

from .actions import needs_action
from .logging import logger
from .models import Task, TaskApplication
from .sorting import underlying_task


@dataclass(frozen=True)
class TaskItem:
    """Work the viewer is assigned to."""
    task: Task
    kind: str = 'task'

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.kind, 'task': self.task.to_dict()}


@dataclass(frozen=True)
class ApplicationItem:
    """An application that has not turned into an assignment."""
    application: TaskApplication
    kind: str = 'application'

    @property
    def task(self) -> Optional[Task]:
        return self.application.task

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.kind, 'application': self.application.to_dict()}


WorkItem = Union[TaskItem, ApplicationItem]


@dataclass(frozen=True)
class ActivityCounts:
    requests: int = 0
    work: int = 0

    @property
    def total(self) -> int:
        return self.requests + self.work

    def to_dict(self) -> Dict[str, int]:
        return {'requests': self.requests, 'work': self.work, 'total': self.total}


@dataclass(frozen=True)
class ActivitySummary:
    work: List[WorkItem]
    counts: ActivityCounts

    def to_dict(self) -> Dict[str, Any]:
        return {
            'work': [item.to_dict() for item in self.work],
            'counts': self.counts.to_dict(),
        }


def build_work_list(
    applications: Optional[Iterable[TaskApplication]],
    assigned_tasks: Optional[Iterable[Task]],
) -> List[WorkItem]:
    """
    Merge assigned tasks and applications without listing a task twice.

    Assigned tasks come first in their given order, followed by the
    applications whose task id is not among them.
    """
    assigned = [task for task in (assigned_tasks or []) if task is not None]
    assigned_ids = {task.id for task in assigned if task.id is not None}

    work: List[WorkItem] = [TaskItem(task=task) for task in assigned]
    for application in applications or []:
        if application is None:
            continue
        task_id = application.resolved_task_id
        if task_id is not None and task_id in assigned_ids:
            continue
        work.append(ApplicationItem(application=application))
    return work


def count_requests(posted_tasks: Optional[Iterable[Task]], viewer_id: Optional[int]) -> int:
    """Posted tasks waiting on the creator (confirmations, applicants, disputes)."""
    return sum(1 for task in posted_tasks or [] if needs_action(task, viewer_id, is_creator=True))


def count_work(work: Iterable[WorkItem], viewer_id: Optional[int]) -> int:
    """Work-list items waiting on the viewer as a worker."""
    count = 0
    for item in work:
        task = underlying_task(item)
        if task is None:
            logger.debug(f"Work item without a task skipped from counts: {item!r}")
            continue
        if needs_action(task, viewer_id, is_creator=False):
            count += 1
    return count


def aggregate(
    posted_tasks: Optional[Iterable[Task]],
    applications: Optional[Iterable[TaskApplication]],
    assigned_tasks: Optional[Iterable[Task]],
    viewer_id: Optional[int],
) -> ActivitySummary:
    """
    Build the viewer's work list and pending-action counts.

    Args:
        posted_tasks: Tasks the viewer created
        applications: The viewer's applications, tasks embedded where available
        assigned_tasks: Tasks assigned to the viewer
        viewer_id: Current user id

    Returns:
        ActivitySummary with the deduplicated work list and counts
    """
    work = build_work_list(applications, assigned_tasks)
    counts = ActivityCounts(
        requests=count_requests(posted_tasks, viewer_id),
        work=count_work(work, viewer_id),
    )
    return ActivitySummary(work=work, counts=counts)
