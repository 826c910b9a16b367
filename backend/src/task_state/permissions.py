"""
Which task-detail actions the viewer may take.
"""
from dataclasses import asdict, dataclass
from typing import Dict, Optional

from .models import ApplicationStatus, Role, Task, TaskStatus
from .roles import resolve_role

# Workers can report from 'assigned' onwards (creator might ghost after accepting)
WORKER_DISPUTABLE_STATUSES = frozenset({
    TaskStatus.ASSIGNED,
    TaskStatus.IN_PROGRESS,
    TaskStatus.PENDING_CONFIRMATION,
    TaskStatus.COMPLETED,
})
# Creators can report once work has started
CREATOR_DISPUTABLE_STATUSES = frozenset({
    TaskStatus.IN_PROGRESS,
    TaskStatus.PENDING_CONFIRMATION,
    TaskStatus.COMPLETED,
})


@dataclass(frozen=True)
class TaskActions:
    can_apply: bool = False
    can_withdraw: bool = False
    can_mark_done: bool = False
    can_confirm: bool = False
    can_view_applications: bool = False
    can_edit: bool = False
    can_cancel: bool = False
    can_report: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)


def has_pending_application(task: Task) -> bool:
    application = task.user_application
    return (
        task.has_applied
        and application is not None
        and application.status is ApplicationStatus.PENDING
    )


def available_actions(task: Optional[Task], viewer_id: Optional[int]) -> TaskActions:
    """
    Compute the actions offered on a task detail screen.

    Anonymous viewers still see Apply on open tasks; the client asks them
    to sign in first.
    """
    if task is None or task.status is None:
        return TaskActions()

    role = resolve_role(task, viewer_id)
    status = task.status
    is_creator = role is Role.CREATOR
    is_worker = role is Role.WORKER
    pending_application = has_pending_application(task)
    owner_open = is_creator and status is TaskStatus.OPEN

    return TaskActions(
        can_apply=status is TaskStatus.OPEN and not is_creator and not pending_application,
        can_withdraw=pending_application,
        can_mark_done=is_worker and status in (TaskStatus.ASSIGNED, TaskStatus.IN_PROGRESS),
        can_confirm=is_creator and status is TaskStatus.PENDING_CONFIRMATION,
        can_view_applications=owner_open,
        can_edit=owner_open,
        can_cancel=owner_open,
        can_report=(
            (is_worker and status in WORKER_DISPUTABLE_STATUSES)
            or (is_creator and status in CREATOR_DISPUTABLE_STATUSES)
        ),
    )
