"""
Action classification - does the viewer owe a decision on this task, and how urgent is it.
"""
from typing import Optional

from .models import Task, TaskStatus

PRIORITY_DISPUTED = 0
PRIORITY_CONFIRM_COMPLETION = 1
PRIORITY_REVIEW_APPLICANTS = 2
PRIORITY_IN_PROGRESS = 3
PRIORITY_ASSIGNED = 4
PRIORITY_OPEN = 5
PRIORITY_COMPLETED = 6
PRIORITY_UNKNOWN = 10

# Statuses where the worker is expected to act
WORKER_ACTION_STATUSES = frozenset({TaskStatus.ASSIGNED, TaskStatus.IN_PROGRESS})


def needs_action(task: Optional[Task], viewer_id: Optional[int], is_creator: bool) -> bool:
    """
    Check if a task needs action from the current user.

    Disputes need attention from either side. A creator acts on completion
    confirmation and on pending applicants; a worker acts on assigned and
    in-progress work.
    """
    if task is None:
        return False

    status = task.status
    if status is TaskStatus.DISPUTED:
        return True

    if is_creator:
        if status is TaskStatus.PENDING_CONFIRMATION:
            return True
        if status is TaskStatus.OPEN and task.applicant_count > 0:
            return True
        return False

    return status in WORKER_ACTION_STATUSES


def action_priority(task: Optional[Task], viewer_id: Optional[int], is_creator: bool) -> int:
    """
    Rank a task for display, lower is more urgent.

    First matching rule wins:
        0  disputed
        1  creator, pending_confirmation
        2  creator, open with pending applicants
        3  in_progress
        4  assigned
        5  open
        6  completed
        10 anything else, including missing or unknown status
    """
    if task is None:
        return PRIORITY_UNKNOWN

    status = task.status
    if status is TaskStatus.DISPUTED:
        return PRIORITY_DISPUTED
    if is_creator and status is TaskStatus.PENDING_CONFIRMATION:
        return PRIORITY_CONFIRM_COMPLETION
    if is_creator and status is TaskStatus.OPEN and task.applicant_count > 0:
        return PRIORITY_REVIEW_APPLICANTS
    if status is TaskStatus.IN_PROGRESS:
        return PRIORITY_IN_PROGRESS
    if status is TaskStatus.ASSIGNED:
        return PRIORITY_ASSIGNED
    if status is TaskStatus.OPEN:
        return PRIORITY_OPEN
    if status is TaskStatus.COMPLETED:
        return PRIORITY_COMPLETED
    return PRIORITY_UNKNOWN
