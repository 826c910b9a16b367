"""
Task progress steps - the role-specific workflow shown in the progress stepper.

Three perspectives:
1. Creator (job poster) - hiring and completion flow
2. Worker (assigned helper) - work and confirmation flow
3. Applicant - application waiting on a decision

Visitors, cancelled and disputed tasks get no steps at all.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .logging import logger
from .models import ApplicationStatus, Role, SUPPRESSED_STATUSES, Task, TaskStatus
from .roles import resolve_role


class StepStatus(str, Enum):
    """Display status of a single step."""
    COMPLETED = 'completed'
    CURRENT = 'current'
    WAITING = 'waiting'
    UPCOMING = 'upcoming'


@dataclass(frozen=True)
class Step:
    id: str
    number: int
    status: StepStatus
    actionable: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'number': self.number,
            'status': self.status.value,
            'actionable': self.actionable,
        }


@dataclass(frozen=True)
class StepProjection:
    role: Role
    steps: Tuple[Step, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'role': self.role.value,
            'steps': [step.to_dict() for step in self.steps],
        }


# Creator flow: Posted → Reviewing → Assigned → In Progress → Awaiting Review → Completed
CREATOR_STEPS = ('posted', 'reviewing', 'assigned', 'inProgress', 'awaitingReview', 'completed')
CREATOR_STEP_INDEX = {
    TaskStatus.ASSIGNED: 2,
    TaskStatus.IN_PROGRESS: 3,
    TaskStatus.PENDING_CONFIRMATION: 4,
    TaskStatus.COMPLETED: 5,
}
CREATOR_WAITING_STEP = 3  # waiting on the worker
CREATOR_ACTIONS = {
    'reviewing': 'review_applicants',
    'awaitingReview': 'confirm_completion',
    'completed': 'leave_review',
}

# Worker flow: Accepted → Working → Marked Done → Completed
WORKER_STEPS = ('accepted', 'working', 'markedDone', 'completed')
WORKER_STEP_INDEX = {
    TaskStatus.ASSIGNED: 0,
    TaskStatus.IN_PROGRESS: 1,
    TaskStatus.PENDING_CONFIRMATION: 2,
    TaskStatus.COMPLETED: 3,
}
WORKER_WAITING_STEP = 2  # waiting on creator confirmation
WORKER_ACTIONS = {
    'working': 'mark_done',
    'completed': 'leave_review',
}

# Applicant flow: Applied → Waiting
APPLICANT_STEPS = ('applied', 'waiting')


def _display_status(index: int, current: int, waiting_index: int) -> StepStatus:
    if index < current:
        return StepStatus.COMPLETED
    if index == current:
        return StepStatus.WAITING if index == waiting_index else StepStatus.CURRENT
    return StepStatus.UPCOMING


def _build_steps(
    names: Sequence[str],
    current: int,
    waiting_index: int,
    actions: Dict[str, str],
) -> List[Step]:
    steps = []
    for index, name in enumerate(names):
        status = _display_status(index, current, waiting_index)
        actionable = actions.get(name) if status is StepStatus.CURRENT else None
        steps.append(Step(id=name, number=index + 1, status=status, actionable=actionable))
    return steps


def creator_step_index(task: Task) -> Optional[int]:
    """Current step for the creator, None when the status has no step."""
    if task.status is TaskStatus.OPEN:
        return 1 if task.applicant_count > 0 else 0
    return CREATOR_STEP_INDEX.get(task.status)


def worker_step_index(task: Task) -> Optional[int]:
    """Current step for the assigned worker, None when the status has no step."""
    return WORKER_STEP_INDEX.get(task.status)


def get_creator_steps(task: Task) -> Optional[List[Step]]:
    current = creator_step_index(task)
    if current is None:
        return None
    steps = _build_steps(CREATOR_STEPS, current, CREATOR_WAITING_STEP, CREATOR_ACTIONS)
    if current == 0:
        # Posting is already done; nothing to review yet
        steps[0] = Step(id=steps[0].id, number=1, status=StepStatus.COMPLETED)
    return steps


def get_worker_steps(task: Task) -> Optional[List[Step]]:
    current = worker_step_index(task)
    if current is None:
        return None
    return _build_steps(WORKER_STEPS, current, WORKER_WAITING_STEP, WORKER_ACTIONS)


def get_applicant_steps(task: Task) -> List[Step]:
    application = task.user_application
    app_status = application.status if application is not None else None
    waiting = StepStatus.WAITING if app_status is ApplicationStatus.PENDING else StepStatus.COMPLETED
    return [
        Step(id=APPLICANT_STEPS[0], number=1, status=StepStatus.COMPLETED),
        Step(id=APPLICANT_STEPS[1], number=2, status=waiting),
    ]


def project_steps(task: Optional[Task], viewer_id: Optional[int]) -> Optional[StepProjection]:
    """
    Get the progress steps for a viewer, or None when no stepper applies.

    Returns None for visitors, cancelled and disputed tasks, and statuses
    that have no place in the role's flow (missing or unrecognized status,
    or a worker on a task that is not assigned yet).
    """
    if task is None:
        return None

    role = resolve_role(task, viewer_id)
    if role is Role.VISITOR:
        return None
    if task.status is None:
        logger.debug(f"No steps for task {task.id}: unrecognized status")
        return None
    if task.status in SUPPRESSED_STATUSES:
        return None

    if role is Role.CREATOR:
        steps = get_creator_steps(task)
    elif role is Role.WORKER:
        steps = get_worker_steps(task)
    else:
        steps = get_applicant_steps(task)

    if steps is None:
        logger.debug(f"No {role.value} steps for task {task.id} in status {task.status.value}")
        return None
    return StepProjection(role=role, steps=tuple(steps))


def get_current_step(steps: Optional[Sequence[Step]]) -> Optional[Step]:
    """Get the step that drives the single "next action" prompt."""
    for step in steps or ():
        if step.status in (StepStatus.CURRENT, StepStatus.WAITING):
            return step
    return None


def has_pending_action(steps: Optional[Sequence[Step]]) -> bool:
    """Check if the viewer's current step asks them to do something."""
    current = get_current_step(steps)
    return current is not None and current.status is StepStatus.CURRENT and bool(current.actionable)
