"""
Data models and status constants for the task marketplace.
Based on the task lifecycle: open → assigned → in_progress → pending_confirmation → completed

Records are read-only snapshots of what the API returns. Parsing never raises:
anything that cannot be understood becomes None (or 0 for counts).
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from .logging import logger


class TaskStatus(str, Enum):
    """Task lifecycle statuses."""
    OPEN = 'open'
    ASSIGNED = 'assigned'
    IN_PROGRESS = 'in_progress'
    PENDING_CONFIRMATION = 'pending_confirmation'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    DISPUTED = 'disputed'

    @classmethod
    def parse(cls, value: Any) -> Optional['TaskStatus']:
        """Return the matching status or None for missing/unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            if value is not None:
                logger.debug(f"Unrecognized task status: {value!r}")
            return None


class ApplicationStatus(str, Enum):
    """Application review statuses."""
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'
    WITHDRAWN = 'withdrawn'

    @classmethod
    def parse(cls, value: Any) -> Optional['ApplicationStatus']:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class Role(str, Enum):
    """Viewer relationship to a task."""
    CREATOR = 'creator'
    WORKER = 'worker'
    APPLICANT = 'applicant'
    VISITOR = 'visitor'


# Reference only: transitions are executed server-side.
TRANSITIONS = {
    TaskStatus.OPEN: {TaskStatus.ASSIGNED, TaskStatus.CANCELLED, TaskStatus.DISPUTED},
    TaskStatus.ASSIGNED: {TaskStatus.IN_PROGRESS, TaskStatus.DISPUTED},
    TaskStatus.IN_PROGRESS: {TaskStatus.PENDING_CONFIRMATION, TaskStatus.DISPUTED},
    TaskStatus.PENDING_CONFIRMATION: {TaskStatus.COMPLETED, TaskStatus.DISPUTED},
    TaskStatus.COMPLETED: set(),
    TaskStatus.CANCELLED: set(),
    TaskStatus.DISPUTED: set(),
}

# No progress stepper is shown in these states
SUPPRESSED_STATUSES = frozenset({TaskStatus.CANCELLED, TaskStatus.DISPUTED})


def can_transition(current: Any, target: Any) -> bool:
    """Check whether the lifecycle graph allows current -> target."""
    src = TaskStatus.parse(current)
    dst = TaskStatus.parse(target)
    if src is None or dst is None:
        return False
    return dst in TRANSITIONS[src]


def parse_int(value: Any) -> Optional[int]:
    """Coerce ids and counts (including DynamoDB Decimals) to int."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (Decimal, float)):
        try:
            whole = int(value)
        except (ValueError, OverflowError):
            return None
        return whole if whole == value else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Normalize a created_at value to an aware UTC datetime.

    Accepts datetimes, epoch seconds (int, float, Decimal or numeric string)
    and ISO-8601 strings. Naive values are assumed to be UTC.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    try:
        if isinstance(value, (int, float, Decimal)):
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                return datetime.fromtimestamp(float(text), tz=timezone.utc)
            except ValueError:
                pass
            if text.endswith('Z'):
                text = text[:-1] + '+00:00'
            parsed = datetime.fromisoformat(text)
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.debug(f"Unparseable timestamp: {value!r}")
    return None


# DynamoDB item attribute -> record field
TASK_ITEM_KEYS = {
    'taskId': 'id',
    'status': 'status',
    'creatorId': 'creator_id',
    'assignedToId': 'assigned_to_id',
    'pendingApplicationsCount': 'pending_applications_count',
    'hasApplied': 'has_applied',
    'userApplication': 'user_application',
    'createdAt': 'created_at',
}

APPLICATION_ITEM_KEYS = {
    'applicationId': 'id',
    'taskId': 'task_id',
    'applicantId': 'applicant_id',
    'status': 'status',
    'task': 'task',
    'createdAt': 'created_at',
}


def _rename(item: Dict[str, Any], keys: Dict[str, str]) -> Dict[str, Any]:
    return {keys[k]: v for k, v in item.items() if k in keys}


@dataclass(frozen=True)
class TaskApplication:
    """A worker's request to be assigned to a task."""
    id: Optional[int] = None
    task_id: Optional[int] = None
    applicant_id: Optional[int] = None
    status: Optional[ApplicationStatus] = None
    task: Optional['Task'] = None
    created_at: Optional[datetime] = None

    @property
    def resolved_task_id(self) -> Optional[int]:
        """Id of the underlying task, preferring the embedded record."""
        if self.task is not None and self.task.id is not None:
            return self.task.id
        return self.task_id

    @classmethod
    def from_dict(cls, data: Any) -> Optional['TaskApplication']:
        """Build from the snake_case API shape. Returns None for non-dicts."""
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return None
        return cls(
            id=parse_int(data.get('id')),
            task_id=parse_int(data.get('task_id')),
            applicant_id=parse_int(data.get('applicant_id')),
            status=ApplicationStatus.parse(data.get('status')),
            task=Task.from_dict(data.get('task')),
            created_at=parse_timestamp(data.get('created_at')),
        )

    @classmethod
    def from_item(cls, item: Any) -> Optional['TaskApplication']:
        """Build from a camelCase DynamoDB item."""
        if not isinstance(item, dict):
            return None
        data = _rename(item, APPLICATION_ITEM_KEYS)
        if isinstance(data.get('task'), dict):
            data['task'] = Task.from_item(data['task'])
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'taskId': self.resolved_task_id,
            'applicantId': self.applicant_id,
            'status': self.status.value if self.status else None,
            'task': self.task.to_dict() if self.task else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class Task:
    """A unit of paid work posted by a creator."""
    id: Optional[int] = None
    status: Optional[TaskStatus] = None
    creator_id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    pending_applications_count: int = 0
    has_applied: bool = False
    user_application: Optional[TaskApplication] = None
    created_at: Optional[datetime] = None

    @property
    def applicant_count(self) -> int:
        """Pending applicants; only meaningful while the task is open."""
        if self.status is not TaskStatus.OPEN:
            return 0
        return max(self.pending_applications_count, 0)

    @classmethod
    def from_dict(cls, data: Any) -> Optional['Task']:
        """Build from the snake_case API shape. Returns None for non-dicts."""
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return None
        return cls(
            id=parse_int(data.get('id')),
            status=TaskStatus.parse(data.get('status')),
            creator_id=parse_int(data.get('creator_id')),
            assigned_to_id=parse_int(data.get('assigned_to_id')),
            pending_applications_count=parse_int(data.get('pending_applications_count')) or 0,
            has_applied=data.get('has_applied') is True,
            user_application=TaskApplication.from_dict(data.get('user_application')),
            created_at=parse_timestamp(data.get('created_at')),
        )

    @classmethod
    def from_item(cls, item: Any) -> Optional['Task']:
        """Build from a camelCase DynamoDB item."""
        if not isinstance(item, dict):
            return None
        data = _rename(item, TASK_ITEM_KEYS)
        if isinstance(data.get('user_application'), dict):
            data['user_application'] = TaskApplication.from_item(data['user_application'])
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'status': self.status.value if self.status else None,
            'creatorId': self.creator_id,
            'assignedToId': self.assigned_to_id,
            'pendingApplicationsCount': self.applicant_count,
            'hasApplied': self.has_applied,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
