"""
Role resolution - who the viewer is in relation to a task.
"""
from typing import Optional

from .models import Role, Task


def resolve_role(task: Optional[Task], viewer_id: Optional[int]) -> Role:
    """
    Classify the viewer's relationship to a task.

    Checks run in a fixed order so inconsistent data still resolves to
    exactly one role: creator, then worker, then applicant, else visitor.

    Args:
        task: Task record (None resolves to visitor)
        viewer_id: Current user id, None for anonymous viewers

    Returns:
        Role enum member
    """
    if viewer_id is None or task is None:
        return Role.VISITOR
    if task.creator_id is not None and task.creator_id == viewer_id:
        return Role.CREATOR
    if task.assigned_to_id is not None and task.assigned_to_id == viewer_id:
        return Role.WORKER
    if task.has_applied:
        return Role.APPLICANT
    return Role.VISITOR
