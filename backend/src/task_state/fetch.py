"""
Record loading for the activity handlers.
Reads DynamoDB items and turns them into Task / TaskApplication records.
"""
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional

from boto3.dynamodb.conditions import Key

from .config import config
from .dynamo import batch_get_items, get_item, query
from .logging import logger
from .models import ApplicationStatus, Task, TaskApplication, parse_int


def _tasks(items: list) -> List[Task]:
    return [task for task in (Task.from_item(item) for item in items) if task is not None]


def load_task(task_id: int) -> Optional[Task]:
    """Load a single task by id."""
    item = get_item(config.TASKS_TABLE, {'taskId': task_id})
    return Task.from_item(item) if item else None


def load_posted_tasks(viewer_id: int) -> List[Task]:
    """Tasks created by the viewer."""
    items = query(
        config.TASKS_TABLE,
        index_name=config.CREATOR_INDEX,
        key_condition=Key('creatorId').eq(viewer_id),
    )
    return _tasks(items)


def load_assigned_tasks(viewer_id: int) -> List[Task]:
    """Tasks assigned to the viewer."""
    items = query(
        config.TASKS_TABLE,
        index_name=config.ASSIGNEE_INDEX,
        key_condition=Key('assignedToId').eq(viewer_id),
    )
    return _tasks(items)


def load_applications(viewer_id: int) -> List[TaskApplication]:
    """
    The viewer's applications with their tasks embedded.

    Applications whose task cannot be found are still returned, without
    an embedded task.
    """
    items = query(
        config.APPLICATIONS_TABLE,
        index_name=config.APPLICANT_INDEX,
        key_condition=Key('applicantId').eq(viewer_id),
    )
    task_ids = [item.get('taskId') for item in items]
    task_items = batch_get_items(config.TASKS_TABLE, 'taskId', task_ids)
    tasks_by_id = {parse_int(item.get('taskId')): item for item in task_items}

    applications = []
    for item in items:
        task_item = tasks_by_id.get(parse_int(item.get('taskId')))
        if task_item is None:
            logger.warning(f"Task {item.get('taskId')} not found for application {item.get('applicationId')}")
        application = TaskApplication.from_item({**item, 'task': task_item})
        if application is not None:
            applications.append(application)
    return applications


def load_task_applications(task_id: int) -> List[TaskApplication]:
    """All applications on a task."""
    items = query(
        config.APPLICATIONS_TABLE,
        index_name=config.TASK_APPLICATIONS_INDEX,
        key_condition=Key('taskId').eq(task_id),
    )
    return [app for app in (TaskApplication.from_item(item) for item in items) if app is not None]


def _newest(applications: List[TaskApplication]) -> Optional[TaskApplication]:
    oldest = datetime.min.replace(tzinfo=timezone.utc)
    return max(applications, key=lambda app: app.created_at or oldest, default=None)


def with_viewer_context(
    task: Task,
    applications: List[TaskApplication],
    viewer_id: Optional[int],
) -> Task:
    """
    Fill in the viewer-relative fields the task item does not store.

    Sets has_applied / user_application from the viewer's newest application
    and recounts pending applications. The stored count wins when it is
    larger, so a failed or partial applications read never hides applicants.
    """
    recounted = sum(1 for app in applications if app.status is ApplicationStatus.PENDING)
    pending = max(recounted, task.pending_applications_count)
    own = [app for app in applications if viewer_id is not None and app.applicant_id == viewer_id]
    user_application = _newest(own)
    return replace(
        task,
        pending_applications_count=pending,
        has_applied=user_application is not None,
        user_application=user_application,
    )
