"""
List Posted Tasks Handler.
GET /me/tasks/posted?status=open

Returns the tasks the viewer created, ordered so that the ones waiting on
them (disputes, completion confirmations, new applicants) come first.
"""
from task_state.actions import action_priority, needs_action
from task_state.auth import get_viewer_id
from task_state.fetch import load_posted_tasks
from task_state.logging import logger, log_event
from task_state.models import TaskStatus
from task_state.sorting import sort_by_priority
from task_state.utils import error_response, format_response, get_query_param


def handler(event, context):
    log_event(event)

    viewer_id = get_viewer_id(event)
    if viewer_id is None:
        return error_response(401, 'Unauthorized')

    status_param = get_query_param(event, 'status')
    status = TaskStatus.parse(status_param)
    if status_param and status is None:
        return error_response(400, f"Unknown status: {status_param}")

    try:
        tasks = load_posted_tasks(viewer_id)
        if status is not None:
            tasks = [task for task in tasks if task.status is status]

        ordered = sort_by_priority(tasks, is_creator=True, viewer_id=viewer_id)
        body = [
            {
                **task.to_dict(),
                'needsAction': needs_action(task, viewer_id, is_creator=True),
                'priority': action_priority(task, viewer_id, is_creator=True),
            }
            for task in ordered
        ]

        return format_response(200, {
            'tasks': body,
            'totalTasks': len(body),
            'needsAction': len([t for t in body if t['needsAction']]),
        })

    except Exception as e:
        logger.error(f"Error listing posted tasks for user {viewer_id}: {e}")
        return error_response(500, 'Internal Server Error')
