"""
Get Activity Handler.
GET /me/activity

Returns the viewer's pending-action badge counts and their "My Work" list:
assigned tasks plus open applications, most urgent first.
"""
from task_state.activity import aggregate
from task_state.actions import action_priority, needs_action
from task_state.auth import get_viewer_id
from task_state.fetch import load_applications, load_assigned_tasks, load_posted_tasks
from task_state.logging import logger, log_event
from task_state.sorting import sort_by_priority, underlying_task
from task_state.utils import error_response, format_response


def serialize_work_item(item, viewer_id: int) -> dict:
    """Work item plus its urgency as seen by the worker."""
    task = underlying_task(item)
    return {
        **item.to_dict(),
        'needsAction': needs_action(task, viewer_id, is_creator=False),
        'priority': action_priority(task, viewer_id, is_creator=False),
    }


def handler(event, context):
    log_event(event)

    viewer_id = get_viewer_id(event)
    if viewer_id is None:
        return error_response(401, 'Unauthorized')

    try:
        summary = aggregate(
            posted_tasks=load_posted_tasks(viewer_id),
            applications=load_applications(viewer_id),
            assigned_tasks=load_assigned_tasks(viewer_id),
            viewer_id=viewer_id,
        )
        work = sort_by_priority(summary.work, is_creator=False, viewer_id=viewer_id)

        logger.info(
            f"Activity for user {viewer_id}: "
            f"requests={summary.counts.requests}, work={summary.counts.work}, items={len(work)}"
        )

        return format_response(200, {
            'counts': summary.counts.to_dict(),
            'work': [serialize_work_item(item, viewer_id) for item in work],
        })

    except Exception as e:
        logger.error(f"Error building activity for user {viewer_id}: {e}")
        return error_response(500, 'Internal Server Error')
