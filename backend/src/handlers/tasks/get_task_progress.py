"""
Get Task Progress Handler.
GET /tasks/{taskId}/progress

Returns the viewer's role, the progress stepper and the actions available
on the task detail screen. Anonymous callers are treated as visitors.
"""
from task_state.actions import action_priority, needs_action
from task_state.auth import get_viewer_id
from task_state.fetch import load_task, load_task_applications, with_viewer_context
from task_state.logging import logger, log_event
from task_state.models import Role, TaskStatus, parse_int
from task_state.permissions import available_actions
from task_state.roles import resolve_role
from task_state.steps import get_current_step, has_pending_action, project_steps
from task_state.utils import error_response, format_response, get_path_param


def build_progress(task, viewer_id) -> dict:
    """Derive every view-model the task detail screen needs."""
    role = resolve_role(task, viewer_id)
    is_creator = role is Role.CREATOR
    # Only the two parties to the task owe anything on it, except on disputes
    involved = role in (Role.CREATOR, Role.WORKER) or task.status is TaskStatus.DISPUTED
    projection = project_steps(task, viewer_id)
    steps = projection.steps if projection else ()
    current = get_current_step(steps)

    return {
        'taskId': task.id,
        'status': task.status.value if task.status else None,
        'role': role.value,
        'steps': [step.to_dict() for step in steps] if projection else None,
        'currentStep': current.to_dict() if current else None,
        'hasPendingAction': has_pending_action(steps),
        'needsAction': involved and needs_action(task, viewer_id, is_creator),
        'priority': action_priority(task, viewer_id, is_creator),
        'actions': available_actions(task, viewer_id).to_dict(),
    }


def handler(event, context):
    log_event(event)

    task_id = parse_int(get_path_param(event, 'taskId'))
    if task_id is None:
        return error_response(400, 'Missing or invalid taskId')

    viewer_id = get_viewer_id(event)

    try:
        task = load_task(task_id)
        if task is None:
            return error_response(404, 'Task not found')

        task = with_viewer_context(task, load_task_applications(task_id), viewer_id)
        return format_response(200, build_progress(task, viewer_id))

    except Exception as e:
        logger.error(f"Error building progress for task {task_id}: {e}")
        return error_response(500, 'Internal Server Error')
