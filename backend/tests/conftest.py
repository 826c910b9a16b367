"""
Shared fixtures for the task-state tests.
"""
import os
import sys

import pytest

os.environ.setdefault('AWS_REGION', 'us-east-1')
os.environ.setdefault('TASKS_TABLE', 'tasks-test')
os.environ.setdefault('APPLICATIONS_TABLE', 'applications-test')

# Add layer and handlers to path for import
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from task_state.models import Task, TaskApplication  # noqa: E402

CREATOR_ID = 1
WORKER_ID = 2
APPLICANT_ID = 3
STRANGER_ID = 4


@pytest.fixture
def make_task():
    """Build a Task from the API's snake_case shape with sensible defaults."""
    def _make(**fields):
        data = {'id': 10, 'status': 'open', 'creator_id': CREATOR_ID}
        data.update(fields)
        return Task.from_dict(data)
    return _make


@pytest.fixture
def make_application():
    def _make(**fields):
        data = {'id': 100, 'applicant_id': WORKER_ID, 'status': 'pending'}
        data.update(fields)
        return TaskApplication.from_dict(data)
    return _make
