"""
Tests for the activity aggregator and the priority list sorter.
"""
from task_state.activity import ApplicationItem, TaskItem, aggregate, build_work_list
from task_state.models import Task, TaskApplication
from task_state.sorting import sort_by_priority, underlying_task

from conftest import CREATOR_ID, WORKER_ID


class TestWorkList:
    """Tests for merging applications with assigned tasks."""

    def test_converted_application_is_dropped(self, make_task, make_application):
        """An application that became an assignment is listed once, as a task."""
        assigned = make_task(id=5, status='assigned', assigned_to_id=WORKER_ID)
        application = make_application(task={'id': 5, 'status': 'assigned'})

        work = build_work_list([application], [assigned])

        assert len(work) == 1
        assert isinstance(work[0], TaskItem)
        assert work[0].kind == 'task'
        assert work[0].task.id == 5

    def test_dedup_by_task_id_without_embedded_task(self, make_task, make_application):
        assigned = make_task(id=5, status='assigned', assigned_to_id=WORKER_ID)
        application = make_application(task_id=5)
        assert len(build_work_list([application], [assigned])) == 1

    def test_assigned_first_then_applications(self, make_task, make_application):
        assigned = [
            make_task(id=1, status='in_progress', assigned_to_id=WORKER_ID),
            make_task(id=2, status='assigned', assigned_to_id=WORKER_ID),
        ]
        applications = [
            make_application(id=10, task={'id': 3, 'status': 'open'}),
            make_application(id=11, task={'id': 1, 'status': 'in_progress'}),
            make_application(id=12, task_id=4),
        ]

        work = build_work_list(applications, assigned)

        assert [item.kind for item in work] == ['task', 'task', 'application', 'application']
        assert [item.task.id for item in work[:2]] == [1, 2]
        assert [item.application.id for item in work[2:]] == [10, 12]

    def test_no_task_id_appears_twice(self, make_task, make_application):
        assigned = [make_task(id=i, status='assigned', assigned_to_id=WORKER_ID) for i in range(5)]
        applications = [make_application(id=100 + i, task={'id': i % 7}) for i in range(10)]

        work = build_work_list(applications, assigned)

        task_ids = {item.task.id for item in work if item.kind == 'task'}
        app_ids = {item.application.resolved_task_id for item in work if item.kind == 'application'}
        assert not task_ids & app_ids

    def test_application_without_task_kept(self, make_application):
        """Unknown tasks stay visible in the list."""
        application = make_application(task_id=None)
        work = build_work_list([application], [])
        assert len(work) == 1
        assert isinstance(work[0], ApplicationItem)
        assert work[0].task is None

    def test_none_inputs(self):
        assert build_work_list(None, None) == []


class TestAggregate:
    """Tests for activity counts."""

    def test_counts(self, make_task, make_application):
        posted = [
            make_task(id=1, status='open', pending_applications_count=3),
            make_task(id=2, status='open', pending_applications_count=0),
            make_task(id=3, status='pending_confirmation', assigned_to_id=WORKER_ID),
            make_task(id=4, status='in_progress', assigned_to_id=WORKER_ID),
            make_task(id=5, status='disputed', assigned_to_id=WORKER_ID),
        ]
        assigned = [
            make_task(id=20, creator_id=9, status='assigned', assigned_to_id=CREATOR_ID),
            make_task(id=21, creator_id=9, status='completed', assigned_to_id=CREATOR_ID),
        ]
        applications = [
            make_application(id=30, applicant_id=CREATOR_ID, task={'id': 22, 'status': 'open'}),
            make_application(id=31, applicant_id=CREATOR_ID, task={'id': 23, 'status': 'in_progress'}),
        ]

        summary = aggregate(posted, applications, assigned, CREATOR_ID)

        assert summary.counts.requests == 3
        assert summary.counts.work == 2
        assert summary.counts.total == 5
        assert len(summary.work) == 4

    def test_items_without_task_are_not_counted(self, make_application):
        summary = aggregate([], [make_application(task_id=8)], [], WORKER_ID)
        assert summary.counts.work == 0
        assert len(summary.work) == 1

    def test_scenario_converted_application(self, make_task, make_application):
        summary = aggregate(
            posted_tasks=[],
            applications=[make_application(task={'id': 5, 'status': 'assigned'})],
            assigned_tasks=[make_task(id=5, status='assigned', assigned_to_id=WORKER_ID)],
            viewer_id=WORKER_ID,
        )
        assert [(item.kind, item.task.id) for item in summary.work] == [('task', 5)]
        assert summary.counts.work == 1

    def test_empty(self):
        summary = aggregate(None, None, None, None)
        assert summary.work == []
        assert summary.counts.to_dict() == {'requests': 0, 'work': 0, 'total': 0}

    def test_repeatable(self, make_task, make_application):
        posted = [make_task(id=1, status='open', pending_applications_count=1)]
        applications = [make_application(task={'id': 2, 'status': 'assigned'})]
        assert aggregate(posted, applications, [], CREATOR_ID) == aggregate(posted, applications, [], CREATOR_ID)

    def test_to_dict(self, make_task):
        summary = aggregate([], [], [make_task(id=5, status='assigned', assigned_to_id=WORKER_ID)], WORKER_ID)
        body = summary.to_dict()
        assert body['counts']['total'] == 1
        assert body['work'][0]['type'] == 'task'
        assert body['work'][0]['task']['id'] == 5


class TestSortByPriority:
    """Tests for sort_by_priority."""

    def test_priority_then_newest(self, make_task):
        tasks = [
            make_task(id=1, status='completed', created_at='2024-01-05T00:00:00Z'),
            make_task(id=2, status='open', created_at='2024-01-01T00:00:00Z'),
            make_task(id=3, status='disputed', created_at='2024-01-01T00:00:00Z'),
            make_task(id=4, status='open', created_at='2024-01-03T00:00:00Z'),
            make_task(id=5, status='pending_confirmation', created_at='2024-01-02T00:00:00Z'),
        ]
        ordered = sort_by_priority(tasks, is_creator=True, viewer_id=CREATOR_ID)
        assert [t.id for t in ordered] == [3, 5, 4, 2, 1]

    def test_creator_perspective_changes_order(self, make_task):
        tasks = [
            make_task(id=1, status='in_progress', created_at=1000),
            make_task(id=2, status='open', pending_applications_count=2, created_at=900),
        ]
        assert [t.id for t in sort_by_priority(tasks, is_creator=True)] == [2, 1]
        assert [t.id for t in sort_by_priority(tasks, is_creator=False)] == [1, 2]

    def test_stable_on_full_tie(self, make_task):
        tasks = [make_task(id=i, status='assigned', created_at=1000) for i in range(5)]
        assert [t.id for t in sort_by_priority(tasks, is_creator=False)] == [0, 1, 2, 3, 4]

    def test_missing_timestamp_is_oldest(self, make_task):
        tasks = [
            make_task(id=1, status='assigned'),
            make_task(id=2, status='assigned', created_at=1000),
        ]
        assert [t.id for t in sort_by_priority(tasks, is_creator=False)] == [2, 1]

    def test_missing_task_sorts_last(self, make_task, make_application):
        orphan = ApplicationItem(application=make_application(id=1, task_id=99))
        items = [
            orphan,
            TaskItem(task=make_task(id=2, status='completed', created_at=1000)),
            ApplicationItem(application=make_application(id=3, task={'id': 4, 'status': 'open', 'created_at': 2000})),
        ]
        ordered = sort_by_priority(items, is_creator=False)
        assert ordered[-1] is orphan
        assert [underlying_task(item).id for item in ordered[:2]] == [4, 2]

    def test_mixed_records(self, make_task, make_application):
        """Plain tasks and applications sort side by side."""
        task = make_task(id=1, status='completed')
        application = make_application(id=2, task={'id': 3, 'status': 'in_progress'})
        assert sort_by_priority([task, application], is_creator=False) == [application, task]

    def test_input_untouched(self, make_task):
        tasks = [make_task(id=1, status='completed'), make_task(id=2, status='disputed')]
        sort_by_priority(tasks, is_creator=True)
        assert [t.id for t in tasks] == [1, 2]

    def test_none_and_empty(self):
        assert sort_by_priority(None, is_creator=True) == []
        assert sort_by_priority([], is_creator=False) == []


class TestUnderlyingTask:
    def test_resolution(self, make_task, make_application):
        task = make_task(id=1)
        application = make_application(task={'id': 2})
        assert underlying_task(task) is task
        assert underlying_task(application).id == 2
        assert underlying_task(TaskItem(task=task)) is task
        assert underlying_task(ApplicationItem(application=application)).id == 2
        assert underlying_task(TaskApplication(id=1)) is None
        assert underlying_task(object()) is None
        assert underlying_task(Task(id=3)).id == 3
