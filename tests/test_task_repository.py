"""
Tests for the task repository
"""
import pytest
from datetime import datetime, timedelta
from unittest.mock import patch

from database.models import Task
from services.task_repository import TaskRepository


@pytest.mark.integration
class TestCreateTask:
    """Tests for TaskRepository.create_task"""

    def test_creates_task_with_defaults(self, db_session):
        task = TaskRepository(db_session).create_task('Call customer')

        assert task['task_description'] == 'Call customer'
        assert task['priority'] == 'Normal'
        assert task['status'] == 'Pending'
        assert task['completion_percent'] == 0
        assert task['due_date'] is None

    def test_due_date_is_now_plus_days(self, db_session):
        before = datetime.utcnow()
        task = TaskRepository(db_session).create_task('Add pricing', due_in_days=2)

        due = datetime.fromisoformat(task['due_date'])
        assert before + timedelta(days=2) <= due <= datetime.utcnow() + timedelta(days=2)

    def test_links_related_entity(self, db_session):
        task = TaskRepository(db_session).create_task(
            'Assign installer crew',
            assigned_to='user-1',
            related_entity_type='job',
            related_entity_id='job-1',
            priority='High',
        )

        assert task['assigned_to_user_id'] == 'user-1'
        assert task['related_entity_type'] == 'job'
        assert task['related_entity_id'] == 'job-1'
        assert task['priority'] == 'High'


@pytest.mark.integration
class TestCreateTaskSafely:
    """Tests for TaskRepository.create_task_safely"""

    def test_returns_task_and_no_warning(self, db_session):
        task, warning = TaskRepository(db_session).create_task_safely('Review recommendation')

        assert warning is None
        assert task['task_description'] == 'Review recommendation'

    def test_failure_returns_warning_and_keeps_session_usable(self, db_session):
        repo = TaskRepository(db_session)
        repo.create_task('Earlier task')

        with patch.object(TaskRepository, 'create_task', side_effect=RuntimeError('insert failed')):
            task, warning = repo.create_task_safely('Broken task')

        assert task is None
        assert warning == 'Task could not be created: Broken task'
        assert db_session.query(Task).count() == 1


@pytest.mark.integration
class TestListAndUpdateTasks:
    """Tests for listing and updating tasks"""

    def test_filters(self, db_session):
        repo = TaskRepository(db_session)
        repo.create_task('VA task', assigned_to='va-1', status='Not Started')
        repo.create_task('Rep task', assigned_to='rep-1', related_entity_type='quote', related_entity_id='q-1')

        assert [t['task_description'] for t in repo.list_tasks(assigned_to='va-1')] == ['VA task']
        assert [t['task_description'] for t in repo.list_tasks(status='Pending')] == ['Rep task']
        assert len(repo.list_tasks(related_entity_type='quote', related_entity_id='q-1')) == 1
        assert len(repo.list_tasks()) == 2

    def test_get_task(self, db_session):
        repo = TaskRepository(db_session)
        created = repo.create_task('Call customer')

        assert repo.get_task(created['id'])['task_description'] == 'Call customer'
        assert repo.get_task('missing') is None

    def test_complete_task(self, db_session):
        repo = TaskRepository(db_session)
        created = repo.create_task('Call customer')

        updated = repo.update_task_status(created['id'], 'Completed')

        assert updated['status'] == 'Completed'
        assert updated['completion_percent'] == 100
        assert updated['completed_at'] is not None

    def test_update_missing_task(self, db_session):
        assert TaskRepository(db_session).update_task_status('missing', 'Completed') is None
