"""
Task Repository - Database operations for workflow tasks.
"""

import logging
from typing import List, Dict, Optional, Tuple
from datetime import datetime, timedelta
from sqlalchemy.orm import Session

from database.models import Task

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for task database operations."""

    def __init__(self, session: Session):
        self.session = session

    def list_tasks(self, assigned_to: str = None, status: str = None,
                   related_entity_type: str = None,
                   related_entity_id: str = None) -> List[Dict]:
        """List tasks, newest first, optionally filtered."""
        query = self.session.query(Task)

        if assigned_to:
            query = query.filter(Task.assigned_to_user_id == assigned_to)
        if status:
            query = query.filter(Task.status == status)
        if related_entity_type:
            query = query.filter(Task.related_entity_type == related_entity_type)
        if related_entity_id:
            query = query.filter(Task.related_entity_id == related_entity_id)

        return [task.to_dict() for task in query.order_by(Task.created_at.desc()).all()]

    def get_task(self, task_id: str) -> Optional[Dict]:
        """Get a single task by ID."""
        task = self.session.get(Task, task_id)
        return task.to_dict() if task else None

    def create_task(self, description: str, assigned_to: str = None,
                    due_in_days: int = None, priority: str = 'Normal',
                    status: str = 'Pending', task_type: str = None,
                    opportunity_id: str = None,
                    related_entity_type: str = None,
                    related_entity_id: str = None,
                    notes: str = None) -> Dict:
        """Create a new task. Due date is now + due_in_days when given."""
        due_date = None
        if due_in_days is not None:
            due_date = datetime.utcnow() + timedelta(days=due_in_days)

        task = Task(
            task_description=description,
            task_type=task_type,
            assigned_to_user_id=assigned_to,
            opportunity_id=opportunity_id,
            related_entity_type=related_entity_type,
            related_entity_id=related_entity_id,
            due_date=due_date,
            priority=priority,
            status=status,
            completion_percent=0,
            notes=notes,
        )

        self.session.add(task)
        self.session.flush()
        logger.info(f"Created task '{description}' for {assigned_to or 'unassigned'}")
        return task.to_dict()

    def create_task_safely(self, description: str, **kwargs) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Create a task inside a savepoint.

        Returns (task, None) on success or (None, warning) when the insert
        fails; the surrounding transaction is left intact either way.
        """
        try:
            with self.session.begin_nested():
                task = self.create_task(description, **kwargs)
            return task, None
        except Exception as e:
            logger.warning(f"Failed to create task '{description}': {e}")
            return None, f"Task could not be created: {description}"

    def update_task_status(self, task_id: str, status: str) -> Optional[Dict]:
        """Update a task's status. Returns None when the task does not exist."""
        task = self.session.get(Task, task_id)
        if not task:
            return None

        task.status = status
        if status == 'Completed':
            task.completed_at = datetime.utcnow()
            task.completion_percent = 100
        task.updated_at = datetime.utcnow()
        self.session.flush()
        return task.to_dict()
