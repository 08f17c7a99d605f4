"""
Task Routes Blueprint

- /api/tasks: List workflow tasks (filters: assignedTo, status, entityType, entityId)
- /api/tasks/<task_id>: Get a task (GET) or update its status (PATCH)
"""

from flask import Blueprint, request, jsonify
import logging

from app.utils.helpers import get_json_body, error_response
from database.connection import get_db_session
from security import require_api_key
from services.task_repository import TaskRepository
from validators import validate_task_update_request

logger = logging.getLogger(__name__)

# Create blueprint
tasks_bp = Blueprint('tasks_bp', __name__)


@tasks_bp.route('/api/tasks', methods=['GET'])
@require_api_key
def list_tasks():
    """List tasks, newest first"""
    try:
        with get_db_session() as session:
            tasks = TaskRepository(session).list_tasks(
                assigned_to=request.args.get('assignedTo'),
                status=request.args.get('status'),
                related_entity_type=request.args.get('entityType'),
                related_entity_id=request.args.get('entityId'),
            )
        return jsonify({'ok': True, 'tasks': tasks, 'count': len(tasks)})
    except Exception as e:
        logger.error(f"Task list error: {e}", exc_info=True)
        return jsonify({'ok': False, 'error': str(e)}), 500


@tasks_bp.route('/api/tasks/<task_id>', methods=['GET'])
@require_api_key
def get_task(task_id):
    """Get a single task"""
    try:
        with get_db_session() as session:
            task = TaskRepository(session).get_task(task_id)
        if not task:
            return error_response('Task not found', 404)
        return jsonify({'ok': True, 'task': task})
    except Exception as e:
        logger.error(f"Task fetch error: {e}", exc_info=True)
        return jsonify({'ok': False, 'error': str(e)}), 500


@tasks_bp.route('/api/tasks/<task_id>', methods=['PATCH'])
@require_api_key
def update_task(task_id):
    """Update a task's status; Completed stamps completed_at"""
    data = get_json_body()
    is_valid, error = validate_task_update_request(data)
    if not is_valid:
        return error_response(error, 400)

    try:
        with get_db_session() as session:
            task = TaskRepository(session).update_task_status(task_id, data['status'])
        if not task:
            return error_response('Task not found', 404)
        logger.info(f"Task {task_id} set to {data['status']}")
        return jsonify({'ok': True, 'task': task})
    except Exception as e:
        logger.error(f"Task update error: {e}", exc_info=True)
        return jsonify({'ok': False, 'error': str(e)}), 500
