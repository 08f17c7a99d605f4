"""
Services package for the Premier Insulation workflow service.
Contains the workflow operations, conversions and supporting repositories.
"""

from services.errors import (
    WorkflowError,
    NotFoundError,
    InvalidTransitionError,
    WorkflowValidationError
)
from services.email_service import EmailService
from services.task_repository import TaskRepository

__all__ = [
    'WorkflowError',
    'NotFoundError',
    'InvalidTransitionError',
    'WorkflowValidationError',
    'EmailService',
    'TaskRepository'
]
