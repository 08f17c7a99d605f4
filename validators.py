"""
Input Validation & Sanitization Utilities
Validation for workflow API request payloads
"""
from datetime import datetime
from typing import Dict, Any, List, Optional, Tuple
import logging

from services.statuses import TaskStatus

logger = logging.getLogger(__name__)

REVIEW_ACTIONS = ('approve', 'reject')

MAX_NOTES_LENGTH = 5000
MAX_REASON_LENGTH = 2000


class ValidationError(Exception):
    """Custom exception for validation errors"""
    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate that all required fields are present in the data

    Args:
        data: Dictionary of input data
        required_fields: List of required field names

    Returns:
        Tuple of (is_valid, error_message)
    """
    missing_fields = [field for field in required_fields if field not in data or data[field] is None or data[field] == '']

    if missing_fields:
        return False, f"Missing required fields: {', '.join(missing_fields)}"

    return True, None


def validate_string_length(value: str, min_length: int = 0, max_length: int = 1000) -> Tuple[bool, Optional[str]]:
    """
    Validate string length is within acceptable range

    Args:
        value: String to validate
        min_length: Minimum allowed length
        max_length: Maximum allowed length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, "Value must be a string"

    if len(value) < min_length:
        return False, f"Value too short (minimum {min_length} characters)"

    if len(value) > max_length:
        return False, f"Value too long (maximum {max_length} characters)"

    return True, None


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """
    Strip null bytes and surrounding whitespace, and cap the length

    Args:
        value: String to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if not isinstance(value, str):
        return str(value)

    sanitized = value.replace('\x00', '').strip()

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse an ISO 8601 date or datetime string

    Raises:
        ValidationError: If the value is not a valid date
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValidationError("Date must be an ISO 8601 string")

    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")

    # Stored timestamps are naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


def validate_review_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate an approve/reject recommendation request

    Args:
        data: Request data dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    action = data.get('action')
    if action not in REVIEW_ACTIONS:
        return False, "Invalid action. Must be 'approve' or 'reject'"

    reason = data.get('rejectionReason')
    if action == 'reject':
        if not isinstance(reason, str) or not reason.strip():
            return False, "Rejection reason is required"
        is_valid, error = validate_string_length(reason, max_length=MAX_REASON_LENGTH)
        if not is_valid:
            return False, f"Invalid rejectionReason: {error}"

    approved_by = data.get('approvedBy')
    if approved_by is not None and not isinstance(approved_by, str):
        return False, "approvedBy must be a string"

    return True, None


def validate_job_completion_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate the optional completionDate / completionNotes of a job completion"""
    try:
        parse_date(data.get('completionDate'))
    except ValidationError as e:
        return False, f"Invalid completionDate: {e.message}"

    notes = data.get('completionNotes')
    if notes is not None:
        is_valid, error = validate_string_length(notes, max_length=MAX_NOTES_LENGTH)
        if not is_valid:
            return False, f"Invalid completionNotes: {error}"

    return True, None


def validate_finalize_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate a quote finalize request"""
    if 'sendEmail' in data and not isinstance(data['sendEmail'], bool):
        return False, "sendEmail must be a boolean"
    return True, None


def validate_accept_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate a quote acceptance request"""
    accepted_by = data.get('acceptedBy')
    if accepted_by is not None and not isinstance(accepted_by, str):
        return False, "acceptedBy must be a string"
    return True, None


def validate_job_status_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate a job status change (status, optional scheduledDate)"""
    is_valid, error = validate_required_fields(data, ['status'])
    if not is_valid:
        return False, error
    if not isinstance(data['status'], str):
        return False, "status must be a string"

    try:
        parse_date(data.get('scheduledDate'))
    except ValidationError as e:
        return False, f"Invalid scheduledDate: {e.message}"

    return True, None


def validate_task_update_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate a task status update"""
    is_valid, error = validate_required_fields(data, ['status'])
    if not is_valid:
        return False, error

    allowed = [status.value for status in TaskStatus]
    if data['status'] not in allowed:
        return False, f"Invalid status. Must be one of: {', '.join(allowed)}"

    return True, None
