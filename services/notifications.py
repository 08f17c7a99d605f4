"""
Post-commit notification dispatch.

Workflows queue Notification objects while they run; the API layer sends
them only after the database transaction has committed. A failed send is
reported as a warning and never undoes the committed work.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from services.email_templates import render_email

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """An email waiting to be sent once the transaction commits."""
    kind: str
    recipient: Optional[str]
    params: Dict[str, Any] = field(default_factory=dict)
    attachments: List[tuple] = field(default_factory=list)
    reply_to: Optional[str] = None
    # Called with the send result after a successful delivery
    on_sent: Optional[Callable[[Dict[str, Any]], None]] = None
    description: str = ''

    def label(self) -> str:
        return self.description or self.kind.replace('_', ' ')


def dispatch(notifications: List[Notification], email_service) -> List[str]:
    """
    Send every queued notification.

    Returns:
        List of warning messages for notifications that could not be sent
    """
    warnings = []

    for notification in notifications:
        if not notification.recipient:
            message = f"No email address available for {notification.label()}"
            logger.warning(message)
            warnings.append(message)
            continue

        try:
            subject, html, text = render_email(notification.kind, notification.params)
        except Exception as e:
            logger.error(f"Failed to render {notification.kind} email: {e}", exc_info=True)
            warnings.append(f"Email could not be prepared ({notification.label()}): {e}")
            continue

        result = email_service.send_email(
            notification.recipient,
            subject,
            html,
            text=text,
            reply_to=notification.reply_to,
            attachments=notification.attachments or None,
        )

        if not result.get('success'):
            message = (
                f"Email to {notification.recipient} failed ({notification.label()}): "
                f"{result.get('error', 'unknown error')}"
            )
            logger.warning(message)
            warnings.append(message)
            continue

        if notification.on_sent:
            try:
                notification.on_sent(result)
            except Exception as e:
                logger.error(f"Post-send update failed for {notification.label()}: {e}", exc_info=True)
                warnings.append(f"Email sent but delivery could not be recorded ({notification.label()})")

    return warnings
