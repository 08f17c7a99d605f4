"""
Email Service - Sends workflow emails over SMTP.

This service handles:
- Building multipart plain/HTML messages
- Attaching generated documents (quote PDFs)
- Reporting delivery failures as results instead of exceptions
"""

import logging
import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Dict, List, Any, Optional, Tuple

logger = logging.getLogger(__name__)

# (filename, content bytes, MIME subtype)
Attachment = Tuple[str, bytes, str]


def _read(config, name, default=None):
    if isinstance(config, dict) or hasattr(config, 'get'):
        return config.get(name, default)
    return getattr(config, name, default)


class EmailService:
    """Service for sending workflow emails."""

    def __init__(self, config):
        self.smtp_host = _read(config, 'SMTP_HOST', '')
        self.smtp_port = int(_read(config, 'SMTP_PORT', 587) or 587)
        self.smtp_user = _read(config, 'SMTP_USER', '')
        self.smtp_password = _read(config, 'SMTP_PASSWORD', '')
        self.use_tls = bool(_read(config, 'SMTP_USE_TLS', True))
        self.from_email = _read(config, 'FROM_EMAIL', 'noreply@whizrockpremier.co.nz')
        self.from_name = _read(config, 'FROM_NAME', 'Whizrock Premier')
        self.email_enabled = bool(self.smtp_host)

    def _build_message(self, to: str, subject: str, html: str, text: Optional[str],
                       reply_to: Optional[str],
                       attachments: Optional[List[Attachment]]) -> MIMEMultipart:
        domain = self.from_email.split('@')[-1] if '@' in self.from_email else None

        body = MIMEMultipart('alternative')
        body.attach(MIMEText(text or '', 'plain', 'utf-8'))
        body.attach(MIMEText(html, 'html', 'utf-8'))

        if attachments:
            msg = MIMEMultipart('mixed')
            msg.attach(body)
            for filename, content, subtype in attachments:
                part = MIMEApplication(content, _subtype=subtype or 'octet-stream')
                part.add_header('Content-Disposition', 'attachment', filename=filename)
                msg.attach(part)
        else:
            msg = body

        msg['Subject'] = subject
        msg['From'] = formataddr((self.from_name, self.from_email))
        msg['To'] = to
        msg['Message-ID'] = make_msgid(domain=domain)
        if reply_to:
            msg['Reply-To'] = reply_to
        return msg

    def send_email(self, to: str, subject: str, html: str, text: str = None,
                   reply_to: str = None,
                   attachments: List[Attachment] = None) -> Dict[str, Any]:
        """
        Send an email.

        Returns:
            {'success': True, 'message_id': str} or {'success': False, 'error': str}
        """
        if not self.email_enabled:
            logger.warning(f"Email to {to} not sent: SMTP is not configured")
            return {'success': False, 'error': 'Email delivery is not configured'}

        if not to:
            return {'success': False, 'error': 'No recipient address'}

        try:
            msg = self._build_message(to, subject, html, text, reply_to, attachments)

            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
                if self.use_tls:
                    server.starttls()
                if self.smtp_user:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)

            logger.info(f"Sent email '{subject}' to {to}")
            return {'success': True, 'message_id': msg['Message-ID']}

        except Exception as e:
            logger.error(f"Error sending email '{subject}' to {to}: {e}")
            return {'success': False, 'error': str(e)}

    def is_configured(self) -> bool:
        return self.email_enabled
