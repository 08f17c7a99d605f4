"""
Shared lookups used by the workflow services: who should receive a task
or email, and how a customer is named in it.
"""

from typing import Optional

from sqlalchemy.orm import Session

from database.models import TeamMember, Opportunity, Client, Company
from services.settings import get_setting

ROLE_VA = 'VA'
ROLE_ADMIN = 'Admin'


def _active_members(session: Session):
    return session.query(TeamMember).filter(
        TeamMember.is_active.is_(True),
        TeamMember.status == 'active',
    )


def find_active_member(session: Session, role: str) -> Optional[TeamMember]:
    """First active team member holding `role` (oldest first)."""
    return (
        _active_members(session)
        .filter(TeamMember.role == role)
        .order_by(TeamMember.created_at.asc())
        .first()
    )


def find_member_by_email(session: Session, email: str) -> Optional[TeamMember]:
    if not email:
        return None
    return session.query(TeamMember).filter(TeamMember.email == email).first()


def is_active(member: Optional[TeamMember]) -> bool:
    return bool(member and member.is_active and member.status == 'active')


def customer_name(opportunity: Optional[Opportunity], client: Client = None,
                  default: str = 'Customer') -> str:
    """Client name, falling back to the company name."""
    client = client or (opportunity.client if opportunity else None)
    if client and client.full_name:
        return client.full_name
    company = opportunity.company if opportunity else None
    if company and company.company_name:
        return company.company_name
    return default


def company_name(opportunity: Optional[Opportunity]) -> Optional[str]:
    company: Company = opportunity.company if opportunity else None
    return company.company_name if company else None


def dashboard_url(path: str = '') -> str:
    base = (get_setting('APP_URL') or '').rstrip('/')
    return f"{base}/{path.lstrip('/')}" if path else base
