"""
Database seeding for local development.
Creates the default team (VA, Admin, Sales Rep) and an active terms
document if the database is empty.
"""

import logging
from database.connection import get_db_session
from database.models import TeamMember, QuoteTermsMaster

logger = logging.getLogger(__name__)

DEFAULT_TEAM = [
    {'first_name': 'Virtual', 'last_name': 'Assistant', 'email': 'va@whizrockpremier.co.nz', 'role': 'VA'},
    {'first_name': 'Premier', 'last_name': 'Admin', 'email': 'admin@whizrockpremier.co.nz', 'role': 'Admin'},
    {'first_name': 'Sales', 'last_name': 'Rep', 'email': 'sales@whizrockpremier.co.nz', 'role': 'Sales Rep'},
]

DEFAULT_TERMS_TITLE = "Terms & Conditions of Trade"
DEFAULT_TERMS_BODY = """This quote is valid for 30 days from the date of issue.

Prices include supply and installation of the products listed and exclude any work not specified.

A deposit may be required before installation is scheduled. The balance is due on completion.

Installed insulation carries a 12 month workmanship warranty from the completion date shown on the completion certificate."""


def seed_team_members(session):
    """Create the default team members that are missing (matched by email)."""
    created = []
    for member in DEFAULT_TEAM:
        existing = session.query(TeamMember).filter_by(email=member['email']).first()
        if existing:
            continue
        team_member = TeamMember(status='active', is_active=True, **member)
        session.add(team_member)
        created.append(team_member)

    session.flush()
    if created:
        logger.info(f"Created {len(created)} default team members")
    return created


def seed_terms(session):
    """Create an active terms document if none exists."""
    terms = session.query(QuoteTermsMaster).filter_by(is_active=True).first()
    if terms:
        logger.info(f"Active terms already exist: {terms.title}")
        return terms

    terms = QuoteTermsMaster(title=DEFAULT_TERMS_TITLE, body=DEFAULT_TERMS_BODY, is_active=True)
    session.add(terms)
    session.flush()
    logger.info("Created default terms document")
    return terms


def seed_database():
    """
    Seed the database with default data if empty.
    Call this at application startup (development only).
    """
    try:
        with get_db_session() as session:
            seed_team_members(session)
            seed_terms(session)
        logger.info("Database seeding completed successfully")
        return True
    except Exception as e:
        logger.error(f"Database seeding failed: {e}")
        raise


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    from config import get_config
    from database.connection import configure_database, init_db
    configure_database(get_config().DATABASE_URL)
    init_db()
    seed_database()
