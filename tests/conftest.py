"""
Pytest configuration and shared fixtures
"""
import os
import sys
import tempfile
import pytest
from datetime import datetime
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Keep test log files out of the working tree
os.environ.setdefault('TEST_LOG_DIR', tempfile.mkdtemp(prefix='premier-test-logs-'))


class RecordingEmailService:
    """Stand-in for EmailService that records every send instead of using SMTP"""

    def __init__(self):
        self.sent = []
        self.fail_with = None

    def is_configured(self):
        return True

    def send_email(self, to, subject, html, text=None, reply_to=None, attachments=None):
        if self.fail_with:
            return {'success': False, 'error': self.fail_with}

        self.sent.append({
            'to': to,
            'subject': subject,
            'html': html,
            'text': text,
            'reply_to': reply_to,
            'attachments': attachments or [],
        })
        return {'success': True, 'message_id': f'<test-{len(self.sent)}@example.com>'}


class WorkflowData:
    """Builders for the records the workflow tests need. Every builder flushes."""

    def _save(self, session, record):
        session.add(record)
        session.flush()
        return record

    def team_member(self, session, role, email, first_name='Test', last_name='User', **fields):
        from database.models import TeamMember
        fields.setdefault('status', 'active')
        fields.setdefault('is_active', True)
        return self._save(session, TeamMember(
            role=role, email=email, first_name=first_name, last_name=last_name, **fields
        ))

    def team(self, session):
        """VA, Admin and Sales Rep, returned as a dict keyed by role"""
        return {
            'va': self.team_member(session, 'VA', 'va@example.com', first_name='Vera', last_name='Assist'),
            'admin': self.team_member(session, 'Admin', 'admin@example.com', first_name='Ada', last_name='Min'),
            'sales_rep': self.team_member(session, 'Sales Rep', 'rep@example.com', first_name='Sam', last_name='Seller'),
        }

    def opportunity(self, session, sales_rep=None, client_email='jane@example.com',
                    company_name='Smith Holdings', stage='RECOMMENDATION', **fields):
        from database.models import Client, Company, Opportunity
        company = None
        if company_name:
            company = self._save(session, Company(company_name=company_name, primary_email='office@smith.example.com'))
        client = self._save(session, Client(
            first_name='Jane',
            last_name='Smith',
            email=client_email,
            phone='021 555 0101',
            company_id=company.id if company else None,
        ))
        return self._save(session, Opportunity(
            opp_number='OPP-0001',
            client_id=client.id,
            company_id=company.id if company else None,
            sales_rep_id=sales_rep.id if sales_rep else None,
            site_address='12 Kauri Road',
            city='Auckland',
            postcode='0610',
            stage=stage,
            **fields
        ))

    def assessment(self, session, opportunity=None, status='Scheduled', **fields):
        from database.models import Assessment
        return self._save(session, Assessment(
            reference_number=fields.pop('reference_number', 'ASM-0001'),
            opportunity_id=opportunity.id if opportunity else None,
            client_id=opportunity.client_id if opportunity else None,
            site_address='12 Kauri Road',
            scheduled_date=datetime(2026, 3, 2, 9, 0),
            status=status,
            **fields
        ))

    def product(self, session, description='Pink Batts R3.6 Ceiling', sku='PB-R36', unit='pack'):
        from database.models import Product
        return self._save(session, Product(product_description=description, sku=sku, unit=unit))

    def recommendation(self, session, opportunity=None, created_by='va@example.com',
                       approval_status='Draft', sections=None, **fields):
        """
        sections: list of (section_name, sort_order, [(description, quantity, area_sqm), ...])
        """
        from database.models import ProductRecommendation, RecommendationSection, RecommendationItem
        if sections is None:
            sections = [
                ('Ceiling', 1, [('Pink Batts R3.6 Ceiling', 12, 85.0)]),
                ('Underfloor', 2, [('Expol Underfloor', 8, 60.0)]),
            ]

        recommendation = ProductRecommendation(
            opportunity_id=opportunity.id if opportunity else None,
            created_by=created_by,
            approval_status=approval_status,
            **fields
        )
        for name, sort_order, items in sections:
            section = RecommendationSection(section_name=name, sort_order=sort_order)
            for index, (description, quantity, area) in enumerate(items):
                section.items.append(RecommendationItem(
                    product_description=description, quantity=quantity, area_sqm=area, sort_order=index
                ))
            recommendation.sections.append(section)
        return self._save(session, recommendation)

    def terms(self, session, title='Terms & Conditions of Trade', body='Quote valid for 30 days.'):
        from database.models import QuoteTermsMaster
        return self._save(session, QuoteTermsMaster(title=title, body=body, is_active=True))

    def quote(self, session, opportunity=None, sales_rep=None, status='Draft', quote_number='Q-1001',
              version_number=0, is_draft=True, with_items=True, **fields):
        """
        A quote with one 'Ceiling' section holding a product line (sell 1000,
        cost 700, quantity 5) and a labour line (sell 200, cost 150).
        """
        from database.models import Quote, QuoteSection, QuoteLineItem
        values = {
            'customer_first_name': 'Jane',
            'customer_last_name': 'Smith',
            'customer_email': 'jane@example.com',
            'customer_company': 'Smith Holdings',
            'site_address': '12 Kauri Road',
            'city': 'Auckland',
            'postcode': '0610',
            'validity_days': 30,
            'subject': 'Ceiling insulation',
            'total_cost_ex_gst': 700,
            'total_sell_ex_gst': 1000,
            'gst_amount': 150,
            'total_inc_gst': 1150,
        }
        values.update(fields)
        quote = self._save(session, Quote(
            quote_number=quote_number,
            version_number=version_number,
            is_draft=is_draft,
            is_current=True,
            status=status,
            opportunity_id=opportunity.id if opportunity else None,
            client_id=opportunity.client_id if opportunity else None,
            sales_rep_id=sales_rep.id if sales_rep else None,
            **values
        ))
        if not with_items:
            return quote

        product = self.product(session)
        section = self._save(session, QuoteSection(quote_id=quote.id, section_name='Ceiling', sort_order=1))
        self._save(session, QuoteLineItem(
            quote_id=quote.id, section_id=section.id, product_id=product.id,
            description='Pink Batts R3.6 Ceiling', quantity=5, area_sqm=85, packs_required=5,
            is_labour=False, cost_price=140, sell_price=200, line_cost=700, line_sell=1000,
            line_total=1000, sort_order=1,
        ))
        self._save(session, QuoteLineItem(
            quote_id=quote.id, section_id=section.id, description='Installation labour',
            quantity=1, area_sqm=85, is_labour=True, cost_price=150, sell_price=200,
            line_cost=150, line_sell=200, line_total=200, sort_order=2,
        ))
        session.expire(quote, ['sections', 'line_items'])
        return quote

    def job(self, session, opportunity=None, status='Scheduled', job_number='J-2026-0001', **fields):
        from database.models import Job
        fields.setdefault('customer_email', 'jane@example.com')
        return self._save(session, Job(
            job_number=job_number,
            opportunity_id=opportunity.id if opportunity else None,
            customer_first_name='Jane',
            customer_last_name='Smith',
            site_address='12 Kauri Road',
            city='Auckland',
            postcode='0610',
            status=status,
            quoted_amount=1150,
            warranty_period_months=12,
            **fields
        ))


@pytest.fixture
def app():
    """Flask app on a fresh in-memory database"""
    from app_init import create_app
    application = create_app('testing')
    yield application

    from database.connection import drop_db
    drop_db()


@pytest.fixture
def client(app):
    """Flask test client"""
    return app.test_client()


@pytest.fixture
def outbox(app):
    """Recording email service installed on the app"""
    service = RecordingEmailService()
    app.email_service = service
    return service


@pytest.fixture
def db_session(app):
    """
    Session for service-level tests. Tests that also call the HTTP API
    should use database.connection.get_db_session() blocks instead, so no
    transaction is held open across requests.
    """
    from database.connection import get_session_factory
    session = get_session_factory()()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def data():
    """Record builders"""
    return WorkflowData()

