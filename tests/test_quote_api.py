"""
Tests for the quote endpoints (accept, finalize, pdf)
"""
import pytest
from datetime import date
from unittest.mock import patch

from database.connection import get_db_session
from database.models import Quote, Job, Opportunity, Task


def _seed_quote(data, status='Sent', with_terms=True, **fields):
    """Commit a quote with a sales rep and opportunity; returns ids"""
    with get_db_session() as db:
        team = data.team(db)
        opportunity = data.opportunity(db, sales_rep=team['sales_rep'], stage='QUOTED')
        if with_terms:
            data.terms(db)
        quote = data.quote(db, opportunity=opportunity, sales_rep=team['sales_rep'], status=status, **fields)
        return {
            'quote': quote.id,
            'opportunity': opportunity.id,
            'sales_rep': team['sales_rep'].id,
        }


@pytest.mark.integration
class TestAcceptQuote:
    """Tests for POST /api/quotes/<id>/accept"""

    def test_accept_creates_job(self, client, data):
        ids = _seed_quote(data)

        response = client.post(f"/api/quotes/{ids['quote']}/accept", json={'acceptedBy': ids['sales_rep']})

        assert response.status_code == 200
        body = response.get_json()
        assert body['ok'] is True
        assert body['message'] == 'Quote accepted and job created successfully'
        assert body['jobNumber'] == f"J-{date.today().year}-0001"
        assert body['job']['quote_id'] == ids['quote']
        assert body['quote']['status'] == 'Won'
        assert body['warnings'] == []

        with get_db_session() as db:
            quote = db.get(Quote, ids['quote'])
            assert quote.status == 'Won'
            assert quote.accepted_date is not None
            assert quote.accepted_by_user_id == ids['sales_rep']
            assert quote.job_id == body['job']['id']
            assert db.get(Opportunity, ids['opportunity']).stage == 'WON'
            task = db.query(Task).filter_by(related_entity_type='job').one()
            assert task.assigned_to_user_id == ids['sales_rep']

    def test_accept_without_body(self, client, data):
        ids = _seed_quote(data, status='Draft')

        response = client.post(f"/api/quotes/{ids['quote']}/accept")

        assert response.status_code == 200

    def test_accepting_twice_creates_one_job(self, client, data):
        ids = _seed_quote(data)

        first = client.post(f"/api/quotes/{ids['quote']}/accept", json={})
        second = client.post(f"/api/quotes/{ids['quote']}/accept", json={})

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.get_json() == {'ok': False, 'error': 'Quote has already been accepted'}
        with get_db_session() as db:
            assert db.query(Job).count() == 1

    def _finalize_twice(self, client, ids):
        client.post(f"/api/quotes/{ids['quote']}/finalize", json={'sendEmail': False})
        client.post(f"/api/quotes/{ids['quote']}/finalize", json={'sendEmail': False})
        with get_db_session() as db:
            versions = db.query(Quote).filter_by(quote_number='Q-1001').order_by(Quote.version_number).all()
            return [version.id for version in versions]

    def test_superseded_version_is_refused(self, client, data):
        """Test that only the current final version can be accepted"""
        ids = _seed_quote(data, status='Draft')
        draft_id, v1_id, v2_id = self._finalize_twice(client, ids)

        response = client.post(f"/api/quotes/{v1_id}/accept", json={})

        assert response.status_code == 400
        assert response.get_json()['error'] == (
            'Quote version 1 has been superseded; accept the current version instead'
        )
        with get_db_session() as db:
            assert db.query(Job).count() == 0
            assert db.get(Quote, v1_id).status == 'Sent'

    def test_draft_is_refused_once_finalized(self, client, data):
        """Test that the working draft cannot be accepted after a final version exists"""
        ids = _seed_quote(data, status='Draft')
        draft_id, v1_id, v2_id = self._finalize_twice(client, ids)

        response = client.post(f"/api/quotes/{draft_id}/accept", json={})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Quote has been finalized; accept the current version instead'

    def test_one_job_across_versions(self, client, data):
        """Test that accepting the current version blocks every other version"""
        ids = _seed_quote(data, status='Draft')
        draft_id, v1_id, v2_id = self._finalize_twice(client, ids)

        accepted = client.post(f"/api/quotes/{v2_id}/accept", json={})
        responses = [client.post(f"/api/quotes/{quote_id}/accept", json={}) for quote_id in (v1_id, draft_id)]

        assert accepted.status_code == 200
        assert [r.status_code for r in responses] == [400, 400]
        assert all(r.get_json()['error'] == 'Quote has already been accepted' for r in responses)
        with get_db_session() as db:
            job = db.query(Job).one()
            assert job.quote_id == v2_id

    def test_won_quote_is_refused(self, client, data):
        ids = _seed_quote(data, status='Won')

        response = client.post(f"/api/quotes/{ids['quote']}/accept", json={})

        assert response.status_code == 400
        with get_db_session() as db:
            assert db.query(Job).count() == 0

    def test_rejected_quote_is_refused(self, client, data):
        ids = _seed_quote(data, status='Rejected')

        response = client.post(f"/api/quotes/{ids['quote']}/accept", json={})

        assert response.status_code == 400
        assert "from 'Rejected' to 'Accepted'" in response.get_json()['error']

    def test_missing_quote(self, client):
        response = client.post('/api/quotes/does-not-exist/accept', json={})

        assert response.status_code == 404
        assert response.get_json() == {'ok': False, 'error': 'Quote not found'}

    def test_invalid_accepted_by(self, client, data):
        ids = _seed_quote(data)

        response = client.post(f"/api/quotes/{ids['quote']}/accept", json={'acceptedBy': 42})

        assert response.status_code == 400

    def test_conversion_failure_commits_nothing(self, client, data):
        ids = _seed_quote(data)
        failure = {'success': False, 'error': 'job numbering unavailable'}

        with patch('services.quote_workflow.create_job_from_quote', return_value=failure):
            response = client.post(f"/api/quotes/{ids['quote']}/accept", json={})

        assert response.status_code == 500
        assert response.get_json()['error'] == 'Quote accepted but job creation failed: job numbering unavailable'
        with get_db_session() as db:
            quote = db.get(Quote, ids['quote'])
            assert quote.status == 'Sent'
            assert quote.accepted_date is None

    def test_task_failure_is_reported_as_warning(self, client, data):
        ids = _seed_quote(data)

        with patch('services.task_repository.TaskRepository.create_task', side_effect=RuntimeError('locked')):
            response = client.post(f"/api/quotes/{ids['quote']}/accept", json={})

        assert response.status_code == 200
        body = response.get_json()
        assert len(body['warnings']) == 1
        assert body['warnings'][0].startswith('Task could not be created')
        with get_db_session() as db:
            assert db.query(Job).count() == 1


@pytest.mark.integration
class TestFinalizeQuote:
    """Tests for POST /api/quotes/<id>/finalize"""

    def test_finalize_creates_version_and_emails_pdf(self, client, data, outbox):
        ids = _seed_quote(data, status='Draft')

        response = client.post(f"/api/quotes/{ids['quote']}/finalize", json={})

        assert response.status_code == 200
        body = response.get_json()
        assert body['quoteNumber'] == 'Q-1001'
        assert body['version'] == 1
        assert body['quote']['is_current'] is True
        assert body['warnings'] == []

        assert len(outbox.sent) == 1
        email = outbox.sent[0]
        assert email['to'] == 'jane@example.com'
        assert email['subject'] == 'Your Insulation Quote Q-1001'
        assert email['reply_to'] == 'rep@example.com'
        filename, content, subtype = email['attachments'][0]
        assert filename == 'Quote-Q-1001.pdf'
        assert content.startswith(b'%PDF')
        assert subtype == 'pdf'

    def test_finalizing_again_supersedes(self, client, data, outbox):
        ids = _seed_quote(data, status='Draft')

        client.post(f"/api/quotes/{ids['quote']}/finalize", json={'sendEmail': False})
        response = client.post(f"/api/quotes/{ids['quote']}/finalize", json={'sendEmail': False})

        assert response.get_json()['version'] == 2
        assert outbox.sent == []
        with get_db_session() as db:
            finals = (
                db.query(Quote)
                .filter(Quote.quote_number == 'Q-1001', Quote.is_draft.is_(False))
                .order_by(Quote.version_number)
                .all()
            )
            assert [(q.version_number, q.is_current) for q in finals] == [(1, False), (2, True)]

    def test_email_failure_is_a_warning(self, client, data, outbox):
        ids = _seed_quote(data, status='Draft')
        outbox.fail_with = 'Connection refused'

        response = client.post(f"/api/quotes/{ids['quote']}/finalize", json={})

        assert response.status_code == 200
        body = response.get_json()
        assert len(body['warnings']) == 1
        assert 'Connection refused' in body['warnings'][0]
        with get_db_session() as db:
            assert db.query(Quote).filter_by(version_number=1).count() == 1

    def test_missing_customer_email_is_a_warning(self, client, data, outbox):
        ids = _seed_quote(data, status='Draft', customer_email=None)

        response = client.post(f"/api/quotes/{ids['quote']}/finalize", json={})

        assert response.status_code == 200
        assert response.get_json()['warnings'] == ['No email address available for quote Q-1001']
        assert outbox.sent == []

    def test_accepted_quote_cannot_be_finalized(self, client, data):
        ids = _seed_quote(data, status='Accepted')

        response = client.post(f"/api/quotes/{ids['quote']}/finalize", json={})

        assert response.status_code == 400

    def test_send_email_must_be_boolean(self, client, data):
        ids = _seed_quote(data, status='Draft')

        response = client.post(f"/api/quotes/{ids['quote']}/finalize", json={'sendEmail': 'yes'})

        assert response.status_code == 400

    def test_missing_quote(self, client):
        response = client.post('/api/quotes/does-not-exist/finalize', json={})

        assert response.status_code == 404


@pytest.mark.integration
class TestQuotePdf:
    """Tests for GET /api/quotes/<id>/pdf"""

    def test_returns_pdf(self, client, data):
        ids = _seed_quote(data)

        response = client.get(f"/api/quotes/{ids['quote']}/pdf")

        assert response.status_code == 200
        assert response.headers['Content-Type'] == 'application/pdf'
        assert response.headers['Content-Disposition'] == 'inline; filename="Quote-Q-1001.pdf"'
        assert response.data.startswith(b'%PDF')

    def test_missing_quote(self, client):
        response = client.get('/api/quotes/does-not-exist/pdf')

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Quote not found'
