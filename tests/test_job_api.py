"""
Tests for the job endpoints (status, complete)
"""
import pytest
from datetime import date, datetime

from database.connection import get_db_session
from database.models import Job, Certificate


def _seed_job(data, status='Scheduled', client_email='jane@example.com', with_opportunity=True, **fields):
    with get_db_session() as db:
        opportunity = data.opportunity(db, client_email=client_email, stage='WON') if with_opportunity else None
        return data.job(db, opportunity=opportunity, status=status, **fields).id


@pytest.mark.integration
class TestCompleteJob:
    """Tests for job completion and certificate issue"""

    def test_completion_issues_and_sends_certificate(self, client, data, outbox):
        """Test that completing a job issues a certificate and emails it"""
        job_id = _seed_job(data)

        response = client.post(f'/api/jobs/{job_id}/complete', json={
            'completionDate': '2026-03-10',
            'completionNotes': 'All areas insulated',
        })

        assert response.status_code == 200
        body = response.get_json()
        assert body['message'] == 'Job completed and certificate issued'
        assert body['certificateNumber'] == f'CERT-{date.today().year}-0001'
        assert body['job']['status'] == 'Completed'
        assert body['warnings'] == []

        assert len(outbox.sent) == 1
        assert outbox.sent[0]['to'] == 'jane@example.com'
        assert body['certificateNumber'] in outbox.sent[0]['subject']

        with get_db_session() as db:
            job = db.get(Job, job_id)
            assert job.completed_at == datetime(2026, 3, 10)
            assert job.completion_notes == 'All areas insulated'
            certificate = db.query(Certificate).filter_by(job_id=job_id).one()
            assert certificate.warranty_expiry_date == date(2027, 3, 10)
            assert certificate.customer_email == 'jane@example.com'
            assert certificate.sent_at is not None
            assert certificate.sent_to_email == 'jane@example.com'

    def test_email_failure_keeps_completion(self, client, data, outbox):
        """Test that a failed certificate email is a warning, not an error"""
        job_id = _seed_job(data)
        outbox.fail_with = 'Connection refused'

        response = client.post(f'/api/jobs/{job_id}/complete', json={})

        assert response.status_code == 200
        warnings = response.get_json()['warnings']
        assert len(warnings) == 1
        assert 'Connection refused' in warnings[0]
        with get_db_session() as db:
            assert db.get(Job, job_id).status == 'Completed'
            certificate = db.query(Certificate).filter_by(job_id=job_id).one()
            assert certificate.sent_at is None

    def test_no_customer_email(self, client, data, outbox):
        """Test that a job with no email on file still completes"""
        job_id = _seed_job(data, with_opportunity=False, customer_email=None)

        response = client.post(f'/api/jobs/{job_id}/complete', json={})

        assert response.status_code == 200
        assert response.get_json()['warnings'] == ['No customer email on file; certificate was not emailed']
        assert outbox.sent == []

    def test_falls_back_to_company_email(self, client, data, outbox):
        """Test that the company email is used when the client has none"""
        job_id = _seed_job(data, client_email=None)

        response = client.post(f'/api/jobs/{job_id}/complete', json={})

        assert response.status_code == 200
        assert outbox.sent[0]['to'] == 'office@smith.example.com'

    def test_already_completed(self, client, data):
        """Test that completing twice is refused and issues one certificate"""
        job_id = _seed_job(data)

        client.post(f'/api/jobs/{job_id}/complete', json={})
        response = client.post(f'/api/jobs/{job_id}/complete', json={})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Job is already completed'
        with get_db_session() as db:
            assert db.query(Certificate).count() == 1

    def test_cancelled_job_cannot_complete(self, client, data):
        """Test that a cancelled job is refused"""
        job_id = _seed_job(data, status='Cancelled')

        response = client.post(f'/api/jobs/{job_id}/complete', json={})

        assert response.status_code == 400
        with get_db_session() as db:
            assert db.query(Certificate).count() == 0

    def test_missing_job(self, client):
        """Test 404 for an unknown job"""
        response = client.post('/api/jobs/does-not-exist/complete', json={})

        assert response.status_code == 404
        assert response.get_json() == {'ok': False, 'error': 'Job not found'}

    def test_invalid_completion_date(self, client, data):
        """Test that a malformed completionDate is rejected"""
        job_id = _seed_job(data)

        response = client.post(f'/api/jobs/{job_id}/complete', json={'completionDate': 'next tuesday'})

        assert response.status_code == 400
        assert response.get_json()['error'].startswith('Invalid completionDate')
        with get_db_session() as db:
            assert db.get(Job, job_id).status == 'Scheduled'


@pytest.mark.integration
class TestJobStatus:
    """Tests for POST /api/jobs/<id>/status"""

    def test_start_job(self, client, data):
        """Test that starting a scheduled job stamps started_at"""
        job_id = _seed_job(data)

        response = client.post(f'/api/jobs/{job_id}/status', json={'status': 'In Progress'})

        assert response.status_code == 200
        body = response.get_json()
        assert body['job']['status'] == 'In Progress'
        assert body['job']['started_at'] is not None
        with get_db_session() as db:
            job = db.get(Job, job_id)
            assert job.status == 'In Progress'
            assert job.started_at is not None

    def test_schedule_draft_job(self, client, data):
        job_id = _seed_job(data, status='Draft')

        response = client.post(f'/api/jobs/{job_id}/status', json={
            'status': 'Scheduled',
            'scheduledDate': '2026-04-02',
        })

        assert response.status_code == 200
        with get_db_session() as db:
            job = db.get(Job, job_id)
            assert job.status == 'Scheduled'
            assert job.scheduled_date == datetime(2026, 4, 2)
            assert job.started_at is None

    def test_cancel_job(self, client, data):
        job_id = _seed_job(data)

        response = client.post(f'/api/jobs/{job_id}/status', json={'status': 'Cancelled'})

        assert response.status_code == 200
        assert response.get_json()['message'] == 'Job J-2026-0001 is now Cancelled'

    def test_terminal_job_cannot_change(self, client, data):
        """Test that completed and cancelled jobs keep their status"""
        completed_id = _seed_job(data, status='Completed')
        cancelled_id = _seed_job(data, status='Cancelled', job_number='J-2026-0002')

        completed = client.post(f'/api/jobs/{completed_id}/status', json={'status': 'In Progress'})
        cancelled = client.post(f'/api/jobs/{cancelled_id}/status', json={'status': 'Scheduled'})

        assert completed.status_code == 400
        assert completed.get_json() == {'ok': False, 'error': 'Job is already Completed'}
        assert cancelled.status_code == 400
        with get_db_session() as db:
            assert db.get(Job, cancelled_id).status == 'Cancelled'

    def test_backwards_move_is_refused(self, client, data):
        job_id = _seed_job(data, status='In Progress')

        response = client.post(f'/api/jobs/{job_id}/status', json={'status': 'Scheduled'})

        assert response.status_code == 400
        assert "from 'In Progress' to 'Scheduled'" in response.get_json()['error']

    def test_completed_needs_completion_endpoint(self, client, data):
        job_id = _seed_job(data)

        response = client.post(f'/api/jobs/{job_id}/status', json={'status': 'Completed'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Use the job completion endpoint to complete a job'
        with get_db_session() as db:
            assert db.query(Certificate).count() == 0

    def test_invalid_status(self, client, data):
        job_id = _seed_job(data)

        response = client.post(f'/api/jobs/{job_id}/status', json={'status': 'Paused'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid job status: Paused'

    def test_status_is_required(self, client, data):
        job_id = _seed_job(data)

        response = client.post(f'/api/jobs/{job_id}/status', json={})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Missing required fields: status'

    def test_missing_job(self, client):
        response = client.post('/api/jobs/does-not-exist/status', json={'status': 'Scheduled'})

        assert response.status_code == 404
        assert response.get_json() == {'ok': False, 'error': 'Job not found'}
