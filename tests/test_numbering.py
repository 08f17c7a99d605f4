"""
Tests for human-readable number allocation
"""
import pytest
from datetime import date

from database.models import Job, Certificate, NumberSequence
from services.numbering import format_number, next_number


@pytest.mark.unit
class TestFormatNumber:
    """Tests for format_number"""

    def test_pads_to_four_digits(self):
        assert format_number('J', 2026, 7) == 'J-2026-0007'

    def test_wider_values_are_not_truncated(self):
        assert format_number('CERT', 2026, 12345) == 'CERT-2026-12345'


@pytest.mark.integration
class TestNextNumber:
    """Tests for next_number"""

    def test_first_number_of_year(self, db_session):
        assert next_number(db_session, 'job', today=date(2026, 3, 1)) == 'J-2026-0001'

    def test_numbers_are_sequential(self, db_session):
        numbers = [next_number(db_session, 'quote', today=date(2026, 3, 1)) for _ in range(3)]
        assert numbers == ['Q-2026-0001', 'Q-2026-0002', 'Q-2026-0003']

    def test_kinds_have_independent_sequences(self, db_session):
        assert next_number(db_session, 'job', today=date(2026, 3, 1)) == 'J-2026-0001'
        assert next_number(db_session, 'certificate', today=date(2026, 3, 1)) == 'CERT-2026-0001'

    def test_seeds_from_existing_rows(self, db_session):
        """Numbers issued before the sequence existed are never re-issued"""
        db_session.add(Job(job_number='J-2026-0041'))
        db_session.add(Job(job_number='J-2026-0007'))
        db_session.flush()

        assert next_number(db_session, 'job', today=date(2026, 5, 1)) == 'J-2026-0042'

    def test_other_years_do_not_seed(self, db_session):
        db_session.add(Job(job_number='J-2025-0099'))
        db_session.flush()

        assert next_number(db_session, 'job', today=date(2026, 1, 2)) == 'J-2026-0001'

    def test_new_year_restarts_sequence(self, db_session):
        next_number(db_session, 'job', today=date(2026, 12, 31))
        next_number(db_session, 'job', today=date(2026, 12, 31))

        assert next_number(db_session, 'job', today=date(2027, 1, 1)) == 'J-2027-0001'

    def test_sequence_row_tracks_last_value(self, db_session):
        next_number(db_session, 'certificate', today=date(2026, 6, 1))
        next_number(db_session, 'certificate', today=date(2026, 6, 1))

        sequence = db_session.get(NumberSequence, 'certificate-2026')
        assert sequence.last_value == 2

    def test_non_numeric_suffixes_are_ignored(self, db_session):
        job = Job(job_number='J-2026-0003')
        db_session.add(job)
        db_session.flush()
        db_session.add(Certificate(certificate_number='CERT-2026-DRAFT', job_id=job.id))
        db_session.flush()

        assert next_number(db_session, 'certificate', today=date(2026, 6, 1)) == 'CERT-2026-0001'

    def test_unknown_kind(self, db_session):
        with pytest.raises(ValueError):
            next_number(db_session, 'invoice')
