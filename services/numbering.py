"""
Human-readable number allocation (J-2026-0001, Q-2026-0001, CERT-2026-0001).

Each kind/year pair owns one row in number_sequences. The row is locked
while it is incremented so concurrent requests never receive the same
number; the first allocation of a year seeds the counter from the highest
number already stored in the entity table.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.models import NumberSequence, Job, Quote, Certificate

logger = logging.getLogger(__name__)

# kind -> (prefix, model, column holding the number)
NUMBER_FORMATS = {
    'job': ('J', Job, Job.job_number),
    'quote': ('Q', Quote, Quote.quote_number),
    'certificate': ('CERT', Certificate, Certificate.certificate_number),
}


def format_number(prefix: str, year: int, value: int) -> str:
    return f"{prefix}-{year}-{value:04d}"


def _parse_suffix(number: str, stem: str) -> Optional[int]:
    if not number or not number.startswith(stem):
        return None
    suffix = number[len(stem):]
    return int(suffix) if suffix.isdigit() else None


def _highest_existing(session: Session, kind: str, year: int) -> int:
    prefix, _model, column = NUMBER_FORMATS[kind]
    stem = f"{prefix}-{year}-"
    rows = session.query(column).filter(column.like(f"{stem}%")).all()
    values = [_parse_suffix(row[0], stem) for row in rows]
    return max([v for v in values if v is not None], default=0)


def _lock_sequence(session: Session, name: str) -> Optional[NumberSequence]:
    return (
        session.query(NumberSequence)
        .filter(NumberSequence.name == name)
        .with_for_update()
        .first()
    )


def next_number(session: Session, kind: str, today: date = None) -> str:
    """
    Allocate the next number for `kind` ('job', 'quote' or 'certificate').

    Runs inside the caller's transaction; the allocation is only durable
    once that transaction commits.
    """
    if kind not in NUMBER_FORMATS:
        raise ValueError(f"Unknown number kind: {kind}")

    prefix = NUMBER_FORMATS[kind][0]
    year = (today or date.today()).year
    name = f"{kind}-{year}"

    sequence = _lock_sequence(session, name)
    if sequence is None:
        seed = _highest_existing(session, kind, year)
        try:
            with session.begin_nested():
                session.add(NumberSequence(name=name, last_value=seed))
        except IntegrityError:
            # Another transaction created the row first
            logger.debug(f"Sequence {name} created concurrently, re-reading")
        sequence = _lock_sequence(session, name)

    sequence.last_value = (sequence.last_value or 0) + 1
    session.flush()

    number = format_number(prefix, year, sequence.last_value)
    logger.info(f"Allocated {kind} number {number}")
    return number
