"""
Status values and allowed transitions for every workflow entity.

Handlers never compare raw status strings; they ask this module whether a
move is allowed and get an InvalidTransitionError when it is not.
"""

from enum import Enum
from typing import Dict, FrozenSet

from services.errors import InvalidTransitionError


class QuoteStatus(str, Enum):
    DRAFT = 'Draft'
    SENT = 'Sent'
    ACCEPTED = 'Accepted'
    REJECTED = 'Rejected'
    EXPIRED = 'Expired'
    WON = 'Won'
    LOST = 'Lost'


class JobStatus(str, Enum):
    DRAFT = 'Draft'
    SCHEDULED = 'Scheduled'
    IN_PROGRESS = 'In Progress'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'


class ApprovalStatus(str, Enum):
    DRAFT = 'Draft'
    PENDING = 'Pending'
    APPROVED = 'Approved'
    REJECTED = 'Rejected'


class RecommendationStatus(str, Enum):
    DRAFT = 'Draft'
    FINALIZED = 'Finalized'


class AssessmentStatus(str, Enum):
    SCHEDULED = 'Scheduled'
    IN_PROGRESS = 'In Progress'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'


class OpportunityStage(str, Enum):
    NEW = 'NEW'
    ASSESSMENT = 'ASSESSMENT'
    RECOMMENDATION = 'RECOMMENDATION'
    QUOTED = 'QUOTED'
    WON = 'WON'
    LOST = 'LOST'


class TaskStatus(str, Enum):
    NOT_STARTED = 'Not Started'
    PENDING = 'Pending'
    IN_PROGRESS = 'In Progress'
    COMPLETED = 'Completed'


def _table(pairs) -> Dict[str, FrozenSet[str]]:
    return {src.value: frozenset(t.value for t in targets) for src, targets in pairs.items()}


QUOTE_TRANSITIONS = _table({
    QuoteStatus.DRAFT: {QuoteStatus.SENT, QuoteStatus.ACCEPTED, QuoteStatus.REJECTED},
    QuoteStatus.SENT: {QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, QuoteStatus.EXPIRED, QuoteStatus.LOST},
    QuoteStatus.ACCEPTED: {QuoteStatus.WON, QuoteStatus.LOST},
    QuoteStatus.REJECTED: set(),
    QuoteStatus.EXPIRED: set(),
    QuoteStatus.WON: set(),
    QuoteStatus.LOST: set(),
})

JOB_TRANSITIONS = _table({
    JobStatus.DRAFT: {JobStatus.SCHEDULED, JobStatus.IN_PROGRESS, JobStatus.COMPLETED, JobStatus.CANCELLED},
    JobStatus.SCHEDULED: {JobStatus.IN_PROGRESS, JobStatus.COMPLETED, JobStatus.CANCELLED},
    JobStatus.IN_PROGRESS: {JobStatus.COMPLETED, JobStatus.CANCELLED},
    JobStatus.COMPLETED: set(),
    JobStatus.CANCELLED: set(),
})

APPROVAL_TRANSITIONS = _table({
    ApprovalStatus.DRAFT: {ApprovalStatus.PENDING},
    ApprovalStatus.REJECTED: {ApprovalStatus.PENDING},
    ApprovalStatus.PENDING: {ApprovalStatus.APPROVED, ApprovalStatus.REJECTED},
    ApprovalStatus.APPROVED: set(),
})

RECOMMENDATION_TRANSITIONS = _table({
    RecommendationStatus.DRAFT: {RecommendationStatus.FINALIZED},
    RecommendationStatus.FINALIZED: set(),
})

ASSESSMENT_TRANSITIONS = _table({
    AssessmentStatus.SCHEDULED: {AssessmentStatus.IN_PROGRESS, AssessmentStatus.COMPLETED, AssessmentStatus.CANCELLED},
    AssessmentStatus.IN_PROGRESS: {AssessmentStatus.COMPLETED, AssessmentStatus.CANCELLED},
    AssessmentStatus.COMPLETED: set(),
    AssessmentStatus.CANCELLED: set(),
})

# Pipeline order for the open opportunity stages
_STAGE_ORDER = [
    OpportunityStage.NEW,
    OpportunityStage.ASSESSMENT,
    OpportunityStage.RECOMMENDATION,
    OpportunityStage.QUOTED,
]


def _opportunity_transitions() -> Dict[str, FrozenSet[str]]:
    table = {}
    for index, stage in enumerate(_STAGE_ORDER):
        forward = set(_STAGE_ORDER[index + 1:]) | {OpportunityStage.WON, OpportunityStage.LOST}
        table[stage] = forward
    table[OpportunityStage.WON] = set()
    table[OpportunityStage.LOST] = set()
    return _table(table)


OPPORTUNITY_TRANSITIONS = _opportunity_transitions()

TRANSITIONS = {
    'quote': QUOTE_TRANSITIONS,
    'job': JOB_TRANSITIONS,
    'approval': APPROVAL_TRANSITIONS,
    'recommendation': RECOMMENDATION_TRANSITIONS,
    'assessment': ASSESSMENT_TRANSITIONS,
    'opportunity': OPPORTUNITY_TRANSITIONS,
}

# Status a record is assumed to hold when the column is empty
_DEFAULTS = {
    'quote': QuoteStatus.DRAFT.value,
    'job': JobStatus.DRAFT.value,
    'approval': ApprovalStatus.DRAFT.value,
    'recommendation': RecommendationStatus.DRAFT.value,
    'assessment': AssessmentStatus.SCHEDULED.value,
    'opportunity': OpportunityStage.NEW.value,
}


def _value(status) -> str:
    return status.value if isinstance(status, Enum) else status


def can_transition(entity: str, current, target) -> bool:
    """Return True when `entity` may move from `current` to `target`."""
    if entity not in TRANSITIONS:
        raise ValueError(f"Unknown status machine: {entity}")
    current = _value(current) or _DEFAULTS[entity]
    return _value(target) in TRANSITIONS[entity].get(current, frozenset())


def ensure_transition(entity: str, current, target, message: str = None):
    """Raise InvalidTransitionError unless the move is allowed."""
    if not can_transition(entity, current, target):
        current = _value(current) or _DEFAULTS[entity]
        raise InvalidTransitionError(
            message or f"Cannot change {entity} status from '{current}' to '{_value(target)}'"
        )


def is_terminal(entity: str, status) -> bool:
    status = _value(status) or _DEFAULTS[entity]
    return not TRANSITIONS[entity].get(status)
