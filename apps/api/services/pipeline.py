"""Status state machines for jobs and applications."""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet

from services.errors import InvalidTransitionError, ValidationError


class JobStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    SCREENING = "screening"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


JOB_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.DRAFT: frozenset({JobStatus.ACTIVE}),
    JobStatus.ACTIVE: frozenset({JobStatus.CLOSED}),
    JobStatus.CLOSED: frozenset(),
}

PIPELINE_ORDER = (
    ApplicationStatus.APPLIED,
    ApplicationStatus.SCREENING,
    ApplicationStatus.INTERVIEW,
    ApplicationStatus.OFFER,
    ApplicationStatus.HIRED,
)
TERMINAL_APPLICATION_STATUSES = frozenset({ApplicationStatus.HIRED, ApplicationStatus.REJECTED})


def parse_application_status(value) -> ApplicationStatus:
    if isinstance(value, ApplicationStatus):
        return value
    try:
        return ApplicationStatus(str(value or "").strip().lower())
    except ValueError as exc:
        allowed = ", ".join(status.value for status in ApplicationStatus)
        raise ValidationError(f"Unknown application status '{value}'. Expected one of: {allowed}.") from exc


def can_transition_application(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    """Forward moves (stages may be skipped) or rejection from any open stage."""
    if current in TERMINAL_APPLICATION_STATUSES:
        return False
    if target is ApplicationStatus.REJECTED:
        return True
    return PIPELINE_ORDER.index(target) > PIPELINE_ORDER.index(current)


def ensure_application_transition(current: ApplicationStatus, target: ApplicationStatus) -> None:
    if not can_transition_application(current, target):
        raise InvalidTransitionError(
            f"Cannot move application from {current.value} to {target.value}."
        )


def ensure_job_transition(current: JobStatus, target: JobStatus) -> None:
    if target not in JOB_TRANSITIONS[current]:
        raise InvalidTransitionError(f"Cannot move job from {current.value} to {target.value}.")
