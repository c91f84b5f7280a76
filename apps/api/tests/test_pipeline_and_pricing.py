from decimal import Decimal

import pytest

from services.errors import InvalidTransitionError, NotFoundError, ValidationError
from services.formatting import money, money_str
from services.pipeline import (
    ApplicationStatus,
    JobStatus,
    can_transition_application,
    ensure_application_transition,
    ensure_job_transition,
    parse_application_status,
)
from services.pricing import PRICING, SERVICE_CATALOG, get_service, pricing_table


def test_price_list_matches_published_rates():
    assert PRICING.JOB_POST == Decimal("25.00")
    assert PRICING.SUCCESSFUL_HIRE == Decimal("100.00")
    assert pricing_table() == {
        "job_post": "25.00",
        "successful_hire": "100.00",
        "background_check": "30.00",
        "skill_assessment": "15.00",
        "video_interview": "20.00",
    }
    assert {service.category for service in SERVICE_CATALOG.values()} == {"screening", "assessment", "interview"}


def test_service_lookup_is_case_insensitive():
    assert get_service(" Background_Check ").price == PRICING.BACKGROUND_CHECK
    with pytest.raises(NotFoundError):
        get_service("drug_test")


def test_money_rounds_half_up_to_cents():
    assert money("10.005") == Decimal("10.01")
    assert money(7) == Decimal("7.00")
    assert money(None) == Decimal("0.00")
    assert money_str(Decimal("-25")) == "-25.00"


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (ApplicationStatus.APPLIED, ApplicationStatus.SCREENING, True),
        (ApplicationStatus.APPLIED, ApplicationStatus.OFFER, True),
        (ApplicationStatus.OFFER, ApplicationStatus.HIRED, True),
        (ApplicationStatus.INTERVIEW, ApplicationStatus.REJECTED, True),
        (ApplicationStatus.INTERVIEW, ApplicationStatus.SCREENING, False),
        (ApplicationStatus.HIRED, ApplicationStatus.APPLIED, False),
        (ApplicationStatus.HIRED, ApplicationStatus.REJECTED, False),
        (ApplicationStatus.REJECTED, ApplicationStatus.SCREENING, False),
    ],
)
def test_application_transitions(current, target, allowed):
    assert can_transition_application(current, target) is allowed


def test_transition_guards_raise_domain_errors():
    with pytest.raises(InvalidTransitionError):
        ensure_application_transition(ApplicationStatus.HIRED, ApplicationStatus.APPLIED)
    with pytest.raises(InvalidTransitionError):
        ensure_job_transition(JobStatus.CLOSED, JobStatus.ACTIVE)
    with pytest.raises(InvalidTransitionError):
        ensure_job_transition(JobStatus.DRAFT, JobStatus.CLOSED)
    ensure_job_transition(JobStatus.DRAFT, JobStatus.ACTIVE)
    ensure_job_transition(JobStatus.ACTIVE, JobStatus.CLOSED)


def test_parse_application_status():
    assert parse_application_status(" Hired ") is ApplicationStatus.HIRED
    assert parse_application_status(ApplicationStatus.OFFER) is ApplicationStatus.OFFER
    with pytest.raises(ValidationError):
        parse_application_status("onboarded")
