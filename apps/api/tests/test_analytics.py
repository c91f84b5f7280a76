from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from conftest import auth_header, seed_user
from models.application import Application
from models.candidate import Candidate
from models.job import Job
from models.transaction import Transaction
from services.analytics import average_time_to_hire, conversion_rate, cost_per_hire, days_to_hire


USER_ID = "analytics-user"
AUTH = auth_header(USER_ID)


def test_days_to_hire_floors_partial_days():
    applied = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
    assert days_to_hire(applied, applied + timedelta(days=4, hours=23)) == 4
    assert days_to_hire(applied.replace(tzinfo=None), applied + timedelta(days=2)) == 2


def test_average_time_to_hire_floors_each_record_then_the_mean():
    day0 = datetime(2026, 3, 1, tzinfo=timezone.utc)
    hires = [
        (day0, day0 + timedelta(days=5, hours=20)),
        (day0, day0 + timedelta(days=9, hours=1)),
        (day0, day0 + timedelta(days=1)),
    ]
    assert average_time_to_hire(hires) == 5
    assert average_time_to_hire([]) == 0


def test_rate_helpers_handle_empty_denominators():
    assert cost_per_hire(Decimal("200.00"), 0) == Decimal("0.00")
    assert cost_per_hire(Decimal("100.00"), 3) == Decimal("33.33")
    assert conversion_rate(0, 0) == 0.0
    assert conversion_rate(1, 3) == 33.33


async def _seed_pipeline(session_maker):
    now = datetime.now(timezone.utc)
    day0 = now - timedelta(days=60)
    async with session_maker() as session:
        job = Job(
            user_id=USER_ID,
            title="Data Analyst",
            employment_type="Full-time",
            description="Dashboards",
            status="active",
            posted_at=day0,
        )
        candidates = [
            Candidate(user_id=USER_ID, first_name=f"C{index}", last_name="Test", email=f"c{index}@example.com")
            for index in range(4)
        ]
        session.add(job)
        session.add_all(candidates)
        await session.flush()

        session.add_all(
            [
                Application(
                    user_id=USER_ID, job_id=job.id, candidate_id=candidates[0].id,
                    status="hired", applied_at=day0, status_changed_at=day0 + timedelta(days=5),
                ),
                Application(
                    user_id=USER_ID, job_id=job.id, candidate_id=candidates[1].id,
                    status="hired", applied_at=day0, status_changed_at=day0 + timedelta(days=9),
                ),
                Application(
                    user_id=USER_ID, job_id=job.id, candidate_id=candidates[2].id,
                    status="applied", applied_at=now, status_changed_at=now,
                ),
                Application(
                    user_id=USER_ID, job_id=job.id, candidate_id=candidates[3].id,
                    status="rejected", applied_at=day0, status_changed_at=now - timedelta(days=1),
                ),
            ]
        )
        session.add_all(
            [
                Transaction(
                    user_id=USER_ID, type="credit_purchase", description="Added credits",
                    amount=Decimal("300.00"), balance_after=Decimal("400.00"), created_at=day0,
                ),
                Transaction(
                    user_id=USER_ID, type="hire", description="Successful hire fee",
                    amount=Decimal("-100.00"), balance_after=Decimal("300.00"), created_at=day0,
                ),
                Transaction(
                    user_id=USER_ID, type="job_post", description="Posted job: Data Analyst",
                    amount=Decimal("-25.00"), balance_after=Decimal("275.00"), created_at=now - timedelta(days=3),
                ),
                Transaction(
                    user_id=USER_ID, type="service", description="Video Interview",
                    amount=Decimal("-75.00"), balance_after=Decimal("200.00"), created_at=now - timedelta(days=2),
                ),
            ]
        )
        await session.commit()


@pytest.mark.asyncio
async def test_analytics_rollup(client, session_maker):
    await seed_user(session_maker, USER_ID, credits="200.00")
    await _seed_pipeline(session_maker)

    response = await client.get("/analytics", headers=AUTH)
    assert response.status_code == 200
    payload = response.json()
    assert payload["total_spend"] == "200.00"
    assert payload["total_hires"] == 2
    assert payload["cost_per_hire"] == "100.00"
    assert payload["avg_time_to_hire"] == 7
    assert payload["conversion_rate"] == 50.0
    assert payload["total_applications"] == 4
    assert payload["active_jobs_count"] == 1


@pytest.mark.asyncio
async def test_dashboard_stats_use_trailing_window(client, session_maker):
    await seed_user(session_maker, USER_ID, credits="200.00")
    await _seed_pipeline(session_maker)

    response = await client.get("/dashboard/stats", headers=AUTH)
    assert response.status_code == 200
    payload = response.json()
    assert payload["credits"] == "200.00"
    assert payload["active_jobs"] == 1
    assert payload["total_candidates"] == 4
    assert payload["month_spend"] == "100.00"
    assert payload["recent_hires"] == 0
    assert payload["pending_applications"] == 1
    assert payload["window_days"] == 30


@pytest.mark.asyncio
async def test_analytics_for_empty_account(client):
    payload = (await client.get("/analytics", headers=AUTH)).json()
    assert payload == {
        "total_spend": "0.00",
        "total_hires": 0,
        "cost_per_hire": "0.00",
        "avg_time_to_hire": 0,
        "conversion_rate": 0.0,
        "active_jobs_count": 0,
        "total_applications": 0,
    }
