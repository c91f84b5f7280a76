"""Read-only rollups over the ledger and the hiring pipeline."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from models.application import Application
from models.candidate import Candidate
from models.job import Job
from models.transaction import Transaction
from models.user import User
from services.formatting import as_utc, money, money_str, utcnow
from services.pipeline import ApplicationStatus, JobStatus


def days_to_hire(applied_at: datetime, hired_at: datetime) -> int:
    """Whole days between application and hire, floored."""
    return (as_utc(hired_at) - as_utc(applied_at)).days


def average_time_to_hire(hired: Iterable[Tuple[datetime, datetime]]) -> int:
    durations = [days_to_hire(applied_at, hired_at) for applied_at, hired_at in hired]
    if not durations:
        return 0
    return sum(durations) // len(durations)


def cost_per_hire(total_spend: Decimal, total_hires: int) -> Decimal:
    if total_hires <= 0:
        return Decimal("0.00")
    return money(money(total_spend) / total_hires)


def conversion_rate(total_hires: int, total_applications: int) -> float:
    if total_applications <= 0:
        return 0.0
    return round(total_hires / total_applications * 100, 2)


async def _total_spend(user_id: str, db: AsyncSession, since: Optional[datetime] = None) -> Decimal:
    stmt = select(func.coalesce(func.sum(-Transaction.amount), 0)).where(
        Transaction.user_id == user_id,
        Transaction.amount < 0,
    )
    if since is not None:
        stmt = stmt.where(Transaction.created_at >= since)
    result = await db.execute(stmt)
    return money(result.scalar())


async def _count(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return int(result.scalar() or 0)


async def get_analytics(user_id: str, db: AsyncSession) -> Dict[str, Any]:
    total_spend = await _total_spend(user_id, db)

    hired_rows: Sequence[Tuple[datetime, datetime]] = (
        await db.execute(
            select(Application.applied_at, Application.status_changed_at).where(
                Application.user_id == user_id,
                Application.status == ApplicationStatus.HIRED.value,
            )
        )
    ).all()
    total_hires = len(hired_rows)

    total_applications = await _count(
        db, select(func.count(Application.id)).where(Application.user_id == user_id)
    )
    active_jobs = await _count(
        db,
        select(func.count(Job.id)).where(Job.user_id == user_id, Job.status == JobStatus.ACTIVE.value),
    )

    return {
        "total_spend": money_str(total_spend),
        "total_hires": total_hires,
        "cost_per_hire": money_str(cost_per_hire(total_spend, total_hires)),
        "avg_time_to_hire": average_time_to_hire(hired_rows),
        "conversion_rate": conversion_rate(total_hires, total_applications),
        "active_jobs_count": active_jobs,
        "total_applications": total_applications,
    }


async def get_dashboard_stats(user_id: str, db: AsyncSession) -> Dict[str, Any]:
    window_days = max(int(settings.DASHBOARD_WINDOW_DAYS), 1)
    since = utcnow() - timedelta(days=window_days)

    credits_result = await db.execute(select(User.credits).where(User.id == user_id))
    balance = credits_result.scalar_one_or_none()

    active_jobs = await _count(
        db,
        select(func.count(Job.id)).where(Job.user_id == user_id, Job.status == JobStatus.ACTIVE.value),
    )
    total_candidates = await _count(
        db, select(func.count(Candidate.id)).where(Candidate.user_id == user_id)
    )
    recent_hires = await _count(
        db,
        select(func.count(Application.id)).where(
            Application.user_id == user_id,
            Application.status == ApplicationStatus.HIRED.value,
            Application.status_changed_at >= since,
        ),
    )
    pending_applications = await _count(
        db,
        select(func.count(Application.id)).where(
            Application.user_id == user_id,
            Application.status == ApplicationStatus.APPLIED.value,
        ),
    )

    return {
        "credits": money_str(balance),
        "active_jobs": active_jobs,
        "total_candidates": total_candidates,
        "month_spend": money_str(await _total_spend(user_id, db, since=since)),
        "recent_hires": recent_hires,
        "pending_applications": pending_applications,
        "window_days": window_days,
    }
