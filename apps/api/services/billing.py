"""Billable state changes.

Each operation stages a conditional balance update, the triggering entity
transition and one ledger row, then commits once. If the charge or the
transition cannot be applied the whole unit is rolled back, so a job is
never published and an application is never hired without its charge.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from models.application import Application
from models.job import Job
from models.transaction import Transaction
from services import credits
from services.errors import InvalidTransitionError
from services.formatting import utcnow
from services.pipeline import (
    ApplicationStatus,
    JobStatus,
    ensure_application_transition,
    ensure_job_transition,
    parse_application_status,
)
from services.pricing import PRICING, AddOnService, get_service
from services.recruiting import get_owned_application, get_owned_job

logger = logging.getLogger(__name__)


async def _transition_job(db: AsyncSession, job: Job, current: JobStatus, target: JobStatus) -> None:
    now = utcnow()
    values = {"status": target.value, "updated_at": now}
    if target is JobStatus.ACTIVE:
        values["posted_at"] = now
    elif target is JobStatus.CLOSED:
        values["closed_at"] = now

    result = await db.execute(
        update(Job)
        .where(Job.id == job.id, Job.status == current.value)
        .values(**values)
        .returning(Job.id)
        .execution_options(synchronize_session=False)
    )
    if result.scalar_one_or_none() is None:
        raise InvalidTransitionError(f"Job {job.id} changed status concurrently; retry the request.")


async def publish_job(user_id: str, job_id: str, db: AsyncSession) -> Tuple[Job, Transaction]:
    """Move a draft job to active and charge the job-post fee."""
    try:
        job = await get_owned_job(user_id, job_id, db)
        current = JobStatus(job.status)
        ensure_job_transition(current, JobStatus.ACTIVE)

        entry = await credits.charge(
            user_id,
            db,
            price=PRICING.JOB_POST,
            entry_type="job_post",
            description=f"Posted job: {job.title}",
            related_job_id=job.id,
        )
        await _transition_job(db, job, current, JobStatus.ACTIVE)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(job)
    logger.info("job_published user=%s job=%s", user_id, job.id)
    return job, entry


async def close_job(user_id: str, job_id: str, db: AsyncSession) -> Job:
    try:
        job = await get_owned_job(user_id, job_id, db)
        current = JobStatus(job.status)
        ensure_job_transition(current, JobStatus.CLOSED)
        await _transition_job(db, job, current, JobStatus.CLOSED)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(job)
    return job


async def update_application_status(
    user_id: str,
    application_id: str,
    status: str,
    db: AsyncSession,
) -> Tuple[Application, Optional[Transaction]]:
    """Advance an application through the pipeline, charging the hire fee on hire.

    Moving to the current status is a no-op, so repeating a hire never
    charges twice.
    """
    target = parse_application_status(status)
    try:
        application = await get_owned_application(user_id, application_id, db)
        current = ApplicationStatus(application.status)
        if current is target:
            return application, None
        ensure_application_transition(current, target)

        entry = None
        if target is ApplicationStatus.HIRED:
            entry = await credits.charge(
                user_id,
                db,
                price=PRICING.SUCCESSFUL_HIRE,
                entry_type="hire",
                description="Successful hire fee",
                related_job_id=application.job_id,
                related_application_id=application.id,
            )

        now = utcnow()
        result = await db.execute(
            update(Application)
            .where(Application.id == application.id, Application.status == current.value)
            .values(status=target.value, status_changed_at=now, updated_at=now)
            .returning(Application.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            raise InvalidTransitionError(
                f"Application {application.id} changed status concurrently; retry the request."
            )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(application)
    logger.info(
        "application_status_changed user=%s application=%s from=%s to=%s",
        user_id,
        application.id,
        current.value,
        target.value,
    )
    return application, entry


async def mark_hired(user_id: str, application_id: str, db: AsyncSession) -> Tuple[Application, Optional[Transaction]]:
    return await update_application_status(user_id, application_id, ApplicationStatus.HIRED.value, db)


async def purchase_service(
    user_id: str,
    service_code: str,
    db: AsyncSession,
    application_id: Optional[str] = None,
) -> Tuple[AddOnService, Transaction]:
    """Charge an add-on service, optionally attributed to one application."""
    service = get_service(service_code)
    application_id = (application_id or "").strip() or None
    try:
        related_job_id = None
        description = service.name
        if application_id:
            application = await get_owned_application(user_id, application_id, db)
            related_job_id = application.job_id
            description = f"{service.name} for application {application.id}"

        entry = await credits.charge(
            user_id,
            db,
            price=service.price,
            entry_type="service",
            description=description,
            related_job_id=related_job_id,
            related_application_id=application_id,
            related_service_id=service.code,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return service, entry
