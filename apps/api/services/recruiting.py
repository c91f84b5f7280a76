"""Job, candidate and application CRUD scoped to the owning user."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from models.application import Application
from models.candidate import Candidate
from models.job import Job
from services.errors import NotFoundError, ValidationError
from services.formatting import isoformat, utcnow
from services.pipeline import ApplicationStatus, JobStatus


async def get_owned_job(user_id: str, job_id: str, db: AsyncSession) -> Job:
    result = await db.execute(select(Job).where(Job.id == job_id, Job.user_id == user_id))
    job = result.scalar_one_or_none()
    if not job:
        raise NotFoundError("Job not found")
    return job


async def get_owned_candidate(user_id: str, candidate_id: str, db: AsyncSession) -> Candidate:
    result = await db.execute(
        select(Candidate).where(Candidate.id == candidate_id, Candidate.user_id == user_id)
    )
    candidate = result.scalar_one_or_none()
    if not candidate:
        raise NotFoundError("Candidate not found")
    return candidate


async def get_owned_application(user_id: str, application_id: str, db: AsyncSession) -> Application:
    result = await db.execute(
        select(Application).where(Application.id == application_id, Application.user_id == user_id)
    )
    application = result.scalar_one_or_none()
    if not application:
        raise NotFoundError("Application not found")
    return application


async def list_jobs(user_id: str, db: AsyncSession) -> List[Job]:
    result = await db.execute(select(Job).where(Job.user_id == user_id).order_by(Job.created_at.desc()))
    return list(result.scalars().all())


async def create_job(user_id: str, payload: Dict[str, Any], db: AsyncSession) -> Job:
    salary_min = payload.get("salary_min")
    salary_max = payload.get("salary_max")
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise ValidationError("salary_min must not exceed salary_max")

    # New postings always start as drafts; publishing goes through billing.
    job = Job(user_id=user_id, status=JobStatus.DRAFT.value, **payload)
    db.add(job)
    await db.commit()
    await db.refresh(job)
    return job


async def list_candidates(user_id: str, db: AsyncSession) -> List[Candidate]:
    result = await db.execute(
        select(Candidate).where(Candidate.user_id == user_id).order_by(Candidate.created_at.desc())
    )
    return list(result.scalars().all())


async def create_candidate(user_id: str, payload: Dict[str, Any], db: AsyncSession) -> Candidate:
    candidate = Candidate(user_id=user_id, **payload)
    db.add(candidate)
    await db.commit()
    await db.refresh(candidate)
    return candidate


async def list_applications(user_id: str, db: AsyncSession) -> List[Application]:
    result = await db.execute(
        select(Application)
        .options(selectinload(Application.job), selectinload(Application.candidate))
        .where(Application.user_id == user_id)
        .order_by(Application.applied_at.desc())
    )
    return list(result.scalars().all())


async def create_application(
    user_id: str,
    *,
    job_id: str,
    candidate_id: str,
    notes: Optional[str],
    db: AsyncSession,
) -> Application:
    await get_owned_job(user_id, job_id, db)
    await get_owned_candidate(user_id, candidate_id, db)

    now = utcnow()
    application = Application(
        user_id=user_id,
        job_id=job_id,
        candidate_id=candidate_id,
        status=ApplicationStatus.APPLIED.value,
        applied_at=now,
        status_changed_at=now,
        notes=notes,
    )
    db.add(application)
    await db.commit()
    await db.refresh(application)
    return application


def serialize_job(job: Job) -> Dict[str, Any]:
    return {
        "id": job.id,
        "title": job.title,
        "department": job.department,
        "location": job.location,
        "employment_type": job.employment_type,
        "salary_min": job.salary_min,
        "salary_max": job.salary_max,
        "description": job.description,
        "requirements": job.requirements,
        "status": job.status,
        "posted_at": isoformat(job.posted_at),
        "closed_at": isoformat(job.closed_at),
        "created_at": isoformat(job.created_at),
        "updated_at": isoformat(job.updated_at),
    }


def serialize_candidate(candidate: Candidate) -> Dict[str, Any]:
    return {
        "id": candidate.id,
        "first_name": candidate.first_name,
        "last_name": candidate.last_name,
        "email": candidate.email,
        "phone": candidate.phone,
        "linkedin_url": candidate.linkedin_url,
        "resume_url": candidate.resume_url,
        "skills": list(candidate.skills or []),
        "years_of_experience": candidate.years_of_experience,
        "current_company": candidate.current_company,
        "current_title": candidate.current_title,
        "notes": candidate.notes,
        "created_at": isoformat(candidate.created_at),
    }


def serialize_application(application: Application, *, include_relations: bool = False) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": application.id,
        "job_id": application.job_id,
        "candidate_id": application.candidate_id,
        "status": application.status,
        "applied_at": isoformat(application.applied_at),
        "status_changed_at": isoformat(application.status_changed_at),
        "notes": application.notes,
    }
    if include_relations:
        job = application.job
        candidate = application.candidate
        payload["job"] = {"id": job.id, "title": job.title} if job else None
        payload["candidate"] = (
            {
                "id": candidate.id,
                "first_name": candidate.first_name,
                "last_name": candidate.last_name,
                "email": candidate.email,
                "phone": candidate.phone,
                "current_title": candidate.current_title,
                "current_company": candidate.current_company,
                "years_of_experience": candidate.years_of_experience,
            }
            if candidate
            else None
        )
    return payload
