"""Job posting router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import get_current_user
from routers.rate_limit import rate_limit
from services.billing import close_job, publish_job
from services.credits import serialize_transaction
from services.recruiting import create_job, get_owned_job, list_jobs, serialize_job

router = APIRouter()


class CreateJobRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    department: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=200)
    employment_type: str = Field(min_length=1, max_length=50)
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)
    description: str = Field(min_length=1)
    requirements: Optional[str] = None


@router.get("")
async def get_jobs(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return [serialize_job(job) for job in await list_jobs(user.id, db)]


@router.post("")
async def post_job(
    request: CreateJobRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    job = await create_job(user.id, request.model_dump(), db)
    return serialize_job(job)


@router.get("/{job_id}")
async def get_job(
    job_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return serialize_job(await get_owned_job(user.id, job_id, db))


@router.patch("/{job_id}/publish")
async def publish(
    job_id: str,
    _rate_limit: None = Depends(rate_limit("job_publish", limit=60, window_seconds=3600)),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Publish a draft job. Charges the job-post fee in the same commit."""
    job, entry = await publish_job(user.id, job_id, db)
    payload = serialize_job(job)
    payload["transaction"] = serialize_transaction(entry)
    return payload


@router.patch("/{job_id}/close")
async def close(
    job_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return serialize_job(await close_job(user.id, job_id, db))
