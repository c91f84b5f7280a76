"""Application pipeline router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import get_current_user
from routers.rate_limit import rate_limit
from services.billing import update_application_status
from services.credits import serialize_transaction
from services.pipeline import ApplicationStatus
from services.recruiting import create_application, list_applications, serialize_application

router = APIRouter()


class CreateApplicationRequest(BaseModel):
    job_id: str
    candidate_id: str
    notes: Optional[str] = None


class UpdateStatusRequest(BaseModel):
    status: ApplicationStatus


@router.get("")
async def get_applications(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    applications = await list_applications(user.id, db)
    return [serialize_application(application, include_relations=True) for application in applications]


@router.post("")
async def post_application(
    request: CreateApplicationRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    application = await create_application(
        user.id,
        job_id=request.job_id,
        candidate_id=request.candidate_id,
        notes=request.notes,
        db=db,
    )
    return serialize_application(application)


@router.patch("/{application_id}/status")
async def patch_status(
    application_id: str,
    request: UpdateStatusRequest,
    _rate_limit: None = Depends(rate_limit("application_status", limit=300, window_seconds=3600)),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Move an application; moving to hired charges the hire fee atomically."""
    application, entry = await update_application_status(user.id, application_id, request.status, db)
    payload = serialize_application(application)
    payload["transaction"] = serialize_transaction(entry) if entry else None
    return payload
