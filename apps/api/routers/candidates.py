"""Candidate router."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import get_current_user
from services.recruiting import create_candidate, list_candidates, serialize_candidate

router = APIRouter()


class CreateCandidateRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=50)
    linkedin_url: Optional[str] = Field(default=None, max_length=300)
    resume_url: Optional[str] = Field(default=None, max_length=500)
    skills: List[str] = Field(default_factory=list)
    years_of_experience: Optional[int] = Field(default=None, ge=0, le=80)
    current_company: Optional[str] = Field(default=None, max_length=200)
    current_title: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = None


@router.get("")
async def get_candidates(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return [serialize_candidate(candidate) for candidate in await list_candidates(user.id, db)]


@router.post("")
async def post_candidate(
    request: CreateCandidateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    payload = request.model_dump()
    payload["email"] = str(request.email)
    payload["skills"] = [skill.strip() for skill in request.skills if skill.strip()]
    candidate = await create_candidate(user.id, payload, db)
    return serialize_candidate(candidate)
