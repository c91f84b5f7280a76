"""
Authentication router: current user profile.

Sign-in itself happens at the external identity provider; this service only
trusts the signed session token it is handed.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import get_current_user
from services.accounts import serialize_user

router = APIRouter()


class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    company_name: Optional[str] = Field(default=None, max_length=200)
    profile_image_url: Optional[str] = Field(default=None, max_length=500)


@router.get("/me")
async def get_me(user: User = Depends(get_current_user)):
    """Get current user profile and credit balance."""
    return serialize_user(user)


@router.patch("/me")
async def update_me(
    request: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update display fields. The credit balance is not writable here."""
    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return serialize_user(user)
