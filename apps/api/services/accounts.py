"""User provisioning for authenticated identities."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from models.user import User
from services.formatting import isoformat, money, money_str

logger = logging.getLogger(__name__)


async def ensure_user(db: AsyncSession, user_id: str, email: Optional[str] = None) -> User:
    """Return the user row, creating it with the opening credit balance on first sight."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user:
        return user

    try:
        user = await _insert_user(db, user_id, email)
    except IntegrityError:
        await db.rollback()
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user:
            # Another request provisioned the same identity first.
            return user
        # The email already belongs to a different identity.
        logger.warning("user_email_conflict user=%s email=%s", user_id, email)
        user = await _insert_user(db, user_id, None)
    return user


async def _insert_user(db: AsyncSession, user_id: str, email: Optional[str]) -> User:
    opening_balance = money(settings.INITIAL_CREDITS)
    user = User(id=user_id, email=email, credits=opening_balance, initial_credits=opening_balance)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("user_provisioned user=%s credits=%s", user_id, money_str(opening_balance))
    return user


def serialize_user(user: User) -> Dict[str, Any]:
    return {
        "user_id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "profile_image_url": user.profile_image_url,
        "company_name": user.company_name,
        "credits": money_str(user.credits),
        "created_at": isoformat(user.created_at),
    }
