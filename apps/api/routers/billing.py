"""Billing router: credits, ledger history and add-on services."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import get_current_user
from routers.rate_limit import rate_limit
from services.billing import purchase_service
from services.credits import add_credits, get_credit_summary, list_transactions, serialize_transaction
from services.formatting import money_str
from services.pricing import list_services, serialize_service

router = APIRouter()


class AddCreditsRequest(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)


class PurchaseServiceRequest(BaseModel):
    application_id: Optional[str] = None


@router.get("/credits")
async def credits_summary(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_credit_summary(user.id, db)


@router.post("/credits/add")
async def add_credits_endpoint(
    request: AddCreditsRequest,
    _rate_limit: None = Depends(rate_limit("credits_add", limit=30, window_seconds=3600)),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entry = await add_credits(user.id, db, amount=request.amount)
    return {
        "success": True,
        "new_balance": money_str(entry.balance_after),
        "transaction": serialize_transaction(entry),
    }


@router.get("/transactions")
async def transactions(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entries = await list_transactions(user.id, db, limit=limit)
    return [serialize_transaction(entry) for entry in entries]


@router.get("/services")
async def services_catalog(_user: User = Depends(get_current_user)):
    return list_services()


@router.post("/services/{service_code}/purchase")
async def purchase(
    service_code: str,
    request: Optional[PurchaseServiceRequest] = None,
    _rate_limit: None = Depends(rate_limit("service_purchase", limit=120, window_seconds=3600)),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    application_id = request.application_id if request else None
    service, entry = await purchase_service(user.id, service_code, db, application_id=application_id)
    return {
        "success": True,
        "service": serialize_service(service),
        "new_balance": money_str(entry.balance_after),
        "transaction": serialize_transaction(entry),
    }
