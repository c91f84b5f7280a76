"""Credit ledger: the only code path that writes users.credits."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from models.transaction import Transaction
from models.user import User
from services.errors import InsufficientCreditsError, NotFoundError, ValidationError
from services.formatting import isoformat, money, money_str, utcnow
from services.pricing import pricing_table

logger = logging.getLogger(__name__)

TRANSACTION_TYPES = ("job_post", "hire", "service", "credit_purchase")


async def get_credit_balance(user_id: str, db: AsyncSession) -> Decimal:
    result = await db.execute(select(User.credits).where(User.id == user_id))
    balance = result.scalar_one_or_none()
    if balance is None:
        raise NotFoundError("User not found")
    return money(balance)


async def _apply_balance_change(user_id: str, db: AsyncSession, *, delta: Decimal) -> Decimal:
    """Atomically move the balance by delta and return the new balance.

    Debits only match while credits >= the charge, so concurrent writers
    cannot drive the balance negative.
    """
    stmt = update(User).where(User.id == user_id)
    if delta < 0:
        stmt = stmt.where(User.credits >= -delta)
    stmt = (
        stmt.values(credits=User.credits + delta, updated_at=utcnow())
        .returning(User.credits)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    new_balance = result.scalar_one_or_none()
    if new_balance is not None:
        return money(new_balance)

    available = await get_credit_balance(user_id, db)
    logger.warning(
        "credit_charge_refused user=%s required=%s available=%s",
        user_id,
        money_str(-delta),
        money_str(available),
    )
    raise InsufficientCreditsError(required=money_str(-delta), available=money_str(available))


async def record_entry(
    user_id: str,
    db: AsyncSession,
    *,
    entry_type: str,
    amount: Decimal,
    description: str,
    related_job_id: Optional[str] = None,
    related_application_id: Optional[str] = None,
    related_service_id: Optional[str] = None,
) -> Transaction:
    """Apply a signed amount to the balance and append the matching ledger row.

    Does not commit: callers commit once their own state change is staged so
    the balance, the entity and the ledger row land together.
    """
    if entry_type not in TRANSACTION_TYPES:
        raise ValueError(f"Unknown transaction type: {entry_type}")
    signed_amount = money(amount)
    balance_after = await _apply_balance_change(user_id, db, delta=signed_amount)
    entry = Transaction(
        user_id=user_id,
        type=entry_type,
        description=description,
        amount=signed_amount,
        balance_after=balance_after,
        related_job_id=related_job_id,
        related_application_id=related_application_id,
        related_service_id=related_service_id,
        created_at=utcnow(),
    )
    db.add(entry)
    await db.flush()
    logger.info(
        "ledger_entry user=%s kind=%s amount=%s balance_after=%s",
        user_id,
        entry_type,
        money_str(signed_amount),
        money_str(balance_after),
    )
    return entry


async def charge(user_id: str, db: AsyncSession, *, price: Decimal, **kwargs: Any) -> Transaction:
    return await record_entry(user_id, db, amount=-money(price), **kwargs)


async def add_credits(user_id: str, db: AsyncSession, *, amount: Any) -> Transaction:
    try:
        grant = money(amount)
    except ArithmeticError as exc:
        raise ValidationError("amount must be a decimal number") from exc
    if grant <= 0:
        raise ValidationError("amount must be greater than 0")
    if grant > money(settings.MAX_CREDIT_TOPUP):
        raise ValidationError(f"amount must not exceed {money_str(settings.MAX_CREDIT_TOPUP)}")

    try:
        entry = await record_entry(
            user_id,
            db,
            entry_type="credit_purchase",
            amount=grant,
            description="Added credits",
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return entry


async def list_transactions(user_id: str, db: AsyncSession, limit: Optional[int] = None) -> List[Transaction]:
    row_limit = max(int(limit or settings.TRANSACTION_HISTORY_LIMIT), 1)
    result = await db.execute(
        select(Transaction)
        .where(Transaction.user_id == user_id)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .limit(row_limit)
    )
    return list(result.scalars().all())


async def reconcile_ledger(user_id: str, db: AsyncSession) -> Dict[str, Any]:
    """Compare the cached balance against initial_credits + sum(amount)."""
    user_result = await db.execute(select(User.credits, User.initial_credits).where(User.id == user_id))
    row = user_result.one_or_none()
    if row is None:
        raise NotFoundError("User not found")

    totals = await db.execute(
        select(func.coalesce(func.sum(Transaction.amount), 0), func.count(Transaction.id)).where(
            Transaction.user_id == user_id
        )
    )
    ledger_sum, transaction_count = totals.one()

    balance = money(row.credits)
    expected = money(row.initial_credits) + money(ledger_sum)
    difference = balance - expected
    if difference != 0:
        logger.error(
            "ledger_out_of_balance user=%s balance=%s expected=%s",
            user_id,
            money_str(balance),
            money_str(expected),
        )
    return {
        "balance": money_str(balance),
        "initial_credits": money_str(row.initial_credits),
        "expected_balance": money_str(expected),
        "difference": money_str(difference),
        "in_balance": difference == 0,
        "transaction_count": int(transaction_count or 0),
    }


def serialize_transaction(entry: Transaction) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "type": entry.type,
        "description": entry.description,
        "amount": money_str(entry.amount),
        "balance_after": money_str(entry.balance_after),
        "related_job_id": entry.related_job_id,
        "related_application_id": entry.related_application_id,
        "related_service_id": entry.related_service_id,
        "created_at": isoformat(entry.created_at),
    }


async def get_credit_summary(user_id: str, db: AsyncSession) -> Dict[str, Any]:
    reconciliation = await reconcile_ledger(user_id, db)
    return {
        "balance": reconciliation["balance"],
        "pricing": pricing_table(),
        "max_topup": money_str(settings.MAX_CREDIT_TOPUP),
        "reconciliation": reconciliation,
    }
