"""Transaction model: the append-only credit ledger."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


class Transaction(Base):
    """Immutable ledger entry. Negative amounts are charges, positive are credits."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False, index=True)  # job_post, hire, service, credit_purchase
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    balance_after = Column(Numeric(10, 2), nullable=False)
    related_job_id = Column(String, ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True)
    related_application_id = Column(String, ForeignKey("applications.id", ondelete="SET NULL"), nullable=True)
    related_service_id = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User", back_populates="transactions")
