"""SQLAlchemy ORM models for stored finance records"""

import uuid
from sqlalchemy import Column, String, Float, DateTime, Date, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class TransactionRecord(Base):
    """Income, expense or transfer entry"""

    __tablename__ = "finance_transaction"

    id = Column(String(36), primary_key=True, default=_new_id)
    type = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    category = Column(Text, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    date = Column(Date, nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BudgetRecord(Base):
    """Category spending limit"""

    __tablename__ = "finance_budget"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False, default="")
    category = Column(Text, nullable=False, index=True)
    limit_amount = Column(Float, nullable=False)
    period = Column(Text, nullable=False, default="monthly")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class GoalRecord(Base):
    """Savings goal with deadline"""

    __tablename__ = "finance_goal"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(Text, nullable=False)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, nullable=False, default=0.0)
    deadline = Column(Date, nullable=False)
    category = Column(Text, nullable=False, default="Savings")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
