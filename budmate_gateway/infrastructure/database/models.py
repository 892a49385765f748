"""SQLAlchemy ORM models for budgets and expenses"""

import uuid
from sqlalchemy import Column, Date, DateTime, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Budget(Base):
    """Running budget balance, one row per user (primary key is the user id)"""

    __tablename__ = "budget"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, nullable=False, unique=True, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class Expense(Base):
    """Expense with lifecycle status: pending, paid or expired"""

    __tablename__ = "expense"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    category_id = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
