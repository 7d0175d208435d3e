"""SQLAlchemy ORM models for funds, expenses and installments"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Integer, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CreditCardFund(Base):
    """Savings fund that pays a user's card installments, one per user"""

    __tablename__ = "credit_card_fund"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, unique=True, index=True)
    monthly_contribution = Column(Float, nullable=False)
    max_monthly_contribution = Column(Float, nullable=True)
    accumulated_amount = Column(Float, nullable=False, default=0.0)
    last_update_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


class CreditCardExpense(Base):
    """Card purchase, committed or simulated"""

    __tablename__ = "credit_card_expense"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    description = Column(String(255), nullable=False, default="")
    purchase_date = Column(Date, nullable=False)
    total_installments = Column(Integer, nullable=False)
    is_simulation = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    installments = relationship(
        "CreditCardInstallment",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="CreditCardInstallment.number",
    )


class CreditCardInstallment(Base):
    """Monthly payment within an expense"""

    __tablename__ = "credit_card_installment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    expense_id = Column(UUID(as_uuid=True), ForeignKey("credit_card_expense.id", ondelete="CASCADE"), nullable=False)
    number = Column(Integer, nullable=False)
    amount = Column(Float, nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(Text, nullable=False, default="pending")

    expense = relationship("CreditCardExpense", back_populates="installments")
