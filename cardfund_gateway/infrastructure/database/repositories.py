"""Data access layer for funds and card expenses"""

import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from cardfund_gateway.infrastructure.database.models import (
    CreditCardExpense,
    CreditCardFund,
    CreditCardInstallment,
)
from cardfund_gateway.domain.exceptions import FundAlreadyExistsError
from cardfund_gateway.domain.models import Expense, Fund, Installment, InstallmentStatus


def _parse_id(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError):
        return None


def to_domain_fund(db_fund: CreditCardFund) -> Fund:
    return Fund(
        user_id=db_fund.user_id,
        monthly_contribution=db_fund.monthly_contribution,
        accumulated_amount=db_fund.accumulated_amount,
        max_monthly_contribution=db_fund.max_monthly_contribution,
        last_update_date=db_fund.last_update_date,
    )


def to_domain_expense(db_expense: CreditCardExpense) -> Expense:
    return Expense(
        id=str(db_expense.id),
        user_id=db_expense.user_id,
        amount=db_expense.amount,
        total_installments=db_expense.total_installments,
        purchase_date=db_expense.purchase_date,
        description=db_expense.description,
        is_simulation=db_expense.is_simulation,
        installments=[
            Installment(
                number=inst.number,
                amount=inst.amount,
                due_date=inst.due_date,
                status=InstallmentStatus(inst.status),
            )
            for inst in db_expense.installments
        ],
    )


def _to_db_installments(installments: List[Installment]) -> List[CreditCardInstallment]:
    return [
        CreditCardInstallment(
            number=inst.number,
            amount=inst.amount,
            due_date=inst.due_date,
            status=inst.status.value,
        )
        for inst in installments
    ]


class FundRepository:
    """Repository for credit card funds"""

    def __init__(self, db: Session):
        self.db = db

    def _get(self, user_id: str, for_update: bool = False) -> Optional[CreditCardFund]:
        query = self.db.query(CreditCardFund).filter(CreditCardFund.user_id == user_id)
        if for_update:
            # Serializes commits for one user inside the request transaction
            query = query.with_for_update()
        return query.first()

    def get_fund(self, user_id: str, for_update: bool = False) -> Optional[Fund]:
        """Fetch the user's fund, optionally locking the row"""
        db_fund = self._get(user_id, for_update=for_update)
        return to_domain_fund(db_fund) if db_fund else None

    def create_fund(self, fund: Fund) -> Fund:
        """Persist a new fund; a user may only have one"""
        if self._get(fund.user_id) is not None:
            raise FundAlreadyExistsError(f"Credit card fund already exists for user {fund.user_id}")

        db_fund = CreditCardFund(
            user_id=fund.user_id,
            monthly_contribution=fund.monthly_contribution,
            max_monthly_contribution=fund.max_monthly_contribution,
            accumulated_amount=fund.accumulated_amount,
            last_update_date=fund.last_update_date,
        )
        self.db.add(db_fund)
        self.db.flush()
        return to_domain_fund(db_fund)

    def update_fund(
        self,
        user_id: str,
        monthly_contribution: float | None = None,
        max_monthly_contribution: float | None = None,
        accumulated_amount: float | None = None,
        last_update_date: date | None = None,
        clear_max_monthly_contribution: bool = False,
    ) -> Optional[Fund]:
        """
        Apply the provided fields; returns None when the user has no fund.

        None leaves a field unchanged. clear_max_monthly_contribution removes
        the user's ceiling so suggestions fall back to the derived maximum.
        """
        db_fund = self._get(user_id)
        if db_fund is None:
            return None

        if monthly_contribution is not None:
            db_fund.monthly_contribution = monthly_contribution
        if clear_max_monthly_contribution:
            db_fund.max_monthly_contribution = None
        elif max_monthly_contribution is not None:
            db_fund.max_monthly_contribution = max_monthly_contribution
        if accumulated_amount is not None:
            db_fund.accumulated_amount = accumulated_amount
        if last_update_date is not None:
            db_fund.last_update_date = last_update_date

        self.db.flush()
        return to_domain_fund(db_fund)


class ExpenseRepository:
    """Repository for card expenses and their installments"""

    def __init__(self, db: Session):
        self.db = db

    def _get(self, expense_id: str, user_id: str) -> Optional[CreditCardExpense]:
        expense_uuid = _parse_id(expense_id)
        if expense_uuid is None:
            return None
        return (
            self.db.query(CreditCardExpense)
            .filter(CreditCardExpense.id == expense_uuid, CreditCardExpense.user_id == user_id)
            .first()
        )

    def list_expenses(self, user_id: str, include_simulations: bool = False) -> List[Expense]:
        """User's expenses, newest purchase first"""
        query = self.db.query(CreditCardExpense).filter(CreditCardExpense.user_id == user_id)
        if not include_simulations:
            query = query.filter(CreditCardExpense.is_simulation.is_(False))
        return [
            to_domain_expense(e)
            for e in query.order_by(CreditCardExpense.purchase_date.desc()).all()
        ]

    def get_expense(self, expense_id: str, user_id: str) -> Optional[Expense]:
        db_expense = self._get(expense_id, user_id)
        return to_domain_expense(db_expense) if db_expense else None

    def create_expense(self, expense: Expense) -> Expense:
        """Persist expense with its installment schedule"""
        db_expense = CreditCardExpense(
            user_id=expense.user_id,
            amount=expense.amount,
            description=expense.description,
            purchase_date=expense.purchase_date,
            total_installments=expense.total_installments,
            is_simulation=expense.is_simulation,
            installments=_to_db_installments(expense.installments),
        )
        self.db.add(db_expense)
        self.db.flush()
        return to_domain_expense(db_expense)

    def replace_schedule(self, expense: Expense) -> Optional[Expense]:
        """Store a new purchase date and swap the whole installment schedule"""
        db_expense = self._get(expense.id, expense.user_id)
        if db_expense is None:
            return None

        db_expense.purchase_date = expense.purchase_date
        db_expense.installments = _to_db_installments(expense.installments)
        self.db.flush()
        return to_domain_expense(db_expense)

    def mark_committed(self, expense_id: str, user_id: str) -> Optional[Expense]:
        """Clear the simulation flag"""
        db_expense = self._get(expense_id, user_id)
        if db_expense is None:
            return None

        db_expense.is_simulation = False
        self.db.flush()
        return to_domain_expense(db_expense)

    def update_installment_status(
        self,
        expense_id: str,
        user_id: str,
        number: int,
        status: InstallmentStatus,
    ) -> Optional[Expense]:
        db_expense = self._get(expense_id, user_id)
        if db_expense is None:
            return None

        for inst in db_expense.installments:
            if inst.number == number:
                inst.status = status.value
        self.db.flush()
        return to_domain_expense(db_expense)

    def delete_expense(self, expense_id: str, user_id: str) -> bool:
        db_expense = self._get(expense_id, user_id)
        if db_expense is None:
            return False

        self.db.delete(db_expense)
        self.db.flush()
        return True
