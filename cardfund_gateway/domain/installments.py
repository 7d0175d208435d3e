"""Installment schedule generation for credit card purchases"""

from dataclasses import replace
from datetime import date
from dateutil.relativedelta import relativedelta
from typing import List
from cardfund_gateway.domain.exceptions import InvalidExpenseError
from cardfund_gateway.domain.models import Expense, Installment, InstallmentStatus


def validate_purchase(amount: float, total_installments: int) -> None:
    """Reject amounts and counts that cannot produce a schedule"""
    if amount <= 0:
        raise InvalidExpenseError(f"Expense amount must be positive, got {amount}")
    if total_installments < 1:
        raise InvalidExpenseError(
            f"Expense needs at least one installment, got {total_installments}"
        )


def generate_installment_plan(
    amount: float,
    total_installments: int,
    start_date: date,
) -> List[Installment]:
    """
    Split a purchase into equal monthly installments.

    Requirements:
    - total_installments equal payments of amount / total_installments
    - Installment i is due start_date + (i-1) months
    - No remainder correction: the last installment does not absorb drift
    - Every installment starts pending

    Example:
        30000 in 3 starting 2025-01-31 ->
        [10000 @ 2025-01-31, 10000 @ 2025-02-28, 10000 @ 2025-03-31]

    Raises:
        InvalidExpenseError: amount <= 0 or total_installments < 1
    """
    validate_purchase(amount, total_installments)

    installment_amount = amount / total_installments

    return [
        Installment(
            number=i + 1,
            amount=installment_amount,
            # Always offset from start_date so month-end days are not eroded
            due_date=start_date + relativedelta(months=i),
            status=InstallmentStatus.PENDING,
        )
        for i in range(total_installments)
    ]


def reschedule_expense(expense: Expense, purchase_date: date) -> Expense:
    """Return a copy of the expense with a schedule regenerated from purchase_date"""
    return replace(
        expense,
        purchase_date=purchase_date,
        installments=generate_installment_plan(
            expense.amount, expense.total_installments, purchase_date
        ),
    )
