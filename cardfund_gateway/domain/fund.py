"""Fund balance lifecycle: monthly accrual and installment payments"""

from dataclasses import replace
from datetime import date
from cardfund_gateway.domain.models import Fund
from cardfund_gateway.utils.date_utils import month_key, months_between


def elapsed_months(last_update: date, as_of: date) -> int:
    """Calendar months between two dates, ignoring the day of month"""
    return months_between(month_key(last_update), month_key(as_of))


def roll_forward_fund(fund: Fund, as_of: date) -> Fund:
    """Credit one contribution per calendar month elapsed since the last update"""
    months = elapsed_months(fund.last_update_date, as_of)
    if months <= 0:
        return fund
    return replace(
        fund,
        accumulated_amount=fund.accumulated_amount + fund.monthly_contribution * months,
        last_update_date=as_of,
    )


def apply_installment_payment(fund: Fund, amount: float) -> Fund:
    """Debit a paid installment, never below zero"""
    return replace(fund, accumulated_amount=max(0.0, fund.accumulated_amount - amount))
