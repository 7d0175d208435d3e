"""Bucketing of installment obligations by due month"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping
from cardfund_gateway.domain.models import Expense, InstallmentStatus
from cardfund_gateway.utils.date_utils import MonthKey, month_key, shift_month


@dataclass(frozen=True)
class ObligationBuckets:
    """Month-keyed obligations for one simulation, read-only once built"""

    existing: Mapping[MonthKey, float]
    new: Mapping[MonthKey, float]
    total: Mapping[MonthKey, float]
    pending_amount: float
    pending_installments: int

    def existing_in(self, key: MonthKey) -> float:
        return self.existing.get(key, 0.0)

    def new_in(self, key: MonthKey) -> float:
        return self.new.get(key, 0.0)

    def total_in(self, key: MonthKey) -> float:
        return self.total.get(key, 0.0)


def bucket_existing_installments(expenses: Iterable[Expense]) -> tuple[Dict[MonthKey, float], float, int]:
    """
    Sum pending installments of committed expenses per due month.

    Simulated expenses are skipped. Pending totals cover every pending
    installment, including those due outside any horizon.

    Returns: (amount by month, pending_amount, pending_installments)
    """
    by_month: Dict[MonthKey, float] = {}
    pending_amount = 0.0
    pending_installments = 0

    for expense in expenses:
        if expense.is_simulation:
            continue
        for installment in expense.installments:
            if installment.status != InstallmentStatus.PENDING:
                continue
            key = month_key(installment.due_date)
            by_month[key] = by_month.get(key, 0.0) + installment.amount
            pending_amount += installment.amount
            pending_installments += 1

    return by_month, pending_amount, pending_installments


def bucket_proposed_installments(
    installment_amount: float,
    total_installments: int,
    start: MonthKey,
) -> Dict[MonthKey, float]:
    """One installment per month for total_installments months from start"""
    return {shift_month(start, i): installment_amount for i in range(total_installments)}


def aggregate_obligations(
    expenses: Iterable[Expense],
    installment_amount: float,
    total_installments: int,
    start: MonthKey,
    months: List[MonthKey],
) -> ObligationBuckets:
    """Build existing, new and combined per-month obligations for the horizon"""
    existing, pending_amount, pending_installments = bucket_existing_installments(expenses)
    new = bucket_proposed_installments(installment_amount, total_installments, start)

    total = {key: existing.get(key, 0.0) + new.get(key, 0.0) for key in months}

    return ObligationBuckets(
        existing=MappingProxyType(existing),
        new=MappingProxyType(new),
        total=MappingProxyType(total),
        pending_amount=pending_amount,
        pending_installments=pending_installments,
    )
