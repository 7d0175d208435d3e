"""Month-by-month projection of funds available to pay installments"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping
from cardfund_gateway.domain.models import Fund, SimulationPolicy
from cardfund_gateway.domain.obligations import ObligationBuckets
from cardfund_gateway.utils.date_utils import MonthKey


@dataclass(frozen=True)
class MonthlyLedger:
    """Available funds before payment and balance after payment, per month"""

    months: List[MonthKey]
    available: Mapping[MonthKey, float]
    balance_after: Mapping[MonthKey, float]

    @property
    def opening_available(self) -> float:
        return self.available[self.months[0]]

    @property
    def closing_available(self) -> float:
        return self.available[self.months[-1]]

    @property
    def closing_balance(self) -> float:
        return self.balance_after[self.months[-1]]


def opening_available_funds(
    fund: Fund,
    obligations: ObligationBuckets,
    first_month: MonthKey,
    policy: SimulationPolicy,
) -> float:
    """
    Funds available in the first horizon month.

    The accumulated balance is taken as already holding the current month's
    contribution unless the policy adds it for months where existing
    installments are due.
    """
    available = fund.accumulated_amount
    if policy.contribution_when_current_month_due and obligations.existing_in(first_month) > 0:
        available += fund.monthly_contribution
    return available


def build_ledger(
    fund: Fund,
    months: List[MonthKey],
    obligations: ObligationBuckets,
    policy: SimulationPolicy,
) -> MonthlyLedger:
    """
    Carry the fund balance through the horizon.

    available[0] = opening funds
    available[i] = available[i-1] - total[i-1] + monthly_contribution
    balance_after[i] = available[i] - total[i]

    A negative balance is carried forward so later months see the shortfall.
    """
    if not months:
        raise ValueError("Ledger horizon must contain at least one month")

    available: Dict[MonthKey, float] = {}
    balance_after: Dict[MonthKey, float] = {}

    running = opening_available_funds(fund, obligations, months[0], policy)
    for index, key in enumerate(months):
        if index > 0:
            running += fund.monthly_contribution
        available[key] = running
        running -= obligations.total_in(key)
        balance_after[key] = running

    return MonthlyLedger(
        months=list(months),
        available=MappingProxyType(available),
        balance_after=MappingProxyType(balance_after),
    )
