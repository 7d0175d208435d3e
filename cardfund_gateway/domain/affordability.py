"""Per-month affordability verdicts combining the ledger with obligations"""

from dataclasses import dataclass
from typing import List
from cardfund_gateway.domain.ledger import MonthlyLedger
from cardfund_gateway.domain.models import MonthlyProjection, MonthStatus, SimulationPolicy
from cardfund_gateway.domain.obligations import ObligationBuckets
from cardfund_gateway.utils.date_utils import (
    MonthKey,
    format_month_key,
    format_month_label,
    months_between,
)


@dataclass
class AffordabilityVerdict:
    """Evaluator output consumed by the simulation and the advisor"""

    can_afford: bool
    can_pay_first_month: bool
    can_pay_total: bool
    first_month: MonthKey
    projections: List[MonthlyProjection]

    @property
    def insufficient_months(self) -> List[MonthlyProjection]:
        return [p for p in self.projections if p.status == MonthStatus.INSUFFICIENT]


def month_status(margin: float) -> MonthStatus:
    return MonthStatus.SUFFICIENT if margin >= 0 else MonthStatus.INSUFFICIENT


def build_projections(ledger: MonthlyLedger, obligations: ObligationBuckets) -> List[MonthlyProjection]:
    """Row per horizon month: what was owed, what is new, and what is left"""
    projections = []
    for key in ledger.months:
        available = ledger.available[key]
        total = obligations.total_in(key)
        margin = available - total
        projections.append(
            MonthlyProjection(
                month=format_month_key(key),
                month_label=format_month_label(key),
                available_funds=available,
                total_before=obligations.existing_in(key),
                new_payment=obligations.new_in(key),
                total_final=total,
                remaining_margin=margin,
                balance_after_payments=ledger.balance_after[key],
                status=month_status(margin),
            )
        )
    return projections


def evaluate_affordability(
    ledger: MonthlyLedger,
    obligations: ObligationBuckets,
    start: MonthKey,
    total_installments: int,
    policy: SimulationPolicy,
) -> AffordabilityVerdict:
    """
    Decide whether the proposal fits the fund.

    Rules:
    - Single installment: only the start month must be sufficient
    - Multiple installments: the share of sufficient horizon months must reach
      policy.min_sufficient_ratio (every month at the default 1.0)

    A start month before the horizon is judged on the horizon's first month.
    """
    projections = build_projections(ledger, obligations)

    first_month = start if months_between(ledger.months[0], start) >= 0 else ledger.months[0]
    first_index = ledger.months.index(first_month)
    can_pay_first_month = projections[first_index].status == MonthStatus.SUFFICIENT

    sufficient = sum(1 for p in projections if p.status == MonthStatus.SUFFICIENT)
    can_pay_total = sufficient == len(projections)

    if total_installments == 1:
        can_afford = can_pay_first_month
    elif policy.min_sufficient_ratio >= 1.0:
        can_afford = can_pay_total
    else:
        can_afford = sufficient / len(projections) >= policy.min_sufficient_ratio

    return AffordabilityVerdict(
        can_afford=can_afford,
        can_pay_first_month=can_pay_first_month,
        can_pay_total=can_pay_total,
        first_month=first_month,
        projections=projections,
    )
