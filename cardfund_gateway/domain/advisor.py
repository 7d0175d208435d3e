"""Contribution advisor - how much more to save, and for how long"""

import math
from typing import Iterable
from cardfund_gateway.domain.models import (
    ContributionAdvice,
    Fund,
    MonthlyProjection,
    MonthStatus,
    SimulationPolicy,
)


def calculate_deficit(projections: Iterable[MonthlyProjection]) -> float:
    """Sum of shortfalls over insufficient months"""
    return sum(
        abs(p.remaining_margin) for p in projections if p.status == MonthStatus.INSUFFICIENT
    )


def max_reasonable_contribution(fund: Fund, installment_amount: float, policy: SimulationPolicy) -> float:
    """
    Ceiling for a suggested contribution.

    The user's own ceiling wins when it is above the current contribution,
    otherwise 1.5x the larger of the contribution and the new installment.
    """
    if fund.max_monthly_contribution and fund.max_monthly_contribution > fund.monthly_contribution:
        return fund.max_monthly_contribution
    return max(
        fund.monthly_contribution * policy.max_contribution_multiplier,
        installment_amount * policy.max_contribution_multiplier,
    )


def reasonable_duration(deficit: float, monthly_contribution: float, policy: SimulationPolicy) -> int:
    """Months to spread the deficit over, clamped to [1, max_remediation_months]"""
    monthly_share = monthly_contribution * policy.remediation_share
    if monthly_share <= 0:
        return policy.max_remediation_months
    months = math.ceil(deficit / monthly_share)
    return min(policy.max_remediation_months, max(1, months))


def suggest_contribution(
    fund: Fund,
    projections: Iterable[MonthlyProjection],
    installment_amount: float,
    policy: SimulationPolicy,
) -> ContributionAdvice:
    """
    Recommend a higher contribution that closes the deficit.

    Steps:
    1. deficit over insufficient months
    2. extra per month = deficit / duration, rounded up to contribution_rounding
    3. suggested = current + extra, capped at the reasonable maximum
    4. duration = months of (suggested - current) needed to cover the deficit

    When the cap leaves no room above the current contribution the advice
    reports remediation_possible=False and a duration of 0.
    """
    deficit = calculate_deficit(projections)
    ceiling = max_reasonable_contribution(fund, installment_amount, policy)
    duration = reasonable_duration(deficit, fund.monthly_contribution, policy)

    rounding = policy.contribution_rounding
    extra_per_month = math.ceil(deficit / duration / rounding) * rounding

    suggested = min(fund.monthly_contribution + extra_per_month, ceiling)
    extra = suggested - fund.monthly_contribution

    if extra > 0:
        suggested_duration = max(1, math.ceil(deficit / extra))
    else:
        suggested_duration = 0

    return ContributionAdvice(
        deficit=deficit,
        max_reasonable_contribution=ceiling,
        suggested_monthly_contribution=suggested,
        suggested_duration_months=suggested_duration,
        remediation_possible=extra > 0,
    )
