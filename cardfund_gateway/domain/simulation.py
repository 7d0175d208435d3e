"""Affordability simulation engine - core business logic for card purchases"""

import logging
from datetime import date
from typing import Iterable, List, Optional
from cardfund_gateway.domain.advisor import suggest_contribution
from cardfund_gateway.domain.affordability import evaluate_affordability
from cardfund_gateway.domain.exceptions import FundNotConfiguredError
from cardfund_gateway.domain.installments import validate_purchase
from cardfund_gateway.domain.ledger import build_ledger
from cardfund_gateway.domain.models import (
    Expense,
    Fund,
    ProposedExpense,
    SimulationPolicy,
    SimulationResult,
)
from cardfund_gateway.domain.obligations import aggregate_obligations
from cardfund_gateway.utils.date_utils import (
    MonthKey,
    generate_month_range,
    month_key,
    months_between,
)

logger = logging.getLogger(__name__)


def simulation_horizon(
    current: MonthKey,
    start: MonthKey,
    total_installments: int,
    policy: SimulationPolicy,
) -> List[MonthKey]:
    """
    Months covered by a simulation, starting at the current month.

    At least min_horizon_months, or total_installments + padding, and always
    long enough to reach the proposal's last installment.
    """
    length = max(policy.min_horizon_months, total_installments + policy.horizon_padding_months)
    last_offset = months_between(current, start) + total_installments
    return generate_month_range(current, max(length, last_offset))


def simulate_expense(
    fund: Optional[Fund],
    expenses: Iterable[Expense],
    proposal: ProposedExpense,
    as_of: date | None = None,
    policy: SimulationPolicy | None = None,
) -> SimulationResult:
    """
    Main entry point: project the fund with the proposed purchase and decide
    whether it can be paid.

    Flow:
    1. Bucket existing pending installments and the proposal by month
    2. Carry the fund balance through the horizon
    3. Evaluate each month's margin and the overall verdict
    4. Suggest a contribution when the purchase is not affordable

    Inputs are never mutated; the same snapshot and as_of give the same result.

    Raises:
        FundNotConfiguredError: fund is None
        InvalidExpenseError: non-positive amount or fewer than one installment
    """
    if fund is None:
        raise FundNotConfiguredError()
    validate_purchase(proposal.amount, proposal.total_installments)

    as_of = as_of or date.today()
    policy = policy or SimulationPolicy()

    installment_amount = proposal.amount / proposal.total_installments
    current = month_key(as_of)
    start = month_key(proposal.purchase_date or as_of)
    months = simulation_horizon(current, start, proposal.total_installments, policy)

    obligations = aggregate_obligations(
        expenses,
        installment_amount,
        proposal.total_installments,
        start,
        months,
    )
    ledger = build_ledger(fund, months, obligations, policy)
    verdict = evaluate_affordability(ledger, obligations, start, proposal.total_installments, policy)

    logger.debug(
        "Simulated %s in %d installments over %d months: first_month=%s total=%s",
        proposal.amount,
        proposal.total_installments,
        len(months),
        verdict.can_pay_first_month,
        verdict.can_pay_total,
    )

    at_start = ledger.available[verdict.first_month]
    monthly_required = obligations.total_in(verdict.first_month)

    result = SimulationResult(
        can_afford=verdict.can_afford,
        can_pay_total=verdict.can_pay_total,
        can_pay_first_month=verdict.can_pay_first_month,
        available_funds=ledger.opening_available,
        projected_available_funds=ledger.closing_available,
        projected_available_funds_at_start=at_start,
        required_funds=monthly_required,
        monthly_required_funds=monthly_required,
        total_required_funds=obligations.pending_amount + proposal.amount,
        projected_balance=at_start - monthly_required,
        total_projected_balance=ledger.closing_balance,
        pending_installments=obligations.pending_installments,
        pending_amount=obligations.pending_amount,
        installment_amount=installment_amount,
        monthly_projections=verdict.projections,
    )

    if not verdict.can_afford:
        advice = suggest_contribution(fund, verdict.projections, installment_amount, policy)
        result.deficit = advice.deficit
        result.suggested_monthly_contribution = advice.suggested_monthly_contribution
        result.suggested_duration_months = advice.suggested_duration_months
        result.remediation_possible = advice.remediation_possible

    return result
