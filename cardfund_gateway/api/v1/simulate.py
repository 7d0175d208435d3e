"""POST /v1/simulate - credit card purchase affordability simulation"""

import time
from datetime import date
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from cardfund_gateway.api.dependencies import get_request_id, get_simulation_policy, get_today
from cardfund_gateway.api.errors import to_http_exception
from cardfund_gateway.api.v1.schemas import SimulationRequest, SimulationResponse
from cardfund_gateway.domain.exceptions import DomainException, FundNotConfiguredError
from cardfund_gateway.domain.fund import roll_forward_fund
from cardfund_gateway.domain.models import ProposedExpense, SimulationPolicy, SimulationResult
from cardfund_gateway.domain.simulation import simulate_expense
from cardfund_gateway.infrastructure.database.repositories import ExpenseRepository, FundRepository
from cardfund_gateway.infrastructure.database.session import get_db
from cardfund_gateway.infrastructure.observability.logging import log_simulation
from cardfund_gateway.infrastructure.observability.metrics import record_simulation

router = APIRouter()


def simulate_for_user(
    db: Session,
    user_id: str,
    proposal: ProposedExpense,
    today: date,
    policy: SimulationPolicy,
    lock_fund: bool = False,
) -> SimulationResult:
    """
    Load the user's snapshot and run the engine on it.

    The fund is rolled forward to today in memory only. lock_fund holds the
    fund row until the surrounding transaction ends so that commits for one
    user do not race.
    """
    fund = FundRepository(db).get_fund(user_id, for_update=lock_fund)
    if fund is None:
        raise FundNotConfiguredError(user_id)

    expenses = ExpenseRepository(db).list_expenses(user_id, include_simulations=False)
    return simulate_expense(roll_forward_fund(fund, today), expenses, proposal, as_of=today, policy=policy)


@router.post("/simulate", response_model=SimulationResponse)
def simulate(
    request_body: SimulationRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    policy: SimulationPolicy = Depends(get_simulation_policy),
):
    """
    Check whether a purchase fits the user's fund without storing anything.

    Flow:
    1. Load fund and committed expenses
    2. Project the fund month by month with the purchase added
    3. Return the verdict, month-by-month projection and, when the purchase
       does not fit, a suggested contribution
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = simulate_for_user(
            db,
            request_body.user_id,
            ProposedExpense(
                amount=request_body.amount,
                total_installments=request_body.total_installments,
                purchase_date=request_body.purchase_date,
            ),
            today,
            policy,
        )
    except DomainException as e:
        raise to_http_exception(e, request_id)

    duration_ms = (time.time() - start_time) * 1000
    record_simulation(result.can_afford, result.remediation_possible)
    log_simulation(
        request_id,
        request_body.user_id,
        result.can_afford,
        result.installment_amount,
        result.suggested_monthly_contribution,
        duration_ms,
    )

    return SimulationResponse.model_validate(result)
