"""/v1/expenses - card purchases and their installment schedules"""

from datetime import date
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from cardfund_gateway.api.dependencies import get_request_id, get_simulation_policy, get_today
from cardfund_gateway.api.errors import to_http_exception
from cardfund_gateway.api.v1.schemas import (
    DeleteResponse,
    ExpenseCreateRequest,
    ExpenseListResponse,
    ExpenseResponse,
    InstallmentStatusRequest,
    PurchaseDateRequest,
    UserRequest,
)
from cardfund_gateway.api.v1.simulate import simulate_for_user
from cardfund_gateway.domain.exceptions import (
    DomainException,
    ExpenseNotFoundError,
    FundNotConfiguredError,
    InstallmentAlreadyPaidError,
    InstallmentNotFoundError,
    InsufficientFundsError,
    NotASimulationError,
)
from cardfund_gateway.domain.fund import apply_installment_payment, roll_forward_fund
from cardfund_gateway.domain.installments import generate_installment_plan, reschedule_expense
from cardfund_gateway.domain.models import (
    Expense,
    InstallmentStatus,
    ProposedExpense,
    SimulationPolicy,
)
from cardfund_gateway.infrastructure.database.repositories import ExpenseRepository, FundRepository
from cardfund_gateway.infrastructure.database.session import get_db
from cardfund_gateway.infrastructure.observability.logging import log_expense_event
from cardfund_gateway.infrastructure.observability.metrics import (
    expense_counter,
    installment_paid_counter,
    rejected_expense_counter,
)

router = APIRouter()


def _ensure_affordable(
    db: Session,
    user_id: str,
    proposal: ProposedExpense,
    today: date,
    policy: SimulationPolicy,
) -> None:
    result = simulate_for_user(db, user_id, proposal, today, policy, lock_fund=True)
    if not result.can_afford:
        rejected_expense_counter.inc()
        raise InsufficientFundsError("Insufficient funds to create this expense")


@router.get("/expenses", response_model=ExpenseListResponse)
def list_expenses(
    user_id: str = Query(..., description="User identifier"),
    include_simulations: bool = Query(False, description="Also return simulated expenses"),
    db: Session = Depends(get_db),
):
    """List the user's expenses, newest purchase first"""
    expenses = ExpenseRepository(db).list_expenses(user_id, include_simulations=include_simulations)
    return ExpenseListResponse(
        user_id=user_id,
        expenses=[ExpenseResponse.model_validate(e) for e in expenses],
    )


@router.get("/expenses/{expense_id}", response_model=ExpenseResponse)
def get_expense(
    expense_id: str,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    expense = ExpenseRepository(db).get_expense(expense_id, user_id)
    if expense is None:
        raise to_http_exception(ExpenseNotFoundError(f"Expense {expense_id} not found"), get_request_id(request))
    return ExpenseResponse.model_validate(expense)


@router.post("/expenses", response_model=ExpenseResponse)
def create_expense(
    request_body: ExpenseCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    policy: SimulationPolicy = Depends(get_simulation_policy),
):
    """
    Store a card purchase with its installment schedule.

    Simulations are stored as-is. Committed purchases must pass the
    affordability check first; the fund row stays locked until commit.
    """
    request_id = get_request_id(request)
    purchase_date = request_body.purchase_date or today

    try:
        if request_body.is_simulation:
            if FundRepository(db).get_fund(request_body.user_id) is None:
                raise FundNotConfiguredError(request_body.user_id)
        else:
            _ensure_affordable(
                db,
                request_body.user_id,
                ProposedExpense(
                    amount=request_body.amount,
                    total_installments=request_body.total_installments,
                    purchase_date=purchase_date,
                ),
                today,
                policy,
            )

        expense = ExpenseRepository(db).create_expense(
            Expense(
                user_id=request_body.user_id,
                amount=request_body.amount,
                total_installments=request_body.total_installments,
                purchase_date=purchase_date,
                description=request_body.description,
                is_simulation=request_body.is_simulation,
                installments=generate_installment_plan(
                    request_body.amount, request_body.total_installments, purchase_date
                ),
            )
        )
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    expense_counter.labels(kind="simulation" if expense.is_simulation else "committed").inc()
    log_expense_event(request_id, expense.user_id, expense.id, "created")
    return ExpenseResponse.model_validate(expense)


@router.put("/expenses/{expense_id}/execute", response_model=ExpenseResponse)
def execute_expense(
    expense_id: str,
    request_body: UserRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    policy: SimulationPolicy = Depends(get_simulation_policy),
):
    """Turn a stored simulation into a committed expense, if it is still affordable"""
    request_id = get_request_id(request)
    expense_repo = ExpenseRepository(db)

    try:
        expense = expense_repo.get_expense(expense_id, request_body.user_id)
        if expense is None:
            raise ExpenseNotFoundError(f"Expense {expense_id} not found")
        if not expense.is_simulation:
            raise NotASimulationError(f"Expense {expense_id} is not a simulation")

        _ensure_affordable(
            db,
            request_body.user_id,
            ProposedExpense(
                amount=expense.amount,
                total_installments=expense.total_installments,
                purchase_date=expense.purchase_date,
            ),
            today,
            policy,
        )
        expense = expense_repo.mark_committed(expense_id, request_body.user_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    expense_counter.labels(kind="committed").inc()
    log_expense_event(request_id, expense.user_id, expense.id, "executed")
    return ExpenseResponse.model_validate(expense)


@router.put("/expenses/{expense_id}/installment", response_model=ExpenseResponse)
def pay_installment(
    expense_id: str,
    request_body: InstallmentStatusRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Mark an installment paid and debit its amount from the fund.

    The fund is rolled forward to today before the debit so that the
    payment comes out of the same balance the purchase was approved against.
    """
    request_id = get_request_id(request)
    expense_repo = ExpenseRepository(db)
    fund_repo = FundRepository(db)

    try:
        expense = expense_repo.get_expense(expense_id, request_body.user_id)
        if expense is None:
            raise ExpenseNotFoundError(f"Expense {expense_id} not found")

        installment = next(
            (i for i in expense.installments if i.number == request_body.installment_number),
            None,
        )
        if installment is None:
            raise InstallmentNotFoundError(f"Installment {request_body.installment_number} not found")
        if installment.status == InstallmentStatus.PAID:
            raise InstallmentAlreadyPaidError(f"Installment {installment.number} is already paid")

        expense = expense_repo.update_installment_status(
            expense_id, request_body.user_id, installment.number, InstallmentStatus.PAID
        )

        fund = fund_repo.get_fund(request_body.user_id, for_update=True)
        if fund is not None:
            debited = apply_installment_payment(roll_forward_fund(fund, today), installment.amount)
            fund_repo.update_fund(
                fund.user_id,
                accumulated_amount=debited.accumulated_amount,
                last_update_date=debited.last_update_date,
            )
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    installment_paid_counter.inc()
    log_expense_event(request_id, expense.user_id, expense.id, "installment_paid")
    return ExpenseResponse.model_validate(expense)


@router.put("/expenses/{expense_id}/purchase-date", response_model=ExpenseResponse)
def update_purchase_date(
    expense_id: str,
    request_body: PurchaseDateRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Move the purchase date, regenerating every installment"""
    request_id = get_request_id(request)
    expense_repo = ExpenseRepository(db)

    try:
        expense = expense_repo.get_expense(expense_id, request_body.user_id)
        if expense is None:
            raise ExpenseNotFoundError(f"Expense {expense_id} not found")

        expense = expense_repo.replace_schedule(reschedule_expense(expense, request_body.purchase_date))
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    log_expense_event(request_id, expense.user_id, expense.id, "rescheduled")
    return ExpenseResponse.model_validate(expense)


@router.delete("/expenses/{expense_id}", response_model=DeleteResponse)
def delete_expense(
    expense_id: str,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    request_id = get_request_id(request)

    if not ExpenseRepository(db).delete_expense(expense_id, user_id):
        raise to_http_exception(ExpenseNotFoundError(f"Expense {expense_id} not found"), request_id)
    db.commit()

    log_expense_event(request_id, user_id, expense_id, "deleted")
    return DeleteResponse(expense_id=expense_id, deleted=True)
