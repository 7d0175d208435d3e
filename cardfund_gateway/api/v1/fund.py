"""/v1/fund - credit card fund configuration"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from cardfund_gateway.api.dependencies import get_request_id, get_today
from cardfund_gateway.api.errors import to_http_exception
from cardfund_gateway.api.v1.schemas import FundRequest, FundResponse, UserRequest
from cardfund_gateway.domain.exceptions import DomainException, FundNotConfiguredError
from cardfund_gateway.domain.fund import roll_forward_fund
from cardfund_gateway.domain.models import Fund
from cardfund_gateway.infrastructure.database.repositories import FundRepository
from cardfund_gateway.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/fund", response_model=FundResponse)
def get_fund(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Retrieve the user's fund as stored"""
    fund = FundRepository(db).get_fund(user_id)
    if fund is None:
        raise HTTPException(status_code=404, detail="Credit card fund not configured")
    return FundResponse.model_validate(fund)


@router.post("/fund", response_model=FundResponse)
def create_or_update_fund(
    request_body: FundRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Create the user's fund, or update the provided fields of the existing one.

    A new fund needs monthly_contribution; the balance defaults to 0.
    Omitted fields are left unchanged; an explicit null for
    max_monthly_contribution removes the ceiling.
    """
    request_id = get_request_id(request)
    fund_repo = FundRepository(db)

    try:
        if fund_repo.get_fund(request_body.user_id) is None:
            if request_body.monthly_contribution is None:
                raise HTTPException(status_code=422, detail="monthly_contribution is required to create a fund")
            fund = fund_repo.create_fund(
                Fund(
                    user_id=request_body.user_id,
                    monthly_contribution=request_body.monthly_contribution,
                    max_monthly_contribution=request_body.max_monthly_contribution,
                    accumulated_amount=request_body.accumulated_amount or 0.0,
                    last_update_date=today,
                )
            )
        else:
            fund = fund_repo.update_fund(
                request_body.user_id,
                monthly_contribution=request_body.monthly_contribution,
                max_monthly_contribution=request_body.max_monthly_contribution,
                accumulated_amount=request_body.accumulated_amount,
                # An explicit balance is current as of today
                last_update_date=today if request_body.accumulated_amount is not None else None,
                clear_max_monthly_contribution=(
                    "max_monthly_contribution" in request_body.model_fields_set
                    and request_body.max_monthly_contribution is None
                ),
            )
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    return FundResponse.model_validate(fund)


@router.post("/fund/roll-forward", response_model=FundResponse)
def roll_forward(
    request_body: UserRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Credit the monthly contribution for every month elapsed since the last update"""
    request_id = get_request_id(request)
    fund_repo = FundRepository(db)

    try:
        fund = fund_repo.get_fund(request_body.user_id, for_update=True)
        if fund is None:
            raise FundNotConfiguredError(request_body.user_id)

        rolled = roll_forward_fund(fund, today)
        if rolled is not fund:
            fund = fund_repo.update_fund(
                rolled.user_id,
                accumulated_amount=rolled.accumulated_amount,
                last_update_date=rolled.last_update_date,
            )
        db.commit()
    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    return FundResponse.model_validate(fund)
