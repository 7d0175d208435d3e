"""Translation of domain failures into HTTP errors"""

import logging
from fastapi import HTTPException
from cardfund_gateway.domain.exceptions import (
    DomainException,
    ExpenseNotFoundError,
    FundAlreadyExistsError,
    FundNotConfiguredError,
    InstallmentAlreadyPaidError,
    InstallmentNotFoundError,
    InsufficientFundsError,
    InvalidExpenseError,
    NotASimulationError,
)

STATUS_CODES = {
    FundNotConfiguredError: 404,
    ExpenseNotFoundError: 404,
    InstallmentNotFoundError: 404,
    InvalidExpenseError: 422,
    FundAlreadyExistsError: 409,
    InstallmentAlreadyPaidError: 409,
    NotASimulationError: 409,
    InsufficientFundsError: 409,
}


def to_http_exception(error: DomainException, request_id: str) -> HTTPException:
    """Map a domain error to its HTTP status, logging it with the request ID"""
    status_code = STATUS_CODES.get(type(error), 400)
    logging.warning(f"{type(error).__name__}: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=status_code, detail=str(error))
