"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import List, Optional
from cardfund_gateway.domain.models import InstallmentStatus, MonthStatus


class FundRequest(BaseModel):
    """Request body for POST /v1/fund (create or update)"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    monthly_contribution: Optional[float] = Field(None, ge=0, description="Amount saved every month")
    max_monthly_contribution: Optional[float] = Field(None, gt=0, description="Ceiling for suggestions")
    accumulated_amount: Optional[float] = Field(None, ge=0, description="Current fund balance")


class FundResponse(BaseModel):
    """Fund snapshot"""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    monthly_contribution: float
    max_monthly_contribution: Optional[float] = None
    accumulated_amount: float
    last_update_date: date


class UserRequest(BaseModel):
    """Body carrying only the acting user"""

    user_id: str = Field(..., min_length=1, description="User identifier")


class InstallmentSchema(BaseModel):
    """Single installment in an expense schedule"""

    model_config = ConfigDict(from_attributes=True)

    number: int
    amount: float
    due_date: date
    status: InstallmentStatus = InstallmentStatus.PENDING


class ExpenseCreateRequest(BaseModel):
    """Request body for POST /v1/expenses"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    amount: float = Field(..., gt=0, description="Total purchase amount")
    total_installments: int = Field(..., ge=1, description="Number of monthly installments")
    description: str = Field("", max_length=255)
    purchase_date: Optional[date] = Field(None, description="First installment date (default: today)")
    is_simulation: bool = False


class ExpenseResponse(BaseModel):
    """Expense with its installment schedule"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    amount: float
    description: str
    purchase_date: date
    total_installments: int
    is_simulation: bool
    installments: List[InstallmentSchema]


class ExpenseListResponse(BaseModel):
    """Response for GET /v1/expenses"""

    user_id: str
    expenses: List[ExpenseResponse]


class InstallmentStatusRequest(BaseModel):
    """Request body for PUT /v1/expenses/{id}/installment"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    installment_number: int = Field(..., ge=1)


class PurchaseDateRequest(BaseModel):
    """Request body for PUT /v1/expenses/{id}/purchase-date"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    purchase_date: date


class DeleteResponse(BaseModel):
    """Response for DELETE /v1/expenses/{id}"""

    expense_id: str
    deleted: bool


class SimulationRequest(BaseModel):
    """Request body for POST /v1/simulate"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    amount: float = Field(..., gt=0, description="Total purchase amount")
    total_installments: int = Field(..., ge=1, description="Number of monthly installments")
    purchase_date: Optional[date] = Field(None, description="First installment date (default: today)")


class MonthlyProjectionSchema(BaseModel):
    """One month of the projected cash flow"""

    model_config = ConfigDict(from_attributes=True)

    month: str
    month_label: str
    available_funds: float
    total_before: float
    new_payment: float
    total_final: float
    remaining_margin: float
    balance_after_payments: float
    status: MonthStatus


class SimulationResponse(BaseModel):
    """Response for POST /v1/simulate"""

    model_config = ConfigDict(from_attributes=True)

    can_afford: bool
    can_pay_total: bool
    can_pay_first_month: bool
    available_funds: float
    projected_available_funds: float
    projected_available_funds_at_start: float
    required_funds: float
    monthly_required_funds: float
    total_required_funds: float
    projected_balance: float
    total_projected_balance: float
    pending_installments: int
    pending_amount: float
    installment_amount: float
    deficit: float
    suggested_monthly_contribution: Optional[float] = None
    suggested_duration_months: Optional[int] = None
    remediation_possible: Optional[bool] = None
    monthly_projections: List[MonthlyProjectionSchema]
