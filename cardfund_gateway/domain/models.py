"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class InstallmentStatus(str, Enum):
    """Payment state of a single installment"""

    PENDING = "pending"
    PAID = "paid"


class MonthStatus(str, Enum):
    """Whether a projected month can cover its obligations"""

    SUFFICIENT = "sufficient"
    INSUFFICIENT = "insufficient"


@dataclass
class Fund:
    """Per-user savings pool that pays credit card installments"""

    user_id: str
    monthly_contribution: float
    accumulated_amount: float = 0.0
    max_monthly_contribution: Optional[float] = None
    last_update_date: date = field(default_factory=date.today)


@dataclass
class Installment:
    """Single monthly payment of an expense"""

    number: int
    amount: float
    due_date: date
    status: InstallmentStatus = InstallmentStatus.PENDING


@dataclass
class Expense:
    """Credit card purchase split into monthly installments"""

    user_id: str
    amount: float
    total_installments: int
    purchase_date: date
    installments: List[Installment] = field(default_factory=list)
    description: str = ""
    is_simulation: bool = False
    id: Optional[str] = None


@dataclass
class ProposedExpense:
    """Purchase being evaluated for affordability"""

    amount: float
    total_installments: int
    purchase_date: Optional[date] = None


@dataclass(frozen=True)
class SimulationPolicy:
    """
    Tunable rules of the affordability engine.

    contribution_when_current_month_due:
        False - the accumulated balance already includes this month's
        contribution, it is never added again.
        True - the contribution is added to the current month only when
        existing pending installments fall due in it.

    min_sufficient_ratio:
        Share of horizon months that must be sufficient for a
        multi-installment purchase. 1.0 requires every month.
    """

    min_horizon_months: int = 12
    horizon_padding_months: int = 3
    contribution_when_current_month_due: bool = False
    min_sufficient_ratio: float = 1.0
    max_contribution_multiplier: float = 1.5
    remediation_share: float = 0.3
    max_remediation_months: int = 6
    contribution_rounding: int = 100


@dataclass
class MonthlyProjection:
    """Projected cash flow for one calendar month of the horizon"""

    month: str
    month_label: str
    available_funds: float
    total_before: float
    new_payment: float
    total_final: float
    remaining_margin: float
    balance_after_payments: float
    status: MonthStatus


@dataclass
class ContributionAdvice:
    """Suggested contribution change to absorb a deficit"""

    deficit: float
    max_reasonable_contribution: float
    suggested_monthly_contribution: float
    suggested_duration_months: int
    remediation_possible: bool


@dataclass
class SimulationResult:
    """Output of an affordability simulation"""

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
    monthly_projections: List[MonthlyProjection]
    deficit: float = 0.0
    suggested_monthly_contribution: Optional[float] = None
    suggested_duration_months: Optional[int] = None
    remediation_possible: Optional[bool] = None
