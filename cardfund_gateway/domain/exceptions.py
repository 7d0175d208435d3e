"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class FundNotConfiguredError(DomainException):
    """User has no credit card fund"""

    def __init__(self, user_id: str | None = None):
        message = "Credit card fund not configured"
        if user_id:
            message = f"{message} for user {user_id}"
        super().__init__(message)
        self.user_id = user_id


class FundAlreadyExistsError(DomainException):
    """A fund already exists for this user"""

    pass


class InvalidExpenseError(DomainException):
    """Expense amount or installment count cannot be scheduled"""

    pass


class ExpenseNotFoundError(DomainException):
    """Expense does not exist or belongs to another user"""

    pass


class InstallmentNotFoundError(DomainException):
    """Expense has no installment with the given number"""

    pass


class InstallmentAlreadyPaidError(DomainException):
    """Installment was already marked as paid"""

    pass


class NotASimulationError(DomainException):
    """Only simulated expenses can be executed"""

    pass


class InsufficientFundsError(DomainException):
    """Fund cannot sustain the purchase"""

    pass
