"""Prometheus metrics for monitoring affordability outcomes and expense activity"""

from prometheus_client import Counter, Histogram

# Simulation metrics
simulation_counter = Counter(
    "cardfund_simulation_total",
    "Total affordability simulations run",
    ["outcome"],  # affordable | unaffordable
)

suggestion_counter = Counter(
    "cardfund_contribution_suggestion_total",
    "Contribution suggestions issued",
    ["remediation"],  # possible | capped
)

# Expense lifecycle metrics
expense_counter = Counter(
    "cardfund_expense_total",
    "Expenses stored",
    ["kind"],  # committed | simulation
)

rejected_expense_counter = Counter(
    "cardfund_expense_rejected_total",
    "Committed expenses rejected for insufficient funds",
)

installment_paid_counter = Counter(
    "cardfund_installment_paid_total",
    "Installments marked as paid",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_simulation(can_afford: bool, remediation_possible: bool | None) -> None:
    """Record simulation outcome and, when unaffordable, whether advice could close the gap"""
    outcome = "affordable" if can_afford else "unaffordable"
    simulation_counter.labels(outcome=outcome).inc()

    if remediation_possible is not None:
        suggestion_counter.labels(remediation="possible" if remediation_possible else "capped").inc()
