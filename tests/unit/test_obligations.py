"""Unit tests for obligation bucketing"""

import pytest
from datetime import date
from cardfund_gateway.domain.models import InstallmentStatus
from cardfund_gateway.domain.obligations import (
    aggregate_obligations,
    bucket_existing_installments,
    bucket_proposed_installments,
)
from cardfund_gateway.utils.date_utils import generate_month_range

HORIZON = generate_month_range((2025, 5), 12)


def test_existing_pending_installments_bucketed_by_due_month(make_expense):
    expenses = [
        make_expense(15000, 3, date(2025, 5, 5)),
        make_expense(2000, 1, date(2025, 6, 20)),
    ]

    by_month, pending_amount, pending_installments = bucket_existing_installments(expenses)

    assert by_month == {(2025, 5): 5000, (2025, 6): 7000, (2025, 7): 5000}
    assert pending_amount == 17000
    assert pending_installments == 4


def test_paid_installments_are_not_obligations(make_expense):
    expense = make_expense(15000, 3, date(2025, 5, 5))
    expense.installments[0].status = InstallmentStatus.PAID

    by_month, pending_amount, pending_installments = bucket_existing_installments([expense])

    assert (2025, 5) not in by_month
    assert pending_amount == 10000
    assert pending_installments == 2


def test_simulated_expenses_are_ignored(make_expense):
    expenses = [make_expense(9000, 3, date(2025, 5, 5), is_simulation=True)]

    by_month, pending_amount, pending_installments = bucket_existing_installments(expenses)

    assert by_month == {}
    assert pending_amount == 0
    assert pending_installments == 0


def test_proposed_installments_one_per_month_from_start():
    buckets = bucket_proposed_installments(500, 3, (2025, 11))

    assert buckets == {(2025, 11): 500, (2025, 12): 500, (2026, 1): 500}


def test_aggregate_combines_existing_and_new(make_expense):
    expenses = [make_expense(15000, 3, date(2025, 5, 5))]

    obligations = aggregate_obligations(expenses, 20000, 1, (2025, 5), HORIZON)

    assert obligations.total_in((2025, 5)) == 25000
    assert obligations.total_in((2025, 6)) == 5000
    assert obligations.total_in((2025, 8)) == 0
    assert obligations.new_in((2025, 5)) == 20000
    assert obligations.existing_in((2025, 5)) == 5000
    assert set(obligations.total) == set(HORIZON)


def test_pending_totals_include_installments_outside_horizon(make_expense):
    """Installments due after the horizon still count as pending"""
    expenses = [make_expense(24000, 24, date(2025, 5, 5))]

    obligations = aggregate_obligations(expenses, 100, 1, (2025, 5), HORIZON)

    assert obligations.pending_installments == 24
    assert obligations.pending_amount == pytest.approx(24000)
    assert sum(obligations.total.values()) == pytest.approx(12000 + 100)


def test_obligation_maps_are_read_only(make_expense):
    obligations = aggregate_obligations([make_expense(300, 3, date(2025, 5, 5))], 100, 1, (2025, 5), HORIZON)

    with pytest.raises(TypeError):
        obligations.total[(2025, 5)] = 0
    with pytest.raises(TypeError):
        obligations.existing[(2025, 5)] = 0
