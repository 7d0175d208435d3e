"""Unit tests for the affordability evaluator"""

from cardfund_gateway.domain.affordability import evaluate_affordability
from cardfund_gateway.domain.ledger import MonthlyLedger
from cardfund_gateway.domain.models import MonthStatus, SimulationPolicy
from cardfund_gateway.domain.obligations import ObligationBuckets
from cardfund_gateway.utils.date_utils import generate_month_range


def make_inputs(available: list, existing: list, new: list):
    """Ledger and obligations from per-month figures starting May 2025"""
    months = generate_month_range((2025, 5), len(available))
    existing_map = dict(zip(months, existing))
    new_map = dict(zip(months, new))
    total = {m: existing_map[m] + new_map[m] for m in months}
    ledger = MonthlyLedger(
        months=months,
        available=dict(zip(months, available)),
        balance_after={m: a - total[m] for m, a in zip(months, available)},
    )
    obligations = ObligationBuckets(
        existing=existing_map,
        new=new_map,
        total=total,
        pending_amount=sum(existing),
        pending_installments=sum(1 for e in existing if e),
    )
    return ledger, obligations


def test_projection_rows():
    ledger, obligations = make_inputs([5000, 4000], [1000, 0], [2000, 0])

    verdict = evaluate_affordability(ledger, obligations, (2025, 5), 1, SimulationPolicy())
    first = verdict.projections[0]

    assert first.month == "2025-05"
    assert first.month_label == "May 2025"
    assert first.available_funds == 5000
    assert first.total_before == 1000
    assert first.new_payment == 2000
    assert first.total_final == 3000
    assert first.remaining_margin == 2000
    assert first.balance_after_payments == 2000
    assert first.status == MonthStatus.SUFFICIENT


def test_zero_margin_is_sufficient():
    ledger, obligations = make_inputs([3000], [1000], [2000])

    verdict = evaluate_affordability(ledger, obligations, (2025, 5), 1, SimulationPolicy())

    assert verdict.projections[0].remaining_margin == 0
    assert verdict.can_afford is True


def test_single_installment_only_needs_its_first_month():
    """Later insufficient months do not change a single-installment verdict"""
    ledger, obligations = make_inputs([5000, 100, 100], [0, 900, 900], [2000, 0, 0])

    verdict = evaluate_affordability(ledger, obligations, (2025, 5), 1, SimulationPolicy())

    assert verdict.can_pay_first_month is True
    assert verdict.can_pay_total is False
    assert verdict.can_afford is True
    assert len(verdict.insufficient_months) == 2


def test_single_installment_fails_on_its_first_month():
    ledger, obligations = make_inputs([1000, 9000, 9000], [0, 0, 0], [2000, 0, 0])

    verdict = evaluate_affordability(ledger, obligations, (2025, 5), 1, SimulationPolicy())

    assert verdict.can_pay_first_month is False
    assert verdict.can_afford is False


def test_single_installment_start_month_is_not_first_horizon_month():
    ledger, obligations = make_inputs([100, 5000, 5000], [500, 0, 0], [0, 2000, 0])

    verdict = evaluate_affordability(ledger, obligations, (2025, 6), 1, SimulationPolicy())

    assert verdict.first_month == (2025, 6)
    assert verdict.can_afford is True
    assert verdict.can_pay_total is False


def test_multi_installment_requires_every_month():
    ledger, obligations = make_inputs([5000, 3000, 1000], [0, 0, 0], [2000, 2000, 2000])

    verdict = evaluate_affordability(ledger, obligations, (2025, 5), 3, SimulationPolicy())

    assert verdict.can_pay_first_month is True
    assert verdict.can_pay_total is False
    assert verdict.can_afford is False


def test_lenient_ratio_accepts_mostly_covered_horizon():
    """With min_sufficient_ratio=0.7, 8 of 10 covered months are enough"""
    available = [5000] * 8 + [0, 0]
    ledger, obligations = make_inputs(available, [0] * 10, [1000] * 10)

    strict = evaluate_affordability(ledger, obligations, (2025, 5), 10, SimulationPolicy())
    lenient = evaluate_affordability(
        ledger, obligations, (2025, 5), 10, SimulationPolicy(min_sufficient_ratio=0.7)
    )

    assert strict.can_afford is False
    assert lenient.can_afford is True
    assert lenient.can_pay_total is False


def test_lenient_ratio_still_rejects_thin_coverage():
    available = [5000] * 6 + [0] * 4
    ledger, obligations = make_inputs(available, [0] * 10, [1000] * 10)

    verdict = evaluate_affordability(
        ledger, obligations, (2025, 5), 10, SimulationPolicy(min_sufficient_ratio=0.7)
    )

    assert verdict.can_afford is False


def test_start_before_horizon_judged_on_first_month():
    ledger, obligations = make_inputs([5000, 5000], [0, 0], [1000, 0])

    verdict = evaluate_affordability(ledger, obligations, (2025, 3), 3, SimulationPolicy())

    assert verdict.first_month == (2025, 5)
    assert verdict.can_pay_first_month is True
