"""
Tests for weekly aggregation.

Covers:
- Revenue, expenses and net profit totals
- Per-employee totals, commission and ordering
- Day-of-week buckets (Monday first, Sunday last)
- Revenue additivity across job sets
- Jobs whose employee is unknown
- Inactive employees
- Per-job commission totals with mixed percentages
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.database.models import DEFAULT_COMMISSION_PERCENT, Employee, Expense, WashJob
from src.services.report_generator import (
    DAYS_OF_WEEK,
    commission_for,
    employee_commission,
    summarize,
)

MON, TUE, WED, THU, FRI, SAT, SUN = (
    "2024-03-11", "2024-03-12", "2024-03-13", "2024-03-14",
    "2024-03-15", "2024-03-16", "2024-03-17",
)


def job(employee_id, price, performed_on, job_id=None):
    return WashJob(
        id=job_id or f"job-{employee_id}-{price}-{performed_on}",
        employee_id=employee_id,
        description="Lavagem",
        price=price,
        performed_on=performed_on,
    )


def expense(amount, incurred_on):
    return Expense(id=f"exp-{amount}-{incurred_on}", description="Produto", amount=amount, incurred_on=incurred_on)


# ── Basic scenarios ──────────────────────────────────────


def test_single_job_default_commission():
    employees = [Employee(id="E1", name="Carlos")]
    summary = summarize([job("E1", 100.0, MON)], [], employees)

    assert summary.total_revenue == pytest.approx(100.0)
    assert len(summary.per_employee) == 1
    row = summary.per_employee[0]
    assert row.employee_id == "E1"
    assert row.total == pytest.approx(100.0)
    assert row.commission == pytest.approx(40.0)
    assert row.commission_percent == DEFAULT_COMMISSION_PERCENT

    assert summary.day(1).revenue == pytest.approx(100.0)
    for day in summary.per_day:
        if day.day_index != 1:
            assert day.revenue == 0
            assert day.job_count == 0


def test_two_jobs_same_day():
    employees = [Employee(id="E1", name="Carlos")]
    jobs = [job("E1", 50.0, WED, "a"), job("E1", 30.0, WED, "b")]
    summary = summarize(jobs, [], employees)

    assert summary.per_employee[0].total == pytest.approx(80.0)
    assert summary.day(3).job_count == 2
    assert summary.day(3).revenue == pytest.approx(80.0)
    assert summary.job_count == 2


def test_expense_only_week():
    summary = summarize([], [expense(20.0, TUE)], [])

    tuesday = summary.day(2)
    assert tuesday.revenue == 0
    assert tuesday.expenses == pytest.approx(20.0)
    assert tuesday.balance == pytest.approx(-20.0)
    assert summary.week_expenses == pytest.approx(20.0)
    assert summary.total_expenses == pytest.approx(20.0)


def test_empty_week():
    summary = summarize([], [], [])
    assert summary.total_revenue == 0
    assert summary.total_expenses == 0
    assert summary.net_profit == 0
    assert summary.total_commissions == 0
    assert summary.per_employee == []
    assert len(summary.per_day) == 7
    assert all(d.job_count == 0 and d.revenue == 0 and d.expenses == 0 for d in summary.per_day)


def test_net_profit_can_go_negative():
    employees = [Employee(id="E1", name="Carlos")]
    summary = summarize([job("E1", 40.0, MON)], [expense(100.0, MON)], employees)
    assert summary.net_profit == pytest.approx(-60.0)
    assert summary.to_dict()["net_profit"] == pytest.approx(-60.0)


# ── Day buckets ──────────────────────────────────────────


def test_day_order_is_monday_first():
    summary = summarize([], [], [])
    assert [d.day_label for d in summary.per_day] == ["Seg", "Ter", "Qua", "Qui", "Sex", "Sáb", "Dom"]
    assert [d.day_index for d in summary.per_day] == [1, 2, 3, 4, 5, 6, 0]
    assert [label for label, _ in DAYS_OF_WEEK][0] == "Seg"


def test_sunday_records_land_in_sunday_bucket():
    employees = [Employee(id="E1", name="Carlos")]
    summary = summarize([job("E1", 25.0, SUN)], [expense(5.0, SUN)], employees)
    sunday = summary.per_day[-1]
    assert sunday.day_label == "Dom"
    assert sunday.revenue == pytest.approx(25.0)
    assert sunday.expenses == pytest.approx(5.0)


def test_day_buckets_add_up_to_totals():
    employees = [Employee(id="E1", name="Carlos"), Employee(id="E2", name="João", commission_percent=30)]
    jobs = [
        job("E1", 40.0, MON, "1"),
        job("E2", 55.5, TUE, "2"),
        job("E1", 80.0, FRI, "3"),
        job("E2", 120.0, SAT, "4"),
        job("E1", 35.25, THU, "5"),
    ]
    expenses = [expense(10.0, MON), expense(33.3, WED), expense(7.7, SAT)]
    summary = summarize(jobs, expenses, employees)

    assert summary.week_revenue == pytest.approx(summary.total_revenue)
    assert summary.week_expenses == pytest.approx(summary.total_expenses)
    assert summary.week_balance == pytest.approx(summary.net_profit)
    assert sum(d.job_count for d in summary.per_day) == len(jobs)


@pytest.mark.parametrize("split", [0, 1, 3, 5])
def test_revenue_is_additive_over_job_sets(split):
    employees = [Employee(id="E1", name="Carlos"), Employee(id="E2", name="João", commission_percent=30)]
    jobs = [
        job("E1", 40.0, MON, "1"),
        job("E2", 55.5, TUE, "2"),
        job("E1", 80.1, FRI, "3"),
        job("GONE", 12.3, SUN, "4"),
        job("E2", 35.25, THU, "5"),
    ]
    first, second = jobs[:split], jobs[split:]

    combined = summarize(first + second, [], employees).total_revenue
    assert summarize(first, [], employees).total_revenue + summarize(second, [], employees).total_revenue == \
        pytest.approx(combined)
    assert combined == pytest.approx(223.15)


def test_malformed_job_date_raises():
    from src.services.errors import ParseError

    employees = [Employee(id="E1", name="Carlos")]
    with pytest.raises(ParseError):
        summarize([job("E1", 10.0, "13/03/2024")], [], employees)


# ── Per-employee ─────────────────────────────────────────


def test_per_employee_sorted_by_total_desc():
    employees = [
        Employee(id="A", name="Ana"),
        Employee(id="B", name="Bruno"),
        Employee(id="C", name="Carla"),
    ]
    jobs = [job("A", 10.0, MON), job("B", 90.0, MON), job("C", 50.0, MON)]
    summary = summarize(jobs, [], employees)
    assert [r.employee_id for r in summary.per_employee] == ["B", "C", "A"]


def test_ties_keep_input_order():
    employees = [Employee(id="A", name="Ana"), Employee(id="B", name="Bruno"), Employee(id="C", name="Carla")]
    summary = summarize([job("C", 10.0, MON)], [], employees)
    assert [r.employee_id for r in summary.per_employee] == ["C", "A", "B"]


def test_active_employee_without_jobs_listed_with_zero():
    employees = [Employee(id="E1", name="Carlos"), Employee(id="E2", name="João")]
    summary = summarize([job("E1", 10.0, MON)], [], employees)
    zero = [r for r in summary.per_employee if r.employee_id == "E2"][0]
    assert zero.total == 0
    assert zero.commission == 0


def test_inactive_employee_left_out_of_per_employee():
    employees = [Employee(id="E1", name="Carlos"), Employee(id="E2", name="João", is_active=False)]
    jobs = [job("E1", 10.0, MON), job("E2", 20.0, MON)]
    summary = summarize(jobs, [], employees)

    assert [r.employee_id for r in summary.per_employee] == ["E1"]
    # Their jobs still count toward the business totals
    assert summary.total_revenue == pytest.approx(30.0)
    assert summary.total_commissions == pytest.approx(12.0)


def test_custom_commission_percent():
    employees = [Employee(id="E1", name="Carlos", commission_percent=25)]
    summary = summarize([job("E1", 200.0, MON)], [], employees)
    assert summary.per_employee[0].commission == pytest.approx(50.0)
    assert summary.per_employee[0].commission_percent == 25


def test_zero_commission_percent_is_respected():
    employees = [Employee(id="E1", name="Dono", commission_percent=0)]
    summary = summarize([job("E1", 200.0, MON)], [], employees)
    assert summary.per_employee[0].commission == 0
    assert summary.per_employee[0].commission_percent == 0
    assert summary.total_commissions == 0


def test_total_commissions_computed_per_job():
    employees = [
        Employee(id="E1", name="Carlos", commission_percent=50),
        Employee(id="E2", name="João", commission_percent=30),
    ]
    jobs = [job("E1", 100.0, MON), job("E2", 100.0, TUE)]
    summary = summarize(jobs, [], employees)
    assert summary.total_commissions == pytest.approx(80.0)
    assert summary.total_commissions == pytest.approx(sum(r.commission for r in summary.per_employee))


# ── Unknown employees ────────────────────────────────────


def test_orphaned_job_counts_in_totals_only():
    employees = [Employee(id="E1", name="Carlos", commission_percent=50)]
    jobs = [job("E1", 100.0, MON), job("GONE", 60.0, TUE)]
    summary = summarize(jobs, [], employees)

    assert summary.total_revenue == pytest.approx(160.0)
    assert summary.job_count == 2
    assert summary.day(2).revenue == pytest.approx(60.0)
    assert [r.employee_id for r in summary.per_employee] == ["E1"]
    # Orphaned job charged at the default share
    assert summary.total_commissions == pytest.approx(50.0 + 60.0 * DEFAULT_COMMISSION_PERCENT / 100)


# ── Helpers ──────────────────────────────────────────────


def test_commission_for_default():
    assert commission_for(100.0, None) == pytest.approx(40.0)
    assert commission_for(100.0, 10) == pytest.approx(10.0)


def test_employee_commission_filters_by_employee():
    carlos = Employee(id="E1", name="Carlos", commission_percent=45)
    jobs = [job("E1", 100.0, MON), job("E2", 999.0, MON), job("E1", 20.0, TUE)]
    result = employee_commission(jobs, carlos)
    assert result.total == pytest.approx(120.0)
    assert result.commission == pytest.approx(54.0)
    assert result.commission_percent == 45


def test_to_dict_rounds_money():
    employees = [Employee(id="E1", name="Carlos", commission_percent=33)]
    summary = summarize([job("E1", 10.01, MON)], [], employees).to_dict()
    assert summary["per_employee"][0]["commission"] == pytest.approx(3.3)
    assert summary["total_revenue"] == 10.01
    assert len(summary["per_day"]) == 7
