"""
Weekly report data aggregation.

Takes the wash jobs, expenses and employees for one reporting week and
derives the numbers shown on the dashboard, the employee page and the
public self-service page: revenue, expenses, net profit, per-employee
totals and commission, and a day-of-week breakdown.

Callers filter records to the week before calling summarize(); nothing
here re-checks dates against the window.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from src.database.models import DEFAULT_COMMISSION_PERCENT, Employee, Expense, WashJob
from src.services.dates import weekday_index
from src.services import employees as employee_store
from src.services import expenses as expense_store
from src.services import wash_jobs as job_store
from src.services.week import resolve_week

log = logging.getLogger(__name__)

# (label, index) with index Sun=0..Sat=6, listed Monday first
DAYS_OF_WEEK = [
    ("Seg", 1),
    ("Ter", 2),
    ("Qua", 3),
    ("Qui", 4),
    ("Sex", 5),
    ("Sáb", 6),
    ("Dom", 0),
]


@dataclass
class EmployeeTotal:
    employee_id: str
    employee_name: str
    total: float
    commission: float
    commission_percent: float

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "total": round(self.total, 2),
            "commission": round(self.commission, 2),
            "commission_percent": self.commission_percent,
        }


@dataclass
class DayTotal:
    day_label: str
    day_index: int
    job_count: int = 0
    revenue: float = 0.0
    expenses: float = 0.0

    @property
    def balance(self) -> float:
        return self.revenue - self.expenses

    def to_dict(self) -> dict:
        return {
            "day_label": self.day_label,
            "day_index": self.day_index,
            "job_count": self.job_count,
            "revenue": round(self.revenue, 2),
            "expenses": round(self.expenses, 2),
            "balance": round(self.balance, 2),
        }


@dataclass
class WeeklySummary:
    total_revenue: float = 0.0
    total_expenses: float = 0.0
    total_commissions: float = 0.0
    job_count: int = 0
    per_employee: list[EmployeeTotal] = field(default_factory=list)
    per_day: list[DayTotal] = field(default_factory=list)

    @property
    def net_profit(self) -> float:
        return self.total_revenue - self.total_expenses

    @property
    def week_revenue(self) -> float:
        return sum(d.revenue for d in self.per_day)

    @property
    def week_expenses(self) -> float:
        return sum(d.expenses for d in self.per_day)

    @property
    def week_balance(self) -> float:
        return sum(d.balance for d in self.per_day)

    def day(self, day_index: int) -> DayTotal:
        """Bucket for a weekday, Sun=0..Sat=6."""
        return next(d for d in self.per_day if d.day_index == day_index)

    def to_dict(self) -> dict:
        return {
            "total_revenue": round(self.total_revenue, 2),
            "total_expenses": round(self.total_expenses, 2),
            "net_profit": round(self.net_profit, 2),
            "total_commissions": round(self.total_commissions, 2),
            "job_count": self.job_count,
            "per_employee": [e.to_dict() for e in self.per_employee],
            "per_day": [d.to_dict() for d in self.per_day],
            "week_revenue": round(self.week_revenue, 2),
            "week_expenses": round(self.week_expenses, 2),
            "week_balance": round(self.week_balance, 2),
        }


@dataclass
class EmployeeCommission:
    total: float
    commission: float
    commission_percent: float

    def to_dict(self) -> dict:
        return {
            "total": round(self.total, 2),
            "commission": round(self.commission, 2),
            "commission_percent": self.commission_percent,
        }


def commission_for(amount: float, percent: float | None) -> float:
    """Commission on amount; percent None means the default share."""
    if percent is None:
        percent = DEFAULT_COMMISSION_PERCENT
    return amount * (percent / 100)


def summarize(
    jobs: list[WashJob],
    expenses: list[Expense],
    employees: list[Employee],
) -> WeeklySummary:
    """Roll up one week of jobs and expenses.

    Jobs whose employee_id is not in employees still count toward revenue,
    total commissions and the day buckets, but get no per-employee row.
    Inactive employees are likewise left out of the per-employee list.
    """
    by_id = {e.id: e for e in employees}
    summary = WeeklySummary(per_day=[DayTotal(label, index) for label, index in DAYS_OF_WEEK])
    buckets = {d.day_index: d for d in summary.per_day}

    employee_totals: dict[str, float] = {}
    orphaned = 0

    for job in jobs:
        summary.total_revenue += job.price
        summary.job_count += 1

        employee = by_id.get(job.employee_id)
        percent = employee.commission_percent if employee else None
        summary.total_commissions += commission_for(job.price, percent)

        if employee is None:
            orphaned += 1
        else:
            employee_totals[job.employee_id] = employee_totals.get(job.employee_id, 0.0) + job.price

        bucket = buckets[weekday_index(job.performed_on)]
        bucket.job_count += 1
        bucket.revenue += job.price

    for expense in expenses:
        summary.total_expenses += expense.amount
        buckets[weekday_index(expense.incurred_on)].expenses += expense.amount

    if orphaned:
        log.warning("%d wash job(s) reference unknown employees; left out of per-employee totals", orphaned)

    rows = []
    for employee in employees:
        if not employee.is_active:
            continue
        total = employee_totals.get(employee.id, 0.0)
        rows.append(EmployeeTotal(
            employee_id=employee.id,
            employee_name=employee.name,
            total=total,
            commission=commission_for(total, employee.commission_percent),
            commission_percent=employee.effective_commission_percent,
        ))
    # sorted() is stable, so equal totals keep the caller's (name) order
    summary.per_employee = sorted(rows, key=lambda r: r.total, reverse=True)

    return summary


def employee_commission(jobs: list[WashJob], employee: Employee) -> EmployeeCommission:
    """Total and commission for one employee's jobs (employee and public pages)."""
    total = sum(job.price for job in jobs if job.employee_id == employee.id)
    return EmployeeCommission(
        total=total,
        commission=commission_for(total, employee.commission_percent),
        commission_percent=employee.effective_commission_percent,
    )


def get_weekly_report_data(db, offset: int = 0, user_id: str | None = None,
                           now: datetime | None = None) -> dict:
    """Build the full weekly report for one business.

    Args:
        db: SQLite connection.
        offset: Weeks back from the current one (0 = this week).
        user_id: Tenant whose records to include (None = all).
        now: Clock reading used to resolve the week.

    Returns:
        {
            "offset": 0,
            "week": {"start_date": "2024-03-11", "end_date": "2024-03-16",
                     "start_label": "11/03", "end_label": "16/03", ...},
            "summary": {"total_revenue": ..., "per_employee": [...], "per_day": [...]},
            "jobs": [...],
            "expenses": [...],
        }
    """
    window = resolve_week(offset, now)

    jobs = job_store.list_jobs_for_week(db, window, user_id)
    week_expenses = expense_store.list_expenses_for_week(db, window, user_id)
    staff = employee_store.list_employees(db, user_id)

    summary = summarize(jobs, week_expenses, staff)
    log.debug(
        "Week %s..%s: %d jobs, %d expenses, revenue=%.2f",
        window.start_date, window.end_date, len(jobs), len(week_expenses), summary.total_revenue,
    )

    return {
        "offset": offset,
        "week": window.to_dict(),
        "summary": summary.to_dict(),
        "jobs": [j.to_dict() for j in jobs],
        "expenses": [e.to_dict() for e in week_expenses],
    }
