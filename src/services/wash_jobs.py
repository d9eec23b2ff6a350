"""
Wash job (lavagem) storage.

Jobs belong to a business through their employee, so tenant scoping
joins employees. Week queries compare the zero-padded YYYY-MM-DD
performed_on column against the window's local calendar dates.
"""

import logging
import uuid

from src.database.models import WashJob
from src.services.dates import weekday_index
from src.services.employees import get_employee, tenant_clause
from src.services.errors import NotFoundError
from src.services.validation import normalize_payment_method, parse_amount, parse_day, require_text
from src.services.week import WeekWindow

log = logging.getLogger(__name__)

_SELECT = """
    SELECT j.id, j.employee_id, j.description, j.price, j.performed_on,
           j.payment_method, j.created_at, e.name AS employee_name
    FROM wash_jobs j
    JOIN employees e ON e.id = j.employee_id
"""

_ORDER = " ORDER BY j.performed_on DESC, j.created_at DESC"


def list_jobs_for_week(db, window: WeekWindow, user_id: str | None = None) -> list[WashJob]:
    """All jobs performed inside the window, newest first."""
    clause, params = tenant_clause(user_id, "e.user_id")
    rows = db.execute(
        _SELECT + f" WHERE j.performed_on >= ? AND j.performed_on <= ?{clause}" + _ORDER,
        [window.start_date, window.end_date, *params],
    ).fetchall()
    return [WashJob.from_row(r) for r in rows]


def list_jobs_for_employee(db, employee_id: str, window: WeekWindow) -> list[WashJob]:
    rows = db.execute(
        _SELECT + " WHERE j.employee_id = ? AND j.performed_on >= ? AND j.performed_on <= ?" + _ORDER,
        (employee_id, window.start_date, window.end_date),
    ).fetchall()
    return [WashJob.from_row(r) for r in rows]


def get_job(db, job_id: str, user_id: str | None = None) -> WashJob:
    clause, params = tenant_clause(user_id, "e.user_id")
    row = db.execute(_SELECT + f" WHERE j.id = ?{clause}", [job_id, *params]).fetchone()
    if not row:
        raise NotFoundError(f"Wash job {job_id} not found")
    return WashJob.from_row(row)


def create_job(db, employee_id: str, data: dict, user_id: str | None = None) -> WashJob:
    """Log a wash for an employee.

    Expects description, price (> 0) and performed_on (YYYY-MM-DD);
    payment_method is optional.
    """
    get_employee(db, employee_id, user_id)
    description = require_text(data.get("description"), "description")
    price = parse_amount(data.get("price"), "price")
    performed_on = parse_day(data.get("performed_on"), "performed_on")
    payment_method = normalize_payment_method(data.get("payment_method"))

    job_id = str(uuid.uuid4())
    db.execute(
        """INSERT INTO wash_jobs (id, employee_id, description, price, performed_on, payment_method)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (job_id, employee_id, description, price, performed_on, payment_method),
    )
    db.commit()
    log.info("Wash job %s logged for employee %s (%.2f on %s)", job_id, employee_id, price, performed_on)
    return get_job(db, job_id)


def update_job(db, job_id: str, data: dict, user_id: str | None = None) -> WashJob:
    current = get_job(db, job_id, user_id)
    description = require_text(data.get("description", current.description), "description")
    price = parse_amount(data.get("price", current.price), "price")
    performed_on = parse_day(data.get("performed_on", current.performed_on), "performed_on")
    payment_method = (
        normalize_payment_method(data["payment_method"])
        if "payment_method" in data else current.payment_method
    )

    db.execute(
        """UPDATE wash_jobs
           SET description = ?, price = ?, performed_on = ?, payment_method = ?
           WHERE id = ?""",
        (description, price, performed_on, payment_method, job_id),
    )
    db.commit()
    log.info("Wash job %s updated", job_id)
    return get_job(db, job_id)


def delete_job(db, job_id: str, user_id: str | None = None) -> None:
    get_job(db, job_id, user_id)
    db.execute("DELETE FROM wash_jobs WHERE id = ?", (job_id,))
    db.commit()
    log.info("Wash job %s deleted", job_id)


def list_all_jobs(db, user_id: str | None = None, day_index: int | None = None) -> list[WashJob]:
    """Full wash history, newest first; day_index (Sun=0..Sat=6) keeps one weekday.

    Raises:
        ParseError: a stored performed_on is malformed and a weekday filter is set.
    """
    clause, params = tenant_clause(user_id, "e.user_id")
    rows = db.execute(_SELECT + f" WHERE 1 = 1{clause}" + _ORDER, params).fetchall()
    jobs = [WashJob.from_row(r) for r in rows]
    if day_index is None:
        return jobs
    return [j for j in jobs if weekday_index(j.performed_on) == day_index]
