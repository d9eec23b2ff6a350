"""
Expense (despesa) storage.
"""

import logging
import uuid

from src.database.models import Expense
from src.services.employees import tenant_clause
from src.services.errors import NotFoundError
from src.services.validation import optional_text, parse_amount, parse_day, require_text
from src.services.week import WeekWindow

log = logging.getLogger(__name__)

_COLUMNS = "id, description, amount, incurred_on, notes, created_at"
_ORDER = " ORDER BY incurred_on DESC, created_at DESC"


def list_expenses_for_week(db, window: WeekWindow, user_id: str | None = None) -> list[Expense]:
    clause, params = tenant_clause(user_id)
    rows = db.execute(
        f"SELECT {_COLUMNS} FROM expenses WHERE incurred_on >= ? AND incurred_on <= ?{clause}" + _ORDER,
        [window.start_date, window.end_date, *params],
    ).fetchall()
    return [Expense.from_row(r) for r in rows]


def list_all_expenses(db, user_id: str | None = None) -> list[Expense]:
    clause, params = tenant_clause(user_id)
    rows = db.execute(
        f"SELECT {_COLUMNS} FROM expenses WHERE 1 = 1{clause}" + _ORDER,
        params,
    ).fetchall()
    return [Expense.from_row(r) for r in rows]


def get_expense(db, expense_id: str, user_id: str | None = None) -> Expense:
    clause, params = tenant_clause(user_id)
    row = db.execute(
        f"SELECT {_COLUMNS} FROM expenses WHERE id = ?{clause}",
        [expense_id, *params],
    ).fetchone()
    if not row:
        raise NotFoundError(f"Expense {expense_id} not found")
    return Expense.from_row(row)


def create_expense(db, data: dict, user_id: str | None = None) -> Expense:
    description = require_text(data.get("description"), "description")
    amount = parse_amount(data.get("amount"), "amount")
    incurred_on = parse_day(data.get("incurred_on"), "incurred_on")

    expense_id = str(uuid.uuid4())
    db.execute(
        """INSERT INTO expenses (id, description, amount, incurred_on, notes, user_id)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (expense_id, description, amount, incurred_on, optional_text(data.get("notes")), user_id),
    )
    db.commit()
    log.info("Expense %s created (%.2f on %s)", expense_id, amount, incurred_on)
    return get_expense(db, expense_id)


def update_expense(db, expense_id: str, data: dict, user_id: str | None = None) -> Expense:
    current = get_expense(db, expense_id, user_id)
    description = require_text(data.get("description", current.description), "description")
    amount = parse_amount(data.get("amount", current.amount), "amount")
    incurred_on = parse_day(data.get("incurred_on", current.incurred_on), "incurred_on")
    notes = optional_text(data["notes"]) if "notes" in data else current.notes

    db.execute(
        "UPDATE expenses SET description = ?, amount = ?, incurred_on = ?, notes = ? WHERE id = ?",
        (description, amount, incurred_on, notes, expense_id),
    )
    db.commit()
    log.info("Expense %s updated", expense_id)
    return get_expense(db, expense_id)


def delete_expense(db, expense_id: str, user_id: str | None = None) -> None:
    get_expense(db, expense_id, user_id)
    db.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
    db.commit()
    log.info("Expense %s deleted", expense_id)


def total_for_week(db, window: WeekWindow, user_id: str | None = None) -> float:
    clause, params = tenant_clause(user_id)
    row = db.execute(
        f"SELECT COALESCE(SUM(amount), 0) FROM expenses WHERE incurred_on >= ? AND incurred_on <= ?{clause}",
        [window.start_date, window.end_date, *params],
    ).fetchone()
    return row[0]
