"""
Employee (funcionário) storage.

Every query is scoped to one business: rows whose user_id matches, plus
legacy rows with no user_id, which stay visible to everyone.
"""

import logging
import uuid

from src.database.models import DEFAULT_COMMISSION_PERCENT, Employee
from src.services.errors import NotFoundError
from src.services.validation import optional_text, parse_percent, require_text

log = logging.getLogger(__name__)

_COLUMNS = "id, name, email, phone, is_active, commission_percent, user_id, created_at"


def tenant_clause(user_id: str | None, column: str = "user_id") -> tuple[str, list]:
    """SQL fragment + params restricting rows to a tenant (and legacy NULL rows)."""
    if not user_id:
        return "", []
    return f" AND ({column} = ? OR {column} IS NULL)", [user_id]


def list_employees(db, user_id: str | None = None, active_only: bool = False) -> list[Employee]:
    """Employees ordered by name."""
    clause, params = tenant_clause(user_id)
    if active_only:
        clause += " AND is_active = 1"
    rows = db.execute(
        f"SELECT {_COLUMNS} FROM employees WHERE 1 = 1{clause} ORDER BY name",
        params,
    ).fetchall()
    return [Employee.from_row(r) for r in rows]


def get_employee(db, employee_id: str, user_id: str | None = None) -> Employee:
    clause, params = tenant_clause(user_id)
    row = db.execute(
        f"SELECT {_COLUMNS} FROM employees WHERE id = ?{clause}",
        [employee_id, *params],
    ).fetchone()
    if not row:
        raise NotFoundError(f"Employee {employee_id} not found")
    return Employee.from_row(row)


def create_employee(db, data: dict, user_id: str | None = None) -> Employee:
    name = require_text(data.get("name"), "name")
    percent = parse_percent(data.get("commission_percent"))
    if percent is None:
        percent = DEFAULT_COMMISSION_PERCENT

    employee_id = str(uuid.uuid4())
    db.execute(
        """INSERT INTO employees (id, name, email, phone, commission_percent, user_id)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (
            employee_id,
            name,
            optional_text(data.get("email")),
            optional_text(data.get("phone")),
            percent,
            user_id,
        ),
    )
    db.commit()
    log.info("Employee %s created (%s, %.0f%%)", employee_id, name, percent)
    return get_employee(db, employee_id)


def update_employee(db, employee_id: str, data: dict, user_id: str | None = None) -> Employee:
    """Update name/contact/active flag; commission only when supplied."""
    current = get_employee(db, employee_id, user_id)

    updates = {
        "name": require_text(data.get("name", current.name), "name"),
        "email": optional_text(data.get("email", current.email)),
        "phone": optional_text(data.get("phone", current.phone)),
    }
    if "is_active" in data:
        updates["is_active"] = 1 if _truthy(data["is_active"]) else 0
    if data.get("commission_percent") not in (None, ""):
        updates["commission_percent"] = parse_percent(data["commission_percent"])

    set_clause = ", ".join(f"{k} = ?" for k in updates)
    db.execute(
        f"UPDATE employees SET {set_clause} WHERE id = ?",
        [*updates.values(), employee_id],
    )
    db.commit()
    log.info("Employee %s updated (%s)", employee_id, ", ".join(updates))
    return get_employee(db, employee_id)


def delete_employee(db, employee_id: str, user_id: str | None = None) -> None:
    """Delete an employee and, through the foreign key, their wash jobs."""
    get_employee(db, employee_id, user_id)
    db.execute("DELETE FROM employees WHERE id = ?", (employee_id,))
    db.commit()
    log.info("Employee %s deleted", employee_id)


def _truthy(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "on", "yes", "sim")
    return bool(value)
