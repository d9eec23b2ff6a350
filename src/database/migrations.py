"""
Versioned schema migrations.

Each migration runs once, in order, and is recorded in schema_migrations.
Migrations check column presence before altering so databases created
before versioning existed upgrade cleanly.

apply_migrations() is called by create_app() at startup and by
scripts/migrate.py.
"""

import logging
import sqlite3
from pathlib import Path

from src.database.models import DEFAULT_COMMISSION_PERCENT
from src.services.slugs import unique_slug

log = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _columns(db: sqlite3.Connection, table: str) -> set[str]:
    return {row[1] for row in db.execute(f"PRAGMA table_info({table})").fetchall()}


def _add_column(db: sqlite3.Connection, table: str, column: str, ddl: str) -> None:
    if column not in _columns(db, table):
        db.execute(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}")
        log.info("Added %s.%s", table, column)


# ── Migrations ───────────────────────────────────────────


def _baseline(db):
    db.executescript(SCHEMA_PATH.read_text())


def _employee_commission_percent(db):
    _add_column(db, "employees", "commission_percent", f"REAL DEFAULT {DEFAULT_COMMISSION_PERCENT}")
    db.execute(
        "UPDATE employees SET commission_percent = ? WHERE commission_percent IS NULL",
        (DEFAULT_COMMISSION_PERCENT,),
    )


def _wash_job_payment_method(db):
    _add_column(db, "wash_jobs", "payment_method", "TEXT")


def _user_business_name(db):
    _add_column(db, "users", "business_name", "TEXT")


def _user_slug(db):
    _add_column(db, "users", "slug", "TEXT")

    rows = db.execute("SELECT id, name, business_name, slug FROM users ORDER BY created_at, id").fetchall()
    taken = {r["slug"].lower() for r in rows if r["slug"]}
    for r in rows:
        if r["slug"]:
            continue
        slug = unique_slug(r["business_name"] or r["name"], taken)
        db.execute("UPDATE users SET slug = ? WHERE id = ?", (slug, r["id"]))

    db.execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_users_slug ON users(slug)")


def _tenant_columns(db):
    _add_column(db, "employees", "user_id", "TEXT")
    _add_column(db, "expenses", "user_id", "TEXT")
    db.execute("CREATE INDEX IF NOT EXISTS idx_employees_user ON employees(user_id)")
    db.execute("CREATE INDEX IF NOT EXISTS idx_expenses_user ON expenses(user_id)")


MIGRATIONS = [
    (1, "baseline", _baseline),
    (2, "employee_commission_percent", _employee_commission_percent),
    (3, "wash_job_payment_method", _wash_job_payment_method),
    (4, "user_business_name", _user_business_name),
    (5, "user_slug", _user_slug),
    (6, "tenant_columns", _tenant_columns),
]


# ── Runner ───────────────────────────────────────────────


def _ensure_version_table(db: sqlite3.Connection) -> None:
    db.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version     INTEGER PRIMARY KEY,
            name        TEXT    NOT NULL,
            applied_at  TEXT    DEFAULT (datetime('now'))
        )
    """)


def current_version(db: sqlite3.Connection) -> int:
    """Highest applied migration version (0 for a fresh database)."""
    _ensure_version_table(db)
    row = db.execute("SELECT MAX(version) FROM schema_migrations").fetchone()
    return row[0] or 0


def apply_migrations(db: sqlite3.Connection) -> list[str]:
    """Apply every pending migration in order.

    Returns:
        Names of the migrations applied by this call (empty when up to date).
    """
    db.row_factory = sqlite3.Row
    version = current_version(db)
    applied = []

    for number, name, func in MIGRATIONS:
        if number <= version:
            continue
        try:
            func(db)
            db.execute(
                "INSERT INTO schema_migrations (version, name) VALUES (?, ?)",
                (number, name),
            )
            db.commit()
        except sqlite3.Error:
            db.rollback()
            log.exception("Migration %d (%s) failed", number, name)
            raise
        log.info("Applied migration %d: %s", number, name)
        applied.append(name)

    return applied
