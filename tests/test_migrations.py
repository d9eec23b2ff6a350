"""
Tests for versioned schema migrations.

Covers:
- Fresh database gets every migration once
- Re-running is a no-op
- Databases created before versioning upgrade in place (commission
  backfill, slug backfill with collisions)
"""

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

TEST_DB = "/tmp/test_lavajato_migrations.db"
os.environ["DATABASE_PATH"] = TEST_DB

from src.database.connection import get_db
from src.database.migrations import MIGRATIONS, apply_migrations, current_version

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "src" / "database" / "schema.sql"


def fresh_db():
    for suffix in ("", "-wal", "-shm"):
        path = Path(TEST_DB + suffix)
        if path.exists():
            path.unlink()
    return get_db(TEST_DB)


def columns(db, table):
    return {row[1] for row in db.execute(f"PRAGMA table_info({table})").fetchall()}


def test_fresh_database_applies_all():
    db = fresh_db()
    try:
        applied = apply_migrations(db)
        assert applied == [name for _, name, _ in MIGRATIONS]
        assert current_version(db) == MIGRATIONS[-1][0]
    finally:
        db.close()


def test_second_run_is_noop():
    db = fresh_db()
    try:
        apply_migrations(db)
        assert apply_migrations(db) == []
        count = db.execute("SELECT COUNT(*) FROM schema_migrations").fetchone()[0]
        assert count == len(MIGRATIONS)
    finally:
        db.close()


def test_final_columns_present():
    db = fresh_db()
    try:
        apply_migrations(db)
        assert {"commission_percent", "user_id"} <= columns(db, "employees")
        assert "payment_method" in columns(db, "wash_jobs")
        assert {"business_name", "slug"} <= columns(db, "users")
        assert "user_id" in columns(db, "expenses")
    finally:
        db.close()


def test_new_employee_gets_default_commission_column_value():
    db = fresh_db()
    try:
        apply_migrations(db)
        db.execute("INSERT INTO employees (id, name) VALUES ('e1', 'Carlos')")
        db.commit()
        row = db.execute("SELECT commission_percent FROM employees WHERE id = 'e1'").fetchone()
        assert row["commission_percent"] == 40
    finally:
        db.close()


def test_upgrade_unversioned_database():
    """A database built from the bare schema, with data, upgrades in place."""
    db = fresh_db()
    try:
        db.executescript(SCHEMA_PATH.read_text())
        db.execute("INSERT INTO employees (id, name) VALUES ('e1', 'Carlos')")
        db.execute("INSERT INTO employees (id, name) VALUES ('e2', 'João')")
        db.execute("INSERT INTO wash_jobs (id, employee_id, description, price, performed_on) "
                   "VALUES ('j1', 'e1', 'Lavagem', 40, '2024-03-11')")
        db.execute("INSERT INTO users (id, email, password_hash, name, created_at) "
                   "VALUES ('u1', 'a@x.com', 'x', 'Lava Jato Central', '2024-01-01 10:00:00')")
        db.execute("INSERT INTO users (id, email, password_hash, name, created_at) "
                   "VALUES ('u2', 'b@x.com', 'x', 'Lava Jato Central', '2024-01-02 10:00:00')")
        db.commit()

        applied = apply_migrations(db)
        assert len(applied) == len(MIGRATIONS)

        percents = [r[0] for r in db.execute("SELECT commission_percent FROM employees").fetchall()]
        assert percents == [40, 40]

        slugs = {r["id"]: r["slug"] for r in db.execute("SELECT id, slug FROM users").fetchall()}
        assert slugs == {"u1": "lava-jato-central", "u2": "lava-jato-central-2"}

        job = db.execute("SELECT payment_method FROM wash_jobs WHERE id = 'j1'").fetchone()
        assert job["payment_method"] is None
    finally:
        db.close()


def test_partially_migrated_database_skips_existing_columns():
    """Columns added by hand before versioning do not break the upgrade."""
    db = fresh_db()
    try:
        db.executescript(SCHEMA_PATH.read_text())
        db.execute("ALTER TABLE wash_jobs ADD COLUMN payment_method TEXT")
        db.commit()

        apply_migrations(db)
        assert "payment_method" in columns(db, "wash_jobs")
        assert current_version(db) == MIGRATIONS[-1][0]
    finally:
        db.close()
