#!/usr/bin/env python3
"""
Initialize the LavaJato SQLite database.

Usage:
    python scripts/setup_db.py                    # default: data/lavajato.db
    python scripts/setup_db.py --db path/to.db    # custom path
    python scripts/setup_db.py --seed             # include sample employees and washes
"""

import argparse
import os
import sys
from datetime import date, timedelta
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.database.connection import get_db
from src.database.migrations import apply_migrations
from src.services.employees import create_employee
from src.services.expenses import create_expense
from src.services.wash_jobs import create_job

SAMPLE_EMPLOYEES = [
    {"name": "Carlos Souza", "phone": "(11) 98888-1111", "commission_percent": 40},
    {"name": "João Pereira", "phone": "(11) 97777-2222", "commission_percent": 35},
    {"name": "Marcos Lima", "phone": "(11) 96666-3333"},
]

SAMPLE_JOBS = [
    # (employee index, description, price, days after Monday, payment method)
    (0, "Lavagem simples", 40.0, 0, "pix"),
    (0, "Lavagem completa", 80.0, 1, "cash"),
    (1, "Polimento", 150.0, 2, "pix"),
    (1, "Lavagem simples", 40.0, 4, "cash"),
    (2, "Higienização interna", 120.0, 5, "pix"),
]

SAMPLE_EXPENSES = [
    ("Shampoo automotivo", 65.0, 0),
    ("Conta de água", 210.0, 3),
]


def seed_sample_data(conn) -> None:
    today = date.today()
    monday = today - timedelta(days=today.weekday())

    staff = [create_employee(conn, data) for data in SAMPLE_EMPLOYEES]
    for index, description, price, days, method in SAMPLE_JOBS:
        create_job(conn, staff[index].id, {
            "description": description,
            "price": price,
            "performed_on": (monday + timedelta(days=days)).isoformat(),
            "payment_method": method,
        })
    for description, amount, days in SAMPLE_EXPENSES:
        create_expense(conn, {
            "description": description,
            "amount": amount,
            "incurred_on": (monday + timedelta(days=days)).isoformat(),
        })
    print(f"Seeded {len(staff)} employees, {len(SAMPLE_JOBS)} washes, {len(SAMPLE_EXPENSES)} expenses")


def init_database(db_path: str, seed: bool = False) -> None:
    """Apply all migrations and optionally seed sample data."""
    conn = get_db(db_path)
    try:
        applied = apply_migrations(conn)
        print(f"Database initialized: {db_path}")
        if applied:
            print(f"Migrations applied: {', '.join(applied)}")

        if seed:
            seed_sample_data(conn)

        # Print summary
        tables = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
        ).fetchall()
        print(f"Tables: {', '.join(row['name'] for row in tables)}")
    finally:
        conn.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize the LavaJato database")
    parser.add_argument(
        "--db",
        default=os.getenv("DATABASE_PATH", "data/lavajato.db"),
        help="Path to the SQLite database file",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed the database with sample employees, washes and expenses",
    )
    args = parser.parse_args()

    init_database(args.db, seed=args.seed)


if __name__ == "__main__":
    main()
