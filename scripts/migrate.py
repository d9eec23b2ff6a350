#!/usr/bin/env python3
"""
Apply pending schema migrations to an existing LavaJato database.

Usage:
    python scripts/migrate.py                    # default: data/lavajato.db
    python scripts/migrate.py --db path/to.db
"""

import argparse
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.database.connection import get_db
from src.database.migrations import MIGRATIONS, apply_migrations, current_version


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply pending LavaJato migrations")
    parser.add_argument(
        "--db",
        default=os.getenv("DATABASE_PATH", "data/lavajato.db"),
        help="Path to the SQLite database file",
    )
    args = parser.parse_args()

    conn = get_db(args.db)
    try:
        before = current_version(conn)
        applied = apply_migrations(conn)
    finally:
        conn.close()

    if not applied:
        print(f"Already up to date (version {before})")
        return
    for name in applied:
        print(f"  applied: {name}")
    print(f"Schema version {before} -> {MIGRATIONS[-1][0]}")


if __name__ == "__main__":
    main()
