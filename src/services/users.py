"""
Business accounts (usuários).

Each account is one car-wash business. Passwords are stored as
werkzeug hashes; the slug identifies the business on public pages.
"""

import logging
import sqlite3
import uuid

from werkzeug.security import check_password_hash, generate_password_hash

from src.services.errors import NotFoundError, ValidationError
from src.services.slugs import unique_slug
from src.services.validation import optional_text, require_text

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

_COLUMNS = "id, email, name, business_name, slug, created_at"


def _to_dict(row) -> dict:
    return {
        "id": row["id"],
        "email": row["email"],
        "name": row["name"],
        "business_name": row["business_name"],
        "slug": row["slug"],
    }


def create_user(db, email: str, password: str, name: str, business_name: str | None = None) -> dict:
    """Register a business account.

    Raises:
        ValidationError: missing fields, short password, email or slug already taken.
    """
    email = require_text(email, "email").lower()
    name = require_text(name, "name")
    business_name = optional_text(business_name)
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    taken = {r["slug"] for r in db.execute("SELECT slug FROM users WHERE slug IS NOT NULL").fetchall()}
    slug = unique_slug(business_name or name, taken)

    user_id = str(uuid.uuid4())
    try:
        db.execute(
            """INSERT INTO users (id, email, password_hash, name, business_name, slug)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (user_id, email, generate_password_hash(password), name, business_name, slug),
        )
        db.commit()
    except sqlite3.IntegrityError as exc:
        db.rollback()
        if "users.slug" in str(exc):
            raise ValidationError("Business name already in use, try again") from None
        raise ValidationError("This email is already registered") from None

    log.info("User registered: %s (slug=%s)", email, slug)
    return get_user(db, user_id)


def verify_login(db, email: str, password: str) -> dict | None:
    """Return the account when email and password match, else None."""
    row = db.execute(
        f"SELECT {_COLUMNS}, password_hash FROM users WHERE email = ?",
        ((email or "").strip().lower(),),
    ).fetchone()
    if not row or not check_password_hash(row["password_hash"], password or ""):
        return None
    return _to_dict(row)


def get_user(db, user_id: str) -> dict:
    row = db.execute(f"SELECT {_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
    if not row:
        raise NotFoundError(f"User {user_id} not found")
    return _to_dict(row)


def get_user_by_slug(db, slug: str) -> dict:
    row = db.execute(f"SELECT {_COLUMNS} FROM users WHERE slug = ?", ((slug or "").lower(),)).fetchone()
    if not row:
        raise NotFoundError(f"Business {slug} not found")
    return _to_dict(row)
