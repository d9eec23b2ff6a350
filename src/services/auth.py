"""
Authentication helpers for LavaJato.

Provides the @login_required decorator used by all admin routes.
"""

from functools import wraps

from flask import redirect, request, session, url_for


def login_required(f):
    """Decorator that redirects unauthenticated users to the login page.

    Preserves the original URL so the user lands there after login.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        if not session.get("user"):
            next_url = request.full_path.rstrip("?")
            return redirect(url_for("auth.login", next=next_url))
        return f(*args, **kwargs)
    return decorated


def get_current_user_id() -> str | None:
    """Tenant id of the logged-in business, or None."""
    user = session.get("user") or {}
    return user.get("id")
