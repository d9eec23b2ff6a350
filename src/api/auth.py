"""
Email + password authentication routes.

Routes:
    GET/POST /login     — login form
    GET/POST /registro  — create a business account
    GET      /logout    — clear session, redirect to login
"""

import logging

from flask import Blueprint, redirect, render_template, request, session, url_for

from src.database.connection import get_db
from src.services.errors import ValidationError
from src.services.users import create_user, verify_login

log = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _start_session(user: dict) -> None:
    session.clear()
    session["user"] = user
    session.permanent = True


def _safe_next(next_url: str | None) -> str:
    # Only follow local paths after login
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return url_for("dashboard.dashboard")


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    """Show the login form, or sign the user in."""
    if request.method == "GET":
        if session.get("user"):
            return redirect(url_for("dashboard.dashboard"))
        return render_template("login.html", next=request.args.get("next", ""))

    email = request.form.get("email", "")
    password = request.form.get("password", "")

    db = get_db()
    try:
        user = verify_login(db, email, password)
    finally:
        db.close()

    if not user:
        log.warning("Failed login attempt: %s", email)
        return render_template("login.html", error="Email ou senha inválidos", next=request.form.get("next", "")), 401

    _start_session(user)
    log.info("User logged in: %s", user["email"])
    return redirect(_safe_next(request.form.get("next")))


@auth_bp.route("/registro", methods=["GET", "POST"])
def register():
    """Create a business account and sign it in."""
    if request.method == "GET":
        if session.get("user"):
            return redirect(url_for("dashboard.dashboard"))
        return render_template("register.html")

    db = get_db()
    try:
        user = create_user(
            db,
            email=request.form.get("email", ""),
            password=request.form.get("password", ""),
            name=request.form.get("name", ""),
            business_name=request.form.get("business_name"),
        )
    except ValidationError as exc:
        return render_template("register.html", error=str(exc)), 400
    finally:
        db.close()

    _start_session(user)
    return redirect(url_for("dashboard.dashboard"))


@auth_bp.route("/logout")
def logout():
    """Clear session and redirect to login."""
    user = session.get("user", {})
    session.clear()
    log.info("User logged out: %s", user.get("email", "unknown"))
    return redirect(url_for("auth.login"))
