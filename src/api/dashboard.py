"""
Dashboard routes — the owner's weekly overview.

The same report dict feeds the HTML page and the JSON endpoint:
week labels, revenue, expenses, net profit, commissions, the
per-employee ranking and the day-of-week breakdown.
"""

import logging

from flask import Blueprint, jsonify, redirect, render_template, url_for

from src.api.helpers import now, week_offset
from src.database.connection import get_db
from src.services.auth import get_current_user_id, login_required
from src.services.errors import ParseError
from src.services.report_generator import get_weekly_report_data
from src.services.report_renderer import format_brl

log = logging.getLogger(__name__)

dashboard_bp = Blueprint("dashboard", __name__)

RECENT_LIMIT = 10


def _load_report(offset: int) -> dict:
    db = get_db()
    try:
        return get_weekly_report_data(db, offset, get_current_user_id(), now())
    finally:
        db.close()


@dashboard_bp.route("/")
def index():
    return redirect(url_for("dashboard.dashboard"))


@dashboard_bp.route("/dashboard")
@login_required
def dashboard():
    """Weekly overview page. ?semana=N browses N weeks back."""
    offset = week_offset()
    try:
        report = _load_report(offset)
    except ParseError:
        log.exception("Malformed date in stored records for week offset %d", offset)
        return render_template("error.html", message="Registro com data inválida nesta semana"), 500

    return render_template(
        "dashboard.html",
        report=report,
        summary=report["summary"],
        week=report["week"],
        offset=offset,
        recent_jobs=report["jobs"][:RECENT_LIMIT],
        recent_expenses=report["expenses"][:RECENT_LIMIT],
        brl=format_brl,
    )


@dashboard_bp.route("/api/dashboard/summary")
@login_required
def api_dashboard_summary():
    """Dashboard data as JSON."""
    offset = week_offset()
    try:
        report = _load_report(offset)
    except ParseError as exc:
        log.exception("Malformed date in stored records for week offset %d", offset)
        return jsonify({"error": str(exc)}), 500

    report["recent_jobs"] = report.pop("jobs")[:RECENT_LIMIT]
    report["recent_expenses"] = report.pop("expenses")[:RECENT_LIMIT]
    return jsonify(report)
