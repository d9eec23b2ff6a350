"""
Report API endpoints.

Preview, raw data and spreadsheet download for a reporting week.
All take ?semana=N (weeks back from the current one).
"""

import logging

from flask import Blueprint, Response, jsonify, render_template, session

from src.api.helpers import error, now, week_offset
from src.database.connection import get_db
from src.services.auth import get_current_user_id, login_required
from src.services.errors import ParseError
from src.services.report_generator import get_weekly_report_data
from src.services.report_renderer import build_report_workbook, render_report_html

log = logging.getLogger(__name__)

reports_bp = Blueprint("reports", __name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _report(offset: int) -> dict:
    db = get_db()
    try:
        return get_weekly_report_data(db, offset, get_current_user_id(), now())
    finally:
        db.close()


def _bad_week_page(offset: int):
    log.exception("Malformed date in stored records for week offset %d", offset)
    return render_template("error.html", message="Registro com data inválida nesta semana"), 500


@reports_bp.route("/reports/weekly/preview", methods=["GET"])
@login_required
def preview_weekly_report():
    """Render the weekly report as HTML in the browser for review."""
    offset = week_offset()
    try:
        report = _report(offset)
    except ParseError:
        return _bad_week_page(offset)
    business_name = (session.get("user") or {}).get("business_name")
    html = render_report_html(report, business_name, generated_at=now())
    return html, 200, {"Content-Type": "text/html; charset=utf-8"}


@reports_bp.route("/reports/weekly/data", methods=["GET"])
@login_required
def weekly_report_data():
    """Return the raw weekly report data as JSON."""
    offset = week_offset()
    try:
        report = _report(offset)
    except ParseError as exc:
        log.exception("Malformed date in stored records for week offset %d", offset)
        return error(str(exc), 500)
    return jsonify(report), 200


@reports_bp.route("/reports/weekly/export", methods=["GET"])
@login_required
def weekly_report_export():
    """Download the week as an .xlsx workbook."""
    offset = week_offset()
    try:
        report = _report(offset)
    except ParseError:
        return _bad_week_page(offset)
    week = report["week"]
    filename = f"lavajato_semana_{week['start_date']}_a_{week['end_date']}.xlsx"

    log.info("Exporting week %s..%s", week["start_date"], week["end_date"])
    return Response(
        build_report_workbook(report),
        mimetype=XLSX_MIMETYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
