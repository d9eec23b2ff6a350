"""
Small request helpers shared by the blueprints.
"""

from datetime import datetime

from flask import current_app, jsonify, request

from src.services.week import parse_offset


def now() -> datetime:
    """Current local time from the app clock (pinned in tests)."""
    clock = current_app.config.get("CLOCK") or datetime.now
    return clock()


def week_offset() -> int:
    """?semana=N from the query string; missing, junk or negative -> 0."""
    return parse_offset(request.args.get("semana"))


def request_data() -> dict:
    """JSON body, or form fields for classic form posts."""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    return data


def error(message: str, status: int = 400):
    return jsonify({"error": message}), status
