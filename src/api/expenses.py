"""
Expense (despesa) routes.

Routes:
    GET    /despesas                — expense page for ?semana=N
    GET    /api/expenses            — ?semana=N for one week, ?all=1 for everything
    POST   /api/expenses            — create
    PUT    /api/expenses/<id>       — update
    DELETE /api/expenses/<id>       — delete
"""

import logging

from flask import Blueprint, jsonify, render_template, request

from src.api.helpers import error, now, request_data, week_offset
from src.database.connection import get_db
from src.services import expenses as expense_store
from src.services.auth import get_current_user_id, login_required
from src.services.errors import NotFoundError, ValidationError
from src.services.report_renderer import format_brl
from src.services.week import resolve_week

log = logging.getLogger(__name__)

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.route("/despesas")
@login_required
def expenses_page():
    offset = week_offset()
    window = resolve_week(offset, now())
    db = get_db()
    try:
        rows = expense_store.list_expenses_for_week(db, window, get_current_user_id())
        total = expense_store.total_for_week(db, window, get_current_user_id())
    finally:
        db.close()
    return render_template(
        "expenses.html",
        expenses=[e.to_dict() for e in rows],
        total=total,
        week=window.to_dict(),
        offset=offset,
        brl=format_brl,
    )


@expenses_bp.route("/api/expenses", methods=["GET"])
@login_required
def api_list_expenses():
    db = get_db()
    try:
        if request.args.get("all") == "1":
            rows = expense_store.list_all_expenses(db, get_current_user_id())
        else:
            window = resolve_week(week_offset(), now())
            rows = expense_store.list_expenses_for_week(db, window, get_current_user_id())
    finally:
        db.close()
    return jsonify([e.to_dict() for e in rows])


@expenses_bp.route("/api/expenses", methods=["POST"])
@login_required
def api_create_expense():
    db = get_db()
    try:
        expense = expense_store.create_expense(db, request_data(), get_current_user_id())
    except ValidationError as exc:
        return error(str(exc))
    finally:
        db.close()
    return jsonify(expense.to_dict()), 201


@expenses_bp.route("/api/expenses/<expense_id>", methods=["PUT"])
@login_required
def api_update_expense(expense_id):
    db = get_db()
    try:
        expense = expense_store.update_expense(db, expense_id, request_data(), get_current_user_id())
    except NotFoundError as exc:
        return error(str(exc), 404)
    except ValidationError as exc:
        return error(str(exc))
    finally:
        db.close()
    return jsonify(expense.to_dict())


@expenses_bp.route("/api/expenses/<expense_id>", methods=["DELETE"])
@login_required
def api_delete_expense(expense_id):
    db = get_db()
    try:
        expense_store.delete_expense(db, expense_id, get_current_user_id())
    except NotFoundError as exc:
        return error(str(exc), 404)
    finally:
        db.close()
    return jsonify({"status": "deleted", "id": expense_id})
