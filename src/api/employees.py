"""
Employee management routes (admin).

Routes:
    GET    /funcionarios                 — employee list page
    GET    /funcionarios/<id>            — employee detail page (week jobs + commission)
    GET    /lavagens                     — full wash history (?dia=0..6 keeps one weekday)
    GET    /api/jobs                     — same history as JSON
    GET    /api/employees                — list (?ativos=1 for active only)
    POST   /api/employees                — create
    GET    /api/employees/<id>           — detail for ?semana=N
    PUT    /api/employees/<id>           — update
    DELETE /api/employees/<id>           — delete (jobs go with it)
    POST   /api/employees/<id>/jobs      — log a wash job
    PUT    /api/jobs/<job_id>            — edit a wash job
    DELETE /api/jobs/<job_id>            — delete a wash job
"""

import logging

from flask import Blueprint, jsonify, render_template, request

from src.api.helpers import error, now, request_data, week_offset
from src.database.connection import get_db
from src.services import employees as employee_store
from src.services import wash_jobs as job_store
from src.services.auth import get_current_user_id, login_required
from src.services.errors import NotFoundError, ParseError, ValidationError
from src.services.report_generator import DAYS_OF_WEEK, employee_commission
from src.services.report_renderer import format_brl
from src.services.week import resolve_week

log = logging.getLogger(__name__)

employees_bp = Blueprint("employees", __name__)


def _employee_week(db, employee_id: str, offset: int) -> dict:
    """Employee, their jobs for the week and the resulting commission."""
    employee = employee_store.get_employee(db, employee_id, get_current_user_id())
    window = resolve_week(offset, now())
    jobs = job_store.list_jobs_for_employee(db, employee_id, window)
    return {
        "employee": employee.to_dict(),
        "week": window.to_dict(),
        "offset": offset,
        "jobs": [j.to_dict() for j in jobs],
        "commission": employee_commission(jobs, employee).to_dict(),
    }


# ── Pages ───────────────────────────────────────────────────


@employees_bp.route("/funcionarios")
@login_required
def employees_page():
    db = get_db()
    try:
        staff = employee_store.list_employees(db, get_current_user_id())
    finally:
        db.close()
    return render_template("employees.html", employees=[e.to_dict() for e in staff])


@employees_bp.route("/funcionarios/<employee_id>")
@login_required
def employee_detail_page(employee_id):
    offset = week_offset()
    db = get_db()
    try:
        detail = _employee_week(db, employee_id, offset)
    except NotFoundError:
        return render_template("error.html", message="Funcionário não encontrado"), 404
    finally:
        db.close()
    return render_template("employee_detail.html", brl=format_brl, **detail)


# ── Employees API ───────────────────────────────────────────


@employees_bp.route("/api/employees", methods=["GET"])
@login_required
def api_list_employees():
    active_only = request.args.get("ativos") == "1"
    db = get_db()
    try:
        staff = employee_store.list_employees(db, get_current_user_id(), active_only=active_only)
    finally:
        db.close()
    return jsonify([e.to_dict() for e in staff])


@employees_bp.route("/api/employees", methods=["POST"])
@login_required
def api_create_employee():
    db = get_db()
    try:
        employee = employee_store.create_employee(db, request_data(), get_current_user_id())
    except ValidationError as exc:
        return error(str(exc))
    finally:
        db.close()
    return jsonify(employee.to_dict()), 201


@employees_bp.route("/api/employees/<employee_id>", methods=["GET"])
@login_required
def api_employee_detail(employee_id):
    db = get_db()
    try:
        return jsonify(_employee_week(db, employee_id, week_offset()))
    except NotFoundError as exc:
        return error(str(exc), 404)
    finally:
        db.close()


@employees_bp.route("/api/employees/<employee_id>", methods=["PUT"])
@login_required
def api_update_employee(employee_id):
    db = get_db()
    try:
        employee = employee_store.update_employee(db, employee_id, request_data(), get_current_user_id())
    except NotFoundError as exc:
        return error(str(exc), 404)
    except ValidationError as exc:
        return error(str(exc))
    finally:
        db.close()
    return jsonify(employee.to_dict())


@employees_bp.route("/api/employees/<employee_id>", methods=["DELETE"])
@login_required
def api_delete_employee(employee_id):
    db = get_db()
    try:
        employee_store.delete_employee(db, employee_id, get_current_user_id())
    except NotFoundError as exc:
        return error(str(exc), 404)
    finally:
        db.close()
    return jsonify({"status": "deleted", "id": employee_id})


# ── Wash jobs API ───────────────────────────────────────────


@employees_bp.route("/api/employees/<employee_id>/jobs", methods=["POST"])
@login_required
def api_create_job(employee_id):
    db = get_db()
    try:
        job = job_store.create_job(db, employee_id, request_data(), get_current_user_id())
    except NotFoundError as exc:
        return error(str(exc), 404)
    except ValidationError as exc:
        return error(str(exc))
    finally:
        db.close()
    return jsonify(job.to_dict()), 201


@employees_bp.route("/api/jobs/<job_id>", methods=["PUT"])
@login_required
def api_update_job(job_id):
    db = get_db()
    try:
        job = job_store.update_job(db, job_id, request_data(), get_current_user_id())
    except NotFoundError as exc:
        return error(str(exc), 404)
    except ValidationError as exc:
        return error(str(exc))
    finally:
        db.close()
    return jsonify(job.to_dict())


@employees_bp.route("/api/jobs/<job_id>", methods=["DELETE"])
@login_required
def api_delete_job(job_id):
    db = get_db()
    try:
        job_store.delete_job(db, job_id, get_current_user_id())
    except NotFoundError as exc:
        return error(str(exc), 404)
    finally:
        db.close()
    return jsonify({"status": "deleted", "id": job_id})


# ── Wash history ────────────────────────────────────────────


def _day_filter() -> int | None:
    """?dia=N with Sun=0..Sat=6; anything else means every day."""
    try:
        day = int(request.args.get("dia", ""))
    except ValueError:
        return None
    return day if 0 <= day <= 6 else None


def _history(day: int | None) -> list:
    db = get_db()
    try:
        return job_store.list_all_jobs(db, get_current_user_id(), day)
    finally:
        db.close()


@employees_bp.route("/lavagens")
@login_required
def jobs_page():
    day = _day_filter()
    try:
        jobs = _history(day)
    except ParseError:
        log.exception("Malformed date in stored wash jobs (dia=%s)", day)
        return render_template("error.html", message="Registro com data inválida no histórico"), 500
    return render_template(
        "jobs.html",
        jobs=[j.to_dict() for j in jobs],
        days=DAYS_OF_WEEK,
        day=day,
        brl=format_brl,
    )


@employees_bp.route("/api/jobs", methods=["GET"])
@login_required
def api_list_jobs():
    day = _day_filter()
    try:
        jobs = _history(day)
    except ParseError as exc:
        log.exception("Malformed date in stored wash jobs (dia=%s)", day)
        return error(str(exc), 500)
    return jsonify([j.to_dict() for j in jobs])
