"""
Public self-service pages for employees (no login).

Employees open their own page from a shared link, see this week's
washes and commission, and log new washes themselves.

Routes:
    GET  /funcionarios/publico[?negocio=<slug>]   — pick your name
    GET  /funcionario/publico/<id>?semana=N       — your week
    POST /funcionario/publico/<id>                — log a wash
"""

import logging

from flask import Blueprint, redirect, render_template, request, url_for

from src.api.helpers import now, week_offset
from src.database.connection import get_db
from src.services import employees as employee_store
from src.services import wash_jobs as job_store
from src.services.errors import NotFoundError, ValidationError
from src.services.report_generator import employee_commission
from src.services.report_renderer import format_brl
from src.services.users import get_user_by_slug
from src.services.week import resolve_week

log = logging.getLogger(__name__)

public_bp = Blueprint("public", __name__)

# Portuguese form field -> stored field
FORM_FIELDS = {
    "descricao": "description",
    "preco": "price",
    "data_lavagem": "performed_on",
    "forma_pagamento": "payment_method",
}


def _active_employee(db, employee_id: str):
    """The employee if they exist and are active, else None."""
    try:
        employee = employee_store.get_employee(db, employee_id)
    except NotFoundError:
        return None
    return employee if employee.is_active else None


def _job_form() -> dict:
    data = {}
    for pt_name, field in FORM_FIELDS.items():
        value = request.form.get(pt_name)
        if value is None:
            value = request.form.get(field)
        if value is not None:
            data[field] = value
    return data


def _render_employee(db, employee, offset: int, status: int = 200, **extra):
    window = resolve_week(offset, now())
    jobs = job_store.list_jobs_for_employee(db, employee.id, window)
    return render_template(
        "public_employee.html",
        employee=employee.to_dict(),
        jobs=[j.to_dict() for j in jobs],
        commission=employee_commission(jobs, employee).to_dict(),
        week=window.to_dict(),
        offset=offset,
        today=now().date().isoformat(),
        success=request.args.get("sucesso") == "1",
        brl=format_brl,
        **extra,
    ), status


@public_bp.route("/funcionarios/publico")
def public_index():
    slug = request.args.get("negocio")
    db = get_db()
    try:
        business = None
        user_id = None
        if slug:
            try:
                business = get_user_by_slug(db, slug)
            except NotFoundError:
                return render_template("error.html", message="Negócio não encontrado"), 404
            user_id = business["id"]
        staff = employee_store.list_employees(db, user_id, active_only=True)
    finally:
        db.close()
    return render_template(
        "public_index.html",
        employees=[e.to_dict() for e in staff],
        business=business,
    )


@public_bp.route("/funcionario/publico/<employee_id>", methods=["GET"])
def public_employee(employee_id):
    db = get_db()
    try:
        employee = _active_employee(db, employee_id)
        if employee is None:
            return render_template("error.html", message="Funcionário não encontrado"), 404
        return _render_employee(db, employee, week_offset())
    finally:
        db.close()


@public_bp.route("/funcionario/publico/<employee_id>", methods=["POST"])
def public_log_job(employee_id):
    offset = week_offset()
    db = get_db()
    try:
        employee = _active_employee(db, employee_id)
        if employee is None:
            return render_template("error.html", message="Funcionário não encontrado"), 404

        try:
            job = job_store.create_job(db, employee.id, _job_form())
        except ValidationError as exc:
            log.warning("Public job rejected for employee %s: %s", employee_id, exc)
            return _render_employee(db, employee, offset, status=400, error=str(exc))
    finally:
        db.close()

    log.info("Public job %s logged by employee %s", job.id, employee_id)
    params = {"sucesso": 1}
    if offset:
        params["semana"] = offset
    return redirect(url_for("public.public_employee", employee_id=employee_id, **params))
