"""
LavaJato Gestão — Flask application entry point.

Run with:
    python src/app.py
"""

import logging
import sys
from pathlib import Path

# Allow imports from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv

load_dotenv()

from datetime import datetime, timedelta

from flask import Flask, session

from config.settings import (
    APP_DEBUG,
    APP_HOST,
    APP_PORT,
    BUSINESS_DISPLAY_NAME,
    LOG_LEVEL,
    SECRET_KEY,
    SESSION_LIFETIME_DAYS,
    TEMPLATE_PATH,
)
from src.api.auth import auth_bp
from src.api.dashboard import dashboard_bp
from src.api.employees import employees_bp
from src.api.expenses import expenses_bp
from src.api.public import public_bp
from src.api.reports import reports_bp
from src.database.connection import get_db
from src.database.migrations import apply_migrations

log = logging.getLogger(__name__)


def create_app() -> Flask:
    app = Flask(__name__, template_folder=TEMPLATE_PATH)
    app.secret_key = SECRET_KEY
    app.permanent_session_lifetime = timedelta(days=SESSION_LIFETIME_DAYS)

    # Week resolution reads the clock from here; tests pin it
    app.config["CLOCK"] = datetime.now

    db = get_db()
    try:
        applied = apply_migrations(db)
    finally:
        db.close()
    if applied:
        log.info("Applied migrations: %s", ", ".join(applied))

    @app.context_processor
    def inject_globals():
        user = session.get("user")
        return {
            "current_user": user,
            "business_name": (user or {}).get("business_name") or BUSINESS_DISPLAY_NAME,
        }

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(employees_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(public_bp)
    app.register_blueprint(reports_bp)

    @app.route("/health")
    def health():
        return {"status": "ok", "service": "lavajato"}

    @app.route("/health/db")
    def health_db():
        try:
            db = get_db()
            try:
                db.execute("SELECT 1").fetchone()
            finally:
                db.close()
        except Exception:
            log.exception("Database health check failed")
            return {"ok": False, "error": "db-connection-failed"}, 500
        return {"ok": True, "db": "sqlite"}

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    app.run(host=APP_HOST, port=APP_PORT, debug=APP_DEBUG)
