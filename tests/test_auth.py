"""
Tests for account registration, login and route protection.

Covers:
- Unauthenticated requests redirect to /login with next
- Registration (slug assignment, duplicate email, short password)
- Login success and failure
- Logout
"""

import os
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

TEST_DB = "/tmp/test_lavajato_auth.db"
os.environ["DATABASE_PATH"] = TEST_DB

import pytest

from src.app import create_app
from src.database.connection import get_db
from src.services.errors import ValidationError
from src.services.slugs import slugify, unique_slug
from src.services.users import create_user, get_user_by_slug, verify_login


def setup_test_db():
    os.environ["DATABASE_PATH"] = TEST_DB
    for suffix in ("", "-wal", "-shm"):
        path = Path(TEST_DB + suffix)
        if path.exists():
            path.unlink()


def get_test_client():
    app = create_app()
    app.config["TESTING"] = True
    app.config["CLOCK"] = lambda: datetime(2024, 3, 13, 10, 0)
    return app.test_client()


def register(client, email="dono@lavajato.com", password="segredo1", name="Ana", business_name="Lava Jato Central"):
    return client.post("/registro", data={
        "email": email,
        "password": password,
        "name": name,
        "business_name": business_name,
    })


# ── Route protection ─────────────────────────────────────


def test_dashboard_requires_login():
    setup_test_db()
    client = get_test_client()
    resp = client.get("/dashboard")
    assert resp.status_code == 302
    assert "/login" in resp.headers["Location"]
    assert "next=" in resp.headers["Location"]


def test_api_requires_login():
    setup_test_db()
    client = get_test_client()
    for url in ("/api/employees", "/api/expenses", "/api/dashboard/summary", "/reports/weekly/data"):
        resp = client.get(url)
        assert resp.status_code == 302, url


def test_login_page_renders():
    setup_test_db()
    client = get_test_client()
    resp = client.get("/login")
    assert resp.status_code == 200
    assert b"Entrar" in resp.data


def test_public_pages_need_no_login():
    setup_test_db()
    client = get_test_client()
    resp = client.get("/funcionarios/publico")
    assert resp.status_code == 200


# ── Registration ─────────────────────────────────────────


def test_register_signs_in_and_redirects():
    setup_test_db()
    client = get_test_client()
    resp = register(client)
    assert resp.status_code == 302
    assert "/dashboard" in resp.headers["Location"]

    with client.session_transaction() as sess:
        assert sess["user"]["email"] == "dono@lavajato.com"
        assert sess["user"]["slug"] == "lava-jato-central"


def test_register_duplicate_email():
    setup_test_db()
    client = get_test_client()
    register(client)
    client.get("/logout")
    resp = register(client, name="Outra Pessoa")
    assert resp.status_code == 400
    assert b"already registered" in resp.data


def test_register_short_password():
    setup_test_db()
    client = get_test_client()
    resp = register(client, password="123")
    assert resp.status_code == 400


def test_slug_collision_gets_suffix():
    setup_test_db()
    get_test_client()
    db = get_db()
    try:
        first = create_user(db, "a@x.com", "segredo1", "Ana", "Lava Jato São João")
        second = create_user(db, "b@x.com", "segredo1", "Bia", "Lava Jato Sao Joao")
        assert first["slug"] == "lava-jato-sao-joao"
        assert second["slug"] == "lava-jato-sao-joao-2"
        assert get_user_by_slug(db, "lava-jato-sao-joao-2")["email"] == "b@x.com"
    finally:
        db.close()


def test_slug_race_not_reported_as_duplicate_email(monkeypatch):
    setup_test_db()
    get_test_client()
    db = get_db()
    try:
        create_user(db, "a@x.com", "segredo1", "Ana", "Brilho Total")
        # Another registration claimed the slug between the lookup and the insert
        monkeypatch.setattr("src.services.users.unique_slug", lambda base, taken: "brilho-total")
        with pytest.raises(ValidationError) as excinfo:
            create_user(db, "b@x.com", "segredo1", "Bia", "Brilho Total")
        assert "already registered" not in str(excinfo.value)
        assert "Business name" in str(excinfo.value)
        assert verify_login(db, "b@x.com", "segredo1") is None
    finally:
        db.close()


def test_email_is_case_insensitive():
    setup_test_db()
    get_test_client()
    db = get_db()
    try:
        create_user(db, "Dono@LavaJato.com", "segredo1", "Ana")
        assert verify_login(db, "dono@lavajato.com", "segredo1") is not None
        with pytest.raises(ValidationError):
            create_user(db, "DONO@lavajato.com", "segredo1", "Ana")
    finally:
        db.close()


def test_slugify():
    assert slugify("Lava Jato São João") == "lava-jato-sao-joao"
    assert slugify("  Brilho!!  Total ") == "brilho-total"
    assert slugify("") == "meu-negocio"
    assert slugify(None) == "meu-negocio"


def test_unique_slug_records_taken():
    taken = {"brilho"}
    assert unique_slug("Brilho", taken) == "brilho-2"
    assert unique_slug("Brilho", taken) == "brilho-3"
    assert "brilho-3" in taken


# ── Login / logout ───────────────────────────────────────


def test_login_success():
    setup_test_db()
    client = get_test_client()
    register(client)
    client.get("/logout")

    resp = client.post("/login", data={"email": "dono@lavajato.com", "password": "segredo1"})
    assert resp.status_code == 302
    assert "/dashboard" in resp.headers["Location"]


def test_login_follows_local_next():
    setup_test_db()
    client = get_test_client()
    register(client)
    client.get("/logout")

    resp = client.post("/login", data={
        "email": "dono@lavajato.com", "password": "segredo1", "next": "/despesas?semana=1",
    })
    assert resp.headers["Location"].endswith("/despesas?semana=1")


def test_login_ignores_external_next():
    setup_test_db()
    client = get_test_client()
    register(client)
    client.get("/logout")

    resp = client.post("/login", data={
        "email": "dono@lavajato.com", "password": "segredo1", "next": "//evil.example.com/",
    })
    assert "evil" not in resp.headers["Location"]


def test_login_wrong_password():
    setup_test_db()
    client = get_test_client()
    register(client)
    client.get("/logout")

    resp = client.post("/login", data={"email": "dono@lavajato.com", "password": "errada"})
    assert resp.status_code == 401
    assert "Email ou senha inválidos" in resp.get_data(as_text=True)


def test_logout_clears_session():
    setup_test_db()
    client = get_test_client()
    register(client)
    resp = client.get("/logout")
    assert resp.status_code == 302
    with client.session_transaction() as sess:
        assert "user" not in sess
    assert client.get("/dashboard").status_code == 302


def test_health():
    setup_test_db()
    client = get_test_client()
    resp = client.get("/health")
    assert resp.get_json() == {"status": "ok", "service": "lavajato"}
    resp = client.get("/health/db")
    assert resp.status_code == 200
    assert resp.get_json()["ok"] is True
