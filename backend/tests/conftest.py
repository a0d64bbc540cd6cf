from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from xpenso.api.deps import get_db, get_now
from xpenso.core.config import Settings
from xpenso.main import create_app

FIXED_NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite:///:memory:",
        jwt_secret="test-secret",
        stats_time_zone="UTC",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.dependency_overrides[get_now] = lambda: FIXED_NOW
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(client):
    """Register (if needed) and log in; returns bearer headers for that user."""

    def _login(email: str = "alice@example.com", password: str = "secret") -> dict[str, str]:
        client.post("/api/users", json={"email": email, "password": password, "name": email.split("@")[0]})
        resp = client.post("/api/jwt", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login


@pytest.fixture
def storage_fault(app):
    """Make one Session method fail for requests whose statement targets ``entity``.

    Other calls go to the real in-memory database, so authentication keeps working.
    """

    def _install(method: str, entity=None, error: Exception | None = None, result=...):
        database = app.state.database

        def _get_db():
            db = database.session()
            real = getattr(db, method)

            def _call(statement=None, *args, **kwargs):
                descriptions = getattr(statement, "column_descriptions", None) or [{}]
                target = descriptions[0].get("entity")
                if entity is None or target is entity:
                    if result is not ...:
                        return result
                    raise error or OperationalError("SELECT", {}, Exception("database is gone"))
                return real(statement, *args, **kwargs)

            setattr(db, method, _call)
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = _get_db

    yield _install
    app.dependency_overrides.pop(get_db, None)
