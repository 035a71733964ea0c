import pytest
from fastapi.testclient import TestClient

import gigboard.main as main_mod
import gigboard.routers.jobs as jobs_mod
from gigboard.core.errors import InvalidEvent, WorkflowError
from gigboard.services.notifications import inbox_for


class _ConnOK:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, _query):
        return 1


class _EngineOK:
    def connect(self):
        return _ConnOK()


class _EngineFail:
    def connect(self):
        raise RuntimeError("db down")


def test_health_live(client):
    resp = client.get("/health/live")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_health_ready_ok(monkeypatch, client):
    monkeypatch.setattr(main_mod, "engine", _EngineOK())
    resp = client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ready"


def test_health_ready_not_ready(monkeypatch, client):
    monkeypatch.setattr(main_mod, "engine", _EngineFail())
    resp = client.get("/health/ready")
    assert resp.status_code == 503
    assert resp.json()["status"] == "not_ready"


def test_root_route(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "GigBoard API" in resp.json()["message"]


@pytest.mark.parametrize(
    "exc_name, code",
    [
        ("NotFound", 404),
        ("NotOwner", 403),
        ("DuplicateApplication", 409),
        ("InvalidApplicant", 409),
        ("JobClosed", 409),
        ("AlreadyDecided", 409),
        ("ValidationError", 400),
        ("TransientIOError", 503),
    ],
)
def test_workflow_error_status_mapping(exc_name, code):
    import gigboard.core.errors as errors

    assert main_mod._status_for(getattr(errors, exc_name)("x")) == code


def test_invalid_event_maps_to_400():
    assert main_mod._status_for(InvalidEvent("bad event")) == 400
    assert main_mod._status_for(WorkflowError("generic")) == 400


def test_unhandled_error_is_generic_500(monkeypatch, stub_profile):
    def _boom(db, job_id):
        raise RuntimeError("secret internals")

    from gigboard.database import get_db
    from gigboard.dependencies import get_current_profile

    main_mod.app.dependency_overrides[get_db] = lambda: object()
    main_mod.app.dependency_overrides[get_current_profile] = lambda: stub_profile
    monkeypatch.setattr(jobs_mod, "get_job", _boom)
    try:
        resp = TestClient(main_mod.app, raise_server_exceptions=False).get("/jobs/j1")
    finally:
        main_mod.app.dependency_overrides.clear()
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}


def test_startup_production_placeholder_secret_raises(monkeypatch):
    monkeypatch.setattr(main_mod.settings, "app_env", "production")
    monkeypatch.setattr(main_mod.settings, "secret_key", "replace-with-a-long-random-secret-key")
    with pytest.raises(RuntimeError):
        main_mod.on_startup()


def test_startup_nonprod_calls_init_db(monkeypatch):
    monkeypatch.setattr(main_mod.settings, "app_env", "development")
    monkeypatch.setattr(main_mod.settings, "secret_key", "dev-key")
    called = {"ok": False}
    monkeypatch.setattr(main_mod, "init_db", lambda: called.update(ok=True))
    main_mod.on_startup()
    assert called["ok"] is True


def test_shutdown_closes_notification_inboxes():
    inbox = inbox_for("user-9")
    assert inbox.active
    main_mod.on_shutdown()
    assert not inbox.active
