from types import SimpleNamespace

import pytest

import gigboard.routers.applications as apps_mod
from gigboard.core.errors import AlreadyDecided, NotOwner, PartialFailure, TransientIOError
from gigboard.core.rate_limiter import hire_guard
from gigboard.services.application_workflow import (
    STEP_ACCEPT,
    STEP_CLOSE_JOB,
    STEP_REJECT_SIBLINGS,
    HireResult,
)


@pytest.fixture(autouse=True)
def _applications_belong_to_j1(monkeypatch):
    monkeypatch.setattr(
        apps_mod.application_workflow, "job_id_for_application",
        lambda db, application_id: None if application_id == "missing" else "j1",
    )


def _my_application(status="PENDING"):
    employer = SimpleNamespace(display_name="Anil Owner", phone="+91 90000 00001")
    job = SimpleNamespace(title="Catering help", amount=500, owner=employer)
    return SimpleNamespace(
        id="a1",
        job_id="j1",
        applicant_id="user-1",
        status=status,
        normalized_status=status,
        created_at=None,
        job=job,
    )


def test_my_applications_hide_phone_until_hired(monkeypatch, client):
    monkeypatch.setattr(
        apps_mod, "fetch_applications_for_applicant",
        lambda db, user_id, limit=200: [_my_application("PENDING"), _my_application("ACCEPTED")],
    )
    body = client.get("/applications/mine").json()
    assert body[0]["employer_phone"] is None
    assert body[1]["employer_phone"] == "+91 90000 00001"
    assert body[1]["job_title"] == "Catering help"


def test_my_applications_with_deleted_job(monkeypatch, client):
    app = _my_application()
    app.job = None
    monkeypatch.setattr(apps_mod, "fetch_applications_for_applicant", lambda db, user_id, limit=200: [app])
    body = client.get("/applications/mine").json()
    assert body[0]["job_title"] is None
    assert body[0]["employer_name"] is None


def test_hire_success(monkeypatch, client):
    result = HireResult(
        application_id="a1", job_id="j1", applicant_id="B",
        applied_steps=[STEP_ACCEPT, STEP_REJECT_SIBLINGS, STEP_CLOSE_JOB], rejected_count=2,
    )
    monkeypatch.setattr(apps_mod.application_workflow, "hire", lambda db, application_id, actor_id: result)
    resp = client.post("/applications/a1/hire")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ACCEPTED"
    assert body["rejected_count"] == 2
    assert body["already_hired"] is False
    assert not hire_guard.is_held("hire:job:j1")


def test_hire_retry_reports_already_hired(monkeypatch, client):
    result = HireResult(application_id="a1", job_id="j1", applicant_id="B")
    monkeypatch.setattr(apps_mod.application_workflow, "hire", lambda db, application_id, actor_id: result)
    assert client.post("/applications/a1/hire").json()["already_hired"] is True


def test_hire_while_in_flight_is_conflict(monkeypatch, client):
    calls = []
    monkeypatch.setattr(apps_mod.application_workflow, "hire", lambda *args: calls.append(args))
    assert hire_guard.acquire("hire:job:j1")
    try:
        resp = client.post("/applications/a1/hire")
    finally:
        hire_guard.release("hire:job:j1")
    assert resp.status_code == 409
    assert "already in progress" in resp.json()["detail"]
    assert calls == []


def test_hire_of_sibling_application_waits_for_same_job(monkeypatch, client):
    calls = []
    monkeypatch.setattr(apps_mod.application_workflow, "hire", lambda *args: calls.append(args))
    with hire_guard.hold("hire:job:j1") as acquired:
        assert acquired
        resp = client.post("/applications/a2/hire")
    assert resp.status_code == 409
    assert calls == []
    assert not hire_guard.is_held("hire:job:j1")


def test_hire_partial_failure_is_502_with_steps(monkeypatch, client):
    def _partial(db, application_id, actor_id):
        raise PartialFailure("Applicant accepted but the job is still open", [STEP_ACCEPT, STEP_REJECT_SIBLINGS], STEP_CLOSE_JOB)

    monkeypatch.setattr(apps_mod.application_workflow, "hire", _partial)
    resp = client.post("/applications/a1/hire")
    assert resp.status_code == 502
    assert resp.json() == {
        "detail": "Applicant accepted but the job is still open",
        "completed_steps": [STEP_ACCEPT, STEP_REJECT_SIBLINGS],
        "failed_step": STEP_CLOSE_JOB,
        "retryable": True,
    }
    assert not hire_guard.is_held("hire:job:j1")


def test_hire_not_owner_is_forbidden(monkeypatch, client):
    def _not_owner(db, application_id, actor_id):
        raise NotOwner("Only the job owner can hire")

    monkeypatch.setattr(apps_mod.application_workflow, "hire", _not_owner)
    assert client.post("/applications/a1/hire").status_code == 403


def test_hire_store_down_is_503(monkeypatch, client):
    def _down(db, application_id, actor_id):
        raise TransientIOError("Could not accept the application")

    monkeypatch.setattr(apps_mod.application_workflow, "hire", _down)
    assert client.post("/applications/a1/hire").status_code == 503


def test_reject(monkeypatch, client):
    monkeypatch.setattr(
        apps_mod.application_workflow, "reject",
        lambda db, application_id, actor_id: _my_application("REJECTED"),
    )
    resp = client.post("/applications/a1/reject")
    assert resp.status_code == 200
    assert resp.json()["status"] == "REJECTED"


def test_withdraw(monkeypatch, client):
    monkeypatch.setattr(apps_mod.application_workflow, "withdraw", lambda db, application_id, actor_id: None)
    assert client.delete("/applications/a1").json() == {"withdrawn": True}


def test_withdraw_decided_is_conflict(monkeypatch, client):
    def _decided(db, application_id, actor_id):
        raise AlreadyDecided("A decided application cannot be withdrawn")

    monkeypatch.setattr(apps_mod.application_workflow, "withdraw", _decided)
    assert client.delete("/applications/a1").status_code == 409
