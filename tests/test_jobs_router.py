from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

import gigboard.routers.jobs as jobs_mod
from gigboard.core.errors import DuplicateApplication, JobClosed, NotFound, NotOwner


def _job(job_id="j1", owner_id="user-1", **overrides):
    fields = dict(
        id=job_id,
        owner_id=owner_id,
        title="Stage crew",
        amount=700.0,
        location="Kothrud",
        latitude=None,
        longitude=None,
        job_date=date(2026, 3, 14),
        shift_start=None,
        shift_end=None,
        has_food=False,
        dress_code="Casual",
        status="OPEN",
        hired_applicant_id=None,
        created_at=datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc),
        owner=SimpleNamespace(display_name="Asha Rao"),
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def _application(app_id="a1", job_id="j1", applicant_id="user-1", status="PENDING"):
    return SimpleNamespace(
        id=app_id,
        job_id=job_id,
        applicant_id=applicant_id,
        status=status,
        normalized_status=status,
        created_at=None,
        applicant=SimpleNamespace(display_name="Bina Worker", username="bina", avatar_url=None),
    )


def test_create_job(monkeypatch, client):
    captured = {}

    def fake_post_job(db, owner_id, **fields):
        captured.update(owner_id=owner_id, **fields)
        return _job()

    monkeypatch.setattr(jobs_mod, "post_job", fake_post_job)
    resp = client.post("/jobs", json={"title": "Stage crew", "amount": 700, "job_date": "2026-03-14"})
    assert resp.status_code == 201
    assert captured["owner_id"] == "user-1"
    assert captured["job_date"] == date(2026, 3, 14)
    body = resp.json()
    assert body["status"] == "OPEN"
    assert body["job_date"] == "2026-03-14"


def test_create_job_requires_both_coordinates(client):
    resp = client.post("/jobs", json={"title": "x", "amount": 1, "latitude": 18.5})
    assert resp.status_code == 422


def test_create_job_rejects_negative_amount(client):
    resp = client.post("/jobs", json={"title": "x", "amount": -5})
    assert resp.status_code == 422


def test_my_jobs(monkeypatch, client):
    monkeypatch.setattr(jobs_mod, "get_for_owner", lambda db, owner_id, limit=200: [_job("j1"), _job("j2")])
    resp = client.get("/jobs/mine")
    assert [j["id"] for j in resp.json()] == ["j1", "j2"]


def test_job_detail_for_applicant_shows_my_application(monkeypatch, client):
    monkeypatch.setattr(jobs_mod, "get_job", lambda db, job_id: _job(owner_id="someone-else"))
    monkeypatch.setattr(
        jobs_mod, "my_application_for",
        lambda db, job_id, applicant_id: _application(status="ACCEPTED"),
    )
    body = client.get("/jobs/j1").json()
    assert body["is_owner"] is False
    assert body["my_application_id"] == "a1"
    assert body["my_application_status"] == "ACCEPTED"


def test_job_detail_for_owner(monkeypatch, client):
    monkeypatch.setattr(jobs_mod, "get_job", lambda db, job_id: _job())
    body = client.get("/jobs/j1").json()
    assert body["is_owner"] is True
    assert body["my_application_id"] is None


def test_job_detail_not_found(monkeypatch, client):
    def _missing(db, job_id):
        raise NotFound("Job not found")

    monkeypatch.setattr(jobs_mod, "get_job", _missing)
    resp = client.get("/jobs/nope")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Job not found"


def test_update_job_passes_only_set_fields(monkeypatch, client):
    captured = {}

    def fake_edit(db, job_id, actor_id, **fields):
        captured.update(fields)
        return _job(amount=900.0)

    monkeypatch.setattr(jobs_mod, "edit_job", fake_edit)
    resp = client.patch("/jobs/j1", json={"amount": 900})
    assert resp.status_code == 200
    assert captured == {"amount": 900}


@pytest.mark.parametrize("body", [{"title": None}, {"amount": None}, {"has_food": None}])
def test_update_job_rejects_clearing_required_fields(monkeypatch, client, body):
    calls = []
    monkeypatch.setattr(jobs_mod, "edit_job", lambda db, job_id, actor_id, **fields: calls.append(fields))
    assert client.patch("/jobs/j1", json=body).status_code == 422
    assert calls == []


@pytest.mark.parametrize("body", [{"latitude": 18.5}, {"longitude": 73.8}, {"latitude": 18.5, "longitude": None}])
def test_update_job_requires_coordinates_as_pair(monkeypatch, client, body):
    calls = []
    monkeypatch.setattr(jobs_mod, "edit_job", lambda db, job_id, actor_id, **fields: calls.append(fields))
    assert client.patch("/jobs/j1", json=body).status_code == 422
    assert calls == []


def test_update_job_moves_or_clears_coordinates_together(monkeypatch, client):
    captured = []

    def fake_edit(db, job_id, actor_id, **fields):
        captured.append(fields)
        return _job()

    monkeypatch.setattr(jobs_mod, "edit_job", fake_edit)
    assert client.patch("/jobs/j1", json={"latitude": 18.5, "longitude": 73.8}).status_code == 200
    assert client.patch("/jobs/j1", json={"latitude": None, "longitude": None}).status_code == 200
    assert captured == [
        {"latitude": 18.5, "longitude": 73.8},
        {"latitude": None, "longitude": None},
    ]


def test_update_filled_job_is_conflict(monkeypatch, client):
    def _closed(db, job_id, actor_id, **fields):
        raise JobClosed("A filled or closed job cannot be edited")

    monkeypatch.setattr(jobs_mod, "edit_job", _closed)
    assert client.patch("/jobs/j1", json={"amount": 1}).status_code == 409


def test_delete_job_not_owner_is_forbidden(monkeypatch, client):
    def _not_owner(db, job_id, actor_id):
        raise NotOwner("Only the job owner can do this")

    monkeypatch.setattr(jobs_mod, "delete_job", _not_owner)
    resp = client.delete("/jobs/j1")
    assert resp.status_code == 403
    assert resp.json()["error"] == "NotOwner"


def test_delete_job(monkeypatch, client):
    monkeypatch.setattr(jobs_mod, "delete_job", lambda db, job_id, actor_id: None)
    assert client.delete("/jobs/j1").json() == {"deleted": True}


def test_list_applicants(monkeypatch, client):
    monkeypatch.setattr(jobs_mod, "list_applicants", lambda db, job_id, actor_id: [_application(applicant_id="B")])
    body = client.get("/jobs/j1/applications").json()
    assert body[0]["applicant_name"] == "Bina Worker"
    assert body[0]["applicant_username"] == "bina"


def test_apply(monkeypatch, client):
    monkeypatch.setattr(jobs_mod.application_workflow, "apply", lambda db, job_id, applicant_id: _application())
    resp = client.post("/jobs/j1/apply")
    assert resp.status_code == 201
    assert resp.json()["status"] == "PENDING"


def test_apply_twice_is_conflict(monkeypatch, client):
    def _dup(db, job_id, applicant_id):
        raise DuplicateApplication("You have already applied to this job")

    monkeypatch.setattr(jobs_mod.application_workflow, "apply", _dup)
    resp = client.post("/jobs/j1/apply")
    assert resp.status_code == 409
    assert resp.json() == {"detail": "You have already applied to this job", "error": "DuplicateApplication"}
