import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gigboard.database import get_db
from gigboard.dependencies import get_current_profile
from gigboard.models.profile import Profile
from gigboard.repos.job_repo import get_for_owner
from gigboard.schemas.application import ApplicantOut, ApplicationOut
from gigboard.schemas.job import JobCreate, JobDetailOut, JobOut, JobUpdate
from gigboard.services import application_workflow
from gigboard.services.job_service import (
    delete_job,
    edit_job,
    get_job,
    list_applicants,
    my_application_for,
    post_job,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/jobs", tags=["jobs"])


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def job_to_out(job) -> JobOut:
    return JobOut(
        id=str(job.id),
        owner_id=job.owner_id,
        title=job.title or "Untitled",
        amount=float(job.amount or 0),
        location=job.location,
        latitude=job.latitude,
        longitude=job.longitude,
        job_date=_iso(job.job_date),
        shift_start=job.shift_start,
        shift_end=job.shift_end,
        has_food=bool(job.has_food),
        dress_code=job.dress_code,
        status=job.status,
        hired_applicant_id=job.hired_applicant_id,
        created_at=_iso(job.created_at),
    )


def application_to_out(app) -> ApplicationOut:
    return ApplicationOut(
        id=app.id,
        job_id=app.job_id,
        applicant_id=app.applicant_id,
        status=app.normalized_status,
        created_at=_iso(app.created_at),
    )


def _applicant_to_out(app) -> ApplicantOut:
    applicant = app.applicant
    return ApplicantOut(
        **application_to_out(app).model_dump(),
        applicant_name=applicant.display_name if applicant else "User",
        applicant_username=applicant.username if applicant else None,
        applicant_avatar_url=applicant.avatar_url if applicant else None,
    )


@router.post("", response_model=JobOut, status_code=status.HTTP_201_CREATED)
def create_job(
    body: JobCreate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Post a new OPEN job. Coordinates come from the client's geocoder and may be omitted."""
    job = post_job(db, profile.id, **body.model_dump())
    return job_to_out(job)


@router.get("/mine", response_model=list[JobOut])
def get_my_jobs(
    limit: int = 200,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    return [job_to_out(j) for j in get_for_owner(db, profile.id, limit=limit)]


@router.get("/{job_id}", response_model=JobDetailOut)
def get_job_detail(
    job_id: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Job info plus, for non-owners, whether the viewer already applied."""
    job = get_job(db, job_id)
    is_owner = job.owner_id == profile.id
    mine = None if is_owner else my_application_for(db, job_id, profile.id)
    return JobDetailOut(
        job=job_to_out(job),
        is_owner=is_owner,
        owner_name=job.owner.display_name if job.owner else None,
        my_application_id=mine.id if mine else None,
        my_application_status=mine.normalized_status if mine else None,
    )


@router.patch("/{job_id}", response_model=JobOut)
def update_job(
    job_id: str,
    body: JobUpdate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    job = edit_job(db, job_id, profile.id, **body.model_dump(exclude_unset=True))
    return job_to_out(job)


@router.delete("/{job_id}")
def remove_job(
    job_id: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Delete own job; its applications go with it."""
    delete_job(db, job_id, profile.id)
    return {"deleted": True}


@router.get("/{job_id}/applications", response_model=list[ApplicantOut])
def get_job_applicants(
    job_id: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    return [_applicant_to_out(a) for a in list_applicants(db, job_id, profile.id)]


@router.post("/{job_id}/apply", response_model=ApplicationOut, status_code=status.HTTP_201_CREATED)
def apply_to_job(
    job_id: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    application = application_workflow.apply(db, job_id, profile.id)
    return application_to_out(application)
