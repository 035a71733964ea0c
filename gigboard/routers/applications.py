import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gigboard.core.rate_limiter import hire_guard
from gigboard.database import get_db
from gigboard.dependencies import get_current_profile
from gigboard.models.application import ApplicationStatus
from gigboard.models.profile import Profile
from gigboard.repos.application_repo import fetch_applications_for_applicant
from gigboard.routers.jobs import application_to_out
from gigboard.schemas.application import ApplicationOut, HireResponse, MyApplicationOut
from gigboard.services import application_workflow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/applications", tags=["applications"])


def _my_application_to_out(app) -> MyApplicationOut:
    job = app.job
    employer = job.owner if job else None
    hired = app.normalized_status == ApplicationStatus.ACCEPTED
    return MyApplicationOut(
        **application_to_out(app).model_dump(),
        job_title=job.title if job else None,
        job_amount=float(job.amount) if job and job.amount is not None else None,
        employer_name=employer.display_name if employer else None,
        employer_phone=employer.phone if (employer and hired) else None,
    )


@router.get("/mine", response_model=list[MyApplicationOut])
def get_my_applications(
    limit: int = 200,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Applications the viewer submitted. Employer phone is shown only once hired."""
    apps = fetch_applications_for_applicant(db, profile.id, limit=limit)
    return [_my_application_to_out(a) for a in apps]


@router.post("/{application_id}/hire", response_model=HireResponse)
def hire_applicant(
    application_id: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """
    Hire the applicant: accept, reject the other pending applicants, close the job.
    Retrying after a 502 finishes the remaining steps. One hire per job runs at a time.
    """
    job_id = application_workflow.job_id_for_application(db, application_id)
    guard_key = f"hire:job:{job_id}" if job_id else f"hire:application:{application_id}"
    with hire_guard.hold(guard_key) as acquired:
        if not acquired:
            logger.info("Hire already in flight: key=%s application=%s actor=%s", guard_key, application_id, profile.id)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A hire for this job is already in progress",
            )
        result = application_workflow.hire(db, application_id, profile.id)
    return HireResponse(
        application_id=result.application_id,
        job_id=result.job_id,
        applicant_id=result.applicant_id,
        applied_steps=result.applied_steps,
        rejected_count=result.rejected_count,
        already_hired=result.was_noop,
    )


@router.post("/{application_id}/reject", response_model=ApplicationOut)
def reject_applicant(
    application_id: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    application = application_workflow.reject(db, application_id, profile.id)
    return application_to_out(application)


@router.delete("/{application_id}")
def withdraw_application(
    application_id: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    application_workflow.withdraw(db, application_id, profile.id)
    return {"withdrawn": True}
