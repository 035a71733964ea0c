from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, aliased, joinedload

from gigboard.core.security import generate_id
from gigboard.models.application import Application, ApplicationStatus
from gigboard.models.job import Job, JobStatus


def get_by_id(db: Session, application_id: str) -> Application | None:
    return db.query(Application).filter(Application.id == application_id).first()


def get_existing(db: Session, job_id: str, applicant_id: str) -> Application | None:
    return (
        db.query(Application)
        .filter(
            Application.job_id == job_id,
            Application.applicant_id == applicant_id,
        )
        .first()
    )


def fetch_applications_for_applicant(db: Session, user_id: str, limit: int = 200) -> list[Application]:
    """Applicant's own applications with job and employer loaded, newest first."""
    return (
        db.query(Application)
        .options(joinedload(Application.job).joinedload(Job.owner))
        .filter(Application.applicant_id == user_id)
        .order_by(Application.created_at.desc(), Application.id)
        .limit(limit)
        .all()
    )


def fetch_applications_for_job(db: Session, job_id: str) -> list[Application]:
    """All applications for a job with applicant profiles, oldest first."""
    return (
        db.query(Application)
        .options(joinedload(Application.applicant))
        .filter(Application.job_id == job_id)
        .order_by(Application.created_at.asc(), Application.id)
        .all()
    )


def create_application(db: Session, job_id: str, applicant_id: str) -> Application:
    application = Application(
        id=generate_id(),
        job_id=job_id,
        applicant_id=applicant_id,
        status=ApplicationStatus.PENDING,
        created_at=datetime.now(timezone.utc),
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


def update_application_status(db: Session, application_id: str, status: str) -> Application | None:
    application = get_by_id(db, application_id)
    if not application:
        return None
    application.status = status
    db.commit()
    db.refresh(application)
    return application


def accept_if_unclaimed(db: Session, application_id: str, job_id: str) -> int:
    """
    Move a PENDING application to ACCEPTED in one statement, only while its job
    is OPEN and no sibling is already ACCEPTED. Returns rows changed (0 or 1).
    """
    sibling = aliased(Application)
    sibling_hired = (
        select(sibling.id)
        .where(
            sibling.job_id == job_id,
            sibling.id != application_id,
            func.upper(func.trim(sibling.status)).in_(ApplicationStatus.ACCEPTED_SPELLINGS),
        )
        .exists()
    )
    job_open = select(Job.id).where(Job.id == job_id, Job.status == JobStatus.OPEN).exists()
    stmt = (
        update(Application)
        .where(
            Application.id == application_id,
            Application.job_id == job_id,
            func.upper(func.trim(Application.status)) == ApplicationStatus.PENDING,
            job_open,
            ~sibling_hired,
        )
        .values(status=ApplicationStatus.ACCEPTED)
        .execution_options(synchronize_session=False)
    )
    count = db.execute(stmt).rowcount
    db.commit()
    db.expire_all()
    return count


def reject_pending_siblings(db: Session, job_id: str, keep_id: str) -> int:
    """Move every other PENDING application of a job to REJECTED. Returns rows changed."""
    count = (
        db.query(Application)
        .filter(
            Application.job_id == job_id,
            Application.id != keep_id,
            Application.status == ApplicationStatus.PENDING,
        )
        .update({Application.status: ApplicationStatus.REJECTED}, synchronize_session="fetch")
    )
    db.commit()
    return count


def delete_application(db: Session, application_id: str) -> bool:
    application = get_by_id(db, application_id)
    if not application:
        return False
    db.delete(application)
    db.commit()
    return True
