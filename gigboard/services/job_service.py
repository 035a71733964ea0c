import logging

from sqlalchemy.orm import Session

from gigboard.core.errors import JobClosed, NotFound, NotOwner
from gigboard.models.application import Application
from gigboard.models.job import Job, JobStatus
from gigboard.repos import application_repo, job_repo

logger = logging.getLogger(__name__)


def get_job(db: Session, job_id: str) -> Job:
    job = job_repo.get_by_id(db, job_id)
    if not job:
        raise NotFound("Job not found")
    return job


def _owned_job(db: Session, job_id: str, actor_id: str) -> Job:
    job = get_job(db, job_id)
    if job.owner_id != actor_id:
        raise NotOwner("Only the job owner can do this")
    return job


def post_job(db: Session, owner_id: str, **fields) -> Job:
    job = job_repo.create(db, owner_id, **fields)
    logger.info(
        "Job posted: id=%s owner=%s coords=%s",
        job.id, owner_id, "yes" if job.has_coordinates else "no",
    )
    return job


def edit_job(db: Session, job_id: str, actor_id: str, **fields) -> Job:
    """Owner edit of an OPEN job. Status is only changed by the hiring workflow."""
    job = _owned_job(db, job_id, actor_id)
    if job.status != JobStatus.OPEN:
        raise JobClosed("A filled or closed job cannot be edited")
    return job_repo.update(db, job_id, **fields)


def delete_job(db: Session, job_id: str, actor_id: str) -> None:
    _owned_job(db, job_id, actor_id)
    job_repo.delete_job(db, job_id)
    logger.info("Job deleted by owner: id=%s owner=%s", job_id, actor_id)


def list_applicants(db: Session, job_id: str, actor_id: str) -> list[Application]:
    _owned_job(db, job_id, actor_id)
    return application_repo.fetch_applications_for_job(db, job_id)


def my_application_for(db: Session, job_id: str, applicant_id: str) -> Application | None:
    return application_repo.get_existing(db, job_id, applicant_id)
