"""
Application lifecycle: apply, hire, reject, withdraw.

Every call takes the acting profile id explicitly. Guard violations are raised
before anything is written.

Hire runs three steps in a fixed order, each committed on its own:

    accept_application -> reject_siblings -> close_job

The store gives no multi-statement atomicity, so every step is idempotent and
``hire`` on an application that is already ACCEPTED resumes whatever is left
(or does nothing). A failure after the first step raises PartialFailure with
the completed steps, and calling ``hire`` again finishes the job.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from gigboard.core.errors import (
    AlreadyDecided,
    DuplicateApplication,
    InvalidApplicant,
    JobClosed,
    NotFound,
    NotOwner,
    PartialFailure,
    TransientIOError,
)
from gigboard.models.application import Application, ApplicationStatus
from gigboard.models.job import Job, JobStatus
from gigboard.repos import application_repo, job_repo, profile_repo
from gigboard.services.events import ApplicationAccepted, ApplicationSubmitted
from gigboard.services.realtime import EventHub, hub as default_hub

logger = logging.getLogger(__name__)

STEP_ACCEPT = "accept_application"
STEP_REJECT_SIBLINGS = "reject_siblings"
STEP_CLOSE_JOB = "close_job"
HIRE_STEPS = (STEP_ACCEPT, STEP_REJECT_SIBLINGS, STEP_CLOSE_JOB)


@dataclass
class HireResult:
    application_id: str
    job_id: str
    applicant_id: str
    applied_steps: list[str] = field(default_factory=list)
    rejected_count: int = 0

    @property
    def was_noop(self) -> bool:
        """True when the hire had already been fully applied."""
        return not self.applied_steps


@contextmanager
def _store_reads(db: Session, what: str):
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Store unavailable during %s: %s", what, e)
        raise TransientIOError(f"Store unavailable during {what}") from e


def _load_application_and_job(db: Session, application_id: str) -> tuple[Application, Job]:
    with _store_reads(db, "application lookup"):
        application = application_repo.get_by_id(db, application_id)
        job = job_repo.get_by_id(db, application.job_id) if application else None
    if application is None:
        raise NotFound("Application not found")
    if job is None:
        raise NotFound("Job not found")
    return application, job


def job_id_for_application(db: Session, application_id: str) -> str | None:
    """Job an application belongs to; hires are serialized per job."""
    with _store_reads(db, "application lookup"):
        application = application_repo.get_by_id(db, application_id)
    return application.job_id if application else None


def apply(db: Session, job_id: str, applicant_id: str, hub: EventHub | None = None) -> Application:
    """Create a PENDING application for ``applicant_id`` on ``job_id``."""
    with _store_reads(db, "apply lookup"):
        job = job_repo.get_by_id(db, job_id)
        existing = application_repo.get_existing(db, job_id, applicant_id) if job else None
    if job is None:
        raise NotFound("Job not found")
    if job.owner_id == applicant_id:
        raise InvalidApplicant("You cannot apply to your own job")
    if existing is not None:
        raise DuplicateApplication("You have already applied to this job")
    if job.status != JobStatus.OPEN:
        raise JobClosed("This job is no longer accepting applications")

    try:
        application = application_repo.create_application(db, job_id, applicant_id)
    except IntegrityError as e:
        # Lost a race with a concurrent apply for the same pair.
        db.rollback()
        raise DuplicateApplication("You have already applied to this job") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Apply failed job=%s applicant=%s: %s", job_id, applicant_id, e)
        raise TransientIOError("Could not submit application") from e

    logger.info("Application created: id=%s job=%s applicant=%s", application.id, job_id, applicant_id)
    applicant = profile_repo.get_by_id(db, applicant_id)
    (hub or default_hub).publish(
        ApplicationSubmitted(
            application_id=application.id,
            job_id=job.id,
            applicant_id=applicant_id,
            owner_id=job.owner_id,
            job_title=job.title,
            applicant_name=applicant.display_name if applicant else None,
        )
    )
    return application


def hire(db: Session, application_id: str, actor_id: str, hub: EventHub | None = None) -> HireResult:
    """
    Accept one application, reject its PENDING siblings and close the job.
    Safe to call again after a PartialFailure or a completed hire.
    """
    application, job = _load_application_and_job(db, application_id)
    if job.owner_id != actor_id:
        raise NotOwner("Only the job owner can hire")

    status = application.normalized_status
    if status == ApplicationStatus.REJECTED:
        raise AlreadyDecided("This application was already rejected")

    applicant_id = application.applicant_id
    job_done = job.status == JobStatus.ACCEPTED and job.hired_applicant_id == applicant_id

    if status == ApplicationStatus.PENDING:
        if job.status != JobStatus.OPEN:
            raise JobClosed("This job is no longer open")
        with _store_reads(db, "sibling lookup"):
            siblings = application_repo.fetch_applications_for_job(db, job.id)
        if any(a.id != application.id and a.normalized_status == ApplicationStatus.ACCEPTED for a in siblings):
            raise JobClosed("Another applicant was already hired for this job")
    elif not job_done and (job.status != JobStatus.OPEN or job.hired_applicant_id not in (None, applicant_id)):
        raise JobClosed("This job was closed for another applicant")

    result = HireResult(application_id=application.id, job_id=job.id, applicant_id=applicant_id)
    completed: list[str] = []

    if application.status != ApplicationStatus.ACCEPTED:
        try:
            if status == ApplicationStatus.PENDING:
                accepted = application_repo.accept_if_unclaimed(db, application.id, job.id)
            else:
                # Legacy spelling of an accepted row; rewrite it in canonical form.
                application_repo.update_application_status(db, application.id, ApplicationStatus.ACCEPTED)
                accepted = 1
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("Hire step %s failed for application=%s: %s", STEP_ACCEPT, application.id, e)
            raise TransientIOError("Could not accept the application") from e
        if not accepted:
            logger.info("Hire lost to a concurrent decision: application=%s job=%s", application.id, job.id)
            raise JobClosed("Another applicant was already hired for this job")
        result.applied_steps.append(STEP_ACCEPT)
    completed.append(STEP_ACCEPT)

    try:
        result.rejected_count = application_repo.reject_pending_siblings(db, job.id, application.id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Hire step %s failed for application=%s: %s", STEP_REJECT_SIBLINGS, application.id, e)
        raise PartialFailure("Applicant accepted but other applicants were not updated", completed, STEP_REJECT_SIBLINGS) from e
    if result.rejected_count:
        result.applied_steps.append(STEP_REJECT_SIBLINGS)
    completed.append(STEP_REJECT_SIBLINGS)

    if not job_done:
        try:
            job_repo.update_job_status(db, job.id, JobStatus.ACCEPTED, hired_applicant_id=applicant_id)
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("Hire step %s failed for application=%s: %s", STEP_CLOSE_JOB, application.id, e)
            raise PartialFailure("Applicant accepted but the job is still open", completed, STEP_CLOSE_JOB) from e
        result.applied_steps.append(STEP_CLOSE_JOB)
        (hub or default_hub).publish(
            ApplicationAccepted(
                applicant_id=applicant_id,
                job_id=job.id,
                job_title=job.title,
                application_id=application.id,
            )
        )

    if result.was_noop:
        logger.info("Hire retry is a no-op: application=%s already hired", application.id)
    else:
        logger.info(
            "Hired: application=%s job=%s applicant=%s steps=%s rejected=%d",
            application.id, job.id, applicant_id, result.applied_steps, result.rejected_count,
        )
    return result


def reject(db: Session, application_id: str, actor_id: str) -> Application:
    """Owner declines a single PENDING applicant. Rejecting twice is a no-op."""
    application, job = _load_application_and_job(db, application_id)
    if job.owner_id != actor_id:
        raise NotOwner("Only the job owner can reject applicants")
    status = application.normalized_status
    if status == ApplicationStatus.REJECTED:
        return application
    if status == ApplicationStatus.ACCEPTED:
        raise AlreadyDecided("This applicant was already hired")
    try:
        updated = application_repo.update_application_status(db, application.id, ApplicationStatus.REJECTED)
    except SQLAlchemyError as e:
        db.rollback()
        raise TransientIOError("Could not reject the application") from e
    logger.info("Application rejected: id=%s job=%s", application.id, job.id)
    return updated


def withdraw(db: Session, application_id: str, actor_id: str) -> None:
    """Applicant removes their own PENDING application."""
    with _store_reads(db, "application lookup"):
        application = application_repo.get_by_id(db, application_id)
    if application is None:
        raise NotFound("Application not found")
    if application.applicant_id != actor_id:
        raise NotOwner("Only the applicant can withdraw this application")
    if application.normalized_status != ApplicationStatus.PENDING:
        raise AlreadyDecided("A decided application cannot be withdrawn")
    try:
        application_repo.delete_application(db, application.id)
    except SQLAlchemyError as e:
        db.rollback()
        raise TransientIOError("Could not withdraw the application") from e
    logger.info("Application withdrawn: id=%s applicant=%s", application.id, actor_id)
