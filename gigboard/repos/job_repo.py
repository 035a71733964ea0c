import logging
import math
from datetime import datetime, timezone

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload

from gigboard.core.security import generate_id
from gigboard.models.application import Application
from gigboard.models.job import Job, JobStatus

logger = logging.getLogger(__name__)

_KM_PER_DEGREE_LAT = 111.0

_EDITABLE_FIELDS = (
    "title",
    "amount",
    "location",
    "latitude",
    "longitude",
    "job_date",
    "shift_start",
    "shift_end",
    "has_food",
    "dress_code",
)


def _bounding_box(lat: float, radius_km: float) -> tuple[float, float, float]:
    """Coarse box around a point as (min_lat, max_lat, d_lon); exact distance is applied later."""
    d_lat = radius_km / _KM_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(lat))
    if cos_lat < 1e-6:
        d_lon = 180.0
    else:
        d_lon = min(180.0, radius_km / (_KM_PER_DEGREE_LAT * cos_lat))
    return lat - d_lat, lat + d_lat, d_lon


def _longitude_ranges(lon: float, d_lon: float) -> list[tuple[float, float]] | None:
    """Longitude spans within ``d_lon`` of ``lon``, split at the antimeridian. None means any."""
    if d_lon >= 180.0:
        return None
    low, high = lon - d_lon, lon + d_lon
    if low < -180.0:
        return [(low + 360.0, 180.0), (-180.0, high)]
    if high > 180.0:
        return [(low, 180.0), (-180.0, high - 360.0)]
    return [(low, high)]


def fetch_open_jobs(
    db: Session,
    exclude_owner: str,
    near_lat: float | None = None,
    near_lon: float | None = None,
    radius_km: float | None = None,
    limit: int | None = None,
) -> list[Job]:
    """
    OPEN jobs not posted by ``exclude_owner``, newest first.
    With a center and radius, jobs with coordinates outside the bounding box
    are dropped; jobs without coordinates are always kept. ``limit`` caps the
    rows read; leave it unset when a filter runs afterwards.
    """
    q = (
        db.query(Job)
        .options(joinedload(Job.owner))
        .filter(Job.status == JobStatus.OPEN, Job.owner_id != exclude_owner)
    )
    if radius_km is not None and near_lat is not None and near_lon is not None:
        min_lat, max_lat, d_lon = _bounding_box(near_lat, radius_km)
        in_box = [Job.latitude.between(min_lat, max_lat)]
        ranges = _longitude_ranges(near_lon, d_lon)
        if ranges is not None:
            in_box.append(or_(*(Job.longitude.between(low, high) for low, high in ranges)))
        q = q.filter(
            or_(
                Job.latitude.is_(None),
                Job.longitude.is_(None),
                and_(*in_box),
            )
        )
    q = q.order_by(Job.created_at.desc(), Job.id)
    if limit is not None:
        q = q.limit(limit)
    return q.all()



def get_by_id(db: Session, job_id: str) -> Job | None:
    return db.query(Job).filter(Job.id == job_id).first()


def get_for_owner(db: Session, owner_id: str, limit: int = 200) -> list[Job]:
    return (
        db.query(Job)
        .filter(Job.owner_id == owner_id)
        .order_by(Job.created_at.desc(), Job.id)
        .limit(limit)
        .all()
    )


def create(db: Session, owner_id: str, **fields) -> Job:
    job = Job(
        id=generate_id(),
        owner_id=owner_id,
        status=JobStatus.OPEN,
        created_at=fields.get("created_at") or datetime.now(timezone.utc),
    )
    for name in _EDITABLE_FIELDS:
        if name in fields and fields[name] is not None:
            setattr(job, name, fields[name])
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def update(db: Session, job_id: str, **fields) -> Job | None:
    """Apply the given editable fields. Status is never changed here."""
    job = get_by_id(db, job_id)
    if not job:
        return None
    for name in _EDITABLE_FIELDS:
        if name in fields:
            setattr(job, name, fields[name])
    db.commit()
    db.refresh(job)
    return job


def update_job_status(
    db: Session,
    job_id: str,
    status: str,
    hired_applicant_id: str | None = None,
) -> Job | None:
    job = get_by_id(db, job_id)
    if not job:
        return None
    job.status = status
    if hired_applicant_id is not None:
        job.hired_applicant_id = hired_applicant_id
    db.commit()
    db.refresh(job)
    return job


def delete_job(db: Session, job_id: str) -> bool:
    """Delete a job and its applications. Returns True if deleted."""
    job = get_by_id(db, job_id)
    if not job:
        return False
    # Remove applications explicitly; some stores lack the FK cascade.
    db.query(Application).filter(Application.job_id == job_id).delete(synchronize_session=False)
    db.expire(job, ["applications"])
    db.delete(job)
    db.commit()
    logger.info("Deleted job %s with its applications", job_id)
    return True
