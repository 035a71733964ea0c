import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gigboard.config import settings
from gigboard.core.errors import TransientIOError
from gigboard.core.geo import annotate_distances, within_radius
from gigboard.repos import job_repo
from gigboard.services.feed_filter import FeedFilter, FeedItem, filter_feed

logger = logging.getLogger(__name__)


def get_filtered_feed(items: list[FeedItem], feed_filter: FeedFilter) -> list[FeedItem]:
    """Filter and sort already-fetched feed items. No store access."""
    return filter_feed(items, feed_filter)


def get_feed(
    db: Session,
    viewer_id: str,
    feed_filter: FeedFilter,
    lat: float | None = None,
    lon: float | None = None,
    radius_km: float | None = None,
) -> list[FeedItem]:
    """
    Open jobs from other owners, annotated with distance from (lat, lon) and
    run through ``feed_filter``, then capped at ``feed_max_results``.
    Distance is computed per request and never stored.
    """
    if radius_km is None:
        radius_km = settings.feed_default_radius_km
    try:
        jobs = job_repo.fetch_open_jobs(
            db,
            exclude_owner=viewer_id,
            near_lat=lat,
            near_lon=lon,
            radius_km=radius_km,
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Feed fetch failed for viewer=%s: %s", viewer_id, e)
        raise TransientIOError("Could not load jobs") from e

    items = [
        FeedItem(job=job, distance_km=distance)
        for job, distance in annotate_distances(jobs, lat, lon)
        if within_radius(distance, radius_km)
    ]
    # Cap after filtering and sorting so the cap never hides a match.
    result = get_filtered_feed(items, feed_filter)[: settings.feed_max_results]
    logger.debug(
        "Feed viewer=%s fetched=%d shown=%d sort=%s",
        viewer_id, len(jobs), len(result), feed_filter.sort,
    )
    return result
