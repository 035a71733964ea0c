import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gigboard.database import get_db
from gigboard.dependencies import get_current_profile
from gigboard.models.profile import Profile
from gigboard.routers.jobs import job_to_out
from gigboard.schemas.job import FeedJobOut
from gigboard.services.feed_filter import FeedFilter, FeedItem
from gigboard.services.feed_service import get_feed

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/feed", tags=["feed"])


def _item_to_out(item: FeedItem) -> FeedJobOut:
    owner = getattr(item.job, "owner", None)
    distance = round(item.distance_km, 1) if item.distance_km is not None else None
    return FeedJobOut(
        **job_to_out(item.job).model_dump(),
        distance_km=distance,
        owner_name=owner.display_name if owner else None,
        owner_avatar_url=owner.avatar_url if owner else None,
    )


@router.get("", response_model=list[FeedJobOut])
def get_job_feed(
    q: str | None = None,
    min_pay: str | None = None,
    food_only: bool = False,
    sort: str | None = None,
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
    radius_km: float | None = Query(default=None, gt=0),
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """
    Open jobs from other users, filtered and sorted.
    sort: Newest (default), HighPay or Nearby. A non-numeric min_pay is ignored.
    """
    feed_filter = FeedFilter.from_raw(query=q, min_pay=min_pay, food_only=food_only, sort=sort)
    items = get_feed(db, profile.id, feed_filter, lat=lat, lon=lng, radius_km=radius_km)
    return [_item_to_out(i) for i in items]
