from fastapi import APIRouter, Depends

from gigboard.dependencies import get_current_profile
from gigboard.models.profile import Profile
from gigboard.schemas.notification import NotificationOut
from gigboard.services.notifications import inbox_for

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
def poll_notifications(profile: Profile = Depends(get_current_profile)):
    """
    Return and clear notifications queued for the viewer since the last poll.
    The inbox subscribes on the first poll; earlier events are not replayed.
    """
    return [NotificationOut(**p.to_dict()) for p in inbox_for(profile.id).drain()]
