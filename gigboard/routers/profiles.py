import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gigboard.database import get_db
from gigboard.dependencies import get_current_profile
from gigboard.models.profile import Profile
from gigboard.repos.profile_repo import get_by_id, get_by_username, update
from gigboard.schemas.profile import ProfileOut, ProfileUpdate, PublicProfileOut

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileOut)
def get_me(profile: Profile = Depends(get_current_profile)):
    return ProfileOut.model_validate(profile)


@router.put("/me", response_model=ProfileOut)
def update_me(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Update own profile. avatar_url is a URL from the client's storage upload."""
    if body.username:
        existing = get_by_username(db, body.username)
        if existing and existing.id != profile.id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username is taken")
    updated = update(db, profile.id, **body.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    logger.info("Profile updated: %s", profile.id)
    return ProfileOut.model_validate(updated)


@router.get("/{profile_id}", response_model=PublicProfileOut)
def get_profile(
    profile_id: str,
    db: Session = Depends(get_db),
    _viewer: Profile = Depends(get_current_profile),
):
    """Another user's public profile; phone is never exposed here."""
    other = get_by_id(db, profile_id)
    if not other:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return PublicProfileOut.model_validate(other)
