import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from gigboard.database import get_db
from gigboard.core.security import decode_access_token
from gigboard.repos.profile_repo import get_by_id

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def get_current_profile(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
):
    """Resolve the acting profile from the bearer token. Every workflow call receives its id explicitly."""
    if not credentials:
        logger.info("Auth failed: missing bearer credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    profile_id = decode_access_token(credentials.credentials)
    if not profile_id:
        logger.info("Auth failed: invalid or expired token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    profile = get_by_id(db, profile_id)
    if not profile:
        logger.info("Auth failed: profile from token not found")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Profile not found",
        )
    return profile
