from sqlalchemy.orm import Session

from gigboard.models.profile import Profile
from gigboard.core.security import generate_id


def get_by_id(db: Session, profile_id: str) -> Profile | None:
    return db.query(Profile).filter(Profile.id == profile_id).first()


def get_by_username(db: Session, username: str) -> Profile | None:
    return db.query(Profile).filter(Profile.username == username).first()


def get_many(db: Session, profile_ids: list[str]) -> dict[str, Profile]:
    if not profile_ids:
        return {}
    rows = db.query(Profile).filter(Profile.id.in_(set(profile_ids))).all()
    return {p.id: p for p in rows}


def create(
    db: Session,
    profile_id: str | None = None,
    *,
    full_name: str | None = None,
    username: str | None = None,
    phone: str | None = None,
    avatar_url: str | None = None,
    bio: str | None = None,
) -> Profile:
    profile = Profile(
        id=profile_id or generate_id(),
        full_name=full_name,
        username=username,
        phone=phone,
        avatar_url=avatar_url,
        bio=bio,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def update(
    db: Session,
    profile_id: str,
    *,
    full_name: str | None = None,
    username: str | None = None,
    phone: str | None = None,
    avatar_url: str | None = None,
    bio: str | None = None,
) -> Profile | None:
    profile = get_by_id(db, profile_id)
    if not profile:
        return None
    if full_name is not None:
        profile.full_name = full_name
    if username is not None:
        profile.username = username or None
    if phone is not None:
        profile.phone = phone or None
    if avatar_url is not None:
        profile.avatar_url = avatar_url or None
    if bio is not None:
        profile.bio = bio
    db.commit()
    db.refresh(profile)
    return profile
