from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from gigboard.database import Base


class Profile(Base):
    """Public profile of a marketplace user; id matches the auth user id."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True, index=True)
    full_name = Column(String)
    username = Column(String, unique=True, index=True)
    avatar_url = Column(String)
    phone = Column(String)
    bio = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    jobs = relationship("Job", back_populates="owner", foreign_keys="Job.owner_id")
    applications = relationship("Application", back_populates="applicant")

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or "User"
