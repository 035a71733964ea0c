from sqlalchemy import Column, String, Float, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from gigboard.database import Base


class JobStatus:
    OPEN = "OPEN"
    ACCEPTED = "ACCEPTED"
    CLOSED = "CLOSED"

    ALL = (OPEN, ACCEPTED, CLOSED)


class Job(Base):
    """A short-term gig posted by a profile."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True, index=True)
    owner_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    amount = Column(Float, nullable=False, default=0)
    location = Column(String)
    latitude = Column(Float)
    longitude = Column(Float)
    job_date = Column(Date)
    shift_start = Column(String)
    shift_end = Column(String)
    has_food = Column(Boolean, default=False, nullable=False)
    dress_code = Column(String, default="Casual")
    status = Column(String, default=JobStatus.OPEN, nullable=False, index=True)
    hired_applicant_id = Column(String, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("Profile", back_populates="jobs", foreign_keys=[owner_id])
    hired_applicant = relationship("Profile", foreign_keys=[hired_applicant_id])
    applications = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
