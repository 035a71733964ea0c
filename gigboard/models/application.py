from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from gigboard.database import Base


class ApplicationStatus:
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

    ALL = (PENDING, ACCEPTED, REJECTED)
    TERMINAL = (ACCEPTED, REJECTED)

    # Older rows were written with these spellings for a hire.
    _ALIASES = {"APPROVED": ACCEPTED, "HIRED": ACCEPTED}
    ACCEPTED_SPELLINGS = (ACCEPTED, "APPROVED", "HIRED")

    @classmethod
    def normalize(cls, raw: str | None) -> str:
        value = (raw or cls.PENDING).strip().upper()
        return cls._ALIASES.get(value, value)


class Application(Base):
    """One applicant's bid for one job."""

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("job_id", "applicant_id", name="uq_application_job_applicant"),)

    id = Column(String, primary_key=True, index=True)
    job_id = Column(String, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String, default=ApplicationStatus.PENDING, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    job = relationship("Job", back_populates="applications")
    applicant = relationship("Profile", back_populates="applications")

    @property
    def normalized_status(self) -> str:
        return ApplicationStatus.normalize(self.status)
