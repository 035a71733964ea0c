from gigboard.models.profile import Profile
from gigboard.models.job import Job, JobStatus
from gigboard.models.application import Application, ApplicationStatus
from gigboard.models.message import Message

__all__ = [
    "Profile",
    "Job",
    "JobStatus",
    "Application",
    "ApplicationStatus",
    "Message",
]
