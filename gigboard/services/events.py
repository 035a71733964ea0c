"""Domain events carried by the realtime hub."""
from dataclasses import dataclass


@dataclass(frozen=True)
class MessageReceived:
    sender_id: str
    receiver_id: str
    content: str
    sender_name: str | None = None
    message_id: str | None = None


@dataclass(frozen=True)
class ApplicationSubmitted:
    application_id: str
    job_id: str
    applicant_id: str
    owner_id: str
    job_title: str | None = None
    applicant_name: str | None = None


@dataclass(frozen=True)
class ApplicationAccepted:
    applicant_id: str
    job_id: str
    job_title: str | None = None
    application_id: str | None = None


def recipient_of(event) -> str | None:
    """Profile id the event is addressed to, or None for unknown event types."""
    if isinstance(event, MessageReceived):
        return event.receiver_id
    if isinstance(event, ApplicationAccepted):
        return event.applicant_id
    if isinstance(event, ApplicationSubmitted):
        return event.owner_id
    return None
