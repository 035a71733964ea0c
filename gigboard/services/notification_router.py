"""
Map inbound domain events to the notification a viewer should see.

Callers subscribe only to events addressed to the viewer, but recipient
identity is checked again here: an event for someone else yields None.
Events may arrive before the viewer's local job list has been refreshed, so
payloads never depend on anything but the event itself.
"""
import logging
import re
from dataclasses import dataclass

from gigboard.core.errors import InvalidEvent
from gigboard.services.events import ApplicationAccepted, ApplicationSubmitted, MessageReceived

logger = logging.getLogger(__name__)

MAX_BODY_CHARS = 120

APPLICATIONS_ROUTE = "/my-applications"


@dataclass(frozen=True)
class NotificationPayload:
    headline: str
    body: str
    target_route: str

    def to_dict(self) -> dict:
        return {"headline": self.headline, "body": self.body, "target_route": self.target_route}


def chat_route(partner_id: str) -> str:
    return f"/chat/{partner_id}"


def job_route(job_id: str) -> str:
    return f"/job/{job_id}"


def _preview(text: str | None) -> str:
    flat = re.sub(r"\s+", " ", text or "").strip()
    if len(flat) <= MAX_BODY_CHARS:
        return flat
    return flat[: MAX_BODY_CHARS - 3].rstrip() + "..."


def route_notification(event, viewer_id: str) -> NotificationPayload | None:
    """
    Payload for ``viewer_id`` or None when the event is not theirs.
    Raises InvalidEvent for a message whose sender is its own receiver.
    """
    if isinstance(event, MessageReceived):
        if event.sender_id == event.receiver_id:
            raise InvalidEvent("Message sender and receiver are the same user")
        if event.receiver_id != viewer_id:
            return None
        return NotificationPayload(
            headline=event.sender_name or "New Message",
            body=_preview(event.content),
            target_route=chat_route(event.sender_id),
        )

    if isinstance(event, ApplicationAccepted):
        if event.applicant_id != viewer_id:
            return None
        if event.job_title:
            body = f"You got the job: {event.job_title}"
        else:
            body = "One of your applications was accepted."
        return NotificationPayload(
            headline="You're hired!",
            body=_preview(body),
            target_route=APPLICATIONS_ROUTE,
        )

    if isinstance(event, ApplicationSubmitted):
        if event.applicant_id == event.owner_id:
            raise InvalidEvent("Job owner cannot apply to their own job")
        if event.owner_id != viewer_id:
            return None
        who = event.applicant_name or "Someone"
        what = event.job_title or "your job"
        return NotificationPayload(
            headline="New applicant",
            body=_preview(f"{who} applied to {what}"),
            target_route=job_route(event.job_id),
        )

    logger.debug("No notification route for %s", type(event).__name__)
    return None
