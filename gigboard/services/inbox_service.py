import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from gigboard.config import settings
from gigboard.core.errors import NotFound, ValidationError
from gigboard.models.message import Message
from gigboard.repos import message_repo, profile_repo
from gigboard.services.events import MessageReceived
from gigboard.services.realtime import EventHub, hub as default_hub

logger = logging.getLogger(__name__)


@dataclass
class Conversation:
    partner_id: str
    partner_name: str
    partner_avatar_url: str | None
    last_message: str
    last_at: datetime | None
    last_from_me: bool
    unread_count: int = 0

    @property
    def unread(self) -> bool:
        return self.unread_count > 0


def send_message(
    db: Session,
    sender_id: str,
    receiver_id: str,
    content: str,
    hub: EventHub | None = None,
) -> Message:
    text = (content or "").strip()
    if not text:
        raise ValidationError("Message is empty")
    if len(text) > settings.message_max_length:
        raise ValidationError(f"Message is longer than {settings.message_max_length} characters")
    if sender_id == receiver_id:
        raise ValidationError("You cannot message yourself")
    if not profile_repo.get_by_id(db, receiver_id):
        raise NotFound("Recipient not found")

    message = message_repo.create(db, sender_id, receiver_id, text)
    sender = profile_repo.get_by_id(db, sender_id)
    (hub or default_hub).publish(
        MessageReceived(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=text,
            sender_name=sender.display_name if sender else None,
            message_id=message.id,
        )
    )
    logger.debug("Message sent: id=%s sender=%s receiver=%s", message.id, sender_id, receiver_id)
    return message


def list_conversations(db: Session, viewer_id: str) -> list[Conversation]:
    """One entry per partner, most recent conversation first."""
    conversations: dict[str, Conversation] = {}
    for msg in message_repo.get_for_participant(db, viewer_id):
        from_me = msg.sender_id == viewer_id
        partner_id = msg.receiver_id if from_me else msg.sender_id
        convo = conversations.get(partner_id)
        if convo is None:
            partner = msg.receiver if from_me else msg.sender
            convo = Conversation(
                partner_id=partner_id,
                partner_name=partner.display_name if partner else "User",
                partner_avatar_url=partner.avatar_url if partner else None,
                last_message=msg.content,
                last_at=msg.created_at,
                last_from_me=from_me,
            )
            conversations[partner_id] = convo
        if not from_me and not msg.is_read:
            convo.unread_count += 1
    return list(conversations.values())


def conversation(db: Session, viewer_id: str, partner_id: str, limit: int = 200) -> list[Message]:
    """Chat history between viewer and partner, newest first."""
    return message_repo.get_conversation(db, viewer_id, partner_id, limit=limit)


def mark_conversation_read(db: Session, viewer_id: str, partner_id: str) -> int:
    """Only messages the viewer received are flagged."""
    count = message_repo.mark_read(db, receiver_id=viewer_id, sender_id=partner_id)
    if count:
        logger.debug("Marked %d message(s) read: viewer=%s partner=%s", count, viewer_id, partner_id)
    return count
