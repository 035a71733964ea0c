import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gigboard.database import get_db
from gigboard.dependencies import get_current_profile
from gigboard.models.profile import Profile
from gigboard.schemas.message import ConversationOut, MessageCreate, MessageOut
from gigboard.services.inbox_service import (
    conversation,
    list_conversations,
    mark_conversation_read,
    send_message,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/messages", tags=["messages"])


def _message_to_out(m) -> MessageOut:
    return MessageOut(
        id=m.id,
        sender_id=m.sender_id,
        receiver_id=m.receiver_id,
        content=m.content,
        is_read=bool(m.is_read),
        created_at=m.created_at.isoformat() if m.created_at else None,
    )


@router.get("/conversations", response_model=list[ConversationOut])
def get_conversations(
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Inbox: latest message per partner, newest conversation first."""
    return [
        ConversationOut(
            partner_id=c.partner_id,
            partner_name=c.partner_name,
            partner_avatar_url=c.partner_avatar_url,
            last_message=c.last_message,
            last_at=c.last_at.isoformat() if c.last_at else None,
            last_from_me=c.last_from_me,
            unread=c.unread,
            unread_count=c.unread_count,
        )
        for c in list_conversations(db, profile.id)
    ]


@router.get("/{partner_id}", response_model=list[MessageOut])
def get_chat(
    partner_id: str,
    limit: int = 200,
    mark_read: bool = True,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Chat history with one partner, newest first. Opening a chat marks incoming messages read."""
    if mark_read:
        mark_conversation_read(db, profile.id, partner_id)
    return [_message_to_out(m) for m in conversation(db, profile.id, partner_id, limit=limit)]


@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def post_message(
    body: MessageCreate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    message = send_message(db, profile.id, body.receiver_id, body.content)
    return _message_to_out(message)


@router.post("/{partner_id}/read")
def read_conversation(
    partner_id: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    return {"marked_read": mark_conversation_read(db, profile.id, partner_id)}
