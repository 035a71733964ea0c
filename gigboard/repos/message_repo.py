from datetime import datetime, timezone

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload

from gigboard.core.security import generate_id
from gigboard.models.message import Message


def create(db: Session, sender_id: str, receiver_id: str, content: str) -> Message:
    message = Message(
        id=generate_id(),
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        is_read=False,
        created_at=datetime.now(timezone.utc),
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def get_for_participant(db: Session, user_id: str, limit: int = 500) -> list[Message]:
    """Every message sent or received by ``user_id``, newest first."""
    return (
        db.query(Message)
        .options(joinedload(Message.sender), joinedload(Message.receiver))
        .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(limit)
        .all()
    )


def get_conversation(db: Session, user_id: str, partner_id: str, limit: int = 200) -> list[Message]:
    return (
        db.query(Message)
        .filter(
            or_(
                and_(Message.sender_id == user_id, Message.receiver_id == partner_id),
                and_(Message.sender_id == partner_id, Message.receiver_id == user_id),
            )
        )
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(limit)
        .all()
    )


def mark_read(db: Session, receiver_id: str, sender_id: str) -> int:
    """Flag unread messages from ``sender_id`` to ``receiver_id`` as read. Returns rows changed."""
    count = (
        db.query(Message)
        .filter(
            Message.receiver_id == receiver_id,
            Message.sender_id == sender_id,
            Message.is_read == False,  # noqa: E712
        )
        .update({Message.is_read: True}, synchronize_session="fetch")
    )
    db.commit()
    return count
