from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    receiver_id: str = Field(min_length=1)
    content: str = Field(min_length=1)


class MessageOut(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    is_read: bool
    created_at: str | None = None


class ConversationOut(BaseModel):
    partner_id: str
    partner_name: str
    partner_avatar_url: str | None = None
    last_message: str
    last_at: str | None = None
    last_from_me: bool
    unread: bool
    unread_count: int
