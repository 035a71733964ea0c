from pydantic import BaseModel


class NotificationOut(BaseModel):
    headline: str
    body: str
    target_route: str
