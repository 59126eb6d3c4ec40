from pydantic import BaseModel


class NotificationPayload(BaseModel):
    recipient_id: int
    title: str
    message: str
    type: str = "booking"
    data: dict = {}
