from pydantic import BaseModel
from datetime import date, datetime


class ReminderResponse(BaseModel):
    id: int
    product_id: int
    reminder_type: str
    reminder_date: date
    days_before: int
    is_sent: bool
    created_at: datetime

    class Config:
        from_attributes = True
