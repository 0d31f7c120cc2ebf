from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field
from fleetos.models import AlertType, Priority

class AlertBase(BaseModel):
    user_id: Optional[int] = None
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: AlertType
    priority: Priority = Priority.MEDIUM
    link: Optional[str] = None

class AlertCreate(AlertBase): pass

class AlertOut(AlertBase):
    id: int
    is_read: bool
    created_at: datetime
    class Config: from_attributes = True
