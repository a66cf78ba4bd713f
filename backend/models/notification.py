from datetime import datetime
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field

DEFAULT_NOTIFICATION_TYPE = "general"


class Notification(BaseModel):
    notif_id:   str
    user_id:    str
    title:      str
    body:       str
    type:       str = DEFAULT_NOTIFICATION_TYPE   # tag libre : "message", "booking", ...
    data:       Dict[str, Any] = {}
    # Drapeau à sens unique : une fois True, plus jamais d'envoi push
    sent:       bool = False
    sent_at:    Optional[datetime] = None
    error:      Optional[str] = None
    # Timestamps
    created_at: datetime
    read_at:    Optional[datetime] = None


class NotificationCreate(BaseModel):
    user_id: str = Field(min_length=1)
    title:   str = Field(min_length=1, max_length=200)
    body:    str = Field(min_length=1, max_length=2000)
    type:    Optional[str] = None
    data:    Dict[str, Any] = {}
