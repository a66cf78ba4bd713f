from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from models.common import UserRole


class User(BaseModel):
    user_id:    str
    name:       str
    email:      Optional[str] = None
    role:       UserRole = UserRole.CLIENT
    is_active:  bool     = True
    # Token FCM de l'appareil courant (un seul appareil par compte)
    fcm_token:  Optional[str] = None
    # Timestamps
    created_at: datetime
    updated_at: datetime


class FcmTokenUpdate(BaseModel):
    fcm_token: str = Field(min_length=1)
