from pydantic import BaseModel
from typing import Optional, Dict, Any, Literal
from datetime import datetime


class PushMessage(BaseModel):
    """One Expo push message; serialized as-is into the gateway request body."""
    to: str
    title: str
    body: str
    sound: Optional[Literal["default"]] = "default"
    data: Dict[str, Any] = {}
    priority: Literal["default", "normal", "high"] = "high"
    badge: Optional[int] = None


class PushTicket(BaseModel):
    status: str  # ok | error
    id: Optional[str] = None
    message: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class PushTokenRegister(BaseModel):
    token: str
    platform: Literal["ios", "android", "web"]
    device_id: Optional[str] = None


class PushTokenResponse(BaseModel):
    id: str
    user_id: str
    token: str
    platform: str
    device_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
