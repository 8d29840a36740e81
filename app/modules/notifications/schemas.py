from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any, Literal

AdminPingType = Literal[
    "bed_signup_reminder",
    "expense_reminder",
    "calendar_reminder",
    "itinerary_update",
    "bulletin_update",
    "custom_announcement",
]


class CamelRequest(BaseModel):
    """Request bodies accept both camelCase (mobile client) and snake_case keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationRequest(CamelRequest):
    title: str = Field(min_length=1)
    body: str = Field(min_length=1)
    target_user_id: Optional[str] = None
    house_id: Optional[str] = None
    exclude_user_id: Optional[str] = None
    admin_id: Optional[str] = None  # older clients send adminId instead of excludeUserId
    deep_link_tab: Optional[str] = None
    ping_type: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class AdminPingRequest(CamelRequest):
    house_id: str
    ping_type: AdminPingType
    title: Optional[str] = None  # defaults to the template title
    body: Optional[str] = None  # defaults to the template body
    deep_link_tab: Optional[str] = None


class ChatNotificationRequest(CamelRequest):
    message_id: str = Field(min_length=1)
    sender_id: str = Field(min_length=1)
    sender_name: str = Field(min_length=1)
    content: str = ""
    has_attachments: bool = False
    # House chat
    house_id: Optional[str] = None
    house_name: Optional[str] = None
    # Direct message
    conversation_id: Optional[str] = None
    recipient_id: Optional[str] = None


class EventNotificationRequest(CamelRequest):
    event_id: str = Field(min_length=1)
    event_name: str = Field(min_length=1)
    event_date: str = Field(min_length=1)  # YYYY-MM-DD
    event_time: Optional[str] = None  # HH:MM
    participant_ids: List[str]
    creator_name: str = Field(min_length=1)
    house_name: str = Field(min_length=1)


class SettlementNotificationRequest(CamelRequest):
    recipient_user_id: str = Field(min_length=1)
    settler_name: str = Field(min_length=1)
    house_name: str = Field(min_length=1)
    settled_amount: float = 0
    settled_count: int = 1


class NotificationResult(BaseModel):
    success: bool = True
    notifications_sent: int = 0
    message: Optional[str] = None


class PingTemplateResponse(BaseModel):
    id: str
    title: str
    default_body: str
    icon: str
    deep_link_tab: str
