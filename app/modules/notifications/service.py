from supabase import Client
from app.core.dates import format_event_date
from app.modules.expenses.balances import format_currency
from app.modules.houses.service import HouseService
from app.modules.notifications.schemas import (
    NotificationRequest, AdminPingRequest, ChatNotificationRequest,
    EventNotificationRequest, SettlementNotificationRequest, NotificationResult
)
from app.modules.notifications.templates import get_template
from app.modules.push.expo_client import ExpoPushClient, PushGatewayError
from app.modules.push.schemas import PushMessage
from app.modules.push.service import PushTokenService
from typing import List, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

CHAT_PREVIEW_LENGTH = 100


def truncate_message(content: str, max_length: int = CHAT_PREVIEW_LENGTH) -> str:
    if len(content) <= max_length:
        return content
    return content[:max_length - 3] + "..."


def format_chat_body(sender_name: str, content: str, has_attachments: bool, is_house_chat: bool) -> str:
    if has_attachments and not content:
        return f"{sender_name} sent a photo" if is_house_chat else "Sent a photo"
    preview = truncate_message(content)
    return f"{sender_name}: {preview}" if is_house_chat else preview


def format_settlement_body(settler_name: str, house_name: str, settled_amount: float, settled_count: int) -> str:
    amount_text = f" ({format_currency(settled_amount)})" if settled_amount > 0 else ""
    count_text = f"{settled_count} expenses" if settled_count > 1 else "an expense"
    return f"{settler_name} marked {count_text}{amount_text} as settled in {house_name}"


class NotificationService:
    def __init__(self, supabase: Client, push_client: ExpoPushClient):
        self.supabase = supabase
        self.push_client = push_client
        self.tokens = PushTokenService(supabase)
        self.houses = HouseService(supabase)

    def dispatch(self, user_ids: List[str], title: str, body: str, data: Dict[str, Any]) -> NotificationResult:
        """Send one push per registered device of each user. Lookup and gateway errors propagate."""
        if not user_ids:
            return NotificationResult(message="No recipients to notify")
        tokens = self.tokens.tokens_for_users(user_ids)
        if not tokens:
            logger.info("No push tokens found for recipients")
            return NotificationResult(message="No push tokens found")
        messages = [
            PushMessage(to=t["token"], title=title, body=body, data=data)
            for t in tokens
        ]
        self.push_client.send(messages)
        logger.info(f"Sent {len(messages)} notifications")
        return NotificationResult(notifications_sent=len(messages))

    def _run(self, name: str, fn) -> NotificationResult:
        try:
            return fn()
        except HTTPException:
            raise
        except PushGatewayError as e:
            logger.error(f"Error in {name}: {e}")
            raise HTTPException(status_code=502, detail=str(e))
        except Exception as e:
            logger.error(f"Error in {name}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def send_notification(self, request: NotificationRequest) -> NotificationResult:
        """Notify one user, or all accepted members of a house minus an optional excluded user."""
        if not request.target_user_id and not request.house_id:
            raise HTTPException(status_code=400, detail="Must provide targetUserId or houseId")

        def run():
            if request.target_user_id:
                user_ids = [request.target_user_id]
                logger.info(f"Sending notification to user {request.target_user_id}")
            else:
                exclude = request.exclude_user_id or request.admin_id
                user_ids = self.houses.get_member_ids(request.house_id, exclude_user_id=exclude)
                if not user_ids:
                    return NotificationResult(message="No members found to notify")
                logger.info(f"Sending notification to {len(user_ids)} house members")

            data = {**(request.data or {}), "deepLinkTab": request.deep_link_tab, "houseId": request.house_id}
            if request.ping_type:
                data["type"] = request.ping_type
            return self.dispatch(user_ids, request.title, request.body, data)

        return self._run("send_notification", run)

    def send_admin_ping(self, admin_id: str, request: AdminPingRequest) -> NotificationResult:
        """Admin broadcast to the rest of the house, filled in from the ping template."""
        template = get_template(request.ping_type)
        title = request.title or template["title"]
        body = request.body or template["default_body"]
        if not body:
            raise HTTPException(status_code=400, detail="Missing required fields: body")
        deep_link_tab = request.deep_link_tab or template["deep_link_tab"]

        def run():
            membership = self.supabase.table("house_members")\
                .select("role")\
                .eq("house_id", request.house_id)\
                .eq("user_id", admin_id)\
                .limit(1)\
                .execute()
            if not membership.data:
                raise HTTPException(status_code=403, detail="User is not a member of this house")
            if membership.data[0].get("role") != "admin":
                raise HTTPException(status_code=403, detail="Only admins can send notifications")

            logger.info(f"Admin ping from {admin_id} to house {request.house_id}: {request.ping_type}")
            user_ids = self.houses.get_member_ids(request.house_id, exclude_user_id=admin_id)
            if not user_ids:
                return NotificationResult(message="No other members in the house to notify")
            data = {"type": request.ping_type, "deepLinkTab": deep_link_tab, "houseId": request.house_id}
            return self.dispatch(user_ids, title, body, data)

        return self._run("send_admin_ping", run)

    def send_chat_notification(self, request: ChatNotificationRequest) -> NotificationResult:
        """House chat goes to every other member; a DM goes to its recipient."""
        if not request.house_id and not request.conversation_id:
            raise HTTPException(status_code=400, detail="Must provide houseId or conversationId")
        if not request.house_id and not request.recipient_id:
            raise HTTPException(status_code=400, detail="recipientId required for DM")

        def run():
            is_house_chat = bool(request.house_id)
            if is_house_chat:
                recipient_ids = self.houses.get_member_ids(request.house_id, exclude_user_id=request.sender_id)
                title = request.house_name or "House Chat"
                data = {"type": "house_chat_message", "houseId": request.house_id, "messageId": request.message_id}
            else:
                recipient_ids = [request.recipient_id]
                title = request.sender_name
                data = {
                    "type": "dm_message",
                    "conversationId": request.conversation_id,
                    "messageId": request.message_id,
                }
            if not recipient_ids:
                return NotificationResult(message="No recipients to notify")

            logger.info(f"Sending {data['type']} notifications to {len(recipient_ids)} recipients")
            body = format_chat_body(request.sender_name, request.content, request.has_attachments, is_house_chat)
            return self.dispatch(recipient_ids, title, body, data)

        return self._run("send_chat_notification", run)

    def send_event_notification(self, request: EventNotificationRequest) -> NotificationResult:
        if not request.participant_ids:
            raise HTTPException(status_code=400, detail="Missing required fields")

        def run():
            logger.info(
                f"Sending notifications for event {request.event_id} to {len(request.participant_ids)} participants"
            )
            formatted_date = format_event_date(request.event_date, request.event_time)
            title = f"New event: {request.event_name}"
            body = (
                f'{request.creator_name} added you to "{request.event_name}" '
                f"on {formatted_date} in {request.house_name}"
            )
            data = {
                "type": "event_participant_added",
                "eventId": request.event_id,
                "eventName": request.event_name,
                "eventDate": request.event_date,
            }
            return self.dispatch(request.participant_ids, title, body, data)

        return self._run("send_event_notification", run)

    def send_settlement_notification(self, request: SettlementNotificationRequest) -> NotificationResult:
        def run():
            logger.info(
                f"Sending settlement notification to user {request.recipient_user_id} from {request.settler_name}"
            )
            body = format_settlement_body(
                request.settler_name, request.house_name, request.settled_amount, request.settled_count
            )
            data = {
                "type": "expense_settled",
                "settlerName": request.settler_name,
                "houseName": request.house_name,
                "settledAmount": request.settled_amount,
                "settledCount": request.settled_count,
            }
            return self.dispatch([request.recipient_user_id], "Expenses Settled", body, data)

        return self._run("send_settlement_notification", run)
