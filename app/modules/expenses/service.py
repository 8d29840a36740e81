from supabase import Client
from app.config import settings
from app.core.dates import format_local_date
from app.modules.expenses.balances import (
    compute_user_balances, compute_guest_fee, count_nights, even_split, round_amount, validate_splits
)
from app.modules.expenses.schemas import (
    ExpenseBalanceData, SplitPreviewRequest, SplitPreviewResponse, SplitShare,
    SettleAllResponse, GuestFeeRequest, GuestFeeResponse
)
from app.modules.houses.service import HouseService
from app.modules.notifications.schemas import SettlementNotificationRequest
from app.modules.notifications.service import NotificationService
from typing import Optional, Dict, Any
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class ExpenseService:
    def __init__(self, supabase: Client, notifications: Optional[NotificationService] = None):
        self.supabase = supabase
        self.notifications = notifications
        self.houses = HouseService(supabase)

    def _profiles(self, house_id: str) -> Dict[str, Dict[str, Any]]:
        members = self.supabase.table("house_members")\
            .select("user_id, profiles(*)")\
            .eq("house_id", house_id)\
            .eq("invite_status", "accepted")\
            .execute()
        return {
            m["user_id"]: m["profiles"]
            for m in (members.data or [])
            if m.get("user_id") and m.get("profiles")
        }

    def get_user_balances(self, house_id: str, current_user_id: str) -> ExpenseBalanceData:
        """Who owes the current user and whom the current user owes, from unsettled splits"""
        try:
            expenses = self.supabase.table("expenses")\
                .select("id, paid_by, expense_splits(id, user_id, amount, settled)")\
                .eq("house_id", house_id)\
                .execute()
            result = compute_user_balances(expenses.data or [], current_user_id, self._profiles(house_id))
            return ExpenseBalanceData(**result)
        except Exception as e:
            logger.error(f"Error calculating balances: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def preview_split(self, request: SplitPreviewRequest) -> SplitPreviewResponse:
        if request.user_ids:
            shares = [SplitShare(**s) for s in even_split(request.amount, request.user_ids)]
        else:
            shares = request.splits
        try:
            validate_splits(request.amount, [s.model_dump() for s in shares])
            balanced = True
        except ValueError:
            balanced = False
        total = sum(s.amount for s in shares)
        return SplitPreviewResponse(
            amount=request.amount,
            splits=shares,
            balanced=balanced,
            difference=round_amount(request.amount - total),
        )

    def settle_all_with_user(self, house_id: str, current_user_id: str, other_user_id: str) -> SettleAllResponse:
        """Mark every unsettled split other_user owes on expenses current_user paid, then notify them."""
        try:
            expenses = self.supabase.table("expenses")\
                .select("id")\
                .eq("house_id", house_id)\
                .eq("paid_by", current_user_id)\
                .execute()
            expense_ids = [e["id"] for e in (expenses.data or [])]
            if not expense_ids:
                return SettleAllResponse(settled_count=0, settled_amount=0)

            result = self.supabase.table("expense_splits")\
                .update({"settled": True, "settled_at": datetime.now(timezone.utc).isoformat()})\
                .in_("expense_id", expense_ids)\
                .eq("user_id", other_user_id)\
                .eq("settled", False)\
                .execute()
            settled = result.data or []
        except Exception as e:
            logger.error(f"Error settling all with user: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        response = SettleAllResponse(
            settled_count=len(settled),
            settled_amount=round_amount(sum(float(s.get("amount") or 0) for s in settled)),
        )
        if settled and self.notifications:
            response.notifications_sent = self._notify_settlement(house_id, current_user_id, other_user_id, response)
        return response

    def _notify_settlement(self, house_id: str, settler_id: str, recipient_id: str, settled: SettleAllResponse) -> int:
        """Best effort: the settlement stands even if the push fails."""
        try:
            house = self.houses.get_house(house_id)
            profile = self.supabase.table("profiles")\
                .select("display_name")\
                .eq("id", settler_id)\
                .maybe_single()\
                .execute()
            settler_name = (profile.data or {}).get("display_name") if profile else None
            result = self.notifications.send_settlement_notification(SettlementNotificationRequest(
                recipient_user_id=recipient_id,
                settler_name=settler_name or "A housemate",
                house_name=house["name"],
                settled_amount=settled.settled_amount,
                settled_count=settled.settled_count,
            ))
            return result.notifications_sent
        except Exception as e:
            logger.error(f"Error sending settlement notification to {recipient_id}: {e}")
            return 0

    def resolve_guest_fee_recipient(self, house_settings: Dict[str, Any], house_id: str) -> Optional[str]:
        return house_settings.get("guestFeeRecipient") or self.houses.get_first_admin_id(house_id)

    def create_guest_fee(self, house_id: str, host_user_id: str, request: GuestFeeRequest) -> GuestFeeResponse:
        """Charge the host for guests: one guest_fees expense paid by the recipient, split to the host."""
        try:
            house_settings = self.houses.get_settings(house_id)
            rate = house_settings.get("guestNightlyRate")
            rate = float(rate) if rate is not None else settings.default_guest_nightly_rate
            nights = count_nights(request.check_in, request.check_out)
            amount = compute_guest_fee(request.check_in, request.check_out, request.guest_count, rate)
            response = GuestFeeResponse(amount=amount, nights=nights, nightly_rate=rate)
            if amount <= 0:
                return response

            recipient_id = self.resolve_guest_fee_recipient(house_settings, house_id)
            response.recipient_id = recipient_id
            if not recipient_id:
                logger.warning(f"House {house_id} has no guest fee recipient; no expense created")
                return response

            expense = self.supabase.table("expenses").insert({
                "house_id": house_id,
                "paid_by": recipient_id,
                "created_by": host_user_id,
                "title": "Guest Fee",
                "amount": amount,
                "description": f"Guest fees: {request.guest_count} guest(s) × {nights} night(s)",
                "category": "guest_fees",
                "date": format_local_date(request.check_in),
            }).execute()
            if not expense.data:
                raise HTTPException(status_code=500, detail="Failed to create guest fee expense")

            response.expense_id = expense.data[0]["id"]
            self.supabase.table("expense_splits").insert({
                "expense_id": response.expense_id,
                "user_id": host_user_id,
                "amount": amount,
                "settled": False,
            }).execute()
            return response
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
