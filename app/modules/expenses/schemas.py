from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date


class UserBalance(BaseModel):
    user_id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    venmo_handle: Optional[str] = None
    owes: float  # what this member owes the current user
    owed: float  # what the current user owes this member
    net_balance: float


class ExpenseSummary(BaseModel):
    total_you_owe: float
    total_you_are_owed: float
    net_balance: float


class ExpenseBalanceData(BaseModel):
    balances: List[UserBalance]
    summary: ExpenseSummary


class SplitShare(BaseModel):
    user_id: str
    amount: float


class SplitPreviewRequest(BaseModel):
    amount: float = Field(gt=0)
    user_ids: Optional[List[str]] = None  # even split
    splits: Optional[List[SplitShare]] = None  # custom split to validate

    @model_validator(mode="after")
    def require_one_mode(self):
        if not self.user_ids and not self.splits:
            raise ValueError("Either user_ids or splits must be set")
        if self.user_ids and self.splits:
            raise ValueError("Cannot set both user_ids and splits")
        return self


class SplitPreviewResponse(BaseModel):
    amount: float
    splits: List[SplitShare]
    balanced: bool
    difference: float


class SettleAllRequest(BaseModel):
    other_user_id: str


class SettleAllResponse(BaseModel):
    settled_count: int
    settled_amount: float
    notifications_sent: int = 0


class GuestFeeRequest(BaseModel):
    check_in: date
    check_out: date
    guest_count: int = Field(ge=0)

    @model_validator(mode="after")
    def check_out_after_check_in(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class GuestFeeResponse(BaseModel):
    amount: float
    nights: int
    nightly_rate: float
    recipient_id: Optional[str] = None
    expense_id: Optional[str] = None
