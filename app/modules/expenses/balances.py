"""
Balance, split and guest-fee arithmetic.

Everything here works on rows already fetched from Supabase; nothing in this
module talks to the database.
"""

import math
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

from app.core.dates import as_date

SPLIT_TOLERANCE = 0.01


def round_amount(amount: float) -> float:
    """Round to cents."""
    return math.floor(amount * 100 + 0.5) / 100


def format_currency(amount: float) -> str:
    """$1,234.50"""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def splits_balanced(amount: float, split_amounts: Iterable[float]) -> bool:
    return abs(sum(split_amounts) - amount) <= SPLIT_TOLERANCE


def validate_splits(amount: float, splits: List[Dict[str, Any]]) -> None:
    """Raise ValueError unless split amounts add up to the expense amount."""
    if not splits_balanced(amount, (s["amount"] for s in splits)):
        raise ValueError("Split amounts must equal the total expense amount")


def even_split(amount: float, user_ids: List[str]) -> List[Dict[str, Any]]:
    """Split evenly to the cent; the rounding remainder goes to the first member."""
    if not user_ids or amount == 0:
        return []
    per_person = round_amount(amount / len(user_ids))
    remainder = round_amount(amount - per_person * len(user_ids))
    return [
        {"user_id": user_id, "amount": round_amount(per_person + remainder) if i == 0 else per_person}
        for i, user_id in enumerate(user_ids)
    ]


def compute_user_balances(
    expenses: List[Dict[str, Any]],
    current_user_id: str,
    profiles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Balances between current_user_id and everyone they share unsettled splits with.

    ``owes`` is what the other member owes the current user, ``owed`` is what
    the current user owes them; ``net_balance = owes - owed``.
    """
    profiles = profiles or {}
    balance_map: Dict[str, Dict[str, float]] = {}

    for expense in expenses:
        paid_by = expense.get("paid_by")
        for split in expense.get("expense_splits") or []:
            if split.get("settled"):
                continue
            split_user_id = split["user_id"]
            amount = float(split.get("amount") or 0)

            balance_map.setdefault(split_user_id, {"owes": 0.0, "owed": 0.0})
            balance_map.setdefault(paid_by, {"owes": 0.0, "owed": 0.0})

            if paid_by == current_user_id and split_user_id != current_user_id:
                balance_map[split_user_id]["owes"] += amount
            elif split_user_id == current_user_id and paid_by != current_user_id:
                balance_map[paid_by]["owed"] += amount

    balances = []
    for user_id, totals in balance_map.items():
        if user_id == current_user_id:
            continue
        owes = round_amount(totals["owes"])
        owed = round_amount(totals["owed"])
        if owes == 0 and owed == 0:
            continue
        profile = profiles.get(user_id) or {}
        balances.append({
            "user_id": user_id,
            "display_name": profile.get("display_name"),
            "avatar_url": profile.get("avatar_url"),
            "venmo_handle": profile.get("venmo_handle"),
            "owes": owes,
            "owed": owed,
            "net_balance": round_amount(totals["owes"] - totals["owed"]),
        })
    balances.sort(key=lambda b: abs(b["net_balance"]), reverse=True)

    summary = {
        "total_you_owe": round_amount(sum(b["owed"] for b in balances)),
        "total_you_are_owed": round_amount(sum(b["owes"] for b in balances)),
        "net_balance": round_amount(sum(b["net_balance"] for b in balances)),
    }
    return {"balances": balances, "summary": summary}


def count_nights(check_in: Union[str, date], check_out: Union[str, date]) -> int:
    delta = as_date(check_out) - as_date(check_in)
    return math.ceil(delta.total_seconds() / 86400)


def compute_guest_fee(
    check_in: Union[str, date],
    check_out: Union[str, date],
    guest_count: int,
    nightly_rate: float,
) -> float:
    """guests x nights x rate; zero when there are no guests, no nights or no rate."""
    if guest_count <= 0 or nightly_rate <= 0:
        return 0.0
    nights = count_nights(check_in, check_out)
    if nights <= 0:
        return 0.0
    return round_amount(guest_count * nights * nightly_rate)
