# FILE: services/response_formatter.py
"""
Turns an IntentRecord and the billing API's JSON text into the message the
user reads. Pure string formatting: no I/O, no hidden state.
"""

import json
import logging
import math
from typing import Any, Callable, Dict, Optional

from core.intent import IntentRecord
from services.months import due_date, month_label, parse_int, resolve_month_number

logger = logging.getLogger("billing_gateway.response_formatter")


# Fixed monthly plan charge included in every detailed bill
BASE_PLAN_CHARGE = 50.0

APOLOGY_TEXT = (
    "⚠️ I couldn't understand your request. Please try again with a clear question."
)
FALLBACK_TEXT = "Sorry, I could not process your request."


# -----------------------------
# Value helpers
# -----------------------------
def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _money(value: Any) -> str:
    number = _to_float(value)
    return f"{number:.2f}" if number is not None else "N/A"


def _plain(value: Any) -> str:
    """Render a JSON scalar the way it reads in the payload (100 not 100.0)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _text(value: Optional[str]) -> str:
    return "" if value is None else value


def _has_total(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and not payload.get("noData")
        and "totalAmount" in payload
    )


class _Period:
    """Month/year of a record resolved once for every template."""

    def __init__(self, record: IntentRecord):
        self.subscriber = _text(record.subscriberNo)
        self.year = _text(record.year)
        self.month_number = resolve_month_number(record.month)
        self.label = month_label(self.month_number, fallback=record.month)
        self.due_date = due_date(self.month_number, record.year) or "N/A"

    def no_bill(self) -> str:
        return f"No bill found for subscriber {self.subscriber} for {self.label} {self.year}."


# -----------------------------
# Per-intent templates
# -----------------------------
def _format_invalid(record: IntentRecord, payload: Any) -> str:
    return APOLOGY_TEXT


def _format_query_bill(record: IntentRecord, payload: Any) -> str:
    period = _Period(record)
    if not _has_total(payload):
        return period.no_bill()

    return (
        "Bill Summary:\n"
        "----------------------------\n"
        f"Subscriber:       {period.subscriber}\n"
        f"Month:            {period.label} {period.year}\n"
        f"Amount Due:       ${_money(payload['totalAmount'])}\n"
        f"Due Date:         {period.due_date}\n"
        "----------------------------\n"
        "Would you like to see the detailed bill or proceed with payment?"
    )


def _matches(item: Any, subscriber: Optional[str], month: Optional[int], year: Optional[int]) -> bool:
    if not isinstance(item, dict):
        return False
    owner = item.get("subscriber")
    owner_no = owner.get("subscriberNo") if isinstance(owner, dict) else None
    if owner_no is None or _plain(owner_no) != subscriber:
        return False
    item_month = item.get("month")
    item_year = item.get("year")
    if isinstance(item_month, bool) or isinstance(item_year, bool):
        return False
    return item_month == month and item_year == year


def _format_query_bill_detailed(record: IntentRecord, payload: Any) -> str:
    period = _Period(record)
    content = payload.get("content") if isinstance(payload, dict) else None
    if not isinstance(content, list) or not content or payload.get("noData"):
        return period.no_bill()

    target_year = parse_int(record.year)
    bill = next(
        (
            item
            for item in content
            if _matches(item, record.subscriberNo, period.month_number, target_year)
        ),
        None,
    )
    if bill is None:
        return period.no_bill()

    total = _to_float(bill.get("totalAmount"))
    usage_charge = total - BASE_PLAN_CHARGE if total is not None else None

    return (
        f"Bill Details for {period.label} {period.year}:\n"
        "----------------------------\n"
        f"Base Plan:             ${_money(BASE_PLAN_CHARGE)}\n"
        f"Data Usage:            {_plain(bill.get('totalMb'))} MB\n"
        f"Minutes Usage:         {_plain(bill.get('totalMinutes'))} minutes\n"
        f"Data & Minutes Charge: ${_money(usage_charge)}\n"
        f"Total Due:             ${_money(total)}\n"
        f"Due Date:              {period.due_date}\n"
        "----------------------------\n"
        "Would you like to proceed with payment?"
    )


def _format_make_payment(record: IntentRecord, payload: Any) -> str:
    period = _Period(record)
    if not _has_total(payload):
        return f"{period.no_bill()} Payment could not be processed."

    amount_paid_now = _to_float(record.amount) or 0.0
    total_bill = _to_float(payload.get("totalAmount")) or 0.0
    previously_paid = _to_float(payload.get("paidAmount")) or 0.0
    total_paid = previously_paid + amount_paid_now
    remaining = total_bill - total_paid

    return (
        "✅ Payment successful!\n"
        "\n"
        "Payment Summary:\n"
        "----------------------------\n"
        f"Subscriber:        {period.subscriber}\n"
        f"Month:             {period.label} {period.year}\n"
        f"Total Bill:        ${_money(total_bill)}\n"
        f"Previously Paid:   ${_money(previously_paid)}\n"
        f"Amount Paid Now:   ${_money(amount_paid_now)}\n"
        f"Total Paid:        ${_money(total_paid)}\n"
        f"Remaining Balance: ${_money(remaining)}\n"
        "----------------------------\n"
        "Thank you for your payment!"
    )


def _format_bill_history(record: IntentRecord, payload: Any) -> str:
    subscriber = _text(record.subscriberNo)
    if isinstance(payload, list):
        entries = payload
    elif isinstance(payload, dict):
        entries = payload.get("content") or []
    else:
        entries = []
    if not isinstance(entries, list) or not entries:
        return f"No bill history found for subscriber {subscriber}."

    lines = []
    for item in entries:
        item = item if isinstance(item, dict) else {}
        label = month_label(parse_int(item.get("month")), fallback=_plain(item.get("month")))
        paid = "Yes" if item.get("isPaid") else "No"
        lines.append(
            f"- {label} {_plain(item.get('year'))}  | "
            f"Amount Due: ${_plain(item.get('totalAmount'))} | Paid: {paid}"
        )

    return f"Bill History for Subscriber {subscriber}:\n" + "\n".join(lines)


FORMATTERS: Dict[str, Callable[[IntentRecord, Any], str]] = {
    "invalid": _format_invalid,
    "query_bill": _format_query_bill,
    "query_bill_detailed": _format_query_bill_detailed,
    "make_payment": _format_make_payment,
    "bill_history": _format_bill_history,
}


def format_response(record: IntentRecord, json_text: str) -> str:
    """
    Render the billing API's answer for the user.

    Non-JSON text (the client's short-circuit messages, or an odd body) is
    returned unchanged.
    """
    try:
        payload = json.loads(json_text)
    except (TypeError, ValueError):
        logger.info("[FORMAT RAW] billing response is not JSON, returning it unchanged")
        return json_text

    formatter = FORMATTERS.get(record.intent)
    if formatter is None:
        return FALLBACK_TEXT
    return formatter(record, payload)
