import json

import pytest

from core.billing_result import NO_DATA_TEXT
from core.intent import parse_intent_line
from services.response_formatter import APOLOGY_TEXT, FALLBACK_TEXT, format_response


def _fmt(line: str, payload) -> str:
    return format_response(parse_intent_line(line), json.dumps(payload))


QUERY_MARCH = "intent=query_bill;subscriberNo=123;month=march;year=2024"


# -----------------------------
# query_bill
# -----------------------------
def test_query_bill_summary():
    text = _fmt(QUERY_MARCH, {"totalAmount": 45.5, "subscriberNo": 123})

    assert text.startswith("Bill Summary:")
    assert "Subscriber:       123" in text
    assert "Month:            March 2024" in text
    assert "Amount Due:       $45.50" in text
    assert "Due Date:         April 10, 2024" in text
    assert text.endswith("Would you like to see the detailed bill or proceed with payment?")


@pytest.mark.parametrize("month", ["december", "12"])
def test_query_bill_due_date_rolls_into_next_year(month):
    text = _fmt(
        f"intent=query_bill;subscriberNo=123;month={month};year=2024",
        {"totalAmount": 10},
    )
    assert "Due Date:         January 10, 2025" in text


def test_query_bill_no_data():
    text = format_response(parse_intent_line(QUERY_MARCH), NO_DATA_TEXT)
    assert text == "No bill found for subscriber 123 for March 2024."


def test_query_bill_without_total_amount_is_not_found():
    assert _fmt(QUERY_MARCH, {"month": 3}) == "No bill found for subscriber 123 for March 2024."


def test_query_bill_null_payload_is_not_found():
    assert _fmt(QUERY_MARCH, None) == "No bill found for subscriber 123 for March 2024."


def test_unrecognized_month_label_uses_raw_value():
    text = _fmt("intent=query_bill;subscriberNo=1;month=Smarch;year=2024", {"noData": True})
    assert text == "No bill found for subscriber 1 for Smarch 2024."


# -----------------------------
# query_bill_detailed
# -----------------------------
DETAILED_MARCH = "intent=query_bill_detailed;subscriberNo=123;month=March;year=2024"


def _detailed_item(sub=123, month=3, year=2024, total=62.5):
    return {
        "subscriber": {"subscriberNo": sub},
        "month": month,
        "year": year,
        "totalAmount": total,
        "totalMb": 1500,
        "totalMinutes": 240,
    }


def test_detailed_bill_breakdown():
    payload = {"content": [_detailed_item(month=2), _detailed_item()]}
    text = _fmt(DETAILED_MARCH, payload)

    assert text.startswith("Bill Details for March 2024:")
    assert "Base Plan:             $50.00" in text
    assert "Data Usage:            1500 MB" in text
    assert "Minutes Usage:         240 minutes" in text
    assert "Data & Minutes Charge: $12.50" in text
    assert "Total Due:             $62.50" in text
    assert "Due Date:              April 10, 2024" in text


@pytest.mark.parametrize(
    "item",
    [
        _detailed_item(sub=999),
        _detailed_item(month=4),
        _detailed_item(year=2023),
        _detailed_item(month="3"),
    ],
)
def test_detailed_bill_without_exact_match_is_not_found(item):
    text = _fmt(DETAILED_MARCH, {"content": [item]})
    assert text == "No bill found for subscriber 123 for March 2024."


@pytest.mark.parametrize(
    "payload",
    [{"content": []}, {"noData": True}, {"content": None}, [], {"noData": True, "content": [_detailed_item()]}],
)
def test_detailed_bill_empty_or_flagged_is_not_found(payload):
    assert _fmt(DETAILED_MARCH, payload) == "No bill found for subscriber 123 for March 2024."


# -----------------------------
# make_payment
# -----------------------------
PAY_LINE = "intent=make_payment;subscriberNo=123;month=march;year=2024;amount=30"


def test_payment_confirmation():
    text = _fmt(PAY_LINE, {"totalAmount": 100, "paidAmount": 20})

    assert text.startswith("✅ Payment successful!")
    assert "Total Bill:        $100.00" in text
    assert "Previously Paid:   $20.00" in text
    assert "Amount Paid Now:   $30.00" in text
    assert "Total Paid:        $50.00" in text
    assert "Remaining Balance: $50.00" in text
    assert text.endswith("Thank you for your payment!")


def test_payment_amount_defaults_to_zero():
    text = _fmt(
        "intent=make_payment;subscriberNo=123;month=march;year=2024;amount=lots",
        {"totalAmount": 100},
    )
    assert "Amount Paid Now:   $0.00" in text
    assert "Previously Paid:   $0.00" in text
    assert "Remaining Balance: $100.00" in text


def test_payment_without_bill_could_not_be_processed():
    text = format_response(parse_intent_line(PAY_LINE), NO_DATA_TEXT)
    assert text == (
        "No bill found for subscriber 123 for March 2024. Payment could not be processed."
    )


# -----------------------------
# bill_history
# -----------------------------
HISTORY_LINE = "intent=bill_history;subscriberNo=123"


@pytest.mark.parametrize("payload", [[], {"content": []}, {"noData": True}])
def test_empty_history(payload):
    assert _fmt(HISTORY_LINE, payload) == "No bill history found for subscriber 123."


def test_history_lines():
    payload = {
        "content": [
            {"month": 1, "year": 2024, "totalAmount": 55.5, "isPaid": True},
            {"month": 2, "year": 2024, "totalAmount": 100, "isPaid": False},
        ]
    }
    text = _fmt(HISTORY_LINE, payload)

    assert text == (
        "Bill History for Subscriber 123:\n"
        "- January 2024  | Amount Due: $55.5 | Paid: Yes\n"
        "- February 2024  | Amount Due: $100 | Paid: No"
    )


def test_history_accepts_bare_list():
    text = _fmt(HISTORY_LINE, [{"month": 12, "year": 2023, "totalAmount": 70, "isPaid": True}])
    assert "- December 2023  | Amount Due: $70 | Paid: Yes" in text


# -----------------------------
# Everything else
# -----------------------------
def test_invalid_ignores_payload():
    assert _fmt("garbage", {"totalAmount": 45.5}) == APOLOGY_TEXT


def test_non_json_text_is_returned_unchanged():
    rec = parse_intent_line("intent=frobnicate;subscriberNo=1")
    assert format_response(rec, "Unsupported intent: frobnicate") == "Unsupported intent: frobnicate"


def test_unknown_intent_with_json_falls_back():
    assert _fmt("intent=frobnicate;subscriberNo=1", {"ok": True}) == FALLBACK_TEXT


def test_formatting_is_idempotent():
    rec = parse_intent_line(PAY_LINE)
    text = json.dumps({"totalAmount": 100, "paidAmount": 20})

    assert format_response(rec, text) == format_response(rec, text)
