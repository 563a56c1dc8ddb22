# core/intent.py
from pydantic import BaseModel, ConfigDict
from typing import Optional


SUPPORTED_INTENTS = ("query_bill", "query_bill_detailed", "make_payment", "bill_history")
INVALID_INTENT = "invalid"
INVALID_INTENT_LINE = "intent=invalid"


class IntentRecord(BaseModel):
    """
    What the user asked for, as classified by the language model.

    A passive, immutable container: it does not call anything and does not
    default anything. `intent` keeps whatever name the model produced so an
    unsupported value can still be reported back verbatim.
    """

    model_config = ConfigDict(frozen=True)

    intent: str
    subscriberNo: Optional[str] = None
    month: Optional[str] = None
    year: Optional[str] = None
    amount: Optional[str] = None

    # The trimmed line this record was parsed from
    raw: str = INVALID_INTENT_LINE

    @property
    def is_invalid(self) -> bool:
        return self.intent == INVALID_INTENT

    @property
    def is_supported(self) -> bool:
        return self.intent in SUPPORTED_INTENTS


def invalid_intent() -> IntentRecord:
    return IntentRecord(intent=INVALID_INTENT, raw=INVALID_INTENT_LINE)


def _segment_value(segment: Optional[str]) -> Optional[str]:
    if segment is None:
        return None
    key, sep, value = segment.partition("=")
    if not sep:
        return None
    return value.strip()


def parse_intent_line(line: str) -> IntentRecord:
    """
    Tokenize a `key=value;key=value` reply into an IntentRecord.

    Segments 1..3 are read positionally as subscriberNo, month and year;
    `amount` is looked up by key because most intents omit it. Anything that
    does not start with `intent=<name>` becomes the invalid record.
    """
    line = (line or "").strip()
    if not line.startswith("intent="):
        return invalid_intent()

    segments = [s.strip() for s in line.split(";")]
    intent = _segment_value(segments[0])
    if not intent:
        return invalid_intent()
    if intent == INVALID_INTENT:
        return invalid_intent()

    def positional(index: int) -> Optional[str]:
        return _segment_value(segments[index]) if index < len(segments) else None

    amount_segment = next((s for s in segments if s.startswith("amount=")), None)

    return IntentRecord(
        intent=intent,
        subscriberNo=positional(1),
        month=positional(2),
        year=positional(3),
        amount=_segment_value(amount_segment),
        raw=line,
    )
