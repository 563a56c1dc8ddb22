# core/billing_result.py
import json
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict


NO_DATA_TEXT = json.dumps({"noData": True}, separators=(",", ":"))


class Found(BaseModel):
    """Downstream answered 2xx with a JSON body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["found"] = "found"
    payload: Any = None


class NotFound(BaseModel):
    """Downstream answered 409, its way of saying there is no such bill."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["not_found"] = "not_found"
    status: int = 409


class TransportError(BaseModel):
    """Any other failure: error status, unreadable body, or no response at all."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["transport_error"] = "transport_error"
    detail: str


class Unrouted(BaseModel):
    """The intent never reached the network; `text` is shown to the user as-is."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unrouted"] = "unrouted"
    text: str


BillingResult = Union[Found, NotFound, TransportError, Unrouted]


def to_json_text(result: BillingResult) -> str:
    """
    Collapse a BillingResult into the text handed to the formatter.

    NotFound and TransportError both become the `{"noData":true}` sentinel.
    """
    if isinstance(result, Found):
        return json.dumps(result.payload, separators=(",", ":"), ensure_ascii=False)
    if isinstance(result, Unrouted):
        return result.text
    return NO_DATA_TEXT
