import json

from core.billing_result import (
    NO_DATA_TEXT,
    Found,
    NotFound,
    TransportError,
    Unrouted,
    to_json_text,
)


def test_no_data_sentinel_is_literal():
    assert NO_DATA_TEXT == '{"noData":true}'


def test_found_payload_is_reserialized():
    text = to_json_text(Found(payload={"totalAmount": 45.5, "paid": False}))
    assert json.loads(text) == {"totalAmount": 45.5, "paid": False}


def test_found_list_payload_is_reserialized():
    assert json.loads(to_json_text(Found(payload=[1, 2]))) == [1, 2]


def test_not_found_and_transport_error_collapse_to_sentinel():
    assert to_json_text(NotFound()) == NO_DATA_TEXT
    assert to_json_text(TransportError(detail="HTTP 503")) == NO_DATA_TEXT


def test_unrouted_text_passes_through():
    assert to_json_text(Unrouted(text="Unsupported intent: x")) == "Unsupported intent: x"
