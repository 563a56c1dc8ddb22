# FILE: services/billing_client.py
"""
Billing API client: one outbound call per intent, plus the login pass-through.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from configurations.config import Settings
from core.billing_result import (
    BillingResult,
    Found,
    NotFound,
    TransportError,
    Unrouted,
    to_json_text,
)
from core.intent import IntentRecord
from services.months import normalize_month

logger = logging.getLogger("billing_gateway.billing_client")


UNDERSTAND_FAILURE_TEXT = (
    "⚠️ I couldn't understand your request. Please try again with a clear question."
)
LOGIN_FAILED_TEXT = "Login failed"


@dataclass(frozen=True)
class BillingRoute:
    method: str
    path: str
    params: Dict[str, Any]


@dataclass(frozen=True)
class LoginResult:
    status_code: int
    token: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def route_for(record: IntentRecord) -> Optional[BillingRoute]:
    """
    Map an intent to the downstream call it needs.
    Returns None when the intent has no route.
    """
    month = normalize_month(record.month)
    period = {
        "subscriberNo": record.subscriberNo,
        "month": month,
        "year": record.year,
    }

    if record.intent == "query_bill":
        return BillingRoute("GET", "/bill/calculate", period)
    if record.intent == "query_bill_detailed":
        return BillingRoute("GET", "/bill/detailed", period)
    if record.intent == "make_payment":
        amount = record.amount if record.amount is not None else "0"
        return BillingRoute("POST", "/bill/pay", {**period, "amount": amount})
    if record.intent == "bill_history":
        return BillingRoute("GET", "/bill/history", {"subscriberNo": record.subscriberNo})
    return None


class BillingClient:
    def __init__(
        self,
        *,
        base_url: str,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "BillingClient":
        return cls(base_url=settings.billing_api_base_url, timeout_s=settings.billing_timeout_s)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_s,
            transport=self.transport,
            follow_redirects=True,
        )

    async def fetch(self, record: IntentRecord, auth_token: Optional[str]) -> BillingResult:
        if record.is_invalid:
            return Unrouted(text=UNDERSTAND_FAILURE_TEXT)

        if not record.is_supported:
            return Unrouted(text=f"Unsupported intent: {record.intent}")
        route = route_for(record)

        params = {k: v for k, v in route.params.items() if v is not None}
        headers = {
            "Authorization": auth_token or "",
            "Content-Type": "application/json",
        }
        logger.info(f"[BILLING CALL] intent={record.intent}, {route.method} {route.path} params={params}")

        try:
            async with self._client() as client:
                r = await client.request(route.method, route.path, params=params, headers=headers)
                r.raise_for_status()
                return Found(payload=r.json())
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 409:
                logger.info(f"[BILLING NO DATA] intent={record.intent}, status=409")
                return NotFound(status=status)
            logger.warning(f"[BILLING ERROR] intent={record.intent}, status={status}")
            return TransportError(detail=f"HTTP {status}")
        except httpx.HTTPError as e:
            logger.warning(f"[BILLING NO RESPONSE] intent={record.intent}, error={e!r}")
            return TransportError(detail=str(e) or type(e).__name__)
        except ValueError as e:
            # 2xx with a body that is not JSON
            logger.warning(f"[BILLING BAD BODY] intent={record.intent}, error={e}")
            return TransportError(detail="Response body is not valid JSON")

    async def call_billing_api(self, record: IntentRecord, auth_token: Optional[str]) -> str:
        """Run the intent's call and return the body as JSON text (or the noData sentinel)."""
        result = await self.fetch(record, auth_token)
        return to_json_text(result)

    async def login(self, username: str, password: str) -> LoginResult:
        try:
            async with self._client() as client:
                r = await client.post(
                    "/auth/login", params={"username": username, "password": password}
                )
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as e:
            error = _error_field(e.response) or LOGIN_FAILED_TEXT
            logger.warning(f"[LOGIN FAILED] status={e.response.status_code}, error='{error}'")
            return LoginResult(status_code=e.response.status_code, error=error)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"[LOGIN FAILED] no usable response, error={e!r}")
            return LoginResult(status_code=500, error=LOGIN_FAILED_TEXT)

        token = data.get("token") if isinstance(data, dict) else None
        return LoginResult(status_code=200, token=token)


def _error_field(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None
