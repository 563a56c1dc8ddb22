import logging
from typing import Optional

from fastapi import HTTPException

from agents.intent_agent import OllamaIntentAgent
from executors.base import BaseExecutor
from models.gateway import ChatRequest, ChatResponse
from services.billing_client import BillingClient
from services.intent_extractor import extract_intent
from services.response_formatter import format_response

logger = logging.getLogger("billing_gateway.chat")

CHAT_FAILED_TEXT = "Intent analysis or API call failed."


class ChatExecutor(BaseExecutor):
    """
    Runs one chat message through Extractor -> Billing Client -> Formatter,
    strictly in that order.
    """

    def __init__(self, agent: OllamaIntentAgent, billing: BillingClient, debug: bool = False):
        self.agent = agent
        self.billing = billing
        self.debug = debug

    async def execute(self, request: ChatRequest, auth_token: Optional[str] = None) -> dict:
        try:
            extracted, record = await extract_intent(request.message, self.agent)
            logger.info(f"[INTENT] intent={record.intent}, extracted='{extracted}'")

            api_text = await self.billing.call_billing_api(record, auth_token)
            reply = format_response(record, api_text)

            return ChatResponse(
                message=request.message,
                extractedIntent=extracted,
                userFriendlyResponse=reply,
            ).model_dump()

        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"[CHAT ERROR] exception={e!r}")
            raise HTTPException(
                status_code=500,
                detail=str(e) if self.debug else CHAT_FAILED_TEXT,
            )
