import logging
from typing import Optional

import httpx

from configurations.config import Settings


logger = logging.getLogger("billing_gateway.intent_agent")


INTENT_PROMPT = (
    "Extract intent and parameters from this message.\n"
    "Supported intents: query_bill, query_bill_detailed, make_payment, bill_history.\n\n"
    "Rules:\n"
    "1. Asking how much a bill is for a month -> query_bill.\n"
    "2. Asking for a breakdown of a bill (data, minutes, charges) -> query_bill_detailed.\n"
    "3. Paying (part of) a bill -> make_payment, and include the amount.\n"
    "4. Asking for past bills or payment status -> bill_history.\n\n"
    "Expected format: intent=<intent_name>;subscriberNo=<value>;month=<value>;year=<value>;amount=<value>\n"
    "Reply with that single line only.\n\n"
    'Message: "{message}"'
)


class IntentAgentError(RuntimeError):
    """The model endpoint answered, but not with a usable completion."""


def build_prompt(message: str) -> str:
    return INTENT_PROMPT.format(message=message)


class OllamaIntentAgent:
    """
    Asks an Ollama model to classify a chat message.

    Talks to the non-streaming /api/generate endpoint and returns the raw
    completion text. Transport and protocol errors are not caught here.
    """

    def __init__(
        self,
        *,
        base_url: str,
        model: str,
        timeout_s: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout_s = timeout_s
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "OllamaIntentAgent":
        return cls(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            timeout_s=settings.ollama_timeout_s,
        )

    async def run(self, message: str) -> str:
        payload = {
            "model": self.model,
            "prompt": build_prompt(message),
            "stream": False,
        }
        url = f"{self.base_url}/api/generate"
        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
            r = await client.post(url, json=payload)
            r.raise_for_status()
            data = r.json()

        # Ollama returns: {"model": "...", "response": "...", "done": true, ...}
        reply = data.get("response") if isinstance(data, dict) else None
        if not isinstance(reply, str):
            raise IntentAgentError("Model response did not contain a 'response' string")

        logger.info(f"[MODEL REPLY] model={self.model}, reply='{reply.strip()[:200]}'")
        return reply
