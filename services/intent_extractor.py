# services/intent_extractor.py

import logging
from typing import Tuple

from agents.intent_agent import OllamaIntentAgent
from core.intent import IntentRecord, parse_intent_line

logger = logging.getLogger("billing_gateway.intent_extractor")


async def extract_intent(message: str, agent: OllamaIntentAgent) -> Tuple[str, IntentRecord]:
    """
    Classify a chat message into an IntentRecord.

    Returns the extracted intent line alongside the record. The line either
    starts with `intent=` or is exactly `intent=invalid`. Failures talking to
    the model propagate to the caller.
    """
    reply = (await agent.run(message)).strip()
    record = parse_intent_line(reply)

    if record.is_invalid and reply != record.raw:
        logger.warning(f"[INVALID INTENT FORMAT] reply='{reply[:200]}'")

    return record.raw, record
