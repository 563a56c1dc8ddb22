import argparse
import asyncio

from agents.intent_agent import OllamaIntentAgent
from configurations.config import load_settings
from services.billing_client import BillingClient
from services.intent_extractor import extract_intent
from services.response_formatter import format_response


async def main(message: str, token: str | None) -> None:
    settings = load_settings()
    agent = OllamaIntentAgent.from_settings(settings)
    billing = BillingClient.from_settings(settings)

    extracted, record = await extract_intent(message, agent)
    print("Extracted intent:", extracted)

    api_text = await billing.call_billing_api(record, token)
    print("Billing API response:", api_text)

    print()
    print(format_response(record, api_text))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(prog="billing-chat")
    parser.add_argument("message", type=str, help="e.g. \"What is my bill for March 2024? Subscriber 123\"")
    parser.add_argument("--token", type=str, default=None, help="Authorization header value to forward")
    args = parser.parse_args()

    asyncio.run(main(args.message, args.token))
