import json
from typing import Optional

import stripe
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from parkfinder.application.providers import AbstractPaymentGateway, ProviderIntent, ProviderEvent
from parkfinder.config.settings_env import settings
from parkfinder.domain.exceptions import PaymentProviderError


def _get(obj, key, default=None):
    if obj is None:
        return default
    try:
        value = obj[key]
    except (KeyError, TypeError, IndexError):
        return default
    return default if value is None else value


def extract_card(intent) -> tuple:
    """Card brand and last four from whichever shape the intent arrived in."""
    candidates = [_get(intent, "payment_method_details")]

    latest_charge = _get(intent, "latest_charge")
    if not isinstance(latest_charge, str):
        candidates.append(_get(latest_charge, "payment_method_details"))

    # Older API versions embed the charges list
    charges = _get(_get(intent, "charges"), "data", [])
    if charges:
        candidates.append(_get(charges[0], "payment_method_details"))

    for details in candidates:
        card = _get(details, "card")
        if card:
            return _get(card, "brand"), _get(card, "last4")
    return None, None


def intent_from_object(intent) -> ProviderIntent:
    card_brand, last_four = extract_card(intent)
    return ProviderIntent(
        id=_get(intent, "id"),
        status=_get(intent, "status", "unknown"),
        amount_cents=int(_get(intent, "amount", 0)),
        client_secret=_get(intent, "client_secret"),
        card_brand=card_brand,
        last_four=last_four,
        last_payment_error=_get(_get(intent, "last_payment_error"), "message"),
    )


class StripePaymentGateway(AbstractPaymentGateway):
    def __init__(
        self,
        api_key: Optional[str] = settings.STRIPE_SECRET_KEY,
        webhook_secret: Optional[str] = settings.STRIPE_WEBHOOK_SECRET,
    ):
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def _require_key(self):
        if not self.api_key:
            raise PaymentProviderError("Payment provider is not configured")

    async def create_intent(self, amount_cents: int, currency: str, metadata: dict) -> ProviderIntent:
        self._require_key()
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.create,
                amount=amount_cents,
                currency=currency,
                metadata=metadata,
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe payment intent creation failed: {e}")
            raise PaymentProviderError(e.user_message or "Payment provider error") from e
        return intent_from_object(intent)

    async def retrieve_intent(self, intent_id: str) -> ProviderIntent:
        self._require_key()
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.retrieve,
                intent_id,
                expand=["latest_charge"],
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe payment intent lookup failed for {intent_id}: {e}")
            raise PaymentProviderError(e.user_message or "Payment provider error") from e
        return intent_from_object(intent)

    def parse_event(self, payload: bytes, signature: Optional[str]) -> ProviderEvent:
        if self.webhook_secret:
            try:
                event = stripe.Webhook.construct_event(
                    payload=payload, sig_header=signature, secret=self.webhook_secret
                )
            except stripe.SignatureVerificationError as e:
                raise ValueError(f"Invalid signature: {e}") from e
        else:
            # Unsigned deliveries are only accepted when no secret is configured
            event = json.loads(payload)

        event_type = _get(event, "type")
        if not event_type:
            raise ValueError("Event has no type")
        obj = _get(_get(event, "data"), "object")
        intent = intent_from_object(obj) if _get(obj, "id") else None
        return ProviderEvent(type=event_type, intent=intent)
