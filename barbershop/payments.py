# barbershop/payments.py
"""Thin wrapper around Stripe payment intents and webhook verification."""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import stripe
from fastapi import HTTPException

from barbershop import config

logger = logging.getLogger(__name__)


def to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway:
    def __init__(self, api_key: str, webhook_secret: str = "", currency: str = "usd"):
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.currency = currency

    def create_payment_intent(self, amount: Decimal, metadata: dict) -> dict:
        """Create a payment intent; returns its id and client secret.

        Raises ``stripe.StripeError`` when the provider call fails.
        """
        intent = stripe.PaymentIntent.create(
            api_key=self.api_key,
            amount=to_cents(amount),
            currency=self.currency,
            metadata={k: str(v) for k, v in metadata.items()},
        )
        logger.info("Created payment intent %s for %s %s (%s)", intent.id, amount, self.currency, metadata)
        return {"id": intent.id, "client_secret": intent.client_secret}

    def refund_payment(self, intent_id: str) -> str:
        refund = stripe.Refund.create(api_key=self.api_key, payment_intent=intent_id)
        logger.info("Refunded payment intent %s (refund %s)", intent_id, refund.id)
        return refund.id

    def parse_webhook_event(self, payload: bytes, signature: Optional[str]) -> stripe.Event:
        """Verify the Stripe-Signature header and decode the event.

        Raises ``stripe.SignatureVerificationError`` on a bad signature and
        ``ValueError`` on a payload that is not JSON.
        """
        if not self.webhook_secret:
            raise HTTPException(status_code=500, detail="Stripe webhook is not configured")
        return stripe.Webhook.construct_event(payload, signature or "", self.webhook_secret)


def get_payment_gateway() -> PaymentGateway:
    if not config.STRIPE_SECRET_KEY:
        logger.warning("Stripe secret key not configured")
        raise HTTPException(status_code=500, detail="Stripe is not configured")
    return PaymentGateway(
        config.STRIPE_SECRET_KEY,
        config.STRIPE_WEBHOOK_SECRET,
        config.STRIPE_CURRENCY,
    )
