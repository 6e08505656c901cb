# barbershop/routers/payments_routes.py

import logging

import stripe
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session

from barbershop import booking
from barbershop.cart import cart_lines, cart_totals, clear_cart
from barbershop.db import get_session
from barbershop.errors import ConflictError
from barbershop.payments import PaymentGateway, get_payment_gateway
from barbershop.schemas import (
    AppointmentPaymentRequest,
    ProductPaymentRequest,
    PaymentIntentResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["payments"],
)


def _create_intent(gateway: PaymentGateway, amount, metadata: dict) -> dict:
    try:
        return gateway.create_payment_intent(amount, metadata)
    except stripe.StripeError as exc:
        logger.exception("Stripe API error while creating payment intent", exc_info=exc)
        raise HTTPException(status_code=502, detail="An error occurred while processing the payment.")


@router.post("/create-appointment-payment", response_model=PaymentIntentResponse)
def create_appointment_payment(
    req: AppointmentPaymentRequest,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    appt = booking.get_appointment(session, req.appointment_id)
    if appt.status != "pending":
        raise ConflictError(f"Appointment is {appt.status} and cannot be paid")

    intent = _create_intent(gateway, appt.total_price, {"appointment_id": appt.id})

    # Keep the intent id so a late or failed payment can be traced back
    appt.stripe_payment_id = intent["id"]
    session.add(appt)
    session.commit()

    return {"client_secret": intent["client_secret"], "amount": appt.total_price}


@router.post("/create-product-payment", response_model=PaymentIntentResponse)
def create_product_payment(
    req: ProductPaymentRequest,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    lines = cart_lines(session, req.cart_id)
    if not lines:
        raise HTTPException(status_code=400, detail="Cart is empty")

    total = cart_totals(lines)["total"]
    intent = _create_intent(gateway, total, {"cart_id": req.cart_id})
    return {"client_secret": intent["client_secret"], "amount": total}


def handle_payment_event(session: Session, gateway: PaymentGateway, event) -> None:
    evt_type = event.get("type")
    intent = event.get("data", {}).get("object", {})
    intent_id = intent.get("id")
    metadata = intent.get("metadata") or {}
    appointment_id = metadata.get("appointment_id")
    if appointment_id and not str(appointment_id).isdigit():
        logger.warning("Webhook event %s carries a malformed appointment id %r", event.get("id"), appointment_id)
        appointment_id = None
    cart_id = metadata.get("cart_id")

    if evt_type == "payment_intent.succeeded":
        if appointment_id:
            try:
                booking.confirm_payment(session, int(appointment_id), intent_id)
            except ConflictError:
                logger.warning(
                    "Payment %s arrived after appointment %s lost its slot; refunding",
                    intent_id, appointment_id,
                )
                gateway.refund_payment(intent_id)
        if cart_id:
            clear_cart(session, cart_id)
    elif evt_type in ("payment_intent.payment_failed", "payment_intent.canceled"):
        if appointment_id:
            booking.cancel_unpaid(session, int(appointment_id))
            logger.info("Payment %s for appointment %s did not go through (%s)", intent_id, appointment_id, evt_type)
    else:
        logger.debug("Ignoring webhook event %s", evt_type)


@router.post("/stripe-webhook")
async def stripe_webhook(
    request: Request,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    payload = await request.body()
    try:
        event = gateway.parse_webhook_event(payload, request.headers.get("Stripe-Signature"))
    except ValueError:
        logger.warning("Invalid webhook payload")
        raise HTTPException(status_code=400, detail="Invalid payload")
    except stripe.SignatureVerificationError as exc:
        logger.warning("Webhook signature verification failed: %s", exc)
        raise HTTPException(status_code=400, detail="Invalid signature")

    # database work stays off the event loop
    await run_in_threadpool(handle_payment_event, session, gateway, event)

    # Acknowledge receipt so Stripe stops retrying
    return {"received": True}
