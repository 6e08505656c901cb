# barbershop/booking.py
"""Appointment lifecycle: creation against the slot catalog and status changes."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from barbershop.data import shop_settings
from barbershop.errors import ConflictError, DomainError, NotFoundError
from barbershop.models import Appointment, Barber, Service
from barbershop.schemas import AppointmentCreate
from barbershop.slots import (
    SLOT_CATALOG, booked_times, meets_lead_time, release_stale_pending, shop_now, time_of_day,
)

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = {"cancelled", "completed"}


def create_appointment(session: Session, appt: AppointmentCreate, now: Optional[datetime] = None) -> Appointment:
    release_stale_pending(session)

    # 1) Validate service and barber
    service = session.get(Service, appt.service_id)
    if service is None:
        raise NotFoundError("Service not found")
    if session.get(Barber, appt.barber_id) is None:
        raise NotFoundError("Barber not found")

    # 2) Validate slot against the daily catalog and the lead time
    if appt.time not in SLOT_CATALOG:
        raise DomainError(400, f"{appt.time} is not a bookable time slot")
    if not meets_lead_time(appt.date, appt.time, now or shop_now()):
        raise ConflictError(
            f"Appointments must be booked at least {shop_settings['lead_hours']} hours in advance"
        )

    # 3) Reject slots already taken, same transaction as the insert
    if appt.time in booked_times(session, appt.barber_id, appt.date):
        raise ConflictError("Time slot is no longer available")

    db_appt = Appointment(
        service_id=service.id,
        barber_id=appt.barber_id,
        date=appt.date,
        time=appt.time,
        time_of_day=time_of_day(appt.time),
        first_name=appt.first_name,
        last_name=appt.last_name,
        email=appt.email,
        phone=appt.phone,
        notes=appt.notes,
        status="pending",
        total_price=service.price,
    )

    session.add(db_appt)
    try:
        session.commit()
    except IntegrityError:
        # uq_barber_slot caught a concurrent booking of the same slot
        session.rollback()
        raise ConflictError("Time slot is no longer available")

    session.refresh(db_appt)  # fills db_appt.id
    logger.info(
        "Appointment %d booked: barber %d on %s at %s",
        db_appt.id, db_appt.barber_id, db_appt.date, db_appt.time,
    )
    return db_appt


def get_appointment(session: Session, appointment_id: int) -> Appointment:
    appt = session.get(Appointment, appointment_id)
    if appt is None:
        raise NotFoundError("Appointment not found")
    return appt


def change_status(
    session: Session,
    appt: Appointment,
    status: str,
    payment_ref: Optional[str] = None,
) -> Appointment:
    if appt.status == status and payment_ref is None:
        return appt
    if appt.status in TERMINAL_STATUSES and appt.status != status:
        raise ConflictError(f"Appointment is already {appt.status}")

    previous = appt.status
    appt.status = status
    if payment_ref:
        appt.stripe_payment_id = payment_ref
    session.add(appt)
    try:
        session.commit()
    except IntegrityError:
        # uq_barber_slot rejected the update
        session.rollback()
        raise ConflictError("Time slot is no longer available")

    session.refresh(appt)
    logger.info("Appointment %d: %s -> %s", appt.id, previous, status)
    return appt


def confirm_payment(session: Session, appointment_id: int, payment_ref: str) -> Optional[Appointment]:
    """Payment-provider callback: pending (or already confirmed) becomes confirmed.

    A payment for an appointment cancelled in the meantime (usually by the
    pending TTL) restores it when the slot is still free. When the slot has
    been taken, ConflictError is raised and the caller refunds the payment.
    """
    appt = session.get(Appointment, appointment_id)
    if appt is None:
        logger.warning("Payment %s references unknown appointment %d", payment_ref, appointment_id)
        return None
    if appt.status == "cancelled":
        return _restore_paid(session, appt, payment_ref)
    if appt.status not in ("pending", "confirmed"):
        logger.warning(
            "Payment %s succeeded for appointment %d which is %s; leaving it unchanged",
            payment_ref, appointment_id, appt.status,
        )
        return appt
    return change_status(session, appt, "confirmed", payment_ref)


def _restore_paid(session: Session, appt: Appointment, payment_ref: str) -> Appointment:
    if appt.time in booked_times(session, appt.barber_id, appt.date):
        raise ConflictError("Time slot is no longer available")

    appt.status = "confirmed"
    appt.stripe_payment_id = payment_ref
    session.add(appt)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("Time slot is no longer available")

    session.refresh(appt)
    logger.info("Appointment %d restored by late payment %s", appt.id, payment_ref)
    return appt


def cancel_unpaid(session: Session, appointment_id: int) -> Optional[Appointment]:
    appt = session.get(Appointment, appointment_id)
    if appt is None or appt.status != "pending":
        return appt
    return change_status(session, appt, "cancelled")
