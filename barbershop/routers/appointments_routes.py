# barbershop/routers/appointments_routes.py

from datetime import date
from typing import Optional, List

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from barbershop import booking
from barbershop.db import get_session
from barbershop.deps import get_admin_user
from barbershop.models import Appointment
from barbershop.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentReceipt,
    AppointmentStatus,
    AppointmentStatusUpdate,
    GroupedTimeSlots,
)
from barbershop.slots import get_available_time_slots, group_by_time_of_day


router = APIRouter(
    prefix="/api",
    tags=["appointments"],
)


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
):
    return booking.create_appointment(session, appt)


@router.get("/appointments", response_model=List[AppointmentPublic])
def list_appointments(
    status: Optional[AppointmentStatus] = None,
    barber_id: Optional[int] = Query(default=None, alias="barberId"),
    on_date: Optional[date] = Query(default=None, alias="date"),
    session: Session = Depends(get_session),
    admin: dict = Depends(get_admin_user),
):
    stmt = select(Appointment)

    if status is not None:
        stmt = stmt.where(Appointment.status == status.value)
    if barber_id is not None:
        stmt = stmt.where(Appointment.barber_id == barber_id)
    if on_date is not None:
        stmt = stmt.where(Appointment.date == on_date)

    stmt = stmt.order_by(Appointment.date, Appointment.id)
    return session.exec(stmt).all()


@router.get("/appointments/{appt_id}", response_model=AppointmentReceipt)
def get_appointment(appt_id: int, session: Session = Depends(get_session)):
    return booking.get_appointment(session, appt_id)


@router.patch("/appointments/{appt_id}/status", response_model=AppointmentPublic)
def update_appointment_status(
    appt_id: int,
    update: AppointmentStatusUpdate,
    session: Session = Depends(get_session),
    admin: dict = Depends(get_admin_user),
):
    target = booking.get_appointment(session, appt_id)
    return booking.change_status(session, target, update.status.value)


@router.get("/time-slots", response_model=List[str])
def time_slots(
    on_date: date = Query(alias="date"),
    barber_id: int = Query(alias="barberId"),
    session: Session = Depends(get_session),
):
    return get_available_time_slots(session, on_date, barber_id)


@router.get("/time-slots/grouped", response_model=GroupedTimeSlots)
def grouped_time_slots(
    on_date: date = Query(alias="date"),
    barber_id: int = Query(alias="barberId"),
    session: Session = Depends(get_session),
):
    return group_by_time_of_day(get_available_time_slots(session, on_date, barber_id))
