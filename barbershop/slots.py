# barbershop/slots.py
"""Appointment slot catalog and availability.

Slots are 12-hour clock strings such as ``"9:00 AM"``; the same strings are
stored on appointments, so availability is a set difference over strings
followed by a lead-time cut against the shop's wall clock.
"""

import logging
import re
from datetime import datetime, timedelta, timezone, date, time
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from sqlmodel import Session, select

from barbershop.data import shop_settings
from barbershop.models import Appointment, Barber, utcnow

logger = logging.getLogger(__name__)

SLOT_RE = re.compile(r"^(1[0-2]|0?[1-9]):([0-5]\d) (AM|PM)$")

TIME_OF_DAY = ("morning", "afternoon", "evening")


def parse_slot_time(value: str) -> time:
    """Parse ``"h:mm AM|PM"`` into a ``time``. Raises ValueError when malformed."""
    match = SLOT_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"Invalid time slot {value!r}, expected e.g. '9:30 AM'")
    hour, minute, period = int(match.group(1)), int(match.group(2)), match.group(3)

    # 12 AM is midnight, 12 PM is noon
    if period == "AM":
        hour = 0 if hour == 12 else hour
    elif hour != 12:
        hour += 12
    return time(hour, minute)


def format_slot_time(t: time) -> str:
    hour = t.hour % 12 or 12
    period = "AM" if t.hour < 12 else "PM"
    return f"{hour}:{t.minute:02d} {period}"


def time_of_day(value: str) -> str:
    """AM is morning, noon up to 5 PM is afternoon, the rest is evening."""
    hour = parse_slot_time(value).hour
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"


def build_slot_catalog(open_time: str, close_time: str, slot_minutes: int) -> List[str]:
    """Every start time from open (inclusive) to close (exclusive)."""
    day = date.min
    current = datetime.combine(day, time.fromisoformat(open_time))
    end = datetime.combine(day, time.fromisoformat(close_time))
    step = timedelta(minutes=slot_minutes)

    catalog = []
    while current < end:
        catalog.append(format_slot_time(current.time()))
        current += step
    return catalog


SLOT_CATALOG = build_slot_catalog(
    shop_settings["open_time"],
    shop_settings["close_time"],
    shop_settings["slot_minutes"],
)


def shop_tz() -> ZoneInfo:
    return ZoneInfo(shop_settings["timezone"])


def shop_now() -> datetime:
    """Current time in the shop's timezone (aware)."""
    return datetime.now(shop_tz())


def meets_lead_time(on_date: date, slot: str, now: datetime, lead: Optional[timedelta] = None) -> bool:
    """True when the slot starts at least ``lead`` real hours after ``now``.

    A naive ``now`` is shop wall-clock time. Both ends are compared in UTC so
    a DST change between now and the slot counts as the hour it really is.
    """
    if lead is None:
        lead = timedelta(hours=shop_settings["lead_hours"])
    tz = shop_tz()
    starts_at = datetime.combine(on_date, parse_slot_time(slot), tzinfo=tz)
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    return starts_at.astimezone(timezone.utc) - now.astimezone(timezone.utc) >= lead


def filter_available(
    catalog: Iterable[str],
    booked_times: Iterable[str],
    on_date: date,
    now: datetime,
    lead: Optional[timedelta] = None,
) -> List[str]:
    booked = set(booked_times)
    return [
        slot for slot in catalog
        if slot not in booked and meets_lead_time(on_date, slot, now, lead)
    ]


def group_by_time_of_day(slots: Iterable[str]) -> dict:
    grouped = {bucket: [] for bucket in TIME_OF_DAY}
    for slot in slots:
        grouped[time_of_day(slot)].append(slot)
    return grouped


def booked_times(session: Session, barber_id: int, on_date: date) -> List[str]:
    rows = session.exec(
        select(Appointment.time)
        .where(Appointment.barber_id == barber_id)
        .where(Appointment.date == on_date)
        .where(Appointment.status != "cancelled")
    ).all()
    return list(rows)


def release_stale_pending(session: Session, now: Optional[datetime] = None) -> int:
    """Cancel pending appointments whose payment never arrived within the TTL.

    ``now`` is an aware UTC datetime. Commits only when something expired;
    returns the number of appointments cancelled. A payment that lands after
    expiry is settled by ``booking.confirm_payment``.
    """
    cutoff = (now or utcnow()) - timedelta(minutes=shop_settings["pending_ttl_minutes"])
    stale = session.exec(
        select(Appointment)
        .where(Appointment.status == "pending")
        .where(Appointment.created_at < cutoff)
    ).all()

    for appt in stale:
        appt.status = "cancelled"
        session.add(appt)
    if stale:
        session.commit()
        logger.info("Expired %d stale pending appointment(s): %s", len(stale), [a.id for a in stale])
    return len(stale)


def get_available_time_slots(
    session: Session,
    on_date: date,
    barber_id: int,
    now: Optional[datetime] = None,
) -> List[str]:
    if session.get(Barber, barber_id) is None:
        return []

    release_stale_pending(session)
    taken = booked_times(session, barber_id, on_date)
    return filter_available(SLOT_CATALOG, taken, on_date, now or shop_now())
