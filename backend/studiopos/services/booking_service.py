# Overview: Slot availability checks for studio sessions.

"""
Booking Conflict Checker

A slot is one catalog session on one calendar date. A slot is unavailable
iff some transaction already holds the exact (session_id, session_date)
pair. These reads are advisory (used to render free slots and to fail
fast); the unique constraint on transaction_sessions is what actually
prevents double booking when two requests race.
"""

from __future__ import annotations

from datetime import date

from ..extensions import db
from ..models import TransactionSession
from studiopos.time_utils import parse_calendar_date
from .catalog_service import Catalog, get_catalog


def find_sessions_booked_on(day) -> set[int]:
    """Session ids already booked on the given calendar day."""
    day = parse_calendar_date(day)
    rows = db.session.query(TransactionSession.session_id).filter(
        TransactionSession.session_date == day
    ).all()
    return {session_id for (session_id,) in rows}


def is_slot_available(session_id: int, day) -> bool:
    day = parse_calendar_date(day)
    exists = db.session.query(TransactionSession.id).filter_by(
        session_id=session_id,
        session_date=day,
    ).first()
    return exists is None


def find_booked_slots(slots: list[tuple[int, date]]) -> list[tuple[int, date]]:
    """Subset of (session_id, date) pairs that are already taken, in input order."""
    if not slots:
        return []
    booked: dict[date, set[int]] = {}
    for _, day in slots:
        if day not in booked:
            booked[day] = find_sessions_booked_on(day)
    return [(session_id, day) for session_id, day in slots if session_id in booked[day]]


def check_availability(day, catalog: Catalog | None = None) -> dict[int, bool]:
    """Every catalog session mapped to whether it is still free on `day`."""
    booked = find_sessions_booked_on(day)
    return {s.id: s.id not in booked for s in get_catalog(catalog).list_sessions()}
