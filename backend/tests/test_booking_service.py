"""Slot availability tests."""

from datetime import date

from conftest import BOOKING_DAY
from studiopos.services import booking_service
from studiopos.services.transaction_service import create_transaction


def test_everything_free_on_empty_day(sessions):
    availability = booking_service.check_availability(BOOKING_DAY)

    assert set(availability) == {s.id for s in sessions}
    assert all(availability.values())


def test_booked_slot_is_unavailable(make_request, sessions):
    create_transaction(make_request([sessions[0], sessions[3]]))

    availability = booking_service.check_availability(BOOKING_DAY)
    assert availability[sessions[0].id] is False
    assert availability[sessions[3].id] is False
    assert availability[sessions[1].id] is True

    assert booking_service.find_sessions_booked_on(BOOKING_DAY) == {sessions[0].id, sessions[3].id}
    assert not booking_service.is_slot_available(sessions[0].id, BOOKING_DAY)
    assert booking_service.is_slot_available(sessions[0].id, date(2030, 1, 16))


def test_accepts_iso_strings(make_request, sessions):
    create_transaction(make_request([sessions[0]]))

    assert not booking_service.is_slot_available(sessions[0].id, "2030-01-15")
    assert booking_service.find_sessions_booked_on("2030-01-15") == {sessions[0].id}


def test_find_booked_slots_keeps_input_order(make_request, sessions):
    create_transaction(make_request([sessions[2], sessions[5]]))

    slots = [
        (sessions[5].id, BOOKING_DAY),
        (sessions[1].id, BOOKING_DAY),
        (sessions[2].id, BOOKING_DAY),
        (sessions[2].id, date(2030, 1, 16)),
    ]
    assert booking_service.find_booked_slots(slots) == [
        (sessions[5].id, BOOKING_DAY),
        (sessions[2].id, BOOKING_DAY),
    ]
    assert booking_service.find_booked_slots([]) == []
