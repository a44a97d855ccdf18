"""
Attendance tests.

Verifies:
- One clock-in/clock-out cycle per user per studio-local day
- Clock-out closes the open record even when it was opened on an earlier day
- Status and listing
"""

from datetime import date, datetime

import pytest

from studiopos.models import AttendanceRecord
from studiopos.services import attendance_service
from studiopos.services.attendance_service import (
    AlreadyClockedInError,
    AlreadyCompletedError,
    NoOpenRecordError,
)


# 10:00 and 18:30 in Asia/Jakarta on 2030-01-15
MORNING = datetime(2030, 1, 15, 3, 0)
EVENING = datetime(2030, 1, 15, 11, 30)
NEXT_MORNING = datetime(2030, 1, 16, 3, 0)


class TestClockCycle:

    def test_clock_in_creates_open_record(self, staff_user):
        record = attendance_service.clock_in(staff_user.id, now=MORNING)

        assert record.id is not None
        assert record.status == "Hadir"
        assert record.work_date == date(2030, 1, 15)
        assert record.clock_out_at is None
        assert record.is_open

    def test_clock_in_twice_same_day(self, staff_user):
        attendance_service.clock_in(staff_user.id, now=MORNING)

        with pytest.raises(AlreadyClockedInError):
            attendance_service.clock_in(staff_user.id, now=EVENING)

    def test_clock_in_after_completed_day(self, staff_user):
        attendance_service.clock_in(staff_user.id, now=MORNING)
        attendance_service.clock_out(staff_user.id, now=EVENING)

        with pytest.raises(AlreadyCompletedError):
            attendance_service.clock_in(staff_user.id, now=EVENING)

    def test_clock_out_without_open_record(self, staff_user):
        with pytest.raises(NoOpenRecordError):
            attendance_service.clock_out(staff_user.id, now=EVENING)

    def test_clock_out_twice(self, staff_user):
        attendance_service.clock_in(staff_user.id, now=MORNING)
        attendance_service.clock_out(staff_user.id, now=EVENING)

        with pytest.raises(NoOpenRecordError):
            attendance_service.clock_out(staff_user.id, now=EVENING)

    def test_clock_out_records_worked_minutes(self, staff_user):
        attendance_service.clock_in(staff_user.id, now=MORNING)
        record = attendance_service.clock_out(staff_user.id, now=EVENING)

        assert record.clock_out_at == EVENING
        assert record.worked_minutes == 510
        assert not record.is_open

    def test_new_day_allows_new_cycle(self, db_session, staff_user):
        attendance_service.clock_in(staff_user.id, now=MORNING)
        attendance_service.clock_out(staff_user.id, now=EVENING)

        record = attendance_service.clock_in(staff_user.id, now=NEXT_MORNING)
        assert record.work_date == date(2030, 1, 16)
        assert db_session.query(AttendanceRecord).filter_by(user_id=staff_user.id).count() == 2

    def test_users_are_independent(self, staff_user, admin_user):
        attendance_service.clock_in(staff_user.id, now=MORNING)
        record = attendance_service.clock_in(admin_user.id, now=MORNING)
        assert record.user_id == admin_user.id

    def test_work_date_uses_studio_timezone(self, staff_user):
        # 18:00 UTC on the 15th is 01:00 on the 16th in Asia/Jakarta
        record = attendance_service.clock_in(staff_user.id, now=datetime(2030, 1, 15, 18, 0))
        assert record.work_date == date(2030, 1, 16)


class TestForgottenClockOut:

    def test_open_record_from_yesterday_blocks_clock_in(self, staff_user):
        attendance_service.clock_in(staff_user.id, now=MORNING)

        with pytest.raises(AlreadyClockedInError):
            attendance_service.clock_in(staff_user.id, now=NEXT_MORNING)

    def test_clock_out_closes_yesterdays_record(self, staff_user):
        opened = attendance_service.clock_in(staff_user.id, now=MORNING)

        closed = attendance_service.clock_out(staff_user.id, now=NEXT_MORNING)
        assert closed.id == opened.id
        assert closed.work_date == date(2030, 1, 15)
        assert closed.worked_minutes == 24 * 60

        # Today has no record yet, so a fresh cycle can start
        record = attendance_service.clock_in(staff_user.id, now=datetime(2030, 1, 16, 4, 0))
        assert record.work_date == date(2030, 1, 16)


class TestStatusAndListing:

    def test_status_transitions(self, staff_user):
        uid = staff_user.id
        assert attendance_service.get_current_status(uid, now=MORNING)["status"] == "CLOCKED_OUT"

        attendance_service.clock_in(uid, now=MORNING)
        status = attendance_service.get_current_status(uid, now=MORNING)
        assert status["status"] == "CLOCKED_IN"
        assert status["record"]["clock_out_at"] is None

        attendance_service.clock_out(uid, now=EVENING)
        assert attendance_service.get_current_status(uid, now=EVENING)["status"] == "COMPLETED"
        assert attendance_service.get_current_status(uid, now=NEXT_MORNING)["status"] == "CLOCKED_OUT"

    def test_list_attendance(self, staff_user, admin_user):
        attendance_service.clock_in(staff_user.id, now=MORNING)
        attendance_service.clock_in(admin_user.id, now=NEXT_MORNING)

        result = attendance_service.list_attendance()
        assert result["total"] == 2
        # Newest first, with usernames
        assert result["records"][0]["username"] == "admin"
        assert result["records"][1]["username"] == "kasir"

        only_first_day = attendance_service.list_attendance(
            start_date=date(2030, 1, 15), end_date=date(2030, 1, 15)
        )
        assert only_first_day["total"] == 1
        assert only_first_day["records"][0]["user_id"] == staff_user.id
