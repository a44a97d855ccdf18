# Overview: Service-layer operations for staff attendance; encapsulates business logic.

"""
Attendance Service

WHY: Staff clock in when they arrive and clock out when they leave. One
attendance cycle per user per studio-local day.

RULES:
- Clock-in is refused if today's cycle is complete (AlreadyCompletedError)
  or if any record is still open (AlreadyClockedInError)
- Clock-out closes the most recent open record, whatever day it was opened
"""

from __future__ import annotations

import math
from datetime import date, datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import AttendanceRecord, User
from .concurrency import lock_for_update, commit_or_conflict
from studiopos.time_utils import utcnow, studio_today, studio_day_bounds


ATTENDANCE_STATUS_PRESENT = "Hadir"


class AttendanceError(ValueError):
    """Raised for invalid attendance operations."""


class AlreadyClockedInError(AttendanceError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("You have already clocked in")


class AlreadyCompletedError(AttendanceError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("You have already clocked in and out today. Try again tomorrow.")


class NoOpenRecordError(AttendanceError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("There is no open attendance record to clock out")


def find_open_attendance(user_id: int) -> AttendanceRecord | None:
    """Most recent record without a clock-out, any day."""
    return db.session.query(AttendanceRecord).filter_by(
        user_id=user_id,
        clock_out_at=None,
    ).order_by(AttendanceRecord.clock_in_at.desc()).first()


def find_attendance_for_day(user_id: int, day: date) -> AttendanceRecord | None:
    return db.session.query(AttendanceRecord).filter_by(
        user_id=user_id,
        work_date=day,
    ).first()


def clock_in(user_id: int, now: datetime | None = None) -> AttendanceRecord:
    now = now or utcnow()
    today = studio_today(now)

    todays = find_attendance_for_day(user_id, today)
    if todays:
        if todays.clock_out_at is not None:
            raise AlreadyCompletedError(user_id)
        raise AlreadyClockedInError(user_id)

    # A record left open on an earlier day must be closed first
    if find_open_attendance(user_id):
        raise AlreadyClockedInError(user_id)

    record = AttendanceRecord(
        user_id=user_id,
        work_date=today,
        clock_in_at=now,
        status=ATTENDANCE_STATUS_PRESENT,
    )
    db.session.add(record)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        # A concurrent clock-in for the same day won
        existing = find_attendance_for_day(user_id, today)
        if existing and existing.clock_out_at is not None:
            raise AlreadyCompletedError(user_id)
        raise AlreadyClockedInError(user_id)

    current_app.logger.info("User %s clocked in at %s", user_id, now.isoformat())
    return record


def clock_out(user_id: int, now: datetime | None = None) -> AttendanceRecord:
    now = now or utcnow()

    record = lock_for_update(
        db.session.query(AttendanceRecord).filter_by(user_id=user_id, clock_out_at=None)
        .order_by(AttendanceRecord.clock_in_at.desc())
    ).first()
    if not record:
        raise NoOpenRecordError(user_id)

    record.clock_out_at = now
    record.worked_minutes = max(int((now - record.clock_in_at).total_seconds() // 60), 0)
    commit_or_conflict("Attendance record")

    current_app.logger.info(
        "User %s clocked out at %s (%s minutes)", user_id, now.isoformat(), record.worked_minutes
    )
    return record


def get_current_status(user_id: int, now: datetime | None = None) -> dict:
    today = studio_today(now)
    open_record = find_open_attendance(user_id)
    if open_record:
        return {"status": "CLOCKED_IN", "record": open_record.to_dict()}

    todays = find_attendance_for_day(user_id, today)
    if todays:
        return {"status": "COMPLETED", "record": todays.to_dict()}
    return {"status": "CLOCKED_OUT", "record": None}


def list_attendance(
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = 1,
    limit: int = 10,
    paginate: bool = True,
) -> dict:
    """Attendance records newest first, optionally within a studio-local date range."""
    page = max(page, 1)
    limit = max(limit, 1)

    query = db.session.query(AttendanceRecord)
    if start_date:
        query = query.filter(AttendanceRecord.clock_in_at >= studio_day_bounds(start_date)[0])
    if end_date:
        query = query.filter(AttendanceRecord.clock_in_at < studio_day_bounds(end_date)[1])

    total = query.count()
    ordered = query.order_by(AttendanceRecord.clock_in_at.desc(), AttendanceRecord.id.desc())
    if paginate:
        ordered = ordered.offset((page - 1) * limit).limit(limit)
    records = ordered.all()

    # Batch-resolve usernames
    user_ids = {r.user_id for r in records}
    users = {u.id: u.username for u in db.session.query(User.id, User.username).filter(User.id.in_(user_ids)).all()} if user_ids else {}

    result = []
    for r in records:
        d = r.to_dict()
        d["username"] = users.get(r.user_id)
        result.append(d)

    return {
        "records": result,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit) if total else 0,
    }
