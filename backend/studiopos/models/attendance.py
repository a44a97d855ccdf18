from __future__ import annotations

from ..extensions import db
from studiopos.time_utils import to_utc_z


class AttendanceRecord(db.Model):
    """
    Staff attendance (one clock-in/clock-out cycle per user per day).

    LIFECYCLE:
    - Open: created on clock-in, clock_out_at is NULL
    - Closed: clock_out_at set once on clock-out

    work_date is the studio-local calendar day of clock_in_at. The
    (user_id, work_date) unique constraint keeps one record per day even
    under concurrent clock-ins.
    """
    __tablename__ = "attendance_records"
    __table_args__ = (
        db.UniqueConstraint("user_id", "work_date", name="uq_attendance_user_day"),
        db.Index("ix_attendance_user_open", "user_id", "clock_out_at"),
        db.Index("ix_attendance_clock_in", "clock_in_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    work_date = db.Column(db.Date, nullable=False)

    clock_in_at = db.Column(db.DateTime(timezone=True), nullable=False)
    clock_out_at = db.Column(db.DateTime(timezone=True), nullable=True)

    status = db.Column(db.String(16), nullable=False, default="Hadir")

    # Calculated on clock-out
    worked_minutes = db.Column(db.Integer, nullable=True)

    user = db.relationship("User", backref=db.backref("attendance_records", lazy=True))

    @property
    def is_open(self) -> bool:
        return self.clock_out_at is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "work_date": self.work_date.isoformat() if self.work_date else None,
            "clock_in_at": to_utc_z(self.clock_in_at),
            "clock_out_at": to_utc_z(self.clock_out_at) if self.clock_out_at else None,
            "status": self.status,
            "worked_minutes": self.worked_minutes,
        }
