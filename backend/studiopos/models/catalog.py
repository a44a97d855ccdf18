from __future__ import annotations

from ..extensions import db
from studiopos.time_utils import to_utc_z


class Session(db.Model):
    """
    Bookable studio time-slot (e.g. "Sesi 1 (11.00 - 13.00)").

    Read-only to the booking core; a slot on a given calendar date is
    booked through TransactionSession.
    """
    __tablename__ = "studio_sessions"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)

    # Whole Rupiah
    price = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Session id={self.id} name={self.name!r} price={self.price}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "created_at": to_utc_z(self.created_at),
        }


class AddOn(db.Model):
    """Optional item sold alongside a booking (strings, sticks, drinks)."""
    __tablename__ = "add_ons"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)
    price = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<AddOn id={self.id} name={self.name!r} price={self.price}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "created_at": to_utc_z(self.created_at),
        }
