from __future__ import annotations

from ..extensions import db
from studiopos.time_utils import to_utc_z


class Transaction(db.Model):
    """
    Booking transaction (customer, booked slots, add-ons, payment state).

    PAYMENT:
    - amount_paid starts at the down payment or the full price
    - amount_remaining = total_price - amount_paid
    - payment_status is "Lunas" iff amount_remaining <= 0, else "Belum Lunas"

    LIFECYCLE: Created together with its nested rows in one commit. Afterwards
    only payment settlement and studio status changes mutate it. Never deleted.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_created_at", "created_at"),
        db.Index("ix_transactions_payment_status", "payment_status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    customer_name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    # Amounts in whole Rupiah
    total_price = db.Column(db.Integer, nullable=False)
    amount_paid = db.Column(db.Integer, nullable=False, default=0)
    amount_remaining = db.Column(db.Integer, nullable=False)
    change_amount = db.Column(db.Integer, nullable=False, default=0)

    # qris, cash, transfer
    payment_method = db.Column(db.String(16), nullable=False)
    # full, dp
    payment_type = db.Column(db.String(8), nullable=False)
    # Lunas, Belum Lunas
    payment_status = db.Column(db.String(16), nullable=False)
    # Booked, On Progress, Selesai
    studio_status = db.Column(db.String(16), nullable=False, default="Booked")

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_by = db.relationship("User", foreign_keys=[created_by_user_id])
    session_bookings = db.relationship(
        "TransactionSession",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionSession.session_date, TransactionSession.session_id",
    )
    add_on_items = db.relationship(
        "TransactionAddOn",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionAddOn.id",
    )

    __mapper_args__ = {"version_id_col": version_id}

    def to_dict(self, include_lines: bool = True) -> dict:
        data = {
            "id": self.id,
            "customer_name": self.customer_name,
            "phone": self.phone,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
            "created_by_user_id": self.created_by_user_id,
            "total_price": self.total_price,
            "amount_paid": self.amount_paid,
            "amount_remaining": self.amount_remaining,
            "change_amount": self.change_amount,
            "payment_method": self.payment_method,
            "payment_type": self.payment_type,
            "payment_status": self.payment_status,
            "studio_status": self.studio_status,
            "version_id": self.version_id,
        }
        if include_lines:
            data["session_bookings"] = [b.to_dict() for b in self.session_bookings]
            data["add_on_items"] = [a.to_dict() for a in self.add_on_items]
        return data


class TransactionSession(db.Model):
    """
    One studio slot booked on one calendar date.

    The (session_id, session_date) unique constraint is the authoritative
    double-booking guard.
    """
    __tablename__ = "transaction_sessions"
    __table_args__ = (
        db.UniqueConstraint("session_id", "session_date", name="uq_transaction_sessions_slot"),
        db.Index("ix_transaction_sessions_date", "session_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.Integer, db.ForeignKey("transactions.id"), nullable=False, index=True)
    session_id = db.Column(db.Integer, db.ForeignKey("studio_sessions.id"), nullable=False)
    session_date = db.Column(db.Date, nullable=False)

    # Price captured at booking time
    price = db.Column(db.Integer, nullable=False)

    transaction = db.relationship("Transaction", back_populates="session_bookings")
    session = db.relationship("Session")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "transaction_id": self.transaction_id,
            "session_id": self.session_id,
            "session_name": self.session.name if self.session else None,
            "session_date": self.session_date.isoformat() if self.session_date else None,
            "price": self.price,
        }


class TransactionAddOn(db.Model):
    """Add-on line item on a transaction."""
    __tablename__ = "transaction_add_ons"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_transaction_add_ons_quantity"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.Integer, db.ForeignKey("transactions.id"), nullable=False, index=True)
    add_on_id = db.Column(db.Integer, db.ForeignKey("add_ons.id"), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Integer, nullable=False)
    line_total = db.Column(db.Integer, nullable=False)

    transaction = db.relationship("Transaction", back_populates="add_on_items")
    add_on = db.relationship("AddOn")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "transaction_id": self.transaction_id,
            "add_on_id": self.add_on_id,
            "add_on_name": self.add_on.name if self.add_on else None,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "line_total": self.line_total,
        }
