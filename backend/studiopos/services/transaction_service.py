# Overview: Service-layer operations for booking transactions; encapsulates business logic and database work.

"""
Transaction Builder

WHY: A booking is sold as one transaction: studio slots on calendar dates,
optional add-ons, and an initial payment that is either the full price or a
down payment (DP).

VALIDATION ORDER (first violation wins):
1. customer_name is present
2. at least one slot is booked (then: known ids, quantities, no slot twice)
3. every slot is still free
4. DP: MIN_DOWN_PAYMENT <= dp_amount < total_price
5. cash: cash_tendered >= amount due now

PERSISTENCE: The transaction and all of its rows are written in a single
commit. If another request grabbed one of the slots between the check and
the commit, the unique constraint on (session_id, session_date) fails the
commit, everything is rolled back and a BookingConflictError is raised.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Transaction, TransactionSession, TransactionAddOn
from ..validation import (
    ValidationError,
    ConflictError,
    coerce_int,
    coerce_optional_int,
    coerce_date,
    clean_str,
)
from studiopos.time_utils import utcnow, studio_day_bounds
from . import booking_service
from .catalog_service import Catalog, get_catalog


class BookingConflictError(ConflictError):
    """Raised when a (session, date) slot is already held by another transaction."""

    def __init__(self, session_id: int, session_date: date):
        self.session_id = session_id
        self.session_date = session_date
        super().__init__(f"Session {session_id} is already booked on {session_date.isoformat()}")

    def to_dict(self) -> dict:
        return {
            "error": str(self),
            "session_id": self.session_id,
            "session_date": self.session_date.isoformat(),
        }


class TransactionNotFoundError(LookupError):
    """Raised when a transaction id does not exist."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")


# =============================================================================
# CONSTANTS
# =============================================================================

PAYMENT_STATUS_PAID = "Lunas"
PAYMENT_STATUS_UNPAID = "Belum Lunas"

STUDIO_STATUS_BOOKED = "Booked"
STUDIO_STATUS_IN_PROGRESS = "On Progress"
STUDIO_STATUS_DONE = "Selesai"

VALID_STUDIO_STATUSES = [
    STUDIO_STATUS_BOOKED,
    STUDIO_STATUS_IN_PROGRESS,
    STUDIO_STATUS_DONE,
]

PAYMENT_METHOD_QRIS = "qris"
PAYMENT_METHOD_CASH = "cash"
PAYMENT_METHOD_TRANSFER = "transfer"

VALID_PAYMENT_METHODS = [
    PAYMENT_METHOD_QRIS,
    PAYMENT_METHOD_CASH,
    PAYMENT_METHOD_TRANSFER,
]

PAYMENT_TYPE_FULL = "full"
PAYMENT_TYPE_DP = "dp"

VALID_PAYMENT_TYPES = [PAYMENT_TYPE_FULL, PAYMENT_TYPE_DP]

# Minimum deposit for a DP booking (Rp 50.000)
MIN_DOWN_PAYMENT = 50000


def payment_status_for(amount_remaining: int) -> str:
    return PAYMENT_STATUS_PAID if amount_remaining <= 0 else PAYMENT_STATUS_UNPAID


# =============================================================================
# REQUEST TYPES
# =============================================================================

@dataclass(frozen=True)
class SessionBookingRequest:
    session_id: int
    session_date: date


@dataclass(frozen=True)
class AddOnRequest:
    add_on_id: int
    quantity: int = 1


@dataclass(frozen=True)
class PaymentPlan:
    type: str = PAYMENT_TYPE_FULL
    method: str = PAYMENT_METHOD_QRIS
    dp_amount: int | None = None
    cash_tendered: int | None = None


@dataclass
class TransactionRequest:
    customer_name: str | None
    phone: str | None = None
    notes: str | None = None
    bookings: list[SessionBookingRequest] = field(default_factory=list)
    add_ons: list[AddOnRequest] = field(default_factory=list)
    payment: PaymentPlan = field(default_factory=PaymentPlan)

    @classmethod
    def from_json(cls, data: dict) -> "TransactionRequest":
        """
        Parse an API payload.

        Only types are checked here; business rules run in build_transaction
        so the validation order stays the same for every caller.

        {
            "customer_name": "Budi",
            "phone": "08123456789",
            "notes": "bring own amp",
            "bookings": [{"session_id": 1, "session_date": "2026-10-20"}],
            "add_ons": [{"add_on_id": 3, "quantity": 2}],
            "payment": {"type": "dp", "method": "cash", "dp_amount": 60000, "cash_tendered": 100000}
        }
        """
        if not isinstance(data, dict):
            raise ValidationError("body", "must be a JSON object")

        raw_bookings = data.get("bookings") or []
        if not isinstance(raw_bookings, list):
            raise ValidationError("bookings", "must be a list")
        bookings = []
        for i, item in enumerate(raw_bookings):
            if not isinstance(item, dict):
                raise ValidationError(f"bookings[{i}]", "must be an object")
            bookings.append(SessionBookingRequest(
                session_id=coerce_int(f"bookings[{i}].session_id", item.get("session_id")),
                session_date=coerce_date(f"bookings[{i}].session_date", item.get("session_date")),
            ))

        raw_add_ons = data.get("add_ons") or []
        if not isinstance(raw_add_ons, list):
            raise ValidationError("add_ons", "must be a list")
        add_ons = []
        for i, item in enumerate(raw_add_ons):
            if not isinstance(item, dict):
                raise ValidationError(f"add_ons[{i}]", "must be an object")
            add_ons.append(AddOnRequest(
                add_on_id=coerce_int(f"add_ons[{i}].add_on_id", item.get("add_on_id")),
                quantity=coerce_int(f"add_ons[{i}].quantity", item.get("quantity", 1)),
            ))

        raw_payment = data.get("payment") or {}
        if not isinstance(raw_payment, dict):
            raise ValidationError("payment", "must be an object")
        payment = PaymentPlan(
            type=(clean_str("payment.type", raw_payment.get("type")) or PAYMENT_TYPE_FULL).lower(),
            method=(clean_str("payment.method", raw_payment.get("method")) or PAYMENT_METHOD_QRIS).lower(),
            dp_amount=coerce_optional_int("payment.dp_amount", raw_payment.get("dp_amount")),
            cash_tendered=coerce_optional_int("payment.cash_tendered", raw_payment.get("cash_tendered")),
        )

        return cls(
            customer_name=clean_str("customer_name", data.get("customer_name"), max_length=120),
            phone=clean_str("phone", data.get("phone"), max_length=32),
            notes=clean_str("notes", data.get("notes")),
            bookings=bookings,
            add_ons=add_ons,
            payment=payment,
        )


@dataclass
class PricedLines:
    sessions: list[TransactionSession]
    add_ons: list[TransactionAddOn]

    @property
    def session_total(self) -> int:
        return sum(line.price for line in self.sessions)

    @property
    def add_on_total(self) -> int:
        return sum(line.line_total for line in self.add_ons)

    @property
    def total_price(self) -> int:
        return self.session_total + self.add_on_total

    @property
    def slots(self) -> list[tuple[int, date]]:
        return [(line.session_id, line.session_date) for line in self.sessions]


# =============================================================================
# PRICING
# =============================================================================

def _price_lines(request: TransactionRequest, catalog: Catalog) -> PricedLines:
    """
    Resolve catalog prices for every requested slot and add-on.

    Raises ValidationError for unknown ids, quantity < 1, or a slot requested twice.
    """
    sessions = catalog.sessions_by_id(b.session_id for b in request.bookings)
    add_ons = catalog.add_ons_by_id(a.add_on_id for a in request.add_ons)

    seen: set[tuple[int, date]] = set()
    session_lines = []
    for i, booking in enumerate(request.bookings):
        session = sessions.get(booking.session_id)
        if session is None:
            raise ValidationError(f"bookings[{i}].session_id", f"unknown session {booking.session_id}")
        slot = (booking.session_id, booking.session_date)
        if slot in seen:
            raise ValidationError(f"bookings[{i}]", "the same session and date is selected twice")
        seen.add(slot)
        session_lines.append(TransactionSession(
            session_id=session.id,
            session_date=booking.session_date,
            price=session.price,
        ))

    add_on_lines = []
    for i, item in enumerate(request.add_ons):
        add_on = add_ons.get(item.add_on_id)
        if add_on is None:
            raise ValidationError(f"add_ons[{i}].add_on_id", f"unknown add-on {item.add_on_id}")
        if item.quantity < 1:
            raise ValidationError(f"add_ons[{i}].quantity", "must be at least 1")
        add_on_lines.append(TransactionAddOn(
            add_on_id=add_on.id,
            quantity=item.quantity,
            unit_price=add_on.price,
            line_total=add_on.price * item.quantity,
        ))

    return PricedLines(sessions=session_lines, add_ons=add_on_lines)


def _validate_payment_choice(payment: PaymentPlan) -> None:
    if payment.type not in VALID_PAYMENT_TYPES:
        raise ValidationError("payment.type", f"must be one of {VALID_PAYMENT_TYPES}")
    if payment.method not in VALID_PAYMENT_METHODS:
        raise ValidationError("payment.method", f"must be one of {VALID_PAYMENT_METHODS}")


def quote(request: TransactionRequest, catalog: Catalog | None = None) -> dict:
    """
    Price preview for a selection. No availability or payment checks.
    """
    lines = _price_lines(request, get_catalog(catalog))
    total = lines.total_price
    amount_due = total
    if request.payment.type == PAYMENT_TYPE_DP and request.payment.dp_amount is not None:
        amount_due = request.payment.dp_amount
    return {
        "session_total": lines.session_total,
        "add_on_total": lines.add_on_total,
        "total_price": total,
        "amount_due": amount_due,
        "amount_remaining": total - amount_due,
        "min_down_payment": MIN_DOWN_PAYMENT,
    }


# =============================================================================
# BUILD / CREATE
# =============================================================================

def build_transaction(
    request: TransactionRequest,
    *,
    user_id: int | None = None,
    catalog: Catalog | None = None,
    now: datetime | None = None,
) -> Transaction:
    """
    Validate a request and assemble an unsaved Transaction with its rows.

    Raises:
        ValidationError: first failed rule, in the documented order
        BookingConflictError: a requested slot is already taken
    """
    # 1. Customer
    if not request.customer_name or not request.customer_name.strip():
        raise ValidationError("customer_name", "is required")

    # 2. At least one slot, and a well-formed selection
    if not request.bookings:
        raise ValidationError("bookings", "at least one session must be booked")
    lines = _price_lines(request, get_catalog(catalog))
    payment = request.payment
    _validate_payment_choice(payment)

    # 3. Availability
    taken = booking_service.find_booked_slots(lines.slots)
    if taken:
        raise BookingConflictError(*taken[0])

    total_price = lines.total_price

    # 4. Down payment bounds
    if payment.type == PAYMENT_TYPE_DP:
        if payment.dp_amount is None:
            raise ValidationError("payment.dp_amount", "is required for a down payment")
        if payment.dp_amount < MIN_DOWN_PAYMENT:
            raise ValidationError("payment.dp_amount", f"minimum down payment is {MIN_DOWN_PAYMENT}")
        if payment.dp_amount >= total_price:
            raise ValidationError("payment.dp_amount", "down payment must be less than the total price")
        amount_due = payment.dp_amount
    else:
        amount_due = total_price

    # 5. Cash tendered
    change = 0
    if payment.method == PAYMENT_METHOD_CASH:
        if payment.cash_tendered is None:
            raise ValidationError("payment.cash_tendered", "is required for cash payments")
        if payment.cash_tendered < amount_due:
            raise ValidationError("payment.cash_tendered", f"cash tendered is less than the amount due ({amount_due})")
        change = payment.cash_tendered - amount_due

    amount_remaining = total_price - amount_due

    transaction = Transaction(
        customer_name=request.customer_name.strip(),
        phone=request.phone,
        notes=request.notes,
        created_at=now or utcnow(),
        created_by_user_id=user_id,
        total_price=total_price,
        amount_paid=amount_due,
        amount_remaining=amount_remaining,
        change_amount=change,
        payment_method=payment.method,
        payment_type=payment.type,
        payment_status=payment_status_for(amount_remaining),
        studio_status=STUDIO_STATUS_BOOKED,
    )
    transaction.session_bookings.extend(lines.sessions)
    transaction.add_on_items.extend(lines.add_ons)
    return transaction


def create_transaction(
    request: TransactionRequest,
    *,
    user_id: int | None = None,
    catalog: Catalog | None = None,
    now: datetime | None = None,
) -> Transaction:
    """
    Validate, build and persist a transaction as one unit.

    Returns:
        The committed Transaction (with session_bookings and add_on_items)

    Raises:
        ValidationError, BookingConflictError
    """
    transaction = build_transaction(request, user_id=user_id, catalog=catalog, now=now)
    slots = [(b.session_id, b.session_date) for b in transaction.session_bookings]

    db.session.add(transaction)
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        # Lost the race for a slot; report which one
        for session_id, day in slots:
            if not booking_service.is_slot_available(session_id, day):
                raise BookingConflictError(session_id, day) from exc
        raise

    current_app.logger.info(
        "Transaction %s created by user %s: total=%s paid=%s status=%s",
        transaction.id,
        user_id,
        transaction.total_price,
        transaction.amount_paid,
        transaction.payment_status,
    )
    return transaction


# =============================================================================
# QUERIES
# =============================================================================

def get_transaction(transaction_id: int) -> Transaction:
    transaction = db.session.get(Transaction, transaction_id)
    if not transaction:
        raise TransactionNotFoundError(transaction_id)
    return transaction


def list_transactions(
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = 1,
    limit: int = 10,
    paginate: bool = True,
) -> dict:
    """
    Transactions newest first, optionally limited to a studio-local date range
    (inclusive on both ends, either end may be open).

    Returns:
        - transactions: serialized rows for the page (all rows if paginate=False)
        - total: number of matching transactions
        - total_pages
        - total_revenue: sum of total_price over all matching transactions
    """
    page = max(page, 1)
    limit = max(limit, 1)

    query = db.session.query(Transaction)
    if start_date:
        query = query.filter(Transaction.created_at >= studio_day_bounds(start_date)[0])
    if end_date:
        query = query.filter(Transaction.created_at < studio_day_bounds(end_date)[1])

    total = query.count()
    total_revenue = query.with_entities(
        db.func.coalesce(db.func.sum(Transaction.total_price), 0)
    ).scalar() or 0

    ordered = query.order_by(Transaction.created_at.desc(), Transaction.id.desc())
    if paginate:
        ordered = ordered.offset((page - 1) * limit).limit(limit)

    return {
        "transactions": [t.to_dict() for t in ordered.all()],
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit) if total else 0,
        "total_revenue": int(total_revenue),
    }
