# Overview: Service-layer operations for payment; encapsulates business logic and database work.

"""
Payment Ledger

WHY: A DP booking leaves a balance that is collected later, usually when the
customer arrives for the session.

RULES:
- A transaction that is already "Lunas" accepts no further payment
- The remaining balance must be settled in one exact payment; partial
  payments and overpayments of the remainder are both rejected
- amount_remaining = total_price - amount_paid is recomputed on every change

Studio status (Booked / On Progress / Selesai) is an operational label kept
independent of payment state; any status may follow any other.
"""

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Transaction
from ..validation import ValidationError
from .concurrency import lock_for_update, commit_or_conflict
from .transaction_service import (
    TransactionNotFoundError,
    PAYMENT_STATUS_PAID,
    VALID_STUDIO_STATUSES,
    payment_status_for,
)


class PaymentError(ValueError):
    """Raised for payment operation errors."""

    def to_dict(self) -> dict:
        return {"error": str(self)}


class AlreadySettledError(PaymentError):
    """Raised when paying into a transaction that is already Lunas."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} is already fully paid")


class AmountMismatchError(PaymentError):
    """Raised when a settlement does not match the remaining balance exactly."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Payment must equal the remaining balance {expected}, got {actual}")

    def to_dict(self) -> dict:
        return {"error": str(self), "expected": self.expected, "actual": self.actual}


def settle_payment(transaction_id: int, amount: int, *, user_id: int | None = None) -> Transaction:
    """
    Pay off the remaining balance of a transaction.

    Args:
        transaction_id: Transaction being paid
        amount: Amount received; must equal amount_remaining
        user_id: Staff member taking the payment (logging only)

    Returns:
        Updated Transaction (payment_status "Lunas")

    Raises:
        TransactionNotFoundError, AlreadySettledError, AmountMismatchError,
        ConcurrentUpdateError
    """
    transaction = lock_for_update(
        db.session.query(Transaction).filter_by(id=transaction_id)
    ).first()
    if not transaction:
        raise TransactionNotFoundError(transaction_id)

    if transaction.payment_status == PAYMENT_STATUS_PAID:
        db.session.rollback()
        raise AlreadySettledError(transaction_id)

    if amount != transaction.amount_remaining:
        expected = transaction.amount_remaining
        db.session.rollback()
        raise AmountMismatchError(expected=expected, actual=amount)

    transaction.amount_paid = transaction.amount_paid + amount
    transaction.amount_remaining = transaction.total_price - transaction.amount_paid
    transaction.payment_status = payment_status_for(transaction.amount_remaining)

    commit_or_conflict("Transaction")

    current_app.logger.info(
        "Transaction %s settled by user %s: amount=%s status=%s",
        transaction.id,
        user_id,
        amount,
        transaction.payment_status,
    )
    return transaction


def _status_key(status) -> str:
    # "On Progress", "on_progress" and "OnProgress" are the same status
    return "".join(str(status or "").split()).replace("_", "").lower()


def set_studio_status(transaction_id: int, status: str) -> Transaction:
    """
    Move a transaction to another studio status. No ordering is enforced.

    Raises:
        ValidationError: status is not Booked / On Progress / Selesai
        TransactionNotFoundError
    """
    canonical = {_status_key(s): s for s in VALID_STUDIO_STATUSES}.get(_status_key(status))
    if canonical is None:
        raise ValidationError("studio_status", f"must be one of {VALID_STUDIO_STATUSES}")

    transaction = lock_for_update(
        db.session.query(Transaction).filter_by(id=transaction_id)
    ).first()
    if not transaction:
        raise TransactionNotFoundError(transaction_id)

    previous = transaction.studio_status
    transaction.studio_status = canonical
    commit_or_conflict("Transaction")

    current_app.logger.info(
        "Transaction %s studio status %s -> %s", transaction.id, previous, canonical
    )
    return transaction


def payment_summary(transaction: Transaction) -> dict:
    """Payment figures for API responses."""
    return {
        "transaction_id": transaction.id,
        "total_price": transaction.total_price,
        "amount_paid": transaction.amount_paid,
        "amount_remaining": transaction.amount_remaining,
        "change_amount": transaction.change_amount,
        "payment_type": transaction.payment_type,
        "payment_method": transaction.payment_method,
        "payment_status": transaction.payment_status,
    }
