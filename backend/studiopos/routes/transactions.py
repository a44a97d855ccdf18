# Overview: Flask API routes for booking transactions and payments; parses input and returns JSON responses.

"""
Transaction API Routes

- POST  /api/transactions                      create a booking (full or DP)
- POST  /api/transactions/quote                price preview
- GET   /api/transactions                      list (date range, pagination)
- GET   /api/transactions/<id>                 one transaction with lines
- POST  /api/transactions/<id>/settle          pay the remaining balance
- PATCH /api/transactions/<id>/studio-status   Booked / On Progress / Selesai

STATUS CODES:
- 400: ValidationError, AlreadySettledError, AmountMismatchError
- 404: unknown transaction
- 409: BookingConflictError (slot taken), concurrent update
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth, require_permission
from ..services import transaction_service, payment_service
from ..services.transaction_service import (
    TransactionRequest,
    TransactionNotFoundError,
)
from ..services.payment_service import PaymentError
from ..validation import ValidationError, ConflictError, coerce_int, coerce_date


transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


def parse_list_args():
    """start_date / end_date / page / limit / all query params shared by list routes."""
    args = request.args
    start = args.get("start_date")
    end = args.get("end_date")
    return {
        "start_date": coerce_date("start_date", start) if start else None,
        "end_date": coerce_date("end_date", end) if end else None,
        "page": coerce_int("page", args.get("page", "1"), minimum=1),
        "limit": min(coerce_int("limit", args.get("limit", "10"), minimum=1), 500),
        "paginate": args.get("all", "false").lower() != "true",
    }


@transactions_bp.post("")
@require_auth
@require_permission("CREATE_TRANSACTION")
def create_transaction_route():
    """
    Create a booking transaction.

    Request body:
    {
        "customer_name": "Budi",
        "phone": "08123456789",
        "notes": "",
        "bookings": [{"session_id": 1, "session_date": "2026-10-20"}],
        "add_ons": [{"add_on_id": 5, "quantity": 2}],
        "payment": {"type": "dp", "method": "cash", "dp_amount": 60000, "cash_tendered": 100000}
    }

    Returns:
        201: transaction with payment summary (change_amount for cash)
        400: ValidationError (field + reason)
        409: a slot is already booked (session_id + session_date)
    """
    try:
        req = TransactionRequest.from_json(request.get_json(silent=True))
        transaction = transaction_service.create_transaction(req, user_id=g.current_user.id)
        return jsonify({
            "transaction": transaction.to_dict(),
            "summary": payment_service.payment_summary(transaction),
        }), 201

    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except ConflictError as e:
        return jsonify(e.to_dict()), 409
    except Exception:
        current_app.logger.exception("Failed to create transaction")
        return jsonify({"error": "Internal server error"}), 500


@transactions_bp.post("/quote")
@require_auth
@require_permission("CREATE_TRANSACTION")
def quote_route():
    try:
        req = TransactionRequest.from_json(request.get_json(silent=True))
        return jsonify({"quote": transaction_service.quote(req)})
    except ValidationError as e:
        return jsonify(e.to_dict()), 400


@transactions_bp.get("")
@require_auth
@require_permission("VIEW_TRANSACTIONS")
def list_transactions_route():
    """
    Query params:
    - start_date, end_date: YYYY-MM-DD (studio-local, inclusive)
    - page (default 1), limit (default 10, max 500)
    - all=true: return every matching row (export)
    """
    try:
        return jsonify(transaction_service.list_transactions(**parse_list_args()))
    except ValidationError as e:
        return jsonify(e.to_dict()), 400


@transactions_bp.get("/<int:transaction_id>")
@require_auth
@require_permission("VIEW_TRANSACTIONS")
def get_transaction_route(transaction_id: int):
    try:
        transaction = transaction_service.get_transaction(transaction_id)
    except TransactionNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({
        "transaction": transaction.to_dict(),
        "summary": payment_service.payment_summary(transaction),
    })


@transactions_bp.post("/<int:transaction_id>/settle")
@require_auth
@require_permission("SETTLE_PAYMENT")
def settle_payment_route(transaction_id: int):
    """
    Pay the remaining balance.

    Request body:
    {
        "amount": 110000
    }

    The amount must equal amount_remaining exactly.
    """
    try:
        data = request.get_json(silent=True) or {}
        amount = coerce_int("amount", data.get("amount"))

        transaction = payment_service.settle_payment(
            transaction_id, amount, user_id=g.current_user.id
        )
        return jsonify({
            "transaction": transaction.to_dict(),
            "summary": payment_service.payment_summary(transaction),
        })

    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except TransactionNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PaymentError as e:
        return jsonify(e.to_dict()), 400
    except ConflictError as e:
        return jsonify(e.to_dict()), 409
    except Exception:
        current_app.logger.exception("Failed to settle payment")
        return jsonify({"error": "Internal server error"}), 500


@transactions_bp.patch("/<int:transaction_id>/studio-status")
@require_auth
@require_permission("UPDATE_STUDIO_STATUS")
def studio_status_route(transaction_id: int):
    """
    Request body:
    {
        "studio_status": "On Progress"
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        transaction = payment_service.set_studio_status(transaction_id, data.get("studio_status"))
        return jsonify({"transaction": transaction.to_dict()})

    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except TransactionNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify(e.to_dict()), 409
    except Exception:
        current_app.logger.exception("Failed to update studio status")
        return jsonify({"error": "Internal server error"}), 500
