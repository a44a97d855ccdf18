# Overview: Flask API routes for reports and the dashboard summary.

from flask import Blueprint, jsonify

from ..decorators import require_auth, require_permission
from ..services import transaction_service, reporting_service
from ..validation import ValidationError
from .transactions import parse_list_args


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")
dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@reports_bp.get("/transactions")
@require_auth
@require_permission("VIEW_TRANSACTION_REPORT")
def transaction_report_route():
    """
    Transaction report with revenue over a date range.

    Query params: start_date, end_date, page, limit, all=true
    """
    try:
        return jsonify(transaction_service.list_transactions(**parse_list_args()))
    except ValidationError as e:
        return jsonify(e.to_dict()), 400


@dashboard_bp.get("/summary")
@require_auth
@require_permission("VIEW_DASHBOARD")
def dashboard_summary_route():
    return jsonify(reporting_service.dashboard_summary())
