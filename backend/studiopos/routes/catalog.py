# Overview: Flask API routes for the session/add-on catalog and slot availability.

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, require_permission
from ..services import booking_service
from ..services.catalog_service import SqlCatalog
from ..validation import ValidationError, coerce_date
from studiopos.time_utils import studio_today


catalog_bp = Blueprint("catalog", __name__, url_prefix="/api/catalog")


@catalog_bp.get("/sessions")
@require_auth
@require_permission("VIEW_CATALOG")
def list_sessions_route():
    sessions = SqlCatalog().list_sessions()
    return jsonify({"sessions": [s.to_dict() for s in sessions]})


@catalog_bp.get("/add-ons")
@require_auth
@require_permission("VIEW_CATALOG")
def list_add_ons_route():
    add_ons = SqlCatalog().list_add_ons()
    return jsonify({"add_ons": [a.to_dict() for a in add_ons]})


@catalog_bp.get("/availability")
@require_auth
@require_permission("VIEW_CATALOG")
def availability_route():
    """
    Free/booked state of every session on a date.

    Query params:
    - date: YYYY-MM-DD (default: today in the studio timezone)
    """
    raw = request.args.get("date")
    try:
        day = coerce_date("date", raw) if raw else studio_today()
    except ValidationError as e:
        return jsonify(e.to_dict()), 400

    catalog = SqlCatalog()
    availability = booking_service.check_availability(day, catalog=catalog)
    sessions = [
        {**s.to_dict(), "available": availability.get(s.id, False)}
        for s in catalog.list_sessions()
    ]
    return jsonify({
        "date": day.isoformat(),
        "availability": {str(k): v for k, v in availability.items()},
        "sessions": sessions,
    })
