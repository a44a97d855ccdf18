# Overview: Flask API routes for staff attendance; parses input and returns JSON responses.

"""
Attendance Routes

SECURITY:
- Clock in/out and own status require CLOCK_IN_OUT.
- The attendance report requires VIEW_ATTENDANCE_REPORT (admin).

STATUS CODES (clock-in/out):
- 409: already clocked in
- 403: today's cycle already completed
- 404: nothing open to clock out
"""

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, require_permission
from ..services import attendance_service
from ..services.attendance_service import (
    AlreadyClockedInError,
    AlreadyCompletedError,
    NoOpenRecordError,
)
from ..validation import ValidationError
from .transactions import parse_list_args


attendance_bp = Blueprint("attendance", __name__, url_prefix="/api/attendance")


@attendance_bp.post("/clock-in")
@require_auth
@require_permission("CLOCK_IN_OUT")
def clock_in_route():
    try:
        record = attendance_service.clock_in(g.current_user.id)
        return jsonify({"record": record.to_dict()}), 201
    except AlreadyClockedInError as e:
        return jsonify({"error": str(e)}), 409
    except AlreadyCompletedError as e:
        return jsonify({"error": str(e)}), 403


@attendance_bp.post("/clock-out")
@require_auth
@require_permission("CLOCK_IN_OUT")
def clock_out_route():
    try:
        record = attendance_service.clock_out(g.current_user.id)
        return jsonify({"record": record.to_dict()})
    except NoOpenRecordError as e:
        return jsonify({"error": str(e)}), 404


@attendance_bp.get("/status")
@require_auth
@require_permission("CLOCK_IN_OUT")
def status_route():
    return jsonify(attendance_service.get_current_status(g.current_user.id))


@attendance_bp.get("")
@require_auth
@require_permission("VIEW_ATTENDANCE_REPORT")
def list_attendance_route():
    try:
        return jsonify(attendance_service.list_attendance(**parse_list_args()))
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
