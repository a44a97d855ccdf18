"""Dashboard summary tests."""

from datetime import date, datetime

from studiopos.services import reporting_service
from studiopos.services.transaction_service import create_transaction


# 2030-01-15 12:00 in Asia/Jakarta
NOW = datetime(2030, 1, 15, 5, 0)


def test_empty_dashboard(db_session):
    summary = reporting_service.dashboard_summary(now=NOW)

    assert summary["date"] == "2030-01-15"
    assert summary["month_revenue"] == 0
    assert summary["month_transaction_count"] == 0
    assert summary["total_users"] == 0
    assert summary["sessions_booked_today"] == 0
    assert summary["latest_transactions"] == []


def test_month_figures_use_studio_calendar(make_request, sessions, staff_user):
    create_transaction(make_request([sessions[0], sessions[1]], dp=60000, day=date(2030, 1, 16)), now=NOW)
    create_transaction(
        make_request([(sessions[2], date(2030, 1, 15))]),
        now=datetime(2030, 1, 1, 0, 0),
    )
    # 2029-12-31 16:00 UTC is still December in Jakarta (23:00)
    create_transaction(
        make_request([(sessions[3], date(2030, 1, 20))]),
        now=datetime(2029, 12, 31, 16, 0),
    )

    summary = reporting_service.dashboard_summary(now=NOW)

    # Revenue counts total_price, not just what has been paid so far
    assert summary["month_revenue"] == 170000 + 85000
    assert summary["month_transaction_count"] == 2
    assert summary["total_users"] == 1
    assert summary["sessions_booked_today"] == 1
    assert len(summary["latest_transactions"]) == 3
    assert "session_bookings" not in summary["latest_transactions"][0]


def test_latest_limit(make_request, sessions):
    for i in range(4):
        create_transaction(make_request([sessions[i]]), now=NOW)

    summary = reporting_service.dashboard_summary(now=NOW, latest_limit=2)
    assert len(summary["latest_transactions"]) == 2
