# Overview: Service-layer operations for reporting; read-only aggregation queries.

"""
Reporting Service

Dashboard figures are computed for the studio-local calendar: "this month"
and "today" follow STUDIO_TIMEZONE, not UTC.
"""

from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..models import Transaction, TransactionSession, User
from studiopos.time_utils import studio_today, studio_month_bounds


def dashboard_summary(now: datetime | None = None, latest_limit: int = 5) -> dict:
    """
    Returns:
        - month_revenue: sum of total_price for transactions created this month
        - month_transaction_count
        - total_users
        - sessions_booked_today: slots booked for today's date
        - latest_transactions: newest transactions (without line items)
    """
    today = studio_today(now)
    month_start, month_end = studio_month_bounds(today)

    month_query = db.session.query(Transaction).filter(
        Transaction.created_at >= month_start,
        Transaction.created_at < month_end,
    )
    month_revenue = month_query.with_entities(
        db.func.coalesce(db.func.sum(Transaction.total_price), 0)
    ).scalar() or 0
    month_count = month_query.count()

    total_users = db.session.query(User).count()

    sessions_today = db.session.query(TransactionSession).filter(
        TransactionSession.session_date == today
    ).count()

    latest = db.session.query(Transaction).order_by(
        Transaction.created_at.desc(), Transaction.id.desc()
    ).limit(latest_limit).all()

    return {
        "date": today.isoformat(),
        "month_revenue": int(month_revenue),
        "month_transaction_count": month_count,
        "total_users": total_users,
        "sessions_booked_today": sessions_today,
        "latest_transactions": [t.to_dict(include_lines=False) for t in latest],
    }
