# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories for organization and UI display."""
    DASHBOARD = "DASHBOARD"
    CATALOG = "CATALOG"
    TRANSACTIONS = "TRANSACTIONS"
    ATTENDANCE = "ATTENDANCE"
    REPORTS = "REPORTS"
    USERS = "USERS"
