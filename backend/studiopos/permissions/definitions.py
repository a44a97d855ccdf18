# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


# -- DASHBOARD --

DASHBOARD_PERMISSIONS = [
    (
        "VIEW_DASHBOARD",
        "View Dashboard",
        "View monthly revenue, today's bookings and latest transactions",
        PermissionCategory.DASHBOARD,
    ),
]


# -- CATALOG --

CATALOG_PERMISSIONS = [
    (
        "VIEW_CATALOG",
        "View Catalog",
        "View studio sessions, add-ons and slot availability",
        PermissionCategory.CATALOG,
    ),
]


# -- TRANSACTIONS --

TRANSACTION_PERMISSIONS = [
    (
        "CREATE_TRANSACTION",
        "Create Transaction",
        "Book studio sessions and sell add-ons",
        PermissionCategory.TRANSACTIONS,
    ),
    (
        "VIEW_TRANSACTIONS",
        "View Transactions",
        "List and open booking transactions",
        PermissionCategory.TRANSACTIONS,
    ),
    (
        "SETTLE_PAYMENT",
        "Settle Payment",
        "Collect the remaining balance of a down-payment booking",
        PermissionCategory.TRANSACTIONS,
    ),
    (
        "UPDATE_STUDIO_STATUS",
        "Update Studio Status",
        "Mark a booking as Booked, On Progress or Selesai",
        PermissionCategory.TRANSACTIONS,
    ),
]


# -- ATTENDANCE --

ATTENDANCE_PERMISSIONS = [
    (
        "CLOCK_IN_OUT",
        "Clock In/Out",
        "Record own attendance",
        PermissionCategory.ATTENDANCE,
    ),
]


# -- REPORTS --

REPORT_PERMISSIONS = [
    (
        "VIEW_TRANSACTION_REPORT",
        "View Transaction Report",
        "Transaction report with revenue totals over a date range",
        PermissionCategory.REPORTS,
    ),
    (
        "VIEW_ATTENDANCE_REPORT",
        "View Attendance Report",
        "Attendance report for all staff",
        PermissionCategory.REPORTS,
    ),
]


# -- USERS --

USER_PERMISSIONS = [
    (
        "MANAGE_USERS",
        "Manage Users",
        "List and create staff accounts",
        PermissionCategory.USERS,
    ),
    (
        "CHANGE_USER_ROLE",
        "Change User Role",
        "Promote or demote staff between admin and user",
        PermissionCategory.USERS,
    ),
]


PERMISSION_DEFINITIONS = (
    DASHBOARD_PERMISSIONS
    + CATALOG_PERMISSIONS
    + TRANSACTION_PERMISSIONS
    + ATTENDANCE_PERMISSIONS
    + REPORT_PERMISSIONS
    + USER_PERMISSIONS
)
