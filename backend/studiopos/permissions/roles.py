# Overview: Capabilities granted to each role.

from .definitions import PERMISSION_DEFINITIONS


ROLE_ADMIN = "admin"
ROLE_USER = "user"

VALID_ROLES = [ROLE_ADMIN, ROLE_USER]


DEFAULT_ROLE_PERMISSIONS = {
    # Admin has everything
    ROLE_ADMIN: [perm[0] for perm in PERMISSION_DEFINITIONS],
    # Front desk: bookings, payments and own attendance
    ROLE_USER: [
        "VIEW_DASHBOARD",
        "VIEW_CATALOG",
        "CREATE_TRANSACTION",
        "VIEW_TRANSACTIONS",
        "SETTLE_PAYMENT",
        "UPDATE_STUDIO_STATUS",
        "CLOCK_IN_OUT",
    ],
}
