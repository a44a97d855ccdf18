# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication and User Management Service

WHY: Every booking and attendance record is attributable to a staff account.
Uses bcrypt for password hashing.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Minimum 8 characters with at least one letter and one digit
- Session tokens managed separately (see session_service.py)
- Only admins may change roles
"""

import math
import re

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User
from ..permissions import VALID_ROLES, ROLE_ADMIN, ROLE_USER
from ..validation import ValidationError, ConflictError
from studiopos.time_utils import utcnow


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""

    def __init__(self, reason: str):
        super().__init__("password", reason)


class AuthorizationError(PermissionError):
    """Raised when the acting user's role does not allow an operation."""


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one letter
    - At least one digit

    Raises PasswordValidationError if requirements not met.
    """
    if not isinstance(password, str):
        raise PasswordValidationError("Password must be a string")

    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Za-z]', password):
        raise PasswordValidationError("Password must contain at least one letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns True if password matches hash, False otherwise (including a
    malformed stored hash).
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def _validate_role(role: str) -> str:
    if role not in VALID_ROLES:
        raise ValidationError("role", f"must be one of {VALID_ROLES}")
    return role


def create_user(username: str, password: str, role: str = ROLE_USER) -> User:
    """
    Create new user with bcrypt password hashing.

    Raises:
        ValidationError: missing username, bad role or weak password
        ConflictError: username already taken
    """
    if username is not None and not isinstance(username, str):
        raise ValidationError("username", "must be a string")
    username = (username or "").strip()
    if not username:
        raise ValidationError("username", "is required")
    _validate_role(role)

    if db.session.query(User).filter_by(username=username).first():
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
    )

    db.session.add(user)
    db.session.commit()

    current_app.logger.info("User %s created with role %s", user.username, user.role)
    return user


def authenticate(username: str, password: str) -> User | None:
    """
    Authenticate user with username and password.

    Returns User if credentials valid, None otherwise.
    Updates last_login_at timestamp on successful authentication.
    """
    user = db.session.query(User).filter(
        User.username == username,
        User.is_active.is_(True),
    ).first()

    if not user or not verify_password(password, user.password_hash):
        return None

    user.last_login_at = utcnow()
    db.session.commit()
    return user


def list_users(page: int = 1, limit: int = 10) -> dict:
    page = max(page, 1)
    limit = max(limit, 1)

    query = db.session.query(User)
    total = query.count()
    users = query.order_by(User.username.asc()).offset((page - 1) * limit).limit(limit).all()

    return {
        "users": [u.to_dict() for u in users],
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit) if total else 0,
    }


def change_role(actor: User, target_user_id: int, new_role: str) -> User:
    """
    Change another user's role. Admin only.

    Raises:
        AuthorizationError: actor is not an admin
        ValidationError: unknown role
        LookupError: target user not found
    """
    if actor is None or actor.role != ROLE_ADMIN:
        raise AuthorizationError("Only admins can change roles")

    _validate_role(new_role)

    user = db.session.get(User, target_user_id)
    if not user:
        raise LookupError(f"User {target_user_id} not found")

    previous = user.role
    user.role = new_role
    db.session.commit()

    current_app.logger.info(
        "User %s changed role of %s: %s -> %s", actor.username, user.username, previous, new_role
    )
    return user
