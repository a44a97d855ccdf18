"""
Authentication, session and permission tests.
"""

from datetime import timedelta

import pytest

from studiopos.models import User
from studiopos.services import auth_service, session_service, permission_service
from studiopos.services.auth_service import AuthorizationError, PasswordValidationError
from studiopos.services.permission_service import PermissionDeniedError
from studiopos.validation import ValidationError, ConflictError
from studiopos.time_utils import utcnow


class TestPasswords:

    @pytest.mark.parametrize("password", ["short1", "onlyletters", "12345678", ""])
    def test_weak_passwords_rejected(self, password):
        with pytest.raises(PasswordValidationError) as exc:
            auth_service.validate_password_strength(password)
        assert exc.value.field == "password"

    @pytest.mark.parametrize("password", [12345678, None, ["Password123"]])
    def test_non_string_password_rejected(self, password):
        with pytest.raises(PasswordValidationError) as exc:
            auth_service.validate_password_strength(password)
        assert exc.value.reason == "Password must be a string"

    def test_hash_and_verify(self, app):
        hashed = auth_service.hash_password("Password123")

        assert hashed != "Password123"
        assert auth_service.verify_password("Password123", hashed)
        assert not auth_service.verify_password("Password124", hashed)

    def test_verify_against_malformed_hash(self):
        assert not auth_service.verify_password("Password123", "not-a-hash")


class TestUsers:

    def test_create_user(self, db_session):
        user = auth_service.create_user("  budi ", "Password123")

        assert user.username == "budi"
        assert user.role == "user"
        assert user.password_hash.startswith("$2")

    def test_duplicate_username(self, staff_user):
        with pytest.raises(ConflictError):
            auth_service.create_user("kasir", "Password123")

    def test_invalid_role(self, db_session):
        with pytest.raises(ValidationError) as exc:
            auth_service.create_user("budi", "Password123", role="owner")
        assert exc.value.field == "role"

    def test_authenticate(self, staff_user):
        user = auth_service.authenticate("kasir", "Password123")
        assert user.id == staff_user.id
        assert user.last_login_at is not None

        assert auth_service.authenticate("kasir", "wrong-password1") is None
        assert auth_service.authenticate("nobody", "Password123") is None

    def test_inactive_user_cannot_authenticate(self, db_session, staff_user):
        staff_user.is_active = False
        db_session.commit()

        assert auth_service.authenticate("kasir", "Password123") is None

    def test_list_users(self, admin_user, staff_user):
        result = auth_service.list_users(page=1, limit=1)

        assert result["total"] == 2
        assert result["total_pages"] == 2
        assert [u["username"] for u in result["users"]] == ["admin"]


class TestChangeRole:

    def test_admin_can_promote(self, admin_user, staff_user):
        user = auth_service.change_role(admin_user, staff_user.id, "admin")
        assert user.role == "admin"

    def test_non_admin_refused(self, admin_user, staff_user):
        with pytest.raises(AuthorizationError):
            auth_service.change_role(staff_user, admin_user.id, "user")
        assert admin_user.role == "admin"

    def test_unknown_role(self, admin_user, staff_user):
        with pytest.raises(ValidationError):
            auth_service.change_role(admin_user, staff_user.id, "owner")

    def test_missing_user(self, admin_user):
        with pytest.raises(LookupError):
            auth_service.change_role(admin_user, 999999, "user")


class TestSessions:

    def test_create_and_validate(self, staff_user):
        session, token = session_service.create_session(staff_user.id)

        assert len(token) == 64
        assert session.token_hash == session_service.hash_token(token)
        assert session.token_hash != token

        context = session_service.validate_session(token)
        assert context.user_id == staff_user.id
        assert context.role == "user"

    def test_unknown_token(self, db_session):
        assert session_service.validate_session("deadbeef") is None
        assert session_service.validate_session("") is None

    def test_revoked_token(self, staff_user):
        _, token = session_service.create_session(staff_user.id)

        assert session_service.revoke_session(token)
        assert session_service.validate_session(token) is None
        assert not session_service.revoke_session(token)

    def test_expired_token(self, db_session, staff_user):
        session, token = session_service.create_session(staff_user.id)
        session.expires_at = utcnow() - timedelta(minutes=1)
        db_session.commit()

        assert session_service.validate_session(token) is None

    def test_deactivated_user(self, db_session, staff_user):
        _, token = session_service.create_session(staff_user.id)
        db_session.get(User, staff_user.id).is_active = False
        db_session.commit()

        assert session_service.validate_session(token) is None


class TestPermissions:

    def test_admin_has_everything(self, admin_user):
        perms = permission_service.get_user_permissions(admin_user)
        assert {"MANAGE_USERS", "CHANGE_USER_ROLE", "VIEW_TRANSACTION_REPORT"} <= perms

    def test_user_is_front_desk_only(self, staff_user):
        assert permission_service.user_has_permission(staff_user, "CREATE_TRANSACTION")
        assert permission_service.user_has_permission(staff_user, "CLOCK_IN_OUT")
        assert not permission_service.user_has_permission(staff_user, "MANAGE_USERS")
        assert not permission_service.user_has_permission(staff_user, "VIEW_ATTENDANCE_REPORT")

    def test_require_permission_raises(self, staff_user):
        with pytest.raises(PermissionDeniedError):
            permission_service.require_permission(staff_user, "CHANGE_USER_ROLE")

    def test_unknown_role_fails_closed(self, staff_user):
        staff_user.role = "ghost"
        assert permission_service.get_user_permissions(staff_user) == set()
