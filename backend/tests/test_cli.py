"""CLI command tests (Flask test CLI runner)."""

import pytest

from studiopos.models import Session, AddOn, User


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def test_system_init_is_idempotent(runner, db_session):
    result = runner.invoke(args=["system", "init"])
    assert result.exit_code == 0
    assert "Catalog: 7 sessions, 7 add-ons created" in result.output
    assert "Created admin user: admin" in result.output

    again = runner.invoke(args=["system", "init"])
    assert again.exit_code == 0
    assert "Catalog: 0 sessions, 0 add-ons created" in again.output
    assert "already exists" in again.output

    assert db_session.query(Session).count() == 7
    assert db_session.query(AddOn).count() == 7
    assert db_session.query(User).filter_by(username="admin").one().role == "admin"


def test_users_create_and_list(runner, db_session):
    result = runner.invoke(args=["users", "create", "--username", "kasir1", "--password", "Rahasia123"])
    assert result.exit_code == 0
    assert "Created user: kasir1 with role 'user'" in result.output

    weak = runner.invoke(args=["users", "create", "--username", "kasir2", "--password", "short"])
    assert "Password validation failed" in weak.output

    listing = runner.invoke(args=["users", "list"])
    assert "kasir1" in listing.output
    assert "kasir2" not in listing.output


def test_catalog_list(runner, catalog):
    result = runner.invoke(args=["catalog", "list"])
    assert result.exit_code == 0
    assert "Sesi 1 (11.00 - 13.00)" in result.output
    assert "Rp 85.000" in result.output


def test_perms_list_and_check(runner):
    listing = runner.invoke(args=["perms", "list", "--role", "user", "--category", "users"])
    assert listing.exit_code == 0
    assert "MANAGE_USERS" not in listing.output

    admin = runner.invoke(args=["perms", "list", "--role", "admin", "--category", "users"])
    assert "MANAGE_USERS" in admin.output
    assert "CHANGE_USER_ROLE" in admin.output

    assert "PASS" in runner.invoke(args=["perms", "check", "user", "SETTLE_PAYMENT"]).output
    assert "DENY" in runner.invoke(args=["perms", "check", "user", "CHANGE_USER_ROLE"]).output
    assert "Unknown permission" in runner.invoke(args=["perms", "check", "user", "FLY"]).output
