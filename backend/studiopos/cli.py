# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/studiopos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--admin-password "Password123"]
#   Idempotent bootstrap: creates tables, the session/add-on catalog, and an admin user.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with roles and active status.
# - python -m flask users create --username kasir1 --password "Rahasia123" --role user
#   Create a user (prompts if options are omitted).
#
# Catalog inspection:
# - python -m flask catalog list
#   List sessions and add-ons with prices.
#
# Permission inspection:
# - python -m flask perms list --role user --category TRANSACTIONS
#   List permissions (optionally filtered by role or category).
# - python -m flask perms check user SETTLE_PAYMENT
#   Check whether a role holds a permission.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Session, AddOn, User
from .permissions import (
    VALID_ROLES,
    ROLE_ADMIN,
    get_all_permission_codes,
    get_permissions_by_category,
    get_permission_definition,
    get_role_permissions,
    validate_permission_code,
)
from .services.auth_service import create_user, PasswordValidationError
from .services.catalog_service import seed_default_catalog
from .validation import ValidationError, ConflictError


def format_rupiah(amount: int) -> str:
    return "Rp " + f"{amount:,}".replace(",", ".")


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--admin-username', default='admin', help='Username of the initial admin')
@click.option('--admin-password', default='Password123', help='Password of the initial admin')
@with_appcontext
def init_system(admin_username, admin_password):
    """
    Initialize the studio system: schema, default catalog, and an admin user.

    Creates:
    - All tables (if missing)
    - 7 sessions at Rp 85.000 and the default add-on list
    - Admin user (default admin / Password123)

    SECURITY: Change the admin password immediately in production!
    """
    click.echo("START Initializing studio system...")

    db.create_all()
    click.echo("PASS Tables ready")

    counts = seed_default_catalog()
    click.echo(f"PASS Catalog: {counts['sessions']} sessions, {counts['add_ons']} add-ons created")

    existing = db.session.query(User).filter_by(username=admin_username).first()
    if existing:
        click.echo(f"WARN  User '{admin_username}' already exists, skipping...")
    else:
        try:
            create_user(admin_username, admin_password, role=ROLE_ADMIN)
            click.echo(f"PASS Created admin user: {admin_username}")
        except ValidationError as e:
            click.echo(f"FAIL Failed to create admin '{admin_username}': {str(e)}")

    click.echo("\nDONE Studio system initialized")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


# =============================================================================
# USER MANAGEMENT COMMANDS
# =============================================================================

@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(VALID_ROLES), default='user', show_default=True, help='Role')
@with_appcontext
def create_user_cli(username, password, role):
    """
    Create a new user.

    Password must be at least 8 characters with a letter and a digit.
    """
    try:
        user = create_user(username=username, password=password, role=role)
        click.echo(f"PASS Created user: {user.username} with role '{user.role}'")
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {e.reason}")
    except (ValidationError, ConflictError) as e:
        click.echo(f"FAIL Failed to create user: {str(e)}")


@users_group.command('list')
@with_appcontext
def list_users_cli():
    """List all users with roles and active status."""
    users = db.session.query(User).order_by(User.username).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*60)
    click.echo(f"{'ID':<5} {'Username':<25} {'Role':<10} {'Active'}")
    click.echo("="*60)
    for user in users:
        active_str = "Yes" if user.is_active else "No"
        click.echo(f"{user.id:<5} {user.username:<25} {user.role:<10} {active_str}")
    click.echo("="*60 + "\n")


# =============================================================================
# CATALOG COMMANDS
# =============================================================================

@click.group('catalog')
def catalog_group():
    """Catalog inspection commands."""


@catalog_group.command('list')
@with_appcontext
def list_catalog_cli():
    """List sessions and add-ons with prices."""
    sessions = db.session.query(Session).order_by(Session.id).all()
    add_ons = db.session.query(AddOn).order_by(AddOn.id).all()

    if not sessions and not add_ons:
        click.echo("Catalog is empty. Run 'python -m flask system init' first.")
        return

    click.echo("\nSESSIONS")
    for s in sessions:
        click.echo(f"  {s.id:<4} {s.name:<30} {format_rupiah(s.price)}")

    click.echo("\nADD-ONS")
    for a in add_ons:
        click.echo(f"  {a.id:<4} {a.name:<30} {format_rupiah(a.price)}")
    click.echo("")


# =============================================================================
# PERMISSION COMMANDS
# =============================================================================

@click.group('perms')
def perms_group():
    """Permission inspection commands."""


@perms_group.command('list')
@click.option('--role', type=click.Choice(VALID_ROLES), help='Only permissions granted to this role')
@click.option('--category', help='Filter by category (e.g. TRANSACTIONS)')
def list_perms_cli(role, category):
    """List permissions (optionally filtered by role or category)."""
    if category:
        perms = get_permissions_by_category(category.upper())
        if not perms:
            click.echo(f"FAIL Unknown category '{category}'")
            return
        codes = [perm[0] for perm in perms]
    else:
        codes = get_all_permission_codes()

    if role:
        granted = get_role_permissions(role)
        codes = [code for code in codes if code in granted]

    for code in codes:
        definition = get_permission_definition(code)
        click.echo(f"{definition['category']:<14} {code:<26} {definition['description']}")


@perms_group.command('check')
@click.argument('role')
@click.argument('permission_code')
def check_perm_cli(role, permission_code):
    """Check whether a role holds a permission."""
    if not validate_permission_code(permission_code):
        click.echo(f"FAIL Unknown permission '{permission_code}'")
        return
    if permission_code in get_role_permissions(role):
        click.echo(f"PASS {role} has {permission_code}")
    else:
        click.echo(f"DENY {role} does not have {permission_code}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(catalog_group)
    app.cli.add_command(perms_group)
