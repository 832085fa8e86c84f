# Overview: Flask CLI command groups for bootstrap, user management, and document maintenance.

# backend/merrycream/cli.py
# Commands Legend (run from the backend directory):
# - flask --app wsgi system init
#   Create tables and the bootstrap administrator (idempotent).
# - flask --app wsgi users list
#   List all users with role and pending password change.
# - flask --app wsgi users create --username alice --password "Password123!" --role manager
#   Create a user (prompts if options are omitted).
# - flask --app wsgi invoices render-missing
#   Re-render invoice PDFs that are missing from INVOICE_OUTPUT_DIR.
# - flask --app wsgi db upgrade
#   Apply migrations (Flask-Migrate).

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import ROLES, DEFAULT_ROLE
from .services import auth_service, invoice_service
from .validation import ValidationError, ConflictError


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Create the schema and, when no users exist, the bootstrap administrator.

    The administrator must change its password at first login.
    """
    db.create_all()
    click.echo("PASS Schema ready")

    admin = auth_service.ensure_bootstrap_admin()
    if admin:
        click.echo(f"PASS Created bootstrap administrator '{admin.username}' (password change required)")
    else:
        click.echo("PASS Users already exist, bootstrap skipped")


@click.group('users')
def users_group():
    """User inspection and creation."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = auth_service.list_users()

    if not users:
        click.echo("No users found.")
        return

    click.echo(f"{'ID':<5} {'Username':<24} {'Role':<10} {'Must change password'}")
    for user in users:
        flag = "Yes" if user.must_change_password else "No"
        click.echo(f"{user.id:<5} {user.username:<24} {user.role:<10} {flag}")


@users_group.command('create')
@click.option('--username', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice(ROLES), default=DEFAULT_ROLE, show_default=True)
@with_appcontext
def create_user(username, password, role):
    """Create a user account."""
    try:
        user = auth_service.create_user(username, password, role)
    except (ValidationError, ConflictError) as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created user: {user.username} (ID: {user.id}) with role '{user.role}'")


@click.group('invoices')
def invoices_group():
    """Invoice document maintenance."""


@invoices_group.command('render-missing')
@with_appcontext
def render_missing():
    """Render PDFs for invoices whose document is missing on disk."""
    rendered = invoice_service.render_missing_documents()
    for number in rendered:
        click.echo(f"PASS Rendered {number}")
    click.echo(f"DONE {len(rendered)} document(s) rendered")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(invoices_group)
