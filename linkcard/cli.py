"""
LinkCard CLI
============

Flask CLI commands:

    flask --app linkcard.app init-db
    flask --app linkcard.app set-password [PASSWORD]
    flask --app linkcard.app import-json DATA_DIR [--uploads-dir DIR]
    flask --app linkcard.app cleanup-logs [--days N]
"""

import click
from flask import current_app
from flask.cli import with_appcontext

from .core import Database, LoggingService
from .legacy import LegacyImportError, import_legacy_data
from .modules.auth.utils import set_admin_password, validate_password_strength
from .modules.site.database import get_admin_password_hash, init_site_config


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create the database schema and default config."""
    Database.init_schema()
    init_site_config()
    click.echo(f"Database ready at {current_app.config['LINKCARD_DB']}")


@click.command('set-password')
@click.argument('password', required=False)
@click.option('--force', is_flag=True, help='Replace an existing password without asking.')
@with_appcontext
def set_password_command(password, force):
    """Set the admin password (prompts when PASSWORD is omitted)."""
    if get_admin_password_hash() and not force and password is None:
        if not click.confirm('Admin password is already set. Do you want to change it?', default=False):
            click.echo('Password unchanged.')
            return

    if password is None:
        password = click.prompt('New admin password', hide_input=True, confirmation_prompt=True)

    if not validate_password_strength(password):
        min_length = current_app.config.get('MIN_PASSWORD_LENGTH', 6)
        raise click.ClickException(f'Password must be at least {min_length} characters long.')

    set_admin_password(password)
    click.echo('Password updated. Existing admin tokens are no longer valid.')


@click.command('import-json')
@click.argument('data_dir', type=click.Path(exists=True, file_okay=False))
@click.option('--uploads-dir', type=click.Path(exists=True, file_okay=False),
              help='Legacy uploads folder to copy referenced images from.')
@with_appcontext
def import_json_command(data_dir, uploads_dir):
    """Import links.json/config.json from the file-backed server."""
    try:
        summary = import_legacy_data(data_dir, uploads_dir)
    except LegacyImportError as e:
        raise click.ClickException(str(e))

    click.echo(f"Imported {summary['links']} links")
    click.echo(f"Profile: {'imported' if summary['profile'] else 'unchanged'}")
    click.echo(f"Settings: {'imported' if summary['settings'] else 'unchanged'}")
    click.echo(f"Admin password: {'imported' if summary['password'] else 'unchanged'}")
    if uploads_dir:
        click.echo(f"Copied {summary['files']} uploaded files")


@click.command('cleanup-logs')
@click.option('--days', type=click.IntRange(min=0),
              help='Keep this many days of logs (default: LOG_RETENTION_DAYS).')
@with_appcontext
def cleanup_logs_command(days):
    """Delete persistent log entries older than the retention window."""
    if days is None:
        days = current_app.config.get('LOG_RETENTION_DAYS', 30)
    deleted = LoggingService.cleanup_old_logs(days)
    click.echo(f'Removed {deleted} log entries older than {days} days')
