# radical_backend/commands.py
import json
import click
from flask import current_app
from flask.cli import AppGroup
from radical_backend.logging_config import setup_logging
from radical_backend.authentication.views import update_admin_password, update_admin_email
from radical_backend.content.models import GALLERY_CATEGORIES
from radical_backend.content.views import gallery

logger = setup_logging()

admin_cli = AppGroup('admin', help='Manage the admin account.')
content_cli = AppGroup('content', help='Manage site content.')


@admin_cli.command('set-password')
@click.password_option('--password', help='New admin password.')
def set_password(password):
    """Replace the admin password."""
    if len(password) < current_app.config['PASSWORD_MIN_LENGTH']:
        raise click.BadParameter(
            f"must be at least {current_app.config['PASSWORD_MIN_LENGTH']} characters",
            param_hint='--password')
    update_admin_password(password)
    click.echo('Admin password updated.')


@admin_cli.command('set-email')
@click.argument('email')
def set_email(email):
    """Change the address password-reset codes are sent to by default."""
    update_admin_email(email)
    click.echo(f'Admin email set to {email}.')


@admin_cli.command('purge-sessions')
def purge_sessions():
    """Drop admin sessions older than ADMIN_SESSION_TTL_MINUTES."""
    removed = current_app.extensions['admin_sessions'].purge_expired()
    click.echo(f'Removed {removed} expired session(s).')


@content_cli.command('import-gallery')
@click.argument('json_path', type=click.Path(dir_okay=False))
def import_gallery(json_path):
    """Bulk-create gallery images from a JSON list of {title, category, imageUrl}."""
    try:
        with open(json_path, 'r') as f:
            images = json.load(f)
    except FileNotFoundError:
        raise click.ClickException(f"Gallery file not found: {json_path}")
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Error decoding the gallery file: {e}")

    if isinstance(images, dict):
        images = images.get('images', [])

    created = 0
    for image in images:
        if not all(image.get(key) for key in ('title', 'category', 'imageUrl')):
            logger.warning(f"Skipping gallery entry with missing fields: {image}")
            continue
        if image['category'] not in GALLERY_CATEGORIES:
            logger.warning(f"Skipping gallery entry with unknown category: {image['category']}")
            continue
        gallery.create(image)
        created += 1

    click.echo(f'Imported {created} gallery image(s).')
