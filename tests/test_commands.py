import json

from radical_backend.authentication.views import check_admin_password, get_admin_credentials
from radical_backend.content.views import gallery


def test_set_password_command(app_ctx):
    runner = app_ctx.test_cli_runner()
    result = runner.invoke(args=['admin', 'set-password', '--password', 'cli-secret'])
    assert result.exit_code == 0, result.output
    assert check_admin_password('cli-secret')
    assert not check_admin_password('admin123')


def test_set_password_rejects_short_password(app_ctx):
    runner = app_ctx.test_cli_runner()
    result = runner.invoke(args=['admin', 'set-password', '--password', 'abc'])
    assert result.exit_code != 0
    assert check_admin_password('admin123')


def test_set_email_command(app_ctx):
    result = app_ctx.test_cli_runner().invoke(args=['admin', 'set-email', 'owner@radicaldesign.com'])
    assert result.exit_code == 0, result.output
    assert get_admin_credentials()['email'] == 'owner@radicaldesign.com'


def test_purge_sessions_without_ttl(app_ctx):
    result = app_ctx.test_cli_runner().invoke(args=['admin', 'purge-sessions'])
    assert result.exit_code == 0
    assert 'Removed 0' in result.output


def test_import_gallery_command(app_ctx, tmp_path):
    source = tmp_path / 'gallery.json'
    source.write_text(json.dumps([
        {'title': 'Mug print', 'category': 'Mugs', 'imageUrl': '/img/mug.png'},
        {'title': 'Broken', 'category': 'Hats', 'imageUrl': '/img/hat.png'},
        {'title': 'No url', 'category': 'Mugs'},
    ]))

    result = app_ctx.test_cli_runner().invoke(args=['content', 'import-gallery', str(source)])
    assert result.exit_code == 0, result.output
    assert 'Imported 1' in result.output
    assert [image['title'] for image in gallery.list()] == ['Mug print']


def test_import_gallery_missing_file(app_ctx, tmp_path):
    result = app_ctx.test_cli_runner().invoke(args=['content', 'import-gallery', str(tmp_path / 'nope.json')])
    assert result.exit_code != 0
    assert 'not found' in result.output
