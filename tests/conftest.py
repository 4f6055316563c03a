import pytest

from radical_backend import create_app
from radical_backend.init_db import db


class RecordingSender:
    """Collects e-mails instead of sending them."""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send(self, to_email, content):
        if self.fail:
            raise RuntimeError('mail server unavailable')
        self.sent.append((to_email, content))
        return 'recorded'


@pytest.fixture()
def app():
    app = create_app('radical_backend.config.TestConfig')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(app):
    """For tests that call the service layer directly instead of going through the client."""
    with app.app_context():
        yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def mailbox(app):
    sender = RecordingSender()
    app.extensions['email_dispatcher'].sender = sender
    return sender


@pytest.fixture()
def session_id(app):
    with app.app_context():
        return app.extensions['admin_sessions'].create_session()


@pytest.fixture()
def auth_headers(session_id):
    return {'x-admin-session': session_id}
