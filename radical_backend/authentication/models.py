# radical_backend/authentication/models.py
from flask_login import UserMixin

CREDENTIALS_COLLECTION = 'admin-credentials'
OTP_COLLECTION = 'password-reset-otps'


class AdminUser(UserMixin):
    """The single site administrator, identified per request by its session id."""

    def __init__(self, session_id, email=None):
        self.id = session_id
        self.session_id = session_id
        self.email = email

    def __repr__(self):
        return f'<AdminUser {self.email}>'
