# radical_backend/config.py
import os
import binascii


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name, default=None):
    value = os.environ.get(name)
    if not value:
        return default
    return int(value)


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or binascii.hexlify(os.urandom(24)).decode()

    BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    INSTANCE_DIR = os.path.join(BASE_DIR, 'instance')

    DATABASE_PATH = os.path.join(INSTANCE_DIR, 'radical_design.db')

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or f'sqlite:///{DATABASE_PATH}'

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    APP_ENV = os.environ.get('APP_ENV', 'development')

    # Seed values for the admin account, used only until the first password change
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'admin123'
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL') or 'info@radicaldesign.com'
    ADMIN_NAME = os.environ.get('ADMIN_NAME') or 'Admin'
    PASSWORD_HASH_METHOD = os.environ.get('PASSWORD_HASH_METHOD') or 'pbkdf2:sha256'
    PASSWORD_MIN_LENGTH = 6

    # Admin sessions: 'memory' or 'database'
    SESSION_BACKEND = os.environ.get('SESSION_BACKEND', 'memory')
    ADMIN_SESSION_TTL_MINUTES = _env_int('ADMIN_SESSION_TTL_MINUTES')

    OTP_TTL_MINUTES = 10
    OTP_MAX_ATTEMPTS = 5
    EXPOSE_OTP_IN_RESPONSE = _env_flag('EXPOSE_OTP_IN_RESPONSE', APP_ENV != 'production')

    # E-mail: 'console', 'smtp', 'brevo' or 'resend'
    EMAIL_PROVIDER = os.environ.get('EMAIL_PROVIDER', 'console')
    EMAIL_FROM = os.environ.get('EMAIL_FROM') or 'noreply@radicaldesign.com'
    EMAIL_ASYNC = _env_flag('EMAIL_ASYNC', True)
    EMAIL_SMTP_HOST = os.environ.get('EMAIL_SMTP_HOST')
    EMAIL_SMTP_PORT = _env_int('EMAIL_SMTP_PORT', 587)
    EMAIL_SMTP_USER = os.environ.get('EMAIL_SMTP_USER')
    EMAIL_SMTP_PASS = os.environ.get('EMAIL_SMTP_PASS')
    EMAIL_SMTP_SECURE = _env_flag('EMAIL_SMTP_SECURE')
    BREVO_API_KEY = os.environ.get('BREVO_API_KEY')
    RESEND_API_KEY = os.environ.get('RESEND_API_KEY')

    PING_MESSAGE = os.environ.get('PING_MESSAGE') or 'ping'


class ProductionConfig(Config):
    APP_ENV = 'production'
    EXPOSE_OTP_IN_RESPONSE = _env_flag('EXPOSE_OTP_IN_RESPONSE', False)


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    APP_ENV = 'development'
    ADMIN_PASSWORD = 'admin123'
    ADMIN_EMAIL = 'info@radicaldesign.com'
    PASSWORD_HASH_METHOD = 'pbkdf2:sha256:1000'
    SESSION_BACKEND = 'memory'
    ADMIN_SESSION_TTL_MINUTES = None
    EXPOSE_OTP_IN_RESPONSE = True
    EMAIL_PROVIDER = 'console'
    EMAIL_ASYNC = False
