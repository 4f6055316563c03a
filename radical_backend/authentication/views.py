# radical_backend/authentication/views.py
import secrets
from datetime import datetime, timedelta, timezone
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash
from radical_backend.authentication.models import CREDENTIALS_COLLECTION, OTP_COLLECTION
from radical_backend.logging_config import setup_logging
from radical_backend.notifications.email import build_otp_email
from radical_backend.records.views import collection_lock, read_collection, write_collection

logger = setup_logging()


def now_utc():
    return datetime.now(timezone.utc)


def _hash_secret(value):
    return generate_password_hash(str(value), method=current_app.config['PASSWORD_HASH_METHOD'])


def get_session_registry():
    return current_app.extensions['admin_sessions']


# Admin credentials

def ensure_admin_credentials():
    """Seed the admin account from config the first time the app starts."""
    with collection_lock(CREDENTIALS_COLLECTION):
        if read_collection(CREDENTIALS_COLLECTION):
            return False
        credentials = {
            'passwordHash': _hash_secret(current_app.config['ADMIN_PASSWORD']),
            'email': current_app.config['ADMIN_EMAIL'],
        }
        write_collection(CREDENTIALS_COLLECTION, [credentials])
    logger.info(f"Admin credentials seeded for {credentials['email']}.")
    return True


def get_admin_credentials():
    credentials = read_collection(CREDENTIALS_COLLECTION)
    if not credentials:
        ensure_admin_credentials()
        credentials = read_collection(CREDENTIALS_COLLECTION)
    return credentials[0]


def check_admin_password(password):
    if not password:
        return False
    credentials = get_admin_credentials()
    return check_password_hash(credentials['passwordHash'], str(password))


def update_admin_password(new_password):
    with collection_lock(CREDENTIALS_COLLECTION):
        credentials = get_admin_credentials()
        credentials['passwordHash'] = _hash_secret(new_password)
        write_collection(CREDENTIALS_COLLECTION, [credentials])
    logger.info("Admin password updated.")
    return credentials


def update_admin_email(email):
    with collection_lock(CREDENTIALS_COLLECTION):
        credentials = get_admin_credentials()
        credentials['email'] = email
        write_collection(CREDENTIALS_COLLECTION, [credentials])
    logger.info(f"Admin email changed to {email}.")
    return credentials


# Password reset OTPs

def generate_otp():
    return str(100000 + secrets.randbelow(900000))


def _is_expired(otp, now):
    return datetime.fromisoformat(otp['expiresAt']) < now


def issue_otp(email):
    """Create a fresh OTP for ``email``, replacing any earlier one, and e-mail it."""
    code = generate_otp()
    now = now_utc()
    ttl = timedelta(minutes=current_app.config['OTP_TTL_MINUTES'])

    with collection_lock(OTP_COLLECTION):
        otps = read_collection(OTP_COLLECTION)
        remaining = [o for o in otps if o['email'] != email and not _is_expired(o, now)]
        remaining.append({
            'codeHash': _hash_secret(code),
            'email': email,
            'createdAt': now.isoformat(),
            'expiresAt': (now + ttl).isoformat(),
            'verified': False,
            'attempts': 0,
        })
        write_collection(OTP_COLLECTION, remaining)

    logger.info(f"[PASSWORD RESET] OTP generated for {email}, expires in {ttl}.")
    send_otp_email(email, code)
    return code


def send_otp_email(email, code):
    try:
        content = build_otp_email(current_app.config['ADMIN_NAME'], code,
                                  current_app.config['OTP_TTL_MINUTES'])
        current_app.extensions['email_dispatcher'].dispatch(email, content)
    except Exception as e:
        logger.error(f"[PASSWORD RESET] Could not dispatch OTP email to {email}: {e}")


def verify_otp(email, code):
    """Check ``code`` for ``email``; a success marks the OTP verified so it cannot be reused."""
    now = now_utc()
    max_attempts = current_app.config['OTP_MAX_ATTEMPTS']

    with collection_lock(OTP_COLLECTION):
        otps = read_collection(OTP_COLLECTION)
        otp = next((o for o in otps if o['email'] == email), None)
        if otp is None:
            logger.warning(f"OTP verification for {email} without an issued code.")
            return False

        valid = (
            not otp['verified']
            and not _is_expired(otp, now)
            and otp['attempts'] < max_attempts
            and code is not None
            and check_password_hash(otp['codeHash'], str(code).strip())
        )
        if valid:
            otp['verified'] = True
        else:
            otp['attempts'] = min(otp['attempts'] + 1, max_attempts)
        write_collection(OTP_COLLECTION, otps)

    if valid:
        logger.info(f"[PASSWORD RESET] OTP verified for {email}.")
    else:
        logger.warning(f"[PASSWORD RESET] Rejected OTP for {email} (attempt {otp['attempts']}).")
    return valid


def get_verified_otp(email):
    now = now_utc()
    for otp in read_collection(OTP_COLLECTION):
        if otp['email'] == email and otp['verified'] and not _is_expired(otp, now):
            return otp
    return None


def clear_verified_otp(email):
    with collection_lock(OTP_COLLECTION):
        otps = read_collection(OTP_COLLECTION)
        remaining = [o for o in otps if not (o['email'] == email and o['verified'])]
        write_collection(OTP_COLLECTION, remaining)
