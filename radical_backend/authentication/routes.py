# radical_backend/authentication/routes.py
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError
from radical_backend.logging_config import setup_logging
from radical_backend.authentication.views import (
    get_session_registry, get_admin_credentials, check_admin_password, update_admin_password,
    issue_otp, verify_otp, get_verified_otp, clear_verified_otp,
)

SESSION_HEADER = 'x-admin-session'

auth_bp = Blueprint('auth', __name__, url_prefix='/api/admin')

# Setup logging
logger = setup_logging()


def json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _password_too_short(password):
    return not isinstance(password, str) or len(password) < current_app.config['PASSWORD_MIN_LENGTH']


def _password_length_message():
    return f"Password must be at least {current_app.config['PASSWORD_MIN_LENGTH']} characters"


@auth_bp.route('/login', methods=['POST'])
def login():
    data = json_body()
    password = data.get('password')

    if not password:
        logger.warning("Admin login attempt without a password.")
        return jsonify({'success': False, 'message': 'Password is required'}), 400

    if not check_admin_password(password):
        logger.warning("Failed admin login attempt.")
        return jsonify({'success': False, 'message': 'Invalid password'}), 401

    session_id = get_session_registry().create_session()
    logger.info("Admin logged in successfully.")
    return jsonify({'success': True, 'sessionId': session_id}), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    data = json_body()
    session_id = data.get('sessionId') or request.headers.get(SESSION_HEADER)
    get_session_registry().destroy_session(session_id)
    logger.info("Admin logged out.")
    return jsonify({'success': True}), 200


@auth_bp.route('/settings/password', methods=['POST'])
@login_required
def change_password():
    data = json_body()
    current_password = data.get('currentPassword')
    new_password = data.get('newPassword')

    if not current_password or not new_password:
        return jsonify({'message': 'Current and new password are required'}), 400

    if _password_too_short(new_password):
        logger.warning("Password too short during password change.")
        return jsonify({'message': _password_length_message()}), 400

    if not check_admin_password(current_password):
        logger.warning(f"Wrong current password on password change ({current_user.session_id[:6]}...).")
        return jsonify({'message': 'Current password is incorrect'}), 401

    update_admin_password(new_password)
    return jsonify({'success': True}), 200


@auth_bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    data = json_body()
    try:
        email = data.get('email') or get_admin_credentials().get('email')
        if not email:
            return jsonify({'message': 'Email address is required'}), 400

        otp_code = issue_otp(email)
    except SQLAlchemyError as e:
        logger.error(f"Failed to generate OTP: {e}")
        return jsonify({'message': 'Failed to process password reset request'}), 500

    # Delivery problems are never reported back, only logged
    response = {
        'success': True,
        'message': 'Verification code sent to your email. Please check your inbox.',
    }
    if current_app.config['EXPOSE_OTP_IN_RESPONSE']:
        response['otpCode'] = otp_code
    return jsonify(response), 200


@auth_bp.route('/verify-otp', methods=['POST'])
def verify_otp_route():
    data = json_body()
    otp_code = data.get('otpCode')

    if not otp_code:
        return jsonify({'message': 'OTP code is required'}), 400

    try:
        email = data.get('email') or get_admin_credentials().get('email')
        if not email:
            return jsonify({'message': 'Email is required for verification'}), 400

        if not verify_otp(email, otp_code):
            return jsonify({'message': 'Invalid or expired verification code'}), 401
    except SQLAlchemyError as e:
        logger.error(f"OTP verification error: {e}")
        return jsonify({'message': 'Failed to verify OTP code'}), 500

    return jsonify({
        'success': True,
        'message': 'Verification successful. You can now reset your password.',
    }), 200


@auth_bp.route('/reset-password', methods=['POST'])
def reset_password():
    data = json_body()
    new_password = data.get('newPassword')

    if not new_password:
        return jsonify({'message': 'Password is required'}), 400

    if _password_too_short(new_password):
        logger.warning("Password too short during password reset.")
        return jsonify({'message': _password_length_message()}), 400

    try:
        email = data.get('email') or get_admin_credentials().get('email')
        if not email:
            return jsonify({'message': 'Email is required for password reset'}), 400

        if get_verified_otp(email) is None:
            logger.warning(f"Password reset for {email} without a verified OTP.")
            return jsonify({'message': 'Please verify your email first'}), 401

        update_admin_password(new_password)
        clear_verified_otp(email)
    except SQLAlchemyError as e:
        logger.error(f"Failed to reset password: {e}")
        return jsonify({'message': 'Failed to reset password'}), 500

    logger.info(f"Admin password reset through OTP sent to {email}.")
    return jsonify({'success': True, 'message': 'Password reset successfully'}), 200
