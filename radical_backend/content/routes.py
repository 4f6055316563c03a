# radical_backend/content/routes.py
import re
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required
from radical_backend.logging_config import setup_logging
from radical_backend.authentication.routes import json_body
from radical_backend.content.models import GALLERY_CATEGORIES
from radical_backend.content.views import messages, gallery, services, settings, about, dashboard_stats

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
CONTACT_FIELDS = ('name', 'email', 'phone', 'message')

content_bp = Blueprint('content', __name__, url_prefix='/api')

logger = setup_logging()


def _missing(data, fields):
    return [field for field in fields if not data.get(field)]


def _invalid_flag(data, field):
    return field in data and not isinstance(data[field], bool)


def _validate_gallery(data):
    if 'category' in data and data['category'] not in GALLERY_CATEGORIES:
        return f"Category must be one of: {', '.join(GALLERY_CATEGORIES)}"
    if _invalid_flag(data, 'visible'):
        return 'visible must be true or false'
    return None


def _validate_about(data):
    if 'values' not in data:
        return None
    values = data['values']
    if not isinstance(values, list):
        return 'values must be a list'
    for value in values:
        if not isinstance(value, dict) or not value.get('title') or 'description' not in value:
            return 'Each value needs a title and a description'
    return None


# Public site

@content_bp.route('/ping', methods=['GET'])
def ping():
    return jsonify({'message': current_app.config['PING_MESSAGE']}), 200


@content_bp.route('/contact', methods=['POST'])
def submit_contact_form():
    data = json_body()

    if _missing(data, CONTACT_FIELDS):
        logger.warning("Contact form submitted with missing fields.")
        return jsonify({'message': 'All fields are required'}), 400

    if not all(isinstance(data[field], str) for field in CONTACT_FIELDS):
        logger.warning("Contact form submitted with non-text fields.")
        return jsonify({'message': 'All fields must be text'}), 400

    if not EMAIL_PATTERN.fullmatch(data['email']):
        logger.warning("Invalid email format on contact form.")
        return jsonify({'message': 'Invalid email format'}), 400

    message = messages.create({
        'name': data['name'],
        'email': data['email'],
        'phone': data['phone'],
        'message': data['message'],
    })
    return jsonify({
        'success': True,
        'message': 'Thank you! We received your message.',
        'id': message['id'],
    }), 200


@content_bp.route('/services', methods=['GET'])
def list_visible_services():
    return jsonify(services.list_visible()), 200


@content_bp.route('/gallery', methods=['GET'])
def list_visible_gallery():
    return jsonify(gallery.list_visible()), 200


@content_bp.route('/about', methods=['GET'])
@content_bp.route('/admin/about', methods=['GET'])
def get_about():
    return jsonify(about.get()), 200


# Admin panel

@content_bp.route('/admin/dashboard', methods=['GET'])
@login_required
def get_dashboard():
    return jsonify(dashboard_stats()), 200


@content_bp.route('/admin/messages', methods=['GET'])
@login_required
def list_messages():
    query = request.args.get('q')
    found = messages.search(query) if query else messages.list()
    found.reverse()
    return jsonify(found), 200


@content_bp.route('/admin/messages/<message_id>', methods=['DELETE'])
@login_required
def delete_message(message_id):
    messages.delete(message_id)
    return jsonify({'success': True}), 200


@content_bp.route('/admin/messages/<message_id>/read', methods=['PATCH'])
@login_required
def mark_message_read(message_id):
    data = json_body()
    read = data.get('read', True)
    if not isinstance(read, bool):
        return jsonify({'message': 'read must be true or false'}), 400
    messages.mark_read(message_id, read)
    return jsonify({'success': True}), 200


@content_bp.route('/admin/gallery', methods=['GET'])
def list_gallery():
    return jsonify(gallery.list()), 200


@content_bp.route('/admin/gallery', methods=['POST'])
@login_required
def create_gallery_image():
    data = json_body()

    if _missing(data, ('title', 'category', 'imageUrl')):
        return jsonify({'message': 'Missing required fields'}), 400

    error = _validate_gallery(data)
    if error:
        return jsonify({'message': error}), 400

    return jsonify(gallery.create(data)), 200


@content_bp.route('/admin/gallery/<image_id>', methods=['PATCH'])
@login_required
def update_gallery_image(image_id):
    data = json_body()

    error = _validate_gallery(data)
    if error:
        return jsonify({'message': error}), 400

    return jsonify(gallery.update(image_id, data)), 200


@content_bp.route('/admin/gallery/<image_id>', methods=['DELETE'])
@login_required
def delete_gallery_image(image_id):
    gallery.delete(image_id)
    return jsonify({'success': True}), 200


@content_bp.route('/admin/services', methods=['GET'])
@login_required
def list_services():
    return jsonify(services.list()), 200


@content_bp.route('/admin/services', methods=['POST'])
@login_required
def create_service():
    data = json_body()

    if _missing(data, ('name', 'description', 'category', 'imageUrl')):
        return jsonify({'message': 'Missing required fields'}), 400

    if _invalid_flag(data, 'visible'):
        return jsonify({'message': 'visible must be true or false'}), 400

    return jsonify(services.create(data)), 200


@content_bp.route('/admin/services/<service_id>', methods=['PATCH'])
@login_required
def update_service(service_id):
    data = json_body()

    if _invalid_flag(data, 'visible'):
        return jsonify({'message': 'visible must be true or false'}), 400

    return jsonify(services.update(service_id, data)), 200


@content_bp.route('/admin/services/<service_id>', methods=['DELETE'])
@login_required
def delete_service(service_id):
    services.delete(service_id)
    return jsonify({'success': True}), 200


@content_bp.route('/admin/settings', methods=['GET'])
@login_required
def get_settings():
    return jsonify(settings.get()), 200


@content_bp.route('/admin/settings', methods=['PATCH'])
@login_required
def update_settings():
    data = json_body()

    if 'password' in data:
        logger.warning("Password change attempted through the settings endpoint.")
        return jsonify({'message': 'Use dedicated password endpoint'}), 400

    if _invalid_flag(data, 'maintenanceMode'):
        return jsonify({'message': 'maintenanceMode must be true or false'}), 400

    return jsonify(settings.update(data)), 200


@content_bp.route('/admin/about', methods=['PATCH'])
@login_required
def update_about():
    data = json_body()

    error = _validate_about(data)
    if error:
        return jsonify({'message': error}), 400

    return jsonify(about.update(data)), 200
