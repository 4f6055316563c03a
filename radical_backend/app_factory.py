# radical_backend/app_factory.py
import os
from flask import Flask, jsonify, request
from flask_login import LoginManager
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from werkzeug.exceptions import HTTPException
from radical_backend.init_db import db
from radical_backend.logging_config import setup_logging
from radical_backend.authentication.models import AdminUser
from radical_backend.authentication.routes import SESSION_HEADER
from radical_backend.authentication.sessions import create_session_registry
from radical_backend.authentication.views import ensure_admin_credentials, get_admin_credentials
from radical_backend.notifications.email import EmailDispatcher, create_sender

logger = setup_logging()


def create_app(config_class='radical_backend.config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///') and not app.testing:
        os.makedirs(app.config['INSTANCE_DIR'], exist_ok=True)

    db.init_app(app)

    app.extensions['admin_sessions'] = create_session_registry(app.config)
    app.extensions['email_dispatcher'] = EmailDispatcher(
        create_sender(app.config), run_async=app.config['EMAIL_ASYNC'])

    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.request_loader
    def load_admin_from_request(req):
        session_id = req.headers.get(SESSION_HEADER)
        if session_id and app.extensions['admin_sessions'].is_active(session_id):
            return AdminUser(session_id, email=get_admin_credentials().get('email'))
        return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'message': 'Unauthorized'}), 401

    # Import and register blueprints
    from radical_backend.authentication.routes import auth_bp as auth_blueprint
    app.register_blueprint(auth_blueprint)

    from radical_backend.content.routes import content_bp as content_blueprint
    app.register_blueprint(content_blueprint)

    from radical_backend.commands import admin_cli, content_cli
    app.cli.add_command(admin_cli)
    app.cli.add_command(content_cli)

    register_error_handlers(app)

    with app.app_context():
        try:
            db.create_all()
            ensure_admin_credentials()
        except OperationalError as e:
            app.logger.error(f"OperationalError during database initialization: {e}")

    return app


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error):
        db.session.rollback()
        logger.error(f"Storage error on {request.method} {request.path}: {error}")
        return jsonify({'message': 'An internal error occurred.'}), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.error(f"Unhandled error on {request.method} {request.path}: {error}", exc_info=error)
        return jsonify({'message': 'An internal error occurred.'}), 500
