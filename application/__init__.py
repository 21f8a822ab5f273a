from dotenv import load_dotenv

load_dotenv()

import os
from flask import Flask, session
import logging
from datetime import timedelta

from domain import db
from domain.user import User  # noqa: F401  (registers the table)
from domain.credential import Credential  # noqa: F401

from utilities.hashing_util import HashingUtility

from repositories.user_repository import UserRepository
from repositories.credential_repository import CredentialRepository

from services.auth_service import AuthService
from services.duplicate_checker import DuplicateChecker
from services.credential_service import CredentialService
from services.csv_import_service import CsvImportService
from services.csv_export_service import CsvExportService
from services.health_service import HealthService

from .error_handlers import register_error_handlers

APP_NAME = "Credential Vault"
DEFAULT_MAX_IMPORT_BYTES = 5 * 1024 * 1024
INSECURE_DEV_SECRET = 'fallback_dev_secret_key_!@#$_SHOULD_BE_CHANGED_IN_PROD'


def create_app(config_overrides: dict | None = None):
    app = Flask(__name__, instance_relative_config=True)

    is_development = os.environ.get("FLASK_ENV", "production").lower() == "development" or app.debug
    log_level = logging.DEBUG if is_development else logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s %(levelname)-8s [%(name)-20s] %(filename)s:%(lineno)d %(funcName)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True
    )

    app.logger.setLevel(log_level)

    app.logger.info(f"Creating Flask application '{APP_NAME}'...")

    app.config.update(
        APP_NAME=APP_NAME,
        SECRET_KEY=os.getenv('SECRET_KEY', INSECURE_DEV_SECRET),
        SQLALCHEMY_DATABASE_URI=os.getenv('DATABASE_URL', f'sqlite:///{os.path.join(app.instance_path, "vault.sqlite3")}'),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        PERMANENT_SESSION_LIFETIME=timedelta(minutes=int(os.getenv('SESSION_LIFETIME_MINUTES', '60'))),
        MAX_CONTENT_LENGTH=int(os.getenv('MAX_IMPORT_BYTES', str(DEFAULT_MAX_IMPORT_BYTES))),
        PASSWORD_HASH_METHOD=os.getenv('PASSWORD_HASH_METHOD', HashingUtility.DEFAULT_METHOD),
        SESSION_COOKIE_SECURE=not is_development,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        SESSION_REFRESH_EACH_REQUEST=True,
    )
    if config_overrides:
        app.config.update(config_overrides)

    if 'sqlite' in app.config['SQLALCHEMY_DATABASE_URI'] and not os.path.exists(app.instance_path):
        try:
            os.makedirs(app.instance_path)
            app.logger.info(f"Created instance directory: {app.instance_path}")
        except OSError as e:
            app.logger.error(f"Could not create instance directory {app.instance_path}: {e}")

    if app.config['SECRET_KEY'] == INSECURE_DEV_SECRET:
        app.logger.warning("SECRET_KEY is not set; using the insecure development fallback.")
    app.logger.info(f"PERMANENT_SESSION_LIFETIME set to {app.config['PERMANENT_SESSION_LIFETIME'].total_seconds() / 60:.0f} minutes.")

    try:
        db.init_app(app)
        with app.app_context():
            db.create_all()
        app.logger.info("Database initialised.")
    except Exception as e:
        app.logger.critical(f"Database initialisation failed. SQLALCHEMY_DATABASE_URI: '{app.config.get('SQLALCHEMY_DATABASE_URI')}'. Error: {e}", exc_info=True)
        raise RuntimeError(f"Could not initialise the database: {e}") from e

    hashing_util = HashingUtility(method=app.config['PASSWORD_HASH_METHOD'])

    user_repository = UserRepository()
    credential_repository = CredentialRepository()

    duplicate_checker = DuplicateChecker(credential_repository=credential_repository)
    credential_service = CredentialService(
        credential_repository=credential_repository,
        duplicate_checker=duplicate_checker
    )
    auth_service = AuthService(user_repository=user_repository, hashing_utility=hashing_util)

    app.extensions['auth_service'] = auth_service
    app.extensions['duplicate_checker'] = duplicate_checker
    app.extensions['credential_service'] = credential_service
    app.extensions['csv_import_service'] = CsvImportService(credential_service=credential_service)
    app.extensions['csv_export_service'] = CsvExportService(credential_service=credential_service)
    app.extensions['health_service'] = HealthService(credential_service=credential_service)
    app.logger.info("Services registered in app.extensions.")

    from .routes_main import main_bp
    from .routes_auth import auth_bp
    from .routes_credentials import credentials_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(credentials_bp, url_prefix='/api/credentials')
    register_error_handlers(app)

    @app.before_request
    def before_request_session_handling():
        if session:
            session.modified = True

    app.logger.info(f"Flask application '{APP_NAME}' created.")
    return app
