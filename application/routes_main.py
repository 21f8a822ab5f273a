from flask import Blueprint, jsonify, session, current_app


main_bp = Blueprint('main', __name__)

@main_bp.route('/')
def index():
    return jsonify(app=current_app.config.get('APP_NAME'), authenticated='user_id' in session)


@main_bp.route('/health_check')
def health_check():
    current_app.logger.info("Health check requested. Application is alive.")
    return "Credential Vault is Alive and Healthy!", 200
