from flask import Blueprint, request, session, current_app, jsonify
from .decorators import login_required

auth_bp = Blueprint('auth', __name__)


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@auth_bp.route('/register', methods=['POST'])
def register():
    auth_service = current_app.extensions['auth_service']
    payload = _json_body()

    user = auth_service.register_user(payload.get('username'), payload.get('password'))
    session.clear()
    session['user_id'] = user.user_id
    session['username'] = user.username
    session.permanent = True
    current_app.logger.info(f"AUTH_BP: register - user_id {user.user_id} registered and logged in.")
    return jsonify(success=True, user=user.to_dict()), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    auth_service = current_app.extensions['auth_service']
    payload = _json_body()

    user = auth_service.login_user(payload.get('username'), payload.get('password'))
    session.clear()
    session['user_id'] = user.user_id
    session['username'] = user.username
    session.permanent = True
    current_app.logger.info(f"AUTH_BP: login - user_id {user.user_id} logged in.")
    return jsonify(success=True, user=user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    user_id = session.get('user_id')
    session.clear()
    current_app.logger.info(f"AUTH_BP: logout - user_id {user_id} logged out.")
    return jsonify(success=True)


@auth_bp.route('/me')
@login_required
def me():
    auth_service = current_app.extensions['auth_service']
    user = auth_service.get_user(session['user_id'])
    if user is None:
        session.clear()
        return jsonify(success=False, error="Authentication required"), 401
    return jsonify(success=True, user=user.to_dict())
