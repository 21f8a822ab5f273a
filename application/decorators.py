from functools import wraps
from flask import session, jsonify, current_app, request

def login_required(f):
    """API routes fail closed: no session user, no access."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            current_app.logger.info(f"AUTH: Unauthenticated request to {request.path} rejected.")
            return jsonify(success=False, error="Authentication required"), 401
        return f(*args, **kwargs)
    return decorated_function
