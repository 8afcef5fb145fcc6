from functools import wraps
from flask import jsonify, request
from flask_login import current_user

from quizapp.security import SecurityLogger


def admin_required(f):
    """Decorator to require the admin role for an API route."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'success': False, 'error': 'Authentication required'}), 401
        if getattr(current_user, 'user_type', None) != 'admin':
            SecurityLogger.log_unauthorized_access(request.path, current_user.id)
            return jsonify({'success': False, 'error': 'Unauthorized'}), 403
        return f(*args, **kwargs)
    return decorated_function


def is_admin() -> bool:
    """True when the current request is made by a logged-in admin."""
    return current_user.is_authenticated and getattr(current_user, 'user_type', None) == 'admin'
