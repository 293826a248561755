"""Role-based access helpers."""
from __future__ import annotations

from functools import wraps

from flask import current_app, jsonify
from flask_login import current_user, login_required

from bjjfed.models import is_blocked


def session_member():
    """Freshest member record for the signed-in account."""
    auth_service = current_app.extensions['bjjfed']['auth_service']
    return auth_service.resolve_session_member(current_user.account)


def role_required(*roles):
    """Allow the view only to signed-in, unblocked users whose member role is in ``roles``."""
    def decorator(f):
        @wraps(f)
        @login_required
        def decorated_function(*args, **kwargs):
            member = session_member()
            if is_blocked(member):
                return jsonify({'error': 'Access blocked', 'blocked': True}), 403
            if member.role not in roles:
                return jsonify({'error': 'You do not have permission to perform this action'}), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator
