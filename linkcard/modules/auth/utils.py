from functools import wraps

import bcrypt
from flask import jsonify, request
from werkzeug.security import check_password_hash, generate_password_hash

from linkcard.core import LoggingService, get_config_value
from .tokens import InvalidTokenError, verify_token

BCRYPT_PREFIXES = ('$2a$', '$2b$', '$2y$')


def hash_password(password):
    return generate_password_hash(password)


def verify_password(password, password_hash):
    """Check a password against a werkzeug hash or a legacy bcrypt hash"""
    if not password or not password_hash:
        return False
    if password_hash.startswith(BCRYPT_PREFIXES):
        try:
            return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
        except ValueError:
            return False
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        return False


def validate_password_strength(password):
    """Password must be at least MIN_PASSWORD_LENGTH characters"""
    min_length = int(get_config_value('MIN_PASSWORD_LENGTH', 6))
    return bool(password) and len(password) >= min_length


def set_admin_password(password):
    """Hash and store a new admin password"""
    from linkcard.modules.site.database import set_admin_password_hash
    set_admin_password_hash(hash_password(password))
    LoggingService.log_security_event('Admin password changed')


def get_bearer_token():
    """Token from 'Authorization: Bearer <token>' or None"""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    return auth_header[len('Bearer '):].strip() or None


def admin_required(f):
    """Decorator to require a valid admin bearer token"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from linkcard.modules.site.database import get_admin_password_hash

        token = get_bearer_token()
        if not token:
            return jsonify({'error': 'Authentication required'}), 401

        password_hash = get_admin_password_hash()
        if not password_hash:
            LoggingService.error('auth', 'Admin request but no admin password is configured')
            return jsonify({'error': 'Server configuration error'}), 500

        try:
            verify_token(token, password_hash)
        except InvalidTokenError as e:
            LoggingService.log_security_event('Rejected admin token', {'reason': str(e)})
            return jsonify({'error': 'Invalid authentication'}), 401

        return f(*args, **kwargs)
    return decorated_function
