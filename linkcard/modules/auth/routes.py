"""
Auth Routes
===========

POST /api/auth - exchange the admin password for a bearer token
"""

from flask import current_app, jsonify, request

from linkcard.core import LoggingService
from linkcard.core.extensions import limiter
from linkcard.modules.site.database import get_admin_password_hash
from . import auth_bp
from .tokens import get_token_max_age, issue_token
from .utils import verify_password


def _auth_rate_limit():
    return current_app.config.get('AUTH_RATE_LIMIT', '5 per 15 minutes')


@auth_bp.route('/auth', methods=['POST'])
@limiter.limit(_auth_rate_limit)
def authenticate():
    """Authenticate admin and return a signed token"""
    data = request.get_json(silent=True) or {}
    password = data.get('password')

    if not password:
        return jsonify({'error': 'Password required'}), 400

    try:
        password_hash = get_admin_password_hash()
        if not password_hash:
            LoggingService.error('auth', 'Login attempted but no admin password is configured')
            return jsonify({'error': 'Server configuration error'}), 500

        if not verify_password(password, password_hash):
            LoggingService.log_security_event('Failed admin login')
            return jsonify({'error': 'Invalid password'}), 401

        token = issue_token(password_hash)
        LoggingService.info('auth', 'Admin logged in')

        return jsonify({
            'success': True,
            'token': token,
            'expiresIn': get_token_max_age() * 1000
        })
    except Exception as e:
        LoggingService.log_error_with_traceback('auth', e)
        return jsonify({'error': 'Authentication failed'}), 500
