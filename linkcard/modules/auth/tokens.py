"""
Admin Tokens
============

Signed, timestamped bearer tokens. The payload carries a fingerprint of the
current password hash, so setting a new password revokes every token.
"""

import hashlib

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

TOKEN_SALT = 'linkcard-admin'


class InvalidTokenError(Exception):
    """Token is malformed, tampered with, expired or revoked"""


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


def password_fingerprint(password_hash):
    """Short digest of the stored hash; never the hash itself"""
    return hashlib.sha256(password_hash.encode()).hexdigest()[:32]


def get_token_max_age():
    """Token lifetime in seconds"""
    return int(current_app.config.get('TOKEN_MAX_AGE', 24 * 60 * 60))


def issue_token(password_hash):
    return _serializer().dumps({'sub': 'admin', 'fp': password_fingerprint(password_hash)})


def verify_token(token, password_hash):
    """Return the token payload or raise InvalidTokenError"""
    try:
        payload = _serializer().loads(token, max_age=get_token_max_age())
    except SignatureExpired:
        raise InvalidTokenError('Token expired')
    except BadSignature:
        raise InvalidTokenError('Bad token signature')

    if not isinstance(payload, dict) or payload.get('sub') != 'admin':
        raise InvalidTokenError('Unexpected token payload')
    if payload.get('fp') != password_fingerprint(password_hash):
        raise InvalidTokenError('Token issued for a previous password')
    return payload
