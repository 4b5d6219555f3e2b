"""
LinkCard Auth Module

Single-admin authentication:
- Password login returning a signed, expiring bearer token
- admin_required decorator for the admin API
- CLI command to set the admin password
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='/api')

from . import routes  # noqa: E402
from .utils import admin_required  # noqa: E402

__all__ = ['auth_bp', 'admin_required']
