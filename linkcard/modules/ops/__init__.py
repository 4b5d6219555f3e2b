"""
Ops Module
==========

Health monitoring and the recent-error feed.

- GET /api/health - public, for uptime monitors
- GET /api/logs   - admin, ERROR/CRITICAL entries from app_logs
"""

from flask import Blueprint

ops_bp = Blueprint('ops', __name__, url_prefix='/api')

from . import routes  # noqa: E402

__all__ = ['ops_bp']
