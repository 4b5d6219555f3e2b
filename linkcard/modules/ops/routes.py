"""
Ops Routes
==========

Public health endpoint and admin error feed.
"""

import os
from datetime import datetime, timezone

from flask import jsonify, request

from linkcard.core import Database, LoggingService
from linkcard.core.storage import get_upload_folder
from linkcard.modules.auth.utils import admin_required
from . import ops_bp

MAX_LOG_LIMIT = 500


def _check_uploads():
    try:
        folder = get_upload_folder()
        return 'ok' if os.access(folder, os.W_OK) else 'read-only'
    except OSError as e:
        return f'error: {e}'


def _build_health_response():
    """Build the health check response dict and status"""
    database = 'ok' if Database.ping() else 'error'
    uploads = _check_uploads()
    status = 'ok' if database == 'ok' else 'critical'

    return {
        'status': status,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'checks': {
            'database': database,
            'uploads': uploads,
        },
    }, status


@ops_bp.route('/health', methods=['GET'])
def health_check():
    """Public health endpoint for uptime monitors."""
    data, status = _build_health_response()
    code = 503 if status == 'critical' else 200
    return jsonify(data), code


@ops_bp.route('/logs', methods=['GET'])
@admin_required
def recent_errors():
    """Recent errors from app_logs for the error feed."""
    limit = request.args.get('limit', 50, type=int)
    limit = max(1, min(limit, MAX_LOG_LIMIT))

    try:
        return jsonify({'logs': LoggingService.get_recent_logs(limit=limit)})
    except Exception as e:
        LoggingService.log_error_with_traceback('ops', e)
        return jsonify({'error': 'Failed to load logs'}), 500
