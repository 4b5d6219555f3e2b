"""
Centralized logging service for LinkCard.
Provides structured logging with database storage and console fallback.
"""

import json
import logging
import traceback
from datetime import datetime, timedelta

from flask import request, has_request_context

from .database import Database

logger = logging.getLogger(__name__)

_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        return ip_address, request.headers.get('User-Agent', ''), request.path

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (links, site, auth, ...)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)
        """
        level = level.upper()
        logger.log(getattr(logging, level, logging.INFO), "[%s] %s", source, message)

        ip_address, user_agent, request_path = LoggingService._get_request_context()
        if isinstance(details, (dict, list)):
            details = json.dumps(details, indent=2, default=str)

        try:
            with Database.connect() as conn:
                conn.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level, source, message, details,
                    ip_address, user_agent, request_path
                ))
        except Exception as e:
            # Console only if database fails
            logger.warning("Logging service error (%s); details: %s", e, details)

    @staticmethod
    def info(source, message, details=None):
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def warning(source, message, details=None):
        LoggingService.log('WARNING', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_admin_action(source, action, details=None):
        """Log admin mutations (create, update, delete, upload...)"""
        LoggingService.info(source, f"Admin action: {action}", details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def log_security_event(message, details=None):
        """Log security-related events"""
        LoggingService.warning('security', message, details)

    @staticmethod
    def get_recent_logs(levels=('ERROR', 'CRITICAL'), limit=50, hours=24):
        """Return recent log entries (newest first) as dicts"""
        levels = [lvl.upper() for lvl in levels if lvl.upper() in _LEVELS]
        if not levels:
            return []

        cutoff = (datetime.now() - timedelta(hours=hours)).isoformat()
        placeholders = ', '.join('?' for _ in levels)
        with Database.connect() as conn:
            rows = conn.execute(f"""
                SELECT id, timestamp, level, source, message, details, request_path
                FROM app_logs
                WHERE level IN ({placeholders}) AND timestamp > ?
                ORDER BY timestamp DESC, id DESC
                LIMIT ?
            """, (*levels, cutoff, limit)).fetchall()
        return [dict(row) for row in rows]

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        cutoff_iso = (datetime.now() - timedelta(days=days_to_keep)).isoformat()
        with Database.connect() as conn:
            deleted_count = conn.execute(
                "DELETE FROM app_logs WHERE timestamp < ?", (cutoff_iso,)
            ).rowcount

        if deleted_count:
            LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
        return deleted_count


def db_log(level, source, message, details=None):
    """Shortcut used by modules to write to the persistent log"""
    LoggingService.log(level, source, message, details)
