"""
LinkCard Core
=============

Core utilities and shared functionality for LinkCard modules.
"""

from .config import Config, get_config_value, get_db_path
from .database import Database
from .logging_service import LoggingService, db_log

__all__ = ['Config', 'get_config_value', 'get_db_path', 'Database', 'LoggingService', 'db_log']
