import os
from dotenv import load_dotenv

load_dotenv(override=True)

DEFAULT_SECRET_KEY = 'dev-secret-key-change-in-production'


class Config:
    """
    Base configuration for LinkCard.
    Every value can be overridden through environment variables or app.config.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', DEFAULT_SECRET_KEY)
    ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')

    # Storage
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'data'))
    LINKCARD_DB = os.getenv('LINKCARD_DB', os.path.join(DB_DIR, 'linkcard.db'))
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))

    # Uploads
    MAX_UPLOAD_MB = int(os.getenv('MAX_UPLOAD_MB', '50'))
    AVATAR_SIZE = int(os.getenv('AVATAR_SIZE', '400'))

    # Auth
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')
    TOKEN_MAX_AGE = int(os.getenv('TOKEN_MAX_AGE', str(24 * 60 * 60)))
    MIN_PASSWORD_LENGTH = 6

    # Rate limiting (Flask-Limiter reads the RATELIMIT_* keys)
    RATELIMIT_ENABLED = os.getenv('RATELIMIT_ENABLED', '1') not in ('0', 'false', 'False')
    RATELIMIT_DEFAULT = os.getenv('RATELIMIT_DEFAULT', '100 per 15 minutes')
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    AUTH_RATE_LIMIT = os.getenv('AUTH_RATE_LIMIT', '5 per 15 minutes')

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Icons
    SIMPLE_ICONS_URL = os.getenv('SIMPLE_ICONS_URL', 'https://cdn.simpleicons.org')
    ICON_TIMEOUT = float(os.getenv('ICON_TIMEOUT', '5'))

    # Defaults written on first start
    DEFAULT_PROFILE_NAME = os.getenv('DEFAULT_PROFILE_NAME', 'My Links')
    DEFAULT_PROFILE_DESCRIPTION = os.getenv('DEFAULT_PROFILE_DESCRIPTION', 'Developer, creator, and tech enthusiast')
    DEFAULT_PROFILE_AVATAR = os.getenv('DEFAULT_PROFILE_AVATAR', 'ML')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_RETENTION_DAYS = int(os.getenv('LOG_RETENTION_DAYS', '30'))

    # Port for local server
    port = int(os.getenv('PORT', '3000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        if key in current_app.config:
            return current_app.config[key]
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)


def get_db_path():
    """Path of the LinkCard SQLite database"""
    return get_config_value('LINKCARD_DB', 'linkcard.db')
