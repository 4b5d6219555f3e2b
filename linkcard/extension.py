"""
LinkCard Flask extension: applies configuration, prepares the database and
registers every module blueprint on an app.
"""

import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from .core import Config, Database, LoggingService
from .core.config import DEFAULT_SECRET_KEY
from .core.extensions import cors, limiter

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
    'Cross-Origin-Resource-Policy': 'same-origin',
}


class LinkCard:
    """Wire LinkCard into a Flask app.

    Usage:
        app = Flask(__name__, static_folder=None)
        LinkCard(app)
    """

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_config(app)
        self._setup_logging(app)
        self._check_secret_key(app)

        cors.init_app(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}})
        limiter.init_app(app)
        limiter.enabled = bool(app.config.get('RATELIMIT_ENABLED', True))

        self._register_blueprints(app)
        self._register_handlers(app)
        self._register_cli(app)

        with app.app_context():
            self._setup_database(app)

        app.extensions['linkcard'] = self

    # ----- setup steps -----

    def _apply_config(self, app):
        """Config defaults < app.config < constructor overrides"""
        # Flask ships SECRET_KEY and MAX_CONTENT_LENGTH as None
        for key in dir(Config):
            if key.isupper() and app.config.get(key) is None:
                app.config[key] = getattr(Config, key)
        app.config.update(self._config)
        if app.config.get('MAX_CONTENT_LENGTH') is None:
            app.config['MAX_CONTENT_LENGTH'] = int(app.config['MAX_UPLOAD_MB']) * 1024 * 1024

    def _setup_logging(self, app):
        logging.basicConfig(
            level=app.config.get('LOG_LEVEL', 'INFO'),
            format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _check_secret_key(self, app):
        if app.config.get('SECRET_KEY') in (None, '', DEFAULT_SECRET_KEY):
            if app.config.get('ENVIRONMENT') == 'production':
                raise RuntimeError('Set FLASK_SECRET_KEY before running in production')
            logger.warning("Using the development SECRET_KEY; admin tokens are not secure")
            app.config['SECRET_KEY'] = DEFAULT_SECRET_KEY

    def _setup_database(self, app):
        from .modules.auth.utils import set_admin_password, validate_password_strength
        from .modules.site.database import get_admin_password_hash, init_site_config

        Database.init_schema()
        init_site_config()
        LoggingService.cleanup_old_logs(app.config['LOG_RETENTION_DAYS'])

        if get_admin_password_hash():
            return

        bootstrap_password = app.config.get('ADMIN_PASSWORD')
        if not bootstrap_password:
            logger.warning("No admin password set. Run `flask --app linkcard.app set-password` to create one.")
        elif not validate_password_strength(bootstrap_password):
            logger.warning("ADMIN_PASSWORD is too short; admin password not set")
        else:
            set_admin_password(bootstrap_password)
            logger.info("Admin password initialised from ADMIN_PASSWORD")

    def _register_blueprints(self, app):
        from .modules.auth import auth_bp
        from .modules.icons import icons_bp
        from .modules.links import links_bp
        from .modules.ops import ops_bp
        from .modules.public import public_bp
        from .modules.site import site_bp

        modules = [
            ('auth', auth_bp),
            ('links', links_bp),
            ('site', site_bp),
            ('icons', icons_bp),
            ('ops', ops_bp),
            ('public', public_bp),
        ]
        for name, blueprint in modules:
            app.register_blueprint(blueprint)
            self._registered.append(name)

        # Page and uploads aren't API traffic
        limiter.exempt(public_bp)

    def _register_handlers(self, app):
        @app.after_request
        def add_security_headers(response):
            for header, value in SECURITY_HEADERS.items():
                response.headers.setdefault(header, value)
            return response

        def _wants_json():
            return request.path.startswith('/api/')

        @app.errorhandler(404)
        def not_found(e):
            if _wants_json():
                return jsonify({'error': 'Not found'}), 404
            return e

        @app.errorhandler(405)
        def method_not_allowed(e):
            if _wants_json():
                return jsonify({'error': 'Method not allowed'}), 405
            return e

        @app.errorhandler(413)
        def too_large(e):
            max_mb = app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
            return jsonify({'error': f'File too large (max {max_mb} MB)'}), 413

        @app.errorhandler(429)
        def rate_limited(e):
            LoggingService.log_security_event('Rate limit exceeded', {'limit': str(e.description)})
            return jsonify({'error': 'Too many requests, please try again later'}), 429

        @app.errorhandler(Exception)
        def server_error(e):
            if isinstance(e, HTTPException):
                return e
            LoggingService.log_error_with_traceback('server', e)
            return jsonify({'error': 'Internal server error'}), 500

    def _register_cli(self, app):
        from .cli import (
            cleanup_logs_command, import_json_command, init_db_command, set_password_command,
        )

        app.cli.add_command(init_db_command)
        app.cli.add_command(set_password_command)
        app.cli.add_command(import_json_command)
        app.cli.add_command(cleanup_logs_command)

    def get_registered_modules(self):
        return list(self._registered)
