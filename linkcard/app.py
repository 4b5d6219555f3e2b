"""
LinkCard application
====================

Run with:
    flask --app linkcard.app run

Or:
    python -m linkcard.app

Visit:
    http://localhost:3000        - Link page
    http://localhost:3000/api    - API
"""

from flask import Flask

from .core import Config
from .extension import LinkCard


def create_app(config=None):
    """Application factory; config overrides the environment-driven defaults"""
    app = Flask(__name__, static_folder=None)
    LinkCard(app, config)
    return app


if __name__ == '__main__':
    app = create_app()
    print(f"[LINKCARD] Starting on port {Config.port}...")
    print(f"[LINKCARD] Site: http://localhost:{Config.port}")
    print(f"[LINKCARD] API:  http://localhost:{Config.port}/api")
    app.run(host='0.0.0.0', port=Config.port, debug=Config.ENVIRONMENT == 'development')
