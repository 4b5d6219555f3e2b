"""
Site Module
===========

The config singleton: public config, profile, avatar, settings and
background image.
"""

from flask import Blueprint

site_bp = Blueprint('site', __name__, url_prefix='/api')

from . import routes  # noqa: E402

__all__ = ['site_bp']
