"""
Icons Module
============

Fetches Simple Icons SVGs server-side so the page doesn't depend on the
browser reaching the CDN.
"""

from flask import Blueprint

icons_bp = Blueprint('icons', __name__, url_prefix='/api/icons')

from . import routes  # noqa: E402

__all__ = ['icons_bp']
