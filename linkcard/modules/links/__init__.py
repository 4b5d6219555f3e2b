"""
Links Module
============

Ordered link list (linktree-style): public listing plus admin CRUD,
bulk replace, reorder and export.
"""

from flask import Blueprint

links_bp = Blueprint('links', __name__, url_prefix='/api/links')

from . import routes  # noqa: E402

__all__ = ['links_bp']
