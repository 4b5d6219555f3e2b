"""
Public Module
=============

Serves the browser client (page, JS, CSS), uploaded images and the
client-side routing catch-all.
"""

from flask import Blueprint

public_bp = Blueprint(
    'public',
    __name__,
    template_folder='templates',
    static_folder='static',
    static_url_path='/assets'
)

from . import routes  # noqa: E402

__all__ = ['public_bp']
