"""
LinkCard - A personal link-in-bio page
======================================

A single admin manages an ordered list of links and a profile, published
as a public page backed by a small JSON API:
- Link CRUD, bulk replace, drag-and-drop reordering, export
- Profile, avatar and background image uploads
- Signed bearer tokens derived from the admin password

Usage:
    from flask import Flask
    from linkcard import LinkCard

    app = Flask(__name__, static_folder=None)
    LinkCard(app)

Or use the factory: linkcard.app.create_app()
"""

__version__ = '0.1.0'

from .extension import LinkCard

__all__ = ['LinkCard']
