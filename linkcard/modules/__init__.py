"""
LinkCard Modules
================

Flask blueprint modules that make up the site.
"""

__all__ = ['auth', 'icons', 'links', 'ops', 'public', 'site']
