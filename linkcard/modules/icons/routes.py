import logging
import re

import requests
from flask import Response, current_app, jsonify

from . import icons_bp

logger = logging.getLogger(__name__)

ICON_SLUG_RE = re.compile(r'^[a-z0-9]{1,64}$')


class IconNotFound(Exception):
    pass


def fetch_simple_icon(slug):
    """Return the SVG text for a Simple Icons slug.

    Raises IconNotFound for unknown slugs and requests.RequestException
    when the CDN can't be reached.
    """
    base_url = current_app.config.get('SIMPLE_ICONS_URL', 'https://cdn.simpleicons.org').rstrip('/')
    timeout = current_app.config.get('ICON_TIMEOUT', 5)

    response = requests.get(f"{base_url}/{slug}", timeout=timeout)
    if response.status_code == 404:
        raise IconNotFound(slug)
    response.raise_for_status()
    return response.text


@icons_bp.route('/<name>', methods=['GET'])
def get_icon(name):
    """SVG for a Simple Icons slug (public)"""
    slug = name.strip().lower()
    if not ICON_SLUG_RE.match(slug):
        return jsonify({'error': 'Invalid icon name'}), 400

    try:
        svg = fetch_simple_icon(slug)
    except IconNotFound:
        return jsonify({'error': 'Icon not found'}), 404
    except requests.RequestException as e:
        logger.warning("Could not load icon %s: %s", slug, e)
        return jsonify({'error': 'Icon service unavailable'}), 502

    response = Response(svg, mimetype='image/svg+xml')
    response.headers['Cache-Control'] = 'public, max-age=86400'
    return response
