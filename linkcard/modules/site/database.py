"""
Site Config Database
====================

The config singleton (profile, settings, admin password hash) stored as
JSON values in the site_config table, one row per section.
"""

import json
from datetime import datetime, timezone

from linkcard.core import Database, get_config_value

PROFILE_KEY = 'profile'
SETTINGS_KEY = 'settings'
PASSWORD_HASH_KEY = 'admin_password_hash'


def _now():
    return datetime.now(timezone.utc).isoformat()


def default_profile():
    """Profile written on first start"""
    return {
        'name': get_config_value('DEFAULT_PROFILE_NAME', 'My Links'),
        'description': get_config_value('DEFAULT_PROFILE_DESCRIPTION', ''),
        'avatar': get_config_value('DEFAULT_PROFILE_AVATAR', 'ML'),
    }


def _get_value(conn, key):
    row = conn.execute('SELECT value FROM site_config WHERE key = ?', (key,)).fetchone()
    if row is None or row['value'] is None:
        return None
    return json.loads(row['value'])


def _set_value(conn, key, value):
    conn.execute('''
        INSERT INTO site_config (key, value, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
    ''', (key, json.dumps(value), _now()))


def init_site_config():
    """Write the default profile and settings if they are missing"""
    with Database.connect() as conn:
        if _get_value(conn, PROFILE_KEY) is None:
            _set_value(conn, PROFILE_KEY, default_profile())
        if _get_value(conn, SETTINGS_KEY) is None:
            _set_value(conn, SETTINGS_KEY, {})


def get_site_config():
    """Full config singleton, including the password hash"""
    with Database.connect() as conn:
        return {
            'profile': _get_value(conn, PROFILE_KEY) or default_profile(),
            'settings': _get_value(conn, SETTINGS_KEY) or {},
            'adminPasswordHash': _get_value(conn, PASSWORD_HASH_KEY),
        }


def get_public_config():
    """Config without the password hash"""
    config = get_site_config()
    config.pop('adminPasswordHash')
    return config


def update_profile(name=None, description=None, avatar=None):
    """Merge non-empty values into the profile and return it"""
    updates = {'name': name, 'description': description, 'avatar': avatar}
    with Database.connect() as conn:
        profile = _get_value(conn, PROFILE_KEY) or default_profile()
        profile.update({k: v for k, v in updates.items() if v})
        _set_value(conn, PROFILE_KEY, profile)
    return profile


def replace_profile(profile):
    with Database.connect() as conn:
        _set_value(conn, PROFILE_KEY, profile)
    return profile


def set_avatar_url(avatar_url):
    """Point the profile at a new avatar; returns (profile, previous_url)"""
    with Database.connect() as conn:
        profile = _get_value(conn, PROFILE_KEY) or default_profile()
        previous = profile.get('avatarUrl')
        profile['avatarUrl'] = avatar_url
        _set_value(conn, PROFILE_KEY, profile)
    return profile, previous


def update_settings(new_settings):
    """Shallow-merge new_settings into settings and return the result"""
    with Database.connect() as conn:
        settings = _get_value(conn, SETTINGS_KEY) or {}
        settings.update(new_settings)
        _set_value(conn, SETTINGS_KEY, settings)
    return settings


def replace_settings(settings):
    with Database.connect() as conn:
        _set_value(conn, SETTINGS_KEY, settings)
    return settings


def set_background_url(image_url):
    """Point settings at a new background image; returns (settings, previous_url)"""
    with Database.connect() as conn:
        settings = _get_value(conn, SETTINGS_KEY) or {}
        previous = settings.get('backgroundImageUrl')
        settings['backgroundImageUrl'] = image_url
        _set_value(conn, SETTINGS_KEY, settings)
    return settings, previous


def get_admin_password_hash():
    with Database.connect() as conn:
        return _get_value(conn, PASSWORD_HASH_KEY)


def set_admin_password_hash(password_hash):
    with Database.connect() as conn:
        _set_value(conn, PASSWORD_HASH_KEY, password_hash)
