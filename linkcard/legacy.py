"""
Legacy Import
=============

Imports the flat JSON files of the file-backed server
(data/links.json and data/config.json) and its uploads folder.
"""

import json
import logging
import os
import shutil

from .core import db_log
from .core.storage import UPLOAD_URL_PREFIX, get_upload_folder
from .modules.links.database import prepare_bulk_links, replace_links_db
from .modules.site.database import (
    default_profile, replace_profile, replace_settings, set_admin_password_hash,
)

logger = logging.getLogger(__name__)

LINKS_FILE = 'links.json'
CONFIG_FILE = 'config.json'


class LegacyImportError(Exception):
    pass


def _read_json(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise LegacyImportError(f"{path} is not valid JSON: {e}")


def _referenced_uploads(profile, settings):
    urls = [profile.get('avatarUrl'), settings.get('backgroundImageUrl')]
    return [url[len(UPLOAD_URL_PREFIX):] for url in urls
            if isinstance(url, str) and url.startswith(UPLOAD_URL_PREFIX)]


def import_legacy_data(data_dir, uploads_dir=None):
    """Import links, profile, settings and password hash from a legacy data dir.

    Returns a summary dict: {'links', 'profile', 'settings', 'password', 'files'}.
    """
    links_path = os.path.join(data_dir, LINKS_FILE)
    config_path = os.path.join(data_dir, CONFIG_FILE)
    if not os.path.isfile(links_path) and not os.path.isfile(config_path):
        raise LegacyImportError(f"Neither {LINKS_FILE} nor {CONFIG_FILE} found in {data_dir}")

    summary = {'links': 0, 'profile': False, 'settings': False, 'password': False, 'files': 0}

    if os.path.isfile(links_path):
        rows, error = prepare_bulk_links(_read_json(links_path))
        if error:
            raise LegacyImportError(f"{links_path}: {error}")
        summary['links'] = replace_links_db(rows)

    profile, settings = {}, {}
    if os.path.isfile(config_path):
        config = _read_json(config_path)
        if not isinstance(config, dict):
            raise LegacyImportError(f"{config_path}: expected an object")

        if isinstance(config.get('profile'), dict):
            profile = dict(default_profile(), **config['profile'])
            replace_profile(profile)
            summary['profile'] = True

        if isinstance(config.get('settings'), dict):
            settings = config['settings']
            replace_settings(settings)
            summary['settings'] = True

        password_hash = config.get('adminPasswordHash')
        # Stock config.json carries a placeholder hash that matches no password
        if password_hash and 'YourHashedPasswordHere' not in password_hash:
            set_admin_password_hash(password_hash)
            summary['password'] = True

    if uploads_dir:
        target = get_upload_folder()
        for filename in _referenced_uploads(profile, settings):
            source = os.path.join(uploads_dir, filename)
            if os.path.isfile(source):
                shutil.copy2(source, os.path.join(target, os.path.basename(filename)))
                summary['files'] += 1
            else:
                logger.warning("Referenced upload %s not found in %s", filename, uploads_dir)

    db_log('INFO', 'legacy', 'Imported legacy data', dict(summary, data_dir=data_dir))
    return summary
