"""
Site Routes
===========

GET  /api/config              - public profile + settings
PUT  /api/profile             - update name/description/avatar text
POST /api/profile/avatar      - upload profile picture
PUT  /api/settings            - merge settings
POST /api/settings/background - upload background image
"""

from flask import current_app, jsonify, request

from linkcard.core import LoggingService
from linkcard.core.storage import (
    InvalidCropError, InvalidImageError, delete_upload, parse_crop_box, save_image_upload,
)
from linkcard.modules.auth.utils import admin_required
from . import site_bp
from .database import (
    get_public_config, set_avatar_url, set_background_url,
    update_profile as update_profile_db, update_settings as update_settings_db,
)


def _uploaded_file(field):
    """Return the uploaded FileStorage for field, or None"""
    file = request.files.get(field)
    if file is None or not file.filename:
        return None
    return file


def _replace_old_upload(old_url, new_url):
    if old_url and old_url != new_url:
        if delete_upload(old_url):
            current_app.logger.info(f"Removed replaced upload {old_url}")


@site_bp.route('/config', methods=['GET'])
def get_config():
    """Get config (public - only non-sensitive data)"""
    try:
        return jsonify(get_public_config())
    except Exception as e:
        LoggingService.log_error_with_traceback('site', e)
        return jsonify({'error': 'Failed to load config'}), 500


@site_bp.route('/profile', methods=['PUT'])
@admin_required
def update_profile():
    """Update profile text fields; empty values leave a field unchanged"""
    data = request.get_json(silent=True) or {}

    try:
        profile = update_profile_db(
            name=data.get('name'),
            description=data.get('description'),
            avatar=data.get('avatar'),
        )
        LoggingService.log_admin_action('site', 'update profile')
        return jsonify({'success': True, 'profile': profile})
    except Exception as e:
        LoggingService.log_error_with_traceback('site', e)
        return jsonify({'error': 'Failed to update profile'}), 500


@site_bp.route('/profile/avatar', methods=['POST'])
@admin_required
def upload_avatar():
    """Upload profile picture"""
    file = _uploaded_file('avatar')
    if file is None:
        return jsonify({'error': 'No file uploaded'}), 400

    try:
        crop_box = parse_crop_box(request.form)
        avatar_url = save_image_upload(
            file, 'avatar',
            crop_box=crop_box,
            square_size=current_app.config.get('AVATAR_SIZE', 400) if crop_box else None,
        )
    except InvalidCropError as e:
        return jsonify({'error': str(e)}), 400
    except InvalidImageError as e:
        LoggingService.warning('site', 'Rejected avatar upload', {'reason': str(e)})
        return jsonify({'error': 'Only image files are allowed!'}), 400

    try:
        profile, previous = set_avatar_url(avatar_url)
        _replace_old_upload(previous, avatar_url)
        LoggingService.log_admin_action('site', 'upload avatar', {'avatarUrl': avatar_url})
        return jsonify({'success': True, 'avatarUrl': avatar_url, 'profile': profile})
    except Exception as e:
        delete_upload(avatar_url)
        LoggingService.log_error_with_traceback('site', e)
        return jsonify({'error': 'Failed to upload avatar'}), 500


@site_bp.route('/settings', methods=['PUT'])
@admin_required
def update_settings():
    """Shallow-merge settings"""
    data = request.get_json(silent=True) or {}
    settings = data.get('settings')
    if not isinstance(settings, dict):
        return jsonify({'error': 'Settings object required'}), 400

    try:
        merged = update_settings_db(settings)
        LoggingService.log_admin_action('site', 'update settings', {'keys': sorted(settings)})
        return jsonify({'success': True, 'settings': merged})
    except Exception as e:
        LoggingService.log_error_with_traceback('site', e)
        return jsonify({'error': 'Failed to update settings'}), 500


@site_bp.route('/settings/background', methods=['POST'])
@admin_required
def upload_background():
    """Upload background image"""
    file = _uploaded_file('background')
    if file is None:
        return jsonify({'error': 'No file uploaded'}), 400

    try:
        image_url = save_image_upload(file, 'background', crop_box=parse_crop_box(request.form))
    except InvalidCropError as e:
        return jsonify({'error': str(e)}), 400
    except InvalidImageError as e:
        LoggingService.warning('site', 'Rejected background upload', {'reason': str(e)})
        return jsonify({'error': 'Only image files are allowed!'}), 400

    try:
        _, previous = set_background_url(image_url)
        _replace_old_upload(previous, image_url)
        LoggingService.log_admin_action('site', 'upload background', {'imageUrl': image_url})
        return jsonify({'success': True, 'imageUrl': image_url})
    except Exception as e:
        delete_upload(image_url)
        LoggingService.log_error_with_traceback('site', e)
        return jsonify({'error': 'Failed to upload background image'}), 500
