"""
Links Routes
============

Public listing + admin CRUD for the ordered link list.
"""

from flask import jsonify, request

from linkcard.core import LoggingService
from linkcard.modules.auth.utils import admin_required
from . import links_bp
from .database import (
    clean_link_fields, create_link_db, delete_link_db, get_all_links_db,
    prepare_bulk_links, reorder_links_db, replace_links_db, update_link_db,
    utc_timestamp,
)

EXPORT_VERSION = '1.0'


# ===== Public Routes =====

@links_bp.route('', methods=['GET'])
def get_links():
    """Get all links (public)"""
    try:
        return jsonify(get_all_links_db())
    except Exception as e:
        LoggingService.log_error_with_traceback('links', e)
        return jsonify({'error': 'Failed to load links'}), 500


# ===== Admin Routes =====

@links_bp.route('', methods=['POST'])
@admin_required
def create_link():
    """Add link"""
    fields = clean_link_fields(request.get_json(silent=True))
    if fields is None:
        return jsonify({'error': 'Title and URL are required'}), 400

    try:
        link = create_link_db(fields)
        LoggingService.log_admin_action('links', 'create link', {'id': link['id'], 'title': link['title']})
        return jsonify(link), 201
    except Exception as e:
        LoggingService.log_error_with_traceback('links', e)
        return jsonify({'error': 'Failed to add link'}), 500


@links_bp.route('/<link_id>', methods=['PUT'])
@admin_required
def update_link(link_id):
    """Update link"""
    fields = clean_link_fields(request.get_json(silent=True))
    if fields is None:
        return jsonify({'error': 'Title and URL are required'}), 400

    try:
        link = update_link_db(link_id, fields)
        if link is None:
            return jsonify({'error': 'Link not found'}), 404

        LoggingService.log_admin_action('links', 'update link', {'id': link_id})
        return jsonify(link)
    except Exception as e:
        LoggingService.log_error_with_traceback('links', e)
        return jsonify({'error': 'Failed to update link'}), 500


@links_bp.route('/<link_id>', methods=['DELETE'])
@admin_required
def delete_link(link_id):
    """Delete link"""
    try:
        deleted = delete_link_db(link_id)
        if deleted is None:
            return jsonify({'error': 'Link not found'}), 404

        LoggingService.log_admin_action('links', 'delete link', {'id': link_id, 'title': deleted['title']})
        return jsonify({'success': True, 'deletedLink': deleted})
    except Exception as e:
        LoggingService.log_error_with_traceback('links', e)
        return jsonify({'error': 'Failed to delete link'}), 500


@links_bp.route('/bulk', methods=['POST'])
@admin_required
def bulk_links():
    """Bulk operations; only 'replace' is supported"""
    data = request.get_json(silent=True) or {}
    if data.get('operation') != 'replace' or not isinstance(data.get('links'), list):
        return jsonify({'error': 'Invalid bulk operation'}), 400

    rows, error = prepare_bulk_links(data['links'])
    if error:
        return jsonify({'error': error}), 400

    try:
        count = replace_links_db(rows)
        LoggingService.log_admin_action('links', 'bulk replace', {'count': count})
        return jsonify({'success': True, 'count': count})
    except Exception as e:
        LoggingService.log_error_with_traceback('links', e)
        return jsonify({'error': 'Bulk operation failed'}), 500


@links_bp.route('/reorder', methods=['POST'])
@admin_required
def reorder_links():
    """Reorder links (drag and drop)"""
    data = request.get_json(silent=True) or {}
    id_order = data.get('order')
    if not isinstance(id_order, list):
        return jsonify({'error': 'Order list required'}), 400

    try:
        if not reorder_links_db(id_order):
            return jsonify({'error': 'Order must list every link exactly once'}), 400

        LoggingService.log_admin_action('links', 'reorder links', {'order': id_order})
        return jsonify({'success': True, 'links': get_all_links_db()})
    except Exception as e:
        LoggingService.log_error_with_traceback('links', e)
        return jsonify({'error': 'Failed to reorder links'}), 500


@links_bp.route('/export', methods=['GET'])
@admin_required
def export_links():
    """Backup document for the client's export button"""
    try:
        return jsonify({
            'links': get_all_links_db(),
            'exported': utc_timestamp(),
            'version': EXPORT_VERSION,
        })
    except Exception as e:
        LoggingService.log_error_with_traceback('links', e)
        return jsonify({'error': 'Failed to export links'}), 500
