from flask import jsonify, render_template, send_from_directory

from linkcard.core.storage import get_upload_folder
from . import public_bp


@public_bp.route('/')
def index():
    """Public link page"""
    return render_template('public/index.html')


@public_bp.route('/uploads/<path:filename>')
def uploaded_file(filename):
    """Uploaded avatar/background images"""
    return send_from_directory(get_upload_folder(), filename)


@public_bp.route('/<path:path>')
def catch_all(path):
    """Serve the page for client-side routing; unknown API paths stay JSON 404s"""
    if path == 'api' or path.startswith('api/'):
        return jsonify({'error': 'Not found'}), 404
    return render_template('public/index.html')
