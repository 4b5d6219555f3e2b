"""
Storage Utility
===============

Saves uploaded images to the local uploads folder and removes replaced ones.
Uploads are published under /uploads/<filename>.
"""

import io
import logging
import os
import random
import time

from PIL import Image, UnidentifiedImageError

from .config import get_config_value

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = '/uploads/'

# Preferred extensions; other formats fall back to Pillow's registered extensions
FORMAT_EXTENSIONS = {
    'JPEG': 'jpg',
    'MPO': 'jpg',
    'PNG': 'png',
    'GIF': 'gif',
    'WEBP': 'webp',
    'BMP': 'bmp',
    'TIFF': 'tiff',
    'ICO': 'ico',
}

# Formats written with another encoder after cropping
SAVE_FORMATS = {
    'MPO': 'JPEG',
}


class InvalidImageError(ValueError):
    """Raised when an upload is not an image Pillow can read"""


class InvalidCropError(InvalidImageError):
    """Raised when crop parameters don't select any part of the image"""


def format_extension(fmt):
    """File extension for a Pillow format name"""
    if fmt in FORMAT_EXTENSIONS:
        return FORMAT_EXTENSIONS[fmt]
    for ext, name in Image.registered_extensions().items():
        if name == fmt:
            return ext.lstrip('.')
    raise InvalidImageError(f'No file extension for image format: {fmt}')


def get_upload_folder():
    """Absolute path of the uploads folder, created on demand"""
    folder = os.path.abspath(get_config_value('UPLOAD_FOLDER', 'uploads'))
    os.makedirs(folder, exist_ok=True)
    return folder


def generate_filename(kind, ext):
    """<kind>-<millis>-<random 9 digits>.<ext>"""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9 - 1):09d}"
    return f"{kind}-{unique_suffix}.{ext}"


def parse_crop_box(form):
    """Read crop_x/crop_y/crop_width/crop_height from a form.

    Returns a (left, upper, right, lower) tuple or None when no crop was requested.
    """
    crop_x = form.get('crop_x')
    crop_w = form.get('crop_width')
    if crop_x is None or crop_w is None:
        return None

    try:
        x = int(float(crop_x))
        y = int(float(form.get('crop_y', 0)))
        w = int(float(crop_w))
        h = int(float(form.get('crop_height', crop_w)))
    except (TypeError, ValueError, OverflowError):
        raise InvalidCropError('Invalid crop parameters')

    if w <= 0 or h <= 0:
        raise InvalidCropError('Invalid crop parameters')
    return (x, y, x + w, y + h)


def clamp_crop_box(crop_box, size):
    """Intersect a crop box with the image bounds.

    Raises InvalidCropError when nothing of the image is left.
    """
    left, upper, right, lower = crop_box
    width, height = size
    box = (max(left, 0), max(upper, 0), min(right, width), min(lower, height))
    if box[0] >= box[2] or box[1] >= box[3]:
        raise InvalidCropError('Invalid crop parameters')
    return box


def inspect_image(file_bytes):
    """Return the Pillow format name of an image, raising InvalidImageError otherwise"""
    try:
        with Image.open(io.BytesIO(file_bytes)) as img:
            img.verify()
            fmt = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise InvalidImageError(str(e))

    if not fmt:
        raise InvalidImageError('Unknown image format')
    format_extension(fmt)
    return fmt


def process_image(file_bytes, fmt, crop_box=None, square_size=None):
    """Crop (and optionally resize to a square) an image.

    Returns (bytes, format). Without a crop box the uploaded bytes are
    returned untouched.
    """
    if crop_box is None:
        return file_bytes, fmt

    Image.init()
    save_fmt = SAVE_FORMATS.get(fmt, fmt)
    if save_fmt not in Image.SAVE:
        save_fmt = 'PNG'

    with Image.open(io.BytesIO(file_bytes)) as img:
        img = img.crop(clamp_crop_box(crop_box, img.size))
        if square_size:
            img = img.resize((square_size, square_size), Image.LANCZOS)
        if save_fmt == 'JPEG' and img.mode not in ('RGB', 'L'):
            img = img.convert('RGB')
        out = io.BytesIO()
        img.save(out, format=save_fmt)
    return out.getvalue(), save_fmt


def save_image_upload(file_storage, kind, crop_box=None, square_size=None):
    """Validate, optionally crop, and store an uploaded image.

    Args:
        file_storage: werkzeug FileStorage from request.files.
        kind: Filename prefix ("avatar", "background").
        crop_box: Optional (left, upper, right, lower) tuple.
        square_size: Resize the cropped image to this square size.

    Returns:
        Public URL like "/uploads/avatar-1700000000000-123456789.png".
    """
    file_bytes = file_storage.read()
    if not file_bytes:
        raise InvalidImageError('Empty upload')

    fmt = inspect_image(file_bytes)
    file_bytes, fmt = process_image(file_bytes, fmt, crop_box, square_size)

    filename = generate_filename(kind, format_extension(fmt))
    filepath = os.path.join(get_upload_folder(), filename)
    with open(filepath, 'wb') as f:
        f.write(file_bytes)

    logger.info("Stored %s upload %s (%d bytes)", kind, filename, len(file_bytes))
    return UPLOAD_URL_PREFIX + filename


def resolve_upload_path(file_url):
    """Map an /uploads/ URL to a path inside the uploads folder, or None"""
    if not file_url or not file_url.startswith(UPLOAD_URL_PREFIX):
        return None

    folder = get_upload_folder()
    full_path = os.path.abspath(os.path.join(folder, file_url[len(UPLOAD_URL_PREFIX):]))
    if os.path.dirname(full_path) != folder:
        return None
    return full_path


def delete_upload(file_url):
    """Delete an uploaded file by its URL.

    Returns True when a file was removed. Missing files and URLs outside
    the uploads folder are ignored.
    """
    full_path = resolve_upload_path(file_url)
    if not full_path:
        return False

    try:
        os.unlink(full_path)
        return True
    except FileNotFoundError:
        return False
