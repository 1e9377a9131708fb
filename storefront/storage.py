# storefront/storage.py
import logging
import os
import time
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from .errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'webp'}


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def _size_of(upload):
    stream = upload.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def save_image(upload):
    """Store an uploaded image and return the URL it is served under."""
    if upload is None or not upload.filename:
        raise ValidationError('Image file is required.')
    max_size = current_app.config['MAX_FILE_SIZE']
    if _size_of(upload) > max_size:
        raise ValidationError(f'Image file too large. Maximum size is {max_size // (1024 * 1024)}MB.')
    if not allowed_file(upload.filename):
        raise ValidationError('Invalid image format. Allowed types: png, jpg, jpeg, webp.')

    filename = secure_filename(upload.filename)
    base, ext = os.path.splitext(filename)
    filename = f"{base}_{int(time.time() * 1000)}_{uuid.uuid4().hex}{ext}"
    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)
    upload.save(os.path.join(folder, filename))
    logger.info("Stored image %s", filename)
    return f"{current_app.config['UPLOAD_URL_PREFIX'].rstrip('/')}/{filename}"


def delete_image(image_url):
    """Remove a previously stored image; URLs we did not issue are ignored."""
    prefix = current_app.config['UPLOAD_URL_PREFIX'].rstrip('/') + '/'
    if not image_url or not image_url.startswith(prefix):
        return
    path = os.path.join(current_app.config['UPLOAD_FOLDER'], secure_filename(image_url[len(prefix):]))
    if os.path.exists(path):
        os.remove(path)
