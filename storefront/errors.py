# storefront/errors.py
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """Base error; the message is shown to the user as-is."""
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(StorefrontError):
    status_code = 400


class AuthRequired(StorefrontError):
    status_code = 401


class NotAllowed(StorefrontError):
    status_code = 403


class NotFound(StorefrontError):
    status_code = 404


class PaymentRequired(StorefrontError):
    status_code = 402


class RateLimited(StorefrontError):
    status_code = 429


class GatewayError(StorefrontError):
    status_code = 502


class ConfigurationError(StorefrontError):
    status_code = 500


def register_error_handlers(app):
    @app.errorhandler(StorefrontError)
    def handle_storefront_error(err):
        if err.status_code >= 500:
            logger.error("%s: %s", type(err).__name__, err.message)
        return jsonify({'error': err.message}), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        if err.code is None or err.code < 400:
            return err
        return jsonify({'error': err.description}), err.code
