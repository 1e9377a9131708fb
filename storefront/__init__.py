# storefront/__init__.py
import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify, send_from_directory

from .changes import init_change_feed
from .errors import register_error_handlers
from .models import db
from .routes import register_blueprints

load_dotenv()

DEFAULT_AI_GATEWAY_URL = 'https://ai.gateway.lovable.dev/v1/chat/completions'


def _env_config():
    return {
        'SQLALCHEMY_DATABASE_URI': os.getenv('DATABASE_URL', 'sqlite:///storefront.db'),
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SECRET_KEY': os.getenv('SECRET_KEY', 'devsecret'),
        'UPLOAD_FOLDER': os.getenv('UPLOAD_FOLDER', os.path.join('static', 'uploads')),
        'UPLOAD_URL_PREFIX': '/uploads',
        'MAX_FILE_SIZE': int(os.getenv('MAX_FILE_SIZE', 5 * 1024 * 1024)),  # 5MB
        'AI_GATEWAY_URL': os.getenv('AI_GATEWAY_URL', DEFAULT_AI_GATEWAY_URL),
        'AI_GATEWAY_API_KEY': os.getenv('AI_GATEWAY_API_KEY'),
        'AI_MODEL': os.getenv('AI_MODEL', 'google/gemini-2.5-flash'),
        'AI_TIMEOUT': float(os.getenv('AI_TIMEOUT', 30)),
        'ADMIN_EMAILS': os.getenv('ADMIN_EMAILS', ''),
        'CHANGE_FEED_KEEPALIVE': float(os.getenv('CHANGE_FEED_KEEPALIVE', 15)),
        'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO'),
    }


def create_app(config=None):
    app = Flask(__name__)
    app.config.update(_env_config())
    if config:
        app.config.update(config)

    logging.basicConfig(level=app.config['LOG_LEVEL'])

    db.init_app(app)
    init_change_feed(app)
    register_error_handlers(app)
    register_blueprints(app)

    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(os.path.abspath(app.config['UPLOAD_FOLDER']), filename)

    @app.route('/health')
    def health():
        return jsonify({'status': 'healthy'})

    with app.app_context():
        db.create_all()

    return app
