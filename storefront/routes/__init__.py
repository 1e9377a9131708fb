# storefront/routes/__init__.py
from .admin import admin_bp
from .ai import ai_bp
from .auth import auth_bp
from .cart import cart_bp
from .catalog import catalog_bp
from .changes import changes_bp
from .checkout import checkout_bp
from .inquiries import inquiries_bp
from .profile import profile_bp
from .reviews import reviews_bp
from .seller import seller_bp

BLUEPRINTS = (
    auth_bp,
    profile_bp,
    catalog_bp,
    cart_bp,
    checkout_bp,
    reviews_bp,
    inquiries_bp,
    seller_bp,
    admin_bp,
    ai_bp,
    changes_bp,
)


def register_blueprints(app):
    for bp in BLUEPRINTS:
        app.register_blueprint(bp, url_prefix='/api')
