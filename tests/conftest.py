from decimal import Decimal

import pytest

from storefront import create_app
from storefront.models import db, Category, Product

ADMIN_EMAIL = 'admin@example.com'


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
        'ADMIN_EMAILS': ADMIN_EMAIL,
        'AI_GATEWAY_API_KEY': 'test-key',
        'CHANGE_FEED_KEEPALIVE': 0.01,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email='user@example.com', password='secret', name='Test User'):
    return client.post('/api/auth/register', json={'email': email, 'password': password, 'name': name})


@pytest.fixture
def user_client(app):
    c = app.test_client()
    assert register(c).status_code == 201
    return c


@pytest.fixture
def admin_client(app):
    c = app.test_client()
    assert register(c, email=ADMIN_EMAIL, name='Admin').status_code == 201
    return c


@pytest.fixture
def make_product(app):
    def _make(**fields):
        fields.setdefault('name', 'Widget')
        fields.setdefault('price_retail', Decimal('100'))
        fields.setdefault('stock', 5)
        with app.app_context():
            product = Product(**fields)
            db.session.add(product)
            db.session.commit()
            return product.id
    return _make


@pytest.fixture
def make_category(app):
    def _make(name):
        with app.app_context():
            category = Category(name=name)
            db.session.add(category)
            db.session.commit()
            return category.id
    return _make
