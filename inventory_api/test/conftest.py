"""
Pytest configuration and fixtures for the Inventory API tests
"""
import os
import tempfile
from decimal import Decimal
from types import SimpleNamespace

# The logger and app factory read these on first use
os.environ.setdefault('SECRET_KEY', 'test-secret-key')
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='inventory_api_logs_'))
os.environ.setdefault('LOG_LEVEL', 'WARNING')

import pytest  # noqa: E402

from inventory_api import create_app  # noqa: E402
from inventory_api import db as _db  # noqa: E402
from inventory_api.business.core.actor_context import ActorContext  # noqa: E402


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create Flask application backed by a throwaway SQLite file"""
    app = create_app({
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
        'TESTING': True,
        'WTF_CSRF_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'ENABLE_HTTPS': False,
        'FORCE_HTTPS_REDIRECT': False,
    })

    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def ctx(app):
    """Application context for tests that call the business layer directly"""
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def seed(app):
    """
    Three stores, one product variant, 100 units at the first store and an
    empty record at the second. Returns the ids and per-role bearer tokens.
    """
    with app.app_context():
        return _insert_seed_data()


def _insert_seed_data():
    from inventory_api.business.inventory.stock.inventory_manager import InventoryManager
    from inventory_api.data.catalog.product import Product
    from inventory_api.data.catalog.product_variant import ProductVariant
    from inventory_api.data.core.store import Store
    from inventory_api.data.core.user import User

    north = Store(name='North', address='1 North St')
    south = Store(name='South', address='2 South St')
    east = Store(name='East', address='3 East St')
    product = Product(name='Blue Widget', description='A widget')
    _db.session.add_all([north, south, east, product])
    _db.session.flush()

    variant = ProductVariant(product_id=product.id, sku='WID-BLUE-M', price=Decimal('9.99'))
    _db.session.add(variant)
    _db.session.flush()

    manager = InventoryManager()
    source = manager.get_or_create(variant.id, north.id)
    manager.add_stock(source, 100, user_id=None, notes='Opening stock')
    destination = manager.get_or_create(variant.id, south.id)

    tokens = {}
    users = {}
    for username, role, stores in (
        ('admin', 'admin', []),
        ('staff', 'staff', [north]),
        ('eaststaff', 'staff', [east]),
        ('viewer', 'viewer', []),
    ):
        user = User(username=username, name=username.title(), email=f'{username}@example.com', role=role)
        user.set_password('password123')
        user.stores = stores
        tokens[username] = user.issue_api_token()
        users[username] = user
        _db.session.add(user)

    _db.session.commit()

    return SimpleNamespace(
        north_id=north.id,
        south_id=south.id,
        east_id=east.id,
        product_id=product.id,
        variant_id=variant.id,
        source_inventory_id=source.id,
        destination_inventory_id=destination.id,
        user_ids={name: user.id for name, user in users.items()},
        tokens=tokens,
    )


@pytest.fixture(scope='function')
def headers(seed):
    """Authorization headers per username"""
    return {name: {'Authorization': f'Bearer {token}'} for name, token in seed.tokens.items()}


@pytest.fixture(scope='function')
def actors(app, seed):
    """ActorContext per username, as the routes build them"""
    from inventory_api.data.core.user import User

    with app.app_context():
        return {
            name: ActorContext.from_user(_db.session.get(User, user_id))
            for name, user_id in seed.user_ids.items()
        }
