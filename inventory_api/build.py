#!/usr/bin/env python3
"""
Database build for the Inventory API
Creates tables, inserts critical data and optionally demo data
"""

import json
import os
from decimal import Decimal
from pathlib import Path

from inventory_api import db
from inventory_api.logger import get_logger

logger = get_logger("inventory_api.build")

DATA_DIR = Path(__file__).parent / 'data'


def _load(filename):
    path = DATA_DIR / filename
    if not path.exists():
        error_msg = f"Build data file not found: {path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def verify_critical_data():
    """
    Verify that critical data is present in the database

    Returns:
        bool: True if an active admin user exists
    """
    from inventory_api.data.core.user import User

    admin = User.query.filter_by(role='admin', is_active=True).first()
    if admin is None:
        logger.warning("No active admin user found")
        return False
    return True


def insert_critical_data():
    """
    Insert the data the API cannot run without (the initial admin user).

    The admin password is read from the environment variable named in the
    data file; it is required the first time the database is built.
    """
    from inventory_api.data.core.user import User

    if verify_critical_data():
        logger.info("Critical data already present, skipping insertion")
        return

    critical_data = _load('build_data_critical.json')
    logger.warning("Critical data missing, attempting insertion...")

    try:
        for user_data in critical_data.get('Users', []):
            user_data = dict(user_data)
            password_env = user_data.pop('password_env', None)
            password = os.environ.get(password_env) if password_env else None
            if not password:
                raise RuntimeError(f"{password_env} must be set to create user {user_data['username']}")
            user_data['password'] = password
            User.find_or_create_from_dict(user_data, lookup_fields=['username'], commit=False)
            logger.info(f"Inserted essential user: {user_data['username']}")

        db.session.commit()
        logger.info("Successfully inserted critical data")
    except Exception as e:
        db.session.rollback()
        logger.error(f"Critical data insertion failed: {e}")
        raise


def insert_demo_data():
    """Insert demo stores, products, stock and users; safe to run repeatedly"""
    from inventory_api.business.inventory.stock.inventory_manager import InventoryManager
    from inventory_api.data.catalog.product import Product
    from inventory_api.data.catalog.product_variant import ProductVariant
    from inventory_api.data.core.store import Store
    from inventory_api.data.core.user import User

    demo_data = _load('build_data_demo.json')
    logger.info("Inserting demo data...")

    try:
        stores = {}
        for store_data in demo_data.get('Stores', []):
            store, _ = Store.find_or_create_from_dict(store_data, lookup_fields=['name'], commit=False)
            stores[store.name] = store

        variants = {}
        for product_data in demo_data.get('Products', []):
            product, _ = Product.find_or_create_from_dict(product_data, lookup_fields=['name'], commit=False)
            for variant_data in product_data.get('variants', []):
                variant_data = dict(variant_data, product_id=product.id, price=Decimal(variant_data["price"]))
                variant, _ = ProductVariant.find_or_create_from_dict(variant_data, lookup_fields=['sku'], commit=False)
                variants[variant.sku] = variant

        manager = InventoryManager()
        for row in demo_data.get('Inventory', []):
            inv = manager.get_or_create(variants[row['sku']].id, stores[row['store']].id)
            inv.low_stock_threshold = row.get('low_stock_threshold', inv.low_stock_threshold)
            if inv.quantity == 0 and row['quantity'] > 0:
                manager.add_stock(inv, row['quantity'], user_id=None, notes="Demo opening stock")

        for user_data in demo_data.get('Users', []):
            user, created = User.find_or_create_from_dict(user_data, lookup_fields=['username'], commit=False)
            if created:
                user.stores = [stores[name] for name in user_data.get('stores', [])]

        db.session.commit()
        logger.info("Successfully inserted demo data")
    except Exception as e:
        db.session.rollback()
        logger.error(f"Failed to insert demo data: {e}")
        raise


def build_database(app, enable_demo_data=False):
    """
    Create all tables and insert critical data

    Args:
        app: Flask application to build against
        enable_demo_data (bool): Whether to insert demo data as well
    """
    with app.app_context():
        logger.info(f"Starting database build (demo data: {enable_demo_data})")
        db.create_all()

        # Critical data must be present for the application to function
        insert_critical_data()

        if enable_demo_data:
            insert_demo_data()

        logger.info("Database build completed successfully")
