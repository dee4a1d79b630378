"""Tests for database initialization."""
import os
import tempfile

import pytest
from sqlalchemy import create_engine, inspect

import shop_platform.shop_service.db as db_module
from shop_platform.shop_service.db import init_db


@pytest.fixture
def temp_engine():
    # Create a temporary database and point the db module at it
    with tempfile.NamedTemporaryFile(delete=False, suffix='.db') as tmp:
        tmp_db_path = tmp.name

    test_engine = create_engine(f"sqlite:///{tmp_db_path}", connect_args={"check_same_thread": False})
    original_engine = db_module.engine
    db_module.engine = test_engine
    try:
        yield test_engine
    finally:
        # Restore original engine
        db_module.engine = original_engine
        test_engine.dispose()
        if os.path.exists(tmp_db_path):
            os.unlink(tmp_db_path)


def test_init_db_creates_all_tables(temp_engine):
    init_db()

    tables = inspect(temp_engine).get_table_names()
    for table in ("users", "products", "orders", "placements"):
        assert table in tables, f"{table} table should be created"


def test_init_db_creates_placement_columns_and_foreign_keys(temp_engine):
    init_db()

    inspector = inspect(temp_engine)
    columns = {col['name']: col for col in inspector.get_columns('placements')}
    for col_name in ('id', 'order_id', 'product_id', 'quantity'):
        assert col_name in columns, f"Column {col_name} should exist in placements table"
        assert columns[col_name]['nullable'] is False

    referred = {fk['referred_table'] for fk in inspector.get_foreign_keys('placements')}
    assert referred == {"orders", "products"}


def test_init_db_creates_product_indexes(temp_engine):
    init_db()

    index_names = [idx['name'] for idx in inspect(temp_engine).get_indexes('products')]
    assert 'ix_products_user_id' in index_names
    assert 'ix_products_published_updated_at' in index_names


def test_user_email_is_unique(temp_engine):
    init_db()

    inspector = inspect(temp_engine)
    unique_columns = [idx['column_names'] for idx in inspector.get_indexes('users') if idx['unique']]
    unique_columns += [c['column_names'] for c in inspector.get_unique_constraints('users')]
    assert ['email'] in unique_columns
