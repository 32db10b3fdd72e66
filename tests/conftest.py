"""
Shared pytest fixtures for Finance Tracker tests.
"""

import pytest
import os
import sys
from decimal import Decimal

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Config  # noqa: E402


class TestConfig(Config):
    """Test configuration backed by in-memory SQLite."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    UPLOAD_FOLDER = '/tmp/test_uploads'
    RECEIPT_FOLDER = '/tmp/test_uploads/receipts'
    STARTING_BALANCE = Decimal('10000')
    RECURRING_CATCH_UP = False
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def app(tmp_path):
    """Create application for testing with a fresh schema."""
    from app import create_app
    from models import db

    application = create_app(config_class=TestConfig)
    application.config['RECEIPT_FOLDER'] = str(tmp_path / 'receipts')
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def store(app):
    """Ledger store bound to the test database."""
    from storage import get_store
    return get_store()


def post_json(client, url, payload):
    """Helper to POST a JSON body."""
    return client.post(url, json=payload)


def create_budget(client, category='Food', amount='100', **extra):
    payload = {'name': f'{category} budget', 'category': category, 'amount': amount}
    payload.update(extra)
    response = post_json(client, '/api/budgets', payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def create_expense(client, category='Food', amount='10', **extra):
    payload = {'category': category, 'amount': amount}
    payload.update(extra)
    response = post_json(client, '/api/expenses', payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()
