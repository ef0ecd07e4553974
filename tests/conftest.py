"""
Shared pytest fixtures for SmartExpense tests.
"""

import pytest
import os
import sys
from decimal import Decimal

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from models import db, User, Account  # noqa: E402


class TestConfig:
    """Test configuration backed by a throwaway SQLite file instead of MySQL."""
    SECRET_KEY = 'test-secret-key-for-testing-only'
    TESTING = True
    WTF_CSRF_ENABLED = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = 'WARNING'
    LOG_DIR = None
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    @staticmethod
    def init_db(app):
        db.init_app(app)
        with app.app_context():
            db.create_all()


def make_config(db_path, csrf_enabled):
    return type('TestConfig', (TestConfig,), {
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        # Threads share the file; let writers wait on the lock.
        'SQLALCHEMY_ENGINE_OPTIONS': {'connect_args': {'check_same_thread': False, 'timeout': 30}},
        'WTF_CSRF_ENABLED': csrf_enabled,
    })


def _build_app(tmp_path, csrf_enabled):
    from app import create_app
    application = create_app(config_class=make_config(tmp_path / 'test.db', csrf_enabled))
    yield application
    with application.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def app(tmp_path):
    """Create application for testing."""
    yield from _build_app(tmp_path, csrf_enabled=True)


@pytest.fixture
def app_no_csrf(tmp_path):
    """Create application for testing without CSRF protection."""
    yield from _build_app(tmp_path, csrf_enabled=False)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def client_no_csrf(app_no_csrf):
    """Create test client without CSRF."""
    return app_no_csrf.test_client()


@pytest.fixture
def ctx(app_no_csrf):
    """Push an application context for calling storage functions directly."""
    with app_no_csrf.app_context():
        yield app_no_csrf


def make_user(email='test@example.com', is_pro=False, pro_expires_at=None):
    user = User(email=email, password_hash='x', first_name='Test', is_pro=is_pro, pro_expires_at=pro_expires_at)
    db.session.add(user)
    db.session.commit()
    return user.id


def make_account(user_id, name='Wallet', balance='0.00', type='cash', currency='USD', is_active=True):
    account = Account(
        user_id=user_id, name=name, type=type, currency=currency,
        balance=Decimal(balance), is_active=is_active,
    )
    db.session.add(account)
    db.session.commit()
    return account.id


@pytest.fixture
def user_id(ctx):
    return make_user()


@pytest.fixture
def pro_user_id(ctx):
    return make_user(email='pro@example.com', is_pro=True)


def login_session(client, user_id):
    """Helper to set up a logged-in session."""
    with client.session_transaction() as sess:
        sess['user_id'] = user_id
