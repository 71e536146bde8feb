"""
Root pytest configuration for backend tests.

Provides:
- --run-integration flag for tests that start a real server
- Shared fixtures (app, client, make_app)
"""

import sys
from pathlib import Path

# Add backend directory to Python path so imports like
# `from api.contracts import ...` and `from routes import router` work
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest
from flask import Flask


class TestingConfig:
    TESTING = True
    LOG_LEVEL = 'DEBUG'
    HOST = '127.0.0.1'
    PORT = 5000
    DEBUG = False
    CORS_ORIGINS = ['*']
    MAX_CONTENT_LENGTH = 100 * 1024
    REQUEST_LOG_ENABLED = True
    REQUEST_LOG_SAMPLE_RATE = 1.0
    REQUEST_LOG_ENDPOINTS = []


def pytest_addoption(parser):
    """Add custom pytest options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked as integration (starts a real HTTP server).",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: tests that start a real HTTP server"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(
        reason="integration test (use --run-integration to run)"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def app():
    """Create test Flask application."""
    from app import create_app

    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_app():
    """
    Build a bare Flask app around one router.

    Installs the request context and error handler middleware only, so
    router tests see exactly the behavior of the router under test.
    """
    from api.middleware import setup_error_handlers, setup_request_id_middleware

    def _make(router, url_prefix=None):
        app = Flask(__name__)
        app.config['TESTING'] = True
        setup_request_id_middleware(app)
        setup_error_handlers(app)
        app.register_blueprint(router, url_prefix=url_prefix)
        return app

    return _make
