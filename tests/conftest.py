"""
Shared pytest fixtures for the maintenance workflow test suite.

Provides:
    - app: Flask application (session-scoped)
    - client: Flask test client (function-scoped)
"""

import pytest

from maintflow import create_app


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()
