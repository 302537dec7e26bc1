"""
Pytest configuration and fixtures for Batch Builder tests.
"""
import os
import sys
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))


# Define test markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "core: tests that don't require database connections"
    )
    config.addinivalue_line(
        "markers", "db: tests that execute against a real (in-memory) database"
    )


# CQL session fixture
@pytest.fixture
def mock_cql_session():
    """Mock CQL session that prepares and executes queries."""
    session = MagicMock()
    session.prepare.side_effect = lambda query: ("prepared", query)
    return session


# Generic database connection fixture
@pytest.fixture
def mock_db_connection():
    """Mock DB-API connection for generic adapter tests."""
    conn = MagicMock()
    cursor = MagicMock()
    cursor.description = None
    conn.cursor.return_value = cursor
    conn.in_transaction = False
    return conn
