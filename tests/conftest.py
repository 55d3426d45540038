"""Shared fixtures for company search tests."""

import pytest
from fastapi.testclient import TestClient

from company_mcp.config import Settings
from company_mcp.server import create_app
from company_mcp.store import RecordStore


SAMPLE_ROWS = [
    {"id": "1", "company_name": "Acme", "country": "US", "industry": "Manufacturing", "annual_revenue_usd": "500000"},
    {"id": "2", "company_name": "Globex", "country": "UK", "industry": "Energy", "annual_revenue_usd": ""},
]


@pytest.fixture
def sample_rows():
    return [dict(row) for row in SAMPLE_ROWS]


@pytest.fixture
def store(sample_rows):
    return RecordStore(sample_rows)


@pytest.fixture
def settings(tmp_path):
    return Settings(csv_path=str(tmp_path / "missing.csv"), default_limit=50, max_limit=50)


@pytest.fixture
def app(store, settings):
    return create_app(store=store, settings=settings)


@pytest.fixture
def client(app):
    return TestClient(app)
