# tests/conftest.py
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from fixtures.markets import MARKET, NEIGHBORHOOD, sample_percentiles, sample_stats
from stayvest.adapters.memory_repo import InMemoryMarketRepository
from stayvest.api.http import app, get_market_repository


@pytest.fixture
def repo():
    r = InMemoryMarketRepository()
    r.add(MARKET, NEIGHBORHOOD, 2, Decimal("2"), sample_stats(), sample_percentiles())
    return r


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_market_repository] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()
