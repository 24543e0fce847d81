from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from valuation_navigator.main import app, store


@pytest.fixture
def client():
    store.clear()
    with TestClient(app) as test_client:
        yield test_client
    store.clear()
