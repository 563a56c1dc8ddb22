# tests/conftest.py
import sys
from pathlib import Path

# ---------------------------------------------------------
# Ensure project root is on PYTHONPATH BEFORE app imports
# ---------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def client():
    from API_LAYER.app import app

    return TestClient(app)


@pytest.fixture
def counters():
    """Metrics reset to zero for the test."""
    from API_LAYER.app import request_counters

    for key in request_counters:
        request_counters[key] = 0
    return request_counters
