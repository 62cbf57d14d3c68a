"""
Smoke-test fixtures for a running todo server.

Provides the ``smoke_base_url`` session-scoped fixture. The URL comes from
``TEST_BASE_URL``; when nothing healthy answers there, the whole smoke
suite is skipped instead of failing.
"""

from __future__ import annotations

import os

import pytest
import requests


def is_server_ready(url: str, timeout: int = 2) -> bool:
    """Return True when the health endpoint responds with 200."""
    try:
        response = requests.get(f"{url}/api/health", timeout=timeout)
    except requests.RequestException:
        return False
    return response.status_code == 200


@pytest.fixture(scope="session")
def smoke_base_url() -> str:
    """Return a healthy server URL, or skip the smoke suite."""
    base_url = os.getenv("TEST_BASE_URL", "http://localhost:5000").rstrip("/")
    if not is_server_ready(base_url):
        pytest.skip(f"No healthy todo server at {base_url}")
    return base_url
