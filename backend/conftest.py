"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from django.core.cache import cache
from rest_framework.test import APIClient


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def clear_cache_after_test():
    """
    Clear cache after each test to prevent cache pollution.

    Carts and purchase-order snapshots live in the cache, so tests would
    otherwise see each other's sessions.
    """
    yield  # Run the test
    cache.clear()  # Clear all cache keys


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    DRF API client. Authentication happens upstream of this service, so no
    credentials are attached.
    """
    return APIClient()
