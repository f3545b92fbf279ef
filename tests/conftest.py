"""
Test Configuration Module
Provides fixtures and shared test utilities
"""

import pytest
import sys
import os
from datetime import datetime, timezone
from typing import Any, List, Optional
from zoneinfo import ZoneInfo

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

from config.assets import ASSETS
from core.catalog import IdentifierCatalog
from utils.helpers import RetryPolicy


NEW_YORK = ZoneInfo("America/New_York")

# Week of Monday 2026-10-19 (EDT, UTC-4)
MONDAY = 19
TUESDAY = 20
SATURDAY = 24
SUNDAY = 25


def ny_instant(day: int, hour: int, minute: int = 0) -> datetime:
    """UTC instant for the given New York wall-clock time in October 2026"""
    return datetime(2026, 10, day, hour, minute, tzinfo=NEW_YORK).astimezone(timezone.utc)


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse used as async context manager"""

    def __init__(self, status: int = 200, body: Any = None):
        self.status = status
        self._body = body

    async def json(self, content_type: Optional[str] = 'application/json'):
        if isinstance(self._body, BaseException):
            raise self._body
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class _RaisingContext:
    def __init__(self, error: BaseException):
        self._error = error

    async def __aenter__(self):
        raise self._error

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """
    Replays queued outcomes, one per GET.
    Queue entries are FakeResponse objects or exceptions raised on connect.
    """

    def __init__(self, outcomes: List[Any]):
        self._outcomes = list(outcomes)
        self.calls: List[dict] = []
        self.closed = False

    def get(self, url, params=None, **kwargs):
        self.calls.append({'url': url, 'params': params})
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            return _RaisingContext(outcome)
        return outcome

    async def close(self):
        self.closed = True


@pytest.fixture
def catalog():
    """Catalog built from the shipped asset table"""
    return IdentifierCatalog.from_mapping(ASSETS)


@pytest.fixture
def no_wait_policy():
    """Fetch-shaped retry policy without delays"""
    return RetryPolicy(retries=3, base_delay_sec=0.0, multiplier=1.6, max_delay_sec=0.0)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every ingestor variable the host may define"""
    for name in (
        'RPC_URL', 'CONTRACT_ADDR', 'PRIVATE_KEY', 'PROOF_BASE_URL', 'INTERVAL_MS',
        'ASSET_IDS_OVERRIDE', 'AWS_SECRET_ID', 'AWS_REGION', 'HTTP_TIMEOUT_SEC',
        'RPC_TIMEOUT_SEC', 'LOG_LEVEL', 'LOG_FILE', 'STRUCTURED_LOGGING',
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
