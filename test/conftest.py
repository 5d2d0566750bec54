"""
Test Configuration and Fixtures

This module provides:
- SQLite (aiosqlite) database per pytest-xdist worker, recreated for every test
- Test log directory so loguru output stays out of the project logs

Architecture:
- Unit tests (test/**/unit/): Override clean_database with a no-op in their own conftest.py
- Integration tests: Use the real schema on SQLite with a fresh database per test
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time (nft_ticketing.platform.config.core_setting)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_dir = Path(__file__).parent

    # One database file per xdist worker
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    db_path = test_dir / f'nft_ticketing_test_{worker_id}.db'
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_path}'

    # Create test log directory
    test_log_dir = test_dir / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # Background sweeps would race the assertions
    os.environ['EXPIRY_REAPER_ENABLED'] = 'false'
    os.environ['DEBUG'] = 'false'
    os.environ.pop('OTEL_EXPORTER_OTLP_ENDPOINT', None)


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402

from nft_ticketing.platform.database.orm_db_setting import (  # noqa: E402
    Base,
    dispose_engine,
    get_engine,
)
import nft_ticketing.service.ticket.driven_adapter.model  # noqa: E402, F401


@pytest.fixture(autouse=True, scope='function')
async def clean_database() -> AsyncGenerator[None, None]:
    """Drop and recreate every table before each test"""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    # The test may run on another event loop (TestClient); start it from an empty pool
    await dispose_engine()
    yield
    await dispose_engine()
