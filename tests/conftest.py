"""Shared test fixtures and configuration."""

import os
import sys
from pathlib import Path

# Add smart_home/ to Python path so `from smarthome.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "smart_home"))

import pytest
import pytest_asyncio

os.environ["SMARTHOME_DEV_MODE"] = "true"

from smarthome.db.database import Database  # noqa: E402


@pytest_asyncio.fixture
async def db(tmp_path: Path):
    """A migrated database in a temporary directory."""
    database = Database(db_path=str(tmp_path / "test.db"))
    await database.connect()
    yield database
    await database.close()


@pytest.fixture
def catalog_plans():
    from smarthome.plans.catalog import load_plan_catalog

    return load_plan_catalog()
