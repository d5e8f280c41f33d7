"""Tests for the plan catalog."""

from __future__ import annotations

import sqlite3

import pytest

from smarthome.db.database import Database
from smarthome.plans.catalog import PlanCatalog, load_plan_catalog
from smarthome.plans.models import ElectricityPlan


def test_bundled_catalog_has_twelve_plans() -> None:
    plans = load_plan_catalog()
    assert len(plans) == 12
    assert [p.id for p in plans] == list(range(1, 13))
    assert plans[0].provider == "SP Group"
    assert plans[0].contract_length == 0


def test_load_from_custom_file(tmp_path) -> None:
    path = tmp_path / "plans.yaml"
    path.write_text(
        "plans:\n"
        "  - provider: Test Power\n"
        "    plan_name: Flat\n"
        "    rate_per_kwh: 0.25\n"
    )
    plans = load_plan_catalog(path)
    assert len(plans) == 1
    assert plans[0].id == 1
    assert plans[0].renewable_percentage == 0


@pytest.mark.asyncio
async def test_refresh_then_list_orders_by_rate(db: Database) -> None:
    catalog = PlanCatalog(db.conn)
    stored = await catalog.refresh()

    assert len(stored) == 12
    rates = [p.rate_per_kwh for p in stored]
    assert rates == sorted(rates)
    assert stored[0].provider == "Senoko Energy"
    assert await catalog.count() == 12


@pytest.mark.asyncio
async def test_refresh_replaces_all_rows(db: Database) -> None:
    catalog = PlanCatalog(db.conn)
    await catalog.refresh()

    replacement = [
        ElectricityPlan(id=1, provider="Only Power", plan_name="Solo", rate_per_kwh=0.2)
    ]
    stored = await catalog.refresh(replacement)

    assert [p.provider for p in stored] == ["Only Power"]
    assert await catalog.count() == 1


@pytest.mark.asyncio
async def test_get_plan(db: Database) -> None:
    catalog = PlanCatalog(db.conn)
    await catalog.refresh()

    plan = await catalog.get_plan(6)
    assert plan is not None
    assert plan.rate_per_kwh == 0.285
    assert await catalog.get_plan(404) is None


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_catalog(db: Database) -> None:
    catalog = PlanCatalog(db.conn)
    await catalog.refresh()

    first = ElectricityPlan(id=1, provider="Only Power", plan_name="Solo", rate_per_kwh=0.2)
    second = ElectricityPlan(id=2, provider="Only Power", plan_name="Duo", rate_per_kwh=0.21)
    duplicate = second.model_copy(update={"id": 99})
    with pytest.raises(sqlite3.IntegrityError):
        await catalog.refresh([first, second, duplicate])

    # A later commit on the shared connection must not persist a partial catalog
    await db.conn.commit()
    assert await catalog.count() == 12
    assert (await catalog.get_plan(6)).provider == "Senoko Energy"
