"""Electricity plan catalog -- YAML source data + DB-backed store."""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite
from ruamel.yaml import YAML

from smarthome.plans.models import ElectricityPlan

logger = logging.getLogger(__name__)

CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "plans.yaml"

_yaml = YAML(typ="safe")


def load_plan_catalog(path: Path = CATALOG_PATH) -> list[ElectricityPlan]:
    """Read the pinned plan catalog. Ids follow list position, starting at 1."""
    data = _yaml.load(path.read_text(encoding="utf-8")) or {}
    entries = data.get("plans", []) if isinstance(data, dict) else []
    return [
        ElectricityPlan.model_validate({**entry, "id": index})
        for index, entry in enumerate(entries, start=1)
    ]


class PlanCatalog:
    """Stores the current plan catalog. Refreshes replace every row."""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def refresh(self, plans: list[ElectricityPlan] | None = None) -> list[ElectricityPlan]:
        """Replace the whole catalog, returning the stored plans."""
        source = plans if plans is not None else load_plan_catalog()
        try:
            await self._conn.execute("DELETE FROM electricity_plans")
            for index, plan in enumerate(source, start=1):
                await self._conn.execute(
                    """INSERT INTO electricity_plans
                       (id, provider, plan_name, rate_per_kwh, contract_length,
                        renewable_percentage, additional_fees, url)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        plan.id or index,
                        plan.provider,
                        plan.plan_name,
                        plan.rate_per_kwh,
                        plan.contract_length,
                        plan.renewable_percentage,
                        plan.additional_fees,
                        plan.url,
                    ),
                )
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise
        logger.info("Plan catalog refreshed with %d plans", len(source))
        return await self.list_plans()

    async def list_plans(self) -> list[ElectricityPlan]:
        """Return all plans, cheapest rate first."""
        async with self._conn.execute(
            "SELECT * FROM electricity_plans ORDER BY rate_per_kwh ASC, id ASC"
        ) as cursor:
            rows = await cursor.fetchall()
        return [ElectricityPlan.model_validate(dict(r)) for r in rows]

    async def get_plan(self, plan_id: int) -> ElectricityPlan | None:
        async with self._conn.execute(
            "SELECT * FROM electricity_plans WHERE id = ?", (plan_id,)
        ) as cursor:
            row = await cursor.fetchone()
        return ElectricityPlan.model_validate(dict(row)) if row else None

    async def count(self) -> int:
        async with self._conn.execute(
            "SELECT COUNT(*) AS cnt FROM electricity_plans"
        ) as cursor:
            row = await cursor.fetchone()
        return row["cnt"]
