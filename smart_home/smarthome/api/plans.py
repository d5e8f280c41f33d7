"""Electricity plan API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from smarthome.deps import get_plan_catalog
from smarthome.engine.errors import InvalidUsageValue, PlanNotFound
from smarthome.plans.catalog import PlanCatalog
from smarthome.plans.models import (
    ElectricityPlan,
    PlanComparison,
    PlanPreferences,
    PlanStatistics,
    SwitchingSavings,
)
from smarthome.plans.scorer import (
    DEFAULT_CURRENT_RATE,
    DEFAULT_MONTHLY_USAGE_KWH,
    compare_plans,
    plan_statistics,
    recommend_plans,
    switching_savings,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["plans"])


class CompareRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    monthly_usage: float | None = Field(None, alias="monthlyUsage")
    current_rate: float | None = Field(None, alias="currentRate")
    preferences: PlanPreferences | None = None


class RefreshResponse(BaseModel):
    success: bool = True
    count: int
    plans: list[ElectricityPlan]


@router.get("/plans", response_model=list[ElectricityPlan])
async def list_plans(
    catalog: PlanCatalog = Depends(get_plan_catalog),
) -> list[ElectricityPlan]:
    """All plans, cheapest rate first."""
    return await catalog.list_plans()


@router.post("/plans/refresh", response_model=RefreshResponse)
async def refresh_plans(
    catalog: PlanCatalog = Depends(get_plan_catalog),
) -> RefreshResponse:
    """Replace the stored catalog with the bundled plan list."""
    plans = await catalog.refresh()
    return RefreshResponse(count=len(plans), plans=plans)


@router.get("/plans/statistics", response_model=PlanStatistics)
async def get_statistics(
    catalog: PlanCatalog = Depends(get_plan_catalog),
) -> PlanStatistics:
    return plan_statistics(await catalog.list_plans())


@router.post("/plans/compare", response_model=list[PlanComparison])
async def compare(
    body: CompareRequest,
    catalog: PlanCatalog = Depends(get_plan_catalog),
) -> list[PlanComparison]:
    """Score every plan against the household's usage and current rate."""
    try:
        return compare_plans(
            await catalog.list_plans(),
            body.monthly_usage or DEFAULT_MONTHLY_USAGE_KWH,
            body.current_rate or DEFAULT_CURRENT_RATE,
            body.preferences,
        )
    except InvalidUsageValue as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/plans/recommendations", response_model=list[PlanComparison])
async def recommendations(
    usage: float = Query(default=DEFAULT_MONTHLY_USAGE_KWH),
    prefer_renewable: bool = Query(default=False, alias="preferRenewable"),
    max_contract_length: int | None = Query(default=None, ge=0, alias="maxContract"),
    catalog: PlanCatalog = Depends(get_plan_catalog),
) -> list[PlanComparison]:
    """Top five plans against the regulated tariff."""
    preferences = PlanPreferences(
        prefer_renewable=prefer_renewable,
        max_contract_length=max_contract_length,
    )
    try:
        return recommend_plans(await catalog.list_plans(), usage, preferences)
    except InvalidUsageValue as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/plans/savings/{plan_id}", response_model=SwitchingSavings)
async def get_savings(
    plan_id: int,
    usage: float = Query(default=DEFAULT_MONTHLY_USAGE_KWH),
    current_rate: float = Query(default=DEFAULT_CURRENT_RATE, alias="currentRate"),
    catalog: PlanCatalog = Depends(get_plan_catalog),
) -> SwitchingSavings:
    try:
        return switching_savings(await catalog.list_plans(), usage, current_rate, plan_id)
    except PlanNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidUsageValue as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/plans/{plan_id}", response_model=ElectricityPlan)
async def get_plan(
    plan_id: int,
    catalog: PlanCatalog = Depends(get_plan_catalog),
) -> ElectricityPlan:
    plan = await catalog.get_plan(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail=f"Plan not found: {plan_id}")
    return plan
