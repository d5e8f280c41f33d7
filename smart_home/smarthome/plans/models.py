"""Data models for electricity plans and their comparisons."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ElectricityPlan(BaseModel):
    """A pricing offer from a retailer. Reference data, replaced wholesale."""

    model_config = ConfigDict(extra="ignore")

    id: int = 0
    provider: str
    plan_name: str
    rate_per_kwh: float = Field(..., gt=0)
    contract_length: int = Field(0, ge=0, description="Months; 0 means no contract")
    renewable_percentage: float = Field(0, ge=0, le=100)
    additional_fees: str = ""
    url: str = ""


class PlanPreferences(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prefer_renewable: bool = Field(False, alias="preferRenewable")
    max_contract_length: int | None = Field(None, ge=0, alias="maxContractLength")
    prioritize_savings: bool = Field(False, alias="prioritizeSavings")


class PlanComparison(ElectricityPlan):
    """A plan augmented with projected costs and a 0-100 recommendation score."""

    monthly_cost: float
    annual_cost: float
    savings_vs_current: float
    savings_percentage: float
    recommendation_score: int = Field(..., ge=0, le=100)


class SwitchingSavings(BaseModel):
    current_annual_cost: float
    new_annual_cost: float
    annual_savings: float
    payback_period_months: int


class PlanStatistics(BaseModel):
    total_plans: int = 0
    providers: int = 0
    average_rate: float = 0.0
    min_rate: float = 0.0
    max_rate: float = 0.0
    renewable_plans: int = 0
    no_contract_plans: int = 0
    contract_lengths: list[int] = Field(default_factory=list)
