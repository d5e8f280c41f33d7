"""Data models for automation rules and their execution log."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from smarthome.engine.models import Action, Condition


class ParsedRule(BaseModel):
    """Structured rule as produced by a parser or entered manually."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    condition: Condition
    # The LLM prompt historically calls the action list "action".
    actions: list[Action] = Field(..., min_length=1, alias="action")


class RuleCreate(ParsedRule):
    enabled: bool = True


class RuleUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    condition: Condition | None = None
    actions: list[Action] | None = Field(None, min_length=1, alias="action")
    enabled: bool | None = None


class AutomationRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    description: str = ""
    condition: Condition
    actions: list[Action] = Field(default_factory=list)
    enabled: bool = True
    created_at: str = ""
    updated_at: str = ""


class RuleLog(BaseModel):
    id: int
    rule_id: int
    rule_name: str = ""
    success: bool
    message: str = ""
    executed_at: str = ""
