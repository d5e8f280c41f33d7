"""Automation rule API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from ruamel.yaml import YAMLError

from smarthome.deps import (
    get_automation_loop,
    get_device_registry,
    get_rule_parser,
    get_rule_registry,
)
from smarthome.devices.registry import DeviceRegistry
from smarthome.engine.errors import ParserUnavailable, RuleNotFound, RuleParseError
from smarthome.engine.loop import AutomationLoop, TickResult
from smarthome.rules.models import AutomationRule, ParsedRule, RuleCreate, RuleLog, RuleUpdate
from smarthome.rules.parser import RuleParser
from smarthome.rules.registry import RuleRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["rules"])


class ParseRuleRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)
    save: bool = Field(False, description="Create the rule right away when parsing succeeds")


class ParseRuleResponse(BaseModel):
    rule: ParsedRule
    saved: AutomationRule | None = None


class ImportRequest(BaseModel):
    yaml_content: str


class ImportResponse(BaseModel):
    imported: int
    rules: list[AutomationRule]


class LoopStatus(BaseModel):
    running: bool
    time_window_seconds: int


@router.get("/rules", response_model=list[AutomationRule])
async def list_rules(
    enabled_only: bool = Query(default=False),
    registry: RuleRegistry = Depends(get_rule_registry),
) -> list[AutomationRule]:
    """List rules, newest first."""
    return await registry.list_rules(enabled_only=enabled_only)


@router.get("/rules/logs", response_model=list[RuleLog])
async def list_all_logs(
    limit: int = Query(default=100, ge=1, le=1000),
    registry: RuleRegistry = Depends(get_rule_registry),
) -> list[RuleLog]:
    return await registry.list_logs(limit=limit)


@router.get("/rules/export", response_class=PlainTextResponse)
async def export_rules(
    registry: RuleRegistry = Depends(get_rule_registry),
) -> PlainTextResponse:
    return PlainTextResponse(await registry.export_yaml(), media_type="application/x-yaml")


@router.post("/rules/import", response_model=ImportResponse)
async def import_rules(
    body: ImportRequest,
    registry: RuleRegistry = Depends(get_rule_registry),
) -> ImportResponse:
    """Import rules from YAML. Nothing is created if any rule is invalid."""
    try:
        rules = await registry.import_yaml(body.yaml_content)
    except YAMLError as e:
        raise HTTPException(status_code=400, detail=f"Invalid YAML: {e}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ImportResponse(imported=len(rules), rules=rules)


@router.post("/rules/parse", response_model=ParseRuleResponse)
async def parse_rule(
    body: ParseRuleRequest,
    parser: RuleParser = Depends(get_rule_parser),
    registry: RuleRegistry = Depends(get_rule_registry),
    devices: DeviceRegistry = Depends(get_device_registry),
) -> ParseRuleResponse:
    """Turn a natural-language description into a structured rule."""
    try:
        rule = await parser.parse_rule(body.text, await devices.list_devices())
    except ParserUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))
    except RuleParseError as e:
        raise HTTPException(status_code=400, detail=str(e))

    saved = None
    if body.save:
        saved = await registry.create_rule(RuleCreate(**rule.model_dump()))
    return ParseRuleResponse(rule=rule, saved=saved)


@router.post("/rules/run", response_model=TickResult)
async def run_rules(
    loop: AutomationLoop = Depends(get_automation_loop),
) -> TickResult:
    """Evaluate all enabled rules once, outside the background schedule."""
    return await loop.run_once()


@router.get("/rules/status", response_model=LoopStatus)
async def loop_status(
    loop: AutomationLoop = Depends(get_automation_loop),
) -> LoopStatus:
    return LoopStatus(running=loop.running, time_window_seconds=loop.time_window_seconds)


@router.get("/rules/{rule_id}", response_model=AutomationRule)
async def get_rule(
    rule_id: int,
    registry: RuleRegistry = Depends(get_rule_registry),
) -> AutomationRule:
    try:
        return await registry.get_rule(rule_id)
    except RuleNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/rules", response_model=AutomationRule, status_code=201)
async def create_rule(
    body: RuleCreate,
    registry: RuleRegistry = Depends(get_rule_registry),
) -> AutomationRule:
    return await registry.create_rule(body)


@router.put("/rules/{rule_id}", response_model=AutomationRule)
async def update_rule(
    rule_id: int,
    body: RuleUpdate,
    registry: RuleRegistry = Depends(get_rule_registry),
) -> AutomationRule:
    try:
        return await registry.update_rule(rule_id, body)
    except RuleNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/rules/{rule_id}/toggle", response_model=AutomationRule)
async def toggle_rule(
    rule_id: int,
    registry: RuleRegistry = Depends(get_rule_registry),
) -> AutomationRule:
    try:
        return await registry.toggle_rule(rule_id)
    except RuleNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/rules/{rule_id}")
async def delete_rule(
    rule_id: int,
    registry: RuleRegistry = Depends(get_rule_registry),
) -> dict:
    try:
        await registry.delete_rule(rule_id)
    except RuleNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"deleted": True}


@router.get("/rules/{rule_id}/logs", response_model=list[RuleLog])
async def list_rule_logs(
    rule_id: int,
    limit: int = Query(default=100, ge=1, le=1000),
    registry: RuleRegistry = Depends(get_rule_registry),
) -> list[RuleLog]:
    try:
        await registry.get_rule(rule_id)
    except RuleNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return await registry.list_logs(rule_id=rule_id, limit=limit)
