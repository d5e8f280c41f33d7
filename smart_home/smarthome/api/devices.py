"""Device API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from smarthome.deps import get_device_registry
from smarthome.devices.discovery import discover_devices
from smarthome.devices.models import (
    DEVICE_TYPES,
    Device,
    DeviceCreate,
    DeviceTypeInfo,
    DiscoveredDevice,
)
from smarthome.devices.registry import DeviceRegistry
from smarthome.engine.errors import DeviceAlreadyExists, DeviceNotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["devices"])


class StatusRequest(BaseModel):
    status: bool


class ValueRequest(BaseModel):
    value: float


@router.get("/devices", response_model=list[Device])
async def list_devices(
    registry: DeviceRegistry = Depends(get_device_registry),
) -> list[Device]:
    """All devices ordered by room, then name."""
    return await registry.list_devices()


@router.get("/devices/types", response_model=dict[str, DeviceTypeInfo])
async def list_device_types() -> dict[str, DeviceTypeInfo]:
    return {t.value: info for t, info in DEVICE_TYPES.items()}


@router.post("/devices/discover", response_model=list[DiscoveredDevice])
async def discover() -> list[DiscoveredDevice]:
    """Simulated network scan. Nothing is persisted."""
    return discover_devices()


@router.get("/devices/{device_id}", response_model=Device)
async def get_device(
    device_id: str,
    registry: DeviceRegistry = Depends(get_device_registry),
) -> Device:
    try:
        return await registry.get_device(device_id)
    except DeviceNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/devices", response_model=Device, status_code=201)
async def add_device(
    body: DeviceCreate,
    registry: DeviceRegistry = Depends(get_device_registry),
) -> Device:
    try:
        return await registry.add_device(body)
    except DeviceAlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/devices/{device_id}/status", response_model=Device)
async def set_status(
    device_id: str,
    body: StatusRequest,
    registry: DeviceRegistry = Depends(get_device_registry),
) -> Device:
    try:
        return await registry.set_status(device_id, body.status)
    except DeviceNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/devices/{device_id}/toggle", response_model=Device)
async def toggle_device(
    device_id: str,
    registry: DeviceRegistry = Depends(get_device_registry),
) -> Device:
    try:
        return await registry.toggle(device_id)
    except DeviceNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/devices/{device_id}/value", response_model=Device)
async def set_value(
    device_id: str,
    body: ValueRequest,
    registry: DeviceRegistry = Depends(get_device_registry),
) -> Device:
    try:
        return await registry.set_value(device_id, body.value)
    except DeviceNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/devices/{device_id}")
async def delete_device(
    device_id: str,
    registry: DeviceRegistry = Depends(get_device_registry),
) -> dict:
    try:
        await registry.delete_device(device_id)
    except DeviceNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"deleted": True}
