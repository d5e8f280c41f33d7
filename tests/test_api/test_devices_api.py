"""Tests for the device endpoints."""

import pytest


@pytest.mark.asyncio
async def test_add_list_and_get(client) -> None:
    resp = await client.post(
        "/api/devices", json={"id": "ac", "name": "Bedroom AC", "type": "aircon", "room": "Bedroom"}
    )
    assert resp.status_code == 201
    assert resp.json()["value"] == 24

    listed = (await client.get("/api/devices")).json()
    assert [d["id"] for d in listed] == ["ac"]

    resp = await client.get("/api/devices/ac")
    assert resp.json()["room"] == "Bedroom"


@pytest.mark.asyncio
async def test_duplicate_device_conflicts(client) -> None:
    body = {"id": "lamp", "name": "Lamp", "type": "light"}
    await client.post("/api/devices", json=body)
    resp = await client.post("/api/devices", json=body)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_invalid_type_rejected(client) -> None:
    resp = await client.post("/api/devices", json={"id": "x", "name": "X", "type": "toaster"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_status_toggle_value_delete(client) -> None:
    await client.post("/api/devices", json={"id": "fan", "name": "Fan", "type": "fan"})

    assert (await client.put("/api/devices/fan/status", json={"status": True})).json()["status"] is True
    assert (await client.post("/api/devices/fan/toggle")).json()["status"] is False
    assert (await client.put("/api/devices/fan/value", json={"value": 60})).json()["value"] == 60
    assert (await client.delete("/api/devices/fan")).json() == {"deleted": True}
    assert (await client.get("/api/devices/fan")).status_code == 404


@pytest.mark.asyncio
async def test_unknown_device_is_404(client) -> None:
    assert (await client.post("/api/devices/ghost/toggle")).status_code == 404
    assert (await client.delete("/api/devices/ghost")).status_code == 404


@pytest.mark.asyncio
async def test_types_and_discovery(client) -> None:
    types = (await client.get("/api/devices/types")).json()
    assert types["aircon"]["hasValue"] is True
    assert types["aircon"]["valueLabel"] == "Temperature (°C)"

    found = (await client.post("/api/devices/discover")).json()
    assert {d["type"] for d in found} == {"light", "plug"}
    assert (await client.get("/api/devices")).json() == []
