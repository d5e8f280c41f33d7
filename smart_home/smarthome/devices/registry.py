"""Device registry -- DB-backed CRUD keyed by device id."""

from __future__ import annotations

import logging

import aiosqlite

from smarthome.devices.models import (
    DEFAULT_VALUES,
    Device,
    DeviceCreate,
    default_icon,
)
from smarthome.engine.errors import DeviceAlreadyExists, DeviceNotFound
from smarthome.engine.models import Action, ActionKind, DeviceState

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Explicit CRUD over the ``devices`` table."""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def list_devices(self) -> list[Device]:
        """Return all devices, ordered by room then name."""
        async with self._conn.execute(
            "SELECT * FROM devices ORDER BY room, name"
        ) as cursor:
            rows = await cursor.fetchall()
        return [self._row_to_device(r) for r in rows]

    async def get_device(self, device_id: str) -> Device:
        """Return a device by id or raise DeviceNotFound."""
        async with self._conn.execute(
            "SELECT * FROM devices WHERE id = ?", (device_id,)
        ) as cursor:
            row = await cursor.fetchone()
        if not row:
            raise DeviceNotFound(device_id)
        return self._row_to_device(row)

    async def exists(self, device_id: str) -> bool:
        async with self._conn.execute(
            "SELECT 1 FROM devices WHERE id = ?", (device_id,)
        ) as cursor:
            return await cursor.fetchone() is not None

    async def add_device(self, device: DeviceCreate) -> Device:
        """Onboard a new device. It starts switched off."""
        if await self.exists(device.id):
            raise DeviceAlreadyExists(device.id)

        await self._conn.execute(
            """INSERT INTO devices
               (id, name, type, status, value, room, icon, created_at, updated_at)
               VALUES (?, ?, ?, 0, ?, ?, ?, datetime('now'), datetime('now'))""",
            (
                device.id,
                device.name,
                device.type.value,
                DEFAULT_VALUES.get(device.type),
                device.room or "Unassigned",
                device.icon or default_icon(device.type),
            ),
        )
        await self._conn.commit()
        logger.info("Added device %s (%s)", device.id, device.type.value)
        return await self.get_device(device.id)

    async def set_status(self, device_id: str, status: bool) -> Device:
        await self._update(device_id, "status = ?", (1 if status else 0,))
        return await self.get_device(device_id)

    async def set_value(self, device_id: str, value: float) -> Device:
        await self._update(device_id, "value = ?", (value,))
        return await self.get_device(device_id)

    async def toggle(self, device_id: str) -> Device:
        device = await self.get_device(device_id)
        return await self.set_status(device_id, not device.status)

    async def delete_device(self, device_id: str) -> None:
        cursor = await self._conn.execute(
            "DELETE FROM devices WHERE id = ?", (device_id,)
        )
        await self._conn.commit()
        if cursor.rowcount == 0:
            raise DeviceNotFound(device_id)
        logger.info("Deleted device %s", device_id)

    async def snapshot_states(self) -> dict[str, DeviceState]:
        """Return a read-only view of every device's status and value."""
        return {
            d.id: DeviceState(status=d.status, value=d.value)
            for d in await self.list_devices()
        }

    async def apply_action(self, action: Action) -> bool:
        """Apply a rule action. Returns True when the device actually changed."""
        device = await self.get_device(action.device_id)

        if action.action == ActionKind.turn_on:
            if device.status:
                return False
            await self.set_status(device.id, True)
        elif action.action == ActionKind.turn_off:
            if not device.status:
                return False
            await self.set_status(device.id, False)
        else:
            if device.value == action.value:
                return False
            await self.set_value(device.id, action.value)  # type: ignore[arg-type]
        return True

    async def _update(self, device_id: str, assignment: str, params: tuple) -> None:
        cursor = await self._conn.execute(
            f"UPDATE devices SET {assignment}, updated_at = datetime('now') WHERE id = ?",
            (*params, device_id),
        )
        await self._conn.commit()
        if cursor.rowcount == 0:
            raise DeviceNotFound(device_id)

    @staticmethod
    def _row_to_device(row: aiosqlite.Row) -> Device:
        data = dict(row)
        data["status"] = bool(data.get("status", 0))
        return Device.model_validate(data)
