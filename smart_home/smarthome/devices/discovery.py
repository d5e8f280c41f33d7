"""Simulated device discovery.

Nothing here touches the network; the candidates mimic what an mDNS/UPnP scan
would report so the onboarding flow can be exercised end to end.
"""

from __future__ import annotations

import time

from smarthome.devices.models import DeviceType, DiscoveredDevice, default_icon

_CANDIDATES = [
    ("Smart Bulb", DeviceType.light, "Bedroom", "Philips Hue", "A19"),
    ("Smart Plug", DeviceType.plug, "Living Room", "TP-Link", "HS100"),
]


def discover_devices(now: float | None = None) -> list[DiscoveredDevice]:
    """Return candidate devices with ids unique to this scan."""
    stamp = int((now if now is not None else time.time()) * 1000)
    return [
        DiscoveredDevice(
            id=f"device_{stamp}_{index}",
            name=name,
            type=device_type,
            room=room,
            icon=default_icon(device_type),
            manufacturer=manufacturer,
            model=model,
        )
        for index, (name, device_type, room, manufacturer, model) in enumerate(
            _CANDIDATES, start=1
        )
    ]
