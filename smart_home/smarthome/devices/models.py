"""Device data models and the supported device type catalog."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DeviceType(str, Enum):
    light = "light"
    aircon = "aircon"
    vacuum = "vacuum"
    kettle = "kettle"
    blinds = "blinds"
    plug = "plug"
    fan = "fan"
    heater = "heater"
    lock = "lock"
    camera = "camera"
    speaker = "speaker"
    tv = "tv"


class DeviceTypeInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: DeviceType
    name: str
    icon: str
    has_value: bool = Field(False, alias="hasValue")
    value_label: str | None = Field(None, alias="valueLabel")


DEVICE_TYPES: dict[DeviceType, DeviceTypeInfo] = {
    info.type: info
    for info in [
        DeviceTypeInfo(type=DeviceType.light, name="Light", icon="💡"),
        DeviceTypeInfo(
            type=DeviceType.aircon, name="Air Conditioner", icon="❄️",
            has_value=True, value_label="Temperature (°C)",
        ),
        DeviceTypeInfo(type=DeviceType.vacuum, name="Vacuum Cleaner", icon="🧹"),
        DeviceTypeInfo(type=DeviceType.kettle, name="Kettle", icon="☕"),
        DeviceTypeInfo(
            type=DeviceType.blinds, name="Blinds", icon="🪟",
            has_value=True, value_label="Position (%)",
        ),
        DeviceTypeInfo(type=DeviceType.plug, name="Smart Plug", icon="🔌"),
        DeviceTypeInfo(
            type=DeviceType.fan, name="Fan", icon="🌀",
            has_value=True, value_label="Speed (%)",
        ),
        DeviceTypeInfo(
            type=DeviceType.heater, name="Heater", icon="🔥",
            has_value=True, value_label="Temperature (°C)",
        ),
        DeviceTypeInfo(type=DeviceType.lock, name="Smart Lock", icon="🔒"),
        DeviceTypeInfo(type=DeviceType.camera, name="Security Camera", icon="📹"),
        DeviceTypeInfo(
            type=DeviceType.speaker, name="Smart Speaker", icon="🔊",
            has_value=True, value_label="Volume (%)",
        ),
        DeviceTypeInfo(type=DeviceType.tv, name="Smart TV", icon="📺"),
    ]
}

FALLBACK_ICON = "🏠"

# Initial value for newly onboarded devices, by type
DEFAULT_VALUES: dict[DeviceType, float] = {
    DeviceType.aircon: 24,
    DeviceType.blinds: 100,
}


def default_icon(device_type: DeviceType | str) -> str:
    try:
        return DEVICE_TYPES[DeviceType(device_type)].icon
    except ValueError:
        return FALLBACK_ICON


class Device(BaseModel):
    """A controllable smart-home entity."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    type: DeviceType
    status: bool = False
    value: float | None = None
    room: str = "Unassigned"
    icon: str = ""
    created_at: str = ""
    updated_at: str = ""


class DeviceCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=100)
    type: DeviceType
    room: str | None = None
    icon: str | None = None


class DiscoveredDevice(BaseModel):
    id: str
    name: str
    type: DeviceType
    room: str
    icon: str
    manufacturer: str
    model: str
