"""Data models for conditions, actions and state snapshots."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ConditionType(str, Enum):
    time = "time"
    temperature = "temperature"
    humidity = "humidity"
    device_state = "device_state"
    presence = "presence"
    price = "price"


class Operator(str, Enum):
    gt = ">"
    lt = "<"
    eq = "="
    ge = ">="
    le = "<="


class ActionKind(str, Enum):
    turn_on = "turnOn"
    turn_off = "turnOff"
    set_value = "setValue"


class Condition(BaseModel):
    """A predicate over the current state.

    ``type`` and ``operator`` are kept as plain strings so that a rule with an
    unknown kind can still be stored and reported by the evaluator instead of
    being rejected at load time.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str
    operator: str | None = None
    value: Any = None
    device_id: str | None = Field(None, alias="deviceId")


class Action(BaseModel):
    """A device mutation dispatched when a rule's condition holds."""

    model_config = ConfigDict(populate_by_name=True)

    device_id: str = Field(..., alias="deviceId")
    action: ActionKind
    value: float | None = None

    @model_validator(mode="after")
    def _value_required_for_set(self) -> Action:
        if self.action == ActionKind.set_value and self.value is None:
            raise ValueError("setValue actions require a numeric value")
        return self


class DeviceState(BaseModel):
    status: bool = False
    value: float | None = None


class StateSnapshot(BaseModel):
    """Everything a condition may look at, captured at one instant."""

    time: datetime
    temperature: float | None = None
    humidity: float | None = None
    presence: bool = True
    price: float | None = None
    device_states: dict[str, DeviceState] = Field(default_factory=dict)
