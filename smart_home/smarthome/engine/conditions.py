"""Deterministic condition evaluation. Pure, no I/O."""

from __future__ import annotations

import math
import operator as op
import re
from datetime import datetime
from typing import Any, Callable

from smarthome.engine.errors import (
    InvalidConditionValue,
    MissingSnapshotValue,
    UnknownDevice,
    UnsupportedConditionType,
    UnsupportedOperator,
)
from smarthome.engine.models import Condition, ConditionType, StateSnapshot

MINUTES_PER_DAY = 24 * 60
DEFAULT_TIME_WINDOW_SECONDS = 60

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    ">": op.gt,
    "<": op.lt,
    "=": op.eq,
    ">=": op.ge,
    "<=": op.le,
}

_HHMM_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def _comparator(operator: str | None) -> Callable[[Any, Any], bool]:
    """Resolve an operator symbol; a missing operator means equality."""
    key = "=" if operator is None else operator.strip()
    if key == "==":
        key = "="
    try:
        return _COMPARATORS[key]
    except KeyError:
        raise UnsupportedOperator(operator) from None


def _as_number(value: Any, what: str) -> float:
    if isinstance(value, bool):
        raise InvalidConditionValue(f"{what} must be numeric, got boolean {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidConditionValue(f"{what} must be numeric, got {value!r}") from None
    else:
        raise InvalidConditionValue(f"{what} must be numeric, got {value!r}")
    if not math.isfinite(number):
        raise InvalidConditionValue(f"{what} must be finite, got {value!r}")
    return number


def _as_bool(value: Any, what: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise InvalidConditionValue(f"{what} must be a boolean, got {value!r}")


def _parse_hhmm(value: Any) -> int:
    """Return minute-of-day for an ``HH:MM`` string."""
    match = _HHMM_RE.match(value) if isinstance(value, str) else None
    if not match:
        raise InvalidConditionValue(f"Time condition value must be 'HH:MM', got {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidConditionValue(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def _check_time(
    condition: Condition, now: datetime, window_seconds: int,
) -> bool:
    """Match the snapshot clock against an ``HH:MM`` value.

    Equality means "inside [value, value + window)"; the window wraps past
    midnight. Ordering operators compare minute-of-day.
    """
    target = _parse_hhmm(condition.value) * 60
    current = now.hour * 3600 + now.minute * 60 + now.second

    symbol = (condition.operator or "=").strip()
    if symbol in {"=", "=="}:
        window = max(1, window_seconds)
        elapsed = (current - target) % (MINUTES_PER_DAY * 60)
        return elapsed < window

    compare = _comparator(condition.operator)
    return compare(current // 60, target // 60)


def _check_numeric(condition: Condition, observed: float | None, field: str) -> bool:
    if observed is None:
        raise MissingSnapshotValue(f"Snapshot has no {field} reading")
    compare = _comparator(condition.operator)
    return compare(float(observed), _as_number(condition.value, f"{field} condition value"))


def _check_presence(condition: Condition, snapshot: StateSnapshot) -> bool:
    # Presence only supports equality; validate the operator anyway.
    if condition.operator is not None and _comparator(condition.operator) is not op.eq:
        raise UnsupportedOperator(condition.operator)
    return snapshot.presence == _as_bool(condition.value, "presence condition value")


def _check_device_state(condition: Condition, snapshot: StateSnapshot) -> bool:
    state = snapshot.device_states.get(condition.device_id or "")
    if state is None:
        raise UnknownDevice(condition.device_id)

    compare = _comparator(condition.operator)
    value = condition.value
    if isinstance(value, bool) or (
        isinstance(value, str) and value.strip().lower() in {"true", "false", "on", "off"}
    ):
        if compare is not op.eq:
            raise UnsupportedOperator(condition.operator)
        if isinstance(value, str):
            expected = value.strip().lower() in {"true", "on"}
        else:
            expected = value
        return state.status == expected

    target = _as_number(value, "device_state condition value")
    if state.value is None:
        return False
    return compare(float(state.value), target)


def evaluate_condition(
    condition: Condition,
    snapshot: StateSnapshot,
    window_seconds: int = DEFAULT_TIME_WINDOW_SECONDS,
) -> bool:
    """Decide whether *condition* holds for *snapshot*.

    Raises a ``ConditionError`` subclass for anything that cannot be
    evaluated; it never answers ``False`` for malformed input.
    """
    try:
        kind = ConditionType(condition.type)
    except ValueError:
        raise UnsupportedConditionType(condition.type) from None

    if kind is ConditionType.time:
        return _check_time(condition, snapshot.time, window_seconds)
    if kind is ConditionType.temperature:
        return _check_numeric(condition, snapshot.temperature, "temperature")
    if kind is ConditionType.humidity:
        return _check_numeric(condition, snapshot.humidity, "humidity")
    if kind is ConditionType.price:
        return _check_numeric(condition, snapshot.price, "price")
    if kind is ConditionType.presence:
        return _check_presence(condition, snapshot)
    return _check_device_state(condition, snapshot)
