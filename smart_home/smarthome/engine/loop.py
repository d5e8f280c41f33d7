"""Automation loop -- polls enabled rules and dispatches their actions."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable

from pydantic import BaseModel, Field

from smarthome.devices.registry import DeviceRegistry
from smarthome.engine.conditions import evaluate_condition
from smarthome.engine.errors import ConditionError, SmartHomeError
from smarthome.engine.models import StateSnapshot
from smarthome.rules.models import AutomationRule
from smarthome.rules.registry import RuleRegistry
from smarthome.weather.client import WeatherClient

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 30
MIN_TIME_WINDOW_SECONDS = 60

SnapshotProvider = Callable[[datetime], Awaitable[StateSnapshot]]


class TickResult(BaseModel):
    """Outcome of one pass over the enabled rules."""

    evaluated: int = 0
    fired: list[int] = Field(default_factory=list)
    errors: dict[int, str] = Field(default_factory=dict)


class HomeStateProvider:
    """Builds snapshots from the device registry, weather and configured values."""

    def __init__(
        self,
        devices: DeviceRegistry,
        weather: WeatherClient | None = None,
        city: str = "Singapore",
        presence: bool = True,
        price: float | None = None,
    ) -> None:
        self._devices = devices
        self._weather = weather
        self._city = city
        self.presence = presence
        self.price = price

    async def __call__(self, now: datetime) -> StateSnapshot:
        temperature: float | None = None
        humidity: float | None = None
        if self._weather is not None:
            try:
                current = await self._weather.current(self._city)
                temperature, humidity = current.temperature, current.humidity
            except Exception:
                logger.warning("Weather unavailable, weather conditions will not match", exc_info=True)

        return StateSnapshot(
            time=now,
            temperature=temperature,
            humidity=humidity,
            presence=self.presence,
            price=self.price,
            device_states=await self._devices.snapshot_states(),
        )


class AutomationLoop:
    """Evaluates every enabled rule on a fixed interval.

    One failing rule is logged and skipped; it never stops the loop.
    """

    def __init__(
        self,
        devices: DeviceRegistry,
        rules: RuleRegistry,
        snapshot_provider: SnapshotProvider,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self._devices = devices
        self._rules = rules
        self._snapshot_provider = snapshot_provider
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def time_window_seconds(self) -> int:
        # A time rule must stay matched for at least one full poll interval.
        return int(max(MIN_TIME_WINDOW_SECONDS, self._interval))

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Automation loop started (interval %ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Automation loop stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Automation tick failed")
            await asyncio.sleep(self._interval)

    async def run_once(self, now: datetime | None = None) -> TickResult:
        """Evaluate all enabled rules against a fresh snapshot."""
        now = now or datetime.now()
        snapshot = await self._snapshot_provider(now)
        result = TickResult()

        for rule in await self._rules.list_rules(enabled_only=True):
            result.evaluated += 1
            try:
                matched = evaluate_condition(
                    rule.condition, snapshot, self.time_window_seconds,
                )
            except ConditionError as exc:
                result.errors[rule.id] = str(exc)
                logger.warning("Rule %d (%s) skipped: %s", rule.id, rule.name, exc)
                await self._rules.log_execution(rule.id, False, f"Condition error: {exc}")
                continue

            if matched:
                await self._fire(rule, result)

        return result

    async def _fire(self, rule: AutomationRule, result: TickResult) -> None:
        changed: list[str] = []
        failures: list[str] = []
        for action in rule.actions:
            try:
                if await self._devices.apply_action(action):
                    changed.append(f"{action.device_id}:{action.action.value}")
            except SmartHomeError as exc:
                failures.append(str(exc))

        if failures:
            result.errors[rule.id] = "; ".join(failures)
            await self._rules.log_execution(
                rule.id, False, f"Action failed: {'; '.join(failures)}",
            )
            logger.warning("Rule %d (%s) actions failed: %s", rule.id, rule.name, failures)
            return

        # Level-triggered: a rule whose actions are already in effect is a no-op
        if not changed:
            return

        result.fired.append(rule.id)
        await self._rules.log_execution(rule.id, True, f"Applied {', '.join(changed)}")
        logger.info("Rule %d (%s) fired: %s", rule.id, rule.name, changed)
