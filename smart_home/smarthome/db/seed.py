"""First-start seeding of devices and rules from ``data/seed.yaml``."""

from __future__ import annotations

import logging
from pathlib import Path

from ruamel.yaml import YAML

from smarthome.devices.models import DeviceCreate
from smarthome.devices.registry import DeviceRegistry
from smarthome.rules.models import RuleCreate
from smarthome.rules.registry import RuleRegistry

logger = logging.getLogger(__name__)

SEED_PATH = Path(__file__).resolve().parent.parent / "data" / "seed.yaml"

_yaml = YAML(typ="safe")


def load_seed(path: Path = SEED_PATH) -> tuple[list[DeviceCreate], list[RuleCreate]]:
    data = _yaml.load(path.read_text(encoding="utf-8")) or {}
    devices = [DeviceCreate.model_validate(d) for d in data.get("devices", [])]
    rules = [RuleCreate.model_validate(r) for r in data.get("rules", [])]
    return devices, rules


async def seed_defaults(
    devices: DeviceRegistry, rules: RuleRegistry, path: Path = SEED_PATH,
) -> None:
    """Create the default devices and rules when their tables are empty."""
    seed_devices, seed_rules = load_seed(path)

    if not await devices.list_devices():
        for device in seed_devices:
            await devices.add_device(device)
        logger.info("Seeded %d default devices", len(seed_devices))

    if not await rules.list_rules():
        for rule in seed_rules:
            await rules.create_rule(rule)
        logger.info("Seeded %d default rules", len(seed_rules))
