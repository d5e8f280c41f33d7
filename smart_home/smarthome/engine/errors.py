"""Error taxonomy shared by the rule engine, the plan scorer and the registries."""

from __future__ import annotations


class SmartHomeError(Exception):
    """Base class for all domain errors raised by smarthome."""


# -- condition evaluation --


class ConditionError(SmartHomeError):
    """A condition could not be evaluated against the snapshot."""


class UnsupportedConditionType(ConditionError):
    def __init__(self, condition_type: str) -> None:
        self.condition_type = condition_type
        super().__init__(f"Unsupported condition type: {condition_type!r}")


class UnsupportedOperator(ConditionError):
    def __init__(self, operator: str | None) -> None:
        self.operator = operator
        super().__init__(f"Unsupported comparison operator: {operator!r}")


class InvalidConditionValue(ConditionError):
    """The condition's comparison value has the wrong shape for its type."""


class MissingSnapshotValue(ConditionError):
    """The snapshot does not carry the field a condition needs (e.g. no weather)."""


class UnknownDevice(ConditionError):
    def __init__(self, device_id: str | None) -> None:
        self.device_id = device_id
        super().__init__(f"Device not present in snapshot: {device_id!r}")


# -- plans --


class PlanError(SmartHomeError):
    """Base class for plan comparison errors."""


class PlanNotFound(PlanError):
    def __init__(self, plan_id: int) -> None:
        self.plan_id = plan_id
        super().__init__(f"Plan not found: {plan_id}")


class InvalidUsageValue(PlanError):
    """Usage or rate is not a finite positive number."""


# -- registries --


class DeviceNotFound(SmartHomeError):
    def __init__(self, device_id: str) -> None:
        self.device_id = device_id
        super().__init__(f"Device not found: {device_id}")


class DeviceAlreadyExists(SmartHomeError):
    def __init__(self, device_id: str) -> None:
        self.device_id = device_id
        super().__init__(f"Device with id {device_id!r} already exists")


class RuleNotFound(SmartHomeError):
    def __init__(self, rule_id: int) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule not found: {rule_id}")


class RuleParseError(SmartHomeError):
    """Natural-language input could not be turned into a structured rule."""


class ParserUnavailable(RuleParseError):
    """The language model behind the parser could not be reached."""
