"""Prompts for turning natural language into structured automation rules."""

from __future__ import annotations

from smarthome.devices.models import Device, DeviceType
from smarthome.engine.models import ActionKind, ConditionType, Operator

RULE_PARSER_SYSTEM_PROMPT = f"""\
You are an expert at converting natural language into structured automation \
rules for a smart home system.

Available device types: {', '.join(t.value for t in DeviceType)}
Available condition types: {', '.join(t.value for t in ConditionType)}
Available operators: {', '.join(o.value for o in Operator)}
Available actions: {', '.join(a.value for a in ActionKind)}

Convert the user's rule into a JSON object with this structure:
{{
  "name": "Short rule name",
  "description": "Detailed description",
  "condition": {{
    "type": "time|temperature|humidity|device_state|presence|price",
    "operator": ">|<|=|>=|<=",
    "value": "condition value",
    "deviceId": "device id, only for device_state conditions"
  }},
  "action": [
    {{
      "deviceId": "device identifier",
      "action": "turnOn|turnOff|setValue",
      "value": "numeric value, only for setValue"
    }}
  ]
}}

Rules:
- time conditions use a 24h "HH:MM" value.
- presence conditions use a boolean value (true = someone is home).
- price values are in SGD per kWh.
- Use only device ids from the "Known Devices" list when one is given.

Examples:
Input: "Turn off all lights when no one is home"
Output: {{"name": "Lights Off When Away", \
"description": "Turn off all lights when no one is home to save energy", \
"condition": {{"type": "presence", "operator": "=", "value": false}}, \
"action": [{{"deviceId": "livingRoomLight", "action": "turnOff"}}, \
{{"deviceId": "neonLight", "action": "turnOff"}}]}}

Input: "Reduce AC usage when electricity prices are high"
Output: {{"name": "AC Reduction on High Prices", \
"description": "Raise the AC set point when electricity prices are high", \
"condition": {{"type": "price", "operator": ">", "value": 0.35}}, \
"action": [{{"deviceId": "aircon", "action": "setValue", "value": 26}}]}}

Input: "Boil the kettle at 6:30 every morning"
Output: {{"name": "Morning Kettle", \
"description": "Turn on the kettle at 6:30 AM", \
"condition": {{"type": "time", "value": "06:30"}}, \
"action": [{{"deviceId": "kettle", "action": "turnOn"}}]}}

Return ONLY valid JSON, no additional text."""


def build_rule_user_prompt(text: str, devices: list[Device] | None = None) -> str:
    """Wrap the user's rule text, listing known devices when available."""
    if not devices:
        return text
    lines = ["## Known Devices"]
    for d in devices:
        lines.append(f"- `{d.id}` ({d.name}, {d.type.value}, {d.room})")
    lines.append("")
    lines.append("## Rule")
    lines.append(text)
    return "\n".join(lines)
