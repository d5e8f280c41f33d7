"""Rule registry -- DB-backed CRUD for automation rules and their logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import aiosqlite
from ruamel.yaml import YAML

from smarthome.engine.errors import RuleNotFound
from smarthome.engine.models import Action, Condition
from smarthome.rules.models import AutomationRule, RuleCreate, RuleLog, RuleUpdate

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOG_ENTRIES = 1000

_yaml = YAML()
_yaml.default_flow_style = False


class RuleRegistry:
    """Explicit CRUD over ``automation_rules`` plus the append-only ``rule_logs``."""

    def __init__(
        self,
        conn: aiosqlite.Connection,
        max_log_entries: int = DEFAULT_MAX_LOG_ENTRIES,
    ) -> None:
        self._conn = conn
        self._max_log_entries = max_log_entries

    async def list_rules(self, enabled_only: bool = False) -> list[AutomationRule]:
        """Return rules, newest first."""
        sql = "SELECT * FROM automation_rules"
        if enabled_only:
            sql += " WHERE enabled = 1"
        sql += " ORDER BY created_at DESC, id DESC"
        async with self._conn.execute(sql) as cursor:
            rows = await cursor.fetchall()
        return [self._row_to_rule(r) for r in rows]

    async def get_rule(self, rule_id: int) -> AutomationRule:
        async with self._conn.execute(
            "SELECT * FROM automation_rules WHERE id = ?", (rule_id,)
        ) as cursor:
            row = await cursor.fetchone()
        if not row:
            raise RuleNotFound(rule_id)
        return self._row_to_rule(row)

    async def create_rule(self, rule: RuleCreate) -> AutomationRule:
        cursor = await self._conn.execute(
            """INSERT INTO automation_rules
               (name, description, condition_json, actions_json, enabled,
                created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, datetime('now'), datetime('now'))""",
            (
                rule.name,
                rule.description,
                _condition_json(rule.condition),
                _actions_json(rule.actions),
                1 if rule.enabled else 0,
            ),
        )
        await self._conn.commit()
        logger.info("Created rule %d: %s", cursor.lastrowid, rule.name)
        return await self.get_rule(cursor.lastrowid)  # type: ignore[arg-type]

    async def update_rule(self, rule_id: int, updates: RuleUpdate) -> AutomationRule:
        """Apply a partial update. An update with no fields is a ValueError."""
        fields = updates.model_dump(exclude_unset=True)
        if not fields:
            raise ValueError("No fields to update")

        assignments: list[str] = []
        values: list = []
        if updates.name is not None:
            assignments.append("name = ?")
            values.append(updates.name)
        if updates.description is not None:
            assignments.append("description = ?")
            values.append(updates.description)
        if updates.condition is not None:
            assignments.append("condition_json = ?")
            values.append(_condition_json(updates.condition))
        if updates.actions is not None:
            assignments.append("actions_json = ?")
            values.append(_actions_json(updates.actions))
        if updates.enabled is not None:
            assignments.append("enabled = ?")
            values.append(1 if updates.enabled else 0)
        if not assignments:
            raise ValueError("No fields to update")

        assignments.append("updated_at = datetime('now')")
        cursor = await self._conn.execute(
            f"UPDATE automation_rules SET {', '.join(assignments)} WHERE id = ?",
            (*values, rule_id),
        )
        await self._conn.commit()
        if cursor.rowcount == 0:
            raise RuleNotFound(rule_id)
        return await self.get_rule(rule_id)

    async def toggle_rule(self, rule_id: int) -> AutomationRule:
        rule = await self.get_rule(rule_id)
        return await self.update_rule(rule_id, RuleUpdate(enabled=not rule.enabled))

    async def delete_rule(self, rule_id: int) -> None:
        cursor = await self._conn.execute(
            "DELETE FROM automation_rules WHERE id = ?", (rule_id,)
        )
        await self._conn.commit()
        if cursor.rowcount == 0:
            raise RuleNotFound(rule_id)
        logger.info("Deleted rule %d", rule_id)

    # -- execution log --

    async def log_execution(self, rule_id: int, success: bool, message: str = "") -> None:
        """Append a log entry, pruning the oldest beyond the retention limit."""
        await self._conn.execute(
            """INSERT INTO rule_logs (rule_id, success, message, executed_at)
               VALUES (?, ?, ?, datetime('now'))""",
            (rule_id, 1 if success else 0, message),
        )
        if self._max_log_entries > 0:
            await self._conn.execute(
                """DELETE FROM rule_logs WHERE id NOT IN (
                       SELECT id FROM rule_logs ORDER BY id DESC LIMIT ?
                   )""",
                (self._max_log_entries,),
            )
        await self._conn.commit()

    async def list_logs(self, rule_id: int | None = None, limit: int = 100) -> list[RuleLog]:
        """Return log entries joined with the rule name, newest first."""
        sql = (
            "SELECT rl.*, ar.name AS rule_name FROM rule_logs rl "
            "JOIN automation_rules ar ON rl.rule_id = ar.id"
        )
        params: tuple = ()
        if rule_id is not None:
            sql += " WHERE rl.rule_id = ?"
            params = (rule_id,)
        sql += " ORDER BY rl.executed_at DESC, rl.id DESC LIMIT ?"
        async with self._conn.execute(sql, (*params, limit)) as cursor:
            rows = await cursor.fetchall()
        return [
            RuleLog(
                id=r["id"],
                rule_id=r["rule_id"],
                rule_name=r["rule_name"],
                success=bool(r["success"]),
                message=r["message"],
                executed_at=r["executed_at"],
            )
            for r in rows
        ]

    # -- YAML import/export --

    async def export_yaml(self) -> str:
        """Dump every rule as a YAML document."""
        rules = [
            {
                "name": r.name,
                "description": r.description,
                "enabled": r.enabled,
                "condition": r.condition.model_dump(mode="json", by_alias=True, exclude_none=True),
                "actions": [
                    a.model_dump(mode="json", by_alias=True, exclude_none=True)
                    for a in r.actions
                ],
            }
            for r in reversed(await self.list_rules())
        ]
        buf = StringIO()
        _yaml.dump({"rules": rules}, buf)
        return buf.getvalue()

    async def import_yaml(self, content: str) -> list[AutomationRule]:
        """Create rules from a YAML document with a top-level ``rules`` list."""
        data = _yaml.load(StringIO(content))
        if not isinstance(data, dict) or not isinstance(data.get("rules"), list):
            raise ValueError("YAML must contain a top-level 'rules' list")
        # Validate everything before inserting anything
        parsed = [RuleCreate.model_validate(dict(item)) for item in data["rules"]]
        return [await self.create_rule(rule) for rule in parsed]

    @staticmethod
    def _row_to_rule(row: aiosqlite.Row) -> AutomationRule:
        return AutomationRule(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            condition=Condition.model_validate(json.loads(row["condition_json"])),
            actions=[Action.model_validate(a) for a in json.loads(row["actions_json"])],
            enabled=bool(row["enabled"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


def _condition_json(condition: Condition) -> str:
    return condition.model_dump_json(by_alias=True)


def _actions_json(actions: list[Action]) -> str:
    return json.dumps([a.model_dump(mode="json", by_alias=True) for a in actions])
