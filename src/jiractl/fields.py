"""Configured custom fields: lookup by name and value coercion."""

from __future__ import annotations

from typing import Any

from jiractl.errors import UsageError
from jiractl.types.core import CustomFieldConfig

STORY_POINT_KEYWORDS = ("story point", "storypoint", "story-point")
_NAMED_ITEM_TYPES = frozenset({"component", "version"})


def find_field(configured: list[CustomFieldConfig], name: str) -> CustomFieldConfig | None:
    wanted = name.strip().lower()
    for f in configured:
        if f.get("name", "").lower() == wanted:
            return f
    return None


def find_story_points_field(configured: list[CustomFieldConfig], name: str | None = None) -> CustomFieldConfig:
    """The story points field: by explicit name, else the first keyword match."""
    if name:
        found = find_field(configured, name)
        if found is None:
            msg = f'custom field "{name}" not found in configuration'
            raise UsageError(msg)
        return found
    for f in configured:
        lowered = f.get("name", "").lower()
        if any(keyword in lowered for keyword in STORY_POINT_KEYWORDS):
            return f
    msg = "story points field not found. Configure it in your config file or use --field"
    raise UsageError(msg)


def coerce_value(field: CustomFieldConfig, raw: str) -> Any:
    schema = field.get("schema") or {}
    datatype = schema.get("datatype", "string")
    name = field.get("name", field.get("key", "?"))
    match datatype:
        case "number":
            try:
                return float(raw)
            except ValueError:
                msg = f'value for "{name}" must be a number, got {raw!r}'
                raise UsageError(msg) from None
        case "option":
            return {"value": raw}
        case "array":
            items = [part.strip() for part in raw.split(",") if part.strip()]
            item_type = schema.get("items", "string")
            if item_type == "option":
                return [{"value": item} for item in items]
            if item_type in _NAMED_ITEM_TYPES:
                return [{"name": item} for item in items]
            return items
        case _:
            return raw


def build_custom_fields(values: dict[str, str], configured: list[CustomFieldConfig]) -> dict[str, Any]:
    """Map ``{field name: raw value}`` to the ``fields`` payload keyed by field id."""
    payload: dict[str, Any] = {}
    unknown: list[str] = []
    for name, raw in values.items():
        field = find_field(configured, name)
        if field is None or not field.get("key"):
            unknown.append(name)
            continue
        payload[field["key"]] = coerce_value(field, raw)
    if unknown:
        known = ", ".join(f"'{f.get('name', '')}'" for f in configured) or "none configured"
        msg = f"unknown custom field(s): {', '.join(unknown)}\nAvailable fields: {known}"
        raise UsageError(msg)
    return payload
