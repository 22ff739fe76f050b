"""Structural before/after comparison of a manifest using deepdiff."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from deepdiff import DeepDiff


@dataclass
class FieldChange:
    path: str
    old_value: Any
    new_value: Any
    change_type: str  # "value_changed", "item_added", "item_removed", "type_changed"


def diff_bodies(before: dict, after: dict) -> list[FieldChange]:
    """List field-level changes between two manifest bodies.

    List order is significant: a volume moved to the end of spec.volumes
    shows up as a change.
    """
    if before == after:
        return []
    dd = DeepDiff(before, after, verbose_level=2)
    return _extract_changes(dd)


# DeepDiff report key -> (change type, side the reported value belongs to)
_REPORT_KEYS = {
    "values_changed": ("value_changed", None),
    "type_changes": ("type_changed", None),
    "dictionary_item_added": ("item_added", "new"),
    "iterable_item_added": ("item_added", "new"),
    "dictionary_item_removed": ("item_removed", "old"),
    "iterable_item_removed": ("item_removed", "old"),
}


def _extract_changes(dd: DeepDiff) -> list[FieldChange]:
    changes: list[FieldChange] = []
    for report_key, (change_type, side) in _REPORT_KEYS.items():
        for path, detail in dd.get(report_key, {}).items():
            if side is None:
                old, new = detail.get("old_value"), detail.get("new_value")
            elif side == "new":
                old, new = None, detail
            else:
                old, new = detail, None
            changes.append(FieldChange(_deepdiff_path_to_dot(path), old, new, change_type))
    return sorted(changes, key=lambda c: c.path)


_PATH_STEP = re.compile(r"\[(?:'([^']*)'|\"([^\"]*)\"|(\d+))\]")


def _deepdiff_path_to_dot(path: str) -> str:
    """root['spec']['volumes'][0]['name'] -> spec.volumes[0].name"""
    parts: list[str] = []
    for key, dq_key, index in _PATH_STEP.findall(path):
        if index:
            parts[-1:] = [f"{parts[-1] if parts else ''}[{index}]"]
        else:
            parts.append(key or dq_key)
    return ".".join(parts)


def format_value(value: Any) -> str:
    """Compact one-line rendering of a changed value."""
    if isinstance(value, dict):
        inner = ", ".join(f"{k}: {format_value(v)}" for k, v in value.items())
        return "{" + inner + "}"
    if isinstance(value, list):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    return str(value)
